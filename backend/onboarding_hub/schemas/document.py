from pydantic import BaseModel

from onboarding_hub.schemas.status import DocumentType


class ClientDocumentResponse(BaseModel):
    id: str
    client_id: str
    document_path: str
    document_type: DocumentType
    file_name: str
    file_size: int
    file_type: str
    created_at: str
    url: str


class UniversalDocumentResponse(BaseModel):
    id: str
    document_path: str
    file_name: str
    file_size: int
    file_type: str
    created_at: str
    url: str


class StoredFile(BaseModel):
    name: str
    path: str
    size: int
    type: str
    url: str
    created_at: str
