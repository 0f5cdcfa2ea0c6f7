from pydantic import BaseModel

from onboarding_hub.schemas.status import SignatureStatus


class SignatureRequestCreate(BaseModel):
    client_id: str
    sow_document_id: str | None = None
    nda_document_id: str | None = None
    recipient_name: str
    recipient_email: str


class SignatureStatusUpdate(BaseModel):
    status: SignatureStatus
    signed_document_url: str | None = None


class SignatureRequestResponse(BaseModel):
    id: str
    client_id: str
    sow_document_id: str | None
    nda_document_id: str | None
    recipient_name: str
    recipient_email: str
    status: SignatureStatus
    external_request_id: str | None
    signing_url: str | None
    signed_document_url: str | None
    signer_typed_signature: str | None
    signer_entity_name: str | None
    signer_title: str | None
    signed_at: str | None
    created_at: str
    updated_at: str


class SigningView(BaseModel):
    request: SignatureRequestResponse
    client_name: str
    sow_file_name: str | None = None
    sow_url: str | None = None
    nda_file_name: str | None = None
    nda_url: str | None = None


class SignRequest(BaseModel):
    signer_name: str
    entity_name: str
    signer_title: str


class SignResult(BaseModel):
    message: str
    request: SignatureRequestResponse
    signed_document_url: str | None = None
    pdf_error: str | None = None
