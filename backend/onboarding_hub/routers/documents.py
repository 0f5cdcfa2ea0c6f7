import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_client_or_404, get_storage
from onboarding_hub.models.client import Client
from onboarding_hub.models.document import ClientDocument
from onboarding_hub.schemas.document import ClientDocumentResponse
from onboarding_hub.schemas.status import DocumentType
from onboarding_hub.services.document_service import read_upload, upload_with_record
from onboarding_hub.services.storage_service import StorageError, StorageObjectExists, StorageService
from onboarding_hub.utils.filesystem import timestamped_name

SOW_BUCKET = "sow-documents"

router = APIRouter(prefix="/clients/{client_id}/documents", tags=["documents"])


def _doc_to_response(doc: ClientDocument, storage: StorageService) -> ClientDocumentResponse:
    return ClientDocumentResponse(
        id=doc.id,
        client_id=doc.client_id,
        document_path=doc.document_path,
        document_type=doc.document_type,
        file_name=doc.file_name,
        file_size=doc.file_size,
        file_type=doc.file_type,
        created_at=doc.created_at,
        url=storage.public_url(SOW_BUCKET, doc.document_path),
    )


@router.post("", response_model=ClientDocumentResponse, status_code=201)
async def upload_sow(
    file: UploadFile = File(...),
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    content = await read_upload(file)
    filename = file.filename or "document"
    document_path = f"{client.id}/{timestamped_name(filename)}"

    doc = ClientDocument(
        id=str(uuid.uuid4()),
        client_id=client.id,
        document_path=document_path,
        document_type=DocumentType.SOW.value,
        file_name=filename,
        file_size=len(content),
        file_type=file.content_type or "application/octet-stream",
        created_at=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    )
    try:
        upload_with_record(db, storage, SOW_BUCKET, document_path, content, doc)
    except StorageObjectExists as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except IntegrityError as exc:
        raise HTTPException(status_code=409, detail="Document could not be recorded") from exc
    return _doc_to_response(doc, storage)


@router.get("", response_model=list[ClientDocumentResponse])
async def list_documents(
    document_type: DocumentType | None = None,
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    query = db.query(ClientDocument).filter(ClientDocument.client_id == client.id)
    if document_type:
        query = query.filter(ClientDocument.document_type == document_type.value)
    docs = query.order_by(ClientDocument.created_at.desc()).all()
    return [_doc_to_response(d, storage) for d in docs]


@router.delete("/{doc_id}")
async def delete_document(
    doc_id: str,
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    doc = db.query(ClientDocument).filter(
        ClientDocument.id == doc_id,
        ClientDocument.client_id == client.id,
    ).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")

    # The row goes even if the stored object cannot be removed.
    storage.try_remove(SOW_BUCKET, doc.document_path)
    db.delete(doc)
    db.commit()
    return {"message": "Document deleted"}
