import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_storage
from onboarding_hub.models.document import UniversalDocument
from onboarding_hub.schemas.document import UniversalDocumentResponse
from onboarding_hub.services.document_service import read_upload, upload_with_record
from onboarding_hub.services.storage_service import StorageError, StorageObjectExists, StorageService
from onboarding_hub.utils.filesystem import timestamped_name

KICKOFF_BUCKET = "kickoff-materials"

router = APIRouter(prefix="/universal-documents", tags=["universal documents"])


def _doc_to_response(doc: UniversalDocument, storage: StorageService) -> UniversalDocumentResponse:
    return UniversalDocumentResponse(
        id=doc.id,
        document_path=doc.document_path,
        file_name=doc.file_name,
        file_size=doc.file_size,
        file_type=doc.file_type,
        created_at=doc.created_at,
        url=storage.public_url(KICKOFF_BUCKET, doc.document_path),
    )


@router.post("", response_model=UniversalDocumentResponse, status_code=201)
async def upload_universal_document(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    content = await read_upload(file)
    filename = file.filename or "document"
    document_path = timestamped_name(filename)

    doc = UniversalDocument(
        id=str(uuid.uuid4()),
        document_path=document_path,
        file_name=filename,
        file_size=len(content),
        file_type=file.content_type or "application/octet-stream",
        created_at=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    )
    try:
        upload_with_record(db, storage, KICKOFF_BUCKET, document_path, content, doc)
    except StorageObjectExists as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except IntegrityError as exc:
        raise HTTPException(status_code=409, detail="Document could not be recorded") from exc
    return _doc_to_response(doc, storage)


@router.get("", response_model=list[UniversalDocumentResponse])
async def list_universal_documents(
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    docs = db.query(UniversalDocument).order_by(UniversalDocument.created_at.desc()).all()
    return [_doc_to_response(d, storage) for d in docs]


@router.delete("/{doc_id}")
async def delete_universal_document(
    doc_id: str,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    doc = db.query(UniversalDocument).filter(UniversalDocument.id == doc_id).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Universal document not found")

    # Storage first; a failure here keeps the row so the delete can be retried.
    try:
        storage.remove(KICKOFF_BUCKET, doc.document_path)
    except StorageError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    db.delete(doc)
    db.commit()
    return {"message": "Universal document deleted"}
