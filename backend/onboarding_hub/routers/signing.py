from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_storage
from onboarding_hub.models.signature_request import SignatureRequest
from onboarding_hub.routers.signatures import get_signature_request_or_404, signature_to_response
from onboarding_hub.schemas.signature import SignatureRequestResponse, SignRequest, SignResult, SigningView
from onboarding_hub.schemas.status import FINAL_SIGNATURE_STATUSES, SignatureStatus
from onboarding_hub.services.signature_service import sign_request
from onboarding_hub.services.storage_service import StorageService

router = APIRouter(prefix="/sign", tags=["signing"])

_FINAL_VALUES = {s.value for s in FINAL_SIGNATURE_STATUSES}


def _require_open(request: SignatureRequest):
    if request.status in _FINAL_VALUES:
        raise HTTPException(status_code=409, detail=f"Signature request is already {request.status}")


@router.get("/{request_id}", response_model=SigningView)
async def open_signing_view(
    request_id: str,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    request = get_signature_request_or_404(db, request_id)
    if request.status == SignatureStatus.SENT.value:
        request.status = SignatureStatus.VIEWED.value
        request.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        db.commit()
        db.refresh(request)

    sow, nda = request.sow_document, request.nda_document
    return SigningView(
        request=signature_to_response(request),
        client_name=request.client.name,
        sow_file_name=sow.file_name if sow else None,
        sow_url=storage.public_url("sow-documents", sow.document_path) if sow else None,
        nda_file_name=nda.file_name if nda else None,
        nda_url=storage.public_url("kickoff-materials", nda.document_path) if nda else None,
    )


@router.post("/{request_id}", response_model=SignResult)
async def sign(
    request_id: str,
    req: SignRequest,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    request = get_signature_request_or_404(db, request_id)
    _require_open(request)

    signer_name = req.signer_name.strip()
    entity_name = req.entity_name.strip()
    signer_title = req.signer_title.strip()
    if not signer_name or not entity_name or not signer_title:
        raise HTTPException(status_code=400, detail="All signer fields are required")

    signed_url, pdf_error = sign_request(db, storage, request, signer_name, entity_name, signer_title)
    return SignResult(
        message="Document signed successfully",
        request=signature_to_response(request),
        signed_document_url=signed_url,
        pdf_error=pdf_error,
    )


@router.post("/{request_id}/decline", response_model=SignatureRequestResponse)
async def decline(request_id: str, db: Session = Depends(get_db)):
    request = get_signature_request_or_404(db, request_id)
    _require_open(request)
    request.status = SignatureStatus.DECLINED.value
    request.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    db.commit()
    db.refresh(request)
    return signature_to_response(request)
