from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_mailer
from onboarding_hub.models.client import Client
from onboarding_hub.models.document import ClientDocument, UniversalDocument
from onboarding_hub.models.signature_request import SignatureRequest
from onboarding_hub.schemas.signature import (
    SignatureRequestCreate,
    SignatureRequestResponse,
    SignatureStatusUpdate,
)
from onboarding_hub.services.email_service import Mailer
from onboarding_hub.services.signature_service import (
    SignatureRequestsUnavailable,
    create_signature_request,
    list_signature_requests,
)

router = APIRouter(prefix="/signature-requests", tags=["signature requests"])


def signature_to_response(request: SignatureRequest) -> SignatureRequestResponse:
    return SignatureRequestResponse(
        id=request.id,
        client_id=request.client_id,
        sow_document_id=request.sow_document_id,
        nda_document_id=request.nda_document_id,
        recipient_name=request.recipient_name,
        recipient_email=request.recipient_email,
        status=request.status,
        external_request_id=request.external_request_id,
        signing_url=request.signing_url,
        signed_document_url=request.signed_document_url,
        signer_typed_signature=request.signer_typed_signature,
        signer_entity_name=request.signer_entity_name,
        signer_title=request.signer_title,
        signed_at=request.signed_at,
        created_at=request.created_at,
        updated_at=request.updated_at,
    )


def get_signature_request_or_404(db: Session, request_id: str) -> SignatureRequest:
    request = db.query(SignatureRequest).filter(SignatureRequest.id == request_id).first()
    if not request:
        raise HTTPException(status_code=404, detail="Signature request not found")
    return request


@router.post("", response_model=SignatureRequestResponse, status_code=201)
async def send_signature_request(
    req: SignatureRequestCreate,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    if not req.sow_document_id and not req.nda_document_id:
        raise HTTPException(status_code=400, detail="At least one document (SOW or NDA) is required")
    if not req.recipient_name.strip() or not req.recipient_email.strip():
        raise HTTPException(status_code=400, detail="Recipient name and email are required")

    client = db.query(Client).filter(Client.id == req.client_id).first()
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    sow = None
    if req.sow_document_id:
        sow = db.query(ClientDocument).filter(
            ClientDocument.id == req.sow_document_id,
            ClientDocument.client_id == client.id,
        ).first()
        if not sow:
            raise HTTPException(status_code=404, detail="SOW document not found for this client")

    nda = None
    if req.nda_document_id:
        nda = db.query(UniversalDocument).filter(UniversalDocument.id == req.nda_document_id).first()
        if not nda:
            raise HTTPException(status_code=404, detail="NDA document not found")

    try:
        request = await create_signature_request(
            db,
            mailer,
            client,
            req.recipient_name.strip(),
            req.recipient_email.strip(),
            sow=sow,
            nda=nda,
        )
    except SignatureRequestsUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return signature_to_response(request)


@router.get("", response_model=list[SignatureRequestResponse])
async def list_requests(client_id: str | None = None, db: Session = Depends(get_db)):
    return [signature_to_response(r) for r in list_signature_requests(db, client_id)]


@router.put("/{request_id}/status", response_model=SignatureRequestResponse)
async def update_request_status(
    request_id: str,
    req: SignatureStatusUpdate,
    db: Session = Depends(get_db),
):
    request = get_signature_request_or_404(db, request_id)
    request.status = req.status.value
    if req.signed_document_url is not None:
        request.signed_document_url = req.signed_document_url
    request.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    db.commit()
    db.refresh(request)
    return signature_to_response(request)


def _detach(db: Session, request_id: str, column: str) -> SignatureRequestResponse:
    request = get_signature_request_or_404(db, request_id)
    setattr(request, column, None)
    request.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    db.commit()
    db.refresh(request)
    return signature_to_response(request)


@router.delete("/{request_id}/sow", response_model=SignatureRequestResponse)
async def detach_sow(request_id: str, db: Session = Depends(get_db)):
    return _detach(db, request_id, "sow_document_id")


@router.delete("/{request_id}/nda", response_model=SignatureRequestResponse)
async def detach_nda(request_id: str, db: Session = Depends(get_db)):
    return _detach(db, request_id, "nda_document_id")
