import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload

from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_client_or_404, get_mailer, get_storage
from onboarding_hub.models.client import Client
from onboarding_hub.models.document import UniversalDocument
from onboarding_hub.models.engagement import ClientEngagement
from onboarding_hub.routers.clients import _client_to_response
from onboarding_hub.schemas.engagement import (
    EngagementResponse,
    EngagementSendRequest,
    EngagementStatusUpdate,
    EngagementUpdate,
)
from onboarding_hub.services.email_service import (
    ONBOARDING_SUBJECT,
    EmailDeliveryError,
    Mailer,
    render_onboarding_email,
)
from onboarding_hub.services.storage_service import StorageService

router = APIRouter(tags=["engagements"])


def _engagement_to_response(engagement: ClientEngagement, include_client: bool = False) -> EngagementResponse:
    return EngagementResponse(
        id=engagement.id,
        client_id=engagement.client_id,
        status=engagement.status,
        email_sent_at=engagement.email_sent_at,
        client_email=engagement.client_email,
        welcome_message=engagement.welcome_message,
        created_at=engagement.created_at,
        updated_at=engagement.updated_at,
        client=_client_to_response(engagement.client) if include_client and engagement.client else None,
    )


def _get_engagement_or_404(db: Session, engagement_id: str) -> ClientEngagement:
    engagement = db.query(ClientEngagement).filter(ClientEngagement.id == engagement_id).first()
    if not engagement:
        raise HTTPException(status_code=404, detail="Engagement not found")
    return engagement


@router.post("/clients/{client_id}/engagements", response_model=EngagementResponse, status_code=201)
async def send_onboarding_email(
    req: EngagementSendRequest,
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    storage: StorageService = Depends(get_storage),
):
    if not req.client_email.strip():
        raise HTTPException(status_code=400, detail="Client email is required")
    if not req.welcome_message.strip():
        raise HTTPException(status_code=400, detail="Welcome message is required")

    kickoff_files = []
    if req.kickoff_document_ids:
        docs = db.query(UniversalDocument).filter(UniversalDocument.id.in_(req.kickoff_document_ids)).all()
        found = {d.id for d in docs}
        missing = [doc_id for doc_id in req.kickoff_document_ids if doc_id not in found]
        if missing:
            raise HTTPException(status_code=404, detail=f"Kickoff documents not found: {', '.join(missing)}")
        kickoff_files = [(d.file_name, storage.public_url("kickoff-materials", d.document_path)) for d in docs]

    body = render_onboarding_email(
        client.name,
        req.welcome_message,
        [(s.title, s.description) for s in req.next_steps],
        kickoff_files,
    )
    # The engagement is only recorded once the message is out.
    try:
        await mailer.send(req.client_email, ONBOARDING_SUBJECT, body)
    except EmailDeliveryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    engagement = ClientEngagement(
        id=str(uuid.uuid4()),
        client_id=client.id,
        status="sent",
        email_sent_at=now,
        client_email=req.client_email,
        welcome_message=req.welcome_message,
        created_at=now,
        updated_at=now,
    )
    db.add(engagement)
    db.commit()
    db.refresh(engagement)
    return _engagement_to_response(engagement)


@router.get("/engagements", response_model=list[EngagementResponse])
async def list_engagements(client_id: str | None = None, db: Session = Depends(get_db)):
    query = db.query(ClientEngagement).options(joinedload(ClientEngagement.client))
    if client_id:
        query = query.filter(ClientEngagement.client_id == client_id)
    engagements = query.order_by(ClientEngagement.created_at.desc()).all()
    return [_engagement_to_response(e, include_client=True) for e in engagements]


@router.put("/engagements/{engagement_id}", response_model=EngagementResponse)
async def update_engagement(engagement_id: str, req: EngagementUpdate, db: Session = Depends(get_db)):
    engagement = _get_engagement_or_404(db, engagement_id)

    update_data = req.model_dump(mode="json", exclude_unset=True)
    if update_data.get("status", "") is None:
        del update_data["status"]
    for key, value in update_data.items():
        setattr(engagement, key, value)
    engagement.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    db.commit()
    db.refresh(engagement)
    return _engagement_to_response(engagement)


@router.put("/engagements/{engagement_id}/status", response_model=EngagementResponse)
async def update_engagement_status(
    engagement_id: str,
    req: EngagementStatusUpdate,
    db: Session = Depends(get_db),
):
    engagement = _get_engagement_or_404(db, engagement_id)
    engagement.status = req.status.value
    engagement.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    db.commit()
    db.refresh(engagement)
    return _engagement_to_response(engagement)
