import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_client_or_404, get_content_generator, get_storage
from onboarding_hub.models.client import Client
from onboarding_hub.models.document import ClientDocument
from onboarding_hub.models.onboarding_step import OnboardingStep
from onboarding_hub.routers.onboarding_steps import _step_to_response
from onboarding_hub.schemas.content import WelcomeContentRequest, WelcomeContentResponse
from onboarding_hub.services.content_service import (
    AIServiceNotConfigured,
    ContentGenerationError,
    ContentGenerator,
)
from onboarding_hub.services.storage_service import StorageError, StorageService
from onboarding_hub.services.text_service import extract_text_from_file

logger = logging.getLogger(__name__)

router = APIRouter(tags=["content"])


@router.post("/clients/{client_id}/welcome-content", response_model=WelcomeContentResponse)
async def generate_welcome_content(
    req: WelcomeContentRequest,
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
    generator: ContentGenerator = Depends(get_content_generator),
):
    if not generator.configured:
        raise HTTPException(status_code=503, detail="AI service not configured")

    doc = db.query(ClientDocument).filter(
        ClientDocument.id == req.document_id,
        ClientDocument.client_id == client.id,
    ).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")

    try:
        path = storage.full_path("sow-documents", doc.document_path)
    except StorageError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Stored document file is missing")

    sow_text = extract_text_from_file(path, doc.file_type).strip()
    if not sow_text:
        raise HTTPException(status_code=400, detail="Could not extract text from document")

    try:
        content = await generator.generate_welcome_content(sow_text)
    except AIServiceNotConfigured as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except ContentGenerationError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    # Generated steps replace whatever the client had before.
    db.query(OnboardingStep).filter(OnboardingStep.client_id == client.id).delete(synchronize_session=False)
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    steps = [
        OnboardingStep(
            id=str(uuid.uuid4()),
            client_id=client.id,
            title=item.title,
            description=item.description,
            status="not_started",
            order_index=index,
            client_visible=True,
            created_at=now,
            updated_at=now,
        )
        for index, item in enumerate(content.next_steps)
    ]
    db.add_all(steps)
    db.commit()
    logger.info("Generated %d onboarding steps for client %s", len(steps), client.id)

    return WelcomeContentResponse(
        welcome_message=content.welcome_message,
        next_steps=[_step_to_response(s) for s in steps],
    )
