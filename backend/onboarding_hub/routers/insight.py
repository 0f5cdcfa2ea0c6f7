from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_client_or_404, get_content_generator
from onboarding_hub.models.client import Client
from onboarding_hub.schemas.content import InsightRequest
from onboarding_hub.services.content_service import (
    AIServiceNotConfigured,
    ContentGenerationError,
    ContentGenerator,
)
from onboarding_hub.services.insight_service import collect_stream, gather_project_data, iter_text

router = APIRouter(tags=["insight"])


@router.post("/clients/{client_id}/insight")
async def project_insight(
    req: InsightRequest,
    stream: bool = True,
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
    generator: ContentGenerator = Depends(get_content_generator),
):
    if not req.user_query.strip():
        raise HTTPException(status_code=400, detail="A question is required")
    if not generator.configured:
        raise HTTPException(status_code=503, detail="AI service not configured")

    project_data = gather_project_data(db, client)
    # Open the upstream stream before responding so failures still get a status code.
    try:
        upstream = await generator.open_insight_stream(project_data, req.user_query)
    except AIServiceNotConfigured as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except ContentGenerationError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    if stream:
        return StreamingResponse(iter_text(upstream), media_type="text/plain; charset=utf-8")
    return {"answer": await collect_stream(iter_text(upstream))}
