import logging
from collections.abc import AsyncIterator, Callable

from sqlalchemy.orm import Session

from onboarding_hub.models.client import Client
from onboarding_hub.models.deliverable import ClientDeliverable
from onboarding_hub.models.engagement import ClientEngagement
from onboarding_hub.models.onboarding_step import OnboardingStep
from onboarding_hub.models.risk import Risk

logger = logging.getLogger(__name__)


def gather_project_data(db: Session, client: Client) -> dict:
    """Snapshot of everything known about one client's project."""
    steps = (
        db.query(OnboardingStep)
        .filter(OnboardingStep.client_id == client.id)
        .order_by(OnboardingStep.order_index.asc())
        .all()
    )
    risks = db.query(Risk).filter(Risk.client_id == client.id).order_by(Risk.created_at.desc()).all()
    deliverables = (
        db.query(ClientDeliverable)
        .filter(ClientDeliverable.client_id == client.id)
        .order_by(ClientDeliverable.created_at.desc())
        .all()
    )
    engagement = (
        db.query(ClientEngagement)
        .filter(ClientEngagement.client_id == client.id)
        .order_by(ClientEngagement.created_at.desc())
        .first()
    )

    return {
        "client": {
            "id": client.id,
            "name": client.name,
            "app_url": client.app_url,
            "created_at": client.created_at,
        },
        "onboarding_steps": [
            {
                "title": s.title,
                "description": s.description,
                "status": s.status,
                "assigned_to": s.assigned_to,
                "start_date": s.start_date,
                "end_date": s.end_date,
                "client_visible": s.client_visible,
            }
            for s in steps
        ],
        "risks": [
            {
                "title": r.title,
                "description": r.description,
                "severity": r.severity,
                "likelihood": r.likelihood,
                "status": r.status,
                "assigned_to": r.assigned_to,
                "due_date": r.due_date,
                "mitigation_plan": r.mitigation_plan,
            }
            for r in risks
        ],
        "deliverables": [
            {
                "milestone_name": d.milestone_name,
                "title": d.title,
                "description": d.description,
                "version": d.version,
                "created_at": d.created_at,
            }
            for d in deliverables
        ],
        "engagement": (
            {
                "status": engagement.status,
                "email_sent_at": engagement.email_sent_at,
                "created_at": engagement.created_at,
            }
            if engagement
            else None
        ),
    }


async def iter_text(stream) -> AsyncIterator[str]:
    """Yield text deltas from a streamed completion.

    The upstream stream is closed when iteration stops for any reason,
    including the consumer disconnecting mid-answer.
    """
    try:
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta
    finally:
        await stream.close()
        logger.debug("Insight stream closed")


async def collect_stream(
    chunks: AsyncIterator[str],
    on_update: Callable[[str], None] | None = None,
) -> str:
    """Append chunks to a growing buffer, publishing each intermediate state."""
    buffer = ""
    async for chunk in chunks:
        buffer += chunk
        if on_update is not None:
            on_update(buffer)
    return buffer
