from pydantic import BaseModel

from onboarding_hub.schemas.client import ClientResponse
from onboarding_hub.schemas.status import EngagementStatus


class NextStepItem(BaseModel):
    title: str
    description: str | None = None


class EngagementSendRequest(BaseModel):
    client_email: str
    welcome_message: str
    next_steps: list[NextStepItem] = []
    kickoff_document_ids: list[str] = []


class EngagementUpdate(BaseModel):
    status: EngagementStatus | None = None
    client_email: str | None = None
    welcome_message: str | None = None


class EngagementStatusUpdate(BaseModel):
    status: EngagementStatus


class EngagementResponse(BaseModel):
    id: str
    client_id: str
    status: EngagementStatus
    email_sent_at: str | None
    client_email: str | None
    welcome_message: str | None
    created_at: str
    updated_at: str
    client: ClientResponse | None = None
