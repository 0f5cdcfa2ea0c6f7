from datetime import date

from pydantic import BaseModel

from onboarding_hub.schemas.status import StepStatus


class OnboardingStepCreate(BaseModel):
    title: str
    description: str | None = None
    status: StepStatus = StepStatus.NOT_STARTED
    start_date: date | None = None
    end_date: date | None = None
    order_index: int | None = None  # appended after the last step when omitted
    client_visible: bool = True
    internal_notes: str | None = None
    assigned_to: str | None = None


class OnboardingStepUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    status: StepStatus | None = None
    start_date: date | None = None
    end_date: date | None = None
    order_index: int | None = None
    client_visible: bool | None = None
    internal_notes: str | None = None
    assigned_to: str | None = None


class StepStatusUpdate(BaseModel):
    status: StepStatus


class OnboardingStepResponse(BaseModel):
    id: str
    client_id: str
    title: str
    description: str | None
    status: StepStatus
    start_date: str | None
    end_date: str | None
    order_index: int
    client_visible: bool
    internal_notes: str | None
    assigned_to: str | None
    created_at: str
    updated_at: str
