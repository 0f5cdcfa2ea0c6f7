from datetime import date

from pydantic import BaseModel

from onboarding_hub.schemas.status import RiskLikelihood, RiskSeverity, RiskStatus


class RiskCreate(BaseModel):
    title: str
    description: str | None = None
    severity: RiskSeverity = RiskSeverity.MEDIUM
    likelihood: RiskLikelihood = RiskLikelihood.MEDIUM
    impact: str | None = None
    mitigation_plan: str | None = None
    status: RiskStatus = RiskStatus.OPEN
    assigned_to: str | None = None
    due_date: date | None = None


class RiskUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    severity: RiskSeverity | None = None
    likelihood: RiskLikelihood | None = None
    impact: str | None = None
    mitigation_plan: str | None = None
    status: RiskStatus | None = None
    assigned_to: str | None = None
    due_date: date | None = None


class RiskStatusUpdate(BaseModel):
    status: RiskStatus


class RiskResponse(BaseModel):
    id: str
    client_id: str
    title: str
    description: str | None
    severity: RiskSeverity
    likelihood: RiskLikelihood
    impact: str | None
    mitigation_plan: str | None
    status: RiskStatus
    assigned_to: str | None
    due_date: str | None
    created_at: str
    updated_at: str
    priority_score: int
    priority_level: str
