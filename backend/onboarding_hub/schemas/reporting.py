from pydantic import BaseModel


class EngagementStats(BaseModel):
    draft: int = 0
    sent: int = 0
    in_progress: int = 0
    completed: int = 0
    on_hold: int = 0
    total: int = 0


class StepStats(BaseModel):
    not_started: int = 0
    in_progress: int = 0
    completed: int = 0
    on_hold: int = 0
    total: int = 0


class SeverityBreakdown(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0
    critical: int = 0


class RiskStats(BaseModel):
    open: int = 0
    in_progress: int = 0
    mitigated: int = 0
    closed: int = 0
    total: int = 0
    by_severity: SeverityBreakdown = SeverityBreakdown()


class MonthlyGrowth(BaseModel):
    month: str  # YYYY-MM
    label: str  # e.g. "Jan 2024"
    client_count: int
    engagement_count: int


class AverageOnboardingTime(BaseModel):
    average_days: int


class ReportingSummary(BaseModel):
    total_clients: int
    engagements: EngagementStats
    onboarding_steps: StepStats
    risks: RiskStats
    average_onboarding_days: int
    growth: list[MonthlyGrowth]
