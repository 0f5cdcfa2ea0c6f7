from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.models.client import Client
from onboarding_hub.models.engagement import ClientEngagement
from onboarding_hub.models.onboarding_step import OnboardingStep
from onboarding_hub.models.risk import Risk
from onboarding_hub.schemas.reporting import (
    AverageOnboardingTime,
    EngagementStats,
    MonthlyGrowth,
    ReportingSummary,
    RiskStats,
    StepStats,
)
from onboarding_hub.services import reporting_service

router = APIRouter(prefix="/reporting", tags=["reporting"])


def _engagement_stats(db: Session, client_id: str | None = None) -> EngagementStats:
    query = db.query(ClientEngagement.status)
    if client_id:
        query = query.filter(ClientEngagement.client_id == client_id)
    return reporting_service.engagement_stats(row.status for row in query.all())


def _step_stats(db: Session, client_id: str | None = None) -> StepStats:
    query = db.query(OnboardingStep.status)
    if client_id:
        query = query.filter(OnboardingStep.client_id == client_id)
    return reporting_service.step_stats(row.status for row in query.all())


def _risk_stats(db: Session, client_id: str | None = None) -> RiskStats:
    query = db.query(Risk.status, Risk.severity)
    if client_id:
        query = query.filter(Risk.client_id == client_id)
    return reporting_service.risk_stats((row.status, row.severity) for row in query.all())


def _average_days(db: Session) -> int:
    rows = db.query(OnboardingStep.status, OnboardingStep.start_date, OnboardingStep.end_date).all()
    return reporting_service.average_onboarding_days(tuple(row) for row in rows)


def _growth(db: Session) -> list[MonthlyGrowth]:
    return reporting_service.monthly_growth(
        [row.created_at for row in db.query(Client.created_at).all()],
        [row.created_at for row in db.query(ClientEngagement.created_at).all()],
    )


@router.get("", response_model=ReportingSummary)
async def get_summary(db: Session = Depends(get_db)):
    return ReportingSummary(
        total_clients=db.query(Client).count(),
        engagements=_engagement_stats(db),
        onboarding_steps=_step_stats(db),
        risks=_risk_stats(db),
        average_onboarding_days=_average_days(db),
        growth=_growth(db),
    )


@router.get("/engagements", response_model=EngagementStats)
async def get_engagement_stats(client_id: str | None = None, db: Session = Depends(get_db)):
    return _engagement_stats(db, client_id)


@router.get("/onboarding-steps", response_model=StepStats)
async def get_step_stats(client_id: str | None = None, db: Session = Depends(get_db)):
    return _step_stats(db, client_id)


@router.get("/risks", response_model=RiskStats)
async def get_risk_stats(client_id: str | None = None, db: Session = Depends(get_db)):
    return _risk_stats(db, client_id)


@router.get("/average-onboarding-time", response_model=AverageOnboardingTime)
async def get_average_onboarding_time(db: Session = Depends(get_db)):
    return AverageOnboardingTime(average_days=_average_days(db))


@router.get("/growth", response_model=list[MonthlyGrowth])
async def get_growth(db: Session = Depends(get_db)):
    return _growth(db)
