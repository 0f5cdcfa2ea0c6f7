import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_client_or_404
from onboarding_hub.models.client import Client
from onboarding_hub.models.risk import Risk
from onboarding_hub.schemas.risk import RiskCreate, RiskResponse, RiskStatusUpdate, RiskUpdate
from onboarding_hub.schemas.status import RiskSeverity, RiskStatus
from onboarding_hub.services.risk_service import compute_priority

router = APIRouter(tags=["risks"])

_NOT_NULL_FIELDS = {"title", "severity", "likelihood", "status"}


def _risk_to_response(risk: Risk) -> RiskResponse:
    priority = compute_priority(risk.severity, risk.likelihood)
    return RiskResponse(
        id=risk.id,
        client_id=risk.client_id,
        title=risk.title,
        description=risk.description,
        severity=risk.severity,
        likelihood=risk.likelihood,
        impact=risk.impact,
        mitigation_plan=risk.mitigation_plan,
        status=risk.status,
        assigned_to=risk.assigned_to,
        due_date=risk.due_date,
        created_at=risk.created_at,
        updated_at=risk.updated_at,
        priority_score=priority.score,
        priority_level=priority.level,
    )


def _get_risk_or_404(db: Session, risk_id: str) -> Risk:
    risk = db.query(Risk).filter(Risk.id == risk_id).first()
    if not risk:
        raise HTTPException(status_code=404, detail="Risk not found")
    return risk


@router.post("/clients/{client_id}/risks", response_model=RiskResponse, status_code=201)
async def create_risk(
    req: RiskCreate,
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
):
    if not req.title.strip():
        raise HTTPException(status_code=400, detail="Risk title is required")

    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    risk = Risk(
        id=str(uuid.uuid4()),
        client_id=client.id,
        created_at=now,
        updated_at=now,
        **req.model_dump(mode="json"),
    )
    db.add(risk)
    db.commit()
    db.refresh(risk)
    return _risk_to_response(risk)


@router.get("/risks", response_model=list[RiskResponse])
async def list_risks(
    client_id: str | None = None,
    status: RiskStatus | None = None,
    severity: RiskSeverity | None = None,
    db: Session = Depends(get_db),
):
    query = db.query(Risk)
    if client_id:
        query = query.filter(Risk.client_id == client_id)
    if status:
        query = query.filter(Risk.status == status.value)
    if severity:
        query = query.filter(Risk.severity == severity.value)
    risks = query.order_by(Risk.created_at.desc()).all()
    return [_risk_to_response(r) for r in risks]


@router.put("/risks/{risk_id}", response_model=RiskResponse)
async def update_risk(risk_id: str, req: RiskUpdate, db: Session = Depends(get_db)):
    risk = _get_risk_or_404(db, risk_id)

    update_data = req.model_dump(mode="json", exclude_unset=True)
    if "title" in update_data and not (update_data["title"] or "").strip():
        raise HTTPException(status_code=400, detail="Risk title is required")
    for key, value in update_data.items():
        if value is None and key in _NOT_NULL_FIELDS:
            continue
        setattr(risk, key, value)
    risk.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    db.commit()
    db.refresh(risk)
    return _risk_to_response(risk)


@router.put("/risks/{risk_id}/status", response_model=RiskResponse)
async def update_risk_status(risk_id: str, req: RiskStatusUpdate, db: Session = Depends(get_db)):
    risk = _get_risk_or_404(db, risk_id)
    risk.status = req.status.value
    risk.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    db.commit()
    db.refresh(risk)
    return _risk_to_response(risk)


@router.delete("/risks/{risk_id}")
async def delete_risk(risk_id: str, db: Session = Depends(get_db)):
    risk = _get_risk_or_404(db, risk_id)
    db.delete(risk)
    db.commit()
    return {"message": "Risk deleted"}
