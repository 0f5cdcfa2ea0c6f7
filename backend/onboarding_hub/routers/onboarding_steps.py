import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy import func
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_client_or_404
from onboarding_hub.models.client import Client
from onboarding_hub.models.onboarding_step import OnboardingStep
from onboarding_hub.schemas.onboarding_step import (
    OnboardingStepCreate,
    OnboardingStepResponse,
    OnboardingStepUpdate,
    StepStatusUpdate,
)
from onboarding_hub.services.calendar_service import generate_timeline_ics

router = APIRouter(tags=["onboarding steps"])

_NOT_NULL_FIELDS = {"title", "status", "order_index", "client_visible"}


def _step_to_response(step: OnboardingStep) -> OnboardingStepResponse:
    return OnboardingStepResponse(
        id=step.id,
        client_id=step.client_id,
        title=step.title,
        description=step.description,
        status=step.status,
        start_date=step.start_date,
        end_date=step.end_date,
        order_index=step.order_index,
        client_visible=step.client_visible,
        internal_notes=step.internal_notes,
        assigned_to=step.assigned_to,
        created_at=step.created_at,
        updated_at=step.updated_at,
    )


def _get_step_or_404(db: Session, step_id: str) -> OnboardingStep:
    step = db.query(OnboardingStep).filter(OnboardingStep.id == step_id).first()
    if not step:
        raise HTTPException(status_code=404, detail="Onboarding step not found")
    return step


def next_order_index(db: Session, client_id: str) -> int:
    current = (
        db.query(func.max(OnboardingStep.order_index))
        .filter(OnboardingStep.client_id == client_id)
        .scalar()
    )
    return 0 if current is None else current + 1


@router.post("/clients/{client_id}/onboarding-steps", response_model=OnboardingStepResponse, status_code=201)
async def create_step(
    req: OnboardingStepCreate,
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
):
    if not req.title.strip():
        raise HTTPException(status_code=400, detail="Step title is required")

    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    data = req.model_dump(mode="json")
    if data["order_index"] is None:
        data["order_index"] = next_order_index(db, client.id)

    step = OnboardingStep(
        id=str(uuid.uuid4()),
        client_id=client.id,
        created_at=now,
        updated_at=now,
        **data,
    )
    db.add(step)
    db.commit()
    db.refresh(step)
    return _step_to_response(step)


@router.get("/clients/{client_id}/onboarding-steps", response_model=list[OnboardingStepResponse])
async def list_steps(
    client_visible: bool | None = None,
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
):
    query = db.query(OnboardingStep).filter(OnboardingStep.client_id == client.id)
    if client_visible is not None:
        query = query.filter(OnboardingStep.client_visible == client_visible)
    steps = query.order_by(OnboardingStep.order_index.asc(), OnboardingStep.created_at.asc()).all()
    return [_step_to_response(s) for s in steps]


@router.delete("/clients/{client_id}/onboarding-steps")
async def delete_all_steps(
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
):
    deleted = (
        db.query(OnboardingStep)
        .filter(OnboardingStep.client_id == client.id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return {"message": "Onboarding steps deleted", "deleted": deleted}


@router.get("/clients/{client_id}/onboarding-steps/calendar")
async def steps_calendar(
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
):
    steps = (
        db.query(OnboardingStep)
        .filter(OnboardingStep.client_id == client.id)
        .filter(OnboardingStep.start_date.isnot(None))
        .order_by(OnboardingStep.order_index.asc())
        .all()
    )
    if not steps:
        raise HTTPException(status_code=400, detail="No onboarding steps have dates set")

    return Response(
        content=generate_timeline_ics(client.name, steps),
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="onboarding_{client.id[:8]}.ics"'},
    )


@router.put("/onboarding-steps/{step_id}", response_model=OnboardingStepResponse)
async def update_step(step_id: str, req: OnboardingStepUpdate, db: Session = Depends(get_db)):
    step = _get_step_or_404(db, step_id)

    update_data = req.model_dump(mode="json", exclude_unset=True)
    if "title" in update_data and not (update_data["title"] or "").strip():
        raise HTTPException(status_code=400, detail="Step title is required")
    for key, value in update_data.items():
        if value is None and key in _NOT_NULL_FIELDS:
            continue
        setattr(step, key, value)
    step.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    db.commit()
    db.refresh(step)
    return _step_to_response(step)


@router.put("/onboarding-steps/{step_id}/status", response_model=OnboardingStepResponse)
async def update_step_status(step_id: str, req: StepStatusUpdate, db: Session = Depends(get_db)):
    step = _get_step_or_404(db, step_id)
    step.status = req.status.value
    step.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    db.commit()
    db.refresh(step)
    return _step_to_response(step)


@router.delete("/onboarding-steps/{step_id}")
async def delete_step(step_id: str, db: Session = Depends(get_db)):
    step = _get_step_or_404(db, step_id)
    db.delete(step)
    db.commit()
    return {"message": "Onboarding step deleted"}
