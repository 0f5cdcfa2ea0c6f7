import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_client_or_404, get_storage
from onboarding_hub.models.client import Client
from onboarding_hub.models.deliverable import ClientDeliverable
from onboarding_hub.schemas.deliverable import DeliverableResponse, DeliverableUpdate, MilestoneGroup
from onboarding_hub.services.deliverable_service import group_by_milestone
from onboarding_hub.services.document_service import read_upload, upload_with_record
from onboarding_hub.services.storage_service import StorageError, StorageObjectExists, StorageService
from onboarding_hub.utils.filesystem import sanitize_filename, timestamped_name

DELIVERABLES_BUCKET = "client-deliverables"

router = APIRouter(tags=["deliverables"])


def _deliverable_to_response(deliverable: ClientDeliverable, storage: StorageService) -> DeliverableResponse:
    return DeliverableResponse(
        id=deliverable.id,
        client_id=deliverable.client_id,
        milestone_name=deliverable.milestone_name,
        title=deliverable.title,
        description=deliverable.description,
        document_path=deliverable.document_path,
        file_name=deliverable.file_name,
        file_size=deliverable.file_size,
        file_type=deliverable.file_type,
        version=deliverable.version,
        created_at=deliverable.created_at,
        updated_at=deliverable.updated_at,
        url=storage.public_url(DELIVERABLES_BUCKET, deliverable.document_path),
    )


def _get_deliverable_or_404(db: Session, deliverable_id: str) -> ClientDeliverable:
    deliverable = db.query(ClientDeliverable).filter(ClientDeliverable.id == deliverable_id).first()
    if not deliverable:
        raise HTTPException(status_code=404, detail="Deliverable not found")
    return deliverable


def _client_deliverables(db: Session, client_id: str, milestone: str | None = None) -> list[ClientDeliverable]:
    query = db.query(ClientDeliverable).filter(ClientDeliverable.client_id == client_id)
    if milestone:
        query = query.filter(ClientDeliverable.milestone_name == milestone)
    return query.order_by(
        ClientDeliverable.milestone_name.asc(),
        ClientDeliverable.created_at.desc(),
    ).all()


@router.post("/clients/{client_id}/deliverables", response_model=DeliverableResponse, status_code=201)
async def upload_deliverable(
    file: UploadFile = File(...),
    milestone_name: str = Form(...),
    title: str = Form(...),
    description: str | None = Form(None),
    version: str = Form("1.0"),
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    milestone_name = milestone_name.strip()
    title = title.strip()
    if not milestone_name:
        raise HTTPException(status_code=400, detail="Milestone name is required")
    if not title:
        raise HTTPException(status_code=400, detail="Deliverable title is required")

    content = await read_upload(file)
    filename = file.filename or "deliverable"
    document_path = f"{client.id}/{sanitize_filename(milestone_name)}/{timestamped_name(filename)}"

    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    deliverable = ClientDeliverable(
        id=str(uuid.uuid4()),
        client_id=client.id,
        milestone_name=milestone_name,
        title=title,
        description=description,
        document_path=document_path,
        file_name=filename,
        file_size=len(content),
        file_type=file.content_type or "application/octet-stream",
        version=version or "1.0",
        created_at=now,
        updated_at=now,
    )
    try:
        upload_with_record(db, storage, DELIVERABLES_BUCKET, document_path, content, deliverable)
    except StorageObjectExists as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except IntegrityError as exc:
        raise HTTPException(status_code=409, detail="Deliverable could not be recorded") from exc
    return _deliverable_to_response(deliverable, storage)


@router.get("/clients/{client_id}/deliverables", response_model=list[DeliverableResponse])
async def list_deliverables(
    milestone: str | None = None,
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    return [_deliverable_to_response(d, storage) for d in _client_deliverables(db, client.id, milestone)]


@router.get("/clients/{client_id}/deliverables/milestones", response_model=list[MilestoneGroup])
async def list_deliverables_by_milestone(
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    groups = group_by_milestone(_client_deliverables(db, client.id))
    return [
        MilestoneGroup(
            milestone_name=name,
            deliverables=[_deliverable_to_response(d, storage) for d in items],
        )
        for name, items in groups.items()
    ]


@router.put("/deliverables/{deliverable_id}", response_model=DeliverableResponse)
async def update_deliverable(
    deliverable_id: str,
    req: DeliverableUpdate,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    deliverable = _get_deliverable_or_404(db, deliverable_id)

    update_data = req.model_dump(exclude_unset=True)
    if "title" in update_data and not (update_data["title"] or "").strip():
        raise HTTPException(status_code=400, detail="Deliverable title is required")
    if "version" in update_data and not update_data["version"]:
        raise HTTPException(status_code=400, detail="Version is required")
    for key, value in update_data.items():
        setattr(deliverable, key, value)
    deliverable.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    db.commit()
    db.refresh(deliverable)
    return _deliverable_to_response(deliverable, storage)


@router.delete("/deliverables/{deliverable_id}")
async def delete_deliverable(
    deliverable_id: str,
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    deliverable = _get_deliverable_or_404(db, deliverable_id)
    storage.try_remove(DELIVERABLES_BUCKET, deliverable.document_path)
    db.delete(deliverable)
    db.commit()
    return {"message": "Deliverable deleted"}
