import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_client_or_404, get_storage
from onboarding_hub.models.client import Client
from onboarding_hub.schemas.client import ClientCreate, ClientUpdate, ClientResponse
from onboarding_hub.services.client_service import delete_client_and_associated_data
from onboarding_hub.services.storage_service import StorageService

router = APIRouter(prefix="/clients", tags=["clients"])


def _client_to_response(client: Client) -> ClientResponse:
    return ClientResponse(
        id=client.id,
        name=client.name,
        app_url=client.app_url,
        logo_url=client.logo_url,
        created_at=client.created_at,
        updated_at=client.updated_at,
    )


def _commit_unique_name(db: Session, name: str):
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"A client named '{name}' already exists") from exc


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(req: ClientCreate, db: Session = Depends(get_db)):
    name = req.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Client name is required")

    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    client = Client(
        id=str(uuid.uuid4()),
        name=name,
        app_url=req.app_url,
        created_at=now,
        updated_at=now,
    )
    db.add(client)
    _commit_unique_name(db, name)
    db.refresh(client)
    return _client_to_response(client)


@router.get("", response_model=list[ClientResponse])
async def list_clients(db: Session = Depends(get_db)):
    clients = db.query(Client).order_by(Client.created_at.desc()).all()
    return [_client_to_response(c) for c in clients]


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(client: Client = Depends(get_client_or_404)):
    return _client_to_response(client)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    req: ClientUpdate,
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
):
    update_data = req.model_dump(exclude_unset=True)
    if "name" in update_data:
        if not (update_data["name"] or "").strip():
            raise HTTPException(status_code=400, detail="Client name is required")
        update_data["name"] = update_data["name"].strip()
    for key, value in update_data.items():
        setattr(client, key, value)
    client.updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    _commit_unique_name(db, client.name)
    db.refresh(client)
    return _client_to_response(client)


@router.delete("/{client_id}")
async def delete_client(
    client: Client = Depends(get_client_or_404),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    delete_client_and_associated_data(db, storage, client)
    return {"message": "Client deleted"}
