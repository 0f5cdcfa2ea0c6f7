from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from onboarding_hub.database import get_db
from onboarding_hub.models.client import Client
from onboarding_hub.services.content_service import ContentGenerator
from onboarding_hub.services.email_service import Mailer
from onboarding_hub.services.storage_service import StorageService


def get_storage() -> StorageService:
    return StorageService()


def get_mailer() -> Mailer:
    return Mailer()


def get_content_generator() -> ContentGenerator:
    return ContentGenerator()


def get_client_or_404(client_id: str, db: Session = Depends(get_db)) -> Client:
    client = db.query(Client).filter(Client.id == client_id).first()
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client
