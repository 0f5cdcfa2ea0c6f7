import logging

from sqlalchemy.orm import Session

from onboarding_hub.config import settings
from onboarding_hub.models.client import Client
from onboarding_hub.models.deliverable import ClientDeliverable
from onboarding_hub.models.document import ClientDocument
from onboarding_hub.services.storage_service import StorageService

logger = logging.getLogger(__name__)


def delete_client_and_associated_data(db: Session, storage: StorageService, client: Client) -> None:
    """Delete a client, its stored files and every dependent row.

    Not transactional: stored objects are removed first and individually,
    and a failed object delete is logged without stopping the rest. The
    database cascade then removes documents, steps, engagements, risks,
    deliverables and signature requests together with the client row.
    """
    documents = db.query(ClientDocument).filter(ClientDocument.client_id == client.id).all()
    for doc in documents:
        # Kickoff materials are shared; only SOW files belong to the client.
        if doc.document_type == "sow":
            storage.try_remove("sow-documents", doc.document_path)

    if settings.purge_deliverable_files_on_client_delete:
        deliverables = db.query(ClientDeliverable).filter(ClientDeliverable.client_id == client.id).all()
        for deliverable in deliverables:
            storage.try_remove("client-deliverables", deliverable.document_path)

    db.delete(client)
    db.commit()
    logger.info("Deleted client %s and all associated data", client.id)
