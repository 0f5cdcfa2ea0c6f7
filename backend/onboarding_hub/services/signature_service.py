import logging
import uuid
from datetime import datetime, timezone

from fpdf.errors import FPDFException
from pypdf.errors import PyPdfError
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from onboarding_hub.config import settings
from onboarding_hub.models.client import Client
from onboarding_hub.models.document import ClientDocument, UniversalDocument
from onboarding_hub.models.signature_request import SignatureRequest
from onboarding_hub.services.email_service import EmailDeliveryError, Mailer, render_signature_request_email
from onboarding_hub.services.pdf_service import append_pages, generate_signature_page
from onboarding_hub.services.storage_service import StorageError, StorageService
from onboarding_hub.utils.filesystem import sanitize_filename

logger = logging.getLogger(__name__)

_MISSING_TABLE = "no such table: signature_requests"


class SignatureRequestsUnavailable(Exception):
    pass


def _is_missing_table(exc: OperationalError) -> bool:
    return _MISSING_TABLE in str(exc)


def list_signature_requests(db: Session, client_id: str | None = None) -> list[SignatureRequest]:
    """List requests newest first; an absent table yields an empty list."""
    query = db.query(SignatureRequest)
    if client_id:
        query = query.filter(SignatureRequest.client_id == client_id)
    try:
        return query.order_by(SignatureRequest.created_at.desc()).all()
    except OperationalError as exc:
        if not _is_missing_table(exc):
            raise
        db.rollback()
        logger.warning("Signature requests table does not exist. Returning empty list.")
        return []


async def create_signature_request(
    db: Session,
    mailer: Mailer,
    client: Client,
    recipient_name: str,
    recipient_email: str,
    sow: ClientDocument | None = None,
    nda: UniversalDocument | None = None,
) -> SignatureRequest:
    """Record a request in the sent state and notify the recipient.

    The notification is best-effort: a delivery failure is logged and the
    request is still returned.
    """
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    request_id = str(uuid.uuid4())
    signing_url = f"{settings.app_base_url.rstrip('/')}/#/sign/{request_id}"

    request = SignatureRequest(
        id=request_id,
        client_id=client.id,
        sow_document_id=sow.id if sow else None,
        nda_document_id=nda.id if nda else None,
        recipient_name=recipient_name,
        recipient_email=recipient_email,
        status="sent",
        signing_url=signing_url,
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(request)
        db.commit()
    except OperationalError as exc:
        db.rollback()
        if _is_missing_table(exc):
            raise SignatureRequestsUnavailable(
                "E-signature feature is not yet configured. "
                "Please set up the signature_requests table first."
            ) from exc
        raise
    db.refresh(request)

    documents = []
    if sow:
        documents.append(f"Statement of Work ({sow.file_name})")
    if nda:
        documents.append(f"Non-Disclosure Agreement ({nda.file_name})")

    try:
        await mailer.send(
            recipient_email,
            f"Document Signature Request from {client.name}",
            render_signature_request_email(recipient_name, client.name, documents, signing_url),
        )
    except EmailDeliveryError as exc:
        logger.warning("Failed to send signature request email for %s: %s", request_id, exc)

    return request


def sign_request(
    db: Session,
    storage: StorageService,
    request: SignatureRequest,
    signer_name: str,
    entity_name: str,
    signer_title: str,
) -> tuple[str | None, str | None]:
    """Mark a request signed, stamping the attached NDA when there is one.

    Returns (signed_document_url, pdf_error). A stamping failure does not
    block the signature; the error is reported back instead.
    """
    signed_at = datetime.now(timezone.utc)
    signed_url = None
    pdf_error = None

    nda = request.nda_document
    if nda is not None:
        try:
            original = storage.download("kickoff-materials", nda.document_path)
            page = generate_signature_page(nda.file_name, signer_name, entity_name, signer_title, signed_at)
            stamped = append_pages(original, page)
            stamp = signed_at.strftime("%Y-%m-%dT%H-%M-%S")
            path = f"signed-documents/{request.id}/signed-{stamp}-{sanitize_filename(nda.file_name)}"
            signed_url = storage.upload("kickoff-materials", path, stamped)
        except (StorageError, PyPdfError, FPDFException, ValueError) as exc:
            logger.error("PDF processing failed for signature request %s: %s", request.id, exc)
            pdf_error = f"PDF processing failed: {exc}"

    now = signed_at.strftime("%Y-%m-%dT%H:%M:%SZ")
    request.status = "signed"
    request.signer_typed_signature = signer_name
    request.signer_entity_name = entity_name
    request.signer_title = signer_title
    request.signed_at = now
    if signed_url:
        request.signed_document_url = signed_url
    request.updated_at = now
    db.commit()
    db.refresh(request)
    return signed_url, pdf_error
