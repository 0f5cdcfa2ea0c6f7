import logging

from fastapi import HTTPException, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from onboarding_hub.config import settings
from onboarding_hub.services.storage_service import StorageService

logger = logging.getLogger(__name__)


async def read_upload(file: UploadFile) -> bytes:
    """Read an uploaded file, enforcing the size cap and rejecting empty bodies."""
    max_bytes = settings.max_upload_bytes
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await file.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise HTTPException(status_code=413, detail=f"File too large (max {max_bytes} bytes)")
        chunks.append(chunk)

    content = b"".join(chunks)
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")
    return content


def upload_with_record(
    db: Session,
    storage: StorageService,
    bucket: str,
    path: str,
    content: bytes,
    row,
):
    """Upload an object, then persist the row that describes it.

    If the row cannot be written the uploaded object is removed again on a
    best-effort basis and the database error is re-raised. A failed cleanup
    leaves an orphaned object behind; callers must tolerate that.
    """
    storage.upload(bucket, path, content)
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error("Metadata insert failed for %s/%s, removing uploaded object", bucket, path)
        storage.try_remove(bucket, path)
        raise
    db.refresh(row)
    return row
