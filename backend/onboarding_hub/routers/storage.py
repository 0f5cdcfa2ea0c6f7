import mimetypes

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from onboarding_hub.dependencies import get_storage
from onboarding_hub.schemas.document import StoredFile
from onboarding_hub.services.storage_service import StorageError, StorageService

router = APIRouter(prefix="/storage", tags=["storage"])


@router.get("/{bucket}", response_model=list[StoredFile])
async def list_bucket_files(bucket: str, storage: StorageService = Depends(get_storage)):
    try:
        files = storage.list_files(bucket)
    except StorageError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return [StoredFile(**f) for f in files]


@router.get("/{bucket}/{path:path}")
async def get_object(bucket: str, path: str, storage: StorageService = Depends(get_storage)):
    try:
        full_path = storage.full_path(bucket, path)
    except StorageError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if not full_path.is_file():
        raise HTTPException(status_code=404, detail="Object not found")

    return FileResponse(
        path=str(full_path),
        filename=full_path.name,
        media_type=mimetypes.guess_type(full_path.name)[0] or "application/octet-stream",
    )
