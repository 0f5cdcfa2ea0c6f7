"""Filesystem-backed object storage with named buckets."""
import logging
import mimetypes
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote

from onboarding_hub.config import settings
from onboarding_hub.utils.filesystem import BUCKETS, ensure_storage_dirs

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


class StorageObjectExists(StorageError):
    pass


class StorageService:
    def __init__(self, root: Path | None = None, public_base_url: str | None = None):
        self.root = root or settings.storage_path
        self.public_base_url = (public_base_url or settings.public_base_url).rstrip("/")

    def _object_path(self, bucket: str, path: str) -> Path:
        if bucket not in BUCKETS:
            raise StorageError(f"Unknown bucket: {bucket}")
        bucket_dir = (self.root / bucket).resolve()
        target = (bucket_dir / path).resolve()
        if target == bucket_dir or bucket_dir not in target.parents:
            raise StorageError(f"Invalid object path: {path}")
        return target

    def upload(self, bucket: str, path: str, content: bytes) -> str:
        """Store an object without overwriting. Returns its public URL."""
        ensure_storage_dirs(self.root)
        target = self._object_path(bucket, path)
        if target.exists():
            raise StorageObjectExists(f"Object already exists: {bucket}/{path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as exc:
            raise StorageError(f"Upload failed for {bucket}/{path}: {exc}") from exc
        return self.public_url(bucket, path)

    def download(self, bucket: str, path: str) -> bytes:
        target = self._object_path(bucket, path)
        if not target.is_file():
            raise StorageError(f"Object not found: {bucket}/{path}")
        return target.read_bytes()

    def exists(self, bucket: str, path: str) -> bool:
        return self._object_path(bucket, path).is_file()

    def full_path(self, bucket: str, path: str) -> Path:
        return self._object_path(bucket, path)

    def remove(self, bucket: str, path: str) -> None:
        target = self._object_path(bucket, path)
        if not target.is_file():
            raise StorageError(f"Object not found: {bucket}/{path}")
        try:
            target.unlink()
        except OSError as exc:
            raise StorageError(f"Delete failed for {bucket}/{path}: {exc}") from exc

    def try_remove(self, bucket: str, path: str) -> bool:
        """Best-effort delete. Failures are logged, never raised."""
        try:
            self.remove(bucket, path)
            return True
        except StorageError as exc:
            logger.warning("Failed to delete %s/%s from storage: %s", bucket, path, exc)
            return False

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}{settings.api_prefix}/storage/{bucket}/{quote(path)}"

    def list_files(self, bucket: str, limit: int = 100) -> list[dict]:
        """Top-level files of a bucket, newest first. Folders and dotfiles are skipped."""
        if bucket not in BUCKETS:
            raise StorageError(f"Unknown bucket: {bucket}")
        bucket_dir = self.root / bucket
        if not bucket_dir.exists():
            return []

        entries = [
            p for p in bucket_dir.iterdir()
            if p.is_file() and not p.name.startswith(".")
        ]
        entries.sort(key=lambda p: p.stat().st_mtime, reverse=True)

        files = []
        for p in entries[:limit]:
            stat = p.stat()
            files.append({
                "name": p.name,
                "path": p.name,
                "size": stat.st_size,
                "type": mimetypes.guess_type(p.name)[0] or "application/octet-stream",
                "url": self.public_url(bucket, p.name),
                "created_at": datetime.fromtimestamp(stat.st_mtime, timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            })
        return files
