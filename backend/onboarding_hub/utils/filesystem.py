import time
from pathlib import Path

from onboarding_hub.config import settings

BUCKETS = ("sow-documents", "kickoff-materials", "client-deliverables")


def ensure_storage_dirs(storage_path: Path | None = None) -> Path:
    path = storage_path or settings.storage_path
    path.mkdir(parents=True, exist_ok=True)
    for bucket in BUCKETS:
        (path / bucket).mkdir(exist_ok=True)
    return path


def sanitize_filename(name: str) -> str:
    keep = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._-")
    return "".join(c if c in keep else "_" for c in name)


def timestamped_name(filename: str) -> str:
    """Prefix a sanitized filename with the current epoch milliseconds."""
    return f"{int(time.time() * 1000)}-{sanitize_filename(filename)}"
