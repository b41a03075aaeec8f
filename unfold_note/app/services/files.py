"""Image storage on the local filesystem, laid out as public buckets.

Stored files are addressed by URLs of the form
``<public_base_url>/storage/v1/object/public/<bucket>/<path>``, which the app
serves through a static mount.
"""

import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urlparse

from unfold_note.app.core.settings import get_settings

logger = logging.getLogger(__name__)

PUBLIC_OBJECT_PREFIX = "/storage/v1/object/public"


class StorageError(RuntimeError):
    pass


def storage_root() -> Path:
    return Path(get_settings().storage_dir)


def ensure_bucket(bucket_name: str) -> Path:
    bucket_path = storage_root() / bucket_name
    if not bucket_path.is_dir():
        logger.info("Creating storage bucket %s", bucket_name)
        bucket_path.mkdir(parents=True, exist_ok=True)
    return bucket_path


def get_public_url(bucket_name: str, file_path: str) -> str:
    base = get_settings().public_base_url
    return f"{base}{PUBLIC_OBJECT_PREFIX}/{bucket_name}/{file_path}"


def _file_extension(filename: str) -> str:
    ext = re.sub(r"[^A-Za-z0-9]", "", (filename or "").rsplit(".", 1)[-1]).lower()
    return ext or "bin"


def upload_image(project_url_id: str, filename: str, data: bytes, bucket_name: Optional[str] = None) -> str:
    """Store image bytes under ``<project>/<uuid>.<ext>`` and return the public URL."""
    bucket_name = bucket_name or get_settings().default_bucket
    bucket_path = ensure_bucket(bucket_name)

    file_name = f"{uuid.uuid4()}.{_file_extension(filename)}"
    file_path = f"{project_url_id}/{file_name}"
    target = bucket_path / project_url_id / file_name
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        # "xb" refuses to overwrite, the same as an upload without upsert.
        with open(target, "xb") as fh:
            fh.write(data)
    except OSError as exc:
        logger.exception("Image upload failed for %s", file_path)
        raise StorageError(f"Image upload failed: {exc}") from exc

    return get_public_url(bucket_name, file_path)


def get_file_info_from_url(url: str) -> Optional[Dict[str, str]]:
    try:
        parsed = urlparse(url)
    except ValueError:
        logger.warning("Could not parse storage URL %r", url)
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    path_parts = parsed.path.split("/")
    # ['', 'storage', 'v1', 'object', 'public', <bucket>, *path]
    if len(path_parts) >= 6 and path_parts[1] == "storage" and path_parts[2] == "v1":
        return {"bucket": path_parts[5], "file_path": "/".join(path_parts[6:])}
    return None


def get_project_images(project_url_id: str, bucket_name: Optional[str] = None) -> List[Dict]:
    bucket_name = bucket_name or get_settings().default_bucket
    project_dir = storage_root() / bucket_name / project_url_id
    if not project_dir.is_dir():
        return []
    try:
        entries = sorted(p for p in project_dir.iterdir() if p.is_file())
    except OSError:
        logger.exception("Failed listing images for project %s", project_url_id)
        return []

    images = []
    for entry in entries:
        stat = entry.stat()
        images.append(
            {
                "name": entry.name,
                "size": stat.st_size,
                "url": get_public_url(bucket_name, f"{project_url_id}/{entry.name}"),
                "updated_at": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
            }
        )
    return images
