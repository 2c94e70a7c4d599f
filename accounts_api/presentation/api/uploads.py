"""Spooling of multipart avatar uploads into the temp area."""

from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path, PurePosixPath
from typing import Optional

from fastapi import UploadFile

from ...application.services.account_service import AvatarUpload

logger = logging.getLogger(__name__)


def spool_upload(upload: Optional[UploadFile], temp_dir: Path) -> Optional[AvatarUpload]:
    """Write an uploaded file to ``temp_dir`` under a unique name."""
    if upload is None or not upload.filename:
        return None
    temp_dir.mkdir(parents=True, exist_ok=True)
    original_name = PurePosixPath(upload.filename.replace("\\", "/")).name or "avatar"
    filename = f"{uuid.uuid4().hex}_{original_name}"
    temp_path = temp_dir / filename
    with open(temp_path, "wb") as out:
        shutil.copyfileobj(upload.file, out)
    logger.debug("Spooled upload %s -> %s", upload.filename, temp_path)
    return AvatarUpload(temp_path=temp_path, filename=filename)


def discard_upload(avatar: Optional[AvatarUpload]) -> None:
    """Remove a spooled upload that was not committed."""
    if avatar is None:
        return
    try:
        avatar.temp_path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove temp upload %s: %s", avatar.temp_path, exc)
