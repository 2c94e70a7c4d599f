"""Local filesystem storage for uploaded avatars."""

from __future__ import annotations

import logging
import os
import shutil
import uuid
from pathlib import Path, PurePosixPath
from typing import Iterator, Union
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

AVATARS_DIRNAME = "avatars"
MAX_NAME_ATTEMPTS = 5


class AvatarStore:
    """Moves uploads under ``<public_root>/avatars`` and removes superseded files.

    Public paths have the form ``avatars/<filename>`` and are resolved
    relative to the public root when files are served or deleted.
    """

    def __init__(self, public_root: Union[str, Path]) -> None:
        self._public_root = Path(public_root).resolve()
        self._avatar_dir = self._public_root / AVATARS_DIRNAME
        self._avatar_dir.mkdir(parents=True, exist_ok=True)

    @property
    def public_root(self) -> Path:
        return self._public_root

    @property
    def avatar_dir(self) -> Path:
        return self._avatar_dir

    def commit(self, temp_path: Union[str, Path], filename: str) -> str:
        """
        Move a temp upload into permanent storage.

        Args:
            temp_path: Location of the spooled upload
            filename: Desired name in the avatar directory; a random prefix
                is added when that name is already taken

        Returns:
            Public path clients use to fetch the avatar

        Raises:
            ValueError: If the filename is empty or not a plain file name
            FileExistsError: If no free name was found
            OSError: If the file cannot be moved; the temp file is left in place
        """
        name = self._safe_name(filename)
        source = Path(temp_path)

        for candidate in _candidate_names(name):
            target = self._avatar_dir / candidate
            try:
                self._place(source, target)
            except FileExistsError:
                logger.debug("Avatar name %s is taken", candidate)
                continue
            source.unlink()
            logger.info("Stored avatar %s", candidate)
            return str(PurePosixPath(AVATARS_DIRNAME, candidate))

        raise FileExistsError(f"No free avatar name for {name!r}")

    @staticmethod
    def _place(source: Path, target: Path) -> None:
        """Create ``target`` with the content of ``source``, never replacing an existing file."""
        try:
            os.link(source, target)
            return
        except FileExistsError:
            raise
        except OSError as exc:
            if not source.exists():
                raise
            # Different filesystem or no hard links: exclusive copy.
            logger.debug("Linking %s failed (%s); copying instead.", source, exc)

        with open(target, "xb") as out:
            try:
                with open(source, "rb") as src:
                    shutil.copyfileobj(src, out)
            except OSError:
                out.close()
                target.unlink(missing_ok=True)
                raise

    def remove(self, public_path: str) -> bool:
        """Delete a committed avatar. Failures are logged, never raised."""
        if not self.is_local(public_path):
            logger.warning("Refusing to delete non-local avatar %s", public_path)
            return False
        path = self._public_root / _normalise(public_path)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Avatar %s was already missing", public_path)
            return False
        except OSError as exc:
            logger.warning("Could not delete avatar %s: %s", public_path, exc)
            return False
        logger.info("Removed avatar %s", public_path)
        return True

    def is_local(self, avatar_url: str) -> bool:
        """True for ``avatars/<name>`` paths produced by :meth:`commit`."""
        if not avatar_url:
            return False
        parts = urlsplit(avatar_url)
        if parts.scheme or parts.netloc or parts.query:
            return False
        path = _normalise(avatar_url)
        return (
            len(path.parts) == 2
            and path.parts[0] == AVATARS_DIRNAME
            and path.name not in ("", ".", "..")
        )

    @staticmethod
    def _safe_name(filename: str) -> str:
        name = PurePosixPath((filename or "").replace("\\", "/")).name
        if not name or name in (".", ".."):
            raise ValueError(f"Invalid avatar filename: {filename!r}")
        return name


def _normalise(public_path: str) -> PurePosixPath:
    return PurePosixPath(public_path.replace("\\", "/").lstrip("/"))


def _candidate_names(name: str) -> Iterator[str]:
    yield name
    for _ in range(MAX_NAME_ATTEMPTS):
        yield f"{uuid.uuid4().hex[:8]}_{name}"
