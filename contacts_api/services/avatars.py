"""
Avatar pipeline.

An upload lands in the temp directory, is moved to the permanent avatar
directory and resized in place to a fixed square. The returned path is
relative to the public directory (what the static mount serves).
"""

from __future__ import annotations

import logging
import re
import shutil
import uuid
from pathlib import Path

from fastapi.concurrency import run_in_threadpool
from PIL import Image

from contacts_api.config import Settings

logger = logging.getLogger(__name__)

_SAFE_SUFFIX = re.compile(r"^\.[a-z0-9]{1,8}$")


class AvatarDecodeError(ValueError):
    """The uploaded file is not an image we can decode."""


class AvatarPipeline:
    """Moves uploaded avatars into place and normalizes their size."""

    def __init__(self, settings: Settings):
        self.avatars_dir = Path(settings.avatars_dir)
        self.tmp_dir = Path(settings.tmp_dir)
        self.size = settings.avatar_size

    def ensure_dirs(self) -> None:
        self.avatars_dir.mkdir(parents=True, exist_ok=True)
        self.tmp_dir.mkdir(parents=True, exist_ok=True)

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def make_filename(self, user_id: str, original_name: str | None) -> str:
        suffix = Path(original_name or "").suffix.lower()
        if not _SAFE_SUFFIX.match(suffix):
            suffix = ""
        return f"{user_id}_{uuid.uuid4().hex}{suffix}"

    async def receive(self, filename: str, data: bytes) -> Path:
        """Write the raw upload into the temp directory."""
        tmp_path = self.tmp_dir / filename
        await run_in_threadpool(self._write, tmp_path, data)
        return tmp_path

    async def move(self, tmp_path: Path) -> Path:
        """Relocate a temp upload to the avatar directory. I/O errors propagate."""
        final_path = self.avatars_dir / tmp_path.name
        await run_in_threadpool(shutil.move, str(tmp_path), str(final_path))
        return final_path

    async def resize(self, path: Path) -> None:
        """Resize in place to size x size; the file is removed if this fails."""
        try:
            await run_in_threadpool(self._resize, path, self.size)
        except Exception:
            path.unlink(missing_ok=True)
            raise

    async def remove(self, relative: str | None) -> None:
        """Delete a stored avatar by its relative path; other values are ignored."""
        prefix = f"{self.avatars_dir.name}/"
        if not relative or not relative.startswith(prefix):
            return
        path = self.avatars_dir / Path(relative).name
        await run_in_threadpool(path.unlink, missing_ok=True)

    async def process(self, user_id: str, original_name: str | None, data: bytes) -> str:
        """Run the whole pipeline and return the avatar's relative path."""
        filename = self.make_filename(user_id, original_name)
        tmp_path = await self.receive(filename, data)
        try:
            final_path = await self.move(tmp_path)
        finally:
            tmp_path.unlink(missing_ok=True)
        await self.resize(final_path)

        logger.info(f"Stored avatar {filename} for {user_id}")
        return f"{self.avatars_dir.name}/{filename}"

    # -------------------------------------------------------------------------
    # Blocking helpers (run in the threadpool)
    # -------------------------------------------------------------------------

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    @staticmethod
    def _resize(path: Path, size: int) -> None:
        try:
            with Image.open(path) as img:
                img.load()
                fmt = img.format
                resized = img.resize((size, size))
        except (OSError, Image.DecompressionBombError) as e:
            # Unidentified and truncated images both surface as OSError
            raise AvatarDecodeError(f"Cannot decode image {path.name}: {e}") from e

        try:
            resized.save(path, format=fmt)
        except (KeyError, ValueError, OSError) as e:
            # Pillow reads some formats it cannot write (KeyError from its SAVE table)
            raise AvatarDecodeError(f"Cannot write image {path.name} as {fmt}: {e}") from e
