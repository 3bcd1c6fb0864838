"""Image upload acceptance and on-disk persistence.

Accepted uploads are written under the uploads root as
``<epoch-millis>-<sanitized original name>`` and referenced from events by their
public path, ``/uploads/<filename>``. File contents are never stored on the
event itself.

Limits
------
- at most :data:`MAX_FILES` images per event
- each image at most :data:`MAX_FILE_BYTES` bytes
- each upload must declare an ``image/*`` content type
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from timelinemap.core.errors import UploadRejected
from timelinemap.core.settings import get_logger

MAX_FILES = 5
MAX_FILE_BYTES = 5 * 1024 * 1024
PUBLIC_PREFIX = "/uploads"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.]")

logger = get_logger("timelinemap.ingestion.uploads")


@dataclass(frozen=True, slots=True)
class ImageUpload:
    """One received file: original name, declared content type, raw bytes."""

    filename: str
    content_type: str
    data: bytes


@dataclass(frozen=True, slots=True)
class StoredImage:
    """A file written by :class:`UploadStorage` and its public reference."""

    path: Path
    public_path: str


def sanitize_filename(name: str) -> str:
    """Replace anything outside ``[A-Za-z0-9.]`` with ``_`` and drop directories."""
    base = Path(name).name if name else ""
    safe = _UNSAFE_CHARS.sub("_", base)
    return safe or "image"


def check_uploads(uploads: Sequence[ImageUpload]) -> None:
    """Raise :class:`UploadRejected` if any upload breaks the type/size/count caps."""
    if len(uploads) > MAX_FILES:
        raise UploadRejected(f"Too many files (maximum is {MAX_FILES}).")
    for upload in uploads:
        if not upload.content_type.startswith("image/"):
            raise UploadRejected(
                f"Not an image! Please upload only images ({upload.filename!r})."
            )
        if len(upload.data) > MAX_FILE_BYTES:
            raise UploadRejected(
                f"File too large: {upload.filename!r} exceeds {MAX_FILE_BYTES // (1024 * 1024)} MB."
            )


class UploadStorage:
    """Write accepted uploads under ``root`` with collision-free names."""

    def __init__(self, root: Path, *, clock: Callable[[], float] = time.time) -> None:
        self.root = root
        self._clock = clock

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def save(self, upload: ImageUpload) -> StoredImage:
        """Write one upload and return where it went.

        The ``x`` open mode makes name reservation atomic; on a clash (same
        millisecond, same name) a counter is inserted after the timestamp.
        """
        self.ensure_root()
        stamp = int(self._clock() * 1000)
        safe = sanitize_filename(upload.filename)

        attempt = 0
        while True:
            name = f"{stamp}-{safe}" if attempt == 0 else f"{stamp}-{attempt}-{safe}"
            path = self.root / name
            try:
                with path.open("xb") as fh:
                    fh.write(upload.data)
            except FileExistsError:
                attempt += 1
                continue
            break

        logger.debug("Saved upload %r as %s", upload.filename, path)
        return StoredImage(path=path, public_path=f"{PUBLIC_PREFIX}/{name}")

    def save_all(self, uploads: Sequence[ImageUpload]) -> list[StoredImage]:
        """Write every upload; if one fails, remove the ones already written."""
        stored: list[StoredImage] = []
        try:
            for upload in uploads:
                stored.append(self.save(upload))
        except OSError:
            self.discard(stored)
            raise
        return stored

    def discard(self, stored: Sequence[StoredImage]) -> None:
        """Delete files written for a request that did not produce an event."""
        for image in stored:
            try:
                image.path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Could not remove orphaned upload %s: %s", image.path, exc)


__all__ = [
    "ImageUpload",
    "MAX_FILES",
    "MAX_FILE_BYTES",
    "PUBLIC_PREFIX",
    "StoredImage",
    "UploadStorage",
    "check_uploads",
    "sanitize_filename",
]
