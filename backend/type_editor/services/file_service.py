"""
Type Editor Backend — File Upload Service
==========================================

What:  Validates uploaded images and stores them in the upload directory.
How:   Pure helpers (sanitize_filename, extract_extension, matches_signature)
       plus a FileService that runs them as a chain of hard gates.
Who:   Called by the /api/upload route handlers.

Validation order (first failure aborts, nothing is written):
    1. Size check:        > max_upload_size            → PayloadTooLargeError (413)
    2. Filename sanitize: basename only, [A-Za-z0-9._-], ≤ 255 chars
    3. Extension check:   .jpg .jpeg .png .gif .webp   → ValidationError (400)
    4. Magic numbers:     leading bytes match extension → ValidationError (400)
    5. Store:             <unix-seconds>_<sanitized>, ≤ 255 chars → FileStorageError (500)

    The route has already required a filename and read the body.

Attack vectors covered:
    - Path traversal: only the final path segment survives sanitization, and
      the stored name always starts with a timestamp
    - Extension spoofing: the content must carry the claimed format's magic
      number (e.g. a JPEG renamed to .png is rejected)
    - Oversized bodies: rejected before any content inspection

Stored names are unique only to the second: two uploads of the same name in
the same second overwrite one another.
"""

import logging
import os
import re
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import aiofiles

from type_editor.config import settings
from type_editor.exceptions import (
    FileStorageError,
    NotFoundError,
    PayloadTooLargeError,
    ValidationError,
)
from type_editor.schemas.upload import StoredFile, UploadResponse

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

# Leading byte signatures per extension. WebP is checked separately because
# its signature has a 4-byte length field between "RIFF" and "WEBP".
MAGIC_NUMBERS = {
    ".jpg": b"\xff\xd8\xff",
    ".jpeg": b"\xff\xd8\xff",
    ".png": b"\x89PNG\r\n\x1a\n",
    ".gif": b"GIF8",
}

MAX_FILENAME_LENGTH = 255

PUBLIC_URL_PREFIX = "/uploads"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


# ══════════════════════════════════════════════════════════════════════════
# Pure validation helpers
# ══════════════════════════════════════════════════════════════════════════


def _fit_length(name: str, limit: int) -> str:
    """Cut `name` to `limit` characters, keeping its final extension if it fits."""
    if len(name) <= limit:
        return name
    dot = name.rfind(".")
    extension = name[dot:] if dot != -1 else ""
    if extension and len(extension) < limit:
        return name[: limit - len(extension)] + extension
    return name[:limit]


def sanitize_filename(filename: str) -> str:
    """
    Reduce a client-supplied filename to a safe basename.

    - directory components are dropped ('/' and '\\' both count)
    - every character outside A-Z, a-z, 0-9, '.', '-', '_' becomes '_'
    - names over 255 characters are truncated; the final extension is kept
      when there is one, otherwise the name is cut at 255

    Examples:
        "../../etc/passwd.png"  → "passwd.png"
        "my photo (1).jpg"      → "my_photo__1_.jpg"
    """
    basename = filename.replace("\\", "/").rsplit("/", 1)[-1]
    safe = _UNSAFE_FILENAME_CHARS.sub("_", basename)
    return _fit_length(safe, MAX_FILENAME_LENGTH)


def extract_extension(filename: str) -> Optional[str]:
    """
    Lower-cased extension with its leading dot, or None.

    The extension is whatever follows the final '.'; a name with no dot or
    ending in a dot has none.
    """
    dot = filename.rfind(".")
    if dot == -1 or dot == len(filename) - 1:
        return None
    return "." + filename[dot + 1:].lower()


def matches_signature(content: bytes, extension: str) -> bool:
    """True when the content starts with the magic number of `extension`."""
    if extension == ".webp":
        return len(content) >= 12 and content[:4] == b"RIFF" and content[8:12] == b"WEBP"
    signature = MAGIC_NUMBERS.get(extension)
    if signature is None:
        return False
    return content.startswith(signature)


# ══════════════════════════════════════════════════════════════════════════
# File Service
# ══════════════════════════════════════════════════════════════════════════


class FileService:
    """
    Manages upload validation and the upload directory.

    Directory Structure (flat):
        uploads/
        ├── 1718000000_figure.png
        └── 1718000042_diagram.webp

    Files are served back by GET /uploads/<filename>.
    """

    def __init__(self, upload_dir: Optional[str] = None, max_upload_size: Optional[int] = None):
        """
        Args:
            upload_dir: Override the upload directory (used in tests).
            max_upload_size: Override the byte limit (used in tests).
        """
        self.upload_dir = Path(upload_dir or settings.upload_dir).resolve()
        self.max_upload_size = max_upload_size or settings.max_upload_size

    def validate_size(self, content: bytes) -> None:
        """Raises PayloadTooLargeError when content exceeds the byte limit."""
        if len(content) > self.max_upload_size:
            raise PayloadTooLargeError(
                max_size=self.max_upload_size,
                actual_size=len(content),
            )

    def validate_extension(self, filename: str) -> str:
        """
        Returns the normalized extension of a sanitized filename.

        Raises:
            ValidationError: no extension, or not an allowed image type
        """
        ext = extract_extension(filename)
        if ext is None:
            raise ValidationError(
                message="File has no extension. Allowed types: "
                + ", ".join(sorted(ALLOWED_EXTENSIONS)),
                field="file",
                context={"filename": filename},
            )
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="file",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_signature(self, content: bytes, extension: str) -> None:
        """
        Raises ValidationError when the bytes are not the claimed format.
        """
        if not matches_signature(content, extension):
            raise ValidationError(
                message=(
                    f"File content does not match its '{extension}' extension. "
                    "The file must be a valid image."
                ),
                field="file",
                context={"extension": extension, "leading_bytes": content[:12].hex()},
            )

    async def store_file(self, content: bytes, safe_name: str) -> str:
        """
        Write validated content as <unix-seconds>_<safe_name>.

        The whole stored name stays within 255 characters, so a long
        safe_name is shortened again (extension kept) to make room for the
        timestamp prefix. Creates the upload directory if needed. Returns the
        stored filename.

        Raises:
            FileStorageError if directory creation or file write fails.
        """
        prefix = f"{int(time.time())}_"
        stored_name = prefix + _fit_length(safe_name, MAX_FILENAME_LENGTH - len(prefix))
        target = self.upload_dir / stored_name

        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(target, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", target, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(target), "os_error": str(e)},
            )

        logger.info("Upload stored: %s (%d bytes)", stored_name, len(content))
        return stored_name

    async def validate_and_store(self, filename: str, content: bytes) -> UploadResponse:
        """
        Complete validation and storage pipeline for one uploaded file.

        Args:
            filename: Client-supplied filename (untrusted)
            content: Complete file body

        Returns:
            UploadResponse with the public URL and stored filename.
        """
        self.validate_size(content)

        safe_name = sanitize_filename(filename)
        ext = self.validate_extension(safe_name)
        self.validate_signature(content, ext)

        stored_name = await self.store_file(content, safe_name)
        return UploadResponse(url=f"{PUBLIC_URL_PREFIX}/{stored_name}", filename=stored_name)

    # ── Stored file management ────────────────────────────────────────────

    def _checked_path(self, filename: str) -> Path:
        """
        Resolves a stored filename inside the upload directory.

        The directory is flat, so separators are never valid. Dots inside a
        name are fine ("1718000000_..png" is a real stored name); only a path
        that resolves outside the directory, or to the directory itself, is
        rejected.
        """
        invalid = ValidationError(
            message="Filename contains invalid characters",
            field="filename",
            context={"filename": filename},
        )
        if not filename or "/" in filename or "\\" in filename or "\x00" in filename:
            raise invalid

        path = (self.upload_dir / filename).resolve()
        if path == self.upload_dir or not path.is_relative_to(self.upload_dir):
            raise invalid
        return path

    def list_files(self) -> List[StoredFile]:
        """Stored uploads, newest first. A missing directory lists as empty."""
        if not self.upload_dir.is_dir():
            return []

        files = []
        try:
            for entry in os.scandir(self.upload_dir):
                if not entry.is_file():
                    continue
                stat = entry.stat()
                files.append(
                    StoredFile(
                        filename=entry.name,
                        size=stat.st_size,
                        modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                        url=f"{PUBLIC_URL_PREFIX}/{entry.name}",
                    )
                )
        except OSError as e:
            logger.error("Failed to list uploads in %s: %s", self.upload_dir, str(e))
            raise FileStorageError(
                message="Could not list uploaded files.",
                context={"os_error": str(e)},
            )

        files.sort(key=lambda f: f.modified_at, reverse=True)
        return files

    def delete_file(self, filename: str) -> None:
        """
        Remove one stored upload.

        Raises:
            ValidationError: unsafe filename
            NotFoundError: no such stored file
            FileStorageError: OS refused the deletion
        """
        path = self._checked_path(filename)
        if not path.is_file():
            raise NotFoundError(resource="file", resource_id=filename)

        try:
            path.unlink()
        except OSError as e:
            logger.error("Failed to delete upload %s: %s", filename, str(e))
            raise FileStorageError(
                message="Could not delete the file.",
                context={"os_error": str(e)},
            )
        logger.info("Upload deleted: %s", filename)


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
