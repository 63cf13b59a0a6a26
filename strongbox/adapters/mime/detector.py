"""MIME type detection from content signatures and file extensions.

Implements the MimeTypeDetector port. Content signatures win over the
extension; generic results ("text/plain", empty or binary data) fall
back to the extension table from the standard library mimetypes module.
"""

import logging
import mimetypes
from pathlib import Path

logger = logging.getLogger(__name__)

SNIFF_BYTES = 2048

EMPTY_MIMETYPE = "application/x-empty"
TEXT_MIMETYPE = "text/plain"
BINARY_MIMETYPE = "application/octet-stream"

# Results too generic to beat an extension match
GENERIC_MIMETYPES = frozenset({EMPTY_MIMETYPE, TEXT_MIMETYPE, BINARY_MIMETYPE})

# (offset, magic bytes, MIME type), most specific first
SIGNATURES: tuple[tuple[int, bytes, str], ...] = (
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"%PDF-", "application/pdf"),
    (0, b"PK\x03\x04", "application/zip"),
    (0, b"\x1f\x8b", "application/gzip"),
    (0, b"BM", "image/bmp"),
    (0, b"OggS", "audio/ogg"),
    (0, b"ID3", "audio/mpeg"),
    (0, b"\x7fELF", "application/x-executable"),
    (4, b"ftyp", "video/mp4"),
)


def _looks_like_text(data: bytes) -> bool:
    if b"\x00" in data:
        return False
    try:
        data.decode("utf-8")
    except UnicodeDecodeError as e:
        # A multi-byte character cut off by the sniff window is still text.
        return e.start >= len(data) - 3
    return True


def sniff(data: bytes) -> str:
    """Classify leading bytes by signature, falling back to text or binary."""
    if not data:
        return EMPTY_MIMETYPE
    for offset, magic, mimetype in SIGNATURES:
        if data[offset : offset + len(magic)] == magic:
            return mimetype
    head = data.lstrip()[:64].lower()
    if head.startswith((b"<!doctype html", b"<html")):
        return "text/html"
    if head.startswith(b"<?xml"):
        return "text/xml"
    if head.startswith(b"<svg"):
        return "image/svg+xml"
    if _looks_like_text(data):
        return TEXT_MIMETYPE
    return BINARY_MIMETYPE


class ContentMimeTypeDetector:
    """MIME detection combining content signatures with extension lookup."""

    def __init__(self, sniff_bytes: int = SNIFF_BYTES) -> None:
        self._sniff_bytes = sniff_bytes

    def guess(self, path: str, contents: bytes | None = None) -> str | None:
        """Guess a MIME type from a name and optional contents.

        Args:
            path: File name or relative path.
            contents: File contents, if known.

        Returns:
            The content match when it is specific, otherwise the extension
            match, otherwise "text/plain".
        """
        if contents is not None:
            detected = sniff(contents[: self._sniff_bytes])
            if detected not in GENERIC_MIMETYPES:
                return detected
        by_name, _ = mimetypes.guess_type(path, strict=False)
        return by_name or TEXT_MIMETYPE

    def detect_file(self, location: Path) -> str | None:
        """Detect the MIME type of a file on disk from its content.

        Returns:
            MIME type string, or None if the file cannot be read.
        """
        try:
            with location.open("rb") as f:
                head = f.read(self._sniff_bytes)
        except OSError as e:
            logger.debug("Unable to read %s for MIME detection: %s", location, e)
            return None

        detected = sniff(head)
        if detected in GENERIC_MIMETYPES and detected != EMPTY_MIMETYPE:
            by_name, _ = mimetypes.guess_type(location.name, strict=False)
            if by_name:
                return by_name
        return detected
