"""MIME type detection port.

Adapters consume MIME detection as an opaque service; the detection
rules live behind this protocol.
"""

from pathlib import Path
from typing import Protocol


class MimeTypeDetector(Protocol):
    """Protocol for MIME type detection."""

    def detect_file(self, location: Path) -> str | None:
        """Detect the MIME type of a file on disk.

        Args:
            location: Absolute path to an existing file.

        Returns:
            MIME type string, or None if the file cannot be read.
        """
        ...

    def guess(self, path: str, contents: bytes | None = None) -> str | None:
        """Guess a MIME type from a file name and optional contents.

        Args:
            path: File name or relative path; only the extension is used.
            contents: Leading bytes of the file, if available.

        Returns:
            MIME type string, or None if nothing matched.
        """
        ...
