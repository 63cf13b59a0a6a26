"""Domain entities and value objects.

Core domain models representing the storage concepts of strongbox.
These are pure Python dataclasses with no dependencies on infrastructure.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO

from strongbox.domain.exceptions import InvalidVisibilityError


class EntryKind(str, Enum):
    """Kind of a storage entry."""

    FILE = "file"
    DIR = "dir"


class Visibility(str, Enum):
    """Two-valued visibility abstraction mapped onto permission bits."""

    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: Visibility | str) -> Visibility:
        """Parse a visibility value from its string form.

        Args:
            value: A Visibility member or one of "public" / "private".

        Returns:
            The matching Visibility member.

        Raises:
            InvalidVisibilityError: If the value is not a known visibility.
        """
        if isinstance(value, Visibility):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidVisibilityError(str(value)) from None


class LinkPolicy(str, Enum):
    """Behavior when a symbolic link is met during traversal or metadata lookup.

    - SKIP_LINKS: the link is silently left out of the result
    - DISALLOW_LINKS: the enclosing operation fails with UnsupportedLinkError
    """

    SKIP_LINKS = "skip"
    DISALLOW_LINKS = "disallow"


@dataclass(frozen=True)
class Metadata:
    """Normalized metadata record for a file or directory.

    Attributes:
        kind: Whether the entry is a file or a directory.
        path: Adapter-relative path, forward-slash separated, no leading slash.
        timestamp: Modification time in whole seconds since the epoch.
        size: Byte count, present for files only.

    Raises:
        ValueError: If size is negative, or set on a directory.
    """

    kind: EntryKind
    path: str
    timestamp: int
    size: int | None = None

    def __post_init__(self) -> None:
        """Validate metadata after initialization."""
        if self.size is not None and self.size < 0:
            raise ValueError(f"size cannot be negative, got {self.size}")
        if self.kind is EntryKind.DIR and self.size is not None:
            raise ValueError("directories do not carry a size")

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIR


@dataclass(frozen=True)
class WriteResult:
    """Result of a successful write, update or stream write.

    Attributes:
        path: Adapter-relative path that was written.
        kind: Always EntryKind.FILE.
        size: Bytes persisted, None for stream writes.
        contents: Contents that were written, None for stream writes.
        visibility: Visibility applied after the write, if one was requested.
        mimetype: MIME type guess, only filled in by update().
    """

    path: str
    kind: EntryKind = EntryKind.FILE
    size: int | None = None
    contents: bytes | None = None
    visibility: Visibility | None = None
    mimetype: str | None = None


@dataclass(frozen=True)
class ReadResult:
    """Full contents of a file."""

    path: str
    contents: bytes


@dataclass(frozen=True)
class StreamResult:
    """Open binary handle for a file; the caller owns and closes it."""

    path: str
    stream: BinaryIO


@dataclass(frozen=True)
class DirectoryResult:
    """Result of a successful directory creation."""

    path: str
    kind: EntryKind = EntryKind.DIR


@dataclass(frozen=True)
class VisibilityResult:
    """Visibility of an entry, as read or as just applied."""

    path: str
    visibility: Visibility


@dataclass(frozen=True)
class MimetypeResult:
    """Detected MIME type of a file."""

    path: str
    mimetype: str
