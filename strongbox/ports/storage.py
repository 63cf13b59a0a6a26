"""Storage adapter port interface.

Defines the contract every storage backend satisfies. Expected OS-level
failures are reported through return values (False or None) so callers
check results instead of catching exceptions; only contract violations
such as a disallowed symbolic link are raised.
"""

from typing import BinaryIO, Protocol

from strongbox.domain.config import WriteConfig
from strongbox.domain.entities import (
    DirectoryResult,
    Metadata,
    MimetypeResult,
    ReadResult,
    StreamResult,
    Visibility,
    VisibilityResult,
    WriteResult,
)


class StorageAdapter(Protocol):
    """Protocol for storage backends."""

    def has(self, path: str) -> bool:
        """Check whether an entry exists at path.

        Args:
            path: Adapter-relative path.

        Returns:
            True if a file or directory exists, False otherwise.
        """
        ...

    def write(
        self, path: str, contents: bytes | str, config: WriteConfig | None = None
    ) -> WriteResult | None:
        """Write a new file, creating missing parent directories.

        Args:
            path: Adapter-relative destination path.
            contents: Bytes to persist; str is encoded as UTF-8.
            config: Options; "visibility" is applied after writing.

        Returns:
            WriteResult with the persisted size, or None on failure.
        """
        ...

    def write_stream(
        self, path: str, source: BinaryIO, config: WriteConfig | None = None
    ) -> WriteResult | None:
        """Write a new file from a readable binary stream.

        The source stream stays open; the caller owns it.

        Returns:
            WriteResult carrying path and visibility, or None on failure.
        """
        ...

    def update(
        self, path: str, contents: bytes | str, config: WriteConfig | None = None
    ) -> WriteResult | None:
        """Overwrite a file. The result carries a MIME type guess."""
        ...

    def update_stream(
        self, path: str, source: BinaryIO, config: WriteConfig | None = None
    ) -> WriteResult | None:
        """Overwrite a file from a readable binary stream."""
        ...

    def read(self, path: str) -> ReadResult | None:
        """Read a whole file, or return None on failure."""
        ...

    def read_stream(self, path: str) -> StreamResult | None:
        """Open a file for reading; the caller must close the stream."""
        ...

    def rename(self, path: str, new_path: str) -> bool:
        """Move an entry, creating the destination's parent directory."""
        ...

    def copy(self, path: str, new_path: str) -> bool:
        """Copy a file, creating the destination's parent directory."""
        ...

    def delete(self, path: str) -> bool:
        """Delete a single file."""
        ...

    def list_contents(
        self, directory: str = "", recursive: bool = False
    ) -> list[Metadata] | None:
        """List entries under directory.

        Returns:
            Metadata for each entry; empty if directory does not exist;
            None if part of the subtree cannot be read.

        Raises:
            UnsupportedLinkError: If a link is found and links are disallowed.
        """
        ...

    def get_metadata(self, path: str) -> Metadata | None:
        """Return normalized metadata, or None on failure."""
        ...

    def get_size(self, path: str) -> Metadata | None:
        """Return metadata carrying the size, or None on failure."""
        ...

    def get_timestamp(self, path: str) -> Metadata | None:
        """Return metadata carrying the timestamp, or None on failure."""
        ...

    def get_mimetype(self, path: str) -> MimetypeResult | None:
        """Return the detected MIME type, or None on failure."""
        ...

    def get_visibility(self, path: str) -> VisibilityResult | None:
        """Return the visibility derived from permission bits."""
        ...

    def set_visibility(self, path: str, visibility: Visibility | str) -> VisibilityResult | None:
        """Apply the permission bits for visibility, or return None on failure."""
        ...

    def create_dir(self, dirname: str, config: WriteConfig | None = None) -> DirectoryResult | None:
        """Create a directory and its ancestors, or return None on failure."""
        ...

    def delete_dir(self, dirname: str) -> bool:
        """Recursively delete a directory, or return False on failure."""
        ...
