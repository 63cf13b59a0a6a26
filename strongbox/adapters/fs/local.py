"""Local filesystem storage adapter.

Implements the StorageAdapter port against a directory on the local disk.
Every adapter-relative path resolves under a fixed root; OS failures are
reported as False / None results, never raised.
"""

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import BinaryIO

from strongbox.adapters.mime.detector import ContentMimeTypeDetector
from strongbox.core.directories import ensure_directory, make_dirs, scoped_umask
from strongbox.core.metadata_mapper import MetadataMapper
from strongbox.core.path_prefixer import PathPrefixer
from strongbox.core.path_prefixer import dirname as relative_dirname
from strongbox.core.traversal import TraversalEngine
from strongbox.core.visibility import VisibilityMapper
from strongbox.domain.config import AdapterConfig, PermissionTable, WriteConfig
from strongbox.domain.entities import (
    DirectoryResult,
    EntryKind,
    LinkPolicy,
    Metadata,
    MimetypeResult,
    ReadResult,
    StreamResult,
    Visibility,
    VisibilityResult,
    WriteResult,
)
from strongbox.domain.exceptions import PathOutsideRootError, RootNotReadableError
from strongbox.ports.mime import MimeTypeDetector

if os.name == "posix":
    import fcntl

logger = logging.getLogger(__name__)


class LocalAdapter:
    """Storage adapter for a directory on a local disk.

    Args:
        root: Root directory; created (with public directory permissions)
            when missing.
        lock_writes: Hold an exclusive lock while writing file contents.
        link_policy: Skip or refuse symbolic links.
        permissions: Override of the visibility to permission bits table.
        mime_detector: MIME detection service (default: content + extension).

    Raises:
        RootNotReadableError: If the root cannot be created or read.
    """

    def __init__(
        self,
        root: str | Path,
        lock_writes: bool = True,
        link_policy: LinkPolicy = LinkPolicy.DISALLOW_LINKS,
        permissions: PermissionTable | None = None,
        mime_detector: MimeTypeDetector | None = None,
    ) -> None:
        self._visibility = VisibilityMapper(permissions)
        self._lock_writes = lock_writes
        self._link_policy = link_policy

        real_root = self._ensure_root(str(root))
        self._prefixer = PathPrefixer(real_root)
        self._mapper = MetadataMapper(self._prefixer, link_policy)
        self._traversal = TraversalEngine(self._prefixer, self._mapper)

        self._mime = mime_detector or ContentMimeTypeDetector()

    @classmethod
    def from_config(
        cls, config: AdapterConfig, mime_detector: MimeTypeDetector | None = None
    ) -> "LocalAdapter":
        """Build an adapter from an AdapterConfig."""
        return cls(
            config.root,
            lock_writes=config.lock_writes,
            link_policy=config.link_policy,
            permissions=config.permissions,
            mime_detector=mime_detector,
        )

    def _ensure_root(self, root: str) -> str:
        location = os.path.abspath(os.path.expanduser(root))
        if not os.path.isdir(location):
            logger.info("Creating storage root %s", location)
            try:
                ensure_directory(location, self._dir_mode(Visibility.PUBLIC))
            except OSError as e:
                raise RootNotReadableError(root) from e

        real_root = os.path.realpath(location)
        if not os.path.isdir(real_root) or not os.access(real_root, os.R_OK):
            raise RootNotReadableError(root)
        return real_root

    @property
    def root(self) -> str:
        return self._prefixer.root

    @property
    def link_policy(self) -> LinkPolicy:
        return self._link_policy

    @property
    def lock_writes(self) -> bool:
        return self._lock_writes

    def apply_prefix(self, path: str) -> str:
        """Absolute location of an adapter-relative path."""
        return self._prefixer.apply_prefix(path)

    def remove_prefix(self, location: str) -> str:
        """Adapter-relative path of an absolute location."""
        return self._prefixer.remove_prefix(location)

    def _dir_mode(self, visibility: Visibility) -> int:
        return self._visibility.permissions_for(EntryKind.DIR, visibility)

    def _ensure_parent(self, location: str) -> None:
        ensure_directory(os.path.dirname(location), self._dir_mode(Visibility.PUBLIC))

    # ------------------------------------------------------------------
    # Existence
    # ------------------------------------------------------------------

    def has(self, path: str) -> bool:
        try:
            return os.path.exists(self._prefixer.apply_prefix(path))
        except PathOutsideRootError:
            return False

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def _put_contents(self, location: str, data: bytes) -> int:
        """Write data to location, truncating it, under the write lock if enabled."""
        if not (self._lock_writes and os.name == "posix"):
            with open(location, "wb") as f:
                return f.write(data)

        # Truncate only once the lock is held.
        fd = os.open(location, os.O_WRONLY | os.O_CREAT, 0o666)
        with os.fdopen(fd, "wb") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.truncate(0)
                written = f.write(data)
                f.flush()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return written

    def write(
        self, path: str, contents: bytes | str, config: WriteConfig | None = None
    ) -> WriteResult | None:
        """Write a file, creating missing parent directories.

        A visibility in config is applied as a separate chmod once the
        contents are on disk. If that chmod fails the write is reported
        as failed, although the contents stay written.

        Returns:
            WriteResult with the persisted size, or None on failure.
        """
        visibility = (config or WriteConfig()).visibility
        location = self._prefixer.apply_prefix(path)
        data = contents.encode("utf-8") if isinstance(contents, str) else bytes(contents)

        try:
            self._ensure_parent(location)
            size = self._put_contents(location, data)
        except OSError as e:
            logger.debug("Failed to write %s: %s", location, e)
            return None

        if visibility is not None and self.set_visibility(path, visibility) is None:
            return None

        return WriteResult(path=path, size=size, contents=data, visibility=visibility)

    def write_stream(
        self, path: str, source: BinaryIO, config: WriteConfig | None = None
    ) -> WriteResult | None:
        """Write a file from a readable binary stream.

        The destination handle is closed before returning; a failure to
        close counts as a failed write, as does a failure to apply the
        requested visibility. The source stays open.

        Returns:
            WriteResult carrying path and visibility, or None on failure.
        """
        visibility = (config or WriteConfig()).visibility
        location = self._prefixer.apply_prefix(path)

        try:
            self._ensure_parent(location)
            with open(location, "w+b") as dest:
                shutil.copyfileobj(source, dest)
        except OSError as e:
            logger.debug("Failed to write stream to %s: %s", location, e)
            return None

        if visibility is not None and self.set_visibility(path, visibility) is None:
            return None

        return WriteResult(path=path, visibility=visibility)

    def update(
        self, path: str, contents: bytes | str, config: WriteConfig | None = None
    ) -> WriteResult | None:
        """Overwrite a file.

        Behaves like write(), and additionally guesses the MIME type of the
        new contents. write() deliberately does not.

        Returns:
            WriteResult with size and mimetype, or None on failure.
        """
        data = contents.encode("utf-8") if isinstance(contents, str) else bytes(contents)
        mimetype = self._mime.guess(path, data)

        result = self.write(path, data, config)
        if result is None:
            return None
        return WriteResult(
            path=result.path,
            size=result.size,
            contents=result.contents,
            visibility=result.visibility,
            mimetype=mimetype,
        )

    def update_stream(
        self, path: str, source: BinaryIO, config: WriteConfig | None = None
    ) -> WriteResult | None:
        return self.write_stream(path, source, config)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read(self, path: str) -> ReadResult | None:
        location = self._prefixer.apply_prefix(path)
        try:
            with open(location, "rb") as f:
                contents = f.read()
        except OSError as e:
            logger.debug("Failed to read %s: %s", location, e)
            return None
        return ReadResult(path=path, contents=contents)

    def read_stream(self, path: str) -> StreamResult | None:
        """Open a file for reading.

        Returns:
            StreamResult whose stream the caller must close, or None if the
            file cannot be opened.
        """
        location = self._prefixer.apply_prefix(path)
        try:
            stream = open(location, "rb")
        except OSError as e:
            logger.debug("Failed to open %s: %s", location, e)
            return None
        return StreamResult(path=path, stream=stream)

    # ------------------------------------------------------------------
    # Moving, copying, deleting
    # ------------------------------------------------------------------

    def rename(self, path: str, new_path: str) -> bool:
        location = self._prefixer.apply_prefix(path)
        destination = self._prefixer.apply_prefix(new_path)
        parent = self._prefixer.apply_prefix(relative_dirname(new_path))
        try:
            ensure_directory(parent, self._dir_mode(Visibility.PUBLIC))
            os.replace(location, destination)
        except OSError as e:
            logger.debug("Failed to rename %s to %s: %s", location, destination, e)
            return False
        return True

    def copy(self, path: str, new_path: str) -> bool:
        location = self._prefixer.apply_prefix(path)
        destination = self._prefixer.apply_prefix(new_path)
        try:
            self._ensure_parent(destination)
            shutil.copyfile(location, destination)
        except OSError as e:
            logger.debug("Failed to copy %s to %s: %s", location, destination, e)
            return False
        return True

    def delete(self, path: str) -> bool:
        location = self._prefixer.apply_prefix(path)
        try:
            os.unlink(location)
        except OSError as e:
            logger.debug("Failed to delete %s: %s", location, e)
            return False
        return True

    # ------------------------------------------------------------------
    # Listing and metadata
    # ------------------------------------------------------------------

    def list_contents(
        self, directory: str = "", recursive: bool = False
    ) -> list[Metadata] | None:
        return self._traversal.list(directory, recursive)

    def get_metadata(self, path: str) -> Metadata | None:
        """Stat and normalize a single entry.

        Returns:
            Metadata, or None if the entry is missing or is a skipped link.

        Raises:
            UnsupportedLinkError: If the entry is a link and links are disallowed.
        """
        location = self._prefixer.apply_prefix(path)
        try:
            return self._mapper.normalize(location)
        except OSError as e:
            logger.debug("Failed to stat %s: %s", location, e)
            return None

    def get_size(self, path: str) -> Metadata | None:
        return self.get_metadata(path)

    def get_timestamp(self, path: str) -> Metadata | None:
        return self.get_metadata(path)

    def get_mimetype(self, path: str) -> MimetypeResult | None:
        location = self._prefixer.apply_prefix(path)
        mimetype = self._mime.detect_file(Path(location))
        if mimetype is None:
            return None
        return MimetypeResult(path=path, mimetype=mimetype)

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def get_visibility(self, path: str) -> VisibilityResult | None:
        location = self._prefixer.apply_prefix(path)
        try:
            mode = os.stat(location).st_mode
        except OSError as e:
            logger.debug("Failed to stat %s: %s", location, e)
            return None
        kind = EntryKind.DIR if stat.S_ISDIR(mode) else EntryKind.FILE
        return VisibilityResult(path=path, visibility=self._visibility.visibility_for(kind, mode))

    def set_visibility(self, path: str, visibility: Visibility | str) -> VisibilityResult | None:
        """Apply the permission bits for visibility to a file or directory.

        Raises:
            InvalidVisibilityError: If visibility is not a known value.
        """
        visibility = Visibility.parse(visibility)
        location = self._prefixer.apply_prefix(path)
        kind = EntryKind.DIR if os.path.isdir(location) else EntryKind.FILE
        try:
            os.chmod(location, self._visibility.permissions_for(kind, visibility))
        except OSError as e:
            logger.debug("Failed to chmod %s: %s", location, e)
            return None
        return VisibilityResult(path=path, visibility=visibility)

    # ------------------------------------------------------------------
    # Directories
    # ------------------------------------------------------------------

    def create_dir(self, dirname: str, config: WriteConfig | None = None) -> DirectoryResult | None:
        """Create a directory and missing ancestors.

        The mode comes from the visibility in config (default: public) and
        is applied exactly by clearing the umask for the duration.

        Returns:
            DirectoryResult, or None on failure.
        """
        config = config or WriteConfig()
        location = self._prefixer.apply_prefix(dirname)
        mode = self._dir_mode(config.visibility or Visibility.PUBLIC)

        with scoped_umask(0):
            if not os.path.isdir(location):
                try:
                    make_dirs(location, mode)
                except OSError as e:
                    logger.debug("Failed to create directory %s: %s", location, e)
                    return None

        return DirectoryResult(path=dirname)

    def delete_dir(self, dirname: str) -> bool:
        return self._traversal.delete_dir(dirname)
