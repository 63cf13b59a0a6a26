"""Directory listing and recursive deletion.

Listings walk self-first (a directory precedes its descendants) and
deletion walks children-first (a directory follows its descendants).
Beyond that, entries come out in filesystem iteration order, which is
not stable across runs or platforms.
"""

import logging
import os
import re
from collections.abc import Iterator

from strongbox.core.metadata_mapper import MetadataMapper
from strongbox.core.path_prefixer import PathPrefixer, normalize_relative
from strongbox.domain.entities import Metadata

logger = logging.getLogger(__name__)

# Relative paths that are, or end in, a "." or ".." segment
_DOT_ENTRY = re.compile(r"(^|/|\\)\.{1,2}$")


def is_dot_entry(path: str) -> bool:
    """Check whether a relative path points at a "." or ".." entry."""
    return bool(_DOT_ENTRY.search(path))


def _scan(location: str) -> list[os.DirEntry]:
    with os.scandir(location) as it:
        return list(it)


class TraversalEngine:
    """Flat and recursive listings plus children-first deletion."""

    def __init__(self, prefixer: PathPrefixer, mapper: MetadataMapper) -> None:
        self._prefixer = prefixer
        self._mapper = mapper

    def list(self, directory: str = "", recursive: bool = False) -> list[Metadata] | None:
        """List the entries of a directory.

        Args:
            directory: Adapter-relative directory; "" lists the root.
            recursive: Walk the whole subtree instead of immediate children.

        Returns:
            Metadata for each entry, skipped links left out. Empty when the
            directory does not exist or is not a directory. None when any
            directory in the walk cannot be scanned or an entry cannot be
            stat'ed, so a partial listing is never passed off as complete.

        Raises:
            UnsupportedLinkError: If a link is met and links are disallowed.
        """
        location = self._prefixer.apply_prefix(directory)
        if not os.path.isdir(location):
            return []

        entries = self._walk_self_first(location) if recursive else self._children(location)

        result: list[Metadata] = []
        try:
            for entry in entries:
                if is_dot_entry(self._prefixer.remove_prefix(entry.path)):
                    continue
                try:
                    st = entry.stat(follow_symlinks=False)
                except FileNotFoundError:
                    # Removed since the directory was scanned.
                    continue
                metadata = self._mapper.normalize(entry.path, st)
                if metadata is not None:
                    result.append(metadata)
        except OSError as e:
            logger.debug("Failed to list %s: %s", location, e)
            return None
        return result

    def _children(self, location: str) -> Iterator[os.DirEntry]:
        try:
            entries = _scan(location)
        except FileNotFoundError:
            # Removed since its parent was scanned.
            return
        yield from entries

    def _walk_self_first(self, location: str) -> Iterator[os.DirEntry]:
        for entry in self._children(location):
            yield entry
            if entry.is_dir(follow_symlinks=False):
                yield from self._walk_self_first(entry.path)

    def delete_dir(self, dirname: str) -> bool:
        """Delete a directory and everything below it.

        Descendants are removed before their parent and the directory
        itself goes last. A failure part way leaves whatever was already
        removed, removed.

        Args:
            dirname: Adapter-relative directory.

        Returns:
            True on success; False if dirname is the root itself, is not a
            directory, or any removal fails.
        """
        if not normalize_relative(dirname):
            logger.debug("Not deleting the storage root")
            return False

        location = self._prefixer.apply_prefix(dirname)
        if os.path.islink(location) or not os.path.isdir(location):
            logger.debug("Not deleting %s: not a directory", location)
            return False

        try:
            for path, is_dir in walk_children_first(location):
                if is_dir:
                    os.rmdir(path)
                else:
                    os.unlink(path)
            os.rmdir(location)
        except OSError as e:
            logger.debug("Failed to delete directory %s: %s", location, e)
            return False
        return True


def walk_children_first(location: str) -> Iterator[tuple[str, bool]]:
    """Yield (path, is_dir) for every descendant, children before parents.

    Links are reported as files and never followed.

    Raises:
        OSError: If a directory cannot be scanned.
    """
    for entry in _scan(location):
        if entry.is_dir(follow_symlinks=False):
            yield from walk_children_first(entry.path)
            yield entry.path, True
        else:
            yield entry.path, False
