"""Path prefixing between adapter-relative paths and absolute locations.

All transforms here are pure string operations: nothing touches the
filesystem, so symbolic links inside the root are not resolved.
"""

import os

from strongbox.domain.exceptions import PathOutsideRootError

_SEPARATORS = "/\\"


def normalize_relative(path: str) -> str:
    """Normalize an adapter-relative path to its canonical forward-slash form.

    Both separator styles are accepted. Empty and "." segments are dropped
    and ".." removes the preceding segment.

    Args:
        path: Adapter-relative path.

    Returns:
        Canonical path without leading or trailing slashes ("" for the root).

    Raises:
        PathOutsideRootError: If a ".." segment climbs above the root.
    """
    parts: list[str] = []
    for segment in path.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not parts:
                raise PathOutsideRootError(path)
            parts.pop()
            continue
        parts.append(segment)
    return "/".join(parts)


def dirname(path: str) -> str:
    """Return the parent of an adapter-relative path ("" for top-level entries)."""
    normalized = normalize_relative(path)
    if "/" not in normalized:
        return ""
    return normalized.rsplit("/", 1)[0]


class PathPrefixer:
    """Joins a fixed root with relative paths and strips it back off.

    Args:
        root: Absolute root directory.
        separator: Platform directory separator (default: os.sep).
    """

    def __init__(self, root: str, separator: str = os.sep) -> None:
        self._separator = separator
        stripped = root.rstrip(_SEPARATORS)
        # A bare "/" strips to nothing and still denotes the filesystem root.
        self._root = stripped or separator
        self._prefix = stripped + separator

    @property
    def root(self) -> str:
        return self._root

    @property
    def prefix(self) -> str:
        """Root with exactly one trailing separator."""
        return self._prefix

    def apply_prefix(self, path: str) -> str:
        """Resolve an adapter-relative path to an absolute location.

        Args:
            path: Adapter-relative path; "" designates the root.

        Returns:
            Absolute location using the platform separator.

        Raises:
            PathOutsideRootError: If the path escapes the root.
        """
        relative = normalize_relative(path)
        if not relative:
            return self._root
        return self._prefix + relative.replace("/", self._separator)

    def remove_prefix(self, location: str) -> str:
        """Convert an absolute location back to an adapter-relative path.

        Locations outside the root are returned with only their outer
        separators trimmed.

        Args:
            location: Absolute location, as produced by apply_prefix or a walk.

        Returns:
            Forward-slash relative path without leading or trailing separators.
        """
        if location.startswith(self._prefix):
            location = location[len(self._prefix):]
        elif location.rstrip(_SEPARATORS) == self._root.rstrip(_SEPARATORS):
            location = ""
        return location.strip(_SEPARATORS).replace(self._separator, "/")
