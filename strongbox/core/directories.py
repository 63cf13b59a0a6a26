"""Directory creation with exact permission bits.

The umask is process-wide state; it is replaced only inside scoped_umask
and always put back, even when the work done under it fails.
"""

import os
from collections.abc import Iterator
from contextlib import contextmanager


@contextmanager
def scoped_umask(mask: int = 0) -> Iterator[int]:
    """Install mask for the duration of the block and restore the previous one.

    Args:
        mask: Umask to install (default: 0, so requested modes apply exactly).

    Yields:
        The umask that was in effect before the block.
    """
    previous = os.umask(mask)
    try:
        yield previous
    finally:
        os.umask(previous)


def make_dirs(location: str, mode: int) -> None:
    """Create a directory and any missing ancestors, all with the same mode.

    Unlike os.makedirs, mode applies to every directory created, not just
    the last one. Call under scoped_umask(0) for the mode to apply exactly.

    Raises:
        OSError: If a directory cannot be created, or a non-directory is in the way.
    """
    parent = os.path.dirname(location)
    if parent and parent != location and not os.path.isdir(parent):
        make_dirs(parent, mode)
    try:
        os.mkdir(location, mode)
    except FileExistsError:
        if not os.path.isdir(location):
            raise


def ensure_directory(location: str, mode: int) -> None:
    """Create location with mode unless it already is a directory.

    Raises:
        OSError: If the directory cannot be created.
    """
    if os.path.isdir(location):
        return
    with scoped_umask(0):
        make_dirs(location, mode)
