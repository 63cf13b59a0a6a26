"""Mapping between visibility and OS permission bits."""

import stat

from strongbox.domain.config import PermissionTable
from strongbox.domain.entities import EntryKind, Visibility

# Group-read and other-read bits
PUBLIC_READ_MASK = 0o044


class VisibilityMapper:
    """Bidirectional mapping between Visibility and permission bits.

    The forward direction is an exact lookup in the permission table. The
    reverse direction is lossy: any mode granting group or other read
    access is public, everything else is private, whatever the kind.
    """

    def __init__(self, permissions: PermissionTable | None = None) -> None:
        self._permissions = permissions or PermissionTable()

    @property
    def permissions(self) -> PermissionTable:
        return self._permissions

    def permissions_for(self, kind: EntryKind, visibility: Visibility | str) -> int:
        """Return the permission bits for an entry kind and visibility.

        Raises:
            InvalidVisibilityError: If visibility is not a known value.
        """
        return self._permissions.lookup(kind, Visibility.parse(visibility))

    def visibility_for(self, kind: EntryKind, mode: int) -> Visibility:
        """Classify permission bits (or a full st_mode) as public or private."""
        if stat.S_IMODE(mode) & PUBLIC_READ_MASK:
            return Visibility.PUBLIC
        return Visibility.PRIVATE
