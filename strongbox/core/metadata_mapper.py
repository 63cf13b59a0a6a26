"""Normalization of raw filesystem entries into Metadata records."""

import logging
import os
import stat

from strongbox.core.path_prefixer import PathPrefixer
from strongbox.domain.entities import EntryKind, LinkPolicy, Metadata
from strongbox.domain.exceptions import UnsupportedLinkError

logger = logging.getLogger(__name__)


class MetadataMapper:
    """Turns lstat results into Metadata, applying the link policy.

    normalize() has three outcomes:
    - a Metadata record for regular entries
    - None for a link under LinkPolicy.SKIP_LINKS (callers drop it)
    - UnsupportedLinkError for a link under LinkPolicy.DISALLOW_LINKS
    """

    def __init__(self, prefixer: PathPrefixer, link_policy: LinkPolicy) -> None:
        self._prefixer = prefixer
        self._link_policy = link_policy

    @property
    def link_policy(self) -> LinkPolicy:
        return self._link_policy

    def normalize(self, location: str, st: os.stat_result | None = None) -> Metadata | None:
        """Normalize the entry at an absolute location.

        Args:
            location: Absolute location of the entry.
            st: Result of lstat() for the entry, if the caller already has it.

        Returns:
            Metadata, or None when the entry is a link that is skipped.

        Raises:
            UnsupportedLinkError: If the entry is a link and links are disallowed.
            OSError: If the entry cannot be stat'ed.
        """
        if st is None:
            st = os.lstat(location)

        if stat.S_ISLNK(st.st_mode):
            if self._link_policy is LinkPolicy.DISALLOW_LINKS:
                logger.warning("Refusing symbolic link at %s", location)
                raise UnsupportedLinkError(location)
            logger.debug("Skipping symbolic link at %s", location)
            return None

        return self.map_stat(location, st)

    def map_stat(self, location: str, st: os.stat_result) -> Metadata:
        """Build a Metadata record from a stat result without policy checks."""
        kind = EntryKind.DIR if stat.S_ISDIR(st.st_mode) else EntryKind.FILE
        return Metadata(
            kind=kind,
            path=self._prefixer.remove_prefix(location),
            timestamp=int(st.st_mtime),
            size=st.st_size if kind is EntryKind.FILE else None,
        )
