"""Strongbox - local directory storage adapter."""

from strongbox.adapters.fs.local import LocalAdapter
from strongbox.domain.config import AdapterConfig, PermissionTable, WriteConfig
from strongbox.domain.entities import EntryKind, LinkPolicy, Metadata, Visibility
from strongbox.domain.exceptions import (
    PathOutsideRootError,
    RootNotReadableError,
    StrongboxDomainError,
    UnsupportedLinkError,
)

__all__ = [
    "AdapterConfig",
    "EntryKind",
    "LinkPolicy",
    "LocalAdapter",
    "Metadata",
    "PathOutsideRootError",
    "PermissionTable",
    "RootNotReadableError",
    "StrongboxDomainError",
    "UnsupportedLinkError",
    "Visibility",
    "WriteConfig",
]
