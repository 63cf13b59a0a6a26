"""Config domain models for strongbox.

Adapter configuration is fixed at construction time: the root directory,
the write locking flag, the link policy and the permission table that
maps visibility onto permission bits. Per-call options travel in a
WriteConfig bag.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from strongbox.domain.entities import EntryKind, LinkPolicy, Visibility

MAX_PERMISSION_BITS = 0o7777


@dataclass(frozen=True)
class PermissionTable:
    """Permission bits for each (kind, visibility) pair.

    Attributes:
        file_public: Mode for public files (default: 0o744)
        file_private: Mode for private files (default: 0o700)
        dir_public: Mode for public directories (default: 0o755)
        dir_private: Mode for private directories (default: 0o700)

    Raises:
        ValueError: If any value is outside 0..0o7777.
    """

    file_public: int = 0o744
    file_private: int = 0o700
    dir_public: int = 0o755
    dir_private: int = 0o700

    def __post_init__(self) -> None:
        """Validate permission values after initialization."""
        for name in ("file_public", "file_private", "dir_public", "dir_private"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if not 0 <= value <= MAX_PERMISSION_BITS:
                raise ValueError(f"{name} must be between 0 and 0o7777, got {oct(value)}")

    def lookup(self, kind: EntryKind, visibility: Visibility) -> int:
        """Return the permission bits configured for kind and visibility."""
        return getattr(self, f"{EntryKind(kind).value}_{Visibility(visibility).value}")


@dataclass(frozen=True)
class AdapterConfig:
    """Construction parameters for the local adapter.

    Attributes:
        root: Directory all adapter-relative paths resolve against
        lock_writes: Take an exclusive lock while writing file contents
        link_policy: Behavior when a symbolic link is encountered
        permissions: Visibility to permission bits table

    Raises:
        ValueError: If root is empty.
    """

    root: str = "."
    lock_writes: bool = True
    link_policy: LinkPolicy = LinkPolicy.DISALLOW_LINKS
    permissions: PermissionTable = field(default_factory=PermissionTable)

    def __post_init__(self) -> None:
        """Validate adapter config after initialization."""
        if not str(self.root).strip():
            raise ValueError("root cannot be empty")
        # Accept the enum's string form coming from TOML.
        if not isinstance(self.link_policy, LinkPolicy):
            object.__setattr__(self, "link_policy", LinkPolicy(self.link_policy))

    @staticmethod
    def default() -> "AdapterConfig":
        """Create a config with all default values."""
        return AdapterConfig(permissions=PermissionTable())


class WriteConfig:
    """Generic key-lookup bag passed to write, update and create_dir.

    Only the "visibility" option is read by the local adapter; any other
    keys are carried along untouched for other backends.
    """

    def __init__(self, settings: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self._settings: dict[str, Any] = dict(settings or {})
        self._settings.update(kwargs)

    def get(self, key: str, default: Any = None) -> Any:
        return self._settings.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._settings

    @property
    def visibility(self) -> Visibility | None:
        """The requested visibility, or None when the option is absent.

        Raises:
            InvalidVisibilityError: If the option holds an unknown value.
        """
        value = self._settings.get("visibility")
        if not value:
            return None
        return Visibility.parse(value)

    def __repr__(self) -> str:
        return f"WriteConfig({self._settings!r})"
