"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of AdapterConfig to/from
TOML format. A config file looks like:

    [adapter]
    root = "/srv/storage"
    lock_writes = true
    link_policy = "skip"

    [permissions]
    file_public = "0744"
    dir_public = "0755"
"""

import os
import platform
import tomllib  # Built-in Python 3.11+
from dataclasses import replace
from pathlib import Path
from typing import Any

import tomli_w

from strongbox.domain.config import AdapterConfig
from strongbox.domain.entities import LinkPolicy

CONFIG_FILENAME = "strongbox.toml"


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/strongbox/config.toml or ~/.config/strongbox/config.toml
    - Windows: %APPDATA%/strongbox/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "strongbox" / "config.toml"
        return Path.home() / ".config" / "strongbox" / "config.toml"
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        return Path(xdg_config) / "strongbox" / "config.toml"
    return Path.home() / ".config" / "strongbox" / "config.toml"


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def parse_permission_value(value: Any) -> int:
    """Parse a permission value given as an int or an octal string.

    Strings are always read as octal ("0755", "755" and "0o755" are equal).

    Raises:
        ValueError: If the value is not an int or octal string.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid permission value: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("0o"):
            text = text[2:]
        try:
            return int(text, 8)
        except ValueError:
            raise ValueError(f"Invalid octal permission value: {value!r}") from None
    raise ValueError(f"Invalid permission value: {value!r}")


def config_data_to_adapter_config(
    data: dict[str, Any], base: AdapterConfig | None = None
) -> AdapterConfig:
    """Convert raw config data to AdapterConfig, over base values.

    Args:
        data: Dictionary with "adapter" and "permissions" sections
        base: Config supplying values missing from data (default: built-ins)

    Raises:
        ValueError: If any value fails validation.
    """
    base = base or AdapterConfig.default()
    adapter_data = data.get("adapter", {})
    permission_data = data.get("permissions", {})

    permissions = replace(
        base.permissions,
        **{
            name: parse_permission_value(permission_data[name])
            for name in ("file_public", "file_private", "dir_public", "dir_private")
            if name in permission_data
        },
    )

    link_policy = adapter_data.get("link_policy", base.link_policy)
    try:
        link_policy = LinkPolicy(link_policy)
    except ValueError:
        valid = ", ".join(p.value for p in LinkPolicy)
        raise ValueError(f"Invalid link_policy '{link_policy}'. Valid values: {valid}") from None

    return AdapterConfig(
        root=str(adapter_data.get("root", base.root)),
        lock_writes=bool(adapter_data.get("lock_writes", base.lock_writes)),
        link_policy=link_policy,
        permissions=permissions,
    )


def adapter_config_to_data(config: AdapterConfig) -> dict[str, Any]:
    """Convert AdapterConfig to TOML-ready data with octal permission strings."""
    permissions = config.permissions
    return {
        "adapter": {
            "root": str(config.root),
            "lock_writes": config.lock_writes,
            "link_policy": config.link_policy.value,
        },
        "permissions": {
            name: f"{getattr(permissions, name):04o}"
            for name in ("file_public", "file_private", "dir_public", "dir_private")
        },
    }


def save_config(path: Path, config: AdapterConfig) -> None:
    """Write an AdapterConfig to a TOML file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(adapter_config_to_data(config), f)
