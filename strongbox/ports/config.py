"""Configuration provider port.

Defines the interface for loading the adapter configuration.
"""

from pathlib import Path
from typing import Protocol

from strongbox.domain.config import AdapterConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self, local_path: Path | None = None) -> AdapterConfig:
        """Load configuration, optionally from a project config file.

        Args:
            local_path: Config file overriding global values, if any

        Returns:
            AdapterConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if config files are missing or invalid.
        """
        ...
