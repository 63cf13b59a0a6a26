"""TOML-based configuration provider.

Loads the adapter configuration with global config fallback.

Config loading priority (highest to lowest):
1. Local: an explicit config file (e.g. ./strongbox.toml)
2. Global: ~/.config/strongbox/config.toml (user defaults)
3. Built-in defaults
"""

import logging
from pathlib import Path

from strongbox.domain.config import AdapterConfig
from strongbox.shared.config_io import (
    config_data_to_adapter_config,
    get_global_config_path,
    load_config_data,
)

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Each file that exists is applied over the config built so far, so
    local values override global ones and missing values keep their
    defaults. Malformed files are logged and ignored.
    """

    def load(self, local_path: Path | None = None) -> AdapterConfig:
        """Load configuration with global fallback.

        Args:
            local_path: Optional project config file

        Returns:
            AdapterConfig with merged global/local values or defaults
        """
        config = AdapterConfig.default()

        global_path = get_global_config_path()
        if global_path.exists():
            config = self._apply(config, global_path, "global")

        if local_path is not None and local_path.exists():
            config = self._apply(config, local_path, "local")

        return config

    def _apply(self, config: AdapterConfig, path: Path, label: str) -> AdapterConfig:
        try:
            data = load_config_data(path)
            merged = config_data_to_adapter_config(data, base=config)
        except (FileNotFoundError, ValueError) as e:
            logger.warning("Failed to parse %s config at %s: %s. Ignoring it.", label, path, e)
            return config
        logger.debug("Loaded %s config from %s", label, path)
        return merged
