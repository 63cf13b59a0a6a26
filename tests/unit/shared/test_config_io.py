"""Tests for config I/O utilities."""

import tomllib
from pathlib import Path

import pytest

from strongbox.domain.config import AdapterConfig, PermissionTable
from strongbox.domain.entities import LinkPolicy
from strongbox.shared.config_io import (
    adapter_config_to_data,
    config_data_to_adapter_config,
    get_global_config_path,
    load_config_data,
    parse_permission_value,
    save_config,
)


class TestGetGlobalConfigPath:
    """Tests for the platform-dependent global config location."""

    def test_uses_xdg_config_home(self, monkeypatch, tmp_path: Path):
        monkeypatch.setattr("strongbox.shared.config_io.platform.system", lambda: "Linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_global_config_path() == tmp_path / "strongbox" / "config.toml"

    def test_falls_back_to_home(self, monkeypatch):
        monkeypatch.setattr("strongbox.shared.config_io.platform.system", lambda: "Linux")
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert get_global_config_path() == Path.home() / ".config" / "strongbox" / "config.toml"

    def test_uses_appdata_on_windows(self, monkeypatch, tmp_path: Path):
        monkeypatch.setattr("strongbox.shared.config_io.platform.system", lambda: "Windows")
        monkeypatch.setenv("APPDATA", str(tmp_path))
        assert get_global_config_path() == tmp_path / "strongbox" / "config.toml"


class TestParsePermissionValue:
    """Tests for permission values given as ints or octal strings."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0o755, 0o755),
            ("0755", 0o755),
            ("755", 0o755),
            ("0o755", 0o755),
            (" 0700 ", 0o700),
        ],
    )
    def test_valid_values(self, value, expected):
        assert parse_permission_value(value) == expected

    @pytest.mark.parametrize("value", ["rwx", "0789", True, 7.5, None])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            parse_permission_value(value)


class TestConfigDataToAdapterConfig:
    """Tests for converting raw TOML data."""

    def test_empty_data_gives_defaults(self):
        assert config_data_to_adapter_config({}) == AdapterConfig.default()

    def test_values_override_base(self):
        base = AdapterConfig(root="/base", lock_writes=False)
        config = config_data_to_adapter_config(
            {"adapter": {"link_policy": "skip"}, "permissions": {"file_private": "0600"}},
            base=base,
        )

        assert config.root == "/base"
        assert config.lock_writes is False
        assert config.link_policy is LinkPolicy.SKIP_LINKS
        assert config.permissions.file_private == 0o600
        assert config.permissions.file_public == 0o744

    def test_invalid_link_policy_raises(self):
        with pytest.raises(ValueError, match="Invalid link_policy 'follow'"):
            config_data_to_adapter_config({"adapter": {"link_policy": "follow"}})

    def test_out_of_range_permission_raises(self):
        with pytest.raises(ValueError, match="dir_public must be between"):
            config_data_to_adapter_config({"permissions": {"dir_public": "17777"}})


class TestSaveAndLoad:
    """Tests for writing config files with tomli_w and reading them back."""

    def test_permissions_are_written_as_octal_strings(self):
        data = adapter_config_to_data(AdapterConfig(root="/srv"))
        assert data["permissions"]["file_public"] == "0744"
        assert data["adapter"]["link_policy"] == "disallow"

    def test_saved_config_loads_back(self, tmp_path: Path):
        config = AdapterConfig(
            root="/srv/storage",
            lock_writes=False,
            link_policy=LinkPolicy.SKIP_LINKS,
            permissions=PermissionTable(file_public=0o644, dir_private=0o750),
        )
        path = tmp_path / "nested" / "strongbox.toml"

        save_config(path, config)

        with path.open("rb") as f:
            assert tomllib.load(f)["adapter"]["root"] == "/srv/storage"
        assert config_data_to_adapter_config(load_config_data(path)) == config

    def test_load_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config_data(tmp_path / "missing.toml")

    def test_load_malformed_file_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("not = [valid")
        with pytest.raises(ValueError, match="Invalid TOML"):
            load_config_data(path)
