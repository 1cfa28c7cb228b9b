"""Tests for the YAML provider config loader."""
import os
import tempfile

import pytest

from openwrt_provider.config import (
    ConfigFileError,
    find_config,
    load_provider_config,
)
from openwrt_provider.provider import OpenWrtProvider
from openwrt_provider.values import UNKNOWN

from conftest import RecordingFactory


def _write(content: str) -> str:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(content)
        return f.name


class TestLoadProviderConfig:
    """Tests for load_provider_config."""

    @pytest.fixture
    def temp_config(self):
        """Create a temporary config file for testing."""
        path = _write("""
provider:
  host: 192.168.1.1
  username: root
  password: !unknown
  insecure: true
""")
        yield path
        os.unlink(path)

    def test_load(self, temp_config):
        """Provider block is loaded with the unknown tag resolved."""
        config = load_provider_config(temp_config)
        assert config["host"] == "192.168.1.1"
        assert config["username"] == "root"
        assert config["password"] is UNKNOWN
        assert config["insecure"] is True

    def test_known_after_apply_marker(self):
        """The '(known after apply)' string is treated as unknown."""
        path = _write('provider:\n  host: "(known after apply)"\n')
        try:
            assert load_provider_config(path)["host"] is UNKNOWN
        finally:
            os.unlink(path)

    def test_empty_file(self):
        """An empty file yields an empty provider block."""
        path = _write("")
        try:
            assert load_provider_config(path) == {}
        finally:
            os.unlink(path)

    def test_invalid_yaml(self):
        """Broken YAML raises ConfigFileError."""
        path = _write("provider: [unclosed\n")
        try:
            with pytest.raises(ConfigFileError):
                load_provider_config(path)
        finally:
            os.unlink(path)

    def test_provider_not_mapping(self):
        """A non-mapping provider block raises ConfigFileError."""
        path = _write("provider:\n  - host\n")
        try:
            with pytest.raises(ConfigFileError):
                load_provider_config(path)
        finally:
            os.unlink(path)

    def test_find_config_env(self, monkeypatch, temp_config):
        """OPENWRT_PROVIDER_CONFIG takes precedence."""
        monkeypatch.setenv("OPENWRT_PROVIDER_CONFIG", temp_config)
        assert find_config() == temp_config

    def test_find_config_missing(self, monkeypatch, tmp_path):
        """No config anywhere raises FileNotFoundError."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        with pytest.raises(FileNotFoundError):
            find_config()

    @pytest.mark.asyncio
    async def test_unknown_from_file_blocks_configure(self, temp_config, fake_client):
        """An unknown value loaded from YAML stops provider configuration."""
        factory = RecordingFactory(fake_client)
        provider = OpenWrtProvider(client_factory=factory)
        client, diags = await provider.configure(load_provider_config(temp_config))

        assert client is None
        assert factory.calls == []
        assert [d.attribute_path for d in diags.errors()] == ["password"]
