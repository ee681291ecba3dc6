"""Pytest tests for the Settings class."""

import pytest
import os
from unittest.mock import patch
import tempfile

from config.settings import Settings, DEFAULT_API_PATH
from src.bandix_client.exceptions import ConfigurationError


def write_config(content):
    f = tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False)
    f.write(content)
    f.close()
    return f.name


@pytest.fixture
def clean_env():
    """Strip BANDIX_* and LOG_* overrides for the duration of a test."""
    keep = {k: v for k, v in os.environ.items() if not k.startswith(('BANDIX_', 'LOG_'))}
    with patch.dict(os.environ, keep, clear=True):
        yield


class TestSettingsDefaults:
    """Test cases for defaults when no config file exists."""

    @pytest.mark.unit
    def test_defaults(self, clean_env):
        settings = Settings(config_file='does/not/exist.yaml')

        assert settings.get('bandix.base_url') == 'http://192.168.1.1'
        assert settings.get('bandix.api_path') == DEFAULT_API_PATH
        assert settings.get('bandix.demo_mode') is False
        assert settings.get('poll.interval_ms') == 1000
        assert settings.get('history.capacity') == 60
        assert settings.get('history.source') == 'server'
        assert settings.get('limits.default_download') == 10000
        assert settings.get('limits.default_upload') == 5000
        assert settings.get_poll_interval() == 1.0
        assert settings.get_api_base() == 'http://192.168.1.1/cgi-bin/luci/admin/services/bandix'

    @pytest.mark.unit
    def test_get_missing_key(self, clean_env):
        settings = Settings(config_file='does/not/exist.yaml')
        assert settings.get('bandix.nope') is None
        assert settings.get('nope.nope', 'fallback') == 'fallback'


class TestSettingsFile:
    """Test cases for YAML loading and environment overrides."""

    @pytest.mark.unit
    def test_yaml_values(self, clean_env):
        path = write_config("""
bandix:
  base_url: "https://router.lan/"
  verify_ssl: "no"
poll:
  interval_ms: 2000
history:
  capacity: 30
  source: Derived
""")
        try:
            settings = Settings(config_file=path)

            assert settings.get('bandix.verify_ssl') is False
            assert settings.get_poll_interval() == 2.0
            assert settings.get('history.capacity') == 30
            assert settings.get('history.source') == 'derived'
            assert settings.get_api_base() == 'https://router.lan/cgi-bin/luci/admin/services/bandix'
        finally:
            os.unlink(path)

    @pytest.mark.unit
    def test_env_overrides_yaml(self, clean_env):
        path = write_config("poll:\n  interval_ms: 2000\n")
        try:
            with patch.dict(os.environ, {'BANDIX_POLL_INTERVAL_MS': '500', 'BANDIX_DEMO': 'true'}):
                settings = Settings(config_file=path)
            assert settings.get('poll.interval_ms') == 500
            assert settings.get('bandix.demo_mode') is True
        finally:
            os.unlink(path)

    @pytest.mark.unit
    def test_reload(self, clean_env):
        settings = Settings(config_file='does/not/exist.yaml')
        path = write_config("history:\n  capacity: 10\n")
        try:
            settings.reload(path)
            assert settings.config_file == path
            assert settings.get('history.capacity') == 10
        finally:
            os.unlink(path)


class TestSettingsValidate:
    """Test cases for validate()."""

    @pytest.mark.unit
    def test_valid(self, clean_env):
        assert Settings(config_file='does/not/exist.yaml').validate() == []

    @pytest.mark.unit
    def test_invalid_values(self, clean_env):
        path = write_config("""
bandix:
  base_url: "router"
history:
  source: "cache"
logging:
  level: "LOUD"
""")
        try:
            settings = Settings(config_file=path)
            with pytest.raises(ConfigurationError) as excinfo:
                settings.validate()

            message = str(excinfo.value)
            assert 'bandix:' in message
            assert 'history:' in message
            assert 'logging:' in message
        finally:
            os.unlink(path)
