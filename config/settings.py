import os
import yaml
from typing import Dict, Any, Optional, List

DEFAULT_API_PATH = '/cgi-bin/luci/admin/services/bandix'
HISTORY_SOURCES = ('server', 'derived')


class Settings:
    """Configuration management for the Bandix dashboard."""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or os.getenv('BANDIX_CONFIG_FILE', 'config/config.yaml')
        self.config = self._load_config()

    def reload(self, config_file: Optional[str] = None):
        """Re-read configuration, optionally from a different file."""
        if config_file:
            self.config_file = config_file
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file and environment variables."""
        config = {}

        # Load from YAML file if exists
        if os.path.exists(self.config_file):
            with open(self.config_file, 'r') as f:
                config = yaml.safe_load(f) or {}

        bandix = config.get('bandix', {})
        poll = config.get('poll', {})
        history = config.get('history', {})
        limits = config.get('limits', {})
        service = config.get('service', {})
        logging_config = config.get('logging', {})

        # Override with environment variables
        config.update({
            'bandix': {
                'base_url': os.getenv('BANDIX_URL', bandix.get('base_url', 'http://192.168.1.1')),
                'api_path': os.getenv('BANDIX_API_PATH', bandix.get('api_path', DEFAULT_API_PATH)),
                'timeout': float(os.getenv('BANDIX_TIMEOUT', bandix.get('timeout', 5))),
                'verify_ssl': self._parse_bool(os.getenv('BANDIX_VERIFY_SSL', bandix.get('verify_ssl', True))),
                'demo_mode': self._parse_bool(os.getenv('BANDIX_DEMO', bandix.get('demo_mode', False))),
            },
            'poll': {
                'interval_ms': int(os.getenv('BANDIX_POLL_INTERVAL_MS', poll.get('interval_ms', 1000))),
            },
            'history': {
                'capacity': int(os.getenv('BANDIX_HISTORY_CAPACITY', history.get('capacity', 60))),
                'source': os.getenv('BANDIX_HISTORY_SOURCE', history.get('source', 'server')).lower(),
            },
            'limits': {
                'default_download': int(limits.get('default_download', 10000)),
                'default_upload': int(limits.get('default_upload', 5000)),
            },
            'service': {
                'settle_delay': float(service.get('settle_delay', 1.0)),
            },
            'logging': {
                'level': os.getenv('LOG_LEVEL', logging_config.get('level', 'INFO')),
                'file': os.getenv('LOG_FILE', logging_config.get('file', 'logs/bandix_dashboard.log')),
                'max_bytes': int(os.getenv('LOG_MAX_BYTES', logging_config.get('max_bytes', 10485760))),
                'backup_count': int(os.getenv('LOG_BACKUP_COUNT', logging_config.get('backup_count', 5))),
            },
        })

        return config

    def validate(self) -> List[str]:
        """Validate the loaded configuration.

        Returns the list of problems found; raises ConfigurationError when
        the dashboard cannot run with these values.
        """
        # Imported here to keep config importable without the package on sys.path
        from src.bandix_client.exceptions import ConfigurationError
        from src.utils.validators import ConfigValidator

        errors = []
        for section, check in (
            ('bandix', ConfigValidator.validate_backend_config),
            ('poll', ConfigValidator.validate_poll_config),
            ('history', ConfigValidator.validate_history_config),
            ('logging', ConfigValidator.validate_logging_config),
        ):
            valid, section_errors = check(self.config.get(section, {}))
            if not valid:
                errors.extend(f"{section}: {error}" for error in section_errors)

        if errors:
            raise ConfigurationError("; ".join(errors))
        return errors

    def get_poll_interval(self) -> float:
        """Poll interval in seconds."""
        return self.get('poll.interval_ms', 1000) / 1000.0

    def get_api_base(self) -> str:
        """Full URL prefix for all backend endpoints."""
        base_url = self.get('bandix.base_url', '').rstrip('/')
        api_path = '/' + self.get('bandix.api_path', DEFAULT_API_PATH).strip('/')
        return f"{base_url}{api_path}"

    def _parse_bool(self, value: Any) -> bool:
        """Parse boolean value from various formats."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ('true', '1', 'yes', 'on')
        if isinstance(value, (int, float)):
            return bool(value)
        return False

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

# Global settings instance
settings = Settings()
