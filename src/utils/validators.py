"""Input validation utilities."""

import re
from typing import Union
from urllib.parse import urlparse

# Slider ranges of the limit editor, in kbps
DOWNLOAD_LIMIT_RANGE = (100, 100000)
UPLOAD_LIMIT_RANGE = (100, 50000)
LIMIT_STEP = 100

SERVICE_ACTIONS = ('start', 'stop', 'restart')

_MAC_PATTERN = re.compile(r'^[0-9A-Fa-f]{2}([:-])(?:[0-9A-Fa-f]{2}\1){4}[0-9A-Fa-f]{2}$')

def validate_mac_address(mac: str) -> bool:
    """Validate a colon- or dash-separated hardware address."""
    if not mac or not isinstance(mac, str):
        return False
    return bool(_MAC_PATTERN.match(mac))

def validate_interface_name(interface: str) -> bool:
    """Validate interface name format."""
    if not interface:
        return False

    # Common OpenWRT naming patterns
    patterns = [
        r'^br-[a-z0-9_]+$',          # br-lan
        r'^eth\d+(\.\d+)?$',         # eth0, eth0.2
        r'^wlan\d+(-\d+)?$',         # wlan0, wlan0-1
        r'^(lan|wan)\d*$',           # wan, lan1
        r'^pppoe-[a-z0-9_]+$',       # pppoe-wan
    ]

    return any(re.match(pattern, interface, re.IGNORECASE) for pattern in patterns)

def validate_limit_kbps(value: Union[str, int], limit_range: tuple = DOWNLOAD_LIMIT_RANGE) -> bool:
    """Validate a speed limit ceiling against the editor range."""
    if isinstance(value, bool):
        return False
    try:
        kbps = int(value)
    except (ValueError, TypeError):
        return False
    low, high = limit_range
    return low <= kbps <= high

def clamp_limit_kbps(value: int, limit_range: tuple) -> int:
    """Clamp a ceiling into range and snap it to the slider step."""
    low, high = limit_range
    snapped = int(round(value / LIMIT_STEP)) * LIMIT_STEP
    return max(low, min(high, snapped))

def validate_service_action(action: str) -> bool:
    """Validate a service control action."""
    return action in SERVICE_ACTIONS

def validate_base_url(url: str) -> bool:
    """Validate the router base URL."""
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)

def validate_timeout(timeout: Union[str, int, float]) -> bool:
    """Validate timeout value."""
    try:
        timeout_val = float(timeout)
        return 0 < timeout_val <= 300  # up to 5 minutes
    except (ValueError, TypeError):
        return False

def validate_log_level(level: str) -> bool:
    """Validate logging level."""
    valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    return level.upper() in valid_levels

class ConfigValidator:
    """Configuration validator class."""

    @staticmethod
    def validate_backend_config(config: dict) -> tuple[bool, list[str]]:
        """Validate router backend configuration."""
        errors = []

        if not validate_base_url(config.get('base_url', '')):
            errors.append("base_url must be an http(s) URL")

        if 'timeout' in config and not validate_timeout(config['timeout']):
            errors.append("Invalid timeout value")

        return len(errors) == 0, errors

    @staticmethod
    def validate_poll_config(config: dict) -> tuple[bool, list[str]]:
        """Validate poll scheduler configuration."""
        errors = []
        interval = config.get('interval_ms', 1000)
        if not isinstance(interval, int) or isinstance(interval, bool) or interval <= 0:
            errors.append("interval_ms must be a positive integer")
        return len(errors) == 0, errors

    @staticmethod
    def validate_history_config(config: dict) -> tuple[bool, list[str]]:
        """Validate history buffer configuration."""
        errors = []
        capacity = config.get('capacity', 60)
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity <= 0:
            errors.append("capacity must be a positive integer")
        if config.get('source', 'server') not in ('server', 'derived'):
            errors.append("source must be 'server' or 'derived'")
        return len(errors) == 0, errors

    @staticmethod
    def validate_logging_config(config: dict) -> tuple[bool, list[str]]:
        """Validate logging configuration."""
        errors = []

        # Check log level
        if 'level' in config and not validate_log_level(config['level']):
            errors.append("Invalid log level. Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")

        # Check max_bytes
        if 'max_bytes' in config:
            try:
                max_bytes = int(config['max_bytes'])
                if max_bytes <= 0:
                    errors.append("max_bytes must be positive")
            except (ValueError, TypeError):
                errors.append("max_bytes must be a number")

        # Check backup_count
        if 'backup_count' in config:
            try:
                backup_count = int(config['backup_count'])
                if backup_count < 0:
                    errors.append("backup_count must be non-negative")
            except (ValueError, TypeError):
                errors.append("backup_count must be a number")

        return len(errors) == 0, errors
