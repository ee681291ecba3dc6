"""
Formatting utilities for bandwidth and traffic values.

All functions are pure and return display strings.
"""

from typing import Optional

BYTE_UNITS = ['B', 'KB', 'MB', 'GB', 'TB']


def _trim(value: float, decimals: int) -> str:
    """Fixed-point rendering with trailing zeros dropped (1.50 -> 1.5, 2.00 -> 2)."""
    text = f"{value:.{decimals}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def format_bytes(num_bytes: float, decimals: int = 2) -> str:
    """Format bytes to human readable string (1024-based)."""
    if num_bytes <= 0:
        return "0 B"

    value = float(num_bytes)
    index = 0
    while value >= 1024 and index < len(BYTE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{_trim(value, decimals)} {BYTE_UNITS[index]}"


def format_speed(bytes_per_sec: float) -> str:
    """Format bytes per second to human readable speed string."""
    return f"{format_bytes(bytes_per_sec, 1)}/s"


def format_kbps(kbps: int) -> str:
    """Format a kbps limit ceiling."""
    if kbps >= 1000:
        return f"{kbps / 1000:.1f} Mbps"
    return f"{kbps} Kbps"


def format_duration(seconds: int) -> str:
    """Format seconds as e.g. '1d 2h 30m'."""
    seconds = max(0, int(seconds))
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    return " ".join(parts) if parts else "< 1m"


def format_mac(mac: str) -> str:
    """Format a MAC address in upper case."""
    return mac.upper()


def short_hostname(hostname: Optional[str]) -> str:
    """Strip the domain suffix from a hostname ('tv.lan' -> 'tv')."""
    if not hostname:
        return "Unknown"
    return hostname.split('.')[0]
