"""
Bandix Dashboard - Live bandwidth and per-device traffic for OpenWRT routers.

Uses Textual TUI framework with a splash screen while the first poll lands.
"""

from .app import BandixDashboardApp, main
from .models import ColorTheme, THEME, DeviceRow
from .constants import CHART_ROWS, POLLING_INTERVALS

__all__ = [
    # Main app and entry point
    "BandixDashboardApp",
    "main",
    # Models
    "ColorTheme",
    "THEME",
    "DeviceRow",
    # Constants
    "CHART_ROWS",
    "POLLING_INTERVALS",
]
