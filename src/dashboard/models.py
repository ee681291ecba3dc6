"""
Display models for the Bandix dashboard.

Contains:
- ColorTheme: Centralized color theme management
- DeviceRow: One clients-table row, already formatted for display
"""

from dataclasses import dataclass

from rich.text import Text

from src.bandix_client.models import DeviceRecord
from src.render.chart import ChartStyle, DOWNLOAD_COLOR, UPLOAD_COLOR
from src.utils.formatters import (
    format_bytes, format_kbps, format_mac, format_speed, short_hostname
)


@dataclass
class ColorTheme:
    """Centralized color theme management."""

    # Primary colors
    primary: str = "#58a6ff"
    primary_dark: str = "#388bfd"
    primary_light: str = "#79c0ff"

    # Status colors
    success: str = "#56d364"
    warning: str = "#d29922"
    error: str = "#f85149"

    # Data colors
    download: str = DOWNLOAD_COLOR
    download_dark: str = "#15803d"
    upload: str = UPLOAD_COLOR
    upload_dark: str = "#7e22ce"

    # UI colors
    background: str = "#0d1117"
    surface: str = "#161b22"
    surface_light: str = "#21262d"

    text: str = "#c9d1d9"
    text_dim: str = "#8b949e"
    text_muted: str = "#656d76"

    border: str = "#30363d"

    def chart_style(self) -> ChartStyle:
        return ChartStyle(download_color=self.download, upload_color=self.upload)


# Global theme instance
THEME = ColorTheme()


@dataclass
class DeviceRow:
    """Formatted cells for one device."""
    mac: str
    cells: tuple

    @classmethod
    def from_device(cls, device: DeviceRecord, theme: ColorTheme = THEME) -> "DeviceRow":
        name = Text(short_hostname(device.hostname), style=f"bold {theme.text}")

        address = Text(device.ip or "-", style=theme.text)
        address.append(f"\n{format_mac(device.mac)}", style=theme.text_dim)

        if device.is_limited:
            limit = device.speed_limit
            limit_text = Text(
                f"↓{format_kbps(limit.download_limit)} ↑{format_kbps(limit.upload_limit)}",
                style=theme.warning,
            )
        else:
            limit_text = Text("-", style=theme.text_muted)

        return cls(
            mac=device.mac,
            cells=(
                name,
                address,
                Text(format_speed(device.download_speed), style=f"bold {theme.download}", justify="right"),
                Text(format_speed(device.upload_speed), style=f"bold {theme.upload}", justify="right"),
                Text(format_bytes(device.download), style=theme.text_dim, justify="right"),
                Text(format_bytes(device.upload), style=theme.text_dim, justify="right"),
                limit_text,
            ),
        )
