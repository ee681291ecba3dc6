"""
Custom widgets for the Bandix dashboard.

Contains:
- IndeterminateProgress: Animated indeterminate progress bar
- StatCard: Titled single-value summary card
- BandwidthChart: Braille area chart of the history window
"""

from typing import Optional, Sequence

from rich.progress import Progress, BarColumn
from rich.text import Text
from textual.events import Resize
from textual.widgets import Static

from src.bandix_client.models import BandwidthSnapshot
from src.render.chart import render_chart
from src.render.surfaces import BrailleSurface

from .constants import CHART_ROWS
from .models import THEME


class IndeterminateProgress(Static):
    """Animated indeterminate progress bar using Rich Progress."""

    def __init__(self, id: str = None, classes: str = None):
        super().__init__("", id=id, classes=classes)
        self._bar = Progress(
            BarColumn(bar_width=40, style=THEME.download_dark, complete_style=THEME.download, pulse_style=THEME.download)
        )
        self._task = self._bar.add_task("", total=None)

    def on_mount(self) -> None:
        self._update_timer = self.set_interval(1 / 30, self._update_progress)

    def _update_progress(self) -> None:
        self.update(self._bar)


class StatCard(Static):
    """Summary card: a dim title, a large colored value and an optional subtitle."""

    def __init__(self, title: str, color: str = THEME.primary, id: str = None):
        self.card_title = title
        self.value_color = color
        super().__init__(self._card_text("-"), id=id)

    def _card_text(self, value: str, subtitle: Optional[str] = None) -> Text:
        text = Text(self.card_title, style=THEME.text_dim)
        text.append(f"\n{value}", style=f"bold {self.value_color}")
        if subtitle:
            text.append(f"\n{subtitle}", style=THEME.text_muted)
        return text

    def set_value(self, value: str, subtitle: Optional[str] = None) -> None:
        self.update(self._card_text(value, subtitle))


class BandwidthChart(Static):
    """Area chart of download/upload rates over the history window.

    The surface is rebuilt from the widget's current width on every redraw,
    so resizing the terminal simply redraws at the new size.
    """

    def __init__(self, rows: int = CHART_ROWS, id: str = None, classes: str = None):
        super().__init__("", id=id, classes=classes)
        self.chart_rows = rows
        self._history: Sequence[BandwidthSnapshot] = ()

    def set_history(self, history: Sequence[BandwidthSnapshot]) -> None:
        self._history = tuple(history)
        self._redraw()

    def on_resize(self, event: Resize) -> None:
        self._redraw()

    def _redraw(self) -> None:
        columns = max(1, self.content_size.width)
        surface = BrailleSurface(columns, self.chart_rows, background=THEME.surface)
        if render_chart(self._history, surface, THEME.chart_style()):
            self.update(surface.to_text())
        else:
            placeholder = Text("Waiting for bandwidth history...", style=THEME.text_dim)
            placeholder.append("\n" * (self.chart_rows - 1))
            self.update(placeholder)
