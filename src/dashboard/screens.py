"""
Screen classes for the Bandix dashboard.

Contains:
- SplashScreen: Shown until the first poll cycle lands
- DashboardScreen: Stat cards, bandwidth chart, clients table and controls
- LimitScreen: Modal speed limit editor for one device
"""

from datetime import datetime
from typing import List, Optional

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Center, Container, Horizontal, Middle, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, DataTable, Footer, Input, Select, Static

from rich.text import Text

from src.bandix_client.exceptions import LimitError
from src.bandix_client.models import DeviceRecord
from src.telemetry.limits import LIMIT_PRESETS
from src.telemetry.service import INTERFACES
from src.telemetry.sorting import SortDirection, SortField, SortSpec, sort_by_spec
from src.telemetry.store import DashboardState
from src.utils.formatters import (
    format_bytes, format_duration, format_kbps, format_speed, short_hostname
)
from src.utils.logger import get_logger
from src.utils.validators import DOWNLOAD_LIMIT_RANGE, UPLOAD_LIMIT_RANGE

from .constants import CHART_ROWS, POLLING_INTERVALS, SORT_KEYS, TABLE_COLUMNS
from .models import THEME, DeviceRow
from .widgets import BandwidthChart, IndeterminateProgress, StatCard

logger = get_logger(__name__)


# ============================================================================
# Splash Screen - Initial Loading
# ============================================================================

class SplashScreen(Screen):
    """Displayed while the first poll cycle is in flight."""

    BINDINGS = [
        Binding("q", "quit_app", "Quit", show=False),
        Binding("escape", "quit_app", "Quit", show=False),
    ]

    def compose(self) -> ComposeResult:
        with Center():
            with Middle():
                with Vertical(id="connect-box"):
                    yield Static("B A N D I X", classes="connect-banner")
                    yield Static("Network Monitor", classes="connect-tagline")
                    yield IndeterminateProgress(id="connect-spinner")
                    yield Static(
                        f"Connecting to {self.app.client.api_base}...",
                        id="connect-message",
                    )

    async def action_quit_app(self) -> None:
        await self.app.shutdown()


# ============================================================================
# Dashboard Screen - Live View
# ============================================================================

class DashboardScreen(Screen):
    """Live view of the router's bandwidth and clients."""

    BINDINGS = [
        Binding("q", "quit_app", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("l", "set_limit", "Set Limit"),
        Binding("x", "remove_limit", "Remove Limit"),
        Binding("escape", "quit_app", "Exit", show=False),
    ] + [
        Binding(key, f"sort('{field.value}')", f"Sort {field.value}", show=False)
        for key, field in SORT_KEYS
    ]

    def __init__(self):
        super().__init__()
        self.sort_spec = SortSpec()
        # Devices in table order, so the cursor row maps back to a device
        self._rows: List[DeviceRecord] = []

    def compose(self) -> ComposeResult:
        with Container(id="dashboard-container"):
            yield Static("[dim]Waiting for status...[/dim]", id="header-status")

            with Horizontal(id="stat-cards"):
                yield StatCard("Download Speed", color=THEME.download, id="card-download-speed")
                yield StatCard("Upload Speed", color=THEME.upload, id="card-upload-speed")
                yield StatCard("Total Downloaded", color=THEME.primary, id="card-total")
                yield StatCard("Active Devices", color=THEME.primary, id="card-devices")

            with Vertical(id="chart-panel"):
                yield Static("", id="chart-legend")
                yield BandwidthChart(rows=CHART_ROWS, id="bandwidth-chart")

            with Horizontal(id="main-grid"):
                yield DataTable(id="clients-table", cursor_type="row", zebra_stripes=True)
                with Vertical(id="sidebar"):
                    yield Static("Monitor Interface", classes="sidebar-title")
                    yield Select[str](
                        [(f"{label} ({name})", name) for name, (label, _) in INTERFACES.items()],
                        prompt="Interface",
                        id="interface-select",
                    )
                    yield Static("Service Control", classes="sidebar-title")
                    yield Static("", id="service-status")
                    with Horizontal(id="service-buttons"):
                        yield Button("Start", id="service-start", variant="success")
                        yield Button("Stop", id="service-stop", variant="error")
                        yield Button("Restart", id="service-restart", variant="warning")
                    yield Static("Poll Interval", classes="sidebar-title")
                    yield Select[int](
                        [(label, value) for value, label in POLLING_INTERVALS],
                        value=self._interval_ms(),
                        allow_blank=False,
                        id="polling-select",
                    )

        yield Footer()

    def _interval_ms(self) -> int:
        interval = int(round(self.app.scheduler.interval * 1000))
        choices = [value for value, _ in POLLING_INTERVALS]
        # Fall back to the closest offered choice for custom intervals
        return min(choices, key=lambda value: abs(value - interval))

    def on_mount(self) -> None:
        self._setup_columns()
        self.show_state(self.app.store.state)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _setup_columns(self) -> None:
        table = self.query_one("#clients-table", DataTable)
        table.clear(columns=True)
        for key, label in TABLE_COLUMNS:
            if key == self.sort_spec.field.value:
                arrow = "▼" if self.sort_spec.direction is SortDirection.DESC else "▲"
                table.add_column(Text(f"{label} {arrow}", style=f"bold {THEME.primary}"), key=key)
            else:
                table.add_column(label, key=key)

    def show_state(self, state: DashboardState) -> None:
        """Redraw everything from a committed state."""
        if not self.is_mounted:
            return
        self._update_header(state)
        self._update_cards(state)
        self._update_chart(state)
        self._rebuild_table(state)
        self._update_service(state)

    def _update_header(self, state: DashboardState) -> None:
        status = state.status
        if status.running:
            indicator = f"[bold {THEME.success}]●[/bold {THEME.success}] bandixd running"
        else:
            indicator = f"[bold {THEME.error}]●[/bold {THEME.error}] bandixd stopped"

        parts = [indicator, f"[dim]interface[/dim] {status.interface}"]
        if status.running:
            parts.append(f"[dim]uptime[/dim] {format_duration(status.uptime)}")
        if status.version:
            parts.append(f"[dim]v{status.version}[/dim]")

        if state.last_poll:
            last = datetime.fromtimestamp(state.last_poll).strftime("%H:%M:%S")
            parts.append(f"[dim]poll #{state.poll_count} @ {last}[/dim]")
        if state.consecutive_failures:
            parts.append(
                f"[bold {THEME.warning}]{state.consecutive_failures} failed poll(s)[/bold {THEME.warning}]"
            )

        self.query_one("#header-status", Static).update("  │  ".join(parts))

    def _update_cards(self, state: DashboardState) -> None:
        self.query_one("#card-download-speed", StatCard).set_value(format_speed(state.rates.download))
        self.query_one("#card-upload-speed", StatCard).set_value(format_speed(state.rates.upload))
        self.query_one("#card-total", StatCard).set_value(
            format_bytes(state.totals.download),
            f"↑ {format_bytes(state.totals.upload)} uploaded",
        )
        count = len(state.devices)
        self.query_one("#card-devices", StatCard).set_value(str(count), "connected now")

    def _update_chart(self, state: DashboardState) -> None:
        latest = state.history[-1] if state.history else None
        legend = Text("Real-time Bandwidth   ", style=f"bold {THEME.text}")
        legend.append("● Down: ", style=THEME.download)
        legend.append(format_speed(latest.download if latest else 0), style=f"bold {THEME.download}")
        legend.append("   ● Up: ", style=THEME.upload)
        legend.append(format_speed(latest.upload if latest else 0), style=f"bold {THEME.upload}")
        self.query_one("#chart-legend", Static).update(legend)
        self.query_one("#bandwidth-chart", BandwidthChart).set_history(state.history)

    def _rebuild_table(self, state: DashboardState) -> None:
        table = self.query_one("#clients-table", DataTable)
        selected = self.selected_device()
        self._rows = sort_by_spec(state.devices, self.sort_spec)

        table.clear()
        cursor = 0
        for index, device in enumerate(self._rows):
            row = DeviceRow.from_device(device)
            table.add_row(*row.cells, key=row.mac, height=2)
            if selected is not None and device.mac == selected.mac:
                cursor = index
        if self._rows:
            table.move_cursor(row=cursor)

    def _update_service(self, state: DashboardState) -> None:
        status = state.status
        color = THEME.success if status.running else THEME.error
        word = "running" if status.running else "stopped"
        self.query_one("#service-status", Static).update(f"bandixd is [{color}]{word}[/{color}]")

        select = self.query_one("#interface-select", Select)
        if status.interface in INTERFACES and select.value != status.interface:
            select.value = status.interface

    def selected_device(self) -> Optional[DeviceRecord]:
        table = self.query_one("#clients-table", DataTable)
        if not self._rows or table.cursor_row is None:
            return None
        if 0 <= table.cursor_row < len(self._rows):
            return self._rows[table.cursor_row]
        return None

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def action_sort(self, field: str) -> None:
        self.sort_spec = self.sort_spec.toggled(SortField(field))
        self._setup_columns()
        self._rebuild_table(self.app.store.state)

    def on_data_table_header_selected(self, event: DataTable.HeaderSelected) -> None:
        key = event.column_key.value
        if key in {field.value for field in SortField}:
            self.action_sort(key)

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def action_refresh(self) -> None:
        self.run_worker(self._manual_refresh(), group="refresh")

    async def _manual_refresh(self) -> None:
        if not await self.app.scheduler.trigger():
            self.notify("Refresh already in progress", severity="warning", timeout=2)

    @on(Select.Changed, "#polling-select")
    def on_polling_changed(self, event: Select.Changed) -> None:
        if not isinstance(event.value, int):
            return
        self.app.scheduler.interval = event.value / 1000
        logger.info(f"Poll interval changed to {event.value} ms")

    # ------------------------------------------------------------------
    # Speed limits
    # ------------------------------------------------------------------

    def action_set_limit(self) -> None:
        device = self.selected_device()
        if device is None:
            self.notify("Select a device first", severity="warning")
            return
        try:
            self.app.limit_control.open(device)
        except LimitError as e:
            self.notify(str(e), severity="warning")
            return
        self.app.push_screen(LimitScreen(device), self._on_limit_closed)

    def _on_limit_closed(self, apply: bool) -> None:
        if apply:
            self.run_worker(self._apply_limit(), group="writes")
        else:
            self.app.limit_control.cancel()

    async def _apply_limit(self) -> None:
        result = await self.app.limit_control.apply()
        if result.success:
            self.notify(
                f"Limit set for {result.mac}: ↓{format_kbps(result.limit.download_limit)} "
                f"↑{format_kbps(result.limit.upload_limit)}",
                severity="information",
            )

    def action_remove_limit(self) -> None:
        device = self.selected_device()
        if device is None:
            self.notify("Select a device first", severity="warning")
            return
        if not device.is_limited:
            self.notify(f"{short_hostname(device.hostname)} has no speed limit", severity="warning")
            return
        self.run_worker(self._remove_limit(device), group="writes")

    async def _remove_limit(self, device: DeviceRecord) -> None:
        result = await self.app.limit_control.remove(device)
        if result.success:
            self.notify(f"Limit removed for {short_hostname(device.hostname)}", severity="information")

    # ------------------------------------------------------------------
    # Interface and service control
    # ------------------------------------------------------------------

    @on(Select.Changed, "#interface-select")
    def on_interface_changed(self, event: Select.Changed) -> None:
        if not isinstance(event.value, str):
            return
        # Ignore the echo of syncing the select to the reported interface
        if event.value == self.app.service_control.current_interface:
            return
        self.run_worker(self._select_interface(event.value), group="writes")

    async def _select_interface(self, name: str) -> None:
        result = await self.app.service_control.select_interface(name)
        if result.success:
            self.notify(f"Monitoring {INTERFACES[name][0]} ({name})", severity="information")

    @on(Button.Pressed, "#service-buttons Button")
    def on_service_button(self, event: Button.Pressed) -> None:
        action = event.button.id.replace("service-", "")
        self.notify(f"Service {action} requested...", timeout=2)
        self.run_worker(self.app.service_control.control(action), group="writes")

    async def action_quit_app(self) -> None:
        await self.app.shutdown()


# ============================================================================
# Limit Screen - Speed Limit Editor
# ============================================================================

class LimitScreen(ModalScreen[bool]):
    """Edit the draft held by the app's LimitControl.

    Dismisses with True to apply, False to cancel.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, device: DeviceRecord):
        super().__init__()
        self.device = device

    def compose(self) -> ComposeResult:
        request = self.app.limit_control.request
        with Vertical(id="limit-dialog"):
            yield Static("Speed Limit", id="limit-title")
            yield Static(f"{short_hostname(self.device.hostname)}  ({self.device.mac})", id="limit-device")

            yield Static("Quick Presets", classes="limit-label")
            with Horizontal(id="limit-presets"):
                for index, name in enumerate(LIMIT_PRESETS):
                    yield Button(name, id=f"preset-{index}", name=name)

            low, high = DOWNLOAD_LIMIT_RANGE
            yield Static("Download limit (kbps)", classes="limit-label")
            yield Input(str(request.download_limit), type="integer", id="download-input")
            yield Static(f"{low} - {high}, step 100", classes="limit-hint")

            low, high = UPLOAD_LIMIT_RANGE
            yield Static("Upload limit (kbps)", classes="limit-label")
            yield Input(str(request.upload_limit), type="integer", id="upload-input")
            yield Static(f"{low} - {high}, step 100", classes="limit-hint")

            with Horizontal(id="limit-actions"):
                yield Button("Cancel", id="limit-cancel")
                yield Button("Apply Limit", id="limit-apply", variant="warning")

    def _show_request(self) -> None:
        request = self.app.limit_control.request
        self.query_one("#download-input", Input).value = str(request.download_limit)
        self.query_one("#upload-input", Input).value = str(request.upload_limit)

    @on(Button.Pressed, "#limit-presets Button")
    def on_preset(self, event: Button.Pressed) -> None:
        self.app.limit_control.apply_preset(event.button.name)
        self._show_request()

    def _read_inputs(self) -> bool:
        control = self.app.limit_control
        try:
            download = int(self.query_one("#download-input", Input).value)
            upload = int(self.query_one("#upload-input", Input).value)
        except ValueError:
            self.notify("Limits must be whole numbers of kbps", severity="error")
            return False
        control.set_download(download)
        control.set_upload(upload)
        return True

    @on(Button.Pressed, "#limit-apply")
    def on_apply(self) -> None:
        if self._read_inputs():
            self.dismiss(True)

    @on(Input.Submitted)
    def on_submit(self) -> None:
        self.on_apply()

    @on(Button.Pressed, "#limit-cancel")
    def on_cancel(self) -> None:
        self.action_cancel()

    def action_cancel(self) -> None:
        self.dismiss(False)
