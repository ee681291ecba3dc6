"""
Main application class and entry point for the Bandix dashboard.

Contains:
- BandixDashboardApp: Main Textual application class
- main: Main entry point function
"""

import sys

from textual.app import App

from config.settings import settings
from src.bandix_client.client import create_client
from src.bandix_client.exceptions import ConfigurationError
from src.telemetry.limits import LimitControl
from src.telemetry.scheduler import PollScheduler
from src.telemetry.service import INTERFACES, ServiceControl
from src.telemetry.store import DashboardState, StateStore
from src.utils.logger import get_logger, suppress_console_logging

from .screens import DashboardScreen, SplashScreen
from .styles import get_css, get_modal_css, get_splash_css

# Suppress console logging for TUI - logs still go to file
suppress_console_logging()

logger = get_logger(__name__)


class BandixDashboardApp(App):
    """Live Bandix dashboard.

    The app owns the whole pipeline: one backend client, the state store,
    the poll scheduler running on Textual's event loop, and the limit and
    service controls that write through the same client.
    """

    TITLE = "Bandix Network Monitor"
    ENABLE_COMMAND_PALETTE = False

    # Combine CSS from all screens
    CSS = get_splash_css() + get_css() + get_modal_css()

    SCREENS = {
        "splash": SplashScreen,
        "dashboard": DashboardScreen,
    }

    def __init__(self, client=None, demo: bool = None):
        super().__init__()
        self.client = client or create_client(demo=demo)
        self.store = StateStore(
            capacity=settings.get('history.capacity', 60),
            history_source=settings.get('history.source', 'server'),
        )
        self.scheduler = PollScheduler(self.client, self.store)
        self.limit_control = LimitControl(self.client, self.scheduler, on_error=self.report_error)
        self.service_control = ServiceControl(self.client, self.scheduler, on_error=self.report_error)
        self.scheduler.add_listener(self._on_state)

    def on_mount(self) -> None:
        """Show the splash screen and start polling."""
        self.push_screen("splash")
        self.scheduler.start()

    def report_error(self, message: str) -> None:
        self.notify(message, severity="error", timeout=6)

    def _on_state(self, state: DashboardState) -> None:
        if state.status.interface in INTERFACES:
            self.service_control.current_interface = state.status.interface

        if isinstance(self.screen, SplashScreen):
            # The dashboard renders the current state itself when mounted
            self.switch_screen("dashboard")
            return

        for screen in self.screen_stack:
            if isinstance(screen, DashboardScreen):
                screen.show_state(state)

    async def shutdown(self) -> None:
        """Stop polling, release the client and exit."""
        await self.scheduler.stop()
        self.client.close()
        self.exit()


def main(demo: bool = None):
    """Main entry point; also used as the console script, so --demo is read from argv."""
    if demo is None and "--demo" in sys.argv[1:]:
        demo = True
    try:
        settings.validate()
        app = BandixDashboardApp(demo=demo)
        app.run()

    except KeyboardInterrupt:
        # Clean exit on Ctrl+C
        pass
    except ConfigurationError as e:
        from rich.console import Console
        Console(stderr=True).print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)
    except Exception as e:
        from rich.console import Console
        console = Console()
        console.print(f"[red]Error: {e}[/red]")
        logger.exception("Fatal error")
        sys.exit(1)
