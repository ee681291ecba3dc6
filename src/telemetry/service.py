"""Monitored interface selection and bandixd service control."""

import asyncio
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..bandix_client.exceptions import BandixError
from ..utils.logger import get_logger
from ..utils.validators import SERVICE_ACTIONS
from config.settings import settings

logger = get_logger(__name__)

# interface id -> (label, description)
INTERFACES: Dict[str, tuple] = {
    'br-lan': ('LAN Bridge', 'Monitor all LAN traffic'),
    'eth0': ('WAN', 'Monitor WAN interface'),
    'wlan0': ('WiFi 2.4GHz', 'Monitor 2.4GHz wireless'),
    'wlan1': ('WiFi 5GHz', 'Monitor 5GHz wireless'),
}


@dataclass(frozen=True)
class ControlResult:
    success: bool
    error: Optional[str] = None


class ServiceControl:
    """Writes that change what bandixd measures.

    Failures are reported once through ``on_error`` and never retried.
    """

    def __init__(self, client, scheduler=None, on_error: Callable[[str], None] = None,
                 settle_delay: float = None, current_interface: str = None):
        self.client = client
        self.scheduler = scheduler
        self.on_error = on_error
        self.settle_delay = settle_delay if settle_delay is not None else settings.get('service.settle_delay', 1.0)
        self.current_interface = current_interface

    def _fail(self, message: str) -> ControlResult:
        logger.error(message)
        if self.on_error:
            self.on_error(message)
        return ControlResult(success=False, error=message)

    async def select_interface(self, name: str) -> ControlResult:
        if name not in INTERFACES:
            return self._fail(f"Unknown interface: {name}")
        try:
            await asyncio.to_thread(self.client.set_interface, name)
        except BandixError as e:
            return self._fail(f"Failed to switch interface to {name}: {e}")
        self.current_interface = name
        return ControlResult(success=True)

    async def control(self, action: str) -> ControlResult:
        """Start, stop or restart the service, then refresh once it settles."""
        if action not in SERVICE_ACTIONS:
            return self._fail(f"Unknown service action: {action}")
        try:
            await asyncio.to_thread(self.client.control_service, action)
        except BandixError as e:
            return self._fail(f"Service {action} failed: {e}")

        # Give the daemon time to come up before reading from it again
        await asyncio.sleep(self.settle_delay)
        if self.scheduler is not None:
            await self.scheduler.request_refresh()
        return ControlResult(success=True)
