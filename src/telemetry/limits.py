"""Per-device speed limit editor.

The editor is a small state machine::

    Closed --open()--> Editing --apply()--> Applying --> Closed
                          |
                          +--cancel()--> Cancelled --> Closed

Editing only changes the local draft. ``apply`` sends the draft, ``remove``
clears a device's limit without going through the editor. Both are followed
by a scheduler refresh so the table picks up the router's view.
"""

import asyncio
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from ..bandix_client.exceptions import BandixError, LimitError
from ..bandix_client.models import DeviceRecord, SpeedLimit
from ..utils.logger import get_logger
from ..utils.validators import (
    DOWNLOAD_LIMIT_RANGE, UPLOAD_LIMIT_RANGE, clamp_limit_kbps
)
from config.settings import settings

logger = get_logger(__name__)

# label -> (download kbps, upload kbps)
LIMIT_PRESETS: Dict[str, Tuple[int, int]] = {
    '1 Mbps': (1000, 500),
    '5 Mbps': (5000, 2500),
    '10 Mbps': (10000, 5000),
    '25 Mbps': (25000, 10000),
    '50 Mbps': (50000, 20000),
}


class LimitState(str, Enum):
    CLOSED = 'closed'
    EDITING = 'editing'
    APPLYING = 'applying'
    CANCELLED = 'cancelled'


@dataclass(frozen=True)
class LimitRequest:
    """Draft limit for one device while the editor is open."""
    mac: str
    download_limit: int
    upload_limit: int
    enabled: bool = True
    hostname: Optional[str] = None

    def to_limit(self) -> SpeedLimit:
        return SpeedLimit(enabled=self.enabled, download_limit=self.download_limit,
                          upload_limit=self.upload_limit)


@dataclass(frozen=True)
class LimitResult:
    mac: str
    success: bool
    limit: Optional[SpeedLimit] = None
    error: Optional[str] = None


class LimitControl:
    """Open, edit and commit speed limit requests for one device at a time."""

    def __init__(self, client, scheduler=None, on_error: Callable[[str], None] = None,
                 default_download: int = None, default_upload: int = None):
        self.client = client
        self.scheduler = scheduler
        self.on_error = on_error
        self.default_download = default_download or settings.get('limits.default_download', 10000)
        self.default_upload = default_upload or settings.get('limits.default_upload', 5000)
        self._state = LimitState.CLOSED
        self._request: Optional[LimitRequest] = None

    @property
    def state(self) -> LimitState:
        return self._state

    @property
    def request(self) -> Optional[LimitRequest]:
        return self._request

    def open(self, device: DeviceRecord) -> LimitRequest:
        """Start editing a limit for ``device`` with the default ceilings."""
        if self._state is LimitState.APPLYING:
            raise LimitError("A limit request is already being applied")
        self._request = LimitRequest(
            mac=device.mac,
            hostname=device.hostname,
            download_limit=clamp_limit_kbps(self.default_download, DOWNLOAD_LIMIT_RANGE),
            upload_limit=clamp_limit_kbps(self.default_upload, UPLOAD_LIMIT_RANGE),
        )
        self._state = LimitState.EDITING
        return self._request

    def _require_editing(self) -> LimitRequest:
        if self._state is not LimitState.EDITING or self._request is None:
            raise LimitError("Limit editor is not open")
        return self._request

    def set_download(self, kbps: int) -> LimitRequest:
        request = self._require_editing()
        self._request = replace(request, download_limit=clamp_limit_kbps(kbps, DOWNLOAD_LIMIT_RANGE))
        return self._request

    def set_upload(self, kbps: int) -> LimitRequest:
        request = self._require_editing()
        self._request = replace(request, upload_limit=clamp_limit_kbps(kbps, UPLOAD_LIMIT_RANGE))
        return self._request

    def apply_preset(self, name: str) -> LimitRequest:
        """Overwrite both ceilings from a named preset."""
        request = self._require_editing()
        if name not in LIMIT_PRESETS:
            raise LimitError(f"Unknown preset: {name}")
        download, upload = LIMIT_PRESETS[name]
        self._request = replace(request, download_limit=download, upload_limit=upload)
        return self._request

    def cancel(self):
        """Discard the draft; nothing is sent."""
        if self._state is not LimitState.EDITING:
            return
        self._state = LimitState.CANCELLED
        logger.debug(f"Limit edit cancelled for {self._request.mac}")
        self._close()

    async def apply(self) -> LimitResult:
        """Send the draft. The editor closes whether or not the write succeeds."""
        request = self._require_editing()
        self._state = LimitState.APPLYING
        limit = request.to_limit()
        try:
            result = await self._send(request.mac, limit)
        finally:
            self._close()
        await self._refresh()
        return result

    async def remove(self, device: DeviceRecord) -> LimitResult:
        """Clear the limit on ``device`` directly, bypassing the editor."""
        result = await self._send(device.mac, None)
        await self._refresh()
        return result

    async def _send(self, mac: str, limit: Optional[SpeedLimit]) -> LimitResult:
        try:
            await asyncio.to_thread(self.client.set_limit, mac, limit)
        except BandixError as e:
            message = f"Failed to apply speed limit for {mac}: {e}"
            logger.error(message)
            if self.on_error:
                self.on_error(message)
            return LimitResult(mac=mac, success=False, limit=limit, error=str(e))
        return LimitResult(mac=mac, success=True, limit=limit)

    async def _refresh(self):
        if self.scheduler is not None:
            await self.scheduler.request_refresh()

    def _close(self):
        self._state = LimitState.CLOSED
        self._request = None
