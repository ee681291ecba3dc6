"""Offline backend producing realistic synthetic traffic.

DemoClient exposes the same read/write surface as BandixClient so the
dashboard and CLI can run without a router.
"""

import random
import threading
import time
from typing import Dict, Any, Optional, List

from .exceptions import BandixError, LimitError
from .models import (
    BandwidthSnapshot, DeviceRecord, ServiceStatus, SpeedLimit, TotalsSnapshot
)
from ..utils.logger import get_logger
from ..utils.validators import (
    validate_interface_name, validate_mac_address, validate_service_action
)

logger = get_logger(__name__, endpoint='demo')

DEMO_VERSION = '2.1.0'
DEMO_HISTORY_LENGTH = 60

# ip, mac, hostname, download, upload, download speed, upload speed
DEMO_DEVICES = [
    ('192.168.1.100', 'AA:BB:CC:DD:EE:01', 'iPhone-John', 1524288000, 256789000, 2500000, 450000),
    ('192.168.1.101', 'AA:BB:CC:DD:EE:02', 'MacBook-Pro', 8945678000, 1234567000, 15000000, 2000000),
    ('192.168.1.102', 'AA:BB:CC:DD:EE:03', 'Samsung-TV', 45678900000, 12345000, 25000000, 100000),
    ('192.168.1.103', 'AA:BB:CC:DD:EE:04', 'Gaming-PC', 125678900000, 34567890000, 45000000, 8000000),
    ('192.168.1.104', 'AA:BB:CC:DD:EE:05', 'iPad-Kids', 5678900000, 234567000, 5000000, 500000),
    ('192.168.1.105', 'AA:BB:CC:DD:EE:06', 'Smart-Speaker', 123456000, 12345000, 128000, 64000),
    ('192.168.1.106', 'AA:BB:CC:DD:EE:07', 'Work-Laptop', 23456789000, 8765432000, 8000000, 3000000),
    ('192.168.1.107', 'AA:BB:CC:DD:EE:08', 'Security-Cam', 567890000, 4567890000, 200000, 2000000),
]

DEMO_LIMITS = {
    'AA:BB:CC:DD:EE:04': SpeedLimit(enabled=True, download_limit=50000, upload_limit=10000),
}


class DemoClient:
    """In-memory stand-in for the router.

    Speeds are jittered by 0.8-1.2x on every read and the history grows by
    one random point per read, capped at 60 points. Limits, interface and
    service state written through this client are kept and reflected by
    subsequent reads.
    """

    def __init__(self, seed: Optional[int] = None, interface: str = 'br-lan'):
        self._random = random.Random(seed)
        self._lock = threading.Lock()
        self._limits: Dict[str, Optional[SpeedLimit]] = dict(DEMO_LIMITS)
        self._history: List[BandwidthSnapshot] = []
        self._interface = interface
        self._running = True
        self._started_at = time.time() - 86400
        self.api_base = 'demo'
        self.read_errors: Dict[str, str] = {}

    def close(self):
        pass

    def _now_ms(self) -> int:
        return int(time.time() * 1000)

    def _history_point(self, timestamp: int) -> BandwidthSnapshot:
        return BandwidthSnapshot(
            timestamp=timestamp,
            download=20000000 + self._random.random() * 40000000,
            upload=5000000 + self._random.random() * 10000000,
        )

    # Reads

    def get_clients(self) -> List[DeviceRecord]:
        now = self._now_ms()
        with self._lock:
            if not self._running:
                return []
            devices = []
            for ip, mac, hostname, download, upload, down_speed, up_speed in DEMO_DEVICES:
                devices.append(DeviceRecord(
                    ip=ip,
                    mac=mac,
                    hostname=hostname,
                    download=download,
                    upload=upload,
                    download_speed=int(down_speed * (0.8 + self._random.random() * 0.4)),
                    upload_speed=int(up_speed * (0.8 + self._random.random() * 0.4)),
                    last_seen=now,
                    speed_limit=self._limits.get(mac),
                ))
            return devices

    def get_history(self) -> List[BandwidthSnapshot]:
        now = self._now_ms()
        with self._lock:
            if not self._history:
                # Backfill a full window ending now
                self._history = [
                    self._history_point(now - i * 1000)
                    for i in range(DEMO_HISTORY_LENGTH - 1, -1, -1)
                ]
            elif now > self._history[-1].timestamp:
                self._history.append(self._history_point(now))
                del self._history[:-DEMO_HISTORY_LENGTH]
            return list(self._history)

    def get_status(self) -> ServiceStatus:
        with self._lock:
            return ServiceStatus(
                running=self._running,
                interface=self._interface,
                uptime=int(time.time() - self._started_at) if self._running else 0,
                version=DEMO_VERSION,
            )

    def get_totals(self) -> TotalsSnapshot:
        download = sum(device[3] for device in DEMO_DEVICES)
        upload = sum(device[4] for device in DEMO_DEVICES)
        return TotalsSnapshot(download=download, upload=upload, combined=download + upload)

    # The demo never fails a read, so the safe variants are the same calls
    fetch_clients = get_clients
    fetch_history = get_history
    fetch_status = get_status
    fetch_totals = get_totals

    # Writes

    def set_limit(self, mac: str, limit: Optional[SpeedLimit]) -> Dict[str, Any]:
        if not validate_mac_address(mac):
            raise LimitError(f"Invalid MAC address: {mac}")
        logger.info(f"[DEMO] Setting speed limit for {mac}: {limit}")
        with self._lock:
            self._limits[mac.upper()] = limit
        return {}

    def set_interface(self, interface: str) -> Dict[str, Any]:
        if not validate_interface_name(interface):
            raise BandixError(f"Invalid interface name: {interface}")
        logger.info(f"[DEMO] Setting interface to {interface}")
        with self._lock:
            self._interface = interface
        return {}

    def control_service(self, action: str) -> Dict[str, Any]:
        if not validate_service_action(action):
            raise BandixError(f"Unknown service action: {action}")
        logger.info(f"[DEMO] Service action: {action}")
        with self._lock:
            if action == 'stop':
                self._running = False
            elif not self._running or action == 'restart':
                self._running = True
                self._started_at = time.time()
        return {}
