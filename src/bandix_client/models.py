"""
Data models for the Bandix backend payloads.

Contains:
- SpeedLimit: Requested per-device throughput ceiling
- DeviceRecord: One monitored client with its counters and optional limit
- BandwidthSnapshot: One timestamped aggregate throughput sample
- TotalsSnapshot: Cumulative byte totals across all devices
- RateTotals: Instantaneous rate totals across all devices
- ServiceStatus: State of the bandixd service

Wire payloads use camelCase keys; from_dict/to_dict convert between the two.
"""

from dataclasses import dataclass
from typing import Dict, Any, List, Optional

from ..utils.parsers import (
    parse_bool, parse_int, parse_str, require_list, require_mapping
)
from .exceptions import PayloadError


@dataclass(frozen=True)
class SpeedLimit:
    """Speed limit ceilings in kbps."""
    enabled: bool
    download_limit: int
    upload_limit: int

    @classmethod
    def from_dict(cls, data: Any) -> Optional["SpeedLimit"]:
        if data is None:
            return None
        data = require_mapping(data, "speedLimit")
        return cls(
            enabled=parse_bool(data, 'enabled'),
            download_limit=parse_int(data, 'downloadLimit'),
            upload_limit=parse_int(data, 'uploadLimit'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'enabled': self.enabled,
            'downloadLimit': self.download_limit,
            'uploadLimit': self.upload_limit,
        }


@dataclass(frozen=True)
class DeviceRecord:
    """Traffic counters for a single client, keyed by MAC address."""
    mac: str
    ip: Optional[str] = None
    hostname: Optional[str] = None

    # Cumulative byte counters
    download: int = 0
    upload: int = 0

    # Instantaneous rates in bytes per second
    download_speed: int = 0
    upload_speed: int = 0

    # Milliseconds since epoch
    last_seen: int = 0

    speed_limit: Optional[SpeedLimit] = None

    @property
    def is_limited(self) -> bool:
        return self.speed_limit is not None and self.speed_limit.enabled

    @classmethod
    def from_dict(cls, data: Any) -> "DeviceRecord":
        data = require_mapping(data, "client")
        mac = parse_str(data, 'mac')
        if not mac:
            raise PayloadError("Client entry has no MAC address")
        return cls(
            mac=mac,
            ip=parse_str(data, 'ip'),
            hostname=parse_str(data, 'hostname'),
            download=parse_int(data, 'download'),
            upload=parse_int(data, 'upload'),
            download_speed=parse_int(data, 'downloadSpeed'),
            upload_speed=parse_int(data, 'uploadSpeed'),
            last_seen=parse_int(data, 'lastSeen'),
            speed_limit=SpeedLimit.from_dict(data.get('speedLimit')),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'ip': self.ip,
            'mac': self.mac,
            'download': self.download,
            'upload': self.upload,
            'downloadSpeed': self.download_speed,
            'uploadSpeed': self.upload_speed,
            'lastSeen': self.last_seen,
        }
        if self.hostname is not None:
            result['hostname'] = self.hostname
        if self.speed_limit is not None:
            result['speedLimit'] = self.speed_limit.to_dict()
        return result


@dataclass(frozen=True)
class BandwidthSnapshot:
    """Aggregate download/upload rate (bytes/s) at one instant."""
    timestamp: int
    download: float
    upload: float

    @classmethod
    def from_dict(cls, data: Any) -> "BandwidthSnapshot":
        data = require_mapping(data, "history point")
        if data.get('timestamp') is None:
            raise PayloadError("History point has no timestamp")
        return cls(
            timestamp=parse_int(data, 'timestamp'),
            download=max(0, parse_int(data, 'download')),
            upload=max(0, parse_int(data, 'upload')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'timestamp': self.timestamp, 'download': self.download, 'upload': self.upload}


@dataclass(frozen=True)
class TotalsSnapshot:
    """Cumulative bytes across all devices."""
    download: int = 0
    upload: int = 0
    combined: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "TotalsSnapshot":
        data = require_mapping(data, "stats")
        download = parse_int(data, 'download')
        upload = parse_int(data, 'upload')
        return cls(download=download, upload=upload,
                   combined=parse_int(data, 'combined', download + upload))

    def to_dict(self) -> Dict[str, Any]:
        return {'download': self.download, 'upload': self.upload, 'combined': self.combined}


@dataclass(frozen=True)
class RateTotals:
    """Summed instantaneous rates in bytes per second."""
    download: int = 0
    upload: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'download': self.download, 'upload': self.upload}


@dataclass(frozen=True)
class ServiceStatus:
    """bandixd service state as reported by the router."""
    running: bool = False
    interface: str = "unknown"
    uptime: int = 0
    version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ServiceStatus":
        data = require_mapping(data, "status")
        return cls(
            running=parse_bool(data, 'running'),
            interface=parse_str(data, 'interface', 'unknown'),
            uptime=max(0, parse_int(data, 'uptime')),
            version=parse_str(data, 'version'),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {'running': self.running, 'interface': self.interface, 'uptime': self.uptime}
        if self.version is not None:
            result['version'] = self.version
        return result


# Fallback used whenever the status read fails
STATUS_UNAVAILABLE = ServiceStatus(running=False, interface="unknown", uptime=0)


def parse_devices(payload: Any) -> List[DeviceRecord]:
    """Parse a /clients payload. Any malformed entry fails the whole payload."""
    return [DeviceRecord.from_dict(item) for item in require_list(payload, "clients")]


def parse_history(payload: Any) -> List[BandwidthSnapshot]:
    """Parse a /history payload into snapshots ordered by timestamp."""
    points = [BandwidthSnapshot.from_dict(item) for item in require_list(payload, "history")]
    return sorted(points, key=lambda point: point.timestamp)
