"""Device list ordering for the clients table."""

import ipaddress
import locale
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Sequence, Tuple

from ..bandix_client.models import DeviceRecord
from ..utils.formatters import short_hostname


class SortField(str, Enum):
    """Sortable columns, valued by their wire field names."""
    HOSTNAME = 'hostname'
    IP = 'ip'
    DOWNLOAD = 'download'
    UPLOAD = 'upload'
    DOWNLOAD_SPEED = 'downloadSpeed'
    UPLOAD_SPEED = 'uploadSpeed'


class SortDirection(str, Enum):
    ASC = 'asc'
    DESC = 'desc'

    def flipped(self) -> "SortDirection":
        return SortDirection.ASC if self is SortDirection.DESC else SortDirection.DESC


@dataclass(frozen=True)
class SortSpec:
    """Active sort column and direction."""
    field: SortField = SortField.DOWNLOAD_SPEED
    direction: SortDirection = SortDirection.DESC

    def toggled(self, field: SortField) -> "SortSpec":
        """Header click: same column flips direction, a new column starts descending."""
        field = SortField(field)
        if field == self.field:
            return SortSpec(field, self.direction.flipped())
        return SortSpec(field, SortDirection.DESC)


def _name_key(device: DeviceRecord) -> str:
    name = (device.hostname or '').strip()
    if name:
        name = short_hostname(name)
    return locale.strxfrm(name.casefold())


def _ip_key(device: DeviceRecord) -> Tuple[int, int]:
    if not device.ip:
        return (0, 0)
    try:
        address = ipaddress.ip_address(device.ip)
    except ValueError:
        return (0, 0)
    return (address.version, int(address))


_KEYS: Dict[SortField, Callable[[DeviceRecord], Any]] = {
    SortField.HOSTNAME: _name_key,
    SortField.IP: _ip_key,
    SortField.DOWNLOAD: lambda device: device.download or 0,
    SortField.UPLOAD: lambda device: device.upload or 0,
    SortField.DOWNLOAD_SPEED: lambda device: device.download_speed or 0,
    SortField.UPLOAD_SPEED: lambda device: device.upload_speed or 0,
}


def sort_devices(devices: Sequence[DeviceRecord], field=SortField.DOWNLOAD_SPEED,
                 direction=SortDirection.DESC) -> List[DeviceRecord]:
    """Return a new list ordered by ``field``; equal keys keep input order.

    ``field`` and ``direction`` accept enum members or their string values.
    """
    key = _KEYS[SortField(field)]
    # sorted() stays stable with reverse=True
    return sorted(devices, key=key, reverse=SortDirection(direction) is SortDirection.DESC)


def sort_by_spec(devices: Sequence[DeviceRecord], spec: SortSpec) -> List[DeviceRecord]:
    return sort_devices(devices, spec.field, spec.direction)
