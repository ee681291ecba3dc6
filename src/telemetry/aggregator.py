"""Totals derived from the current device list."""

from typing import Iterable, Tuple

from ..bandix_client.models import DeviceRecord, RateTotals, TotalsSnapshot


def aggregate_totals(devices: Iterable[DeviceRecord]) -> TotalsSnapshot:
    """Sum cumulative byte counters over all devices."""
    download = 0
    upload = 0
    for device in devices:
        download += device.download
        upload += device.upload
    return TotalsSnapshot(download=download, upload=upload, combined=download + upload)


def aggregate_rates(devices: Iterable[DeviceRecord]) -> RateTotals:
    """Sum instantaneous rates over all devices."""
    download = 0
    upload = 0
    for device in devices:
        download += device.download_speed
        upload += device.upload_speed
    return RateTotals(download=download, upload=upload)


def aggregate(devices: Iterable[DeviceRecord]) -> Tuple[TotalsSnapshot, RateTotals]:
    devices = list(devices)
    return aggregate_totals(devices), aggregate_rates(devices)
