"""Single owner of the dashboard state."""

import time
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from ..bandix_client.models import (
    BandwidthSnapshot, DeviceRecord, RateTotals, ServiceStatus, TotalsSnapshot,
    STATUS_UNAVAILABLE,
)
from .aggregator import aggregate
from .history import DEFAULT_CAPACITY, HistoryBuffer


@dataclass(frozen=True)
class DashboardState:
    """Everything one render needs, captured after a poll cycle."""
    devices: Tuple[DeviceRecord, ...] = ()
    history: Tuple[BandwidthSnapshot, ...] = ()
    totals: TotalsSnapshot = field(default_factory=TotalsSnapshot)
    rates: RateTotals = field(default_factory=RateTotals)
    status: ServiceStatus = STATUS_UNAVAILABLE
    # Totals as reported by /stats, None when that read failed
    reported_totals: Optional[TotalsSnapshot] = None
    poll_count: int = 0
    last_poll: Optional[float] = None
    consecutive_failures: int = 0


class StateStore:
    """Holds the current DashboardState and the history buffer behind it.

    ``commit`` builds a complete new state and swaps it in with a single
    assignment, so readers never see a half-applied cycle.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, history_source: str = 'server'):
        self.history = HistoryBuffer(capacity)
        self.history_source = history_source
        self._state = DashboardState()

    @property
    def state(self) -> DashboardState:
        return self._state

    def commit(self, devices: Sequence[DeviceRecord], history: Sequence[BandwidthSnapshot],
               status: ServiceStatus, reported_totals: Optional[TotalsSnapshot] = None,
               failures: int = 0, timestamp: float = None) -> DashboardState:
        """Apply one poll cycle's results and publish the new state."""
        timestamp = time.time() if timestamp is None else timestamp
        totals, rates = aggregate(devices)

        if self.history_source == 'derived':
            self.history.append(BandwidthSnapshot(
                timestamp=int(timestamp * 1000),
                download=rates.download,
                upload=rates.upload,
            ))
        else:
            self.history.extend(history)

        previous = self._state
        self._state = DashboardState(
            devices=tuple(devices),
            history=tuple(self.history.snapshots()),
            totals=totals,
            rates=rates,
            status=status,
            reported_totals=reported_totals,
            poll_count=previous.poll_count + 1,
            last_poll=timestamp,
            consecutive_failures=previous.consecutive_failures + 1 if failures else 0,
        )
        return self._state
