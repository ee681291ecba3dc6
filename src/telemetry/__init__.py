"""
Telemetry core - polling, history window, aggregation, ordering and writes.
"""

from .history import HistoryBuffer, DEFAULT_CAPACITY
from .aggregator import aggregate, aggregate_rates, aggregate_totals
from .sorting import SortDirection, SortField, SortSpec, sort_devices
from .store import DashboardState, StateStore
from .scheduler import PollScheduler, SchedulerState
from .limits import LimitControl, LimitRequest, LimitResult, LimitState, LIMIT_PRESETS
from .service import ServiceControl, INTERFACES

__all__ = [
    "HistoryBuffer",
    "DEFAULT_CAPACITY",
    "aggregate",
    "aggregate_rates",
    "aggregate_totals",
    "SortDirection",
    "SortField",
    "SortSpec",
    "sort_devices",
    "DashboardState",
    "StateStore",
    "PollScheduler",
    "SchedulerState",
    "LimitControl",
    "LimitRequest",
    "LimitResult",
    "LimitState",
    "LIMIT_PRESETS",
    "ServiceControl",
    "INTERFACES",
]
