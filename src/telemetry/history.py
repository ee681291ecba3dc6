"""Fixed-capacity sliding window of bandwidth snapshots."""

from collections import deque
from typing import Iterable, Iterator, Optional, Sequence

from ..bandix_client.models import BandwidthSnapshot

DEFAULT_CAPACITY = 60


class SnapshotView(Sequence):
    """Read-only ordered view over a buffer's contents.

    Iterating twice yields the same points; the view is pinned to the
    contents at the time it was taken.
    """

    def __init__(self, points: Sequence[BandwidthSnapshot]):
        self._points = tuple(points)

    def __getitem__(self, index):
        return self._points[index]

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        return f"SnapshotView({len(self._points)} points)"


class HistoryBuffer:
    """Timestamp-ordered FIFO of at most ``capacity`` snapshots."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError("History capacity must be positive")
        self.capacity = capacity
        self._points = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[BandwidthSnapshot]:
        return iter(self.snapshots())

    def latest(self) -> Optional[BandwidthSnapshot]:
        return self._points[-1] if self._points else None

    def append(self, snapshot: BandwidthSnapshot) -> bool:
        """Add a snapshot at the tail, evicting the oldest past capacity.

        Returns False (and keeps the buffer unchanged) unless the snapshot is
        strictly newer than the current tail.
        """
        tail = self.latest()
        if tail is not None and snapshot.timestamp <= tail.timestamp:
            return False
        self._points.append(snapshot)
        return True

    def extend(self, series: Iterable[BandwidthSnapshot]) -> int:
        """Merge an externally provided series.

        Only points strictly newer than the current tail are taken, in
        timestamp order, and the buffer keeps the most recent ``capacity``
        of them. Returns how many points were added.
        """
        tail = self.latest()
        cutoff = tail.timestamp if tail is not None else None
        fresh = sorted(
            (point for point in series if cutoff is None or point.timestamp > cutoff),
            key=lambda point: point.timestamp,
        )
        self._points.extend(fresh)
        return len(fresh)

    def clear(self):
        self._points.clear()

    def snapshots(self) -> SnapshotView:
        return SnapshotView(self._points)
