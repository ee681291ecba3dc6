"""
Dual-series bandwidth area chart.

Both series share one vertical scale so download and upload are directly
comparable. Point ``i`` of ``k`` lands at ``x = i * width / max(k - 1, 1)``
and a value ``v`` at ``y = height - v / max_value * height``, where
``max_value`` is the largest download or upload value in the window (at
least 1).

Drawing goes through a surface object providing::

    width, height                      drawable extent in pixel coordinates
    clear()
    fill_polygon(points, gradient)
    stroke_polyline(points, color, width)

See ``surfaces.py`` for the terminal and image implementations.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..bandix_client.models import BandwidthSnapshot

DOWNLOAD_COLOR = "#22c55e"
UPLOAD_COLOR = "#c084fc"

Point = Tuple[float, float]


@dataclass(frozen=True)
class Gradient:
    """Vertical fill from ``top_alpha`` at y=0 to ``bottom_alpha`` at the baseline."""
    color: str
    top_alpha: float = 0.3
    bottom_alpha: float = 0.0

    def alpha_at(self, y: float, height: float) -> float:
        if height <= 0:
            return self.top_alpha
        t = min(1.0, max(0.0, y / height))
        return self.top_alpha + (self.bottom_alpha - self.top_alpha) * t


@dataclass(frozen=True)
class ChartStyle:
    download_color: str = DOWNLOAD_COLOR
    upload_color: str = UPLOAD_COLOR
    fill_alpha: float = 0.3
    line_width: int = 2


@dataclass(frozen=True)
class ChartGeometry:
    """Screen-space polylines for one render."""
    max_value: float
    step_x: float
    download: List[Point]
    upload: List[Point]


def chart_geometry(snapshots: Sequence[BandwidthSnapshot], width: float, height: float) -> ChartGeometry:
    """Map snapshots onto a ``width`` x ``height`` drawing area.

    A single snapshot is duplicated so it spans the full width as a flat
    segment. Expects at least one snapshot.
    """
    points = list(snapshots)
    if len(points) == 1:
        points = points * 2

    max_value = max(1, max(max(point.download, point.upload) for point in points))
    step_x = width / max(len(points) - 1, 1)

    def project(values) -> List[Point]:
        return [(i * step_x, height - (value / max_value) * height) for i, value in enumerate(values)]

    return ChartGeometry(
        max_value=max_value,
        step_x=step_x,
        download=project(point.download for point in points),
        upload=project(point.upload for point in points),
    )


def render_chart(snapshots: Sequence[BandwidthSnapshot], surface, style: ChartStyle = None) -> bool:
    """Draw the history window onto ``surface``.

    Download is drawn first, then upload on top. Each series is a gradient
    filled area closed along the baseline, stroked along its top edge. With
    no snapshots nothing at all is drawn and False is returned.
    """
    snapshots = list(snapshots)
    if not snapshots:
        return False
    style = style or ChartStyle()

    geometry = chart_geometry(snapshots, surface.width, surface.height)
    surface.clear()

    for line, color in ((geometry.download, style.download_color),
                        (geometry.upload, style.upload_color)):
        polygon = [(0.0, surface.height)] + line + [(line[-1][0], surface.height)]
        surface.fill_polygon(polygon, Gradient(color, top_alpha=style.fill_alpha))
        surface.stroke_polyline(line, color, style.line_width)
    return True
