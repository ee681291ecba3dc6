"""
Chart rendering onto terminal and image rasters.
"""

from .chart import (
    ChartGeometry, ChartStyle, Gradient, chart_geometry, render_chart,
    DOWNLOAD_COLOR, UPLOAD_COLOR,
)
from .surfaces import BrailleSurface, ImageSurface

__all__ = [
    "ChartGeometry",
    "ChartStyle",
    "Gradient",
    "chart_geometry",
    "render_chart",
    "DOWNLOAD_COLOR",
    "UPLOAD_COLOR",
    "BrailleSurface",
    "ImageSurface",
]
