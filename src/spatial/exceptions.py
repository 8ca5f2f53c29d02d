"""Errors raised by the spatial primitives."""

from __future__ import annotations


class GeoclusterError(Exception):
    """Base class for every geocluster error."""


class ZoomOutOfRange(GeoclusterError, ValueError):
    """Zoom level outside the supported [0, MAX_ZOOM] interval."""

    def __init__(self, zoom, max_zoom: int = 30):
        self.zoom = zoom
        self.max_zoom = max_zoom
        super().__init__(
            f"Zoom level {zoom!r} is out of range.\n"
            f"  Supported zoom levels: 0..{max_zoom} (integers)"
        )
