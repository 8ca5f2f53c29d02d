"""Errors raised while clustering point groups."""

from __future__ import annotations

from ..spatial.exceptions import GeoclusterError, ZoomOutOfRange


class ThresholdOutOfRange(GeoclusterError, ValueError):
    """Requested distance threshold outside the admissible bound."""

    def __init__(self, threshold, min_threshold: int, max_threshold: int, default: int):
        self.threshold = threshold
        self.min_threshold = min_threshold
        self.max_threshold = max_threshold
        self.default = default
        super().__init__(
            "\n".join([
                f"Distance threshold {threshold!r} is outside the allowed range.",
                f"  Allowed:   {min_threshold}..{max_threshold} pixels (inclusive)",
                f"  Default:   {default} pixels",
            ])
        )


class InvariantViolation(GeoclusterError, RuntimeError):
    """A point group or collection broke an internal invariant."""


__all__ = [
    "GeoclusterError",
    "InvariantViolation",
    "ThresholdOutOfRange",
    "ZoomOutOfRange",
]
