"""Conversion configuration: tunables for the context tree and exporters."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ConversionConfig:
    """Controls document defaults and the limits of pattern fills."""

    # Viewport of the document root, used when the outermost <svg> has neither
    # width/height nor a viewBox.
    default_viewport_width: float = 100.0
    default_viewport_height: float = 100.0

    # Pattern fills may contain shapes that are themselves pattern filled.
    # Nesting stops at this depth; there is no cycle detection.
    max_pattern_depth: int = 8

    # Upper bound on tiles enumerated for a single pattern fill.
    max_pattern_tiles: int = 10_000

    # Upper bound on tiles over all pattern fills of one conversion, nested
    # fills included. Total pattern work grows with this, not with the depth.
    max_total_pattern_tiles: int = 10_000

    # Curve flattening density when clipping pattern content to an outline.
    samples_per_segment: int = 16

    # Logger name used by contexts when none is injected.
    logger_name: str = "svgcut.conversion"


class TileBudget:
    """Pattern tiles still available to one conversion.

    Shared by every context of the conversion, like the exporter.
    """

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.used = 0
        self.exhausted = False

    @property
    def remaining(self) -> int:
        return self.limit - self.used

    def take(self, count: int) -> bool:
        """Reserve ``count`` tiles; False (and nothing reserved) if they do not fit."""
        if count > self.remaining:
            self.exhausted = True
            return False
        self.used += count
        return True
