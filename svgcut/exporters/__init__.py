"""Sinks for finalized path records."""

from svgcut.exporters.base import CollectingExporter, Exporter

__all__ = [
    "CollectingExporter",
    "Exporter",
]
