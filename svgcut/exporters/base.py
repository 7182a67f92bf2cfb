"""Exporter interface: the sink for finalized path records."""

from __future__ import annotations

from typing import Protocol

from svgcut.engine.path import DashedPath


class Exporter(Protocol):
    def plot(self, record: DashedPath) -> None:
        """Consume one finalized record. Called in element traversal order."""
        ...


class CollectingExporter:
    """Keeps every plotted record in memory, in plot order."""

    def __init__(self) -> None:
        self.records: list[DashedPath] = []

    def plot(self, record: DashedPath) -> None:
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)
