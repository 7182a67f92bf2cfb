"""Conversion entry points: SVG document in, plot records out."""

from __future__ import annotations

import logging

from svgcut.engine.config import ConversionConfig
from svgcut.engine.context import BaseContext
from svgcut.engine.path import DashedPath
from svgcut.exporters.base import CollectingExporter, Exporter
from svgcut.svg.document import SvgDocument
from svgcut.svg.traversal import DocumentTraversal

logger = logging.getLogger(__name__)


def convert(
    document: SvgDocument,
    exporter: Exporter,
    config: ConversionConfig | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Traverse ``document`` and plot every strokeable shape to ``exporter``.

    Raises SvgDocumentError (or its SvgAttributeError subclass) when the
    document structure or an attribute grammar is malformed. Unsupported
    attribute values are only logged.
    """
    traversal = DocumentTraversal(logger=logger)
    context = BaseContext(document, exporter, traversal, config=config, logger=logger)
    traversal.load_document(document, context)


def convert_svg(svg_text: str | bytes, config: ConversionConfig | None = None) -> list[DashedPath]:
    """Parse SVG markup and return the plot records in traversal order."""
    document = SvgDocument.from_string(svg_text)
    exporter = CollectingExporter()
    convert(document, exporter, config=config)
    logger.debug("Converted document into %d records", len(exporter))
    return exporter.records
