"""Shared test fixtures."""

from __future__ import annotations

import logging

import pytest

from svgcut.engine.config import ConversionConfig
from svgcut.engine.context import BaseContext
from svgcut.exporters.base import CollectingExporter
from svgcut.svg.document import SvgDocument


# Sample SVGs

LINE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <line x1="10" y1="20" x2="90" y2="20"/>
</svg>'''

NESTED_GROUPS_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <g transform="translate(10, 0)">
    <g transform="scale(2)">
      <path d="M0 0 L5 0"/>
    </g>
  </g>
</svg>'''

VIEWBOX_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="200" height="100" viewBox="0 0 100 50">
  <line x1="0" y1="0" x2="100" y2="50"/>
</svg>'''

DASHED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <g stroke-dasharray="4 2">
    <path d="M0 0 H50"/>
    <path d="M0 10 H50" stroke-dasharray="none"/>
  </g>
  <path d="M0 20 H50" style="stroke-dasharray: 1, 1"/>
</svg>'''

STROKE_NONE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <rect x="0" y="0" width="10" height="10" stroke="none"/>
  <g stroke="none">
    <circle cx="50" cy="50" r="5"/>
  </g>
  <circle cx="20" cy="20" r="5" stroke="black"/>
</svg>'''

# A 60x60 square filled with horizontal hatching, one line per 50x50 tile.
PATTERN_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <defs>
    <pattern id="hatch" patternUnits="userSpaceOnUse" width="50" height="50">
      <line x1="0" y1="25" x2="50" y2="25"/>
    </pattern>
  </defs>
  <rect x="0" y="0" width="60" height="60" fill="url(#hatch)" stroke="none"/>
</svg>'''

DANGLING_FILL_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <rect x="0" y="0" width="10" height="10" fill="url(#missing)"/>
</svg>'''

NON_PATTERN_FILL_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <linearGradient id="grad"/>
  <rect x="0" y="0" width="10" height="10" fill="url(#grad)"/>
</svg>'''

# Pattern whose content is filled with the pattern itself.
SELF_REFERENCING_PATTERN_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <pattern id="loop" patternUnits="userSpaceOnUse" width="100" height="100">
    <rect x="10" y="10" width="80" height="80" fill="url(#loop)" stroke="none"/>
  </pattern>
  <rect x="0" y="0" width="100" height="100" fill="url(#loop)" stroke="none"/>
</svg>'''

# Each tile holds a rect larger than the tile, filled with the same pattern,
# so every nesting level multiplies the tile count.
RECURSIVE_TILE_PATTERN_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <pattern id="loop" patternUnits="userSpaceOnUse" width="10" height="10">
    <rect x="-5" y="-5" width="20" height="20" fill="url(#loop)"/>
  </pattern>
  <rect x="0" y="0" width="20" height="20" fill="url(#loop)"/>
</svg>'''

INHERITED_DASHARRAY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <g stroke-dasharray="4 2">
    <path d="M0 0 H50" stroke-dasharray="inherit"/>
  </g>
  <path d="M0 10 H50"/>
</svg>'''

# A pattern that takes its tile and content from the pattern it references.
PATTERN_TEMPLATE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" width="100" height="100">
  <defs>
    <pattern id="base" patternUnits="userSpaceOnUse" width="50" height="50">
      <line x1="0" y1="25" x2="50" y2="25"/>
    </pattern>
    <pattern id="derived" xlink:href="#base" x="10"/>
  </defs>
  <rect x="0" y="0" width="60" height="60" fill="url(#derived)" stroke="none"/>
</svg>'''

FOREIGN_ELEMENTS_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:x="http://example.com/x" width="100" height="100">
  <title>ignored</title>
  <x:widget d="M0 0 L1 1"/>
  <text x="0" y="0">ignored</text>
  <defs><path id="hidden" d="M0 0 L9 9"/></defs>
  <polyline points="0,0 10,0 10,10"/>
</svg>'''


class RecordingTraversal:
    """Stands in for DocumentTraversal; records referenced-element loads."""

    def __init__(self) -> None:
        self.calls: list[dict] = []

    def load_referenced_element(self, element, context, expected_elements, processed_elements=None) -> None:
        self.calls.append({
            "element": element,
            "context": context,
            "expected": frozenset(expected_elements),
            "processed": processed_elements,
        })


@pytest.fixture
def exporter() -> CollectingExporter:
    return CollectingExporter()


@pytest.fixture
def traversal() -> RecordingTraversal:
    return RecordingTraversal()


@pytest.fixture
def pattern_document() -> SvgDocument:
    return SvgDocument.from_string(PATTERN_SVG)


@pytest.fixture
def base_context(pattern_document, exporter, traversal) -> BaseContext:
    return BaseContext(
        pattern_document,
        exporter,
        traversal,
        config=ConversionConfig(),
        logger=logging.getLogger("svgcut.conversion"),
    )
