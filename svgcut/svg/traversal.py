"""Depth-first document traversal driving the element contexts.

This is the only seam between the SVG document and the contexts: for every
processed element the engine asks the context factory for a context, delivers
the processed attributes, then geometry (shapes) or children (containers), and
finally the exit event.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterable

from svgpathtools import CubicBezier

from svgcut.engine.context import Context
from svgcut.engine.factory import (
    ELEMENT_ATTRIBUTES,
    PROCESSED_ATTRIBUTES,
    PROCESSED_ELEMENTS,
    SHAPE_ATTRIBUTES,
    SHAPE_ELEMENTS,
    ElementKind,
    create_context,
)
from svgcut.engine.transform import Viewport
from svgcut.svg.attributes import parse_attribute, parse_style
from svgcut.svg.document import (
    SvgAttributeError,
    SvgDocument,
    SvgDocumentError,
    UnexpectedElementError,
    local_name,
)
from svgcut.svg.shapes import Subpath, minimal_segments, shape_to_subpaths

ContextFactory = Callable[[ElementKind, Context], Context]

# Properties that may also be given in a style attribute.
_STYLE_PROPERTIES = frozenset({"fill", "stroke", "stroke-dasharray"})

# Malformed values of these are logged and skipped instead of failing the document.
_RECOVERABLE_ATTRIBUTES = frozenset({"stroke-dasharray"})


def element_kind(element: ET.Element) -> ElementKind | None:
    return ElementKind.from_tag(local_name(element.tag))


class DocumentTraversal:
    """Walks a document and emits context events for processed elements."""

    def __init__(
        self,
        context_factory: ContextFactory = create_context,
        processed_elements: Iterable[ElementKind] = PROCESSED_ELEMENTS,
        processed_attributes: Iterable[str] = PROCESSED_ATTRIBUTES,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.context_factory = context_factory
        self.processed_elements = frozenset(processed_elements)
        self.processed_attributes = frozenset(processed_attributes)

    def load_document(self, document: SvgDocument, context: Context) -> None:
        root = document.root
        if element_kind(root) is not ElementKind.SVG:
            raise SvgDocumentError(f"Root element is not <svg>: {root.tag!r}")
        self._load_element(root, context, self.processed_elements)

    def load_referenced_element(
        self,
        element: ET.Element,
        context: Context,
        expected_elements: Iterable[ElementKind],
        processed_elements: Iterable[ElementKind] | None = None,
    ) -> None:
        """Load an element reached through a reference instead of the tree walk.

        ``processed_elements`` applies to the element itself only; its
        children are processed with this traversal's defaults.
        """
        kind = element_kind(element)
        if kind is None or kind not in frozenset(expected_elements):
            raise UnexpectedElementError(f"Unexpected referenced element <{local_name(element.tag) or element.tag}>")
        processed = frozenset(processed_elements) if processed_elements is not None else self.processed_elements
        self._load_element(element, context, processed)

    # -- per element ----------------------------------------------------------

    def _load_element(self, element: ET.Element, parent: Context, processed: frozenset[ElementKind]) -> None:
        kind = element_kind(element)
        if kind is None or kind not in processed:
            self.logger.debug("Skipping element %s", element.tag)
            return

        context = self.context_factory(kind, parent)
        sources = self._template_chain(element, kind, context)
        # Templates first, so the element's own attributes win
        for source in reversed(sources):
            self._deliver_attributes(source, kind, context)

        if kind in SHAPE_ELEMENTS:
            self._emit_geometry(element, kind, context)
        else:
            # Children come from the nearest element in the chain that has any
            children = next((source for source in sources if len(source)), element)
            for content in context.content_contexts():
                for child in children:
                    self._load_element(child, content, self.processed_elements)

        context.on_exit_element()

    def _template_chain(self, element: ET.Element, kind: ElementKind, context: Context) -> list[ET.Element]:
        document = getattr(context, "document", None)
        if kind is not ElementKind.PATTERN or document is None:
            return [element]
        return document.href_chain(element)

    def _deliver_attributes(self, element: ET.Element, kind: ElementKind, context: Context) -> None:
        accepted = self.processed_attributes | ELEMENT_ATTRIBUTES.get(kind, frozenset())
        viewport = context.viewport
        style: str | None = None

        for name, raw in element.attrib.items():
            if name == "style":
                style = raw
            elif name in accepted:
                self._set(context, name, raw, viewport)

        # Style declarations override presentation attributes
        if style:
            for name, raw in parse_style(style):
                if name in _STYLE_PROPERTIES and name in accepted:
                    self._set(context, name, raw, viewport)

    def _set(self, context: Context, name: str, raw: str, viewport: Viewport) -> None:
        try:
            value = parse_attribute(name, raw, viewport)
        except SvgAttributeError as e:
            if name not in _RECOVERABLE_ATTRIBUTES:
                raise
            self.logger.warning("Ignoring invalid value for attribute %s: %s", name, e)
            return
        context.set(name, value)

    def _emit_geometry(self, element: ET.Element, kind: ElementKind, context: Context) -> None:
        geometry = {name: raw for name, raw in element.attrib.items() if name in SHAPE_ATTRIBUTES[kind]}
        for subpath in shape_to_subpaths(kind.value, geometry, context.viewport):
            self._emit_subpath(subpath, context)
        context.path_exit()

    def _emit_subpath(self, subpath: Subpath, context: Context) -> None:
        segments = minimal_segments(subpath.segments)
        if not segments:
            return
        start = segments[0].start
        context.path_move_to(start.real, start.imag)
        for seg in segments:
            if isinstance(seg, CubicBezier):
                context.path_cubic_bezier_to(
                    seg.control1.real, seg.control1.imag,
                    seg.control2.real, seg.control2.imag,
                    seg.end.real, seg.end.imag,
                )
            else:
                context.path_line_to(seg.end.real, seg.end.imag)
        if subpath.closed:
            context.path_close_subpath()
