"""Parsed SVG document with a document-wide id lookup."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_HREF = "{http://www.w3.org/1999/xlink}href"


class SvgDocumentError(ValueError):
    """The document is malformed or is not an SVG document."""


class SvgAttributeError(SvgDocumentError):
    """An attribute value could not be parsed."""


class UnexpectedElementError(SvgDocumentError):
    """A referenced element is not of an expected kind."""


def local_name(tag: object) -> str | None:
    """Tag name without the SVG namespace; None for comments and foreign elements."""
    if not isinstance(tag, str):
        return None
    if tag.startswith("{"):
        ns, _, name = tag[1:].partition("}")
        if ns != SVG_NS:
            return None
        return name
    return tag


class SvgDocument:
    """Wraps an ElementTree root and indexes elements by ``id``."""

    def __init__(self, root: ET.Element) -> None:
        self.root = root
        self._ids: dict[str, ET.Element] = {}
        for element in root.iter():
            element_id = element.get("id")
            # First occurrence wins, like getElementById
            if element_id and element_id not in self._ids:
                self._ids[element_id] = element

    @classmethod
    def from_string(cls, svg_text: str | bytes) -> SvgDocument:
        try:
            root = ET.fromstring(svg_text)
        except ET.ParseError as e:
            raise SvgDocumentError(f"Malformed SVG document: {e}") from e
        if local_name(root.tag) != "svg":
            raise SvgDocumentError(f"Root element is not <svg>: {root.tag!r}")
        doc = cls(root)
        logger.debug("Loaded SVG document with %d ids", len(doc._ids))
        return doc

    def find_by_id(self, element_id: str) -> ET.Element | None:
        return self._ids.get(element_id)

    def href_chain(self, element: ET.Element) -> list[ET.Element]:
        """``element`` followed by the templates it inherits from through ``href``.

        The chain stops at a dangling or non-local reference, at an element of
        a different kind, and before any element already in the chain.
        """
        chain = [element]
        name = local_name(element.tag)
        current = element
        while True:
            href = (current.get("href") or current.get(XLINK_HREF) or "").strip()
            if not href.startswith("#"):
                break
            target = self.find_by_id(href[1:])
            if target is None or local_name(target.tag) != name:
                logger.debug("Ignoring template reference %s on <%s>", href, name)
                break
            if any(target is seen for seen in chain):
                logger.debug("Template references of <%s> loop back at %s", name, href)
                break
            chain.append(target)
            current = target
        return chain
