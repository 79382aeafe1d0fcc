"""
Rewriting of icon SVG documents through scour.

Scour removes metadata and editor markup, turns inline styles into
attributes, compacts path data and numbers, and collapses groups. It also
drops presentation attributes that hold their initial value, judging
inheritance from DOM ancestors only. Content reached through ``<use>``
inherits from the referencing element instead, so presentation attributes
in referenced subtrees are pinned before scour runs and restored after.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, Set

from scour import scour

from ..svg import SVG, split_tag

logger = logging.getLogger(__name__)

PRESENTATION_ATTRIBUTES = {
    "fill", "fill-opacity", "fill-rule", "stroke", "stroke-width", "stroke-linecap",
    "stroke-linejoin", "stroke-miterlimit", "stroke-dasharray", "stroke-dashoffset",
    "stroke-opacity", "opacity", "color", "stop-color", "stop-opacity", "flood-color",
    "flood-opacity", "lighting-color", "clip-rule", "clip-path", "mask", "filter",
    "display", "visibility", "font-family", "font-size", "font-weight", "font-style",
    "text-anchor", "dominant-baseline", "paint-order", "vector-effect",
    "marker-start", "marker-mid", "marker-end", "shape-rendering", "overflow",
}

PIN_ATTRIBUTE = "data-icon-pipeline-pin"

# Significant digits kept in coordinates
PRECISION = 10


def scour_svg(svg: SVG, **options: Any) -> None:
    """
    Run scour over an icon in place.

    Args:
        svg: Icon document, replaced by the scoured markup
        **options: scour option overrides, by their ``scour`` option names
    """
    pins = _pin_referenced_attributes(svg.root)
    before = svg.to_string()
    markup = scour.scourString(before, _scour_options(options))

    root = SVG(markup).root
    _restore_pinned_attributes(root, pins)
    svg.root = root
    logger.debug(f"scour: {len(before)} -> {len(markup)} bytes")


def _scour_options(overrides: Dict[str, Any]):
    options = scour.sanitizeOptions()
    options.strip_xml_prolog = True
    options.indent_type = "none"
    options.newlines = False
    options.digits = PRECISION
    for name, value in overrides.items():
        setattr(options, name, value)
    return options


def _referenced_ids(root: ET.Element) -> Set[str]:
    referenced = set()
    for element in root.iter():
        for attr, value in element.attrib.items():
            if split_tag(attr)[1] == "href" and value.startswith("#"):
                referenced.add(value[1:])
    return referenced


def _pin_referenced_attributes(root: ET.Element) -> Dict[str, Dict[str, str]]:
    """Mark every element under a ``<use>`` target and remember its presentation attributes."""
    referenced = _referenced_ids(root)
    pins: Dict[str, Dict[str, str]] = {}
    if not referenced:
        return pins

    for element in root.iter():
        if element.get("id") not in referenced:
            continue
        for node in element.iter():
            if node.get(PIN_ATTRIBUTE) is not None:
                continue
            attributes = {
                attr: value for attr, value in node.attrib.items() if attr in PRESENTATION_ATTRIBUTES
            }
            if attributes:
                token = str(len(pins))
                node.set(PIN_ATTRIBUTE, token)
                pins[token] = attributes
    return pins


def _restore_pinned_attributes(root: ET.Element, pins: Dict[str, Dict[str, str]]) -> None:
    for element in root.iter():
        token = element.attrib.pop(PIN_ATTRIBUTE, None)
        if token is None or token not in pins:
            continue
        for attr, value in pins[token].items():
            if attr not in element.attrib:
                element.set(attr, value)
