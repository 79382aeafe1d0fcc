"""
Parsed SVG document used while an icon is being transformed.
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional, Tuple

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

_ROOT_PATTERN = re.compile(r'^<svg\b[^>]*?(?:/>|>(.*)</svg>)\s*$', re.DOTALL)
_NUMBER_SPLIT = re.compile(r'[\s,]+')


class SVGError(ValueError):
    """Exception raised for markup that is not a usable SVG document."""


def qname(tag: str) -> str:
    """Qualified SVG tag name for ElementTree lookups."""
    return f"{{{SVG_NS}}}{tag}"


def split_tag(tag: str) -> Tuple[Optional[str], str]:
    """Split an ElementTree tag or attribute name into (namespace, local name)."""
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return None, tag


def local_name(tag: str) -> str:
    return split_tag(tag)[1]


def format_number(value: float) -> str:
    """Format a number without redundant zeros."""
    if value == int(value):
        return str(int(value))
    text = format(value, '.6f').rstrip('0').rstrip('.')
    return "0" if text == "-0" else text


@dataclass(frozen=True)
class ViewBox:
    """The ``viewBox`` rectangle of an icon."""
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def parse(cls, value: Optional[str]) -> "ViewBox":
        """
        Parse a ``viewBox`` attribute value.

        Raises:
            SVGError: If the value is missing, malformed or has no area
        """
        if not value:
            raise SVGError("Missing viewBox")
        parts = [part for part in _NUMBER_SPLIT.split(value.strip()) if part]
        if len(parts) != 4:
            raise SVGError(f"Invalid viewBox '{value}'")
        try:
            left, top, width, height = (float(part) for part in parts)
        except ValueError:
            raise SVGError(f"Invalid viewBox '{value}'")
        if width <= 0 or height <= 0:
            raise SVGError(f"viewBox '{value}' has no area")
        return cls(left, top, width, height)

    def __str__(self) -> str:
        return " ".join(format_number(v) for v in (self.left, self.top, self.width, self.height))


class SVG:
    """Mutable SVG document backed by an ElementTree root element."""

    def __init__(self, content: str):
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise SVGError(f"Invalid SVG markup: {e}")

        namespace, name = split_tag(root.tag)
        if name != "svg" or namespace != SVG_NS:
            raise SVGError(f"Root element must be <svg>, got <{name}>")
        self.root = root

    @property
    def view_box(self) -> ViewBox:
        return ViewBox.parse(self.root.get("viewBox"))

    def body(self) -> str:
        """Serialized content of the root element, without the root itself."""
        match = _ROOT_PATTERN.match(self.to_string())
        if match is None:
            raise SVGError("Cannot extract SVG body")
        return (match.group(1) or "").strip()

    def to_string(self) -> str:
        return ET.tostring(self.root, encoding="unicode")

    def __str__(self) -> str:
        return self.to_string()


def build_svg(body: str, view_box: ViewBox) -> str:
    """Wrap icon body markup in a standalone ``<svg>`` element."""
    width = format_number(view_box.width)
    height = format_number(view_box.height)
    xlink = f' xmlns:xlink="{XLINK_NS}"' if "xlink:" in body else ""
    return (
        f'<svg xmlns="{SVG_NS}"{xlink} width="{width}" height="{height}" '
        f'viewBox="{view_box}">{body}</svg>'
    )
