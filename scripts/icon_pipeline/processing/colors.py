"""
Color detection and rewriting for icon SVG documents.
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
from PIL import ImageColor

from ..svg import SVG, split_tag
from .cleanup import SHAPE_ELEMENTS

COLOR_ATTRIBUTES = ("fill", "stroke", "stop-color", "flood-color", "lighting-color", "color")

# Content of these elements is geometry for compositing, not paint
GEOMETRY_CONTAINERS = {"mask", "clipPath"}

_CSS_RGBA = re.compile(
    r'^rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d*\.?\d+)\s*\)$', re.IGNORECASE
)


@dataclass(frozen=True)
class Color:
    """A parsed color value: either a keyword or an RGBA tuple."""
    keyword: Optional[str] = None
    rgba: Optional[Tuple[int, int, int, int]] = None


ColorCallback = Callable[[str, str, Optional[Color]], str]


def parse_color(token: str) -> Optional[Color]:
    """
    Parse an SVG color token.

    Returns:
        Parsed color, or None for values that are not plain colors
        (``url(#gradient)``, ``inherit``, garbage)
    """
    value = token.strip()
    lower = value.lower()
    if lower in ("none", "transparent"):
        return Color(keyword=lower)
    if lower == "currentcolor":
        return Color(keyword="currentColor")

    match = _CSS_RGBA.match(value)
    if match:
        red, green, blue = (min(int(c), 255) for c in match.groups()[:3])
        alpha = float(match.group(4))
        alpha = alpha if alpha > 1 else alpha * 255
        return Color(rgba=(red, green, blue, round(min(alpha, 255))))

    try:
        rgb = ImageColor.getrgb(value)
    except ValueError:
        return None
    if len(rgb) == 3:
        rgb = (*rgb, 255)
    return Color(rgba=tuple(rgb))


def is_empty_color(color: Color) -> bool:
    """True for colors that paint nothing."""
    if color.keyword in ("none", "transparent"):
        return True
    return color.rgba is not None and color.rgba[3] == 0


def monotone_rewriter(canonical: str) -> ColorCallback:
    """
    Build a callback that replaces every visible color with ``canonical``.

    Unparseable and empty colors keep their original token.
    """
    def rewrite(attr: str, token: str, color: Optional[Color]) -> str:
        if color is None or is_empty_color(color):
            return token
        return canonical
    return rewrite


def parse_colors(
    svg: SVG,
    callback: Optional[ColorCallback] = None,
    default_color: Optional[str] = None,
) -> List[Color]:
    """
    Find every color used by an icon, optionally rewriting them.

    Args:
        svg: Document to scan, modified in place
        callback: Called as ``callback(attr, token, color)`` for each color
            attribute; its return value replaces the attribute value
        default_color: Fill assigned to shapes that have no fill of their
            own or from an ancestor

    Returns:
        Distinct colors found, in document order
    """
    found: List[Color] = []
    _walk(svg.root, callback, default_color, found, has_fill=False, in_geometry=False)
    return found


def _walk(
    element: ET.Element,
    callback: Optional[ColorCallback],
    default_color: Optional[str],
    found: List[Color],
    has_fill: bool,
    in_geometry: bool,
) -> None:
    name = split_tag(element.tag)[1]
    in_geometry = in_geometry or name in GEOMETRY_CONTAINERS

    if not in_geometry:
        for attr in COLOR_ATTRIBUTES:
            token = element.get(attr)
            if token is None:
                continue
            color = parse_color(token)
            if color is not None and color not in found:
                found.append(color)
            if callback is not None:
                replacement = callback(attr, token, color)
                if replacement != token:
                    element.set(attr, replacement)

        if name in SHAPE_ELEMENTS and not has_fill and element.get("fill") is None and default_color:
            element.set("fill", default_color)

    has_fill = has_fill or element.get("fill") is not None
    for child in element:
        _walk(child, callback, default_color, found, has_fill, in_geometry)
