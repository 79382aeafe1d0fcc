"""
Lossless size optimization of icon SVG documents.
"""

from ..svg import SVG
from .scouring import scour_svg

OPTIMIZE_OPTIONS = {
    "strip_ids": True,
    "shorten_ids": False,
    "simple_colors": True,
    "style_to_xml": True,
    "group_collapse": True,
    "group_create": False,
    "keep_defs": False,
    "strip_comments": True,
}


def optimize_svg(svg: SVG) -> None:
    """
    Minify an icon in place without changing how it renders.

    scour strips whitespace and unreferenced ids, removes empty containers,
    unwraps attribute-less groups, drops initial-value attributes, shortens
    colors and compacts numbers, path data and point lists.
    """
    scour_svg(svg, **OPTIMIZE_OPTIONS)
