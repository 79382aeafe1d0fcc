"""
Structural cleanup of icon SVG documents.

Anything that cannot be exported safely (scripts, stylesheets, foreign
content, event handlers, external references) is rejected first. scour
then removes editor junk and non-rendering elements and turns inline
styles into presentation attributes.
"""

import re
import xml.etree.ElementTree as ET

from ..svg import SVG, SVGError, SVG_NS, XLINK_NS, qname, split_tag
from .scouring import PRESENTATION_ATTRIBUTES, scour_svg


class SVGCleanupError(SVGError):
    """Exception raised when an icon contains markup that cannot be cleaned."""


SHAPE_ELEMENTS = {
    "path", "circle", "ellipse", "line", "polyline", "polygon", "rect", "text",
}

ALLOWED_ELEMENTS = SHAPE_ELEMENTS | {
    "svg", "g", "defs", "symbol", "use", "tspan", "textPath",
    "linearGradient", "radialGradient", "stop", "pattern", "mask", "clipPath", "marker",
    "filter", "feBlend", "feColorMatrix", "feComponentTransfer", "feComposite",
    "feConvolveMatrix", "feDiffuseLighting", "feDisplacementMap", "feDistantLight",
    "feDropShadow", "feFlood", "feFuncA", "feFuncB", "feFuncG", "feFuncR",
    "feGaussianBlur", "feMerge", "feMergeNode", "feMorphology", "feOffset",
    "fePointLight", "feSpecularLighting", "feSpotLight", "feTile", "feTurbulence",
    "animate", "animateMotion", "animateTransform", "set", "mpath",
}

# Dropped by scour together with their content
REMOVED_ELEMENTS = {"metadata", "title", "desc"}

EDITOR_NAMESPACES = (
    "http://www.inkscape.org/namespaces/inkscape",
    "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd",
    "http://www.bohemiancoding.com/sketch/ns",
    "http://ns.adobe.com/",
    "http://www.serif.com/",
    "http://www.figma.com/",
    "http://purl.org/dc/elements/1.1/",
    "http://creativecommons.org/ns#",
    "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
)

ROOT_ATTRIBUTES = {"viewBox", "width", "height"}

CLEANUP_OPTIONS = {
    "remove_metadata": True,
    "remove_titles": True,
    "remove_descriptions": True,
    "strip_comments": True,
    "keep_editor_data": False,
    "style_to_xml": True,
    "simple_colors": False,
    "group_collapse": False,
    "strip_ids": False,
}

_URL_PATTERN = re.compile(r'url\(\s*[\'"]?([^\'")]*)')
_XML_NS = "http://www.w3.org/XML/1998/namespace"


def cleanup_svg(svg: SVG) -> None:
    """
    Clean up an icon in place.

    Raises:
        SVGCleanupError: If the icon uses unsupported or unsafe markup
    """
    try:
        svg.view_box
    except SVGError as e:
        raise SVGCleanupError(str(e))

    _check_elements(svg.root)
    for element in svg.root.iter():
        _check_attributes(element)

    scour_svg(svg, **CLEANUP_OPTIONS)

    root = svg.root
    _strip_foreign_markup(root)
    _cleanup_root(root)

    if not any(split_tag(el.tag)[1] in SHAPE_ELEMENTS | {"use"} for el in root.iter()):
        raise SVGCleanupError("Icon has no shapes")


def _check_elements(parent: ET.Element) -> None:
    for child in parent:
        namespace, name = split_tag(child.tag)

        if namespace is not None and namespace != SVG_NS:
            if _is_editor_namespace(namespace):
                continue
            raise SVGCleanupError(f"Unsupported element <{name}> in namespace {namespace}")

        if name in REMOVED_ELEMENTS:
            continue
        if name not in ALLOWED_ELEMENTS:
            raise SVGCleanupError(f"Unsupported element <{name}>")

        _check_elements(child)


def _check_attributes(element: ET.Element) -> None:
    for attr, value in element.attrib.items():
        namespace, name = split_tag(attr)

        if namespace is None and name.lower().startswith("on"):
            raise SVGCleanupError(f"Event attribute '{name}' is not allowed")
        if name == "href" and namespace in (None, XLINK_NS):
            _check_reference(value)
        elif "url(" in value:
            for target in _URL_PATTERN.findall(value):
                if not target.strip().startswith("#"):
                    raise SVGCleanupError(f"External reference '{target}' is not allowed")


def _check_reference(value: str) -> None:
    if not value.strip().startswith("#"):
        raise SVGCleanupError(f"External reference '{value}' is not allowed")


def _strip_foreign_markup(parent: ET.Element) -> None:
    """Drop what scour leaves behind: unknown style properties, classes, data and editor attributes."""
    for attr in list(parent.attrib):
        namespace, name = split_tag(attr)
        if namespace is not None:
            if namespace not in (XLINK_NS, _XML_NS):
                del parent.attrib[attr]
        elif name in ("style", "class") or name.startswith("data-"):
            del parent.attrib[attr]

    for child in list(parent):
        namespace = split_tag(child.tag)[0]
        if namespace is not None and namespace != SVG_NS:
            parent.remove(child)
        else:
            _strip_foreign_markup(child)


def _cleanup_root(root: ET.Element) -> None:
    """Drop root attributes, moving inherited presentation attributes onto a wrapping group."""
    inherited = {}
    for attr in list(root.attrib):
        if attr in ROOT_ATTRIBUTES:
            continue
        if attr in PRESENTATION_ATTRIBUTES:
            inherited[attr] = root.attrib[attr]
        del root.attrib[attr]

    if inherited:
        group = ET.Element(qname("g"), inherited)
        group.extend(list(root))
        for child in list(root):
            root.remove(child)
        root.append(group)


def _is_editor_namespace(namespace: str) -> bool:
    return any(namespace.startswith(prefix) for prefix in EDITOR_NAMESPACES)
