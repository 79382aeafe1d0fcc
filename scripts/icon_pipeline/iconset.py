"""
In-memory icon set built from an iconify JSON document.

Entries are keyed by icon name and tagged with a type:

* ``icon`` - an entry of the ``icons`` object, carrying its own body
* ``variation`` - an alias that adds transformations or dimensions to its parent
* ``alias`` - an alias that only points at its parent
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Any, Callable, Iterable

from .svg import SVG, SVGError, ViewBox, build_svg, format_number

logger = logging.getLogger(__name__)

ICON_DEFAULTS = {"left": 0, "top": 0, "width": 16, "height": 16}
TRANSFORM_DEFAULTS = {"rotate": 0, "hFlip": False, "vFlip": False}
ALIAS_CHAIN_LIMIT = 32

ICON_TYPES = ("icon", "variation", "alias")


@dataclass
class IconEntry:
    """One named entry of an icon set."""
    type: str
    data: Dict[str, Any]


class IconSet:
    """Mutable collection of icons and aliases sharing one prefix."""

    def __init__(self, data: Dict[str, Any]):
        self.prefix: str = data.get("prefix", "")
        self.info: Dict[str, Any] = dict(data.get("info") or {})
        self.defaults: Dict[str, Any] = {
            key: data[key] for key in ICON_DEFAULTS if key in data
        }
        self.entries: Dict[str, IconEntry] = {}

        for name, icon in (data.get("icons") or {}).items():
            if isinstance(icon, dict):
                self.entries[name] = IconEntry("icon", dict(icon))

        for name, alias in (data.get("aliases") or {}).items():
            if name in self.entries or not isinstance(alias, dict) or "parent" not in alias:
                continue
            alias_type = "alias" if set(alias) == {"parent"} else "variation"
            self.entries[name] = IconEntry(alias_type, dict(alias))

    @property
    def name(self) -> str:
        """Display name of the icon set."""
        return self.info.get("name") or self.prefix

    def entry_type(self, name: str) -> Optional[str]:
        entry = self.entries.get(name)
        return entry.type if entry else None

    def count(self, types: Iterable[str] = ("icon",)) -> int:
        types = set(types)
        return sum(1 for entry in self.entries.values() if entry.type in types)

    def for_each(self, callback: Callable[[str, str], None], types: Optional[Iterable[str]] = None) -> None:
        """
        Call ``callback(name, type)`` for every entry.

        Names are snapshotted before iterating, so the callback may remove
        entries. Entries removed earlier in the walk are not visited.
        """
        wanted = set(types) if types is not None else None
        for name in list(self.entries):
            entry = self.entries.get(name)
            if entry is None:
                continue
            if wanted is not None and entry.type not in wanted:
                continue
            callback(name, entry.type)

    def resolve(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Full icon data for an entry, with defaults applied and alias
        transformations merged into the parent's data.

        Returns:
            Icon data dictionary, or None if the entry or its parent chain
            is missing or circular
        """
        chain = []
        current = name
        while True:
            entry = self.entries.get(current)
            if entry is None or current in chain or len(chain) > ALIAS_CHAIN_LIMIT:
                return None
            chain.append(current)
            if entry.type == "icon":
                break
            current = entry.data["parent"]

        result = {**ICON_DEFAULTS, **TRANSFORM_DEFAULTS, **self.defaults}
        for entry_name in reversed(chain):
            result = _merge_icon_data(result, self.entries[entry_name].data)
        return result

    def to_svg(self, name: str) -> Optional[SVG]:
        """
        Render an entry as a standalone SVG document.

        Returns:
            SVG document, or None if the icon has no usable body or markup
        """
        data = self.resolve(name)
        if data is None or not isinstance(data.get("body"), str) or not data["body"].strip():
            return None

        try:
            body, view_box = _apply_transformations(data)
            return SVG(build_svg(body, view_box))
        except (SVGError, TypeError, ValueError) as e:
            logger.debug(f"Cannot render {self.prefix}:{name}: {e}")
            return None

    def to_string(self, name: str) -> Optional[str]:
        svg = self.to_svg(name)
        return svg.to_string() if svg is not None else None

    def from_svg(self, name: str, svg: SVG) -> None:
        """Store an SVG document as the icon ``name``, replacing any existing entry."""
        view_box = svg.view_box
        icon: Dict[str, Any] = {"body": svg.body()}
        for key, value in (
            ("left", view_box.left),
            ("top", view_box.top),
            ("width", view_box.width),
            ("height", view_box.height),
        ):
            if value != self.defaults.get(key, ICON_DEFAULTS[key]):
                icon[key] = int(value) if value == int(value) else value
        self.entries[name] = IconEntry("icon", icon)

    def remove(self, name: str, remove_aliases: bool = True) -> int:
        """
        Remove an entry.

        Args:
            name: Entry to remove
            remove_aliases: Also remove aliases that point at the entry

        Returns:
            Number of entries removed
        """
        if name not in self.entries:
            return 0
        del self.entries[name]
        removed = 1

        if remove_aliases:
            children = [
                child for child, entry in self.entries.items()
                if entry.type != "icon" and entry.data.get("parent") == name
            ]
            for child in children:
                removed += self.remove(child, remove_aliases=True)
        return removed

    def export_to_directory(self, target: Path, include_aliases: bool = False) -> List[Path]:
        """
        Write one ``<name>.svg`` file per icon into ``target``.

        Args:
            target: Output directory, created if missing
            include_aliases: Also write aliases and variations

        Returns:
            Paths of the written files
        """
        target = Path(target)
        target.mkdir(parents=True, exist_ok=True)

        types = set(ICON_TYPES) if include_aliases else {"icon"}
        written = []
        for name, entry in self.entries.items():
            if entry.type not in types:
                continue
            if not _is_safe_filename(name):
                logger.warning(f"Skipping icon with unsafe file name: {name!r}")
                continue
            content = self.to_string(name)
            if content is None:
                continue
            path = target / f"{name}.svg"
            path.write_text(content, encoding="utf-8")
            written.append(path)
        return written


def _merge_icon_data(parent: Dict[str, Any], child: Dict[str, Any]) -> Dict[str, Any]:
    """Merge alias or icon properties on top of already-resolved data."""
    result = dict(parent)
    for key, value in child.items():
        if key == "parent":
            continue
        if key == "rotate":
            result["rotate"] = (result.get("rotate", 0) + value) % 4
        elif key in ("hFlip", "vFlip"):
            result[key] = result.get(key, False) != bool(value)
        else:
            result[key] = value
    return result


def _apply_transformations(data: Dict[str, Any]) -> tuple[str, ViewBox]:
    """Apply rotation and flips to an icon body, returning body and final viewBox."""
    left = float(data["left"])
    top = float(data["top"])
    width = float(data["width"])
    height = float(data["height"])
    if width <= 0 or height <= 0:
        raise SVGError(f"Icon has no area ({format_number(width)}x{format_number(height)})")
    body = data["body"]
    rotate = int(data.get("rotate", 0))
    h_flip = bool(data.get("hFlip", False))
    v_flip = bool(data.get("vFlip", False))

    transformations = []
    if h_flip:
        if v_flip:
            rotate += 2
        else:
            transformations.append(f"translate({format_number(width + left)} {format_number(-top)})")
            transformations.append("scale(-1 1)")
            top = left = 0.0
    elif v_flip:
        transformations.append(f"translate({format_number(-left)} {format_number(height + top)})")
        transformations.append("scale(1 -1)")
        top = left = 0.0

    rotation = rotate % 4
    if rotation == 1:
        center = format_number(height / 2 + top)
        transformations.insert(0, f"rotate(90 {center} {center})")
    elif rotation == 2:
        transformations.insert(
            0, f"rotate(180 {format_number(width / 2 + left)} {format_number(height / 2 + top)})"
        )
    elif rotation == 3:
        center = format_number(width / 2 + left)
        transformations.insert(0, f"rotate(-90 {center} {center})")

    if rotation % 2 == 1:
        left, top = top, left
        width, height = height, width

    if transformations:
        body = f'<g transform="{" ".join(transformations)}">{body}</g>'

    return body, ViewBox(left, top, width, height)


def _is_safe_filename(name: str) -> bool:
    return bool(name) and "/" not in name and "\\" not in name and not name.startswith(".")
