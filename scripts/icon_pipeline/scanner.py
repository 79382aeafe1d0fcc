"""
Discovery of providers and SVG files in the normalized output tree.
"""

from pathlib import Path
from typing import Iterator, List


def list_providers(svg_root: Path) -> List[str]:
    """
    Names of the immediate subdirectories of ``svg_root``, sorted.

    A missing ``svg_root`` has no providers.
    """
    svg_root = Path(svg_root)
    if not svg_root.is_dir():
        return []
    return sorted(entry.name for entry in svg_root.iterdir() if entry.is_dir())


def walk_svg_files(directory: Path) -> Iterator[Path]:
    """Yield every ``.svg`` file under ``directory``, depth-first in name order."""
    for entry in sorted(Path(directory).iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            yield from walk_svg_files(entry)
        elif entry.is_file() and entry.suffix == ".svg":
            yield entry


def get_all_svg_files(directory: Path) -> List[Path]:
    return list(walk_svg_files(directory))
