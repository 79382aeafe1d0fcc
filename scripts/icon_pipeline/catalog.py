"""
Collection index for the icon-set package.
"""

import json
from pathlib import Path
from typing import Dict, List, Any


class CatalogError(Exception):
    """Exception raised when the package manifest or an icon-set file is unusable."""


def load_collections(content_root: Path) -> Dict[str, Any]:
    """
    Read ``collections.json`` from the package root.

    Args:
        content_root: Root directory of the extracted package

    Returns:
        Mapping of icon-set prefix to its metadata, in file order

    Raises:
        CatalogError: If the manifest is missing or not a JSON object
    """
    manifest_path = Path(content_root) / "collections.json"
    try:
        with open(manifest_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise CatalogError(f"Manifest not found: {manifest_path}")
    except json.JSONDecodeError as e:
        raise CatalogError(f"Manifest {manifest_path} is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise CatalogError(f"Manifest {manifest_path} must be a JSON object")
    return data


def list_prefixes(content_root: Path) -> List[str]:
    """Return every icon-set prefix listed in the manifest."""
    return list(load_collections(content_root).keys())


def icon_set_path(content_root: Path, prefix: str) -> Path:
    return Path(content_root) / "json" / f"{prefix}.json"


def load_icon_set(content_root: Path, prefix: str) -> Dict[str, Any]:
    """
    Read the raw document of one icon set.

    Raises:
        CatalogError: If the file is missing or not a JSON object
    """
    path = icon_set_path(content_root, prefix)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise CatalogError(f"Icon set file not found: {path}")
    except json.JSONDecodeError as e:
        raise CatalogError(f"Icon set file {path} is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise CatalogError(f"Icon set file {path} must be a JSON object")
    return data
