"""
Icon normalization engine: turns a raw icon set into clean monotone SVG files.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional

from ..iconset import IconSet
from .cleanup import cleanup_svg
from .colors import parse_colors, monotone_rewriter
from .optimize import optimize_svg
from .stats import RunStats

logger = logging.getLogger(__name__)


@dataclass
class NormalizationConfig:
    """Configuration for icon normalization."""
    color: str = "#fcfcfc"
    add_missing_color: bool = True
    include_aliases: bool = False


@dataclass
class IconSetResult:
    """Outcome of normalizing and exporting one icon set."""
    prefix: str
    name: str
    stats: RunStats
    skipped: int = 0
    exported: List[Path] = field(default_factory=list)


class IconSetNormalizer:
    """Cleans up, recolors and optimizes every icon of an icon set."""

    def __init__(self, config: NormalizationConfig):
        """Initialize normalizer with configuration."""
        self.config = config
        self._rewrite = monotone_rewriter(config.color)

    def normalize_icon(self, icon_set: IconSet, name: str) -> Optional[str]:
        """
        Normalize a single icon in place.

        The icon is replaced by its normalized version on success and
        removed from the set on failure.

        Args:
            icon_set: Icon set owning the icon
            name: Icon name

        Returns:
            None on success, otherwise the reason the icon was dropped
        """
        svg = icon_set.to_svg(name)
        if svg is None:
            icon_set.remove(name)
            return "invalid icon data"

        try:
            # Cleanup icon code
            cleanup_svg(svg)

            # Icons are assumed to be monotone
            parse_colors(
                svg,
                callback=self._rewrite,
                default_color=self.config.color if self.config.add_missing_color else None,
            )

            optimize_svg(svg)
        except Exception as e:
            icon_set.remove(name)
            return str(e) or e.__class__.__name__

        icon_set.from_svg(name, svg)
        return None

    def normalize_icon_set(self, icon_set: IconSet) -> RunStats:
        """
        Normalize every ``icon`` entry of a set, dropping the ones that fail.

        Returns:
            RunStats with one failure per dropped icon
        """
        stats = RunStats(total=icon_set.count(("icon",)))

        def process(name: str, entry_type: str) -> None:
            reason = self.normalize_icon(icon_set, name)
            if reason is None:
                stats.record_success()
            else:
                logger.warning(f"Error parsing {icon_set.prefix}:{name}: {reason}")
                stats.record_failure(name, reason)

        icon_set.for_each(process, types=("icon",))
        return stats

    def process(self, data: Dict[str, Any], prefix: str, output_root: Path) -> IconSetResult:
        """
        Normalize a raw icon-set document and export it to ``output_root/prefix``.

        Raises:
            NormalizationError: If the normalized set cannot be written
        """
        icon_set = IconSet(data)
        if not icon_set.prefix:
            icon_set.prefix = prefix
        skipped = len(icon_set.entries) - icon_set.count(("icon",))

        stats = self.normalize_icon_set(icon_set)

        logger.info(f"Exporting {icon_set.name}")
        try:
            exported = icon_set.export_to_directory(
                Path(output_root) / prefix, include_aliases=self.config.include_aliases
            )
        except OSError as e:
            raise NormalizationError(f"Failed to export icon set {prefix}: {e}")

        return IconSetResult(
            prefix=prefix,
            name=icon_set.name,
            stats=stats,
            skipped=skipped,
            exported=exported,
        )


class NormalizationError(Exception):
    """Exception raised when an icon set cannot be normalized."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
