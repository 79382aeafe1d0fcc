"""
Icon processing modules for cleanup, color rewriting, optimization, normalization and rasterization.
"""

from .cleanup import cleanup_svg, SVGCleanupError
from .colors import Color, parse_color, parse_colors, monotone_rewriter
from .optimize import optimize_svg
from .normalizer import IconSetNormalizer, NormalizationConfig, NormalizationError, IconSetResult
from .rasterizer import VariantRasterizer, RasterConfig, RasterizationError, render_svg_to_png
from .stats import RunStats, ItemFailure

__all__ = [
    "cleanup_svg",
    "SVGCleanupError",
    "Color",
    "parse_color",
    "parse_colors",
    "monotone_rewriter",
    "optimize_svg",
    "IconSetNormalizer",
    "NormalizationConfig",
    "NormalizationError",
    "IconSetResult",
    "VariantRasterizer",
    "RasterConfig",
    "RasterizationError",
    "render_svg_to_png",
    "RunStats",
    "ItemFailure",
]
