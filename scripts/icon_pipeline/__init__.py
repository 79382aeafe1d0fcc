"""
Icon Pipeline

Exports the bundled iconify icon sets as normalized monotone SVG files and
renders any exported provider into PNG variants at several widths.
"""

__version__ = "0.1.0"
__author__ = "Icon Pipeline Development Team"

from .config import PipelineConfig
from .iconset import IconSet
from .sources.base import Source, SourceSnapshot
from .processing.normalizer import IconSetNormalizer
from .processing.rasterizer import VariantRasterizer
from .pipeline import IconPipeline

__all__ = [
    "PipelineConfig",
    "IconSet",
    "Source",
    "SourceSnapshot",
    "IconSetNormalizer",
    "VariantRasterizer",
    "IconPipeline",
]
