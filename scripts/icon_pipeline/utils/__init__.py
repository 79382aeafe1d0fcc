"""
Utility modules for image handling.
"""

from .image import ImageUtils

__all__ = [
    "ImageUtils",
]
