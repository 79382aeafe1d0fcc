"""
Image processing utilities for the icon pipeline.
"""

from typing import Union
from pathlib import Path
from PIL import Image
import io


class ImageUtils:
    """Utility class for common raster operations."""

    @staticmethod
    def load_image(data: Union[bytes, str, Path, Image.Image]) -> Image.Image:
        """
        Load image from various sources.

        Args:
            data: Image data as bytes, file path, or PIL Image

        Returns:
            PIL Image object

        Raises:
            ValueError: If data cannot be loaded as image
        """
        if isinstance(data, Image.Image):
            return data
        elif isinstance(data, bytes):
            try:
                image = Image.open(io.BytesIO(data))
                image.load()
                return image
            except Exception as e:
                raise ValueError(f"Cannot load image from bytes: {e}")
        elif isinstance(data, (str, Path)):
            try:
                image = Image.open(data)
                image.load()
                return image
            except Exception as e:
                raise ValueError(f"Cannot load image from path '{data}': {e}")
        else:
            raise ValueError(f"Unsupported image data type: {type(data)}")

    @staticmethod
    def save_image(image: Image.Image, path: Union[str, Path], format: str = 'PNG', **kwargs) -> None:
        """
        Save image to file.

        Args:
            image: Image to save
            path: Output file path
            format: Image format
            **kwargs: Additional save parameters
        """
        save_kwargs = {
            'optimize': True,
        }

        if format.upper() == 'PNG':
            save_kwargs['compress_level'] = kwargs.pop('compress_level', 6)

        save_kwargs.update(kwargs)

        image.save(path, format=format, **save_kwargs)

    @staticmethod
    def ensure_rgba(image: Image.Image) -> Image.Image:
        """Convert image to RGBA mode if not already."""
        if image.mode != 'RGBA':
            return image.convert('RGBA')
        return image

    @staticmethod
    def has_visible_content(image: Image.Image) -> bool:
        """Check if image has at least one non-transparent pixel."""
        image = ImageUtils.ensure_rgba(image)
        return image.getchannel('A').getextrema()[1] > 0
