"""
Variant fan-out: renders every SVG file into PNG files at several widths.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from PIL import Image

from ..config import DEFAULT_SIZES
from ..utils.image import ImageUtils
from .stats import RunStats

logger = logging.getLogger(__name__)

Renderer = Callable[[bytes, int], bytes]
ProgressCallback = Callable[[RunStats], None]


def render_svg_to_png(svg_data: bytes, width: int) -> bytes:
    """Render SVG markup to PNG bytes at ``width`` pixels, keeping the aspect ratio."""
    from cairosvg import svg2png

    return svg2png(bytestring=svg_data, output_width=width)


@dataclass
class RasterConfig:
    """Configuration for PNG variant generation."""
    sizes: Sequence[int] = DEFAULT_SIZES
    compression_level: int = 6


class VariantRasterizer:
    """Mirrors ``svg_root`` into ``png_root``, one PNG per file and width."""

    def __init__(
        self,
        config: RasterConfig,
        svg_root: Path,
        png_root: Path,
        renderer: Optional[Renderer] = None,
    ):
        self.config = config
        self.svg_root = Path(svg_root)
        self.png_root = Path(png_root)
        self.renderer = renderer or render_svg_to_png

    def output_base(self, svg_path: Path) -> Path:
        """``svg_root/a/b.svg`` -> ``png_root/a/b`` (no suffix)."""
        relative = Path(svg_path).relative_to(self.svg_root)
        return self.png_root / relative.with_suffix("")

    def variant_paths(self, svg_path: Path) -> List[Path]:
        base = self.output_base(svg_path)
        return [base.with_name(f"{base.name}_{size}.png") for size in self.config.sizes]

    def rasterize_file(self, svg_path: Path) -> List[Path]:
        """
        Write every PNG variant of one SVG file.

        All variants are rendered before any file is written. If writing
        fails part-way, the variants already written are removed.

        Returns:
            Paths of the written PNG files, in size order

        Raises:
            RasterizationError: If a rendered variant has the wrong width or is fully transparent
            Exception: Whatever the renderer or filesystem raises
        """
        svg_path = Path(svg_path)
        targets = self.variant_paths(svg_path)
        targets[0].parent.mkdir(parents=True, exist_ok=True)

        svg_data = svg_path.read_bytes()

        images: List[Image.Image] = []
        for size in self.config.sizes:
            image = ImageUtils.load_image(self.renderer(svg_data, size))
            if image.width != size:
                raise RasterizationError(
                    f"Rendered width {image.width} != expected {size}", str(svg_path)
                )
            if not ImageUtils.has_visible_content(image):
                raise RasterizationError(f"Rendered {size}px image is empty", str(svg_path))
            images.append(ImageUtils.ensure_rgba(image))

        written: List[Path] = []
        try:
            for image, target in zip(images, targets):
                ImageUtils.save_image(image, target, compress_level=self.config.compression_level)
                written.append(target)
        except Exception:
            for path in written:
                path.unlink(missing_ok=True)
            raise

        return written

    def rasterize_files(
        self,
        svg_files: Iterable[Path],
        on_progress: Optional[ProgressCallback] = None,
    ) -> RunStats:
        """
        Rasterize many files, skipping the ones that fail.

        Args:
            svg_files: Files to convert
            on_progress: Called with the running stats after each file

        Returns:
            RunStats for the batch
        """
        files = list(svg_files)
        stats = RunStats(total=len(files))

        for svg_file in files:
            try:
                self.rasterize_file(svg_file)
                stats.record_success()
            except Exception as e:
                logger.error(f"Failed to convert {svg_file}: {e}")
                stats.record_failure(str(svg_file), str(e) or e.__class__.__name__)

            if on_progress is not None:
                on_progress(stats)

        return stats


class RasterizationError(Exception):
    """Exception raised when a PNG variant cannot be produced."""

    def __init__(self, message: str, path: str):
        super().__init__(f"{path}: {message}")
        self.path = path
