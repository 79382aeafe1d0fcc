"""
Configuration management system for the icon pipeline.
Supports TOML and JSON configuration files with validation.
"""

import os
import json
from dataclasses import dataclass, field

# Handle tomllib import for different Python versions
try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Python < 3.11 with tomli package
from typing import Dict, List, Optional, Any, Union
from pathlib import Path
from PIL import ImageColor


DEFAULT_SIZES = (24, 48, 64, 128)


@dataclass
class PipelineConfig:
    """Main configuration class for the icon pipeline."""

    # Icon package source
    package: str = "@iconify/json"
    registry: str = "https://registry.npmjs.org"
    cache_dir: str = "cache"
    source_dir: Optional[str] = None
    request_timeout: float = 60.0

    # Output trees
    svg_dir: str = "svg"
    png_dir: str = "png"

    # Normalization settings
    color: str = "#fcfcfc"
    add_missing_color: bool = True
    include_aliases: bool = False
    prefixes: List[str] = field(default_factory=list)

    # Raster settings
    sizes: tuple[int, ...] = DEFAULT_SIZES
    compression_level: int = 6

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "PipelineConfig":
        """Load configuration from TOML or JSON file."""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix.lower() == '.toml':
            return cls._from_toml(config_path)
        elif config_path.suffix.lower() == '.json':
            return cls._from_json(config_path)
        else:
            raise ValueError(f"Unsupported configuration format: {config_path.suffix}")

    @classmethod
    def _from_toml(cls, config_path: Path) -> "PipelineConfig":
        """Load configuration from TOML file."""
        with open(config_path, 'rb') as f:
            data = tomllib.load(f)
        return cls._from_dict(data)

    @classmethod
    def _from_json(cls, config_path: Path) -> "PipelineConfig":
        """Load configuration from JSON file."""
        with open(config_path, 'r') as f:
            data = json.load(f)
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        """Create configuration from dictionary."""
        config_data = {}

        # Handle package source
        if 'source' in data:
            source = data['source']
            config_data['package'] = source.get('package', '@iconify/json')
            config_data['registry'] = source.get('registry', 'https://registry.npmjs.org')
            config_data['cache_dir'] = source.get('cache_dir', 'cache')
            config_data['source_dir'] = source.get('source_dir')
            config_data['request_timeout'] = float(source.get('timeout', 60.0))

        # Handle paths
        if 'paths' in data:
            paths = data['paths']
            config_data['svg_dir'] = paths.get('svg_dir', 'svg')
            config_data['png_dir'] = paths.get('png_dir', 'png')

        # Handle normalization settings
        if 'normalize' in data:
            normalize = data['normalize']
            config_data['color'] = normalize.get('color', '#fcfcfc')
            config_data['add_missing_color'] = normalize.get('add_missing_color', True)
            config_data['include_aliases'] = normalize.get('include_aliases', False)
            config_data['prefixes'] = list(normalize.get('prefixes', []))

        # Handle raster settings
        if 'raster' in data:
            raster = data['raster']
            if 'sizes' in raster:
                config_data['sizes'] = tuple(int(size) for size in raster['sizes'])
            config_data['compression_level'] = raster.get('compression_level', 6)

        return cls(**config_data)

    @classmethod
    def default(cls) -> "PipelineConfig":
        """Create default configuration with environment variable overrides."""
        config = cls()

        # Apply environment variable overrides
        config = cls._apply_env_overrides(config)

        return config

    @classmethod
    def _apply_env_overrides(cls, config: "PipelineConfig") -> "PipelineConfig":
        """Apply environment variable overrides to configuration."""

        # Package source
        if os.getenv('ICON_PIPELINE_PACKAGE'):
            config.package = os.getenv('ICON_PIPELINE_PACKAGE', '@iconify/json')

        if os.getenv('ICON_PIPELINE_REGISTRY'):
            config.registry = os.getenv('ICON_PIPELINE_REGISTRY', 'https://registry.npmjs.org')

        if os.getenv('ICON_PIPELINE_CACHE_DIR'):
            config.cache_dir = os.getenv('ICON_PIPELINE_CACHE_DIR', 'cache')

        if os.getenv('ICON_PIPELINE_SOURCE_DIR'):
            config.source_dir = os.getenv('ICON_PIPELINE_SOURCE_DIR')

        if os.getenv('ICON_PIPELINE_REQUEST_TIMEOUT'):
            config.request_timeout = float(os.getenv('ICON_PIPELINE_REQUEST_TIMEOUT', '60'))

        # Paths
        if os.getenv('ICON_PIPELINE_SVG_DIR'):
            config.svg_dir = os.getenv('ICON_PIPELINE_SVG_DIR', 'svg')

        if os.getenv('ICON_PIPELINE_PNG_DIR'):
            config.png_dir = os.getenv('ICON_PIPELINE_PNG_DIR', 'png')

        # Normalization settings
        if os.getenv('ICON_PIPELINE_COLOR'):
            config.color = os.getenv('ICON_PIPELINE_COLOR', '#fcfcfc')

        if os.getenv('ICON_PIPELINE_ADD_MISSING_COLOR'):
            config.add_missing_color = os.getenv('ICON_PIPELINE_ADD_MISSING_COLOR', 'true').lower() == 'true'

        if os.getenv('ICON_PIPELINE_INCLUDE_ALIASES'):
            config.include_aliases = os.getenv('ICON_PIPELINE_INCLUDE_ALIASES', 'false').lower() == 'true'

        if os.getenv('ICON_PIPELINE_PREFIXES'):
            config.prefixes = [
                prefix.strip() for prefix in os.getenv('ICON_PIPELINE_PREFIXES', '').split(',')
                if prefix.strip()
            ]

        # Raster settings
        if os.getenv('ICON_PIPELINE_SIZES'):
            config.sizes = tuple(
                int(size) for size in os.getenv('ICON_PIPELINE_SIZES', '').split(',') if size.strip()
            )

        if os.getenv('ICON_PIPELINE_COMPRESSION_LEVEL'):
            config.compression_level = int(os.getenv('ICON_PIPELINE_COMPRESSION_LEVEL', '6'))

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        # Validate canonical color
        try:
            ImageColor.getrgb(self.color)
        except ValueError:
            errors.append(f"color '{self.color}' is not a valid color")

        # Validate raster sizes
        if not self.sizes:
            errors.append("sizes must contain at least one width")
        elif any(size <= 0 for size in self.sizes):
            errors.append("sizes must be positive")
        elif list(self.sizes) != sorted(set(self.sizes)):
            errors.append("sizes must be strictly ascending")

        # Validate compression level
        if not 0 <= self.compression_level <= 9:
            errors.append("compression_level must be between 0 and 9")

        if self.request_timeout <= 0:
            errors.append("request_timeout must be positive")

        return errors

