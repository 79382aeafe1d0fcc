"""
Icon package sources for the pipeline.
Handles the npm registry download and already-extracted local packages.
"""

from .base import (
    Source, SourceSnapshot, LocalDirectorySource,
    SourceError, NetworkError
)
from .npm import NpmPackageSource, CACHED_VERSION

__all__ = [
    "Source",
    "SourceSnapshot",
    "LocalDirectorySource",
    "SourceError",
    "NetworkError",
    "NpmPackageSource",
    "CACHED_VERSION",
]
