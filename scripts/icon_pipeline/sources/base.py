"""
Abstract base classes for icon package sources.
Defines the interface that every source of icon-set data must implement.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any
from pathlib import Path


@dataclass
class SourceSnapshot:
    """A local copy of the icon-set package."""
    content_root: Path
    version: str

    @property
    def collections_path(self) -> Path:
        """Path of the icon-set manifest."""
        return self.content_root / "collections.json"


class Source(ABC):
    """Abstract base class for icon package sources."""

    @abstractmethod
    def acquire(self) -> SourceSnapshot:
        """
        Make sure a local snapshot of the package exists.

        Returns:
            SourceSnapshot with the content root and package version

        Raises:
            NetworkError: If the package cannot be downloaded
            SourceError: If the package cannot be unpacked or found
        """
        pass

    def get_source_info(self) -> Dict[str, Any]:
        """
        Get information about this source.

        Returns:
            Dictionary with source metadata
        """
        return {"name": self.__class__.__name__}


class LocalDirectorySource(Source):
    """Source backed by an already-extracted package directory."""

    def __init__(self, content_root: Path):
        self.content_root = Path(content_root)

    def acquire(self) -> SourceSnapshot:
        if not self.content_root.is_dir():
            raise SourceError(f"Package directory not found: {self.content_root}", "local")
        return SourceSnapshot(content_root=self.content_root, version="local")

    def get_source_info(self) -> Dict[str, Any]:
        info = super().get_source_info()
        info["content_root"] = str(self.content_root)
        return info


class SourceError(Exception):
    """Base exception for source errors."""

    def __init__(self, message: str, source: str, recoverable: bool = False):
        super().__init__(message)
        self.source = source
        self.recoverable = recoverable


class NetworkError(SourceError):
    """Exception raised for network-related errors."""

    def __init__(self, message: str, source: str):
        super().__init__(f"Network error: {message}", source, recoverable=True)
