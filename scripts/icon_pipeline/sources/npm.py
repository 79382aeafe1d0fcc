"""
npm registry source for downloading the bundled icon-set package.
"""

import os
import shutil
import logging
import tarfile
from pathlib import Path
from typing import Dict, Any, Iterator, Optional
from urllib.parse import quote
import requests

from .base import Source, SourceSnapshot, SourceError, NetworkError

logger = logging.getLogger(__name__)

CACHED_VERSION = "cached"
MARKER_NAME = ".extracted"

# Interpreters before 3.9.17 and 3.10.12 have no extraction filters
HAS_EXTRACTION_FILTER = hasattr(tarfile, "data_filter")


class NpmPackageSource(Source):
    """Source that fetches a package tarball from an npm registry."""

    def __init__(
        self,
        package: str = "@iconify/json",
        cache_dir: Path = Path("cache"),
        registry: str = "https://registry.npmjs.org",
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ):
        self.package = package
        self.cache_dir = Path(cache_dir)
        self.registry = registry.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'IconPipeline/1.0'
        })

    @property
    def marker_path(self) -> Path:
        return self.cache_dir / MARKER_NAME

    @property
    def content_root(self) -> Path:
        # npm tarballs keep their files under a top-level "package/" directory
        return self.cache_dir / "package"

    def acquire(self) -> SourceSnapshot:
        """Use the cached package if present, otherwise download the latest one."""
        if self.marker_path.exists():
            logger.info("Cache directory exists, using cached package.")
            return SourceSnapshot(content_root=self.content_root, version=CACHED_VERSION)

        logger.info("Downloading latest package")
        version, tarball_url = self._resolve_latest()

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        archive_name = f"{self.package.split('/')[-1]}-{version}.tgz"
        archive_path = self.cache_dir / archive_name

        self._download_tarball(tarball_url, archive_path)
        self._extract_tarball(archive_path, self.cache_dir)
        archive_path.unlink()

        if not self.content_root.is_dir():
            raise SourceError(f"Archive {archive_name} has no package directory", "npm")

        # Mark as extracted
        self.marker_path.write_text(version)

        logger.info(f"Downloaded package version {version}")
        return SourceSnapshot(content_root=self.content_root, version=version)

    def _resolve_latest(self) -> tuple[str, str]:
        """Return version and tarball URL of the latest published release."""
        url = f"{self.registry}/{quote(self.package, safe='@')}/latest"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise NetworkError(f"Failed to query {url}: {e}", "npm")
        except ValueError as e:
            raise SourceError(f"Invalid registry response from {url}: {e}", "npm")

        try:
            return data["version"], data["dist"]["tarball"]
        except (KeyError, TypeError):
            raise SourceError(f"Registry response for {self.package} has no tarball", "npm")

    def _download_tarball(self, url: str, output_path: Path) -> None:
        """Download package tarball."""
        try:
            logger.info(f"Downloading {self.package} from {url}...")
            response = self.session.get(url, stream=True, timeout=self.timeout)
            response.raise_for_status()

            with open(output_path, 'wb') as f:
                for chunk in response.iter_content(chunk_size=65536):
                    f.write(chunk)

        except requests.RequestException as e:
            raise NetworkError(f"Failed to download package from {url}: {e}", "npm")

    def _extract_tarball(self, archive_path: Path, extract_dir: Path) -> None:
        """Extract package tarball."""
        try:
            logger.info(f"Extracting {archive_path}...")
            with tarfile.open(archive_path, 'r:gz') as archive:
                if HAS_EXTRACTION_FILTER:
                    archive.extractall(extract_dir, filter="data")
                else:
                    archive.extractall(extract_dir, members=self._safe_members(archive, extract_dir))

        except tarfile.TarError as e:
            raise SourceError(f"Invalid package archive {archive_path}: {e}", "npm")

    @staticmethod
    def _safe_members(archive: tarfile.TarFile, extract_dir: Path) -> Iterator[tarfile.TarInfo]:
        """Regular files and directories that stay inside the extraction directory."""
        root = extract_dir.resolve()
        for member in archive.getmembers():
            target = (root / member.name).resolve()
            if not (member.isfile() or member.isdir()):
                logger.warning(f"Skipping archive member {member.name}: not a regular file")
            elif target != root and root not in target.parents:
                logger.warning(f"Skipping archive member {member.name}: outside of {extract_dir}")
            else:
                yield member

    def get_cache_info(self) -> Dict[str, Any]:
        """Get information about the cached package."""
        cached = self.marker_path.exists()
        return {
            "cache_dir": str(self.cache_dir),
            "package": self.package,
            "cached": cached,
            "version": self.marker_path.read_text().strip() if cached else None,
            "size_mb": self._get_directory_size(self.cache_dir) / (1024 * 1024) if self.cache_dir.exists() else 0
        }

    def clear_cache(self) -> None:
        """Remove the cached package so the next run downloads it again."""
        if self.cache_dir.exists():
            shutil.rmtree(self.cache_dir)
            logger.info(f"Cleared package cache {self.cache_dir}")

    def _get_directory_size(self, directory: Path) -> int:
        """Get total size of directory in bytes."""
        total_size = 0
        for dirpath, dirnames, filenames in os.walk(directory):
            for filename in filenames:
                filepath = os.path.join(dirpath, filename)
                if os.path.exists(filepath):
                    total_size += os.path.getsize(filepath)
        return total_size

    def get_source_info(self) -> Dict[str, Any]:
        info = super().get_source_info()
        info.update({
            "registry": self.registry,
            "cache_info": self.get_cache_info()
        })
        return info
