"""
Pipeline coordinator for the export and rasterize stages.
Manages step execution order, timing, state and error handling.
"""

import time
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any, Callable, Set
from dataclasses import dataclass, field

from .config import PipelineConfig
from .catalog import list_prefixes, load_icon_set, CatalogError
from .sources.base import Source, SourceSnapshot, LocalDirectorySource
from .sources.npm import NpmPackageSource
from .scanner import list_providers, get_all_svg_files
from .processing.normalizer import (
    IconSetNormalizer, NormalizationConfig, NormalizationError, IconSetResult
)
from .processing.rasterizer import VariantRasterizer, RasterConfig, Renderer, ProgressCallback
from .processing.stats import RunStats, ItemFailure


class PipelineStep(Enum):
    """Enumeration of pipeline steps."""
    ACQUIRE = "acquire"
    INDEX = "index"
    NORMALIZE = "normalize"
    SCAN = "scan"
    RASTERIZE = "rasterize"


@dataclass
class StepResult:
    """Result of a pipeline step execution."""
    step: PipelineStep
    success: bool
    duration: float
    message: str
    errors: List[str] = field(default_factory=list)


@dataclass
class PipelineState:
    """Current state of the pipeline execution."""
    current_step: Optional[PipelineStep] = None
    completed_steps: Set[PipelineStep] = field(default_factory=set)
    failed_steps: Set[PipelineStep] = field(default_factory=set)
    step_results: Dict[PipelineStep, StepResult] = field(default_factory=dict)
    start_time: Optional[float] = None


@dataclass
class ExportSummary:
    """Outcome of the export stage."""
    version: str
    results: List[IconSetResult] = field(default_factory=list)
    failed_sets: List[ItemFailure] = field(default_factory=list)
    icons: RunStats = field(default_factory=RunStats)

    @property
    def files_written(self) -> int:
        return sum(len(result.exported) for result in self.results)


class PipelineError(Exception):
    """Base exception for pipeline errors."""
    def __init__(self, message: str, step: Optional[PipelineStep] = None, recoverable: bool = False):
        super().__init__(message)
        self.step = step
        self.recoverable = recoverable


class NoWorkError(PipelineError):
    """Raised when a stage has nothing to process."""


class IconPipeline:
    """
    Coordinates the two batch stages of the icon pipeline.

    The export stage acquires the icon-set package, normalizes every icon set
    and writes ``svg_dir/<prefix>/<name>.svg``. The rasterize stage turns one
    provider directory of that tree into ``png_dir/<provider>/<name>_<width>.png``.
    """

    def __init__(
        self,
        config: PipelineConfig,
        source: Optional[Source] = None,
        renderer: Optional[Renderer] = None,
    ):
        """
        Initialize the icon pipeline.

        Args:
            config: Pipeline configuration
            source: Icon package source; built from the configuration if omitted
            renderer: SVG to PNG renderer used by the rasterize stage
        """
        self.config = config
        self.state = PipelineState()
        self.logger = self._setup_logging()

        self.source = source or self._create_source()
        self.svg_root = Path(config.svg_dir)
        self.png_root = Path(config.png_dir)

        self._normalizer = IconSetNormalizer(NormalizationConfig(
            color=config.color,
            add_missing_color=config.add_missing_color,
            include_aliases=config.include_aliases,
        ))
        self._rasterizer = VariantRasterizer(
            RasterConfig(sizes=tuple(config.sizes), compression_level=config.compression_level),
            svg_root=self.svg_root,
            png_root=self.png_root,
            renderer=renderer,
        )

    def _setup_logging(self) -> logging.Logger:
        """Set up logging for the pipeline."""
        logger = logging.getLogger("icon_pipeline")
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def _create_source(self) -> Source:
        if self.config.source_dir:
            return LocalDirectorySource(Path(self.config.source_dir))
        return NpmPackageSource(
            package=self.config.package,
            cache_dir=Path(self.config.cache_dir),
            registry=self.config.registry,
            timeout=self.config.request_timeout,
        )

    def run_export(self, prefixes: Optional[List[str]] = None) -> ExportSummary:
        """
        Run the export stage.

        Args:
            prefixes: Icon sets to export; defaults to the configured
                prefixes, or every set in the manifest

        Returns:
            ExportSummary with per-set results

        Raises:
            SourceError: If the package cannot be acquired
            CatalogError: If the manifest cannot be read
        """
        self.logger.info("Starting icon export")
        self.state.start_time = time.time()

        snapshot: SourceSnapshot = self._execute_step(PipelineStep.ACQUIRE, self.source.acquire)
        available = self._execute_step(
            PipelineStep.INDEX, lambda: list_prefixes(snapshot.content_root)
        )
        self.logger.info(f"Got {len(available)} icon sets")

        selected = self._select_prefixes(available, prefixes or self.config.prefixes)

        summary = self._execute_step(
            PipelineStep.NORMALIZE, lambda: self._normalize_all(snapshot, selected)
        )

        self._generate_execution_summary("Export", summary.icons)
        if summary.failed_sets:
            self.logger.info(f"Icon sets failed: {len(summary.failed_sets)}")
        self.logger.info(f"SVG files written: {summary.files_written}")
        return summary

    def _select_prefixes(self, available: List[str], requested: List[str]) -> List[str]:
        if not requested:
            return available
        known = set(available)
        for prefix in requested:
            if prefix not in known:
                self.logger.warning(f"Icon set '{prefix}' is not in the manifest, skipping")
        return [prefix for prefix in requested if prefix in known]

    def _normalize_all(self, snapshot: SourceSnapshot, prefixes: List[str]) -> ExportSummary:
        summary = ExportSummary(version=snapshot.version)

        for prefix in prefixes:
            try:
                data = load_icon_set(snapshot.content_root, prefix)
                result = self._normalizer.process(data, prefix, self.svg_root)
            except (CatalogError, NormalizationError) as e:
                self.logger.error(f"Skipping icon set {prefix}: {e}")
                summary.failed_sets.append(ItemFailure(prefix, str(e)))
                continue

            summary.results.append(result)
            summary.icons.merge(result.stats)

        return summary

    def list_providers(self) -> List[str]:
        return list_providers(self.svg_root)

    def run_rasterize(self, provider: str, on_progress: Optional[ProgressCallback] = None) -> RunStats:
        """
        Run the rasterize stage for one provider.

        Args:
            provider: Name of a directory directly under the SVG tree
            on_progress: Called with the running stats after each file

        Returns:
            RunStats for the provider

        Raises:
            PipelineError: If the provider does not exist
            NoWorkError: If the provider has no SVG files
        """
        self.logger.info(f"Starting rasterization of provider '{provider}'")
        self.state.start_time = time.time()

        if provider not in self.list_providers():
            raise PipelineError(f"Provider '{provider}' not found in {self.svg_root}", PipelineStep.SCAN)

        svg_files = self._execute_step(
            PipelineStep.SCAN, lambda: get_all_svg_files(self.svg_root / provider)
        )
        if not svg_files:
            raise NoWorkError(f"No SVG files found for provider '{provider}'", PipelineStep.SCAN)
        self.logger.info(f"Found {len(svg_files)} SVG files")

        stats = self._execute_step(
            PipelineStep.RASTERIZE,
            lambda: self._rasterizer.rasterize_files(svg_files, on_progress),
        )

        self._generate_execution_summary("Rasterize", stats)
        return stats

    def _execute_step(self, step: PipelineStep, handler: Callable[[], Any]) -> Any:
        """
        Execute a single pipeline step with error handling and timing.

        Args:
            step: Step being executed
            handler: Callable doing the work

        Returns:
            Whatever the handler returns
        """
        self.state.current_step = step
        self.logger.info(f"Executing step: {step.value}")

        start_time = time.time()

        try:
            result = handler()
        except Exception as e:
            duration = time.time() - start_time
            self.state.step_results[step] = StepResult(
                step=step,
                success=False,
                duration=duration,
                message=f"Step {step.value} failed: {str(e)}",
                errors=[str(e)]
            )
            self.state.failed_steps.add(step)
            self.logger.error(f"Step {step.value} failed after {duration:.2f}s: {e}")
            raise

        duration = time.time() - start_time
        self.state.step_results[step] = StepResult(
            step=step,
            success=True,
            duration=duration,
            message=f"Step {step.value} completed successfully"
        )
        self.state.completed_steps.add(step)
        self.logger.info(f"Step {step.value} completed in {duration:.2f}s")
        return result

    def _generate_execution_summary(self, stage: str, stats: RunStats):
        """Log the item counts and step timings of a stage."""
        total_duration = time.time() - (self.state.start_time or time.time())

        self.logger.info("=" * 60)
        self.logger.info(f"{stage.upper()} SUMMARY")
        self.logger.info("=" * 60)
        self.logger.info(f"Total execution time: {total_duration:.2f}s")
        self.logger.info(f"Items processed: {stats.processed}/{stats.total}")
        self.logger.info(f"Items succeeded: {stats.succeeded}")
        self.logger.info(f"Items failed: {stats.failed}")

        for failure in stats.failures[:10]:
            self.logger.info(f"  - {failure.item}: {failure.reason}")
        if len(stats.failures) > 10:
            self.logger.info(f"  ... and {len(stats.failures) - 10} more")

        self.logger.info("Step execution times:")
        for step, result in self.state.step_results.items():
            status = "✓" if result.success else "✗"
            self.logger.info(f"  {status} {step.value}: {result.duration:.2f}s")

        self.logger.info("=" * 60)
