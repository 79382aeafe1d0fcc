"""
Progress accounting shared by the export and rasterize stages.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ItemFailure:
    """One item that was skipped, and why."""
    item: str
    reason: str


@dataclass
class RunStats:
    """Counters for one stage invocation."""
    total: int = 0
    processed: int = 0
    failed: int = 0
    failures: List[ItemFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return self.processed - self.failed

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 100.0
        return self.processed / self.total * 100

    def record_success(self) -> None:
        self.processed += 1

    def record_failure(self, item: str, reason: str) -> None:
        self.processed += 1
        self.failed += 1
        self.failures.append(ItemFailure(item, reason))

    def merge(self, other: "RunStats") -> None:
        self.total += other.total
        self.processed += other.processed
        self.failed += other.failed
        self.failures.extend(other.failures)

    def progress_line(self) -> str:
        return f"Progress: {self.processed}/{self.total} ({self.percent:.2f}%)"
