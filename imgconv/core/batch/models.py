"""Data models for batch conversion."""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from imgconv.models.conversion import ConversionRequest


class BatchItemStatus(str, Enum):
    """Status of an individual file in a batch."""

    PENDING = "pending"
    SKIPPED = "skipped"
    COMPLETED = "completed"
    FAILED = "failed"


class BatchItem(BaseModel):
    """One input file of a batch and what happened to it."""

    input_path: Path
    output_path: Path
    status: BatchItemStatus = Field(default=BatchItemStatus.PENDING)
    error_message: Optional[str] = Field(None, description="Error message if failed")
    processing_time: Optional[float] = Field(
        None, description="Processing time in seconds"
    )

    @property
    def filename(self) -> str:
        return self.input_path.name


class BatchPlan(BaseModel):
    """Requests to schedule plus the files skipped while planning."""

    output_dir: Path
    requests: List[ConversionRequest] = Field(default_factory=list)
    skipped: List[BatchItem] = Field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.requests) + len(self.skipped)


class BatchReport(BaseModel):
    """Aggregate outcome of a batch run."""

    output_dir: Path
    items: List[BatchItem] = Field(default_factory=list)
    elapsed_seconds: float = 0.0

    def _count(self, status: BatchItemStatus) -> int:
        return sum(1 for item in self.items if item.status == status)

    @property
    def completed(self) -> int:
        return self._count(BatchItemStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return self._count(BatchItemStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(BatchItemStatus.SKIPPED)

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0
