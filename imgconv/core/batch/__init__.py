"""Batch processing module for converting a directory of images."""

from .manager import BatchConverter, build_output_path
from .models import BatchItem, BatchItemStatus, BatchPlan, BatchReport

__all__ = [
    "BatchConverter",
    "BatchItem",
    "BatchItemStatus",
    "BatchPlan",
    "BatchReport",
    "build_output_path",
]
