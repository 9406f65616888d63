"""Batch driver converting every matching file of a directory concurrently."""

import asyncio
import time
from contextlib import nullcontext
from pathlib import Path
from typing import Callable, List, Optional

from imgconv.config import Settings, settings as default_settings
from imgconv.core.batch.models import BatchItem, BatchItemStatus, BatchPlan, BatchReport
from imgconv.core.conversion.converter import ImageConverter
from imgconv.core.exceptions import InputNotFoundError, ProcessingTimeoutError
from imgconv.models.conversion import Backend, ConversionRequest, ConversionResult, ImageFormat
from imgconv.utils.logging import LoggingContext, get_logger

ItemCallback = Callable[[BatchItem], None]


def build_output_path(output_dir: Path, input_path: Path, image_format: ImageFormat) -> Path:
    """``<output_dir>/<input stem>.<format extension>``."""
    return output_dir / f"{input_path.stem}.{image_format.extension}"


class BatchConverter:
    """Plans and runs one conversion per input file.

    Output paths that already exist are skipped while planning, before any
    codec runs. Everything else is scheduled at once; one file failing never
    cancels the others, and the report is only produced after every file has
    finished.
    """

    def __init__(
        self,
        converter: Optional[ImageConverter] = None,
        config: Optional[Settings] = None,
    ):
        self.settings = config or default_settings
        self.converter = converter or ImageConverter(config=self.settings)
        self.logger = get_logger(__name__)

    def discover(self, input_dir: Path, pattern: Optional[str] = None) -> List[Path]:
        """List files in ``input_dir`` matching ``pattern``, sorted by name."""
        input_dir = Path(input_dir)
        if not input_dir.is_dir():
            raise InputNotFoundError(
                f"Input directory {input_dir} does not exist",
                details={"input_path": str(input_dir)},
            )
        pattern = pattern or self.settings.input_pattern
        return sorted(p for p in input_dir.glob(pattern) if p.is_file())

    def default_output_dir(self, input_dir: Path, image_format: ImageFormat) -> Path:
        return Path(input_dir) / f"{self.settings.batch_output_dir_prefix}{image_format.name}"

    def plan(
        self,
        input_dir: Path,
        image_format: ImageFormat,
        output_dir: Optional[Path] = None,
        pattern: Optional[str] = None,
        quality: Optional[int] = None,
        backend: Optional[Backend] = None,
    ) -> BatchPlan:
        """Build the requests for a directory and record skipped files."""
        files = self.discover(input_dir, pattern)
        output_dir = Path(output_dir or self.default_output_dir(input_dir, image_format))
        output_dir.mkdir(parents=True, exist_ok=True)

        overrides = {}
        if quality is not None:
            overrides["quality"] = quality
        if backend is not None:
            overrides["backend"] = backend

        plan = BatchPlan(output_dir=output_dir)
        planned = {}
        for input_path in files:
            output_path = build_output_path(output_dir, input_path, image_format)
            if output_path in planned:
                # Same stem, different extension: first input in sorted order wins
                plan.skipped.append(
                    BatchItem(
                        input_path=input_path,
                        output_path=output_path,
                        status=BatchItemStatus.SKIPPED,
                        error_message=f"Output also targeted by {planned[output_path].name}",
                    )
                )
                continue
            if output_path.exists():
                plan.skipped.append(
                    BatchItem(
                        input_path=input_path,
                        output_path=output_path,
                        status=BatchItemStatus.SKIPPED,
                    )
                )
                continue
            planned[output_path] = input_path
            plan.requests.append(
                self.converter.build_request(input_path, output_path, image_format, **overrides)
            )

        self.logger.info(
            "Planned batch",
            files=plan.total_files,
            scheduled=len(plan.requests),
            skipped=len(plan.skipped),
        )
        return plan

    async def run(self, plan: BatchPlan, on_item: Optional[ItemCallback] = None) -> BatchReport:
        """Run every planned request concurrently and collect each outcome."""
        start = time.perf_counter()
        report = BatchReport(output_dir=plan.output_dir)

        for item in plan.skipped:
            report.items.append(item)
            self._notify(on_item, item)

        limit = self.settings.max_concurrent_conversions
        semaphore = asyncio.Semaphore(limit) if limit else None

        async def run_one(request: ConversionRequest) -> BatchItem:
            async with semaphore or nullcontext():
                result = await self._convert_with_timeout(request)
            item = self._to_item(request, result)
            self._notify(on_item, item)
            return item

        # Tasks copy the context on creation, so every worker log line carries it
        with LoggingContext(output_dir=str(plan.output_dir), batch_size=len(plan.requests)):
            outcomes = await asyncio.gather(
                *(run_one(request) for request in plan.requests),
                return_exceptions=True,
            )

        for request, outcome in zip(plan.requests, outcomes):
            if isinstance(outcome, BaseException):
                # A converter that raises only fails its own file
                self.logger.error(
                    "Conversion task raised", error=str(outcome), exc_info=outcome
                )
                item = BatchItem(
                    input_path=request.input_path,
                    output_path=request.output_path,
                    status=BatchItemStatus.FAILED,
                    error_message=str(outcome) or type(outcome).__name__,
                )
                self._notify(on_item, item)
                outcome = item
            report.items.append(outcome)

        report.elapsed_seconds = time.perf_counter() - start
        self.logger.info(
            "Batch finished",
            completed=report.completed,
            failed=report.failed,
            skipped=report.skipped,
            elapsed=round(report.elapsed_seconds, 3),
        )
        return report

    async def convert_directory(
        self,
        input_dir: Path,
        image_format: ImageFormat,
        output_dir: Optional[Path] = None,
        pattern: Optional[str] = None,
        quality: Optional[int] = None,
        backend: Optional[Backend] = None,
        on_item: Optional[ItemCallback] = None,
    ) -> BatchReport:
        plan = self.plan(input_dir, image_format, output_dir, pattern, quality, backend)
        return await self.run(plan, on_item)

    def _notify(self, on_item: Optional[ItemCallback], item: BatchItem) -> None:
        """Report one item; a failing callback never changes the item or the run."""
        if on_item is None:
            return
        try:
            on_item(item)
        except Exception as e:
            self.logger.error(
                "Item callback raised", file=item.filename, error=str(e), exc_info=True
            )

    async def _convert_with_timeout(self, request: ConversionRequest) -> ConversionResult:
        timeout = self.settings.conversion_timeout
        if timeout is None:
            return await self.converter.convert(request)
        try:
            return await asyncio.wait_for(self.converter.convert(request), timeout)
        except asyncio.TimeoutError:
            # The worker thread keeps running and may still write its output;
            # its semaphore slot is already released
            error = ProcessingTimeoutError(
                f"Conversion timed out after {timeout} seconds",
                details={"timeout_seconds": timeout, "operation": "convert"},
            )
            return ConversionResult.failed(
                request.output_path, timeout, error.message, error.error_code
            )

    @staticmethod
    def _to_item(request: ConversionRequest, result: ConversionResult) -> BatchItem:
        return BatchItem(
            input_path=request.input_path,
            output_path=request.output_path,
            status=BatchItemStatus.COMPLETED if result.success else BatchItemStatus.FAILED,
            error_message=result.error,
            processing_time=result.elapsed,
        )
