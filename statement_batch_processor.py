"""
Statement Batch Processor for extracting transactions from many statements.
Handles text files and ZIP archives with per-file error handling.
"""

import io
import logging
import os
import traceback
import zipfile
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from statement_engine import ExtractionConfig, ExtractionResult, StatementExtractor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SUPPORTED_TEXT_EXTENSIONS = (".txt",)


class StatementDecodeError(ValueError):
    """Raised when file content cannot be read as statement text."""
    pass


def decode_statement_bytes(content: bytes) -> str:
    """
    Decode statement file content.

    Tries utf-8, then cp1252 (Windows exports), then latin-1 which accepts
    every byte value. Content with NUL bytes is treated as binary.
    """
    if b"\x00" in content:
        raise StatementDecodeError("File looks binary (contains NUL bytes)")
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        try:
            return content.decode("cp1252")
        except UnicodeDecodeError:
            return content.decode("latin-1")


@dataclass
class ProcessingError:
    """Details of a processing error."""
    file_name: str
    error_type: str
    error_message: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass
class StatementFileResult:
    """Extraction result for one statement file."""
    file_name: str
    result: ExtractionResult

    @property
    def transaction_count(self) -> int:
        return 0 if self.result.used_fallback else len(self.result.transactions)

    @property
    def quality_score(self) -> float:
        report = self.result.quality_report
        return report.score if report else 0.0


@dataclass
class BatchStats:
    """Statistics for batch processing."""
    total_files: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0

    # Extraction counts
    total_transactions: int = 0
    fallback_files: int = 0

    # Quality statistics
    total_quality: float = 0.0
    min_quality: float = 1.0
    max_quality: float = 0.0

    # Timing
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def average_quality(self) -> float:
        """Calculate average quality score."""
        if self.successful == 0:
            return 0.0
        return self.total_quality / self.successful

    @property
    def processing_time(self) -> float:
        """Calculate total processing time in seconds."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        if self.total_files == 0:
            return 0.0
        return (self.successful / self.total_files) * 100


@dataclass
class BatchResult:
    """Complete result of batch processing."""
    stats: BatchStats
    results: List[StatementFileResult]
    errors: List[ProcessingError]
    error_summary: Dict[str, int] = field(default_factory=dict)

    @staticmethod
    def merge_results(result1: 'BatchResult', result2: 'BatchResult') -> 'BatchResult':
        """
        Merge two BatchResult objects into a single combined result.

        Used when several uploads are accumulated into one review.

        Args:
            result1: First batch result (typically the existing cumulative result)
            result2: Second batch result (typically the new batch to add)

        Returns:
            New BatchResult with merged data
        """
        s1, s2 = result1.stats, result2.stats
        merged_stats = BatchStats(
            total_files=s1.total_files + s2.total_files,
            processed=s1.processed + s2.processed,
            successful=s1.successful + s2.successful,
            failed=s1.failed + s2.failed,
            total_transactions=s1.total_transactions + s2.total_transactions,
            fallback_files=s1.fallback_files + s2.fallback_files,
            total_quality=s1.total_quality + s2.total_quality,
        )

        # Only batches with successful files carry meaningful min/max
        with_data = [s for s in (s1, s2) if s.successful > 0]
        if with_data:
            merged_stats.min_quality = min(s.min_quality for s in with_data)
            merged_stats.max_quality = max(s.max_quality for s in with_data)
        else:
            merged_stats.min_quality = 0.0
            merged_stats.max_quality = 0.0

        starts = [s.start_time for s in (s1, s2) if s.start_time]
        ends = [s.end_time for s in (s1, s2) if s.end_time]
        merged_stats.start_time = min(starts) if starts else None
        merged_stats.end_time = max(ends) if ends else None

        merged_error_summary = dict(result1.error_summary)
        for error_type, count in result2.error_summary.items():
            merged_error_summary[error_type] = merged_error_summary.get(error_type, 0) + count

        return BatchResult(
            stats=merged_stats,
            results=result1.results + result2.results,
            errors=result1.errors + result2.errors,
            error_summary=merged_error_summary
        )


class StatementBatchProcessor:
    """Batch processor for statement text files."""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """
        Initialize the batch processor.

        Args:
            config: Extraction configuration shared by every file (default tables if None)
        """
        self.extractor = StatementExtractor(config)
        logger.info("Initialized statement batch processor")

    def process_batch(
        self,
        files: List[Tuple[str, bytes]],
        progress_callback: Optional[Callable[[int, int, str], None]] = None
    ) -> BatchResult:
        """
        Process a batch of statement files.

        ZIP archives are expanded to their text members first; an archive
        that cannot be opened is recorded as a failed file.

        Args:
            files: List of (filename, content) tuples
            progress_callback: Optional callback(current, total, message)

        Returns:
            BatchResult with all processing results
        """
        files, errors = self.expand_archives(files)
        error_types = {}
        for error in errors:
            error_types[error.error_type] = error_types.get(error.error_type, 0) + 1

        stats = BatchStats(
            total_files=len(files) + len(errors),
            processed=len(errors),
            failed=len(errors),
            start_time=datetime.now()
        )
        results = []

        logger.info(f"Starting batch processing of {len(files)} files")

        for idx, (filename, content) in enumerate(files):
            try:
                if progress_callback:
                    progress_callback(idx + 1, len(files), f"Processing: {filename}")

                logger.debug(f"Processing file {idx + 1}/{len(files)}: {filename}")

                file_result = self._process_single_statement(filename, content)

                results.append(file_result)
                stats.processed += 1
                stats.successful += 1

                stats.total_transactions += file_result.transaction_count
                if file_result.result.used_fallback:
                    stats.fallback_files += 1

                stats.total_quality += file_result.quality_score
                stats.min_quality = min(stats.min_quality, file_result.quality_score)
                stats.max_quality = max(stats.max_quality, file_result.quality_score)

            except StatementDecodeError as e:
                self._record_error(errors, error_types, stats, filename, "DECODE_ERROR", str(e))

            except ValueError as e:
                self._record_error(errors, error_types, stats, filename, "DATA_VALIDATION_ERROR", str(e))

            except Exception as e:
                self._record_error(
                    errors, error_types, stats, filename,
                    "PROCESSING_ERROR", f"{type(e).__name__}: {str(e)}"
                )
                logger.error(f"Processing error in {filename}: {traceback.format_exc()}")

        stats.end_time = datetime.now()

        # Fix min_quality if no files processed
        if stats.successful == 0:
            stats.min_quality = 0.0

        logger.info(
            f"Batch processing complete: {stats.successful}/{stats.total_files} successful, "
            f"{stats.total_transactions} transactions, avg quality: {stats.average_quality:.2f}, "
            f"time: {stats.processing_time:.1f}s"
        )

        return BatchResult(
            stats=stats,
            results=results,
            errors=errors,
            error_summary=error_types
        )

    def _record_error(
        self,
        errors: List[ProcessingError],
        error_types: Dict[str, int],
        stats: BatchStats,
        filename: str,
        error_type: str,
        message: str
    ) -> None:
        errors.append(ProcessingError(
            file_name=filename,
            error_type=error_type,
            error_message=message
        ))
        stats.failed += 1
        stats.processed += 1
        error_types[error_type] = error_types.get(error_type, 0) + 1
        logger.error(f"{error_type} in {filename}: {message}")

    def _process_single_statement(self, filename: str, content: bytes) -> StatementFileResult:
        """Process a single statement file."""
        text = decode_statement_bytes(content)

        if not text.strip():
            raise ValueError("Statement file is empty")

        result = self.extractor.extract(text)
        return StatementFileResult(file_name=filename, result=result)

    def expand_archives(
        self,
        files: List[Tuple[str, bytes]]
    ) -> Tuple[List[Tuple[str, bytes]], List[ProcessingError]]:
        """
        Replace ZIP archives by their text members and drop unsupported files.

        Args:
            files: List of (filename, content) tuples

        Returns:
            Tuple of (statement files, archive errors)
        """
        all_files = []
        errors = []

        for filename, content in files:
            if filename.lower().endswith(".zip"):
                logger.info(f"Extracting ZIP archive: {filename}")
                try:
                    zip_files = self._extract_zip(content)
                except zipfile.BadZipFile as e:
                    errors.append(ProcessingError(
                        file_name=filename,
                        error_type="INVALID_ARCHIVE",
                        error_message=f"Invalid ZIP archive: {str(e)}"
                    ))
                    logger.error(f"Invalid ZIP archive {filename}: {e}")
                    continue
                all_files.extend(zip_files)
                logger.info(f"Extracted {len(zip_files)} files from {filename}")

            elif filename.lower().endswith(SUPPORTED_TEXT_EXTENSIONS):
                all_files.append((filename, content))

            else:
                logger.warning(f"Skipping unsupported file: {filename}")

        logger.info(f"Total files loaded: {len(all_files)}")
        return all_files, errors

    def _extract_zip(self, content: bytes) -> List[Tuple[str, bytes]]:
        """Extract text files from a ZIP archive."""
        files = []

        with zipfile.ZipFile(io.BytesIO(content), "r") as zf:
            for name in zf.namelist():
                # Skip directories and non-text files
                if name.endswith("/"):
                    continue
                if not name.lower().endswith(SUPPORTED_TEXT_EXTENSIONS):
                    continue

                # Use just the filename without path
                files.append((os.path.basename(name), zf.read(name)))

        return files

    def results_to_dataframe(self, results: List[StatementFileResult]):
        """
        Convert extraction results to a pandas DataFrame, one row per transaction.

        Args:
            results: List of StatementFileResult objects

        Returns:
            pandas DataFrame
        """
        import pandas as pd

        rows = []
        for file_result in results:
            quality = round(file_result.quality_score, 2)
            for txn in file_result.result.transactions:
                rows.append({
                    "File Name": file_result.file_name,
                    "Date": txn.date,
                    "Description": txn.description,
                    "Amount": round(txn.amount, 2),
                    "Type": txn.type.value,
                    "Category": txn.category,
                    "Confidence": txn.confidence,
                    "Fallback": file_result.result.used_fallback,
                    "Quality Score": quality,
                })

        return pd.DataFrame(rows)

    def errors_to_dataframe(self, errors: List[ProcessingError]):
        """
        Convert processing errors to a pandas DataFrame.

        Args:
            errors: List of ProcessingError objects

        Returns:
            pandas DataFrame
        """
        import pandas as pd

        rows = []
        for error in errors:
            rows.append({
                "File Name": error.file_name,
                "Error Type": error.error_type,
                "Error Message": error.error_message,
                "Timestamp": error.timestamp,
            })

        return pd.DataFrame(rows)


if __name__ == "__main__":
    import sys

    paths = sys.argv[1:]
    if not paths:
        print("Usage: python statement_batch_processor.py FILE [FILE ...]")
        sys.exit(1)

    batch = []
    for path in paths:
        with open(path, "rb") as f:
            batch.append((os.path.basename(path), f.read()))

    processor = StatementBatchProcessor()
    batch_result = processor.process_batch(batch)

    print(processor.results_to_dataframe(batch_result.results).to_string(index=False))
    if batch_result.errors:
        print(processor.errors_to_dataframe(batch_result.errors).to_string(index=False))
