"""
Tests for the statement batch processor.
"""

import io
import unittest
import zipfile

from statement_batch_processor import (
    BatchResult,
    StatementBatchProcessor,
    StatementDecodeError,
    decode_statement_bytes,
)


GOOD_STATEMENT = b"STARBUCKS STORE 10001 AUSTIN TX - $4.75 on 07/11/2025\n" \
                 b"PAYMENT FROM CHK 7012 CONF#162rrgson - $700.00 on 07/23/2025\n"


def make_zip(members):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in members:
            zf.writestr(name, content)
    return buffer.getvalue()


class TestDecodeStatementBytes(unittest.TestCase):
    """Test cases for content decoding."""

    def test_utf8(self):
        """UTF-8 content decodes as is."""
        self.assertEqual(decode_statement_bytes("CAFÉ".encode("utf-8")), "CAFÉ")

    def test_cp1252_fallback(self):
        """Windows-encoded bytes fall back to cp1252."""
        self.assertEqual(decode_statement_bytes(b"CAF\xc9 \x80"), "CAFÉ €")

    def test_binary_content(self):
        """Content with NUL bytes is rejected."""
        with self.assertRaises(StatementDecodeError):
            decode_statement_bytes(b"\x00\x01\x02")


class TestStatementBatchProcessor(unittest.TestCase):
    """Test cases for batch processing."""

    def setUp(self):
        """Set up test fixtures."""
        self.processor = StatementBatchProcessor()

    def test_successful_batch(self):
        """Transactions and quality statistics are accumulated."""
        result = self.processor.process_batch([("a.txt", GOOD_STATEMENT)])

        self.assertEqual(result.stats.total_files, 1)
        self.assertEqual(result.stats.successful, 1)
        self.assertEqual(result.stats.total_transactions, 2)
        self.assertEqual(result.stats.fallback_files, 0)
        self.assertGreater(result.stats.average_quality, 0.0)
        self.assertEqual(result.results[0].file_name, "a.txt")

    def test_empty_file_does_not_stop_batch(self):
        """An empty file is recorded as a validation error and the batch continues."""
        result = self.processor.process_batch([
            ("empty.txt", b"   \n  "),
            ("a.txt", GOOD_STATEMENT),
        ])

        self.assertEqual(result.stats.successful, 1)
        self.assertEqual(result.stats.failed, 1)
        self.assertEqual(result.errors[0].file_name, "empty.txt")
        self.assertEqual(result.errors[0].error_type, "DATA_VALIDATION_ERROR")
        self.assertEqual(result.error_summary, {"DATA_VALIDATION_ERROR": 1})

    def test_binary_file_is_a_decode_error(self):
        """Binary content is reported with its own error type."""
        result = self.processor.process_batch([("scan.txt", b"\x00\x00garbage")])

        self.assertEqual(result.errors[0].error_type, "DECODE_ERROR")

    def test_fallback_files_are_counted(self):
        """Files without transactions succeed with the placeholder."""
        result = self.processor.process_batch([("notes.txt", b"Nothing to see here")])

        self.assertEqual(result.stats.successful, 1)
        self.assertEqual(result.stats.fallback_files, 1)
        self.assertEqual(result.stats.total_transactions, 0)

    def test_zip_archives_are_expanded(self):
        """Text members of a ZIP archive are processed, other members skipped."""
        archive = make_zip([
            ("january.txt", GOOD_STATEMENT),
            ("nested/february.txt", GOOD_STATEMENT),
            ("scan.pdf", b"%PDF-1.4"),
        ])
        result = self.processor.process_batch([("statements.zip", archive)])

        self.assertEqual(result.stats.total_files, 2)
        self.assertEqual(
            sorted(r.file_name for r in result.results), ["february.txt", "january.txt"]
        )

    def test_invalid_archive(self):
        """A corrupt archive is recorded as a failed file."""
        result = self.processor.process_batch([
            ("broken.zip", b"not a zip file"),
            ("a.txt", GOOD_STATEMENT),
        ])

        self.assertEqual(result.stats.total_files, 2)
        self.assertEqual(result.stats.failed, 1)
        self.assertEqual(result.errors[0].error_type, "INVALID_ARCHIVE")

    def test_unsupported_files_are_skipped(self):
        """Files with other extensions are ignored."""
        result = self.processor.process_batch([("image.png", b"\x89PNG")])

        self.assertEqual(result.stats.total_files, 0)
        self.assertEqual(result.errors, [])

    def test_progress_callback(self):
        """The callback receives position, total and a message per file."""
        calls = []
        self.processor.process_batch(
            [("a.txt", GOOD_STATEMENT), ("b.txt", GOOD_STATEMENT)],
            progress_callback=lambda current, total, message: calls.append((current, total, message)),
        )

        self.assertEqual(calls[0], (1, 2, "Processing: a.txt"))
        self.assertEqual(calls[1][0], 2)

    def test_merge_results(self):
        """Merging sums counters and combines min/max quality."""
        first = self.processor.process_batch([("a.txt", GOOD_STATEMENT)])
        second = self.processor.process_batch([("empty.txt", b"")])

        merged = BatchResult.merge_results(first, second)

        self.assertEqual(merged.stats.total_files, 2)
        self.assertEqual(merged.stats.successful, 1)
        self.assertEqual(merged.stats.failed, 1)
        self.assertEqual(merged.stats.min_quality, first.stats.min_quality)
        self.assertEqual(len(merged.results), 1)
        self.assertEqual(merged.error_summary, {"DATA_VALIDATION_ERROR": 1})

    def test_dataframes(self):
        """Results and errors export to pandas DataFrames."""
        result = self.processor.process_batch([
            ("a.txt", GOOD_STATEMENT),
            ("empty.txt", b""),
        ])

        df = self.processor.results_to_dataframe(result.results)
        self.assertEqual(len(df), 2)
        self.assertIn("Category", df.columns)
        self.assertEqual(list(df["File Name"].unique()), ["a.txt"])

        errors_df = self.processor.errors_to_dataframe(result.errors)
        self.assertEqual(list(errors_df["Error Type"]), ["DATA_VALIDATION_ERROR"])


if __name__ == '__main__':
    unittest.main()
