"""
Tests for candidate plausibility checks.
"""

import unittest

from statement_engine.config import EXTRACTION_CONFIG
from statement_engine.extraction import Candidate, CandidateValidator, is_date_like_amount


def make_candidate(description, amount="$4.75", layout="inline", source_line=""):
    return Candidate(
        raw_description=description,
        raw_amount=amount,
        raw_date="07/11/2025",
        pattern_id=3,
        confidence=0.8,
        pattern_name="dash_separator",
        layout=layout,
        source_line=source_line,
    )


class TestCandidateValidator(unittest.TestCase):
    """Test cases for candidate rejection rules."""

    def setUp(self):
        """Set up test fixtures."""
        self.validator = CandidateValidator()

    def test_plausible_candidate_is_accepted(self):
        """A normal merchant line passes every check."""
        self.assertTrue(self.validator.is_valid(make_candidate("STARBUCKS STORE 10001")))
        self.assertIsNone(self.validator.rejection_reason(make_candidate("COFFEE SHOP", "$12.34")))

    def test_description_length_bounds(self):
        """Descriptions shorter than 2 or longer than 200 characters are rejected."""
        self.assertFalse(self.validator.is_valid(make_candidate("X")))
        self.assertFalse(self.validator.is_valid(make_candidate("A" * 201)))
        self.assertTrue(self.validator.is_valid(make_candidate("A" * 200)))

    def test_amount_range(self):
        """Amounts must lie in [0.01, 1,000,000)."""
        self.assertFalse(self.validator.is_valid(make_candidate("COFFEE SHOP", "$0.00")))
        self.assertFalse(self.validator.is_valid(make_candidate("WIRE OUT", "$1,000,000.00")))
        self.assertTrue(self.validator.is_valid(make_candidate("WIRE OUT", "$999,999.99")))
        self.assertTrue(self.validator.is_valid(make_candidate("COFFEE SHOP", "$0.01")))

    def test_date_like_integer_amounts(self):
        """Integer amounts that look like years, days or months are rejected."""
        self.assertFalse(self.validator.is_valid(make_candidate("COFFEE SHOP", "12")))
        self.assertFalse(self.validator.is_valid(make_candidate("COFFEE SHOP", "2024")))
        self.assertFalse(self.validator.is_valid(make_candidate("COFFEE SHOP", "$10.00")))
        self.assertTrue(self.validator.is_valid(make_candidate("COFFEE SHOP", "$10.50")))
        self.assertTrue(self.validator.is_valid(make_candidate("COFFEE SHOP", "$45.00")))

    def test_is_date_like_amount(self):
        """Only integers inside a band qualify."""
        bands = EXTRACTION_CONFIG["validation"]["date_like_bands"]
        self.assertTrue(is_date_like_amount(1999.0, bands))
        self.assertTrue(is_date_like_amount(31.0, bands))
        self.assertFalse(is_date_like_amount(32.0, bands))
        self.assertFalse(is_date_like_amount(12.5, bands))

    def test_layout_noise_descriptions(self):
        """Bare state codes, domain fragments and stop words are rejected."""
        for noise in ("TX", "AUSTIN TX", "Amzn.com", "the", "ON"):
            with self.subTest(noise=noise):
                self.assertFalse(self.validator.is_valid(make_candidate(noise)))

    def test_digits_and_punctuation_only(self):
        """Descriptions without letters are rejected."""
        self.assertFalse(self.validator.is_valid(make_candidate("12345")))
        self.assertFalse(self.validator.is_valid(make_candidate("877-778-1161")))

    def test_type_code_residue_suffix(self):
        """A description still ending in a type code is a broken span."""
        self.assertFalse(self.validator.is_valid(make_candidate("AMAZON MKTPLACE Hr")))
        self.assertFalse(self.validator.is_valid(make_candidate("SHELL OIL p")))
        self.assertTrue(self.validator.is_valid(make_candidate("SHELL OIL")))

    def test_opening_balance_table_row(self):
        """Beginning balance rows are rejected for table layouts only."""
        line = "07/01/2025 | Beginning balance | Info | $1,000.00 | $1,000.00"
        table = make_candidate("Beginning balance", "$1,000.00", layout="table", source_line=line)
        inline = make_candidate("Beginning balance", "$1,000.00", layout="inline", source_line=line)

        self.assertEqual(self.validator.rejection_reason(table), "opening balance row")
        self.assertTrue(self.validator.is_valid(inline))

    def test_rejection_is_logged_at_debug(self):
        """Rejected candidates are reported through the module logger."""
        with self.assertLogs("statement_engine.extraction.validation", level="DEBUG") as logs:
            self.validator.is_valid(make_candidate("TX"))

        self.assertIn("layout noise description", logs.output[0])


if __name__ == '__main__':
    unittest.main()
