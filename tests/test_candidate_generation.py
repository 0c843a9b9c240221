"""
Tests for line preparation and candidate generation.
"""

import unittest

from statement_engine.extraction import (
    Candidate,
    CandidateGenerator,
    clean_description,
    split_statement_lines,
)
from statement_engine.patterns import LINE_PREFIX_PATTERNS


class TestLinePreparation(unittest.TestCase):
    """Test cases for splitting and prefix stripping."""

    def test_blank_lines_are_dropped(self):
        """Only non-empty trimmed lines survive."""
        lines = split_statement_lines("  first line  \n\n   \nsecond line\n")
        self.assertEqual(lines, ["first line", "second line"])

    def test_enumeration_prefix_is_stripped(self):
        """Enhancement answers number their lines; the prefix is removed."""
        lines = split_statement_lines(
            "Transaction 12: STARBUCKS - $4.75 on 07/11/2025",
            LINE_PREFIX_PATTERNS,
        )
        self.assertEqual(lines, ["STARBUCKS - $4.75 on 07/11/2025"])

    def test_ocr_glyph_before_date_is_stripped(self):
        """OCR row glyphs such as '(®' in front of a posting date are removed."""
        lines = split_statement_lines(
            "(® 02/10/2025 AMAZON MKTPLACE PMTS $7.57 $1,234.56\n( 02/07/2025 SHELL OIL $45.20",
            LINE_PREFIX_PATTERNS,
        )
        self.assertEqual(lines[0], "02/10/2025 AMAZON MKTPLACE PMTS $7.57 $1,234.56")
        self.assertEqual(lines[1], "02/07/2025 SHELL OIL $45.20")

    def test_clean_description(self):
        """Whitespace collapses and separator residue is stripped from the ends."""
        self.assertEqual(clean_description("*  NETFLIX.COM   STREAMING -"), "NETFLIX.COM STREAMING")
        self.assertEqual(clean_description("  (COFFEE SHOP. "), "COFFEE SHOP")


class TestCandidateGenerator(unittest.TestCase):
    """Test cases for the pattern table."""

    def setUp(self):
        """Set up test fixtures."""
        self.generator = CandidateGenerator()

    def test_malformed_years_are_not_dates(self):
        """Three-digit years and digits running past the year do not match."""
        for line in (
            "SHELL OIL 57442 - $45.20 on 07/11/20251",
            "SHELL OIL 57442 - $45.20 on 2/10/202",
            "07/11/20251 SHELL OIL 57442 $45.20 $1,234.56",
        ):
            with self.subTest(line=line):
                self.assertEqual(self.generator.generate(line), [])

    def test_dash_separator_line(self):
        """DESCRIPTION - $AMOUNT on DATE yields exactly one candidate."""
        candidates = self.generator.generate("STARBUCKS STORE 10001 AUSTIN TX - $4.75 on 07/11/2025")

        self.assertEqual(len(candidates), 1)
        candidate = candidates[0]
        self.assertEqual(candidate.raw_description, "STARBUCKS STORE 10001 AUSTIN TX")
        self.assertEqual(candidate.raw_amount, "$4.75")
        self.assertEqual(candidate.raw_date, "07/11/2025")
        self.assertEqual(candidate.pattern_name, "dash_separator")
        self.assertEqual(candidate.confidence, 0.8)

    def test_table_row(self):
        """Pipe table rows capture the description and amount cells."""
        candidates = self.generator.generate(
            "07/11/2025 | STARBUCKS STORE 10001 | Debit | $4.75 | $1,234.56"
        )

        self.assertEqual(len(candidates), 1)
        self.assertEqual(candidates[0].raw_description, "STARBUCKS STORE 10001")
        self.assertEqual(candidates[0].raw_amount, "$4.75")
        self.assertEqual(candidates[0].layout, "table")
        self.assertEqual(candidates[0].confidence, 0.8)

    def test_pending_table_row(self):
        """Pending rows record the literal marker as their date."""
        candidates = self.generator.generate(
            "Pending | UBER *TRIP HELP.UBER.COM | Debit | $12.34 | $1,222.22"
        )

        self.assertEqual(len(candidates), 1)
        self.assertEqual(candidates[0].raw_date, "Pending")
        self.assertEqual(candidates[0].raw_description, "UBER *TRIP HELP.UBER.COM")
        self.assertEqual(candidates[0].confidence, 0.7)

    def test_whitespace_separator(self):
        """DESCRIPTION $AMOUNT DATE with no separator words."""
        candidates = self.generator.generate("SHELL OIL 57442 $45.20 07/15/2025")

        self.assertEqual(len(candidates), 1)
        self.assertEqual(candidates[0].pattern_name, "whitespace_separator")
        self.assertEqual(candidates[0].raw_description, "SHELL OIL 57442")
        self.assertEqual(candidates[0].confidence, 0.7)

    def test_posted_row_with_type_code(self):
        """OCR posted rows skip the type-code column and the running balance."""
        candidates = self.generator.generate(
            "02/10/2025 AMAZON MKTPLACE PMTS Amzn.com/bill WA Bd $7.57 $1,234.56"
        )

        self.assertEqual(len(candidates), 1)
        self.assertEqual(candidates[0].pattern_name, "posted_row")
        self.assertEqual(candidates[0].raw_description, "AMAZON MKTPLACE PMTS Amzn.com/bill WA")
        self.assertEqual(candidates[0].raw_amount, "$7.57")
        self.assertEqual(candidates[0].raw_date, "02/10/2025")

    def test_store_number_fragment_is_also_generated(self):
        """Patterns are non-exclusive: the merchant fragment is a second candidate."""
        candidates = self.generator.generate(
            "PAYMENT FROM CHK 7012 CONF#162rrgson - $700.00 on 07/23/2025"
        )

        descriptions = [c.raw_description for c in candidates]
        self.assertEqual(descriptions, ["PAYMENT FROM CHK 7012 CONF#162rrgson", "#162rrgson"])
        self.assertEqual(candidates[1].pattern_name, "store_number")
        self.assertEqual(candidates[1].confidence, 0.75)

    def test_dotted_domain_fragment(self):
        """A dotted domain inside the description produces a fragment candidate."""
        candidates = self.generator.generate(
            "AMAZON MKTPLACE PMTS Amzn.com/billWA -$7.57 on 02/10/2025"
        )

        descriptions = [c.raw_description for c in candidates]
        self.assertIn("AMAZON MKTPLACE PMTS Amzn.com/billWA", descriptions)
        self.assertIn("Amzn.com/billWA", descriptions)

    def test_leading_asterisk_fragment(self):
        """The asterisk fragment is cleaned of its leading marker."""
        candidates = self.generator.generate("NETFLIX *STREAMING - $15.49 on 07/03/2025")

        descriptions = [c.raw_description for c in candidates]
        self.assertEqual(descriptions, ["NETFLIX *STREAMING", "STREAMING"])

    def test_discovery_order_follows_lines(self):
        """Candidates are reported line by line."""
        candidates = self.generator.generate(
            "COFFEE SHOP - $3.50 on 07/01/2025\nSHELL OIL 57442 $45.20 07/15/2025"
        )

        self.assertEqual([c.raw_description for c in candidates], ["COFFEE SHOP", "SHELL OIL 57442"])
        self.assertEqual(candidates[1].source_line, "SHELL OIL 57442 $45.20 07/15/2025")

    def test_signed_amount(self):
        """Amount strings keep their sign when parsed."""
        def make(raw):
            return Candidate("X", raw, None, 1, 0.8)

        self.assertAlmostEqual(make("-$7.57").signed_amount, -7.57)
        self.assertAlmostEqual(make("$-7.57").signed_amount, -7.57)
        self.assertAlmostEqual(make("$1,234.56").signed_amount, 1234.56)
        self.assertIsNone(make("abc").signed_amount)


if __name__ == '__main__':
    unittest.main()
