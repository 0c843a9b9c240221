"""
Statement Extractor.

Runs the full pipeline over one statement text:
quality assessment -> candidate generation -> validation ->
overlap resolution -> deduplication -> normalization -> fallback.
"""

import logging
from datetime import date
from typing import List, Optional

from ..config.extraction_config import ExtractionConfig, DEFAULT_CONFIG
from ..quality.assessor import TextQualityAssessor
from ..categorisation.normalizer import TransactionNormalizer
from .candidates import CandidateGenerator
from .models import Candidate, ExtractionResult, Transaction, TransactionType
from .resolution import resolve_overlaps, deduplicate_candidates
from .validation import CandidateValidator

logger = logging.getLogger(__name__)


class InvalidStatementTextError(TypeError):
    """Raised when the input is not a text string."""

    def __init__(self, message: str = "invalid input"):
        super().__init__(message)


class StatementExtractor:
    """
    Extracts transactions from OCR/AI statement text.

    Stateless between calls; a single instance may be shared.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None, today: Optional[date] = None):
        self.config = config or DEFAULT_CONFIG
        self.today = today
        self.assessor = TextQualityAssessor(self.config)
        self.generator = CandidateGenerator(self.config)
        self.validator = CandidateValidator(self.config)
        self.normalizer = TransactionNormalizer(self.config, today=today)

    def collect_candidates(self, text: str) -> List[Candidate]:
        """Candidates that survive validation, overlap resolution and deduplication."""
        tolerance = self.config.settings["deduplication"]["amount_tolerance"]

        candidates = self.generator.generate(text)
        valid = [c for c in candidates if self.validator.is_valid(c)]
        resolved = resolve_overlaps(valid, tolerance)
        unique = deduplicate_candidates(resolved, tolerance)

        logger.debug(
            "Candidates: %d generated, %d valid, %d after overlap, %d unique",
            len(candidates), len(valid), len(resolved), len(unique),
        )
        return unique

    def extract_transactions(self, text: str) -> List[Transaction]:
        """Normalized transactions without quality report or fallback."""
        return [self.normalizer.normalize(c) for c in self.collect_candidates(text)]

    def build_fallback_transaction(self) -> Transaction:
        fallback = self.config.settings["fallback"]
        return Transaction(
            date=(self.today or date.today()).isoformat(),
            description=fallback["description"],
            amount=fallback["amount"],
            type=TransactionType(fallback["type"]),
            category=fallback["category"],
            confidence=fallback["confidence"],
        )

    def extract(self, text: str) -> ExtractionResult:
        """
        Extract transactions from a statement text.

        Args:
            text: Raw OCR/AI text

        Returns:
            ExtractionResult with at least one transaction

        Raises:
            InvalidStatementTextError: If text is not a string
        """
        if not isinstance(text, str):
            raise InvalidStatementTextError()

        report = self.assessor.assess(text)
        transactions = self.extract_transactions(text)

        if not transactions:
            logger.debug("No transactions survived, emitting fallback")
            return ExtractionResult(
                transactions=[self.build_fallback_transaction()],
                quality_report=report,
                used_fallback=True,
            )

        return ExtractionResult(transactions=transactions, quality_report=report)
