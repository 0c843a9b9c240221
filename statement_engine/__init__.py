"""
Statement Engine - Transaction Extraction from Statement Text.

Turns unstructured text produced by OCR/AI summarization of a bank or
credit card statement into a deduplicated, categorized transaction list.

Main Components:
    - patterns: Statement line patterns and keyword tables
    - config: Extraction settings and the immutable ExtractionConfig
    - quality: OCR text quality assessment
    - extraction: Candidate generation, validation, resolution and the pipeline
    - categorisation: Date normalization, income/expense and category inference
    - reconciliation: Re-import duplicate detection
"""

from typing import Dict, Optional

# Configuration
from .config.extraction_config import (
    EXTRACTION_CONFIG,
    ExtractionConfig,
    DEFAULT_CONFIG,
)
from .config.category_loader import load_category_keywords_csv

# Quality assessment
from .quality.assessor import (
    TextQualityAssessor,
    QualityReport,
    QualityDetails,
)

# Extraction pipeline
from .extraction.models import (
    Candidate,
    Transaction,
    TransactionType,
    ExtractionResult,
)
from .extraction.engine import (
    StatementExtractor,
    InvalidStatementTextError,
)
from .extraction.enhancement import (
    build_enhancement_prompt,
    format_transaction_line,
    merge_enhancement,
)

# Reconciliation
from .reconciliation.duplicate_detector import (
    find_duplicate_transactions,
    group_duplicates_by_confidence,
    describe_duplicate_reason,
)


__version__ = "1.0.0"
__all__ = [
    # Configuration
    "EXTRACTION_CONFIG",
    "ExtractionConfig",
    "DEFAULT_CONFIG",
    "load_category_keywords_csv",
    # Quality
    "TextQualityAssessor",
    "QualityReport",
    "QualityDetails",
    # Extraction
    "Candidate",
    "Transaction",
    "TransactionType",
    "ExtractionResult",
    "StatementExtractor",
    "InvalidStatementTextError",
    "build_enhancement_prompt",
    "format_transaction_line",
    "merge_enhancement",
    # Reconciliation
    "find_duplicate_transactions",
    "group_duplicates_by_confidence",
    "describe_duplicate_reason",
    # Main function
    "run_statement_extraction",
]


def run_statement_extraction(text: str, config: Optional[ExtractionConfig] = None) -> Dict:
    """
    Main entry point for statement extraction.

    This function runs the complete pipeline:
    1. Assess OCR text quality
    2. Generate candidates from every line pattern
    3. Reject implausible candidates
    4. Drop partial matches and duplicates
    5. Normalize dates, types and categories
    6. Emit a fallback placeholder when nothing survives

    Args:
        text: Raw OCR/AI statement text
        config: Optional ExtractionConfig (default tables if None)

    Returns:
        Dictionary containing:
            - transactions: List of {date, description, amount, type, category, confidence}
            - quality: {score, issues, details}

    Raises:
        InvalidStatementTextError: If text is not a string

    Example:
        >>> result = run_statement_extraction(
        ...     "STARBUCKS STORE 10001 AUSTIN TX - $4.75 on 07/11/2025"
        ... )
        >>> result["transactions"][0]["category"]
        'Food'
    """
    extractor = StatementExtractor(config)
    return extractor.extract(text).to_dict()
