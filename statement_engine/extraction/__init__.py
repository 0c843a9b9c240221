"""
Extraction module for the Statement Extraction Engine.

Provides candidate generation, validation, overlap resolution,
deduplication, the StatementExtractor pipeline and the enhancement merge.
"""

from .models import Candidate, Transaction, TransactionType, ExtractionResult
from .candidates import CandidateGenerator, clean_description, split_statement_lines
from .validation import CandidateValidator, is_date_like_amount
from .resolution import resolve_overlaps, deduplicate_candidates
from .engine import StatementExtractor, InvalidStatementTextError
from .enhancement import (
    build_enhancement_prompt,
    format_transaction_line,
    merge_enhancement,
    parse_enhanced_answer,
)

__all__ = [
    "Candidate",
    "Transaction",
    "TransactionType",
    "ExtractionResult",
    "CandidateGenerator",
    "clean_description",
    "split_statement_lines",
    "CandidateValidator",
    "is_date_like_amount",
    "resolve_overlaps",
    "deduplicate_candidates",
    "StatementExtractor",
    "InvalidStatementTextError",
    "build_enhancement_prompt",
    "format_transaction_line",
    "merge_enhancement",
    "parse_enhanced_answer",
]
