"""
Reconciliation module for the Statement Extraction Engine.

Detects re-imported transactions against ones already stored by the caller.
"""

from .duplicate_detector import (
    DuplicateCheck,
    DuplicateReport,
    check_transaction_duplicate,
    find_duplicate_transactions,
    group_duplicates_by_confidence,
    describe_duplicate_reason,
    is_similar_description,
)

__all__ = [
    "DuplicateCheck",
    "DuplicateReport",
    "check_transaction_duplicate",
    "find_duplicate_transactions",
    "group_duplicates_by_confidence",
    "describe_duplicate_reason",
    "is_similar_description",
]
