"""
Categorisation module for the Statement Extraction Engine.

Provides date normalization, income/expense inference and keyword-based
categorization of extracted transactions.
"""

from .normalizer import (
    TransactionNormalizer,
    normalize_date,
    infer_transaction_type,
    categorize_description,
)
from .pattern_matching import match_keyword_list, match_category_table

__all__ = [
    "TransactionNormalizer",
    "normalize_date",
    "infer_transaction_type",
    "categorize_description",
    "match_keyword_list",
    "match_category_table",
]
