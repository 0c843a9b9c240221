"""
Statement Pattern Definitions for the Statement Extraction Engine.

Contains the declarative tables used across the pipeline:
- Line patterns for every observed statement layout family
- Line prefixes stripped before matching (OCR glyphs, enumerations)
- Layout-noise descriptions and type-code suffixes
- Quality assessment vocabulary
- Income/expense keywords and the category keyword table
"""

from .statement_patterns import (
    TRANSACTION_PATTERNS,
    LINE_PREFIX_PATTERNS,
    NOISE_DESCRIPTIONS,
    NOISE_SUFFIXES,
    QUALITY_KEYWORDS,
    INCOME_KEYWORDS,
    EXPENSE_KEYWORDS,
    TYPE_KEYWORD_PRIORITY,
    CATEGORY_KEYWORDS,
)

__all__ = [
    "TRANSACTION_PATTERNS",
    "LINE_PREFIX_PATTERNS",
    "NOISE_DESCRIPTIONS",
    "NOISE_SUFFIXES",
    "QUALITY_KEYWORDS",
    "INCOME_KEYWORDS",
    "EXPENSE_KEYWORDS",
    "TYPE_KEYWORD_PRIORITY",
    "CATEGORY_KEYWORDS",
]
