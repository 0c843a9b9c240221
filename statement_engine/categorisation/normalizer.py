"""
Transaction Normalizer.

Turns validated candidates into canonical transactions:
- Dates canonicalised to YYYY-MM-DD ("Pending" passes through)
- Income/expense decided by keywords, then by amount sign
- Category from the ordered keyword table
"""

import logging
import re
from datetime import date, datetime
from typing import Optional

from ..config.extraction_config import ExtractionConfig, DEFAULT_CONFIG
from ..extraction.models import Candidate, Transaction, TransactionType
from .pattern_matching import match_keyword_list, match_category_table

logger = logging.getLogger(__name__)

_DATE_PARTS = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{2}(?:\d{2})?)$")


def normalize_date(raw: Optional[str], today: Optional[date] = None,
                   pending_marker: str = "Pending") -> str:
    """
    Canonicalise a statement date token.

    Args:
        raw: Date token such as "07/11/2025", "2/10/25" or "Pending"
        today: Processing date used when the token is missing or invalid
        pending_marker: Literal passed through unchanged

    Returns:
        ISO date string, or the pending marker
    """
    today = today or date.today()
    if raw is None:
        return today.isoformat()

    raw = raw.strip()
    if raw == pending_marker:
        return pending_marker

    match = _DATE_PARTS.match(raw)
    if not match:
        logger.debug("Unrecognised date %r, using processing date", raw)
        return today.isoformat()

    month, day, year = match.groups()
    if len(year) == 2:
        year = "20" + year
    try:
        return datetime(int(year), int(month), int(day)).date().isoformat()
    except ValueError:
        logger.debug("Invalid calendar date %r, using processing date", raw)
        return today.isoformat()


def infer_transaction_type(description: str, signed_amount: Optional[float],
                           config: Optional[ExtractionConfig] = None) -> TransactionType:
    """
    Decide income vs expense.

    Keyword lists are consulted in the configured priority order. Without a
    keyword hit, a positive amount means expense and anything else income.
    """
    config = config or DEFAULT_CONFIG
    keyword_lists = {
        "income": config.income_keywords,
        "expense": config.expense_keywords,
    }
    for kind in config.type_keyword_priority:
        if match_keyword_list(description, keyword_lists[kind]):
            return TransactionType(kind)

    # NOTE: statements print debits as positive amounts
    if signed_amount is not None and signed_amount > 0:
        return TransactionType.EXPENSE
    return TransactionType.INCOME


def categorize_description(description: str, config: Optional[ExtractionConfig] = None) -> str:
    """
    Return the title-cased first matching category, or the uncategorized label.

    Exact keyword hits are tried across the whole table before any fuzzy
    match, which only runs when the config sets a fuzzy threshold.
    """
    config = config or DEFAULT_CONFIG
    match = match_category_table(
        description,
        config.category_keywords,
        config.settings["categorization"]["fuzzy_threshold"],
    )
    if match:
        return match[0].title()
    return config.settings["uncategorized"]


class TransactionNormalizer:
    """Converts candidates into Transaction records."""

    def __init__(self, config: Optional[ExtractionConfig] = None, today: Optional[date] = None):
        self.config = config or DEFAULT_CONFIG
        self.today = today

    def normalize(self, candidate: Candidate) -> Transaction:
        signed_amount = candidate.signed_amount or 0.0
        return Transaction(
            date=normalize_date(
                candidate.raw_date,
                today=self.today,
                pending_marker=self.config.settings["pending_marker"],
            ),
            description=candidate.raw_description,
            amount=round(abs(signed_amount), 2),
            type=infer_transaction_type(candidate.raw_description, signed_amount, self.config),
            category=categorize_description(candidate.raw_description, self.config),
            confidence=candidate.confidence,
        )
