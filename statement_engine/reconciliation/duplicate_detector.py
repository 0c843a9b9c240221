"""
Re-import Duplicate Detector.

Compares freshly extracted transactions with transactions the caller has
already stored, so likely re-imports of the same statement can be reviewed
before saving. Matching is tolerant: dates within a few days, amounts
within a cent, and fuzzy description similarity.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Union

from rapidfuzz.distance import Levenshtein

from ..config.extraction_config import ExtractionConfig, DEFAULT_CONFIG
from ..extraction.models import Transaction

logger = logging.getLogger(__name__)

TransactionLike = Union[Transaction, Dict[str, Any]]


def _field(transaction: TransactionLike, name: str) -> Any:
    if isinstance(transaction, dict):
        return transaction.get(name)
    value = getattr(transaction, name, None)
    return getattr(value, "value", value)


def normalize_string(value: Any) -> str:
    if not value:
        return ""
    return re.sub(r"\s+", " ", str(value).lower().strip())


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def is_same_date(date1: Any, date2: Any, tolerance_days: int = 1) -> bool:
    """Dates within tolerance; "Pending" or unparseable dates never match."""
    d1, d2 = _parse_date(date1), _parse_date(date2)
    if d1 is None or d2 is None:
        return False
    return abs((d1 - d2).days) <= tolerance_days


def is_same_amount(amount1: Any, amount2: Any, tolerance: float = 0.01) -> bool:
    if not isinstance(amount1, (int, float)) or not isinstance(amount2, (int, float)):
        return False
    return abs(amount1 - amount2) <= tolerance


def is_similar_description(desc1: Any, desc2: Any, threshold: float = 0.8) -> bool:
    """
    Equality after normalization, containment with a length ratio at or above
    the threshold, or Levenshtein similarity at or above the threshold.
    """
    n1, n2 = normalize_string(desc1), normalize_string(desc2)
    if n1 == n2:
        return True

    if n1 in n2 or n2 in n1:
        shorter, longer = sorted((n1, n2), key=len)
        return len(shorter) / len(longer) >= threshold

    return Levenshtein.normalized_similarity(n1, n2) >= threshold


@dataclass
class DuplicateCheck:
    """Comparison of one new transaction with one existing transaction."""
    is_duplicate: bool
    confidence: float
    matches: Dict[str, bool]
    existing_transaction: TransactionLike
    new_transaction: Optional[TransactionLike] = None
    high_confidence: float = 0.9
    medium_confidence: float = 0.7

    def confidence_level(self) -> str:
        if self.confidence >= self.high_confidence:
            return "high"
        if self.confidence >= self.medium_confidence:
            return "medium"
        return "low"


@dataclass
class DuplicateReport:
    """Duplicates (best match per new transaction), non-duplicates and a summary."""
    duplicates: List[DuplicateCheck] = field(default_factory=list)
    non_duplicates: List[TransactionLike] = field(default_factory=list)

    @property
    def summary(self) -> Dict[str, Any]:
        total = len(self.duplicates) + len(self.non_duplicates)
        return {
            "total": total,
            "duplicates": len(self.duplicates),
            "non_duplicates": len(self.non_duplicates),
            "duplicate_percentage": (len(self.duplicates) / total * 100) if total else 0.0,
        }


def check_transaction_duplicate(
    new_transaction: TransactionLike,
    existing_transaction: TransactionLike,
    config: Optional[ExtractionConfig] = None,
    date_tolerance: Optional[int] = None,
    amount_tolerance: Optional[float] = None,
    description_similarity: Optional[float] = None,
    require_exact_category: Optional[bool] = None,
) -> DuplicateCheck:
    """
    Check whether a new transaction duplicates an existing one.

    Confidence is 0.4 for a date match, 0.4 for an amount match and 0.2 for
    a description match. All of date, amount and description must match
    (and category, when required) for a duplicate.

    Tolerances default to the ``duplicate_detection`` settings of the given
    config; explicit arguments take precedence.
    """
    settings = (config or DEFAULT_CONFIG).settings["duplicate_detection"]
    if date_tolerance is None:
        date_tolerance = settings["date_tolerance_days"]
    if amount_tolerance is None:
        amount_tolerance = settings["amount_tolerance"]
    if description_similarity is None:
        description_similarity = settings["description_similarity"]
    if require_exact_category is None:
        require_exact_category = settings["check_category"]
    weights = settings["weights"]

    date_match = is_same_date(
        _field(new_transaction, "date"), _field(existing_transaction, "date"), date_tolerance
    )
    amount_match = is_same_amount(
        _field(new_transaction, "amount"), _field(existing_transaction, "amount"), amount_tolerance
    )
    description_match = is_similar_description(
        _field(new_transaction, "description"),
        _field(existing_transaction, "description"),
        description_similarity,
    )
    category_match = (
        not require_exact_category
        or normalize_string(_field(new_transaction, "category"))
        == normalize_string(_field(existing_transaction, "category"))
    )

    confidence = 0.0
    if date_match:
        confidence += weights["date"]
    if amount_match:
        confidence += weights["amount"]
    if description_match:
        confidence += weights["description"]

    return DuplicateCheck(
        is_duplicate=date_match and amount_match and description_match and category_match,
        confidence=round(confidence, 4),
        matches={
            "date": date_match,
            "amount": amount_match,
            "description": description_match,
            "category": category_match,
        },
        existing_transaction=existing_transaction,
        new_transaction=new_transaction,
        high_confidence=settings["high_confidence"],
        medium_confidence=settings["medium_confidence"],
    )


def find_duplicate_transactions(
    new_transactions: List[TransactionLike],
    existing_transactions: List[TransactionLike],
    config: Optional[ExtractionConfig] = None,
    **options,
) -> DuplicateReport:
    """
    Find the best duplicate match for each new transaction.

    Args:
        new_transactions: Freshly extracted transactions
        existing_transactions: Transactions already stored by the caller
        config: Configuration supplying the duplicate_detection settings
        **options: Keyword overrides passed to check_transaction_duplicate

    Returns:
        DuplicateReport
    """
    report = DuplicateReport()

    for new_transaction in new_transactions:
        best_match = None
        for existing in existing_transactions:
            check = check_transaction_duplicate(new_transaction, existing, config, **options)
            if check.is_duplicate and (best_match is None or check.confidence > best_match.confidence):
                best_match = check

        if best_match:
            report.duplicates.append(best_match)
        else:
            report.non_duplicates.append(new_transaction)

    logger.info(
        "Duplicate check: %d of %d new transaction(s) already stored",
        len(report.duplicates), len(new_transactions),
    )
    return report


def group_duplicates_by_confidence(duplicates: List[DuplicateCheck]) -> Dict[str, List[DuplicateCheck]]:
    """
    Group duplicate checks into high / medium / low confidence buckets, using
    the thresholds of the config each check was made with.
    """
    groups = {"high": [], "medium": [], "low": [], "all": list(duplicates)}
    for check in duplicates:
        groups[check.confidence_level()].append(check)
    return groups


def describe_duplicate_reason(check: DuplicateCheck) -> str:
    """Human-readable reason, e.g. "same date, same amount (medium confidence)"."""
    labels = (
        ("date", "same date"),
        ("amount", "same amount"),
        ("description", "similar description"),
        ("category", "same category"),
    )
    reasons = [text for key, text in labels if check.matches.get(key)]
    if not reasons:
        return "Unknown reason"
    return f"{', '.join(reasons)} ({check.confidence_level()} confidence)"
