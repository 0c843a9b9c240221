"""
Overlap resolution and deduplication of validated candidates.
"""

import logging
from typing import List

from .models import Candidate

logger = logging.getLogger(__name__)


def _same_amount(a: Candidate, b: Candidate, tolerance: float) -> bool:
    amount_a, amount_b = a.signed_amount, b.signed_amount
    if amount_a is None or amount_b is None:
        return False
    return abs(abs(amount_a) - abs(amount_b)) < tolerance


def resolve_overlaps(candidates: List[Candidate], amount_tolerance: float = 0.01) -> List[Candidate]:
    """
    Drop candidates that are partial sub-matches of a longer candidate.

    A candidate is dropped when its description is a strict substring of an
    already kept, longer description with the same amount and date token.
    Survivors keep their discovery order.
    """
    order = {id(c): i for i, c in enumerate(candidates)}
    by_length = sorted(candidates, key=lambda c: len(c.raw_description), reverse=True)

    kept: List[Candidate] = []
    for candidate in by_length:
        covered = any(
            candidate.raw_description != other.raw_description
            and candidate.raw_description in other.raw_description
            and candidate.raw_date == other.raw_date
            and _same_amount(candidate, other, amount_tolerance)
            for other in kept
        )
        if covered:
            logger.debug("Dropped partial match %r", candidate.raw_description)
            continue
        kept.append(candidate)

    kept.sort(key=lambda c: order[id(c)])
    return kept


def deduplicate_candidates(candidates: List[Candidate], amount_tolerance: float = 0.01) -> List[Candidate]:
    """
    Collapse candidates describing the same transaction; first seen wins.

    Two candidates are duplicates when their amounts differ by less than the
    tolerance and their date tokens and descriptions are identical.
    """
    unique: List[Candidate] = []
    for candidate in candidates:
        if any(
            candidate.raw_description == seen.raw_description
            and candidate.raw_date == seen.raw_date
            and _same_amount(candidate, seen, amount_tolerance)
            for seen in unique
        ):
            continue
        unique.append(candidate)
    if len(unique) < len(candidates):
        logger.debug("Removed %d duplicate candidate(s)", len(candidates) - len(unique))
    return unique
