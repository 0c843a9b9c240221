"""
Candidate plausibility checks.

Rejection is silent: rejected candidates are only reported at DEBUG level.
"""

import logging
import re
from typing import Optional

from ..config.extraction_config import ExtractionConfig, DEFAULT_CONFIG
from .models import Candidate

logger = logging.getLogger(__name__)

_DIGITS_AND_PUNCTUATION = re.compile(r"[\d\W_]+")


def is_date_like_amount(amount: float, bands) -> bool:
    """True when an integer amount falls in a year/day/month band."""
    if amount != int(amount):
        return False
    value = int(amount)
    return any(low <= value <= high for low, high in bands)


class CandidateValidator:
    """Rejects candidates whose description or amount is implausible."""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.settings = self.config.settings["validation"]

    def rejection_reason(self, candidate: Candidate) -> Optional[str]:
        """
        Return why a candidate is rejected, or None when it is plausible.
        """
        s = self.settings
        description = candidate.raw_description

        if not s["min_description_length"] <= len(description) <= s["max_description_length"]:
            return "description length out of bounds"

        amount = candidate.signed_amount
        if amount is None:
            return "unparseable amount"
        magnitude = abs(amount)
        if magnitude < s["min_amount"] or magnitude >= s["max_amount"]:
            return "amount out of range"
        if is_date_like_amount(magnitude, s["date_like_bands"]):
            return "amount looks like a date component"

        if description.upper() in self.config.noise_descriptions:
            return "layout noise description"
        if _DIGITS_AND_PUNCTUATION.fullmatch(description):
            return "description has no letters"
        if description.endswith(self.config.noise_suffixes):
            return "type-code residue in description"

        if candidate.layout == "table":
            marker = s["opening_balance_marker"].lower()
            if marker in candidate.source_line.lower():
                return "opening balance row"

        return None

    def is_valid(self, candidate: Candidate) -> bool:
        reason = self.rejection_reason(candidate)
        if reason:
            logger.debug(
                "Rejected candidate %r (%s) from pattern %s: %s",
                candidate.raw_description, candidate.raw_amount,
                candidate.pattern_name or candidate.pattern_id, reason,
            )
            return False
        return True
