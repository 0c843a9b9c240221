"""
Enhancement pass support.

The caller may hand the raw text plus the first-pass transactions to an
external enhancement collaborator (an LLM or similar). This module builds
that prompt and merges the collaborator's textual answer back in as a
second opinion. The answer may use the "Transaction N: ..." line format or
embed a JSON array of transaction objects.
"""

import json
import logging
import re
from datetime import date
from typing import Dict, List, Optional

from ..categorisation.normalizer import (
    normalize_date,
    infer_transaction_type,
    categorize_description,
)
from .candidates import clean_description
from .engine import StatementExtractor
from .models import Candidate, ExtractionResult, Transaction, TransactionType

logger = logging.getLogger(__name__)

_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def format_transaction_line(transaction: Transaction, index: int) -> str:
    """
    Render one transaction in the enhancement line format.

    Example:
        Transaction 1: STARBUCKS STORE 10001 - $4.75 on 07/11/2025
    """
    if _ISO_DATE.match(transaction.date):
        year, month, day = transaction.date.split("-")
        shown_date = f"{month}/{day}/{year}"
    else:
        shown_date = transaction.date
    return (
        f"Transaction {index}: {transaction.description} - "
        f"${transaction.amount:.2f} on {shown_date}"
    )


def build_enhancement_prompt(raw_text: str, transactions: List[Transaction]) -> str:
    """Build the prompt text handed to the enhancement collaborator."""
    listed = "\n".join(
        format_transaction_line(t, i) for i, t in enumerate(transactions, start=1)
    ) or "(none found)"
    return (
        "The following text was extracted from a bank or credit card statement.\n"
        "Some transactions were already identified. Find any transactions that "
        "are missing or wrong and list ALL transactions, one per line, in exactly "
        "this format:\n"
        "Transaction N: DESCRIPTION - $AMOUNT on MM/DD/YYYY\n\n"
        f"Already identified:\n{listed}\n\n"
        f"Statement text:\n{raw_text}"
    )


def _json_entry_to_transaction(entry: Dict, extractor: StatementExtractor) -> Optional[Transaction]:
    """
    Convert one JSON object from an answer, applying the same plausibility
    rules as pattern candidates. Returns None for rejected entries.
    """
    config = extractor.config
    description = clean_description(str(entry.get("description") or ""))
    candidate = Candidate(
        raw_description=description,
        raw_amount=str(entry.get("amount", "")).strip(),
        raw_date=None,
        pattern_id=0,
        confidence=config.settings["enhancement_confidence"],
        pattern_name="enhancement_json",
    )
    reason = extractor.validator.rejection_reason(candidate)
    if reason:
        logger.debug("Rejected JSON entry %r: %s", entry, reason)
        return None
    signed_amount = candidate.signed_amount

    raw_date = str(entry.get("date") or "").strip()
    if _ISO_DATE.match(raw_date):
        try:
            iso_date = date.fromisoformat(raw_date).isoformat()
        except ValueError:
            iso_date = normalize_date(None, today=extractor.today)
    else:
        iso_date = normalize_date(
            raw_date or None,
            today=extractor.today,
            pending_marker=config.settings["pending_marker"],
        )

    kind = str(entry.get("type") or "").lower()
    if kind in (t.value for t in TransactionType):
        txn_type = TransactionType(kind)
    else:
        txn_type = infer_transaction_type(description, signed_amount, config)

    # Only names from the configured table are accepted
    category = str(entry.get("category") or "").strip().lower()
    if category in config.category_keywords:
        category = category.title()
    else:
        category = categorize_description(description, config)

    return Transaction(
        date=iso_date,
        description=description,
        amount=round(abs(signed_amount), 2),
        type=txn_type,
        category=category,
        confidence=candidate.confidence,
    )


def parse_enhanced_answer(enhanced_text: str, extractor: StatementExtractor) -> List[Transaction]:
    """Transactions found in a collaborator answer (line format and JSON array)."""
    transactions = extractor.extract_transactions(enhanced_text)

    match = _JSON_ARRAY.search(enhanced_text)
    if match:
        try:
            entries = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            logger.warning("Ignoring unparseable JSON in enhancement answer: %s", e)
            entries = []
        for entry in entries if isinstance(entries, list) else []:
            if isinstance(entry, dict):
                txn = _json_entry_to_transaction(entry, extractor)
                if txn:
                    transactions.append(txn)

    return transactions


def _already_present(candidate: Transaction, existing: List[Transaction], tolerance: float) -> bool:
    description = candidate.description.lower()
    for txn in existing:
        other = txn.description.lower()
        if (abs(txn.amount - candidate.amount) < tolerance
                and txn.date == candidate.date
                and (description in other or other in description)):
            return True
    return False


def merge_enhancement(
    result: ExtractionResult,
    enhanced_text: str,
    extractor: Optional[StatementExtractor] = None
) -> ExtractionResult:
    """
    Merge an enhancement answer into a first-pass result.

    Only transactions not already present are appended; first-pass
    transactions are never modified. The fallback placeholder is dropped
    once real transactions exist.

    Args:
        result: First-pass ExtractionResult
        enhanced_text: The collaborator's textual answer
        extractor: Extractor used for re-parsing (default configuration if None)

    Returns:
        New ExtractionResult; the input result is left untouched
    """
    extractor = extractor or StatementExtractor()
    tolerance = extractor.config.settings["deduplication"]["amount_tolerance"]

    merged = [] if result.used_fallback else list(result.transactions)
    added = 0
    for txn in parse_enhanced_answer(enhanced_text or "", extractor):
        if not _already_present(txn, merged, tolerance):
            merged.append(txn)
            added += 1

    logger.debug("Enhancement pass added %d transaction(s)", added)

    if not merged:
        return ExtractionResult(
            transactions=list(result.transactions),
            quality_report=result.quality_report,
            used_fallback=result.used_fallback,
        )
    return ExtractionResult(transactions=merged, quality_report=result.quality_report)
