"""
Extraction configuration for the Statement Extraction Engine.
Contains quality weights, validation bounds and fallback settings, plus the
immutable ExtractionConfig bundle injected into every pipeline stage.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from ..patterns.statement_patterns import (
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


EXTRACTION_CONFIG = {
    # OCR quality heuristics (score starts at 1.0)
    "quality": {
        "noise_ratio_threshold": 0.2,
        "noise_penalty": 0.4,
        "no_financial_pattern_penalty": 0.3,
        "no_keyword_penalty": 0.2,
        "keyword_bonus": 0.05,
        "keyword_bonus_cap": 0.2,
        "min_text_length": 100,
        "short_text_penalty": 0.2,
        "repetition_threshold": 0.5,
        "repetition_penalty": 0.3,
    },

    # Candidate plausibility bounds
    "validation": {
        "min_description_length": 2,
        "max_description_length": 200,
        "min_amount": 0.01,
        "max_amount": 1_000_000,  # exclusive
        # Integer amounts inside these bands are most likely years/days/months
        "date_like_bands": [(1900, 2100), (1, 31), (1, 12)],
        "opening_balance_marker": "Beginning balance",
    },

    # Overlap resolution and deduplication
    "deduplication": {
        "amount_tolerance": 0.01,
    },

    # Placeholder emitted when nothing survives
    "fallback": {
        "description": "Document analysis completed",
        "amount": 0.0,
        "type": "expense",
        "category": "Uncategorized",
        "confidence": 0.3,
    },

    "pending_marker": "Pending",
    "uncategorized": "Uncategorized",

    # Category lookup; a rapidfuzz partial_ratio threshold (0-100) enables
    # fuzzy keyword matching after exact matching fails
    "categorization": {
        "fuzzy_threshold": None,
    },

    # Entries lifted from a JSON answer of the enhancement collaborator
    "enhancement_confidence": 0.6,

    # Re-import duplicate detection defaults
    "duplicate_detection": {
        "date_tolerance_days": 1,
        "amount_tolerance": 0.01,
        "description_similarity": 0.8,
        "check_category": False,
        "weights": {"date": 0.4, "amount": 0.4, "description": 0.2},
        "high_confidence": 0.9,
        "medium_confidence": 0.7,
    },
}


def _freeze(value: Any) -> Any:
    """Recursively convert dicts/lists into read-only equivalents."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _freeze_categories(categories: Mapping[str, Any]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({
        name.lower(): tuple(k.lower() for k in keywords)
        for name, keywords in categories.items()
    })


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Immutable configuration shared by all extraction stages.

    One instance may be reused across threads and calls; use
    ``with_overrides`` to derive a variant (e.g. a different category table).
    """
    transaction_patterns: Tuple[Mapping[str, Any], ...] = field(
        default_factory=lambda: _freeze(TRANSACTION_PATTERNS)
    )
    line_prefix_patterns: Tuple[str, ...] = LINE_PREFIX_PATTERNS
    income_keywords: Tuple[str, ...] = INCOME_KEYWORDS
    expense_keywords: Tuple[str, ...] = EXPENSE_KEYWORDS
    type_keyword_priority: Tuple[str, ...] = TYPE_KEYWORD_PRIORITY
    category_keywords: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: _freeze_categories(CATEGORY_KEYWORDS)
    )
    noise_descriptions: FrozenSet[str] = NOISE_DESCRIPTIONS
    noise_suffixes: Tuple[str, ...] = NOISE_SUFFIXES
    quality_keywords: Tuple[str, ...] = QUALITY_KEYWORDS
    settings: Mapping[str, Any] = field(
        default_factory=lambda: _freeze(EXTRACTION_CONFIG)
    )

    def __post_init__(self):
        for kind in self.type_keyword_priority:
            if kind not in ("income", "expense"):
                raise ValueError(f"Unknown transaction type in priority: {kind!r}")

    def with_overrides(
        self,
        category_keywords: Optional[Mapping[str, Any]] = None,
        settings: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> "ExtractionConfig":
        """
        Return a copy with some tables replaced.

        Args:
            category_keywords: Ordered {category: [keywords]} table
            settings: Partial settings dict merged one level deep over the current one
            **kwargs: Any other ExtractionConfig field

        Returns:
            New ExtractionConfig
        """
        changes = dict(kwargs)
        if category_keywords is not None:
            changes["category_keywords"] = _freeze_categories(category_keywords)
        if settings is not None:
            merged = {k: v for k, v in self.settings.items()}
            for key, value in settings.items():
                current = merged.get(key)
                if isinstance(current, Mapping) and isinstance(value, Mapping):
                    merged[key] = {**current, **value}
                else:
                    merged[key] = value
            changes["settings"] = _freeze(merged)
        if "transaction_patterns" in changes:
            changes["transaction_patterns"] = _freeze(changes["transaction_patterns"])
        for name in ("income_keywords", "expense_keywords", "type_keyword_priority",
                     "line_prefix_patterns", "noise_suffixes", "quality_keywords"):
            if name in changes:
                changes[name] = tuple(changes[name])
        if "noise_descriptions" in changes:
            changes["noise_descriptions"] = frozenset(
                d.upper() for d in changes["noise_descriptions"]
            )
        return replace(self, **changes)


DEFAULT_CONFIG = ExtractionConfig()
