"""
OCR Text Quality Assessor.

Scores how "statement-like" a piece of OCR/AI output is. The report is
advisory only and never blocks extraction.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ..config.extraction_config import ExtractionConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)

NOISE_CHAR_PATTERN = re.compile(r"[^A-Za-z0-9\s.,$#\-/'&]")
CURRENCY_MARKS = ("$", "€", "£")
DATE_LIKE_PATTERN = re.compile(r"\d{1,2}[/-]\d{1,2}[/-]\d{2,4}")
AMOUNT_LIKE_PATTERN = re.compile(r"\d+\.\d{2}")


@dataclass
class QualityDetails:
    """Raw measurements behind a quality score."""
    total_chars: int = 0
    noise_char_ratio: float = 0.0
    has_currency_marks: bool = False
    has_date_like_tokens: bool = False
    has_amount_like_tokens: bool = False
    matched_keywords: Set[str] = field(default_factory=set)
    word_repetition_ratio: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "totalChars": self.total_chars,
            "noiseCharRatio": round(self.noise_char_ratio, 4),
            "hasCurrencyMarks": self.has_currency_marks,
            "hasDateLikeTokens": self.has_date_like_tokens,
            "hasAmountLikeTokens": self.has_amount_like_tokens,
            "matchedKeywords": sorted(self.matched_keywords),
            "wordRepetitionRatio": round(self.word_repetition_ratio, 4),
        }


@dataclass
class QualityReport:
    """Quality score in [0, 1] with ordered human-readable issues."""
    score: float
    issues: List[str] = field(default_factory=list)
    details: QualityDetails = field(default_factory=QualityDetails)

    def to_dict(self) -> Dict:
        return {
            "score": round(self.score, 4),
            "issues": list(self.issues),
            "details": self.details.to_dict(),
        }


class TextQualityAssessor:
    """
    Heuristic quality scorer for extracted statement text.

    Starts at 1.0 and applies penalties for noise characters, missing
    financial patterns, missing financial vocabulary, short text and heavy
    word repetition. A small bonus is granted per matched keyword.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.settings = self.config.settings["quality"]

    def assess(self, text: str) -> QualityReport:
        """
        Assess the quality of a text.

        Args:
            text: Raw OCR/AI text

        Returns:
            QualityReport
        """
        if not text:
            return QualityReport(score=0.0, issues=["No text extracted"])

        s = self.settings
        score = 1.0
        issues = []
        details = QualityDetails(total_chars=len(text))

        # Noise characters
        noise_count = len(NOISE_CHAR_PATTERN.findall(text))
        details.noise_char_ratio = noise_count / len(text)
        if details.noise_char_ratio > s["noise_ratio_threshold"]:
            score -= s["noise_penalty"]
            issues.append(f"High noise characters: {details.noise_char_ratio * 100:.1f}%")

        # Financial patterns
        details.has_currency_marks = any(mark in text for mark in CURRENCY_MARKS)
        details.has_date_like_tokens = bool(DATE_LIKE_PATTERN.search(text))
        details.has_amount_like_tokens = bool(AMOUNT_LIKE_PATTERN.search(text))
        if not (details.has_currency_marks
                or details.has_date_like_tokens
                or details.has_amount_like_tokens):
            score -= s["no_financial_pattern_penalty"]
            issues.append("No financial patterns detected")

        # Financial vocabulary
        upper = text.upper()
        details.matched_keywords = {kw for kw in self.config.quality_keywords if kw in upper}
        if not details.matched_keywords:
            score -= s["no_keyword_penalty"]
            issues.append("No financial terms found")
        else:
            score += min(s["keyword_bonus_cap"], s["keyword_bonus"] * len(details.matched_keywords))

        if len(text) < s["min_text_length"]:
            score -= s["short_text_penalty"]
            issues.append("Text too short")

        # Word repetition
        words = text.split()
        if words:
            details.word_repetition_ratio = 1 - len(set(words)) / len(words)
        if details.word_repetition_ratio > s["repetition_threshold"]:
            score -= s["repetition_penalty"]
            issues.append("High word repetition")

        score = max(0.0, min(1.0, score))
        logger.debug("Quality score %.2f with %d issue(s)", score, len(issues))
        return QualityReport(score=score, issues=issues, details=details)
