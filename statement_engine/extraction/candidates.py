"""
Candidate generation: runs the ordered line-pattern table over every line
of a statement text and records every match.

Patterns are not mutually exclusive, so a single line commonly yields
several candidates (a full merchant match plus fragments of it). The
overlap resolver and deduplicator reconcile them later.
"""

import logging
import re
from typing import List, Optional, Tuple

from ..config.extraction_config import ExtractionConfig, DEFAULT_CONFIG
from .models import Candidate

logger = logging.getLogger(__name__)

_EDGE_JUNK = re.compile(r"^[\s\-.*(]+|[\s\-.*(]+$")
_WHITESPACE = re.compile(r"\s+")


def clean_description(raw: str) -> str:
    """
    Collapse internal whitespace and strip separator residue from both ends.

    Example:
        >>> clean_description("*  NETFLIX.COM   STREAMING -")
        'NETFLIX.COM STREAMING'
    """
    return _EDGE_JUNK.sub("", _WHITESPACE.sub(" ", raw))


def split_statement_lines(text: str, prefix_patterns=()) -> List[str]:
    """
    Split text into non-empty trimmed lines with known prefixes removed.

    Args:
        text: Raw statement text
        prefix_patterns: Regexes stripped from the start of each line, in order

    Returns:
        List of prepared lines
    """
    compiled = [re.compile(p) for p in prefix_patterns]
    lines = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        for prefix in compiled:
            line = prefix.sub("", line, count=1).strip()
        if line:
            lines.append(line)
    return lines


class CandidateGenerator:
    """Applies the configured transaction pattern table line by line."""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._patterns: List[Tuple[dict, re.Pattern]] = [
            (entry, re.compile(entry["regex"])) for entry in self.config.transaction_patterns
        ]
        self._prefixes = [re.compile(p) for p in self.config.line_prefix_patterns]

    def prepare_lines(self, text: str) -> List[str]:
        return split_statement_lines(text, self._prefixes)

    def generate_for_line(self, line: str) -> List[Candidate]:
        """Return every candidate produced by every pattern on one line."""
        candidates = []
        for entry, regex in self._patterns:
            for match in regex.finditer(line):
                groups = match.groupdict()
                description = clean_description(groups.get("description") or "")
                raw_date = groups.get("date") or entry.get("date_marker")
                candidates.append(Candidate(
                    raw_description=description,
                    raw_amount=(groups.get("amount") or "").strip(),
                    raw_date=raw_date,
                    pattern_id=entry["id"],
                    confidence=entry["confidence"],
                    pattern_name=entry.get("name", ""),
                    layout=entry.get("layout", "inline"),
                    source_line=line,
                ))
        return candidates

    def generate(self, text: str) -> List[Candidate]:
        """
        Generate candidates for a whole text, in discovery order
        (line order, then pattern order, then match position).
        """
        candidates = []
        for line in self.prepare_lines(text):
            candidates.extend(self.generate_for_line(line))
        logger.debug("Generated %d candidate(s)", len(candidates))
        return candidates
