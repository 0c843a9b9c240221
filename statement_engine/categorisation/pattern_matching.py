"""
Generic Keyword Matching for Transaction Classification.

Provides reusable matching logic for keyword lists and ordered keyword tables.
"""

from typing import Iterable, Mapping, Optional, Tuple

from rapidfuzz import fuzz


def match_keyword_list(
    text: str,
    keywords: Iterable[str],
    fuzzy_threshold: Optional[int] = None
) -> Optional[Tuple[str, float, str]]:
    """
    Match lower-cased text against a list of keywords.

    Substring matching first; fuzzy partial matching only when a threshold
    is given.

    Args:
        text: Text to match (compared lower-cased)
        keywords: Lower-case keyword strings, in priority order
        fuzzy_threshold: Minimum rapidfuzz partial_ratio score (0-100), or None

    Returns:
        Tuple of (matched_keyword, confidence, match_method) or None

    Example:
        >>> match_keyword_list("STARBUCKS STORE 10001", ["coffee", "starbucks"])
        ('starbucks', 1.0, 'keyword')
    """
    lowered = text.lower()
    keywords = list(keywords)

    for keyword in keywords:
        if keyword in lowered:
            return (keyword, 1.0, "keyword")

    if fuzzy_threshold is not None:
        best_score = 0
        best_match = None
        for keyword in keywords:
            score = fuzz.partial_ratio(keyword, lowered)
            if score > best_score and score >= fuzzy_threshold:
                best_score = score
                best_match = keyword

        if best_match:
            return (best_match, best_score / 100.0, "fuzzy")

    return None


def match_category_table(
    text: str,
    table: Mapping[str, Iterable[str]],
    fuzzy_threshold: Optional[int] = None
) -> Optional[Tuple[str, str]]:
    """
    Match text against an ordered {category: keywords} table.

    The first category (in table order) with a keyword hit wins; later
    categories are not consulted.

    Returns:
        Tuple of (category_name, matched_keyword) or None
    """
    for category_name, keywords in table.items():
        match = match_keyword_list(text, keywords)
        if match:
            return (category_name, match[0])

    if fuzzy_threshold is not None:
        for category_name, keywords in table.items():
            match = match_keyword_list(text, keywords, fuzzy_threshold)
            if match:
                return (category_name, match[0])

    return None
