"""
Generic Pattern Matching for Transaction Classification.

Provides reusable ordered keyword and regex matching over pattern families.
"""

import re
from typing import Dict, List, Optional, Tuple

from rapidfuzz import fuzz

# Fuzzy matching only for keywords long enough that one typo is meaningful
FUZZY_THRESHOLD = 90
FUZZY_MIN_KEYWORD_LENGTH = 6


def match_keywords(
    text: str,
    keywords: List[str],
    fuzzy_threshold: Optional[int] = None
) -> Optional[Tuple[str, float, str]]:
    """
    Match text against a list of keywords.

    Uses exact substring matching, then rapidfuzz partial matching when a
    fuzzy threshold is given.

    Args:
        text: Normalized (uppercase) text to match
        keywords: List of uppercase keyword strings
        fuzzy_threshold: Minimum partial_ratio score, or None for exact only

    Returns:
        Tuple of (matched_keyword, confidence, match_method) or None

    Example:
        >>> match_keywords("GUSTO PAYROLL 0115", ["GUSTO", "PAYCHEX"])
        ("GUSTO", 1.0, "keyword")
    """
    for keyword in keywords:
        if keyword in text:
            return (keyword, 1.0, "keyword")

    if fuzzy_threshold is None:
        return None

    best_score = 0
    best_match = None
    for keyword in keywords:
        if len(keyword) < FUZZY_MIN_KEYWORD_LENGTH:
            continue
        score = fuzz.partial_ratio(keyword, text)
        if score > best_score and score >= fuzzy_threshold:
            best_score = score
            best_match = keyword

    if best_match:
        return (best_match, best_score / 100.0, "fuzzy")
    return None


def match_regex_patterns(
    text: str,
    patterns: List[str]
) -> Optional[Tuple[str, float, str]]:
    """
    Match text against a list of regex patterns.

    Returns:
        Tuple of (matched_pattern, confidence, match_method) or None
    """
    for pattern in patterns:
        if re.search(pattern, text):
            return (pattern, 1.0, "regex")
    return None


def match_pattern_families(
    text: str,
    families: Dict[str, Dict],
    fuzzy_threshold: int = FUZZY_THRESHOLD
) -> Optional[Tuple[str, Dict, str]]:
    """
    Find the first pattern family matching the text.

    Families are tried in order against their regex patterns and exact
    keywords. Only when no family matches exactly is a fuzzy keyword pass
    made, again in family order.

    Pattern family format:
    {
        "family_name": {
            "category": "normalized_category",
            "keywords": ["KEYWORD1", "KEYWORD2"],
            "regex_patterns": [r"(?i)pattern1", r"(?i)pattern2"],
            "description": "Family Description",
        }
    }

    Returns:
        Tuple of (family_name, pattern_info, match_method) or None
    """
    upper_text = text.upper()

    for family_name, pattern_info in families.items():
        if match_regex_patterns(text, pattern_info.get("regex_patterns", [])):
            return (family_name, pattern_info, "regex")
        if match_keywords(upper_text, pattern_info.get("keywords", [])):
            return (family_name, pattern_info, "keyword")

    for family_name, pattern_info in families.items():
        fuzzy_match = match_keywords(
            upper_text, pattern_info.get("keywords", []), fuzzy_threshold
        )
        if fuzzy_match:
            return (family_name, pattern_info, fuzzy_match[2])

    return None


def matches_any(text: str, pattern_info: Dict) -> bool:
    """True when text hits any regex or exact keyword of a single family."""
    if match_regex_patterns(text, pattern_info.get("regex_patterns", [])):
        return True
    return match_keywords(text.upper(), pattern_info.get("keywords", [])) is not None
