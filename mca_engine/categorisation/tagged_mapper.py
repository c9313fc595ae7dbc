"""
Mapping of upstream tagged categories ("Income - Card Settlement",
"Expense - MCA Repayment - EBF", "99.UNASSIGNED") to normalized categories.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..config.category_config import REVENUE_CATEGORIES
from ..patterns.tagged_categories import (
    TAGGED_CATEGORY_MAP,
    TAGGED_CATEGORY_MAP_CASEFOLD,
    TAG_PREFIX_PATTERN,
    TAGGED_INCOME_RULES,
    TAGGED_EXPENSE_RULES,
    UNASSIGNED_SENTINEL,
)
from .preprocess import CREDIT

logger = logging.getLogger(__name__)

# Looks like a tag ("Income..." / "Expense...") even when it cannot be parsed
TAG_LIKE_PATTERN = r"(?i)^\s*(income|expense)\b"


@dataclass
class TaggedMapping:
    """Result of mapping a tagged category."""
    domain: str
    category: str
    parse_quality: str
    match_method: str
    is_reversal: bool = False


def _domain_for(category: str) -> str:
    return "revenue" if category in REVENUE_CATEGORIES else "expense"


def is_unassigned(value: Optional[str]) -> bool:
    return bool(value) and value.strip().casefold() == UNASSIGNED_SENTINEL


def is_tagged_format(value: Optional[str]) -> bool:
    """True when the value is a recognisable tagged category string."""
    if not value:
        return False
    if is_unassigned(value):
        return True
    if value.strip().casefold() in TAGGED_CATEGORY_MAP_CASEFOLD:
        return True
    return re.match(TAG_PREFIX_PATTERN, value.strip()) is not None


def _apply_rules(remainder: str, rules) -> Optional[str]:
    text = remainder.lower()
    for groups, category in rules:
        if all(any(term in text for term in group) for group in groups):
            return category
    return None


def map_tagged_category(
    tag_category: Optional[str],
    tag: Optional[str] = None,
    direction: str = CREDIT
) -> Optional[TaggedMapping]:
    """
    Map a tagged category to a normalized category.

    Resolution order: unassigned sentinel, exact table match, case-insensitive
    table match, then "Income - X" / "Expense - X" / "Expense Reversal - X"
    prefix parsing with ordered substring rules.

    Args:
        tag_category: The tagged category (e.g. "Income - MCA Disbursal")
        tag: Optional finer-grained tag (e.g. "Income - MCA Disbursal - EBF")
        direction: CREDIT or DEBIT, used for the unassigned sentinel

    Returns:
        TaggedMapping, or None when neither value is in tagged format
    """
    candidates = [value.strip() for value in (tag_category, tag) if value and value.strip()]
    if not candidates:
        return None

    is_reversal = any("reversal" in value.lower() for value in candidates)

    if any(is_unassigned(value) for value in candidates):
        if direction == CREDIT:
            return TaggedMapping("revenue", "unassigned_income", "unassigned", "unassigned")
        return TaggedMapping("expense", "unassigned_expense", "unassigned", "unassigned")

    for value in candidates:
        category = TAGGED_CATEGORY_MAP.get(value)
        if category:
            return TaggedMapping(_domain_for(category), category, "high", "tag_exact", is_reversal)

    for value in candidates:
        category = TAGGED_CATEGORY_MAP_CASEFOLD.get(value.casefold())
        if category:
            return TaggedMapping(_domain_for(category), category, "high", "tag_casefold", is_reversal)

    for value in candidates:
        prefix_match = re.match(TAG_PREFIX_PATTERN, value)
        if not prefix_match:
            continue

        prefix = prefix_match.group(1).lower()
        remainder = prefix_match.group(2)

        if prefix.startswith("expense") and "reversal" in prefix:
            return TaggedMapping("expense", "expense_reversal", "medium", "tag_prefix", True)

        if prefix == "income":
            category = _apply_rules(remainder, TAGGED_INCOME_RULES) or "other_income"
            return TaggedMapping("revenue", category, "medium", "tag_prefix", is_reversal)

        category = _apply_rules(remainder, TAGGED_EXPENSE_RULES) or "other_expense"
        return TaggedMapping("expense", category, "medium", "tag_prefix", is_reversal)

    for value in candidates:
        tag_like = re.match(TAG_LIKE_PATTERN, value)
        if tag_like:
            logger.debug("Unparseable tagged category %r", value)
            if tag_like.group(1).lower() == "income":
                return TaggedMapping("revenue", "other_income", "low", "tag_unparsed", is_reversal)
            return TaggedMapping("expense", "other_expense", "low", "tag_unparsed", is_reversal)

    return None
