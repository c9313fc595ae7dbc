"""
Transaction categorization patterns for MCA underwriting.
"""

from .transaction_patterns import (
    EXCLUDE_PATTERNS,
    INCOME_PATTERNS,
    EXPENSE_PATTERNS,
    MCA_LENDER_PATTERNS,
    KNOWN_MCA_COMPANIES,
    RISK_PATTERNS,
)
from .tagged_categories import (
    TAGGED_CATEGORY_MAP,
    UNASSIGNED_SENTINEL,
)

__all__ = [
    "EXCLUDE_PATTERNS",
    "INCOME_PATTERNS",
    "EXPENSE_PATTERNS",
    "MCA_LENDER_PATTERNS",
    "KNOWN_MCA_COMPANIES",
    "RISK_PATTERNS",
    "TAGGED_CATEGORY_MAP",
    "UNASSIGNED_SENTINEL",
]
