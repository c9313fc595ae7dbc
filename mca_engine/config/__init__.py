"""
Configuration module for the MCA Underwriting Engine.

This module contains the category taxonomy and all scoring configuration
dictionaries.
"""

from .category_config import (
    REVENUE_CATEGORIES,
    EXPENSE_CATEGORIES,
    ALL_CATEGORIES,
    CATEGORY_ALIASES,
    REVENUE_BUCKETS,
    EXPENSE_BUCKETS,
)
from .scoring_config import (
    SCORING_CONFIG,
    AGGREGATION_CONFIG,
    STACKING_CONFIG,
    REVENUE_QUALITY_CONFIG,
    EXPENSE_QUALITY_CONFIG,
    EXISTING_DEBT_CONFIG,
    CASHFLOW_CHARGES_CONFIG,
)

__all__ = [
    "REVENUE_CATEGORIES",
    "EXPENSE_CATEGORIES",
    "ALL_CATEGORIES",
    "CATEGORY_ALIASES",
    "REVENUE_BUCKETS",
    "EXPENSE_BUCKETS",
    "SCORING_CONFIG",
    "AGGREGATION_CONFIG",
    "STACKING_CONFIG",
    "REVENUE_QUALITY_CONFIG",
    "EXPENSE_QUALITY_CONFIG",
    "EXISTING_DEBT_CONFIG",
    "CASHFLOW_CHARGES_CONFIG",
]
