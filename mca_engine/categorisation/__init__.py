"""
Transaction classification module.

Contains the classifier, tagged-category mapping, lender identification,
pattern matching, and preprocessing utilities.
"""

from .engine import (
    TransactionClassifier,
    Classification,
    build_ledger,
    is_mca_transaction,
    is_valid_normalized_category,
    normalize_category_name,
)
from .lender_registry import (
    match_lender,
    normalize_lender_name,
    extract_lender_from_tag,
    extract_fallback_lender,
)
from .pattern_matching import (
    match_keywords,
    match_regex_patterns,
    match_pattern_families,
)
from .preprocess import (
    Transaction,
    InvalidTransactionError,
    CREDIT,
    DEBIT,
    parse_date,
    parse_transactions,
    prepare_transactions,
    is_excluded,
    dedup_key,
)
from .tagged_mapper import (
    TaggedMapping,
    map_tagged_category,
    is_tagged_format,
)

__all__ = [
    "TransactionClassifier",
    "Classification",
    "build_ledger",
    "is_mca_transaction",
    "is_valid_normalized_category",
    "normalize_category_name",
    "match_lender",
    "normalize_lender_name",
    "extract_lender_from_tag",
    "extract_fallback_lender",
    "match_keywords",
    "match_regex_patterns",
    "match_pattern_families",
    "Transaction",
    "InvalidTransactionError",
    "CREDIT",
    "DEBIT",
    "parse_date",
    "parse_transactions",
    "prepare_transactions",
    "is_excluded",
    "dedup_key",
    "TaggedMapping",
    "map_tagged_category",
    "is_tagged_format",
]
