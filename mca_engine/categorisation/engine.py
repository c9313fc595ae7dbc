"""
Transaction Classifier for MCA Underwriting.
Classifies small-business bank transactions into revenue and expense
categories and identifies MCA lenders.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..config.category_config import (
    ALL_CATEGORIES,
    CATEGORY_ALIASES,
    REVENUE_CATEGORIES,
)
from ..config.scoring_config import AGGREGATION_CONFIG
from ..patterns.transaction_patterns import INCOME_PATTERNS, EXPENSE_PATTERNS
from .lender_registry import (
    match_lender,
    extract_lender_from_tag,
    extract_fallback_lender,
)
from .pattern_matching import match_pattern_families, FUZZY_THRESHOLD
from .preprocess import Transaction, CREDIT, prepare_transactions
from .tagged_mapper import map_tagged_category

logger = logging.getLogger(__name__)

MCA_CATEGORIES = frozenset({"mca_funding", "mca_payment"})


@dataclass(frozen=True)
class Classification:
    """Result of transaction classification."""
    domain: str  # 'revenue' or 'expense'
    category: str
    parse_quality: str  # 'high', 'medium', 'low', 'unassigned'
    match_method: str  # 'upstream', 'tag_*', 'lender', 'regex', 'keyword', 'fuzzy', 'fallback'
    lender_name: Optional[str] = None
    is_reversal: bool = False

    @property
    def is_mca(self) -> bool:
        return self.category in MCA_CATEGORIES


def normalize_category_name(value: Optional[str]) -> Optional[str]:
    """
    Resolve an upstream category label to the closed taxonomy.

    Returns:
        Normalized category, or None when the label is not recognised
    """
    if not value:
        return None
    key = value.strip().lower().replace("-", "_").replace(" ", "_")
    if key in ALL_CATEGORIES:
        return key
    return CATEGORY_ALIASES.get(key)


def is_valid_normalized_category(value: Optional[str]) -> bool:
    return normalize_category_name(value) is not None


class TransactionClassifier:
    """Classifies transactions for MCA underwriting."""

    def __init__(self, fuzzy_threshold: int = FUZZY_THRESHOLD):
        """Initialize the classifier with pattern dictionaries.

        Args:
            fuzzy_threshold: Minimum rapidfuzz score for fuzzy keyword matches
        """
        self.income_patterns = INCOME_PATTERNS
        self.expense_patterns = EXPENSE_PATTERNS
        self.fuzzy_threshold = fuzzy_threshold
        self.funding_min_amount = AGGREGATION_CONFIG["mca_funding_min_amount"]

    def classify(self, txn: Transaction) -> Classification:
        """
        Classify a single transaction.

        Resolution order: recognised upstream category, tagged category,
        lender registry, direction-specific pattern families, fallback.
        Never raises for well-formed Transactions.
        """
        upstream = normalize_category_name(txn.source_category)
        if upstream:
            return self._classify_upstream(txn, upstream)

        tagged = map_tagged_category(txn.source_category, txn.source_subcategory, txn.direction)
        if tagged:
            lender_name = None
            if tagged.category in MCA_CATEGORIES:
                lender_name = self._resolve_lender(txn, tagged.category)
            return Classification(
                domain=tagged.domain,
                category=tagged.category,
                parse_quality=tagged.parse_quality,
                match_method=tagged.match_method,
                lender_name=lender_name,
                is_reversal=tagged.is_reversal,
            )

        lender_name = match_lender(txn.description)
        if lender_name:
            if txn.is_credit and txn.amount > self.funding_min_amount:
                return Classification("revenue", "mca_funding", "medium", "lender", lender_name)
            if txn.is_debit:
                return Classification("expense", "mca_payment", "medium", "lender", lender_name)

        return self._classify_description(txn)

    def _classify_upstream(self, txn: Transaction, category: str) -> Classification:
        domain = "revenue" if category in REVENUE_CATEGORIES else "expense"
        lender_name = None
        if category in MCA_CATEGORIES:
            lender_name = self._resolve_lender(txn, category)
        return Classification(
            domain=domain,
            category=category,
            parse_quality=txn.parse_quality or "high",
            match_method="upstream",
            lender_name=lender_name,
            is_reversal=category == "expense_reversal",
        )

    def _resolve_lender(self, txn: Transaction, category: str) -> Optional[str]:
        """Lender for an MCA transaction: tag suffix, registry, then fallback."""
        lender_name = (
            extract_lender_from_tag(txn.source_subcategory)
            or extract_lender_from_tag(txn.source_category)
            or match_lender(txn.description)
        )
        if not lender_name and category == "mca_payment":
            lender_name = extract_fallback_lender(txn.description)
        return lender_name

    def _classify_description(self, txn: Transaction) -> Classification:
        if txn.is_credit:
            families, domain, fallback = self.income_patterns, "revenue", "other_income"
        else:
            families, domain, fallback = self.expense_patterns, "expense", "other_expense"

        match = match_pattern_families(txn.description, families, self.fuzzy_threshold)
        if match:
            family_name, pattern_info, method = match
            logger.debug("Matched %r to %s via %s", txn.description, family_name, method)
            return Classification(domain, pattern_info["category"], "medium", method)

        return Classification(domain, fallback, "low", "fallback")

    def classify_transactions(
        self,
        transactions: Iterable[Transaction]
    ) -> List[Tuple[Transaction, Classification]]:
        """
        Classify a list of transactions.

        Returns:
            List of tuples (transaction, classification)
        """
        return [(txn, self.classify(txn)) for txn in transactions]

    def get_category_summary(
        self,
        classified: List[Tuple[Transaction, Classification]]
    ) -> Dict[str, Dict]:
        """Totals and counts per normalized category."""
        summary: Dict[str, Dict] = {}
        for txn, classification in classified:
            entry = summary.setdefault(
                classification.category,
                {"domain": classification.domain, "total": 0.0, "count": 0}
            )
            entry["total"] += txn.amount
            entry["count"] += 1
        return summary


def is_mca_transaction(txn: Transaction) -> bool:
    """True when the description names a registry lender."""
    return match_lender(txn.description) is not None


def build_ledger(
    records: Iterable[Union[Transaction, Dict]],
    classifier: Optional[TransactionClassifier] = None
) -> List[Tuple[Transaction, Classification]]:
    """
    Prepare (parse, filter, dedup, sort) and classify transactions once.

    The resulting ledger is what every downstream consumer reads.
    """
    classifier = classifier or TransactionClassifier()
    return classifier.classify_transactions(prepare_transactions(records))
