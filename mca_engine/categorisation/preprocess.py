"""
Preprocessing utilities for transaction classification.
Handles record normalization, non-transaction filtering, and deduplication.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Union

from ..patterns.transaction_patterns import EXCLUDE_PATTERNS

logger = logging.getLogger(__name__)

CREDIT = "CREDIT"
DEBIT = "DEBIT"

DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y")


class InvalidTransactionError(ValueError):
    """Raised when a transaction record is missing or has unusable fields."""
    pass


@dataclass(frozen=True)
class Transaction:
    """A single bank statement line."""
    date: date
    description: str
    amount: float
    direction: str
    running_balance: float = 0.0
    source_category: Optional[str] = None
    source_subcategory: Optional[str] = None
    parse_quality: Optional[str] = None

    @property
    def is_credit(self) -> bool:
        return self.direction == CREDIT

    @property
    def is_debit(self) -> bool:
        return self.direction == DEBIT

    @property
    def month_key(self) -> str:
        return f"{self.date.year:04d}-{self.date.month:02d}"

    @classmethod
    def from_dict(cls, record: Dict) -> "Transaction":
        """
        Build a Transaction from a plain record.

        Accepts snake_case or camelCase keys. When no direction is given the
        amount's sign decides it (negative = DEBIT).

        Raises:
            InvalidTransactionError: If date or amount is missing or unparseable
        """
        txn_date = parse_date(_first(record, "date", "transaction_date", "transactionDate"))
        if txn_date is None:
            raise InvalidTransactionError(f"Missing or invalid date: {record.get('date')!r}")

        raw_amount = _first(record, "amount")
        try:
            amount = float(raw_amount)
        except (TypeError, ValueError):
            raise InvalidTransactionError(f"Missing or invalid amount: {raw_amount!r}")

        direction = _first(record, "direction", "type")
        if direction:
            direction = str(direction).strip().upper()
            if direction not in (CREDIT, DEBIT):
                raise InvalidTransactionError(f"Unknown direction: {direction!r}")
        else:
            direction = DEBIT if amount < 0 else CREDIT

        balance = _first(record, "running_balance", "runningBalance", "balance")
        try:
            running_balance = float(balance) if balance is not None else 0.0
        except (TypeError, ValueError):
            raise InvalidTransactionError(f"Invalid running balance: {balance!r}")

        return cls(
            date=txn_date,
            description=str(_first(record, "description", "name") or ""),
            amount=abs(amount),
            direction=direction,
            running_balance=running_balance,
            source_category=_first(record, "source_category", "sourceCategory", "tag_category", "tagCategory"),
            source_subcategory=_first(record, "source_subcategory", "sourceSubcategory", "tag"),
            parse_quality=_first(record, "parse_quality", "parseQuality"),
        )


def _first(record: Dict, *keys):
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def parse_date(value) -> Optional[date]:
    """Parse a date, datetime or date string; None when unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None

    text = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text[:10] if fmt == "%Y-%m-%d" else text, fmt).date()
        except (ValueError, TypeError):
            continue
    return None


def normalize_text(text: Optional[str]) -> str:
    """Uppercase, trimmed text for matching."""
    if not text:
        return ""
    return text.upper().strip()


def is_excluded(description: str) -> bool:
    """True for statement furniture such as opening/closing balance rows."""
    text = (description or "").strip()
    return any(re.search(pattern, text) for pattern in EXCLUDE_PATTERNS)


def dedup_key(txn: Transaction) -> str:
    return f"{txn.date:%Y-%m-%d}|{txn.description.strip().lower()}|{txn.amount:.2f}"


def parse_transactions(records: Iterable[Union[Transaction, Dict]]) -> List[Transaction]:
    """
    Convert raw records to Transactions, skipping rows that cannot be parsed.
    """
    transactions = []
    for i, record in enumerate(records):
        if isinstance(record, Transaction):
            transactions.append(record)
            continue
        try:
            transactions.append(Transaction.from_dict(record))
        except InvalidTransactionError as e:
            logger.warning("Skipping transaction %d: %s", i, e)
    return transactions


def prepare_transactions(records: Iterable[Union[Transaction, Dict]]) -> List[Transaction]:
    """
    Parse, filter, deduplicate and chronologically sort transactions.

    Sorting is stable, so same-day transactions keep their input order.
    The first occurrence of each duplicate survives.
    """
    seen = set()
    prepared = []
    excluded = 0
    duplicates = 0

    for txn in parse_transactions(records):
        if is_excluded(txn.description):
            excluded += 1
            continue
        key = dedup_key(txn)
        if key in seen:
            duplicates += 1
            continue
        seen.add(key)
        prepared.append(txn)

    prepared.sort(key=lambda t: t.date)
    logger.debug(
        "Prepared %d transactions (%d excluded, %d duplicates)",
        len(prepared), excluded, duplicates
    )
    return prepared
