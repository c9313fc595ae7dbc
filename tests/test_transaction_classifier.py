"""
Test suite for transaction classification.

Covers record parsing and preparation, upstream and tagged categories,
MCA lender identification and description pattern matching.
"""

import unittest
from datetime import date

from mca_engine.categorisation.engine import (
    TransactionClassifier,
    build_ledger,
    normalize_category_name,
)
from mca_engine.categorisation.lender_registry import (
    extract_fallback_lender,
    extract_lender_from_tag,
    match_lender,
    normalize_lender_name,
)
from mca_engine.categorisation.pattern_matching import match_keywords
from mca_engine.categorisation.preprocess import (
    CREDIT,
    DEBIT,
    InvalidTransactionError,
    Transaction,
    prepare_transactions,
)
from mca_engine.categorisation.tagged_mapper import is_tagged_format, map_tagged_category


def make_txn(description, amount, direction, txn_date=date(2025, 1, 15), **kwargs):
    return Transaction(
        date=txn_date,
        description=description,
        amount=amount,
        direction=direction,
        **kwargs
    )


class TestTransactionParsing(unittest.TestCase):
    """Test cases for building Transactions from plain records."""

    def test_signed_amount_sets_direction(self):
        txn = Transaction.from_dict({
            "date": "2025-01-15",
            "description": "RENT PAYMENT",
            "amount": -4000.0,
        })
        self.assertEqual(txn.direction, DEBIT)
        self.assertEqual(txn.amount, 4000.0)
        self.assertEqual(txn.date, date(2025, 1, 15))

    def test_camel_case_keys(self):
        txn = Transaction.from_dict({
            "transactionDate": "01/15/2025",
            "description": "SQUARE DEPOSIT",
            "amount": 1500,
            "type": "credit",
            "runningBalance": "11500.50",
            "tagCategory": "Income - Card Settlement",
        })
        self.assertEqual(txn.direction, CREDIT)
        self.assertEqual(txn.running_balance, 11500.50)
        self.assertEqual(txn.source_category, "Income - Card Settlement")
        self.assertEqual(txn.month_key, "2025-01")

    def test_missing_date_raises(self):
        with self.assertRaises(InvalidTransactionError):
            Transaction.from_dict({"description": "NO DATE", "amount": 10})

    def test_invalid_amount_raises(self):
        with self.assertRaises(InvalidTransactionError):
            Transaction.from_dict({"date": "2025-01-15", "description": "X", "amount": "abc"})

    def test_unknown_direction_raises(self):
        with self.assertRaises(InvalidTransactionError):
            Transaction.from_dict({
                "date": "2025-01-15", "description": "X", "amount": 10, "direction": "SIDEWAYS",
            })


class TestPrepareTransactions(unittest.TestCase):
    """Test cases for filtering, deduplication and ordering."""

    def test_duplicates_collapse_to_first(self):
        records = [
            {"date": "2025-01-15", "description": "SQUARE DEPOSIT", "amount": 1500, "running_balance": 100},
            {"date": "2025-01-15", "description": "  square deposit ", "amount": 1500.001, "running_balance": 200},
        ]
        prepared = prepare_transactions(records)
        self.assertEqual(len(prepared), 1)
        self.assertEqual(prepared[0].running_balance, 100)

    def test_statement_rows_excluded(self):
        records = [
            {"date": "2025-01-01", "description": "Opening Balance", "amount": 10000},
            {"date": "2025-01-31", "description": "ENDING BALANCE", "amount": 12000},
            {"date": "2025-01-15", "description": "SQUARE DEPOSIT", "amount": 1500},
        ]
        prepared = prepare_transactions(records)
        self.assertEqual([t.description for t in prepared], ["SQUARE DEPOSIT"])

    def test_sorted_chronologically_and_stable(self):
        records = [
            {"date": "2025-02-01", "description": "B", "amount": 1},
            {"date": "2025-01-01", "description": "A2", "amount": 1},
            {"date": "2025-01-01", "description": "A1", "amount": 2},
        ]
        prepared = prepare_transactions(records)
        self.assertEqual([t.description for t in prepared], ["A2", "A1", "B"])

    def test_unparseable_rows_skipped(self):
        records = [
            {"date": "not a date", "description": "BAD", "amount": 1},
            {"date": "2025-01-01", "description": "GOOD", "amount": 1},
        ]
        with self.assertLogs("mca_engine.categorisation.preprocess", level="WARNING"):
            prepared = prepare_transactions(records)
        self.assertEqual(len(prepared), 1)


class TestTaggedCategories(unittest.TestCase):
    """Test cases for upstream tagged category mapping."""

    def setUp(self):
        self.classifier = TransactionClassifier()

    def test_mca_disbursal_tag(self):
        txn = make_txn("WIRE IN", 25000, CREDIT, source_category="Income - MCA Disbursal")
        result = self.classifier.classify(txn)
        self.assertEqual(result.domain, "revenue")
        self.assertEqual(result.category, "mca_funding")
        self.assertEqual(result.parse_quality, "high")
        self.assertTrue(result.is_mca)

    def test_unknown_expense_tag_is_medium(self):
        mapping = map_tagged_category("Expense - Miscellaneous Zork", direction=DEBIT)
        self.assertEqual(mapping.domain, "expense")
        self.assertEqual(mapping.category, "other_expense")
        self.assertEqual(mapping.parse_quality, "medium")

    def test_prefix_rules(self):
        self.assertEqual(map_tagged_category("Income - Zelle from Bob").category, "zelle_income")
        self.assertEqual(map_tagged_category("Expense - Office Lease").category, "rent")
        self.assertEqual(
            map_tagged_category("expense - mca repayment - ondeck").category, "mca_payment"
        )

    def test_case_insensitive_exact_match(self):
        mapping = map_tagged_category("income - card settlement")
        self.assertEqual(mapping.category, "card_processing")
        self.assertEqual(mapping.match_method, "tag_casefold")

    def test_expense_reversal(self):
        mapping = map_tagged_category("Expense Reversal - Office Depot", direction=CREDIT)
        self.assertEqual(mapping.category, "expense_reversal")
        self.assertTrue(mapping.is_reversal)

    def test_unassigned_sentinel_follows_direction(self):
        self.assertEqual(
            map_tagged_category("99.UNASSIGNED", direction=CREDIT).category, "unassigned_income"
        )
        self.assertEqual(
            map_tagged_category("99.unassigned", direction=DEBIT).category, "unassigned_expense"
        )

    def test_non_tag_returns_none(self):
        self.assertIsNone(map_tagged_category("random text"))
        self.assertIsNone(map_tagged_category(None))
        self.assertFalse(is_tagged_format("random text"))
        self.assertTrue(is_tagged_format("Income - Anything"))

    def test_upstream_normalized_category(self):
        self.assertEqual(normalize_category_name("Card Processing"), "card_processing")
        self.assertIsNone(normalize_category_name("definitely not a category"))
        txn = make_txn("WHATEVER", 100, DEBIT, source_category="payroll")
        result = self.classifier.classify(txn)
        self.assertEqual(result.category, "payroll")
        self.assertEqual(result.match_method, "upstream")

    def test_lender_from_tag_suffix(self):
        txn = make_txn(
            "ACH DEBIT 99812", 400, DEBIT,
            source_category="Expense - MCA Repayment",
            source_subcategory="Expense - MCA - Fundbox",
        )
        result = self.classifier.classify(txn)
        self.assertEqual(result.category, "mca_payment")
        self.assertEqual(result.lender_name, "FUNDBOX")


class TestLenderRegistry(unittest.TestCase):
    """Test cases for MCA lender identification."""

    def test_registry_match(self):
        self.assertEqual(match_lender("ONDECK CAPITAL FUNDING"), "ONDECK")
        self.assertEqual(match_lender("EBF HOLDINGS LLC"), "EBF_HOLDINGS")
        self.assertIsNone(match_lender("SQUARE DEPOSIT"))

    def test_tag_suffix(self):
        self.assertEqual(extract_lender_from_tag("Income - MCA Disbursal - EBF"), "EBF_HOLDINGS")

    def test_normalize_unknown_lender(self):
        self.assertEqual(normalize_lender_name("  acme   funding "), "ACME_FUNDING")

    def test_fallback_lender(self):
        self.assertEqual(extract_fallback_lender("MCA-ACME 0412"), "ACME")
        self.assertIsNone(extract_fallback_lender("COFFEE SHOP"))


class TestDescriptionClassification(unittest.TestCase):
    """Test cases for description-based classification."""

    def setUp(self):
        self.classifier = TransactionClassifier()

    def test_lender_debit_is_mca_payment(self):
        result = self.classifier.classify(make_txn("ONDECK DAILY PAYMENT", 500, DEBIT))
        self.assertEqual(result.category, "mca_payment")
        self.assertEqual(result.lender_name, "ONDECK")
        self.assertEqual(result.match_method, "lender")

    def test_large_lender_credit_is_funding(self):
        result = self.classifier.classify(make_txn("EBF HOLDINGS FUNDING", 20000, CREDIT))
        self.assertEqual(result.category, "mca_funding")
        self.assertEqual(result.lender_name, "EBF_HOLDINGS")

    def test_small_lender_credit_is_not_funding(self):
        result = self.classifier.classify(make_txn("EBF HOLDINGS REFUND", 300, CREDIT))
        self.assertNotEqual(result.category, "mca_funding")
        self.assertEqual(result.domain, "revenue")

    def test_card_processing(self):
        result = self.classifier.classify(make_txn("SQUARE DEPOSIT 0115", 1500, CREDIT))
        self.assertEqual(result.category, "card_processing")
        self.assertEqual(result.parse_quality, "medium")

    def test_payroll(self):
        result = self.classifier.classify(make_txn("GUSTO PAYROLL", 5000, DEBIT))
        self.assertEqual(result.category, "payroll")

    def test_rent(self):
        result = self.classifier.classify(make_txn("RENT PAYMENT OFFICE", 4000, DEBIT))
        self.assertEqual(result.category, "rent")

    def test_nsf_fee(self):
        result = self.classifier.classify(make_txn("NSF FEE", 35, DEBIT))
        self.assertEqual(result.category, "nsf_fee")

    def test_unmatched_falls_back_by_direction(self):
        credit = self.classifier.classify(make_txn("ZQXV 4411", 100, CREDIT))
        debit = self.classifier.classify(make_txn("ZQXV 4411", 100, DEBIT))
        self.assertEqual((credit.domain, credit.category, credit.parse_quality),
                         ("revenue", "other_income", "low"))
        self.assertEqual((debit.domain, debit.category, debit.parse_quality),
                         ("expense", "other_expense", "low"))

    def test_fuzzy_keyword_match(self):
        match = match_keywords("WHOLESAL DEPOT", ["WHOLESALE"], fuzzy_threshold=85)
        self.assertIsNotNone(match)
        self.assertEqual(match[0], "WHOLESALE")
        self.assertEqual(match[2], "fuzzy")

    def test_exact_keyword_match(self):
        self.assertEqual(
            match_keywords("GUSTO PAYROLL 0115", ["GUSTO", "PAYCHEX"]),
            ("GUSTO", 1.0, "keyword"),
        )

    def test_build_ledger_and_summary(self):
        ledger = build_ledger([
            {"date": "2025-01-02", "description": "SQUARE DEPOSIT", "amount": 1500},
            {"date": "2025-01-03", "description": "SQUARE DEPOSIT", "amount": 1000},
            {"date": "2025-01-03", "description": "GUSTO PAYROLL", "amount": -5000},
        ])
        self.assertEqual(len(ledger), 3)
        summary = self.classifier.get_category_summary(ledger)
        self.assertEqual(summary["card_processing"]["count"], 2)
        self.assertAlmostEqual(summary["card_processing"]["total"], 2500.0)
        self.assertEqual(summary["payroll"]["domain"], "expense")


if __name__ == "__main__":
    unittest.main()
