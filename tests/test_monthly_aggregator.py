"""
Test suite for monthly and period aggregation.

Verifies bucket sums, MCA and NSF accounting, deduplication and the
empty-input case.
"""

import unittest
from datetime import date, timedelta

from mca_engine.scoring.feature_builder import (
    MetricsCalculator,
    calculate_aggregated_metrics,
    calculate_trend,
    get_stacking_indicator,
    invert_trend,
)


def month_of_transactions(year, month, balance=5000.0):
    """A small but complete month: card sales, payroll, rent, an MCA payment."""
    rows = []
    plan = [
        (1, "SQUARE DEPOSIT", 2000.0),
        (2, "RENT PAYMENT OFFICE", -1500.0),
        (5, "ONDECK DAILY PAYMENT", -300.0),
        (8, "SQUARE DEPOSIT", 2500.0),
        (12, "GUSTO PAYROLL", -1800.0),
        (15, "CASH DEPOSIT BRANCH", 700.0),
        (20, "ZQXV 4411", -50.0),
    ]
    for day, description, amount in plan:
        balance += amount
        rows.append({
            "date": date(year, month, day).isoformat(),
            "description": description,
            "amount": amount,
            "running_balance": balance,
        })
    return rows, balance


class TestAggregation(unittest.TestCase):
    """Test cases for MetricsCalculator."""

    def setUp(self):
        self.transactions = []
        balance = 5000.0
        for month in (1, 2, 3):
            rows, balance = month_of_transactions(2025, month, balance)
            self.transactions.extend(rows)
        self.metrics = calculate_aggregated_metrics(self.transactions)

    def test_period_and_months(self):
        self.assertEqual(self.metrics.months_analyzed, 3)
        self.assertEqual(self.metrics.period_start, date(2025, 1, 1))
        self.assertEqual(self.metrics.period_end, date(2025, 3, 20))
        self.assertEqual([m.month for m in self.metrics.monthly_data],
                         ["2025-01", "2025-02", "2025-03"])

    def test_totals(self):
        self.assertAlmostEqual(self.metrics.total_revenue, 3 * 5200.0)
        self.assertAlmostEqual(self.metrics.total_expenses, 3 * 3650.0)
        self.assertAlmostEqual(self.metrics.net_cash_flow, 3 * 1550.0)
        self.assertAlmostEqual(self.metrics.avg_monthly_revenue, 5200.0)

    def test_revenue_buckets_sum_to_total(self):
        revenue = self.metrics.revenue
        self.assertAlmostEqual(revenue.bucket_sum(), revenue.total, delta=1.0)
        self.assertAlmostEqual(revenue.credit_card_sales, 3 * 4500.0)
        # Cash deposits land in the ACH deposit bucket
        self.assertAlmostEqual(revenue.ach_deposits, 3 * 700.0)

    def test_expense_buckets_plus_mca_sum_to_total(self):
        expenses = self.metrics.expenses
        self.assertAlmostEqual(
            expenses.bucket_sum() + self.metrics.mca.payments_total, expenses.total, delta=1.0
        )
        self.assertAlmostEqual(expenses.payroll, 3 * 1800.0)
        self.assertAlmostEqual(expenses.rent, 3 * 1500.0)
        self.assertAlmostEqual(expenses.other_expenses, 3 * 50.0)

    def test_monthly_buckets_sum_to_monthly_totals(self):
        for month in self.metrics.monthly_data:
            self.assertAlmostEqual(month.revenue.bucket_sum(), month.revenue.total, delta=1.0)
            self.assertAlmostEqual(
                month.expenses.bucket_sum() + month.mca.payments_total,
                month.expenses.total,
                delta=1.0,
            )

    def test_mca_metrics(self):
        mca = self.metrics.mca
        self.assertEqual(mca.payment_count, 3)
        self.assertAlmostEqual(mca.payments_total, 900.0)
        self.assertEqual(mca.unique_mca_count, 1)
        self.assertEqual(mca.mca_names, ["ONDECK"])
        self.assertEqual(mca.stacking_indicator, "LOW")
        self.assertAlmostEqual(mca.monthly_repayment, 300.0)
        self.assertAlmostEqual(mca.payment_to_revenue_ratio, 900.0 / (3 * 5200.0))
        self.assertEqual(mca.mca_details[0].name, "ONDECK")

    def test_no_nsf(self):
        self.assertEqual(self.metrics.nsf.count, 0)
        self.assertEqual(self.metrics.nsf.negative_balance_days, 0)
        self.assertEqual(self.metrics.nsf.frequency, 0)

    def test_ledger_carried_in_order(self):
        dates = [txn.date for txn, _ in self.metrics.ledger]
        self.assertEqual(dates, sorted(dates))
        self.assertEqual(len(self.metrics.ledger), len(self.transactions))

    def test_axis_scores_in_bounds(self):
        scores = self.metrics.scores
        for value in (scores.revenue, scores.expenses, scores.mca,
                      scores.nsf, scores.cash_flow, scores.overall):
            self.assertGreaterEqual(value, 0)
            self.assertLessEqual(value, 100)

    def test_duplicates_counted_once(self):
        doubled = calculate_aggregated_metrics(self.transactions + self.transactions)
        self.assertAlmostEqual(doubled.total_revenue, self.metrics.total_revenue)
        self.assertEqual(len(doubled.ledger), len(self.metrics.ledger))

    def test_order_independent(self):
        shuffled = calculate_aggregated_metrics(list(reversed(self.transactions)))
        self.assertAlmostEqual(shuffled.total_revenue, self.metrics.total_revenue)
        self.assertEqual(shuffled.period_start, self.metrics.period_start)


class TestNegativeBalancesAndNSF(unittest.TestCase):
    """Test cases for NSF and negative balance accounting."""

    def test_nsf_and_negative_days(self):
        start = date(2025, 4, 1)
        rows = [
            {"date": start.isoformat(), "description": "SQUARE DEPOSIT", "amount": 1000, "running_balance": 200},
            {"date": (start + timedelta(days=1)).isoformat(), "description": "GUSTO PAYROLL",
             "amount": -800, "running_balance": -600},
            {"date": (start + timedelta(days=1)).isoformat(), "description": "NSF FEE",
             "amount": -35, "running_balance": -635},
            {"date": (start + timedelta(days=2)).isoformat(), "description": "OVERDRAFT FEE",
             "amount": -35, "running_balance": -670},
        ]
        metrics = calculate_aggregated_metrics(rows)
        self.assertEqual(metrics.nsf.count, 2)
        self.assertAlmostEqual(metrics.nsf.total_fees, 70.0)
        self.assertAlmostEqual(metrics.nsf.avg_fee, 35.0)
        self.assertEqual(metrics.nsf.negative_balance_days, 2)
        self.assertEqual(metrics.nsf.lowest_balance, -670)
        self.assertAlmostEqual(metrics.expenses.nsf_fees, 70.0)
        self.assertEqual(metrics.total_days_analyzed, 3)


class TestEmptyInput(unittest.TestCase):
    """Test cases for inputs that leave nothing to aggregate."""

    def test_empty_list(self):
        self.assertIsNone(calculate_aggregated_metrics([]))

    def test_only_excluded_rows(self):
        rows = [{"date": "2025-01-01", "description": "Opening Balance", "amount": 1000}]
        self.assertIsNone(MetricsCalculator().calculate(rows))


class TestTrendHelpers(unittest.TestCase):
    """Test cases for trend and indicator helpers."""

    def test_calculate_trend(self):
        self.assertEqual(calculate_trend([100, 100, 150, 150]), "IMPROVING")
        self.assertEqual(calculate_trend([150, 150, 100, 100]), "DECLINING")
        self.assertEqual(calculate_trend([100, 102, 101]), "STABLE")
        self.assertEqual(calculate_trend([100]), "STABLE")

    def test_invert_trend(self):
        self.assertEqual(invert_trend("IMPROVING"), "DECLINING")
        self.assertEqual(invert_trend("DECLINING"), "IMPROVING")
        self.assertEqual(invert_trend("STABLE"), "STABLE")

    def test_stacking_indicator(self):
        self.assertEqual(get_stacking_indicator(0), "NONE")
        self.assertEqual(get_stacking_indicator(1), "LOW")
        self.assertEqual(get_stacking_indicator(3), "MEDIUM")
        self.assertEqual(get_stacking_indicator(4), "HIGH")


if __name__ == "__main__":
    unittest.main()
