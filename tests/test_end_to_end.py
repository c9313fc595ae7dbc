"""
End-to-end test suite: raw transactions through classification,
aggregation, stacking detection, scoring, validation and export.
"""

import unittest
from datetime import date

from mca_engine import run_mca_scoring
from mca_engine.export import (
    monthly_metrics_to_dataframe,
    scorecard_to_dataframe,
    transactions_to_dataframe,
)
from mca_engine.scoring.feature_builder import calculate_aggregated_metrics
from mca_engine.scoring.framework import Recommendation
from mca_engine.scoring.scoring_engine import (
    ScoringEngine,
    calculate_overall_scorecard,
    get_overall_summary,
    get_section_summary,
    get_subsection_details,
)
from mca_engine.scoring.validation import validate_before_render


def steady_business(opening_balance=10000.0):
    """
    Three months of $30,000 card revenue and $25,000 expenses, including
    $2,500 a month paid to a single MCA lender and no NSF activity.
    """
    balance = opening_balance
    rows = []
    for month in (1, 2, 3):
        for day in range(1, 29):
            plan = []
            if day <= 20:
                plan.append(("SQUARE DEPOSIT", 1500.0))
            if day == 1:
                plan.append(("RENT PAYMENT OFFICE", -4000.0))
            if day in (5, 10, 15, 20, 25):
                plan.append(("ONDECK DAILY PAYMENT", -500.0))
            if day in (14, 28):
                plan.append(("GUSTO PAYROLL", -5000.0))
            if day == 20:
                plan.append(("SYSCO WHOLESALE SUPPLIES", -8000.0))
            if day == 25:
                plan.append(("DUKE ENERGY BILL", -500.0))
            for description, amount in plan:
                balance += amount
                rows.append({
                    "date": date(2025, month, day).isoformat(),
                    "description": description,
                    "amount": amount,
                    "running_balance": balance,
                })
    return rows


def find_subsection(section, name):
    return next(s for s in section.subsections if s.name == name)


def find_metric(subsection, name):
    return next(m for m in subsection.metrics if m.name == name)


class TestSteadyBusinessScorecard(unittest.TestCase):
    """A healthy single-position merchant should be approvable."""

    def setUp(self):
        self.transactions = steady_business()
        self.metrics = calculate_aggregated_metrics(self.transactions)
        self.scorecard = calculate_overall_scorecard(self.metrics)

    def test_aggregated_totals(self):
        self.assertAlmostEqual(self.metrics.total_revenue, 90000.0)
        self.assertAlmostEqual(self.metrics.total_expenses, 75000.0)
        self.assertAlmostEqual(self.metrics.mca.payments_total, 7500.0)
        self.assertEqual(self.metrics.mca.unique_mca_count, 1)
        self.assertEqual(self.metrics.nsf.count, 0)

    def test_mca_burden(self):
        burden = find_subsection(self.scorecard.existing_debt_impact, "MCA Burden")
        ratio = find_metric(burden, "MCA / Revenue")
        self.assertAlmostEqual(ratio.value, 0.0833, places=3)
        self.assertEqual(ratio.score, 87)

    def test_nsf_frequency_perfect(self):
        frequency = find_subsection(self.scorecard.cashflow_charges, "NSF Frequency")
        self.assertEqual(frequency.score, 100)

    def test_recommendation(self):
        self.assertIn(
            self.scorecard.recommendation,
            (Recommendation.APPROVE, Recommendation.APPROVE_WITH_CONDITIONS),
        )

    def test_overall_is_weighted_sections(self):
        sections = self.scorecard.sections.values()
        expected = sum(section.score * 0.25 for section in sections)
        self.assertLessEqual(abs(self.scorecard.overall_score - expected), 0.5)
        self.assertEqual(self.scorecard.months_analyzed, 3)

    def test_payments_not_stopped(self):
        red_flags = find_subsection(self.scorecard.existing_debt_impact, "MCA Red Flags")
        self.assertNotIn("MCA_PAYMENTS_STOPPED", [f.flag_type for f in red_flags.red_flags])

    def test_all_scores_bounded(self):
        self.assertGreaterEqual(self.scorecard.overall_score, 0)
        self.assertLessEqual(self.scorecard.overall_score, 100)
        for section in self.scorecard.sections.values():
            for subsection in section.subsections:
                self.assertGreaterEqual(subsection.score, 0)
                self.assertLessEqual(subsection.score, 100)
                for metric in subsection.metrics:
                    self.assertGreaterEqual(metric.score, 0)
                    self.assertLessEqual(metric.score, 100)

    def test_validation_passes(self):
        result = validate_before_render(self.metrics, self.scorecard)
        self.assertTrue(result.is_valid)
        self.assertEqual(result.errors, [])


class TestIdempotence(unittest.TestCase):
    """Identical input always yields an identical scorecard."""

    def test_rerun_is_identical(self):
        first = calculate_overall_scorecard(calculate_aggregated_metrics(steady_business()))
        second = calculate_overall_scorecard(calculate_aggregated_metrics(steady_business()))
        self.assertEqual(first, second)

    def test_month_order_does_not_matter(self):
        rows = steady_business()
        # Same-day order is kept, so the sorted ledger is identical
        by_month = [[row for row in rows if row["date"][5:7] == month]
                    for month in ("03", "01", "02")]
        shuffled = [row for block in by_month for row in block]
        forward = calculate_overall_scorecard(calculate_aggregated_metrics(rows))
        shuffled_card = calculate_overall_scorecard(calculate_aggregated_metrics(shuffled))
        self.assertEqual(forward, shuffled_card)

    def test_explicit_transactions_match_carried_ledger(self):
        rows = steady_business()
        metrics = calculate_aggregated_metrics(rows)
        engine = ScoringEngine()
        self.assertEqual(engine.score(metrics), engine.score(metrics, transactions=rows))

    def test_run_mca_scoring_is_repeatable(self):
        rows = steady_business()
        self.assertEqual(run_mca_scoring(rows), run_mca_scoring(rows))


class TestSummaries(unittest.TestCase):
    """Test cases for the display summaries."""

    def setUp(self):
        self.scorecard = calculate_overall_scorecard(
            calculate_aggregated_metrics(steady_business())
        )

    def test_overall_summary(self):
        summary = get_overall_summary(self.scorecard)
        self.assertEqual(summary["score"], self.scorecard.overall_score)
        self.assertEqual(summary["period_range"], "Jan 2025 - Mar 2025")
        self.assertEqual(len(summary["sections"]), 4)
        self.assertNotIn("_", summary["recommendation"])
        self.assertIn(summary["recommendation_color"], ("green", "blue"))

    def test_section_summary(self):
        summary = get_section_summary(self.scorecard.revenue_quality)
        self.assertEqual(summary["name"], "Revenue Quality")
        self.assertEqual(summary["weight"], "25%")
        self.assertEqual(len(summary["top_metrics"]), 3)
        self.assertTrue(summary["top_metrics"][0]["name"].startswith("Revenue Stability: "))

    def test_subsection_details(self):
        details = get_subsection_details(self.scorecard.cashflow_charges)
        self.assertEqual(len(details), 6)
        self.assertEqual(details[0]["name"], "NSF Frequency")
        self.assertEqual(len(details[0]["metrics"]), 3)


class TestRunMcaScoring(unittest.TestCase):
    """Test cases for the one-call entry point."""

    def test_result_shape(self):
        result = run_mca_scoring(steady_business())
        self.assertIn(result["recommendation"], ("APPROVE", "APPROVE_WITH_CONDITIONS"))
        self.assertEqual(set(result["sections"]), {
            "revenue_quality", "expense_quality", "existing_debt_impact", "cashflow_charges",
        })
        self.assertEqual(len(result["monthly"]), 3)
        self.assertEqual(result["metrics"]["mca"]["mca_names"], ["ONDECK"])
        self.assertEqual(result["stacking_alerts"], [])
        self.assertTrue(result["validation"]["is_valid"])

    def test_stacking_alerts_included(self):
        rows = steady_business() + [
            {"date": "2025-01-03", "description": "EBF HOLDINGS FUNDING",
             "amount": 20000.0, "running_balance": 40000.0},
            {"date": "2025-01-22", "description": "FUNDBOX ADVANCE",
             "amount": 15000.0, "running_balance": 50000.0},
        ]
        result = run_mca_scoring(rows)
        self.assertTrue(result["stacking_alerts"])
        self.assertTrue(all(alert["type"] == "STACKING" for alert in result["stacking_alerts"]))

    def test_no_transactions(self):
        self.assertIsNone(run_mca_scoring([]))


class TestValidation(unittest.TestCase):
    """Test cases for pre-render consistency checks."""

    def test_broken_revenue_breakdown_is_error(self):
        metrics = calculate_aggregated_metrics(steady_business())
        metrics.revenue.credit_card_sales += 5000.0
        result = validate_before_render(metrics)
        self.assertFalse(result.is_valid)
        self.assertTrue(any("Revenue breakdown" in error for error in result.errors))

    def test_nsf_without_fees_is_warning(self):
        metrics = calculate_aggregated_metrics(steady_business())
        metrics.nsf.count = 2
        result = validate_before_render(metrics)
        self.assertTrue(result.is_valid)
        self.assertIn("NSF count > 0 but no fees recorded", result.warnings)

    def test_unassigned_income_is_warning(self):
        rows = steady_business() + [
            {"date": "2025-02-%02d" % day, "description": "INCOMING %d" % day,
             "amount": 5000.0, "running_balance": 0.0, "source_category": "99.UNASSIGNED"}
            for day in range(1, 11)
        ]
        result = validate_before_render(calculate_aggregated_metrics(rows))
        self.assertTrue(any("income is unassigned" in warning for warning in result.warnings))

    def test_out_of_bounds_score_is_error(self):
        metrics = calculate_aggregated_metrics(steady_business())
        metrics.scores.nsf = 140
        result = validate_before_render(metrics)
        self.assertIn("nsf score out of bounds: 140", result.errors)


class TestExport(unittest.TestCase):
    """Test cases for pandas export."""

    def setUp(self):
        self.metrics = calculate_aggregated_metrics(steady_business())
        self.scorecard = calculate_overall_scorecard(self.metrics)

    def test_scorecard_rows(self):
        df = scorecard_to_dataframe(self.scorecard)
        expected_rows = sum(
            len(subsection.metrics)
            for section in self.scorecard.sections.values()
            for subsection in section.subsections
        )
        self.assertEqual(len(df), expected_rows)
        self.assertEqual(
            set(df["Section"]),
            {"Revenue Quality", "Expense Quality", "Existing Debt Impact", "Cashflow & Charges"},
        )

    def test_monthly_rows(self):
        df = monthly_metrics_to_dataframe(self.metrics.monthly_data)
        self.assertEqual(list(df["Month"]), ["2025-01", "2025-02", "2025-03"])
        self.assertEqual(list(df["Revenue"]), [30000.0, 30000.0, 30000.0])
        self.assertEqual(list(df["MCA Payments"]), [2500.0, 2500.0, 2500.0])

    def test_transaction_rows(self):
        df = transactions_to_dataframe(self.metrics.ledger)
        self.assertEqual(len(df), len(self.metrics.ledger))
        ondeck = df[df["Lender"] == "ONDECK"]
        self.assertEqual(len(ondeck), 15)
        self.assertTrue((ondeck["Category"] == "mca_payment").all())


if __name__ == "__main__":
    unittest.main()
