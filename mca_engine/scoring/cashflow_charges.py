"""
Cashflow & Charges section of the MCA scorecard.

Six subsections covering NSF / overdraft behaviour and balance health:
NSF frequency, NSF severity, NSF trend, negative balance, balance
volatility and liquidity buffer.
"""

import logging
import statistics
from datetime import date
from typing import Dict, List

from ..config.scoring_config import CASHFLOW_CHARGES_CONFIG
from .feature_builder import AggregatedMetrics
from .framework import (
    SectionScore,
    SubsectionScore,
    build_section,
    build_subsection,
    calculate_cv,
    calculate_trend_direction,
    format_currency,
    format_percent,
    make_metric,
    safe_divide,
    safe_subsection,
    split_halves,
)

logger = logging.getLogger(__name__)

TREND_LABELS = {
    "STRONGLY_IMPROVING": "Strongly Improving",
    "IMPROVING": "Improving",
    "STABLE": "Stable",
    "WORSENING": "Worsening",
    "STRONGLY_WORSENING": "Strongly Worsening",
}


def _monthly_nsf_counts(metrics: AggregatedMetrics) -> List[int]:
    return [m.nsf.count for m in metrics.monthly_data]


def _daily_closing_balances(metrics: AggregatedMetrics) -> Dict[date, float]:
    """Last running balance seen on each day, in date order."""
    closing: Dict[date, float] = {}
    for txn, _ in metrics.ledger:
        closing[txn.date] = txn.running_balance
    return closing


class CashflowChargesScorer:
    """Scores overdraft behaviour, balance volatility and liquidity."""

    def __init__(self):
        self.config = CASHFLOW_CHARGES_CONFIG

    def score(self, metrics: AggregatedMetrics) -> SectionScore:
        builders = [
            ("NSF Frequency", "nsf_frequency", self._score_nsf_frequency),
            ("NSF Severity", "nsf_severity", self._score_nsf_severity),
            ("NSF Trend", "nsf_trend", self._score_nsf_trend),
            ("Negative Balance", "negative_balance", self._score_negative_balance),
            ("Balance Volatility", "volatility", self._score_volatility),
            ("Liquidity Buffer", "liquidity", self._score_liquidity),
        ]
        subsections = [
            safe_subsection(name, self.config[key]["weight"], builder, metrics)
            for name, key, builder in builders
        ]
        return build_section("Cashflow & Charges", subsections)

    def _score_nsf_frequency(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["nsf_frequency"]
        counts = _monthly_nsf_counts(metrics)
        months = metrics.months_analyzed

        per_month = safe_divide(metrics.nsf.count, months)
        free_months = len([c for c in counts if c == 0])
        free_ratio = safe_divide(free_months, months)
        max_in_month = max(counts) if counts else 0

        if per_month == 0:
            interpretation = "Perfect"
        elif per_month <= 1:
            interpretation = "Rare"
        else:
            interpretation = "Frequent"

        return build_subsection("NSF Frequency", config["weight"], [
            make_metric(
                "NSF per Month", per_month, config["metrics"]["nsf_per_month"],
                f"{per_month:.1f}",
                interpretation=interpretation,
            ),
            make_metric(
                "NSF-Free Months", free_ratio, config["metrics"]["nsf_free_months"],
                f"{free_months}/{months}",
            ),
            make_metric(
                "Max NSF (Single Month)", max_in_month, config["metrics"]["max_nsf_in_month"],
                str(max_in_month),
            ),
        ])

    def _score_nsf_severity(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["nsf_severity"]
        total_fees = metrics.nsf.total_fees
        average_fee = metrics.nsf.avg_fee
        fees_to_revenue = safe_divide(total_fees, metrics.total_revenue)

        if total_fees == 0:
            interpretation = "None"
        elif total_fees < 500:
            interpretation = "Moderate"
        else:
            interpretation = "High"

        return build_subsection("NSF Severity", config["weight"], [
            make_metric(
                "Total NSF Fees", total_fees, config["metrics"]["total_fees"],
                format_currency(total_fees),
                interpretation=interpretation,
            ),
            make_metric(
                "NSF Fees / Revenue", fees_to_revenue, config["metrics"]["fees_to_revenue"],
                format_percent(fees_to_revenue, 2),
            ),
            make_metric(
                "Average Fee", average_fee, config["metrics"]["average_fee"],
                format_currency(average_fee) if total_fees > 0 else "N/A",
                score=100 if total_fees == 0 else None,
            ),
        ])

    def _score_nsf_trend(self, metrics: AggregatedMetrics) -> SubsectionScore:
        """
        Half-over-half NSF change, the latest month against the average, and
        the share of months that improved on the one before.

        Halves are compared by their averages so an odd month count does not
        bias the comparison toward the longer second half.
        """
        config = self.config["nsf_trend"]
        counts = _monthly_nsf_counts(metrics)

        first_half, second_half = split_halves(counts)
        first_avg = statistics.fmean(first_half) if first_half else 0.0
        second_avg = statistics.fmean(second_half) if second_half else 0.0
        if first_avg == 0:
            change = 1.0 if second_avg > 0 else 0.0
        else:
            change = (second_avg - first_avg) / first_avg

        if metrics.nsf.count == 0:
            change_score = 100
            label = "No NSF"
        else:
            change_score = None
            label = TREND_LABELS[calculate_trend_direction(counts)]

        recent_config = config["metrics"]["recent_month"]
        most_recent = counts[-1] if counts else 0
        monthly_avg = safe_divide(metrics.nsf.count, metrics.months_analyzed)
        if most_recent == 0:
            recent_score = recent_config["none_points"]
        elif most_recent <= monthly_avg:
            recent_score = recent_config["at_or_below_average_points"]
        elif most_recent <= monthly_avg * recent_config["slightly_above_multiple"]:
            recent_score = recent_config["slightly_above_points"]
        else:
            recent_score = recent_config["well_above_points"]

        # A pair of NSF-free months counts as holding the improvement
        improving = len([
            1 for previous, current in zip(counts, counts[1:])
            if current < previous or (current == 0 and previous == 0)
        ])
        improving_ratio = safe_divide(improving, len(counts) - 1, 1.0) if counts else 1.0

        return build_subsection("NSF Trend", config["weight"], [
            make_metric(
                "Trend Direction", change, config["metrics"]["half_over_half_change"],
                label,
                score=change_score,
                interpretation=label,
            ),
            make_metric(
                "Recent Month NSF", most_recent, recent_config,
                str(most_recent),
                score=recent_score,
            ),
            make_metric(
                "Improving Months", improving_ratio, config["metrics"]["improving_months"],
                format_percent(improving_ratio),
            ),
        ])

    def _score_negative_balance(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["negative_balance"]

        negative_days = {txn.date for txn, _ in metrics.ledger if txn.running_balance < 0}
        lowest = min([txn.running_balance for txn, _ in metrics.ledger] + [0.0])
        negative_ratio = safe_divide(len(negative_days), metrics.total_days_analyzed)

        if not negative_days:
            days_interpretation = "Never negative"
        elif negative_ratio <= 0.10:
            days_interpretation = "Rarely"
        else:
            days_interpretation = "Frequently"

        if lowest >= 0:
            depth_interpretation = "Never negative"
        elif lowest >= -1000:
            depth_interpretation = "Minor"
        else:
            depth_interpretation = "Significant"

        if not negative_days:
            recovery_label = "N/A"
        elif negative_ratio <= 0.05:
            recovery_label = "Fast"
        else:
            recovery_label = "Slow"

        return build_subsection("Negative Balance", config["weight"], [
            make_metric(
                "Negative Days", negative_ratio, config["metrics"]["negative_day_ratio"],
                f"{len(negative_days)} days ({format_percent(negative_ratio)})",
                interpretation=days_interpretation,
            ),
            make_metric(
                "Lowest Balance", lowest, config["metrics"]["lowest_balance"],
                format_currency(lowest),
                interpretation=depth_interpretation,
            ),
            make_metric(
                "Recovery Speed", negative_ratio, config["metrics"]["recovery"],
                recovery_label,
                score=100 if not negative_days else None,
            ),
        ])

    def _score_volatility(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["volatility"]
        balances = list(_daily_closing_balances(metrics).values())

        balance_cv = calculate_cv(balances)

        swings = 0
        for previous, current in zip(balances, balances[1:]):
            if previous != 0 and abs(current - previous) / abs(previous) > config["swing_threshold"]:
                swings += 1
        swing_ratio = safe_divide(swings, len(balances) - 1) if len(balances) > 1 else 0.0

        average = statistics.fmean(balances) if balances else 0.0
        range_ratio = 0.0
        if average > 0:
            range_ratio = (max(balances) - min(balances)) / average

        return build_subsection("Balance Volatility", config["weight"], [
            make_metric(
                "Balance CV", balance_cv, config["metrics"]["balance_cv"],
                f"{balance_cv:.1f}%",
                interpretation="Stable" if balance_cv < 50 else "Volatile",
            ),
            make_metric(
                "Swing Frequency", swing_ratio, config["metrics"]["swing_ratio"],
                format_percent(swing_ratio),
                interpretation="Low" if swing_ratio <= 0.10 else "High",
            ),
            make_metric(
                "Range/Avg", range_ratio, config["metrics"]["range_to_average"],
                f"{range_ratio:.1f}x",
            ),
        ])

    def _score_liquidity(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["liquidity"]
        average_balance = metrics.cash_flow.avg_daily_balance
        minimum_balance = metrics.cash_flow.min_balance

        daily_expenses = safe_divide(metrics.total_expenses, metrics.total_days_analyzed)
        runway = safe_divide(average_balance, daily_expenses)

        if runway >= 15:
            interpretation = "Good cushion"
        elif runway >= 7:
            interpretation = "Adequate"
        else:
            interpretation = "Thin"

        return build_subsection("Liquidity Buffer", config["weight"], [
            make_metric(
                "Days of Runway", runway, config["metrics"]["days_of_runway"],
                f"{runway:.1f} days",
                interpretation=interpretation,
            ),
            make_metric(
                "Avg Daily Balance", average_balance, config["metrics"]["average_balance"],
                format_currency(average_balance),
            ),
            make_metric(
                "Min Balance", minimum_balance, config["metrics"]["minimum_balance"],
                format_currency(minimum_balance),
            ),
        ])


def calculate_cashflow_charges(metrics: AggregatedMetrics) -> SectionScore:
    return CashflowChargesScorer().score(metrics)
