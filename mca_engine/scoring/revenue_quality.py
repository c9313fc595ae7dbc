"""
Revenue Quality section of the MCA scorecard.

Seven subsections: stability, durability, trend & momentum, concentration,
sufficiency, red flags and continuity.
"""

import logging
import re
import statistics
from typing import List

from ..config.scoring_config import REVENUE_QUALITY_CONFIG
from ..patterns.transaction_patterns import CASH_DEPOSIT_PATTERN
from .feature_builder import AggregatedMetrics
from .framework import (
    SectionScore,
    SubsectionScore,
    build_section,
    build_subsection,
    calculate_cv,
    clamp,
    format_percent,
    make_metric,
    red_flag,
    safe_divide,
    safe_subsection,
    split_halves,
)

logger = logging.getLogger(__name__)

# Non-MCA revenue sources considered for concentration
CONCENTRATION_SOURCES = [
    ("Regular Revenue", "regular_revenue"),
    ("Credit Card Sales", "credit_card_sales"),
    ("ACH Deposits", "ach_deposits"),
    ("Wire Transfers", "wire_transfers"),
    ("Check Deposits", "check_deposits"),
    ("Zelle Income", "zelle_income"),
    ("State Payments", "state_payments"),
    ("Counseling Revenue", "counseling_revenue"),
    ("Other Revenue", "other_revenue"),
    ("Refunds", "refunds_received"),
]


def _monthly_revenue(metrics: AggregatedMetrics) -> List[float]:
    return [m.revenue.total for m in metrics.monthly_data]


class RevenueQualityScorer:
    """Scores how stable, diversified and sufficient the revenue is."""

    def __init__(self):
        self.config = REVENUE_QUALITY_CONFIG

    def score(self, metrics: AggregatedMetrics) -> SectionScore:
        builders = [
            ("Revenue Stability", "stability", self._score_stability),
            ("Revenue Durability", "durability", self._score_durability),
            ("Revenue Trend & Momentum", "trend", self._score_trend),
            ("Revenue Concentration", "concentration", self._score_concentration),
            ("Revenue Sufficiency", "sufficiency", self._score_sufficiency),
            ("Revenue Red Flags", "red_flags", self._score_red_flags),
            ("Revenue Continuity", "continuity", self._score_continuity),
        ]
        subsections = [
            safe_subsection(name, self.config[key]["weight"], builder, metrics)
            for name, key, builder in builders
        ]
        return build_section("Revenue Quality", subsections)

    def _score_stability(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["stability"]
        revenues = _monthly_revenue(metrics)

        revenue_cv = calculate_cv(revenues)

        max_variance = 0.0
        for previous, current in zip(revenues, revenues[1:]):
            max_variance = max(max_variance, abs(current - previous) / (previous or 1))

        near_average = len([r for r in revenues if r >= metrics.avg_monthly_revenue * 0.9])
        near_average_ratio = safe_divide(near_average, len(revenues))

        return build_subsection("Revenue Stability", config["weight"], [
            make_metric(
                "Revenue CV", revenue_cv, config["metrics"]["revenue_cv"],
                f"{revenue_cv:.1f}%",
                interpretation="Stable" if revenue_cv < 20 else "Volatile",
            ),
            make_metric(
                "Max Variance", max_variance, config["metrics"]["max_monthly_variance"],
                format_percent(max_variance),
                interpretation="Low variance" if max_variance < 0.25 else "High variance",
            ),
            make_metric(
                "Months Near Avg", near_average_ratio, config["metrics"]["months_near_average"],
                f"{near_average}/{len(revenues)}",
            ),
        ])

    def _score_durability(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["durability"]
        revenues = _monthly_revenue(metrics)

        zero_months = len([r for r in revenues if r <= 0])
        zero_ratio = safe_divide(zero_months, len(revenues))

        positive = [r for r in revenues if r > 0]
        min_ratio = safe_divide(min(positive), metrics.avg_monthly_revenue) if positive else 0.0

        longest_streak = streak = 0
        for previous, current in zip(revenues, revenues[1:]):
            streak = streak + 1 if current >= previous else 0
            longest_streak = max(longest_streak, streak)

        return build_subsection("Revenue Durability", config["weight"], [
            make_metric(
                "Zero Revenue Months", zero_ratio, config["metrics"]["zero_revenue_months"],
                str(zero_months),
                interpretation="None" if zero_months == 0 else "Concerning",
            ),
            make_metric(
                "Min Month Ratio", min_ratio, config["metrics"]["min_month_ratio"],
                format_percent(min_ratio),
            ),
            make_metric(
                "Max Growth Streak", longest_streak, config["metrics"]["growth_streak"],
                f"{longest_streak} months",
            ),
        ])

    def _score_trend(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["trend"]
        revenues = _monthly_revenue(metrics)

        first_half, second_half = split_halves(revenues)
        change = 0.0
        if first_half and second_half:
            first_avg = statistics.fmean(first_half)
            if first_avg > 0:
                change = (statistics.fmean(second_half) - first_avg) / first_avg

        recent_ratio = safe_divide(revenues[-1], metrics.avg_monthly_revenue) if revenues else 0.0

        growth_rates = [
            (current - previous) / previous
            for previous, current in zip(revenues, revenues[1:])
            if previous > 0
        ]
        avg_growth = statistics.fmean(growth_rates) if growth_rates else 0.0

        if change >= 0.05:
            direction = "Growing"
        elif change <= -0.05:
            direction = "Declining"
        else:
            direction = "Stable"

        return build_subsection("Revenue Trend & Momentum", config["weight"], [
            make_metric(
                "Trend Direction", change, config["metrics"]["half_over_half_change"],
                f"{direction} ({change * 100:.1f}%)",
            ),
            make_metric(
                "Recent Month vs Avg", recent_ratio, config["metrics"]["recent_vs_average"],
                format_percent(recent_ratio),
            ),
            make_metric(
                "Avg MoM Growth", avg_growth, config["metrics"]["avg_monthly_growth"],
                format_percent(avg_growth),
            ),
        ])

    def _score_concentration(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["concentration"]
        breakdown = metrics.revenue

        sources = sorted(
            [
                (label, getattr(breakdown, attr))
                for label, attr in CONCENTRATION_SOURCES
                if getattr(breakdown, attr) > 0
            ],
            key=lambda source: source[1],
            reverse=True,
        )
        revenue_ex_mca = metrics.total_revenue - metrics.mca.funding_received

        if revenue_ex_mca <= 0 or not sources:
            return build_subsection(
                "Revenue Concentration", config["weight"], [], score=50
            )

        top_name, top_amount = sources[0]
        top_share = top_amount / revenue_ex_mca
        mca_dependency = safe_divide(metrics.mca.funding_received, metrics.total_revenue)

        return build_subsection("Revenue Concentration", config["weight"], [
            make_metric(
                "Top Source", top_share, config["metrics"]["top_source_share"],
                f"{top_name}: {format_percent(top_share)}",
                interpretation="Diversified" if top_share < 0.5 else "Concentrated",
            ),
            make_metric(
                "Source Count", len(sources), config["metrics"]["source_count"],
                f"{len(sources)} sources",
            ),
            make_metric(
                "MCA Dependency", mca_dependency, config["metrics"]["mca_dependency"],
                format_percent(mca_dependency),
                interpretation="Low" if mca_dependency < 0.10 else "High",
            ),
        ])

    def _score_sufficiency(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["sufficiency"]
        total_revenue = metrics.total_revenue
        total_expenses = metrics.total_expenses
        mca_payments = metrics.mca.payments_total

        coverage = safe_divide(total_revenue, total_expenses)

        # Surplus after operating costs against what the MCAs take
        operating_expenses = total_expenses - mca_payments
        mca_coverage = safe_divide(total_revenue - operating_expenses, mca_payments)
        mca_coverage_score = 100 if mca_payments == 0 else None

        net_margin = safe_divide(total_revenue - total_expenses, total_revenue)

        return build_subsection("Revenue Sufficiency", config["weight"], [
            make_metric(
                "Coverage Ratio", coverage, config["metrics"]["revenue_to_expense"],
                f"{coverage:.2f}x",
                interpretation="Sufficient" if coverage >= 1.0 else "Insufficient",
            ),
            make_metric(
                "MCA Coverage", mca_coverage, config["metrics"]["mca_coverage"],
                f"{mca_coverage:.2f}x" if mca_payments > 0 else "N/A",
                score=mca_coverage_score,
            ),
            make_metric(
                "Net Margin", net_margin, config["metrics"]["net_margin"],
                format_percent(net_margin),
            ),
        ])

    def _score_red_flags(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["red_flags"]
        rules = config["rules"]
        flags = []

        cash_rule = rules["large_round_cash"]
        large_round_cash = [
            txn for txn, _ in metrics.ledger
            if txn.is_credit
            and re.search(CASH_DEPOSIT_PATTERN, txn.description)
            and txn.amount >= cash_rule["min_amount"]
            and txn.amount % cash_rule["round_to"] == 0
        ]
        if large_round_cash:
            deduction = min(
                len(large_round_cash) * cash_rule["points_each"], cash_rule["max_points"]
            )
            flags.append(red_flag(
                "LARGE_ROUND_CASH", cash_rule,
                f"{len(large_round_cash)} large round cash deposit(s) detected",
                points=deduction,
                flag_date=large_round_cash[0].date,
            ))

        funding_ratio = safe_divide(metrics.mca.funding_received, metrics.total_revenue)
        if funding_ratio > rules["high_mca_dependency"]["above"]:
            flags.append(red_flag(
                "HIGH_MCA_DEPENDENCY", rules["high_mca_dependency"],
                f"{format_percent(funding_ratio)} of revenue from MCA funding",
            ))
        elif funding_ratio > rules["moderate_mca_dependency"]["above"]:
            flags.append(red_flag(
                "MODERATE_MCA_DEPENDENCY", rules["moderate_mca_dependency"],
                f"{format_percent(funding_ratio)} of revenue from MCA funding",
            ))

        # Penalised once, at the first cliff
        cliff_rule = rules["revenue_cliff"]
        months = metrics.monthly_data
        for previous, current in zip(months, months[1:]):
            if previous.revenue.total <= 0:
                continue
            drop = (previous.revenue.total - current.revenue.total) / previous.revenue.total
            if drop > cliff_rule["drop"]:
                flags.append(red_flag(
                    "REVENUE_CLIFF", cliff_rule,
                    f"Revenue dropped {format_percent(drop)} in {current.month}",
                ))
                break

        unassigned_ratio = safe_divide(metrics.revenue.unassigned_income, metrics.total_revenue)
        if unassigned_ratio > rules["high_unassigned_income"]["above"]:
            flags.append(red_flag(
                "HIGH_UNASSIGNED_INCOME", rules["high_unassigned_income"],
                f"{format_percent(unassigned_ratio)} of income is unassigned",
            ))

        score = clamp(100 - sum(flag.points_deducted for flag in flags))
        summary = make_metric(
            "Red Flags Found", len(flags), {"weight": 1.0, "thresholds": []},
            str(len(flags)),
            score=score,
            interpretation="None" if not flags else "Review needed",
        )
        return build_subsection(
            "Revenue Red Flags", config["weight"], [summary], red_flags=flags, score=score
        )

    def _score_continuity(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["continuity"]
        credits = [txn for txn, _ in metrics.ledger if txn.is_credit and txn.amount > 0]

        max_gap = 0
        for previous, current in zip(credits, credits[1:]):
            max_gap = max(max_gap, (current.date - previous.date).days)

        deposits_per_month = safe_divide(len(credits), metrics.months_analyzed)

        positive_months = len([
            m for m in metrics.monthly_data if m.revenue.total - m.expenses.total > 0
        ])
        positive_ratio = safe_divide(positive_months, metrics.months_analyzed)

        return build_subsection("Revenue Continuity", config["weight"], [
            make_metric(
                "Max Revenue Gap", max_gap, config["metrics"]["max_deposit_gap"],
                f"{max_gap} days",
                interpretation="Consistent" if max_gap <= 7 else "Gaps detected",
            ),
            make_metric(
                "Deposits/Month", deposits_per_month, config["metrics"]["deposits_per_month"],
                f"{deposits_per_month:.1f}",
            ),
            make_metric(
                "Positive Months", positive_ratio, config["metrics"]["positive_months"],
                f"{positive_months}/{metrics.months_analyzed}",
            ),
        ])


def calculate_revenue_quality(metrics: AggregatedMetrics) -> SectionScore:
    return RevenueQualityScorer().score(metrics)
