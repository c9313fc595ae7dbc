"""
Expense Quality section of the MCA scorecard.

Seven subsections: expense ratio, stability, categorization, fixed vs
variable, owner draw, red flags and trend.
"""

import logging
import statistics
from typing import List

from ..categorisation.pattern_matching import matches_any
from ..config.scoring_config import EXPENSE_QUALITY_CONFIG
from ..patterns.transaction_patterns import RISK_PATTERNS
from .feature_builder import AggregatedMetrics
from .framework import (
    SectionScore,
    SubsectionScore,
    build_section,
    build_subsection,
    calculate_cv,
    clamp,
    format_currency,
    format_percent,
    make_metric,
    red_flag,
    safe_divide,
    safe_subsection,
    split_halves,
)

logger = logging.getLogger(__name__)

PREDICTABLE_BUCKETS = (
    "recurring", "rent", "utilities", "insurance", "software_subscriptions", "payroll",
)
FIXED_BUCKETS = ("rent", "recurring", "insurance", "software_subscriptions", "utilities")
DISCRETIONARY_BUCKETS = (
    "travel_entertainment", "marketing", "other_expenses", "business_expenses",
)


def _half_over_half(values: List[float]) -> float:
    first_half, second_half = split_halves(values)
    if not first_half or not second_half:
        return 0.0
    first_avg = statistics.fmean(first_half)
    if first_avg <= 0:
        return 0.0
    return (statistics.fmean(second_half) - first_avg) / first_avg


class ExpenseQualityScorer:
    """Scores cost structure, discipline and expense-side risk behaviour."""

    def __init__(self):
        self.config = EXPENSE_QUALITY_CONFIG

    def score(self, metrics: AggregatedMetrics) -> SectionScore:
        builders = [
            ("Expense Ratio", "ratio", self._score_ratio),
            ("Expense Stability", "stability", self._score_stability),
            ("Expense Categorization", "categorization", self._score_categorization),
            ("Fixed vs Variable", "fixed_vs_variable", self._score_fixed_vs_variable),
            ("Owner Draw", "owner_draw", self._score_owner_draw),
            ("Expense Red Flags", "red_flags", self._score_red_flags),
            ("Expense Trend", "trend", self._score_trend),
        ]
        subsections = [
            safe_subsection(name, self.config[key]["weight"], builder, metrics)
            for name, key, builder in builders
        ]
        return build_section("Expense Quality", subsections)

    def _score_ratio(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["ratio"]
        total_revenue = metrics.total_revenue
        total_expenses = metrics.total_expenses

        operating = total_expenses - metrics.mca.payments_total
        operating_ratio = safe_divide(operating, total_revenue, 1.0)
        net_margin = safe_divide(total_revenue - total_expenses, total_revenue, -1.0)
        coverage = safe_divide(total_revenue, total_expenses)

        return build_subsection("Expense Ratio", config["weight"], [
            make_metric(
                "Op Expense Ratio", operating_ratio, config["metrics"]["operating_ratio"],
                format_percent(operating_ratio),
                interpretation="Healthy" if operating_ratio < 0.70 else "High",
            ),
            make_metric(
                "Net Margin", net_margin, config["metrics"]["net_margin"],
                format_percent(net_margin),
                interpretation="Profitable" if net_margin >= 0.05 else "Thin",
            ),
            make_metric(
                "Expense Coverage", coverage, config["metrics"]["expense_coverage"],
                f"{coverage:.2f}x",
            ),
        ])

    def _score_stability(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["stability"]
        monthly = [m.expenses.total for m in metrics.monthly_data]

        expense_cv = calculate_cv(monthly)

        max_variance = 0.0
        for previous, current in zip(monthly, monthly[1:]):
            max_variance = max(max_variance, abs(current - previous) / (previous or 1))

        predictable = sum(getattr(metrics.expenses, name) for name in PREDICTABLE_BUCKETS)
        predictable_share = safe_divide(predictable, metrics.total_expenses)

        return build_subsection("Expense Stability", config["weight"], [
            make_metric(
                "Expense CV", expense_cv, config["metrics"]["expense_cv"],
                f"{expense_cv:.1f}%",
                interpretation="Stable" if expense_cv < 20 else "Volatile",
            ),
            make_metric(
                "Max Variance", max_variance, config["metrics"]["max_monthly_variance"],
                format_percent(max_variance),
            ),
            make_metric(
                "Predictability", predictable_share, config["metrics"]["predictable_share"],
                format_percent(predictable_share),
            ),
        ])

    def _score_categorization(self, metrics: AggregatedMetrics) -> SubsectionScore:
        """The only place uncategorised spend is penalised."""
        config = self.config["categorization"]
        total_expenses = metrics.total_expenses

        uncategorized = metrics.expenses.other_expenses + metrics.expenses.unassigned_expenses
        categorized_share = safe_divide(total_expenses - uncategorized, total_expenses)
        unknown_share = safe_divide(uncategorized, total_expenses)

        return build_subsection("Expense Categorization", config["weight"], [
            make_metric(
                "Categorized", categorized_share, config["metrics"]["categorized_share"],
                format_percent(categorized_share),
                interpretation="Transparent" if categorized_share >= 0.80 else "Opaque",
            ),
            make_metric(
                "Unknown/Other", unknown_share, config["metrics"]["unknown_share"],
                format_percent(unknown_share),
            ),
        ])

    def _score_fixed_vs_variable(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["fixed_vs_variable"]
        breakdown = metrics.expenses
        total_expenses = metrics.total_expenses

        fixed = (
            sum(getattr(breakdown, name) for name in FIXED_BUCKETS)
            + breakdown.payroll * config["payroll_fixed_share"]
        )
        operating = total_expenses - metrics.mca.payments_total
        fixed_ratio = safe_divide(fixed, operating)
        fixed_coverage = safe_divide(metrics.total_revenue, fixed, 99.0)

        discretionary = sum(getattr(breakdown, name) for name in DISCRETIONARY_BUCKETS)
        flexibility = safe_divide(discretionary, total_expenses)

        return build_subsection("Fixed vs Variable", config["weight"], [
            make_metric(
                "Fixed Expense Ratio", fixed_ratio, config["metrics"]["fixed_ratio"],
                format_percent(fixed_ratio),
                interpretation="Flexible" if fixed_ratio < 0.50 else "Rigid",
            ),
            make_metric(
                "Fixed Coverage", fixed_coverage, config["metrics"]["fixed_coverage"],
                f"{fixed_coverage:.1f}x",
            ),
            make_metric(
                "Flexibility Index", flexibility, config["metrics"]["flexibility"],
                format_percent(flexibility),
            ),
        ])

    def _score_owner_draw(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["owner_draw"]
        owner_draws = metrics.expenses.owner_draws
        mca_payments = metrics.mca.payments_total
        net_income = metrics.total_revenue - metrics.total_expenses
        flags = []

        if net_income > 0:
            draw_ratio = owner_draws / net_income
        else:
            # Any draw against a loss counts as drawing twice the profit
            draw_ratio = 2.0 if owner_draws > 0 else 0.0

        monthly_draws = [m.expenses.owner_draws for m in metrics.monthly_data]
        draw_cv = calculate_cv([d for d in monthly_draws if d > 0])

        draws_vs_mca = safe_divide(owner_draws, mca_payments)
        if mca_payments > 0 and owner_draws > mca_payments:
            flags.append(red_flag(
                "DRAWS_EXCEED_MCA", config["draws_exceed_mca"],
                f"Owner draws ({format_currency(owner_draws)}) exceed MCA payments "
                f"({format_currency(mca_payments)})",
            ))

        return build_subsection("Owner Draw", config["weight"], [
            make_metric(
                "Draw / Net Income", draw_ratio, config["metrics"]["draw_ratio"],
                format_percent(draw_ratio) if draw_ratio > 0 else "N/A",
                interpretation="Conservative" if draw_ratio < 0.50 else "Aggressive",
            ),
            make_metric(
                "Draw Consistency", draw_cv, config["metrics"]["draw_consistency"],
                f"{draw_cv:.1f}% CV" if owner_draws > 0 else "N/A",
                score=100 if owner_draws == 0 else None,
            ),
            make_metric(
                "Draw vs MCA", draws_vs_mca, config["metrics"]["draws_vs_mca"],
                f"{draws_vs_mca:.2f}x" if mca_payments > 0 else "N/A",
                score=100 if mca_payments == 0 else None,
            ),
        ], red_flags=flags)

    def _score_red_flags(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["red_flags"]
        rules = config["rules"]
        debits = [txn for txn, _ in metrics.ledger if txn.is_debit]
        flags = []

        # One deduction per behaviour, dated at its first occurrence
        for flag_type, rule_key, label in (
            ("GAMBLING", "gambling", "Gambling transaction detected"),
            ("CASH_ADVANCE", "cash_advance", "Cash advance detected"),
            ("COLLECTION", "collection", "Collection agency payment"),
        ):
            hit = next(
                (txn for txn in debits if matches_any(txn.description, RISK_PATTERNS[rule_key])),
                None,
            )
            if hit:
                flags.append(red_flag(
                    flag_type, rules[rule_key], f"{label}: {hit.description}",
                    flag_date=hit.date,
                ))

        atm_rule = rules["excessive_atm"]
        monthly_atm = safe_divide(metrics.expenses.atm_withdrawals, metrics.months_analyzed)
        if monthly_atm > atm_rule["monthly_above"]:
            flags.append(red_flag(
                "EXCESSIVE_ATM", atm_rule,
                f"Avg ATM withdrawals {format_currency(monthly_atm)}/month exceeds "
                f"{format_currency(atm_rule['monthly_above'])}",
            ))

        crypto_total = sum(
            txn.amount for txn in debits if matches_any(txn.description, RISK_PATTERNS["crypto"])
        )
        if crypto_total > rules["crypto_trading"]["above"]:
            flags.append(red_flag(
                "CRYPTO_TRADING", rules["crypto_trading"],
                f"Crypto/trading activity: {format_currency(crypto_total)}",
            ))

        late_fees = sum(
            txn.amount for txn in debits
            if matches_any(txn.description, RISK_PATTERNS["late_fees"])
        )
        if late_fees > rules["late_fees"]["above"]:
            flags.append(red_flag(
                "LATE_FEES", rules["late_fees"],
                f"Late payment fees: {format_currency(late_fees)}",
            ))

        if flags:
            logger.debug("Expense red flags: %s", [flag.flag_type for flag in flags])

        score = clamp(100 - sum(flag.points_deducted for flag in flags))
        summary = make_metric(
            "Red Flags Found", len(flags), {"weight": 1.0, "thresholds": []},
            str(len(flags)),
            score=score,
            interpretation="None" if not flags else "Review needed",
        )
        return build_subsection(
            "Expense Red Flags", config["weight"], [summary], red_flags=flags, score=score
        )

    def _score_trend(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["trend"]
        monthly_expenses = [m.expenses.total for m in metrics.monthly_data]
        monthly_revenue = [m.revenue.total for m in metrics.monthly_data]

        expense_growth = _half_over_half(monthly_expenses)
        revenue_growth = _half_over_half(monthly_revenue)
        growth_gap = expense_growth - revenue_growth

        recent_ratio = 1.0
        if monthly_expenses:
            recent_ratio = safe_divide(monthly_expenses[-1], metrics.avg_monthly_expenses, 1.0)

        if growth_gap < 0:
            direction = "Favorable"
        elif growth_gap > 0.10:
            direction = "Unfavorable"
        else:
            direction = "Neutral"

        return build_subsection("Expense Trend", config["weight"], [
            make_metric(
                "Expense vs Revenue Growth", growth_gap, config["metrics"]["growth_gap"],
                f"{growth_gap * 100:.1f}%",
                interpretation=direction,
            ),
            make_metric(
                "Recent Month vs Avg", recent_ratio, config["metrics"]["recent_vs_average"],
                format_percent(recent_ratio, 0),
            ),
            make_metric(
                "Expense Growth", expense_growth, config["metrics"]["expense_growth"],
                format_percent(expense_growth),
            ),
        ])


def calculate_expense_quality(metrics: AggregatedMetrics) -> SectionScore:
    return ExpenseQualityScorer().score(metrics)
