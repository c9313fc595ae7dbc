"""
Existing Debt Impact section of the MCA scorecard.

Six subsections: position count, burden, payment consistency, stacking,
velocity and red flags. Stacking is scored from the events produced by
the stacking detector.
"""

import logging
import statistics
from datetime import timedelta
from typing import List

from ..categorisation.preprocess import Transaction
from ..config.scoring_config import EXISTING_DEBT_CONFIG
from .feature_builder import AggregatedMetrics
from .framework import (
    SectionScore,
    SubsectionScore,
    build_section,
    build_subsection,
    clamp,
    count_business_days,
    format_currency,
    format_percent,
    make_metric,
    red_flag,
    safe_divide,
    safe_subsection,
)
from .stacking import describe_event, detect_stacking

logger = logging.getLogger(__name__)

POSITION_INTERPRETATIONS = {
    0: "No existing MCA debt",
    1: "Single position, manageable",
    2: "Two positions, moderate concern",
    3: "Three positions, high concern",
}


def _mca_payments(metrics: AggregatedMetrics) -> List[Transaction]:
    return [
        txn for txn, classification in metrics.ledger
        if txn.is_debit and classification.category == "mca_payment"
    ]


def _mca_disbursals(metrics: AggregatedMetrics) -> List[Transaction]:
    return [
        txn for txn, classification in metrics.ledger
        if txn.is_credit and classification.category == "mca_funding"
    ]


class ExistingDebtScorer:
    """Scores the weight and behaviour of MCA positions already on the books."""

    def __init__(self):
        self.config = EXISTING_DEBT_CONFIG

    def score(self, metrics: AggregatedMetrics) -> SectionScore:
        builders = [
            ("MCA Position Count", "position_count", self._score_position_count),
            ("MCA Burden", "burden", self._score_burden),
            ("MCA Payment Consistency", "consistency", self._score_consistency),
            ("MCA Stacking", "stacking", self._score_stacking),
            ("MCA Velocity", "velocity", self._score_velocity),
            ("MCA Red Flags", "red_flags", self._score_red_flags),
        ]
        subsections = [
            safe_subsection(name, self.config[key]["weight"], builder, metrics)
            for name, key, builder in builders
        ]
        return build_section("Existing Debt Impact", subsections)

    def _score_position_count(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["position_count"]
        positions = metrics.mca.unique_mca_count
        names = metrics.mca.mca_names

        return build_subsection("MCA Position Count", config["weight"], [
            make_metric(
                "Active MCAs", positions, config["metrics"]["active_positions"],
                str(positions),
                interpretation=POSITION_INTERPRETATIONS.get(
                    positions, "Heavy stacking, very high risk"
                ),
            ),
            make_metric(
                "MCA Names", len(names), {"weight": 0.0, "thresholds": []},
                ", ".join(names) or "None",
                score=0,
            ),
        ])

    def _score_burden(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["burden"]
        total_revenue = metrics.total_revenue
        mca_payments = metrics.mca.payments_total

        burden_ratio = safe_divide(mca_payments, total_revenue)

        business_days = count_business_days(metrics.period_start, metrics.period_end)
        daily_mca = safe_divide(mca_payments, business_days)
        daily_deposits = safe_divide(total_revenue, business_days)
        daily_burden = safe_divide(daily_mca, daily_deposits)

        operating = metrics.total_expenses - mca_payments
        coverage = safe_divide(total_revenue - operating, mca_payments)

        return build_subsection("MCA Burden", config["weight"], [
            make_metric(
                "MCA / Revenue", burden_ratio, config["metrics"]["burden_ratio"],
                format_percent(burden_ratio),
                interpretation="Light" if burden_ratio < 0.15 else "Heavy",
            ),
            make_metric(
                "Daily MCA Burden", daily_burden, config["metrics"]["daily_burden"],
                format_percent(daily_burden),
                score=100 if daily_mca == 0 else None,
            ),
            make_metric(
                "MCA Coverage", coverage, config["metrics"]["payment_coverage"],
                f"{coverage:.2f}x" if mca_payments > 0 else "N/A",
                score=100 if mca_payments == 0 else None,
            ),
        ])

    def _score_consistency(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["consistency"]
        payments = _mca_payments(metrics)

        if not payments or metrics.mca.payments_total == 0:
            return build_subsection("MCA Payment Consistency", config["weight"], [
                make_metric(
                    "No MCA Payments", 0, {"weight": 1.0, "thresholds": []}, "N/A",
                    score=100, interpretation="No MCA debt",
                ),
            ])

        # Daily debits on business days are the expected cadence per position
        business_days = count_business_days(metrics.period_start, metrics.period_end)
        expected = business_days * max(1, metrics.mca.unique_mca_count)
        regularity = min(safe_divide(len(payments), expected), 1.0)

        max_gap = 0
        for previous, current in zip(payments, payments[1:]):
            max_gap = max(max_gap, (current.date - previous.date).days)

        amounts = [txn.amount for txn in payments]
        average = statistics.fmean(amounts)
        amount_variation = safe_divide(statistics.pstdev(amounts), average)

        return build_subsection("MCA Payment Consistency", config["weight"], [
            make_metric(
                "Payment Regularity", regularity, config["metrics"]["payment_regularity"],
                format_percent(regularity),
                interpretation="Consistent" if regularity >= 0.85 else "Gaps detected",
            ),
            make_metric(
                "Max Payment Gap", max_gap, config["metrics"]["max_payment_gap"],
                f"{max_gap} days",
            ),
            make_metric(
                "Amount CV", amount_variation, config["metrics"]["amount_variation"],
                format_percent(amount_variation),
            ),
        ])

    def _score_stacking(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["stacking"]
        events = detect_stacking(metrics.ledger)

        flags = [
            red_flag(
                event.event_type,
                {"points": event.points, "severity": event.severity},
                describe_event(event),
                flag_date=event.date,
            )
            for event in events
        ]
        score = 100 - sum(event.points for event in events)
        if not events and metrics.mca.unique_mca_count <= 1:
            score = min(score + config["clean_bonus"], 100)
        score = clamp(score)

        return build_subsection("MCA Stacking", config["weight"], [
            make_metric(
                "Stacking Events", len(events), {"weight": 0.5, "thresholds": []},
                str(len(events)),
                score=score,
                interpretation="None detected" if not events else "Stacking detected",
            ),
            make_metric(
                "Stacking Indicator", metrics.mca.stacking_indicator,
                {"weight": 0.5, "thresholds": []},
                metrics.mca.stacking_indicator,
                score=score,
            ),
        ], red_flags=flags, score=score)

    def _score_velocity(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["velocity"]
        disbursals = _mca_disbursals(metrics)

        annualized = safe_divide(len(disbursals) * 12, metrics.months_analyzed)

        span = metrics.period_end - metrics.period_start
        midpoint = metrics.period_start + timedelta(days=span.days / 2)
        first_half = len([txn for txn in disbursals if txn.date < midpoint])
        second_half = len(disbursals) - first_half

        acceleration = config["metrics"]["acceleration"]
        if second_half < first_half:
            acceleration_score = acceleration["decelerating_points"]
        elif second_half == first_half:
            acceleration_score = acceleration["steady_points"]
        elif second_half <= first_half + 1:
            acceleration_score = acceleration["slight_points"]
        else:
            acceleration_score = acceleration["accelerating_points"]

        funding_ratio = safe_divide(metrics.mca.funding_received, metrics.total_revenue)

        return build_subsection("MCA Velocity", config["weight"], [
            make_metric(
                "Annualized Disbursals", annualized, config["metrics"]["annualized_disbursals"],
                f"{annualized:.1f}/year",
                interpretation="Occasional" if annualized <= 2 else "Frequent",
            ),
            make_metric(
                "Acceleration", second_half - first_half, acceleration,
                "Increasing" if second_half > first_half else "Stable/Decreasing",
                score=acceleration_score,
            ),
            make_metric(
                "Funding/Revenue", funding_ratio, config["metrics"]["funding_to_revenue"],
                format_percent(funding_ratio),
            ),
        ])

    def _score_red_flags(self, metrics: AggregatedMetrics) -> SubsectionScore:
        config = self.config["red_flags"]
        rules = config["rules"]
        payments = _mca_payments(metrics)
        flags = []

        negative = next((txn for txn in payments if txn.running_balance < 0), None)
        if negative:
            flags.append(red_flag(
                "MCA_CAUSED_NEGATIVE", rules["mca_caused_negative"],
                f"MCA payment drove balance negative: {format_currency(negative.amount)}",
                flag_date=negative.date,
            ))

        payment_days = {txn.date for txn in payments}
        nsf_same_day = next(
            (
                txn for txn, classification in metrics.ledger
                if txn.is_debit
                and classification.category == "nsf_fee"
                and txn.date in payment_days
            ),
            None,
        )
        if nsf_same_day:
            flags.append(red_flag(
                "MCA_PAYMENT_NSF", rules["mca_payment_nsf"],
                "NSF on same day as MCA payment - potential returned payment",
                flag_date=nsf_same_day.date,
            ))

        stopped_rule = rules["mca_payments_stopped"]
        if len(payments) > stopped_rule["min_payments"] and metrics.mca.unique_mca_count > 0:
            days_since = (metrics.period_end - payments[-1].date).days
            if days_since > stopped_rule["days_before_end"]:
                flags.append(red_flag(
                    "MCA_PAYMENTS_STOPPED", stopped_rule,
                    f"No MCA payments in last {days_since} days",
                ))

        burden_ratio = safe_divide(metrics.mca.payments_total, metrics.total_revenue)
        if burden_ratio > rules["excessive_mca_burden"]["above"]:
            flags.append(red_flag(
                "EXCESSIVE_MCA_BURDEN", rules["excessive_mca_burden"],
                f"MCA payments are {format_percent(burden_ratio)} of revenue",
            ))

        score = clamp(100 - sum(flag.points_deducted for flag in flags))
        summary = make_metric(
            "Red Flags Found", len(flags), {"weight": 1.0, "thresholds": []},
            str(len(flags)),
            score=score,
            interpretation="None" if not flags else "Review needed",
        )
        return build_subsection(
            "MCA Red Flags", config["weight"], [summary], red_flags=flags, score=score
        )


def calculate_existing_debt(metrics: AggregatedMetrics) -> SectionScore:
    return ExistingDebtScorer().score(metrics)
