"""
MCA Scorecard Engine.
Combines the four equally weighted sections into an overall score, rating
and funding recommendation, and shapes the scorecard for display.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Union

from ..categorisation.engine import build_ledger
from ..categorisation.preprocess import Transaction
from ..config.scoring_config import SCORING_CONFIG
from .cashflow_charges import CashflowChargesScorer
from .existing_debt import ExistingDebtScorer
from .expense_quality import ExpenseQualityScorer
from .feature_builder import AggregatedMetrics
from .framework import (
    OverallScorecard,
    SectionScore,
    Severity,
    generate_recommendation,
    get_rating_label,
    get_recommendation_details,
    round_half_up,
    score_to_rating,
)
from .revenue_quality import RevenueQualityScorer

logger = logging.getLogger(__name__)


class ScoringEngine:
    """MCA underwriting scorecard engine."""

    def __init__(self):
        """Initialize the engine with its section scorers."""
        self.scoring_config = SCORING_CONFIG
        self.revenue_scorer = RevenueQualityScorer()
        self.expense_scorer = ExpenseQualityScorer()
        self.debt_scorer = ExistingDebtScorer()
        self.cashflow_scorer = CashflowChargesScorer()

    def score(
        self,
        metrics: AggregatedMetrics,
        transactions: Optional[Iterable[Union[Transaction, Dict]]] = None
    ) -> OverallScorecard:
        """
        Score aggregated metrics.

        Args:
            metrics: Output of the monthly aggregator
            transactions: Optional raw transactions for the red-flag and
                stacking checks; defaults to the ledger carried on metrics

        Returns:
            OverallScorecard with all four sections
        """
        if transactions is not None:
            metrics = replace(metrics, ledger=build_ledger(transactions))

        revenue_quality = self.revenue_scorer.score(metrics)
        expense_quality = self.expense_scorer.score(metrics)
        existing_debt_impact = self.debt_scorer.score(metrics)
        cashflow_charges = self.cashflow_scorer.score(metrics)

        sections = [revenue_quality, expense_quality, existing_debt_impact, cashflow_charges]
        overall_score = round_half_up(
            sum(section.score * section.weight for section in sections)
        )
        recommendation = generate_recommendation(overall_score)

        logger.debug(
            "Scorecard: overall=%d revenue=%d expense=%d debt=%d cashflow=%d -> %s",
            overall_score, revenue_quality.score, expense_quality.score,
            existing_debt_impact.score, cashflow_charges.score, recommendation.value
        )

        return OverallScorecard(
            overall_score=overall_score,
            overall_rating=score_to_rating(overall_score),
            recommendation=recommendation,
            revenue_quality=revenue_quality,
            expense_quality=expense_quality,
            existing_debt_impact=existing_debt_impact,
            cashflow_charges=cashflow_charges,
            period_start=metrics.period_start,
            period_end=metrics.period_end,
            months_analyzed=metrics.months_analyzed,
        )


def calculate_overall_scorecard(
    metrics: AggregatedMetrics,
    transactions: Optional[Iterable[Union[Transaction, Dict]]] = None
) -> OverallScorecard:
    return ScoringEngine().score(metrics, transactions)


def _format_weight(weight: float) -> str:
    return f"{weight * 100:.0f}%"


def get_section_summary(section: SectionScore) -> Dict:
    """
    Headline view of a section: score, rating, the lead metric of the
    first three subsections, and HIGH/CRITICAL red flags.
    """
    critical_issues: List[str] = []
    red_flag_count = 0
    for subsection in section.subsections:
        for flag in subsection.red_flags:
            red_flag_count += 1
            if flag.severity in (Severity.HIGH, Severity.CRITICAL):
                critical_issues.append(flag.description)

    top_metrics = [
        {
            "name": f"{subsection.name}: {subsection.metrics[0].name}",
            "value": subsection.metrics[0].formatted_value,
            "interpretation": subsection.metrics[0].interpretation,
        }
        for subsection in section.subsections[:3]
        if subsection.metrics
    ]

    return {
        "name": section.name,
        "score": section.score,
        "rating": section.rating,
        "rating_label": get_rating_label(section.rating),
        "weight": _format_weight(section.weight),
        "top_metrics": top_metrics,
        "red_flags_count": red_flag_count,
        "critical_issues": critical_issues,
    }


def get_overall_summary(scorecard: OverallScorecard) -> Dict:
    """Dashboard summary of a scorecard."""
    details = get_recommendation_details(scorecard.recommendation)
    sections = [get_section_summary(section) for section in scorecard.sections.values()]

    period_range = ""
    if scorecard.period_start and scorecard.period_end:
        period_range = (
            f"{scorecard.period_start.strftime('%b %Y')} - "
            f"{scorecard.period_end.strftime('%b %Y')}"
        )

    return {
        "score": scorecard.overall_score,
        "rating": scorecard.overall_rating,
        "rating_label": get_rating_label(scorecard.overall_rating),
        "recommendation": scorecard.recommendation.value.replace("_", " "),
        "recommendation_color": details["color"],
        "recommendation_description": details["description"],
        "sections": sections,
        "total_red_flags": sum(s["red_flags_count"] for s in sections),
        "critical_issues": [issue for s in sections for issue in s["critical_issues"]],
        "months_analyzed": scorecard.months_analyzed,
        "period_range": period_range,
    }


def get_subsection_details(section: SectionScore) -> List[Dict]:
    """Drill-down rows for every subsection of a section."""
    return [
        {
            "name": subsection.name,
            "score": subsection.score,
            "rating": subsection.rating,
            "rating_label": get_rating_label(subsection.rating),
            "weight": _format_weight(subsection.weight),
            "metrics": [
                {
                    "name": metric.name,
                    "value": metric.value,
                    "formatted_value": metric.formatted_value,
                    "weight": _format_weight(metric.weight),
                    "score": metric.score,
                    "interpretation": metric.interpretation,
                }
                for metric in subsection.metrics
            ],
            "red_flags": [
                {
                    "type": flag.flag_type,
                    "severity": flag.severity.value,
                    "description": flag.description,
                    "points_deducted": flag.points_deducted,
                    "date": flag.date,
                }
                for flag in subsection.red_flags
            ],
        }
        for subsection in section.subsections
    ]
