"""
Scorecard framework shared by the four section scorers.

Holds the scorecard data types, threshold-ladder evaluation, rating and
recommendation rules, and the small numeric and formatting helpers the
section scorers rely on.
"""

import logging
import math
import statistics
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union

from ..config.scoring_config import SCORING_CONFIG, AGGREGATION_CONFIG

logger = logging.getLogger(__name__)


class Recommendation(Enum):
    """Funding recommendation outcomes."""
    APPROVE = "APPROVE"
    APPROVE_WITH_CONDITIONS = "APPROVE_WITH_CONDITIONS"
    MANUAL_REVIEW = "MANUAL_REVIEW"
    DECLINE_SOFT = "DECLINE_SOFT"
    DECLINE = "DECLINE"


class Severity(Enum):
    """Red flag severity levels."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


@dataclass
class MetricValue:
    """A single measured quantity inside a subsection."""
    name: str
    value: Union[float, int, str]
    formatted_value: str
    weight: float
    score: int = 0
    interpretation: Optional[str] = None


@dataclass
class RedFlagDetail:
    """A detected risk condition and the points it cost."""
    flag_type: str
    severity: Severity
    description: str
    points_deducted: int
    date: Optional[date] = None


@dataclass
class SubsectionScore:
    """Scored subsection of a scorecard section."""
    name: str
    score: int
    rating: int
    weight: float
    metrics: List[MetricValue] = field(default_factory=list)
    red_flags: List[RedFlagDetail] = field(default_factory=list)


@dataclass
class SectionScore:
    """One of the four scorecard sections."""
    name: str
    score: int
    rating: int
    weight: float
    subsections: List[SubsectionScore] = field(default_factory=list)


@dataclass
class OverallScorecard:
    """Complete scorecard for an MCA application."""
    overall_score: int
    overall_rating: int
    recommendation: Recommendation
    revenue_quality: SectionScore
    expense_quality: SectionScore
    existing_debt_impact: SectionScore
    cashflow_charges: SectionScore
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    months_analyzed: int = 0

    @property
    def sections(self) -> Dict[str, SectionScore]:
        return {
            "revenue_quality": self.revenue_quality,
            "expense_quality": self.expense_quality,
            "existing_debt_impact": self.existing_debt_impact,
            "cashflow_charges": self.cashflow_charges,
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    # Small epsilon absorbs binary float error on exact halves (84.5 -> 85)
    return int(math.floor(value + 0.5 + 1e-9))


def clamp(value: float, minimum: float = 0, maximum: float = 100) -> float:
    return max(minimum, min(maximum, value))


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    if not denominator:
        return default
    return numerator / denominator


def score_threshold(value: float, thresholds: List[Dict], key: str = "points"):
    """
    Evaluate a threshold ladder.

    Entries are checked in order and the first satisfied entry wins. Bounds
    are "max" (<=), "below" (<), "min" (>=) and "above" (>); an entry with
    no bound matches anything. Falls back to the last entry.

    Args:
        value: The metric value to score
        thresholds: Ladder entries from the scoring configuration
        key: Which entry field to return (points, label, decision)

    Returns:
        The matched entry's value for ``key``
    """
    for threshold in thresholds:
        if "max" in threshold and not value <= threshold["max"]:
            continue
        if "below" in threshold and not value < threshold["below"]:
            continue
        if "min" in threshold and not value >= threshold["min"]:
            continue
        if "above" in threshold and not value > threshold["above"]:
            continue
        return threshold[key]
    return thresholds[-1][key] if thresholds else 0


def score_to_rating(score: float) -> int:
    """Convert a 0-100 score to a 1-5 rating."""
    return score_threshold(score, SCORING_CONFIG["rating_thresholds"])


def generate_recommendation(score: float) -> Recommendation:
    decision = score_threshold(
        score, SCORING_CONFIG["recommendation_thresholds"], key="decision"
    )
    return Recommendation(decision)


def get_rating_label(rating: int) -> str:
    return SCORING_CONFIG["rating_labels"].get(rating, "Unknown")


def get_recommendation_details(recommendation: Recommendation) -> Dict[str, str]:
    """Label, display colour and description for a recommendation."""
    return dict(SCORING_CONFIG["recommendation_details"][recommendation.value])


def calculate_cv(values: Sequence[float]) -> float:
    """Coefficient of variation as a percentage (population std / mean)."""
    if not values:
        return 0.0
    mean = statistics.fmean(values)
    if mean == 0:
        return 0.0
    return statistics.pstdev(values) / mean * 100


def split_halves(values: Sequence[float]):
    """Split at floor(n/2); the second half takes the extra element."""
    midpoint = len(values) // 2
    return list(values[:midpoint]), list(values[midpoint:])


def calculate_trend_direction(values: Sequence[float]) -> str:
    """
    Five-level trend of a series, first half against second half.

    Lower is better, so a falling series reads as IMPROVING. Used for
    NSF counts and other quantities where growth is bad.
    """
    if len(values) < 2:
        return "STABLE"

    first_half, second_half = split_halves(values)
    first_avg = statistics.fmean(first_half)
    second_avg = statistics.fmean(second_half)

    if first_avg == 0:
        return "WORSENING" if second_avg > 0 else "STABLE"

    change_percent = (second_avg - first_avg) / first_avg * 100
    return score_threshold(
        change_percent,
        AGGREGATION_CONFIG["trend_direction_breakpoints"],
        key="label",
    )


def count_business_days(start: date, end: date) -> int:
    """Inclusive count of Monday-Friday days between two dates."""
    count = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            count += 1
        current += timedelta(days=1)
    return count


def format_currency(value: float) -> str:
    """Format as whole US dollars, e.g. -1234.5 -> "-$1,235"."""
    rounded = round_half_up(abs(value))
    sign = "-" if value < 0 and rounded else ""
    return f"{sign}${rounded:,}"


def format_percent(value: float, decimals: int = 1) -> str:
    """Format a fraction as a percentage, e.g. 0.123 -> "12.3%"."""
    return f"{value * 100:.{decimals}f}%"


def format_number(value: float, decimals: int = 0) -> str:
    return f"{value:,.{decimals}f}"


def make_metric(
    name: str,
    value: Union[float, int, str],
    metric_config: Dict,
    formatted_value: str,
    score: Optional[float] = None,
    interpretation: Optional[str] = None,
) -> MetricValue:
    """
    Build a MetricValue, scoring ``value`` against the configured ladder
    unless an explicit score is supplied.
    """
    if score is None:
        score = score_threshold(value, metric_config["thresholds"])
    return MetricValue(
        name=name,
        value=value,
        formatted_value=formatted_value,
        weight=metric_config["weight"],
        score=round_half_up(clamp(score)),
        interpretation=interpretation,
    )


def build_subsection(
    name: str,
    weight: float,
    metrics: List[MetricValue],
    red_flags: Optional[List[RedFlagDetail]] = None,
    score: Optional[float] = None,
) -> SubsectionScore:
    """
    Combine metric scores by weight into a subsection score.

    An explicit ``score`` (used by red-flag subsections that start at 100
    and deduct) overrides the weighted combination.
    """
    if score is None:
        total_weight = sum(m.weight for m in metrics)
        weighted = sum(m.score * m.weight for m in metrics)
        score = safe_divide(weighted, total_weight, SCORING_CONFIG["neutral_score"])
    final_score = round_half_up(clamp(score))
    return SubsectionScore(
        name=name,
        score=final_score,
        rating=score_to_rating(final_score),
        weight=weight,
        metrics=metrics,
        red_flags=red_flags or [],
    )


def build_section(
    name: str,
    subsections: List[SubsectionScore],
    weight: Optional[float] = None,
) -> SectionScore:
    if weight is None:
        weight = SCORING_CONFIG["section_weight"]
    total_weight = sum(s.weight for s in subsections)
    weighted = sum(s.score * s.weight for s in subsections)
    score = round_half_up(
        clamp(safe_divide(weighted, total_weight, SCORING_CONFIG["neutral_score"]))
    )
    return SectionScore(
        name=name,
        score=score,
        rating=score_to_rating(score),
        weight=weight,
        subsections=subsections,
    )


def neutral_subsection(name: str, weight: float) -> SubsectionScore:
    score = SCORING_CONFIG["neutral_score"]
    return SubsectionScore(
        name=name,
        score=score,
        rating=score_to_rating(score),
        weight=weight,
    )


def safe_subsection(
    name: str,
    weight: float,
    builder: Callable[..., SubsectionScore],
    *args,
) -> SubsectionScore:
    """
    Run a subsection builder; a computation failure yields a neutral
    score so the remaining subsections are still produced.
    """
    try:
        return builder(*args)
    except (ArithmeticError, ValueError, TypeError) as exc:
        logger.warning(
            "Subsection %s could not be scored (%s); using neutral score",
            name, exc
        )
        return neutral_subsection(name, weight)


def red_flag(
    flag_type: str,
    rule: Dict,
    description: str,
    points: Optional[int] = None,
    flag_date: Optional[date] = None,
) -> RedFlagDetail:
    return RedFlagDetail(
        flag_type=flag_type,
        severity=Severity(rule["severity"]),
        description=description,
        points_deducted=rule["points"] if points is None else points,
        date=flag_date,
    )
