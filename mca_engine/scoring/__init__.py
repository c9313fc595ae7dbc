"""
Scoring Module for MCA Underwriting.

Contains monthly aggregation, stacking detection, the four scorecard
sections, the overall scorecard engine and pre-render validation.
"""

# Import from feature_builder (monthly aggregator)
from .feature_builder import (
    RevenueBreakdown,
    ExpenseBreakdown,
    LenderDetail,
    MCAMetrics,
    NSFMetrics,
    CashFlowMetrics,
    MonthlyMetrics,
    AxisScores,
    AggregatedMetrics,
    MetricsCalculator,
    calculate_aggregated_metrics,
)

# Import from framework
from .framework import (
    Recommendation,
    Severity,
    MetricValue,
    RedFlagDetail,
    SubsectionScore,
    SectionScore,
    OverallScorecard,
    score_to_rating,
    generate_recommendation,
)

from .stacking import (
    StackingEvent,
    detect_stacking,
    detect_stacking_alerts,
)

# Import from scoring_engine
from .scoring_engine import (
    ScoringEngine,
    calculate_overall_scorecard,
    get_section_summary,
    get_overall_summary,
    get_subsection_details,
)

from .validation import (
    ValidationResult,
    validate_before_render,
)

__all__ = [
    # Aggregator exports
    "RevenueBreakdown",
    "ExpenseBreakdown",
    "LenderDetail",
    "MCAMetrics",
    "NSFMetrics",
    "CashFlowMetrics",
    "MonthlyMetrics",
    "AxisScores",
    "AggregatedMetrics",
    "MetricsCalculator",
    "calculate_aggregated_metrics",
    # Framework exports
    "Recommendation",
    "Severity",
    "MetricValue",
    "RedFlagDetail",
    "SubsectionScore",
    "SectionScore",
    "OverallScorecard",
    "score_to_rating",
    "generate_recommendation",
    # Stacking exports
    "StackingEvent",
    "detect_stacking",
    "detect_stacking_alerts",
    # Scoring engine exports
    "ScoringEngine",
    "calculate_overall_scorecard",
    "get_section_summary",
    "get_overall_summary",
    "get_subsection_details",
    # Validation exports
    "ValidationResult",
    "validate_before_render",
]
