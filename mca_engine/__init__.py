"""
MCA Engine - Merchant Cash Advance Underwriting System.

A modular system for classifying small-business bank transactions and
scoring merchant cash-advance applications.

Main Components:
    - patterns: Transaction classification patterns and lender registry
    - config: Category taxonomy and scoring configuration
    - categorisation: Transaction classifier
    - scoring: Monthly aggregation, stacking detection and the scorecard
    - export: pandas DataFrame export
"""

from typing import Dict, Iterable, Optional, Union

# Core categorisation components
from .categorisation.engine import (
    TransactionClassifier,
    Classification,
    build_ledger,
)
from .categorisation.preprocess import (
    Transaction,
    InvalidTransactionError,
)

# Scoring components
from .scoring.feature_builder import (
    MetricsCalculator,
    AggregatedMetrics,
    MonthlyMetrics,
    calculate_aggregated_metrics,
)

from .scoring.framework import (
    OverallScorecard,
    Recommendation,
    Severity,
)

from .scoring.scoring_engine import (
    ScoringEngine,
    calculate_overall_scorecard,
    get_overall_summary,
    get_subsection_details,
)

from .scoring.stacking import (
    detect_stacking,
    detect_stacking_alerts,
)

from .scoring.validation import (
    ValidationResult,
    validate_before_render,
)

# Configuration
from .config.scoring_config import (
    SCORING_CONFIG,
    STACKING_CONFIG,
)

from .export import (
    scorecard_to_dataframe,
    monthly_metrics_to_dataframe,
    transactions_to_dataframe,
)


__version__ = "1.0.0"
__all__ = [
    # Categorisation
    "TransactionClassifier",
    "Classification",
    "Transaction",
    "InvalidTransactionError",
    "build_ledger",
    # Scoring
    "MetricsCalculator",
    "AggregatedMetrics",
    "MonthlyMetrics",
    "calculate_aggregated_metrics",
    "OverallScorecard",
    "Recommendation",
    "Severity",
    "ScoringEngine",
    "calculate_overall_scorecard",
    "get_overall_summary",
    "get_subsection_details",
    "detect_stacking",
    "detect_stacking_alerts",
    "ValidationResult",
    "validate_before_render",
    # Configuration
    "SCORING_CONFIG",
    "STACKING_CONFIG",
    # Export
    "scorecard_to_dataframe",
    "monthly_metrics_to_dataframe",
    "transactions_to_dataframe",
    # Main function
    "run_mca_scoring",
]


def run_mca_scoring(
    transactions: Iterable[Union[Transaction, Dict]],
) -> Optional[Dict]:
    """
    Main entry point for MCA underwriting.

    This function orchestrates the complete pipeline:
    1. Prepare and classify all transactions
    2. Aggregate monthly and period metrics
    3. Score the four scorecard sections
    4. Detect stacking and validate the results

    Args:
        transactions: Transactions or plain dicts with keys:
            - date: Transaction date (ISO string or date)
            - description: Statement description
            - amount: Amount (signed when direction is absent, negative=debit)
            - direction / type: (Optional) CREDIT or DEBIT
            - running_balance: (Optional) Balance after the transaction
            - source_category: (Optional) Upstream tag such as
              "Income - MCA Disbursal"

    Returns:
        Dictionary containing:
            - recommendation: Recommendation value, e.g. "APPROVE"
            - score: Overall score (0-100)
            - rating: Overall rating (1-5)
            - summary: Dashboard summary from get_overall_summary
            - sections: Subsection drill-down per section
            - metrics: Period totals, MCA, NSF and axis scores
            - monthly: One dict per calendar month
            - stacking_alerts: Stacking alerts for display
            - validation: Validation errors and warnings
        or None when no transactions survive filtering.

    Example:
        >>> result = run_mca_scoring([
        ...     {"date": "2025-01-02", "description": "SQUARE DEPOSIT",
        ...      "amount": 1500.0, "direction": "CREDIT", "running_balance": 11500.0},
        ... ])
        >>> result["recommendation"] in {r.value for r in Recommendation}
        True
    """
    # Step 1: Prepare and classify once
    ledger = build_ledger(transactions)

    # Step 2: Aggregate
    metrics = MetricsCalculator().calculate_from_ledger(ledger)
    if metrics is None:
        return None

    # Step 3: Score
    scorecard = ScoringEngine().score(metrics)

    # Step 4: Stacking and validation
    alerts = detect_stacking_alerts(metrics.ledger)
    validation = validate_before_render(metrics, scorecard)

    result = {
        "recommendation": scorecard.recommendation.value,
        "score": scorecard.overall_score,
        "rating": scorecard.overall_rating,
        "summary": get_overall_summary(scorecard),
        "sections": {
            key: get_subsection_details(section)
            for key, section in scorecard.sections.items()
        },
        "metrics": {
            "period_start": metrics.period_start,
            "period_end": metrics.period_end,
            "months_analyzed": metrics.months_analyzed,
            "total_days_analyzed": metrics.total_days_analyzed,
            "total_revenue": metrics.total_revenue,
            "total_expenses": metrics.total_expenses,
            "net_cash_flow": metrics.net_cash_flow,
            "avg_monthly_revenue": metrics.avg_monthly_revenue,
            "avg_monthly_expenses": metrics.avg_monthly_expenses,
            "mca": {
                "funding_received": metrics.mca.funding_received,
                "payments_total": metrics.mca.payments_total,
                "payment_count": metrics.mca.payment_count,
                "monthly_repayment": metrics.mca.monthly_repayment,
                "payment_to_revenue_ratio": metrics.mca.payment_to_revenue_ratio,
                "unique_mca_count": metrics.mca.unique_mca_count,
                "mca_names": list(metrics.mca.mca_names),
                "stacking_indicator": metrics.mca.stacking_indicator,
            },
            "nsf": {
                "count": metrics.nsf.count,
                "total_fees": metrics.nsf.total_fees,
                "negative_balance_days": metrics.nsf.negative_balance_days,
                "lowest_balance": metrics.nsf.lowest_balance,
                "trend": metrics.nsf.trend,
            },
            "trends": dict(metrics.trends),
            "scores": {
                "revenue": metrics.scores.revenue,
                "expenses": metrics.scores.expenses,
                "mca": metrics.scores.mca,
                "nsf": metrics.scores.nsf,
                "cash_flow": metrics.scores.cash_flow,
                "overall": metrics.scores.overall,
            },
        },
        "monthly": [
            {
                "month": month.month,
                "revenue": month.revenue.total,
                "expenses": month.expenses.total,
                "net_cash_flow": month.cash_flow.net_cash_flow,
                "mca_payments": month.mca.payments_total,
                "nsf_count": month.nsf.count,
                "ending_balance": month.cash_flow.ending_balance,
            }
            for month in metrics.monthly_data
        ],
        "stacking_alerts": alerts,
        "validation": {
            "is_valid": validation.is_valid,
            "errors": list(validation.errors),
            "warnings": list(validation.warnings),
        },
    }

    return result
