"""
Pre-render consistency checks for aggregated metrics and scorecards.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import List, Optional

from .feature_builder import AggregatedMetrics
from .framework import OverallScorecard, format_currency, safe_divide

logger = logging.getLogger(__name__)

# Breakdown sums may differ from totals by float accumulation only
SUM_TOLERANCE = 1.0
UNCATEGORIZED_EXPENSE_WARNING = 0.25
UNASSIGNED_INCOME_WARNING = 0.20


@dataclass
class ValidationResult:
    """Non-fatal problems found before display."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _check_score(name: str, score: int, errors: List[str]) -> None:
    if score < 0 or score > 100:
        errors.append(f"{name} score out of bounds: {score}")


def validate_before_render(
    metrics: AggregatedMetrics,
    scorecard: Optional[OverallScorecard] = None
) -> ValidationResult:
    """
    Check breakdown sums, score bounds and cross-field sanity.

    Problems are reported, never raised; the caller decides what to show.
    """
    result = ValidationResult()
    errors, warnings = result.errors, result.warnings

    revenue_sum = metrics.revenue.bucket_sum()
    if abs(revenue_sum - metrics.revenue.total) > SUM_TOLERANCE:
        errors.append(
            f"Revenue breakdown ({format_currency(revenue_sum)}) doesn't sum to total "
            f"({format_currency(metrics.revenue.total)})"
        )

    # MCA payments are part of total expenses but live outside the buckets
    expense_sum = metrics.expenses.bucket_sum() + metrics.mca.payments_total
    if abs(expense_sum - metrics.expenses.total) > SUM_TOLERANCE:
        warnings.append(
            f"Expense breakdown ({format_currency(expense_sum)}) differs from total "
            f"({format_currency(metrics.expenses.total)})"
        )

    for axis in fields(metrics.scores):
        _check_score(axis.name, getattr(metrics.scores, axis.name), errors)

    if scorecard is not None:
        _check_score("overall", scorecard.overall_score, errors)
        for section in scorecard.sections.values():
            _check_score(section.name, section.score, errors)
            for subsection in section.subsections:
                _check_score(subsection.name, subsection.score, errors)

    uncategorized = metrics.expenses.other_expenses + metrics.expenses.unassigned_expenses
    uncategorized_share = safe_divide(uncategorized, metrics.expenses.total)
    if uncategorized_share > UNCATEGORIZED_EXPENSE_WARNING:
        warnings.append(f"{uncategorized_share * 100:.0f}% of expenses are uncategorized")

    unassigned_share = safe_divide(metrics.revenue.unassigned_income, metrics.revenue.total)
    if unassigned_share > UNASSIGNED_INCOME_WARNING:
        warnings.append(f"{unassigned_share * 100:.0f}% of income is unassigned")

    if metrics.total_revenue < 0:
        errors.append("Total revenue is negative")
    if metrics.total_expenses < 0:
        errors.append("Total expenses is negative")

    if metrics.nsf.count > 0 and metrics.nsf.total_fees == 0:
        warnings.append("NSF count > 0 but no fees recorded")

    if metrics.mca.payment_count > 0 and metrics.mca.payments_total == 0:
        errors.append("MCA payment count > 0 but total payments is 0")

    if errors:
        logger.warning("Validation found %d error(s): %s", len(errors), "; ".join(errors))

    return result
