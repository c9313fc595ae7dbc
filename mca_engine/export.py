"""
Tabular export of scorecards, monthly metrics and classified transactions.
"""

from typing import List, Tuple

from .categorisation.engine import Classification
from .categorisation.preprocess import Transaction
from .scoring.feature_builder import MonthlyMetrics
from .scoring.framework import OverallScorecard


def scorecard_to_dataframe(scorecard: OverallScorecard):
    """
    Flatten a scorecard to one row per metric.

    Args:
        scorecard: OverallScorecard from the scoring engine

    Returns:
        pandas DataFrame
    """
    import pandas as pd

    rows = []
    for section in scorecard.sections.values():
        for subsection in section.subsections:
            for metric in subsection.metrics:
                rows.append({
                    "Section": section.name,
                    "Section Score": section.score,
                    "Subsection": subsection.name,
                    "Subsection Score": subsection.score,
                    "Subsection Weight": subsection.weight,
                    "Metric": metric.name,
                    "Value": metric.formatted_value,
                    "Metric Score": metric.score,
                    "Metric Weight": metric.weight,
                    "Interpretation": metric.interpretation or "",
                    "Red Flags": "; ".join(flag.flag_type for flag in subsection.red_flags),
                })

    return pd.DataFrame(rows)


def monthly_metrics_to_dataframe(monthly_data: List[MonthlyMetrics]):
    """
    One row per calendar month.

    Returns:
        pandas DataFrame
    """
    import pandas as pd

    rows = []
    for month in monthly_data:
        rows.append({
            "Month": month.month,
            "Revenue": round(month.revenue.total, 2),
            "Expenses": round(month.expenses.total, 2),
            "Net Cash Flow": round(month.cash_flow.net_cash_flow, 2),
            "MCA Payments": round(month.mca.payments_total, 2),
            "MCA Funding": round(month.mca.funding_received, 2),
            "MCA Lenders": ", ".join(month.mca.mca_names),
            "NSF Count": month.nsf.count,
            "NSF Fees": round(month.nsf.total_fees, 2),
            "Negative Days": month.nsf.negative_balance_days,
            "Avg Daily Balance": round(month.cash_flow.avg_daily_balance, 2),
            "Min Balance": round(month.cash_flow.min_balance, 2),
            "Ending Balance": round(month.cash_flow.ending_balance, 2),
        })

    return pd.DataFrame(rows)


def transactions_to_dataframe(ledger: List[Tuple[Transaction, Classification]]):
    """
    Classified transactions with their category, quality and lender.

    Returns:
        pandas DataFrame
    """
    import pandas as pd

    rows = []
    for txn, classification in ledger:
        rows.append({
            "Date": txn.date,
            "Description": txn.description,
            "Amount": txn.amount,
            "Direction": txn.direction,
            "Running Balance": txn.running_balance,
            "Domain": classification.domain,
            "Category": classification.category,
            "Parse Quality": classification.parse_quality,
            "Match Method": classification.match_method,
            "Lender": classification.lender_name or "",
        })

    return pd.DataFrame(rows)
