"""
Monthly Metrics Aggregator for MCA Underwriting.
Calculates revenue, expense, MCA, NSF and cash-flow metrics per calendar
month and across the whole statement period.
"""

from typing import Dict, Iterable, List, Optional, Tuple, Union
from dataclasses import dataclass, field, fields
from datetime import date
from collections import defaultdict
import statistics
import logging

from ..categorisation.engine import Classification, TransactionClassifier, build_ledger
from ..categorisation.preprocess import Transaction
from ..categorisation.lender_registry import extract_fallback_lender
from ..config.category_config import (
    REVENUE_BUCKETS,
    DEFAULT_REVENUE_BUCKET,
    EXPENSE_BUCKETS,
    DEFAULT_EXPENSE_BUCKET,
)
from ..config.scoring_config import AGGREGATION_CONFIG
from .framework import clamp, round_half_up, safe_divide, score_threshold, split_halves

# Initialize logger for this module
logger = logging.getLogger(__name__)

Ledger = List[Tuple[Transaction, Classification]]


@dataclass
class RevenueBreakdown:
    """Credits split into revenue buckets."""
    regular_revenue: float = 0.0
    mca_funding: float = 0.0
    loan_proceeds: float = 0.0
    wire_transfers: float = 0.0
    credit_card_sales: float = 0.0
    ach_deposits: float = 0.0
    check_deposits: float = 0.0
    refunds_received: float = 0.0
    other_revenue: float = 0.0
    zelle_income: float = 0.0
    state_payments: float = 0.0
    counseling_revenue: float = 0.0
    unassigned_income: float = 0.0
    total: float = 0.0
    transaction_count: int = 0

    def bucket_sum(self) -> float:
        return sum(getattr(self, name) for name in _bucket_names(self))


@dataclass
class ExpenseBreakdown:
    """Debits split into expense buckets (MCA payments tracked separately)."""
    recurring: float = 0.0
    payroll: float = 0.0
    vendor_payments: float = 0.0
    owner_draws: float = 0.0
    cogs: float = 0.0
    marketing: float = 0.0
    professional_services: float = 0.0
    insurance: float = 0.0
    taxes: float = 0.0
    bank_fees: float = 0.0
    other_expenses: float = 0.0
    settlement: float = 0.0
    loan_payment: float = 0.0
    software_subscriptions: float = 0.0
    travel_entertainment: float = 0.0
    utilities: float = 0.0
    rent: float = 0.0
    personal_expenses: float = 0.0
    business_expenses: float = 0.0
    zelle_payments: float = 0.0
    credit_card_payments: float = 0.0
    atm_withdrawals: float = 0.0
    nsf_fees: float = 0.0
    unassigned_expenses: float = 0.0
    expense_reversals: float = 0.0
    total: float = 0.0
    transaction_count: int = 0

    def bucket_sum(self) -> float:
        return sum(getattr(self, name) for name in _bucket_names(self))


def _bucket_names(breakdown) -> List[str]:
    return [f.name for f in fields(breakdown) if f.name not in ("total", "transaction_count")]


def _add_breakdowns(target, source) -> None:
    for f in fields(target):
        setattr(target, f.name, getattr(target, f.name) + getattr(source, f.name))


@dataclass
class LenderDetail:
    """Per-lender MCA activity."""
    name: str
    payments_total: float = 0.0
    payment_count: int = 0
    daily_payment_avg: float = 0.0
    funding_received: float = 0.0


@dataclass
class MCAMetrics:
    """MCA funding and repayment metrics."""
    funding_received: float = 0.0
    payments_total: float = 0.0
    payment_count: int = 0
    daily_payment_avg: float = 0.0
    unique_mca_count: int = 0
    mca_names: List[str] = field(default_factory=list)
    mca_details: List[LenderDetail] = field(default_factory=list)
    # Period-level only
    monthly_repayment: float = 0.0
    payment_to_revenue_ratio: float = 0.0
    stacking_indicator: str = "NONE"


@dataclass
class NSFMetrics:
    """NSF / overdraft and negative balance metrics."""
    count: int = 0
    total_fees: float = 0.0
    avg_fee: float = 0.0
    negative_balance_days: int = 0
    lowest_balance: float = 0.0
    overdraft_events: int = 0
    # Period-level only
    frequency: float = 0.0
    trend: str = "STABLE"


@dataclass
class CashFlowMetrics:
    """Net flow and balance metrics."""
    net_cash_flow: float = 0.0
    avg_daily_balance: float = 0.0
    min_balance: float = 0.0
    max_balance: float = 0.0
    ending_balance: float = 0.0
    days_analyzed: int = 0
    # Period-level only
    volatility: float = 0.0
    trend: str = "STABLE"


@dataclass
class MonthlyMetrics:
    """All metrics for one calendar month."""
    month: str
    revenue: RevenueBreakdown = field(default_factory=RevenueBreakdown)
    expenses: ExpenseBreakdown = field(default_factory=ExpenseBreakdown)
    mca: MCAMetrics = field(default_factory=MCAMetrics)
    nsf: NSFMetrics = field(default_factory=NSFMetrics)
    cash_flow: CashFlowMetrics = field(default_factory=CashFlowMetrics)


@dataclass
class AxisScores:
    """Dashboard axis scores (0-100)."""
    revenue: int = 0
    expenses: int = 0
    mca: int = 0
    nsf: int = 0
    cash_flow: int = 0
    overall: int = 0


@dataclass
class AggregatedMetrics:
    """Metrics across the whole statement period."""
    period_start: date
    period_end: date
    months_analyzed: int
    total_days_analyzed: int
    total_revenue: float
    total_expenses: float
    net_cash_flow: float
    avg_monthly_revenue: float
    avg_monthly_expenses: float
    avg_monthly_net_cash_flow: float
    avg_daily_revenue: float
    avg_daily_expenses: float
    revenue: RevenueBreakdown
    expenses: ExpenseBreakdown
    mca: MCAMetrics
    nsf: NSFMetrics
    cash_flow: CashFlowMetrics
    monthly_data: List[MonthlyMetrics] = field(default_factory=list)
    trends: Dict[str, str] = field(default_factory=dict)
    scores: AxisScores = field(default_factory=AxisScores)
    # Prepared, classified transactions in chronological order
    ledger: Ledger = field(default_factory=list, repr=False)


def calculate_trend(values: List[float]) -> str:
    """
    First-half vs second-half average trend.

    Returns:
        'IMPROVING' above +10% change, 'DECLINING' below -10%, else 'STABLE'
    """
    if len(values) < 2:
        return "STABLE"

    first_half, second_half = split_halves(values)
    avg_first = statistics.fmean(first_half)
    avg_second = statistics.fmean(second_half)
    change = (avg_second - avg_first) / (avg_first or 1)

    if change > AGGREGATION_CONFIG["trend_improving_change"]:
        return "IMPROVING"
    if change < AGGREGATION_CONFIG["trend_declining_change"]:
        return "DECLINING"
    return "STABLE"


def invert_trend(trend: str) -> str:
    """For quantities where growth is bad (NSF counts, expenses)."""
    if trend == "IMPROVING":
        return "DECLINING"
    if trend == "DECLINING":
        return "IMPROVING"
    return "STABLE"


def get_stacking_indicator(unique_mca_count: int) -> str:
    return score_threshold(
        unique_mca_count, AGGREGATION_CONFIG["stacking_indicator"], key="label"
    )


class MetricsCalculator:
    """Aggregates classified transactions into monthly and period metrics."""

    def __init__(self, classifier: Optional[TransactionClassifier] = None):
        self.classifier = classifier or TransactionClassifier()

    def calculate(
        self,
        transactions: Iterable[Union[Transaction, Dict]]
    ) -> Optional[AggregatedMetrics]:
        """
        Calculate aggregated metrics from raw transactions.

        Returns:
            AggregatedMetrics, or None when no transactions survive filtering
        """
        ledger = build_ledger(transactions, self.classifier)
        return self.calculate_from_ledger(ledger)

    def calculate_from_ledger(self, ledger: Ledger) -> Optional[AggregatedMetrics]:
        if not ledger:
            logger.debug("No transactions after filtering; nothing to aggregate")
            return None

        monthly_groups: Dict[str, Ledger] = defaultdict(list)
        for txn, classification in ledger:
            monthly_groups[txn.month_key].append((txn, classification))

        monthly_data = [
            self.calculate_monthly_metrics(monthly_groups[key], key)
            for key in sorted(monthly_groups)
        ]
        logger.debug("Aggregated %d transactions over %d months", len(ledger), len(monthly_data))

        metrics = self._aggregate_months(monthly_data, ledger)
        metrics.scores = calculate_axis_scores(metrics)
        return metrics

    def calculate_monthly_metrics(self, month_ledger: Ledger, month_key: str) -> MonthlyMetrics:
        """Accumulate one month of classified transactions."""
        monthly = MonthlyMetrics(month=month_key)
        revenue, expenses = monthly.revenue, monthly.expenses
        mca, nsf, cash_flow = monthly.mca, monthly.nsf, monthly.cash_flow

        lenders: Dict[str, LenderDetail] = {}
        negative_days = set()
        daily_balances: Dict[date, float] = {}
        balances = []

        for txn, classification in month_ledger:
            # First balance seen on each day
            daily_balances.setdefault(txn.date, txn.running_balance)
            balances.append(txn.running_balance)
            if txn.running_balance < 0:
                negative_days.add(txn.date)

            category = classification.category

            if txn.is_credit:
                revenue.transaction_count += 1
                revenue.total += txn.amount
                bucket = REVENUE_BUCKETS.get(category, DEFAULT_REVENUE_BUCKET)
                setattr(revenue, bucket, getattr(revenue, bucket) + txn.amount)

                if category == "mca_funding":
                    mca.funding_received += txn.amount
                    if classification.lender_name:
                        detail = lenders.setdefault(
                            classification.lender_name, LenderDetail(classification.lender_name)
                        )
                        detail.funding_received += txn.amount
                continue

            expenses.transaction_count += 1
            expenses.total += txn.amount

            if category == "mca_payment":
                mca.payments_total += txn.amount
                mca.payment_count += 1
                lender_name = classification.lender_name or extract_fallback_lender(txn.description)
                if lender_name:
                    detail = lenders.setdefault(lender_name, LenderDetail(lender_name))
                    detail.payments_total += txn.amount
                    detail.payment_count += 1
                continue

            bucket = EXPENSE_BUCKETS.get(category, DEFAULT_EXPENSE_BUCKET)
            setattr(expenses, bucket, getattr(expenses, bucket) + txn.amount)

            if category == "nsf_fee":
                nsf.count += 1
                nsf.total_fees += txn.amount

        days_seen = len(daily_balances)

        mca.unique_mca_count = len(lenders)
        mca.mca_names = list(lenders)
        mca.daily_payment_avg = safe_divide(mca.payments_total, days_seen) if mca.payment_count else 0.0
        for detail in lenders.values():
            detail.daily_payment_avg = (
                safe_divide(detail.payments_total, days_seen) if detail.payment_count else 0.0
            )
        mca.mca_details = sorted(lenders.values(), key=lambda d: d.payments_total, reverse=True)

        nsf.negative_balance_days = len(negative_days)
        nsf.avg_fee = safe_divide(nsf.total_fees, nsf.count)
        nsf.overdraft_events = nsf.count
        nsf.lowest_balance = min(balances) if balances else 0.0

        day_openings = list(daily_balances.values())
        cash_flow.net_cash_flow = revenue.total - expenses.total
        cash_flow.days_analyzed = days_seen
        cash_flow.avg_daily_balance = statistics.fmean(day_openings) if day_openings else 0.0
        cash_flow.ending_balance = day_openings[-1] if day_openings else 0.0
        cash_flow.min_balance = min(balances) if balances else 0.0
        cash_flow.max_balance = max(balances) if balances else 0.0

        return monthly

    def _aggregate_months(self, monthly_data: List[MonthlyMetrics], ledger: Ledger) -> AggregatedMetrics:
        revenue = RevenueBreakdown()
        expenses = ExpenseBreakdown()
        lenders: Dict[str, LenderDetail] = {}
        lender_names: List[str] = []

        nsf_count = 0
        nsf_fees = 0.0
        negative_days = 0
        mca_payments = 0.0
        mca_payment_count = 0
        mca_funding = 0.0
        total_days = 0

        for month in monthly_data:
            _add_breakdowns(revenue, month.revenue)
            _add_breakdowns(expenses, month.expenses)

            mca_payments += month.mca.payments_total
            mca_payment_count += month.mca.payment_count
            mca_funding += month.mca.funding_received
            for name in month.mca.mca_names:
                if name not in lender_names:
                    lender_names.append(name)
            for detail in month.mca.mca_details:
                combined = lenders.setdefault(detail.name, LenderDetail(detail.name))
                combined.payments_total += detail.payments_total
                combined.payment_count += detail.payment_count
                combined.funding_received += detail.funding_received

            nsf_count += month.nsf.count
            nsf_fees += month.nsf.total_fees
            negative_days += month.nsf.negative_balance_days
            total_days += month.cash_flow.days_analyzed

        months = len(monthly_data)
        balances = [txn.running_balance for txn, _ in ledger]
        min_balance = min(balances)
        max_balance = max(balances)

        for detail in lenders.values():
            detail.daily_payment_avg = (
                safe_divide(detail.payments_total, total_days) if detail.payment_count else 0.0
            )

        unique_mca_count = max(len(lender_names), 1 if mca_payment_count > 0 else 0)

        monthly_revenue = [m.revenue.total for m in monthly_data]
        monthly_expenses = [m.expenses.total for m in monthly_data]
        monthly_net = [m.cash_flow.net_cash_flow for m in monthly_data]
        monthly_nsf = [m.nsf.count for m in monthly_data]
        monthly_mca = [m.mca.payments_total for m in monthly_data]

        trends = {
            "revenue": calculate_trend(monthly_revenue),
            "expenses": invert_trend(calculate_trend(monthly_expenses)),
            "cash_flow": calculate_trend(monthly_net),
            "nsf": invert_trend(calculate_trend(monthly_nsf)),
            "mca": invert_trend(calculate_trend(monthly_mca)),
        }

        mca = MCAMetrics(
            funding_received=mca_funding,
            payments_total=mca_payments,
            payment_count=mca_payment_count,
            daily_payment_avg=safe_divide(mca_payments, total_days),
            unique_mca_count=unique_mca_count,
            mca_names=lender_names,
            mca_details=sorted(lenders.values(), key=lambda d: d.payments_total, reverse=True),
            monthly_repayment=safe_divide(mca_payments, months),
            payment_to_revenue_ratio=safe_divide(mca_payments, revenue.total),
            stacking_indicator=get_stacking_indicator(unique_mca_count),
        )

        nsf = NSFMetrics(
            count=nsf_count,
            total_fees=nsf_fees,
            avg_fee=safe_divide(nsf_fees, nsf_count),
            negative_balance_days=negative_days,
            lowest_balance=min_balance,
            overdraft_events=nsf_count,
            frequency=safe_divide(nsf_count, months),
            trend=trends["nsf"],
        )

        cash_flow = CashFlowMetrics(
            net_cash_flow=revenue.total - expenses.total,
            avg_daily_balance=statistics.fmean(balances),
            min_balance=min_balance,
            max_balance=max_balance,
            ending_balance=ledger[-1][0].running_balance,
            days_analyzed=total_days,
            volatility=max_balance - min_balance,
            trend=trends["cash_flow"],
        )

        return AggregatedMetrics(
            period_start=ledger[0][0].date,
            period_end=ledger[-1][0].date,
            months_analyzed=months,
            total_days_analyzed=total_days,
            total_revenue=revenue.total,
            total_expenses=expenses.total,
            net_cash_flow=revenue.total - expenses.total,
            avg_monthly_revenue=safe_divide(revenue.total, months),
            avg_monthly_expenses=safe_divide(expenses.total, months),
            avg_monthly_net_cash_flow=safe_divide(revenue.total - expenses.total, months),
            avg_daily_revenue=safe_divide(revenue.total, total_days),
            avg_daily_expenses=safe_divide(expenses.total, total_days),
            revenue=revenue,
            expenses=expenses,
            mca=mca,
            nsf=nsf,
            cash_flow=cash_flow,
            monthly_data=monthly_data,
            trends=trends,
            ledger=ledger,
        )


def calculate_axis_scores(metrics: AggregatedMetrics) -> AxisScores:
    """
    Five dashboard axis scores plus their weighted overall.

    Each axis starts from a base and is adjusted by a handful of simple
    rules, then clamped to 0-100.
    """
    revenue = metrics.revenue
    total_revenue = revenue.total

    # Revenue: trend, diversity, MCA dependency
    revenue_score = 70
    if metrics.cash_flow.trend == "IMPROVING":
        revenue_score += 10
    elif metrics.cash_flow.trend == "DECLINING":
        revenue_score -= 10

    top_source = max(
        revenue.regular_revenue, revenue.credit_card_sales,
        revenue.ach_deposits, revenue.mca_funding
    )
    top_source_pct = safe_divide(top_source, total_revenue)
    if top_source_pct < 0.5:
        revenue_score += 10
    elif top_source_pct > 0.8:
        revenue_score -= 10

    if safe_divide(revenue.mca_funding, total_revenue) > 0.3:
        revenue_score -= 5

    # Expenses: ratio, uncategorized share, MCA burden
    expense_score = 70
    expense_ratio = safe_divide(metrics.total_expenses, metrics.total_revenue, 1.0)
    if expense_ratio < 0.7:
        expense_score += 15
    elif expense_ratio > 0.95:
        expense_score -= 15

    uncategorized = metrics.expenses.other_expenses + metrics.expenses.unassigned_expenses
    if safe_divide(uncategorized, metrics.expenses.total) > 0.3:
        expense_score -= 10

    if metrics.mca.payment_to_revenue_ratio > 0.2:
        expense_score -= 10

    # MCA: positions and stacking
    mca_score = 100
    positions = metrics.mca.unique_mca_count
    if positions == 1:
        mca_score -= 10
    elif positions >= 2:
        mca_score -= 10 + (positions - 1) * 20

    if metrics.mca.stacking_indicator == "HIGH":
        mca_score -= 20
    elif metrics.mca.stacking_indicator == "MEDIUM":
        mca_score -= 10

    # NSF: frequency ladder with trend adjustment
    nsf_score = score_threshold(metrics.nsf.frequency, AGGREGATION_CONFIG["nsf_axis_thresholds"])
    if metrics.nsf.trend == "IMPROVING":
        nsf_score += 10
    elif metrics.nsf.trend == "DECLINING":
        nsf_score -= 10

    # Cash flow: negative days, lowest balance, ending balance
    cash_flow_score = 70
    negative_days = metrics.nsf.negative_balance_days
    negative_pct = safe_divide(negative_days, metrics.cash_flow.days_analyzed)
    if negative_days == 0:
        cash_flow_score += 20
    elif negative_pct < 0.1:
        cash_flow_score += 10
    elif negative_pct > 0.3:
        cash_flow_score -= 20

    if metrics.cash_flow.min_balance >= 0:
        cash_flow_score += 15
    elif metrics.cash_flow.min_balance < -5000:
        cash_flow_score -= 15

    if metrics.cash_flow.ending_balance > metrics.cash_flow.avg_daily_balance:
        cash_flow_score += 10
    elif metrics.cash_flow.ending_balance < 0:
        cash_flow_score -= 10

    scores = AxisScores(
        revenue=round_half_up(clamp(revenue_score)),
        expenses=round_half_up(clamp(expense_score)),
        mca=round_half_up(clamp(mca_score)),
        nsf=round_half_up(clamp(nsf_score)),
        cash_flow=round_half_up(clamp(cash_flow_score)),
    )
    weights = AGGREGATION_CONFIG["axis_weights"]
    scores.overall = round_half_up(
        scores.revenue * weights["revenue"]
        + scores.expenses * weights["expenses"]
        + scores.mca * weights["mca"]
        + scores.nsf * weights["nsf"]
        + scores.cash_flow * weights["cash_flow"]
    )
    return scores


def calculate_aggregated_metrics(
    transactions: Iterable[Union[Transaction, Dict]]
) -> Optional[AggregatedMetrics]:
    """Convenience wrapper around MetricsCalculator.calculate."""
    return MetricsCalculator().calculate(transactions)
