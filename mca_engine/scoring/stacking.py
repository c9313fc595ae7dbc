"""
Debt Stacking Detector.

A single chronological pass over the classified ledger that tracks, per MCA
lender, the last payment and last funding dates, and emits stacking events
when a new advance lands while other positions are still being serviced.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from functools import reduce
from typing import Dict, List, Optional, Tuple

from ..categorisation.engine import Classification
from ..categorisation.preprocess import Transaction
from ..config.scoring_config import STACKING_CONFIG

logger = logging.getLogger(__name__)

UNKNOWN_LENDER = "UNKNOWN"


@dataclass(frozen=True)
class StackingEvent:
    """A detected stacking pattern with its scoring deduction."""
    event_type: str  # STACKING, REFINANCE, MULTIPLE_SAME_DAY, HIGH_FREQUENCY
    date: date
    lenders: Tuple[str, ...]
    severity: str
    points: int
    active_at_time: int = 0
    days_since_last: Optional[int] = None


@dataclass
class LenderActivity:
    last_payment: Optional[date] = None
    last_funding: Optional[date] = None

    @property
    def last_active(self) -> Optional[date]:
        dates = [d for d in (self.last_payment, self.last_funding) if d is not None]
        return max(dates) if dates else None


@dataclass
class StackingState:
    """Accumulator threaded through the detection fold."""
    lenders: Dict[str, LenderActivity] = field(default_factory=dict)
    disbursals_by_day: Dict[date, List[str]] = field(default_factory=dict)
    events: List[StackingEvent] = field(default_factory=list)
    high_frequency_flagged: bool = False


def _active_lenders(state: StackingState, on: date, window_days: int, strict: bool) -> List[str]:
    active = []
    for name, activity in state.lenders.items():
        last_active = activity.last_active
        if last_active is None:
            continue
        elapsed = (on - last_active).days
        if elapsed < window_days or (not strict and elapsed == window_days):
            active.append(name)
    return active


def _check_high_frequency(state: StackingState, on: date) -> None:
    if state.high_frequency_flagged:
        return
    active = _active_lenders(state, on, STACKING_CONFIG["high_frequency_window_days"], strict=False)
    if len(active) >= STACKING_CONFIG["high_frequency_min_lenders"]:
        state.high_frequency_flagged = True
        state.events.append(StackingEvent(
            event_type="HIGH_FREQUENCY",
            date=on,
            lenders=tuple(sorted(active)),
            severity="HIGH",
            points=STACKING_CONFIG["points"]["HIGH_FREQUENCY"],
            active_at_time=len(active),
        ))


def _record_disbursal(state: StackingState, lender: str, on: date) -> None:
    points = STACKING_CONFIG["points"]
    others = [
        name for name in _active_lenders(
            state, on, STACKING_CONFIG["concurrent_window_days"], strict=True
        )
        if name != lender
    ]
    concurrency = len(others)
    high = concurrency >= STACKING_CONFIG["high_severity_concurrency"]

    for other in others:
        state.events.append(StackingEvent(
            event_type="STACKING",
            date=on,
            lenders=(lender, other),
            severity="HIGH" if high else "MEDIUM",
            points=points["STACKING_HIGH"] if high else points["STACKING_MEDIUM"],
            active_at_time=concurrency,
        ))

    activity = state.lenders.setdefault(lender, LenderActivity())
    if activity.last_funding is not None:
        days_since = (on - activity.last_funding).days
        if days_since < STACKING_CONFIG["refinance_window_days"]:
            state.events.append(StackingEvent(
                event_type="REFINANCE",
                date=on,
                lenders=(lender,),
                severity="MEDIUM",
                points=points["REFINANCE"],
                active_at_time=concurrency,
                days_since_last=days_since,
            ))

    same_day = state.disbursals_by_day.setdefault(on, [])
    same_day.append(lender)
    if len(same_day) == 2:
        state.events.append(StackingEvent(
            event_type="MULTIPLE_SAME_DAY",
            date=on,
            lenders=tuple(sorted(set(same_day))),
            severity="CRITICAL",
            points=points["MULTIPLE_SAME_DAY"],
            active_at_time=len(same_day),
        ))

    activity.last_funding = on
    activity.last_payment = on


def _fold_transaction(
    state: StackingState,
    item: Tuple[Transaction, Classification]
) -> StackingState:
    txn, classification = item

    if (
        txn.is_credit
        and classification.category == "mca_funding"
        and txn.amount > STACKING_CONFIG["disbursal_min_amount"]
    ):
        _record_disbursal(state, classification.lender_name or UNKNOWN_LENDER, txn.date)
        _check_high_frequency(state, txn.date)
    elif txn.is_debit and classification.category == "mca_payment":
        lender = classification.lender_name or UNKNOWN_LENDER
        state.lenders.setdefault(lender, LenderActivity()).last_payment = txn.date
        _check_high_frequency(state, txn.date)

    return state


def detect_stacking(ledger: List[Tuple[Transaction, Classification]]) -> List[StackingEvent]:
    """
    Detect stacking, refinance, same-day and high-frequency MCA patterns.

    Args:
        ledger: Chronologically sorted (transaction, classification) pairs

    Returns:
        Events in chronological order
    """
    state = reduce(_fold_transaction, ledger, StackingState())
    if state.events:
        logger.debug("Detected %d stacking events", len(state.events))
    return state.events


def _format_lender(name: str) -> str:
    return name.replace("_", " ").title()


def describe_event(event: StackingEvent) -> str:
    """Human-readable message for a stacking event."""
    if event.event_type == "STACKING":
        new_lender, other = event.lenders
        return (
            f"New MCA from {_format_lender(new_lender)} while "
            f"{_format_lender(other)} still active"
        )
    if event.event_type == "REFINANCE":
        return (
            f"Refinance with {_format_lender(event.lenders[0])} within "
            f"{event.days_since_last} days"
        )
    if event.event_type == "MULTIPLE_SAME_DAY":
        return f"Multiple disbursals on same day ({event.active_at_time})"
    return f"High MCA activity detected: {event.active_at_time} active positions"


def detect_stacking_alerts(ledger: List[Tuple[Transaction, Classification]]) -> List[Dict]:
    """
    Stacking events as display alerts for the presentation layer.

    Returns:
        List of dicts with type, message, date, severity and lenders
    """
    return [
        {
            "type": event.event_type,
            "message": describe_event(event),
            "date": event.date,
            "severity": event.severity,
            "lenders": [_format_lender(name) for name in event.lenders],
        }
        for event in detect_stacking(ledger)
    ]
