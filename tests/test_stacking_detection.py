"""
Test suite for debt stacking detection.

Each scenario builds a small ledger of MCA disbursals and payments and
checks the events emitted by the single chronological pass.
"""

import unittest
from datetime import date, timedelta

from mca_engine.categorisation.engine import build_ledger
from mca_engine.scoring.stacking import (
    describe_event,
    detect_stacking,
    detect_stacking_alerts,
)

START = date(2025, 1, 6)


def funding(day, description, amount=20000.0):
    return {
        "date": (START + timedelta(days=day)).isoformat(),
        "description": description,
        "amount": amount,
        "direction": "CREDIT",
    }


def payment(day, description, amount=500.0):
    return {
        "date": (START + timedelta(days=day)).isoformat(),
        "description": description,
        "amount": amount,
        "direction": "DEBIT",
    }


class TestStackingDetection(unittest.TestCase):
    """Test cases for STACKING events."""

    def test_new_advance_while_other_lender_active(self):
        ledger = build_ledger([
            funding(0, "EBF HOLDINGS FUNDING"),
            payment(10, "ONDECK DAILY PAYMENT"),
            funding(20, "ONDECK CAPITAL FUNDING", 15000.0),
        ])
        events = detect_stacking(ledger)

        self.assertEqual(len(events), 1)
        event = events[0]
        self.assertEqual(event.event_type, "STACKING")
        self.assertEqual(event.date, START + timedelta(days=20))
        self.assertEqual(event.lenders, ("ONDECK", "EBF_HOLDINGS"))
        self.assertEqual(event.severity, "MEDIUM")
        self.assertEqual(event.points, 20)
        self.assertEqual(
            describe_event(event), "New MCA from Ondeck while Ebf Holdings still active"
        )

    def test_other_lender_outside_window_is_not_stacking(self):
        ledger = build_ledger([
            funding(0, "EBF HOLDINGS FUNDING"),
            funding(45, "ONDECK CAPITAL FUNDING"),
        ])
        self.assertEqual(detect_stacking(ledger), [])

    def test_two_concurrent_lenders_is_high(self):
        ledger = build_ledger([
            funding(0, "EBF HOLDINGS FUNDING"),
            payment(5, "KABBAGE PAYMENT"),
            funding(10, "ONDECK CAPITAL FUNDING"),
        ])
        events = [e for e in detect_stacking(ledger) if e.event_type == "STACKING"]

        self.assertEqual(len(events), 2)
        for event in events:
            self.assertEqual(event.severity, "HIGH")
            self.assertEqual(event.points, 35)
            self.assertEqual(event.active_at_time, 2)
        self.assertEqual({e.lenders[1] for e in events}, {"EBF_HOLDINGS", "KABBAGE"})

    def test_payment_only_lenders_produce_no_events(self):
        ledger = build_ledger([
            payment(day, "ONDECK DAILY PAYMENT") for day in range(0, 30, 3)
        ])
        self.assertEqual(detect_stacking(ledger), [])

    def test_small_credit_is_not_a_disbursal(self):
        ledger = build_ledger([
            funding(0, "EBF HOLDINGS FUNDING"),
            funding(5, "ONDECK CAPITAL FUNDING", 4000.0),
        ])
        self.assertEqual(detect_stacking(ledger), [])


class TestRefinanceAndSameDay(unittest.TestCase):
    """Test cases for REFINANCE, MULTIPLE_SAME_DAY and HIGH_FREQUENCY."""

    def test_refinance_same_lender(self):
        ledger = build_ledger([
            funding(0, "ONDECK CAPITAL FUNDING"),
            funding(30, "ONDECK FUNDING RENEWAL", 25000.0),
        ])
        events = detect_stacking(ledger)

        self.assertEqual([e.event_type for e in events], ["REFINANCE"])
        self.assertEqual(events[0].days_since_last, 30)
        self.assertEqual(events[0].points, 15)
        self.assertEqual(describe_event(events[0]), "Refinance with Ondeck within 30 days")

    def test_refinance_window_is_exclusive(self):
        ledger = build_ledger([
            funding(0, "ONDECK CAPITAL FUNDING"),
            funding(60, "ONDECK FUNDING RENEWAL", 25000.0),
        ])
        self.assertEqual(detect_stacking(ledger), [])

    def test_multiple_same_day(self):
        ledger = build_ledger([
            funding(0, "ONDECK CAPITAL FUNDING"),
            funding(0, "FUNDBOX ADVANCE", 12000.0),
        ])
        events = detect_stacking(ledger)
        same_day = [e for e in events if e.event_type == "MULTIPLE_SAME_DAY"]

        self.assertEqual(len(same_day), 1)
        self.assertEqual(same_day[0].lenders, ("FUNDBOX", "ONDECK"))
        self.assertEqual(same_day[0].severity, "CRITICAL")
        self.assertEqual(same_day[0].points, 40)
        # The second disbursal also stacks on the first
        self.assertIn("STACKING", [e.event_type for e in events])

    def test_high_frequency_flagged_once(self):
        ledger = build_ledger([
            payment(0, "ONDECK DAILY PAYMENT"),
            payment(1, "KABBAGE PAYMENT"),
            payment(2, "FUNDBOX PAYMENT"),
            payment(3, "CREDIBLY PAYMENT"),
            payment(4, "LIBERTAS PAYMENT"),
        ])
        events = detect_stacking(ledger)

        self.assertEqual([e.event_type for e in events], ["HIGH_FREQUENCY"])
        self.assertEqual(events[0].points, 0)
        self.assertEqual(events[0].date, START + timedelta(days=3))
        self.assertEqual(events[0].active_at_time, 4)


class TestStackingAlerts(unittest.TestCase):
    """Test cases for the display alerts built from events."""

    def test_alerts_mirror_events(self):
        ledger = build_ledger([
            funding(0, "EBF HOLDINGS FUNDING"),
            payment(10, "ONDECK DAILY PAYMENT"),
            funding(20, "ONDECK CAPITAL FUNDING", 15000.0),
        ])
        alerts = detect_stacking_alerts(ledger)

        self.assertEqual(len(alerts), len(detect_stacking(ledger)))
        alert = alerts[0]
        self.assertEqual(alert["type"], "STACKING")
        self.assertEqual(alert["severity"], "MEDIUM")
        self.assertEqual(alert["lenders"], ["Ondeck", "Ebf Holdings"])
        self.assertEqual(alert["date"], START + timedelta(days=20))

    def test_detection_is_repeatable(self):
        ledger = build_ledger([
            funding(0, "EBF HOLDINGS FUNDING"),
            funding(3, "ONDECK CAPITAL FUNDING"),
            funding(3, "FUNDBOX ADVANCE"),
        ])
        self.assertEqual(detect_stacking(ledger), detect_stacking(ledger))


if __name__ == "__main__":
    unittest.main()
