"""
Test suite for the shared scorecard helpers: threshold ladders, ratings,
recommendations, trend direction and formatting.
"""

import unittest
from datetime import date

from mca_engine.scoring.framework import (
    MetricValue,
    Recommendation,
    Severity,
    build_section,
    build_subsection,
    calculate_cv,
    calculate_trend_direction,
    count_business_days,
    format_currency,
    format_percent,
    generate_recommendation,
    get_rating_label,
    get_recommendation_details,
    make_metric,
    red_flag,
    round_half_up,
    safe_divide,
    safe_subsection,
    score_threshold,
    score_to_rating,
    split_halves,
)


class TestThresholdLadders(unittest.TestCase):
    """Test cases for score_threshold bound keys."""

    def setUp(self):
        self.ladder = [
            {"max": 0, "points": 100},
            {"below": 0.10, "points": 87},
            {"below": 0.20, "points": 70},
            {"points": 25},
        ]

    def test_first_satisfied_entry_wins(self):
        self.assertEqual(score_threshold(0, self.ladder), 100)
        self.assertEqual(score_threshold(0.05, self.ladder), 87)
        self.assertEqual(score_threshold(0.10, self.ladder), 70)
        self.assertEqual(score_threshold(0.5, self.ladder), 25)

    def test_min_and_above(self):
        ladder = [{"min": 1.0, "points": 100}, {"above": 0.5, "points": 60}, {"points": 10}]
        self.assertEqual(score_threshold(1.0, ladder), 100)
        self.assertEqual(score_threshold(0.5, ladder), 10)
        self.assertEqual(score_threshold(0.51, ladder), 60)

    def test_other_keys(self):
        ladder = [{"max": 0, "label": "NONE"}, {"label": "SOME"}]
        self.assertEqual(score_threshold(3, ladder, key="label"), "SOME")

    def test_empty_ladder(self):
        self.assertEqual(score_threshold(5, []), 0)


class TestRatingsAndRecommendations(unittest.TestCase):
    """Test cases for rating bands and recommendation breakpoints."""

    def test_rating_bands(self):
        self.assertEqual(score_to_rating(100), 5)
        self.assertEqual(score_to_rating(80), 5)
        self.assertEqual(score_to_rating(79), 4)
        self.assertEqual(score_to_rating(65), 4)
        self.assertEqual(score_to_rating(50), 3)
        self.assertEqual(score_to_rating(35), 2)
        self.assertEqual(score_to_rating(34), 1)
        self.assertEqual(score_to_rating(0), 1)

    def test_rating_is_monotone(self):
        ratings = [score_to_rating(score) for score in range(0, 101)]
        self.assertEqual(ratings, sorted(ratings))

    def test_recommendations(self):
        self.assertEqual(generate_recommendation(75), Recommendation.APPROVE)
        self.assertEqual(generate_recommendation(74), Recommendation.APPROVE_WITH_CONDITIONS)
        self.assertEqual(generate_recommendation(60), Recommendation.APPROVE_WITH_CONDITIONS)
        self.assertEqual(generate_recommendation(59), Recommendation.MANUAL_REVIEW)
        self.assertEqual(generate_recommendation(45), Recommendation.MANUAL_REVIEW)
        self.assertEqual(generate_recommendation(44), Recommendation.DECLINE_SOFT)
        self.assertEqual(generate_recommendation(30), Recommendation.DECLINE_SOFT)
        self.assertEqual(generate_recommendation(29), Recommendation.DECLINE)

    def test_labels_and_details(self):
        self.assertEqual(get_rating_label(5), "Excellent")
        self.assertEqual(get_rating_label(9), "Unknown")
        details = get_recommendation_details(Recommendation.APPROVE)
        self.assertEqual(details["color"], "green")
        self.assertIn("description", details)


class TestNumericHelpers(unittest.TestCase):
    """Test cases for rounding, division, CV and halves."""

    def test_round_half_up(self):
        self.assertEqual(round_half_up(84.5), 85)
        self.assertEqual(round_half_up(84.49), 84)
        self.assertEqual(round_half_up(0.5), 1)

    def test_safe_divide(self):
        self.assertEqual(safe_divide(1, 0), 0.0)
        self.assertEqual(safe_divide(1, 0, 1.0), 1.0)
        self.assertEqual(safe_divide(1, 4), 0.25)

    def test_calculate_cv(self):
        self.assertEqual(calculate_cv([]), 0.0)
        self.assertEqual(calculate_cv([0, 0]), 0.0)
        self.assertEqual(calculate_cv([10, 10, 10]), 0.0)
        self.assertAlmostEqual(calculate_cv([5, 15]), 50.0)

    def test_split_halves(self):
        self.assertEqual(split_halves([1, 2, 3]), ([1], [2, 3]))
        self.assertEqual(split_halves([1, 2, 3, 4]), ([1, 2], [3, 4]))

    def test_trend_direction(self):
        self.assertEqual(calculate_trend_direction([4, 4, 1, 1]), "STRONGLY_IMPROVING")
        self.assertEqual(calculate_trend_direction([10, 7]), "IMPROVING")
        self.assertEqual(calculate_trend_direction([2, 2, 2]), "STABLE")
        self.assertEqual(calculate_trend_direction([0, 0, 1]), "WORSENING")
        self.assertEqual(calculate_trend_direction([1, 1, 3, 3]), "STRONGLY_WORSENING")
        self.assertEqual(calculate_trend_direction([5]), "STABLE")

    def test_business_days(self):
        # Monday 2025-01-06 to Sunday 2025-01-12
        self.assertEqual(count_business_days(date(2025, 1, 6), date(2025, 1, 12)), 5)
        self.assertEqual(count_business_days(date(2025, 1, 11), date(2025, 1, 11)), 0)

    def test_formatting(self):
        self.assertEqual(format_currency(-1234.5), "-$1,235")
        self.assertEqual(format_currency(0), "$0")
        self.assertEqual(format_percent(0.123), "12.3%")
        self.assertEqual(format_percent(0.00123, 2), "0.12%")


class TestScoreBuilders(unittest.TestCase):
    """Test cases for metric, subsection and section construction."""

    def test_make_metric_uses_ladder(self):
        metric = make_metric("Ratio", 0.05, {"weight": 0.5, "thresholds": [
            {"below": 0.1, "points": 87}, {"points": 25},
        ]}, "5.0%")
        self.assertEqual(metric.score, 87)
        self.assertEqual(metric.weight, 0.5)

    def test_explicit_score_overrides_and_clamps(self):
        metric = make_metric("X", 1, {"weight": 1.0, "thresholds": []}, "1", score=130)
        self.assertEqual(metric.score, 100)

    def test_subsection_is_weighted_average(self):
        metrics = [
            MetricValue("A", 0, "0", weight=0.75, score=100),
            MetricValue("B", 0, "0", weight=0.25, score=60),
        ]
        subsection = build_subsection("Test", 0.2, metrics)
        self.assertEqual(subsection.score, 90)
        self.assertEqual(subsection.rating, 5)

    def test_subsection_without_metrics_is_neutral(self):
        self.assertEqual(build_subsection("Empty", 0.1, []).score, 50)

    def test_section_normalizes_weights(self):
        subsections = [
            build_subsection("A", 0.3, [], score=100),
            build_subsection("B", 0.1, [], score=0),
        ]
        section = build_section("Section", subsections)
        self.assertEqual(section.score, 75)
        self.assertEqual(section.weight, 0.25)

    def test_safe_subsection_falls_back_to_neutral(self):
        def broken(_):
            return 1 / 0

        with self.assertLogs("mca_engine.scoring.framework", level="WARNING"):
            subsection = safe_subsection("Broken", 0.2, broken, None)
        self.assertEqual(subsection.score, 50)
        self.assertEqual(subsection.weight, 0.2)

    def test_red_flag(self):
        flag = red_flag("GAMBLING", {"points": 25, "severity": "CRITICAL"}, "Casino")
        self.assertEqual(flag.severity, Severity.CRITICAL)
        self.assertEqual(flag.points_deducted, 25)
        overridden = red_flag("X", {"points": 25, "severity": "LOW"}, "x", points=5)
        self.assertEqual(overridden.points_deducted, 5)


if __name__ == "__main__":
    unittest.main()
