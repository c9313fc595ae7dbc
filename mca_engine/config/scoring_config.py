"""
Scoring configuration for MCA underwriting.
Contains section weights, metric threshold ladders, and decision rules.

Threshold ladders are evaluated top to bottom. Each entry carries one bound
key and the points awarded when the value satisfies it:
    "max"   value <= bound
    "below" value <  bound
    "min"   value >= bound
    "above" value >  bound
An entry with no bound key matches everything and closes the ladder.
"""

# Overall scorecard configuration
SCORING_CONFIG = {
    # Score -> 1..5 star rating
    "rating_thresholds": [
        {"min": 80, "points": 5},
        {"min": 65, "points": 4},
        {"min": 50, "points": 3},
        {"min": 35, "points": 2},
        {"points": 1},
    ],

    # Overall score -> recommendation
    "recommendation_thresholds": [
        {"min": 75, "decision": "APPROVE"},
        {"min": 60, "decision": "APPROVE_WITH_CONDITIONS"},
        {"min": 45, "decision": "MANUAL_REVIEW"},
        {"min": 30, "decision": "DECLINE_SOFT"},
        {"decision": "DECLINE"},
    ],

    # Each of the four sections carries an equal share of the overall score
    "section_weight": 0.25,

    # Score assigned when a subsection cannot be computed
    "neutral_score": 50,

    "rating_labels": {
        1: "Critical",
        2: "Poor",
        3: "Fair",
        4: "Good",
        5: "Excellent",
    },

    "recommendation_details": {
        "APPROVE": {
            "label": "Approve",
            "color": "green",
            "description": "Strong candidate for funding",
        },
        "APPROVE_WITH_CONDITIONS": {
            "label": "Approve with Conditions",
            "color": "blue",
            "description": "Approvable with additional terms",
        },
        "MANUAL_REVIEW": {
            "label": "Manual Review",
            "color": "yellow",
            "description": "Requires underwriter review",
        },
        "DECLINE_SOFT": {
            "label": "Soft Decline",
            "color": "orange",
            "description": "Not recommended, may reconsider",
        },
        "DECLINE": {
            "label": "Decline",
            "color": "red",
            "description": "Do not fund",
        },
    },
}


# Trend labelling and the dashboard axis scores
AGGREGATION_CONFIG = {
    # Credits from a recognised lender above this amount are disbursals
    "mca_funding_min_amount": 5000,

    # First-half vs second-half average change
    "trend_improving_change": 0.10,
    "trend_declining_change": -0.10,

    # Percent breakpoints for the five-level trend direction
    "trend_direction_breakpoints": [
        {"max": -50, "label": "STRONGLY_IMPROVING"},
        {"max": -20, "label": "IMPROVING"},
        {"max": 20, "label": "STABLE"},
        {"max": 50, "label": "WORSENING"},
        {"label": "STRONGLY_WORSENING"},
    ],

    "stacking_indicator": [
        {"max": 0, "label": "NONE"},
        {"max": 1, "label": "LOW"},
        {"max": 3, "label": "MEDIUM"},
        {"label": "HIGH"},
    ],

    "axis_weights": {
        "revenue": 0.25,
        "expenses": 0.20,
        "mca": 0.25,
        "nsf": 0.15,
        "cash_flow": 0.15,
    },

    "nsf_axis_thresholds": [
        {"max": 0, "points": 100},
        {"max": 1, "points": 80},
        {"max": 3, "points": 60},
        {"max": 5, "points": 40},
        {"points": 20},
    ],
}


# Debt stacking detection
STACKING_CONFIG = {
    "disbursal_min_amount": 5000,
    # Another lender counts as concurrent when active within this many days
    "concurrent_window_days": 45,
    # Same lender funding again within this window is a refinance
    "refinance_window_days": 60,
    "high_frequency_window_days": 30,
    "high_frequency_min_lenders": 4,
    # Number of other concurrent lenders that escalates severity
    "high_severity_concurrency": 2,
    "points": {
        "STACKING_HIGH": 35,
        "STACKING_MEDIUM": 20,
        "REFINANCE": 15,
        "MULTIPLE_SAME_DAY": 40,
        "HIGH_FREQUENCY": 0,
    },
}


# Revenue Quality section
REVENUE_QUALITY_CONFIG = {
    "stability": {
        "weight": 0.20,
        "metrics": {
            "revenue_cv": {
                "weight": 0.5,
                "thresholds": [
                    {"below": 10, "points": 95},
                    {"below": 15, "points": 85},
                    {"below": 20, "points": 75},
                    {"below": 30, "points": 60},
                    {"below": 40, "points": 45},
                    {"points": 25},
                ],
            },
            "max_monthly_variance": {
                "weight": 0.3,
                "thresholds": [
                    {"below": 0.15, "points": 95},
                    {"below": 0.25, "points": 80},
                    {"below": 0.40, "points": 65},
                    {"below": 0.60, "points": 45},
                    {"points": 25},
                ],
            },
            "months_near_average": {
                "weight": 0.2,
                "thresholds": [
                    {"min": 0.8, "points": 95},
                    {"min": 0.6, "points": 75},
                    {"min": 0.4, "points": 55},
                    {"points": 35},
                ],
            },
        },
    },
    "durability": {
        "weight": 0.15,
        "metrics": {
            "zero_revenue_months": {
                "weight": 0.5,
                "thresholds": [
                    {"max": 0, "points": 100},
                    {"max": 0.1, "points": 70},
                    {"max": 0.2, "points": 50},
                    {"points": 20},
                ],
            },
            "min_month_ratio": {
                "weight": 0.3,
                "thresholds": [
                    {"min": 0.7, "points": 95},
                    {"min": 0.5, "points": 75},
                    {"min": 0.3, "points": 55},
                    {"points": 30},
                ],
            },
            "growth_streak": {
                "weight": 0.2,
                "thresholds": [
                    {"min": 4, "points": 95},
                    {"min": 3, "points": 80},
                    {"min": 2, "points": 65},
                    {"points": 45},
                ],
            },
        },
    },
    "trend": {
        "weight": 0.15,
        "metrics": {
            "half_over_half_change": {
                "weight": 0.5,
                "thresholds": [
                    {"min": 0.20, "points": 95},
                    {"min": 0.05, "points": 80},
                    {"min": -0.05, "points": 65},
                    {"min": -0.20, "points": 45},
                    {"points": 25},
                ],
            },
            "recent_vs_average": {
                "weight": 0.3,
                "thresholds": [
                    {"min": 1.2, "points": 95},
                    {"min": 1.0, "points": 80},
                    {"min": 0.8, "points": 60},
                    {"min": 0.6, "points": 40},
                    {"points": 20},
                ],
            },
            "avg_monthly_growth": {
                "weight": 0.2,
                "thresholds": [
                    {"min": 0.10, "points": 95},
                    {"min": 0.03, "points": 80},
                    {"min": -0.03, "points": 65},
                    {"min": -0.10, "points": 45},
                    {"points": 25},
                ],
            },
        },
    },
    "concentration": {
        "weight": 0.10,
        "metrics": {
            "top_source_share": {
                "weight": 0.5,
                "thresholds": [
                    {"below": 0.40, "points": 95},
                    {"below": 0.50, "points": 80},
                    {"below": 0.65, "points": 65},
                    {"below": 0.80, "points": 45},
                    {"points": 25},
                ],
            },
            "source_count": {
                "weight": 0.3,
                "thresholds": [
                    {"min": 5, "points": 95},
                    {"min": 4, "points": 80},
                    {"min": 3, "points": 65},
                    {"min": 2, "points": 45},
                    {"points": 25},
                ],
            },
            "mca_dependency": {
                "weight": 0.2,
                "thresholds": [
                    {"max": 0, "points": 100},
                    {"below": 0.10, "points": 80},
                    {"below": 0.20, "points": 60},
                    {"below": 0.30, "points": 40},
                    {"points": 20},
                ],
            },
        },
    },
    "sufficiency": {
        "weight": 0.10,
        "metrics": {
            "revenue_to_expense": {
                "weight": 0.5,
                "thresholds": [
                    {"min": 1.5, "points": 95},
                    {"min": 1.25, "points": 80},
                    {"min": 1.1, "points": 65},
                    {"min": 1.0, "points": 50},
                    {"min": 0.9, "points": 35},
                    {"points": 20},
                ],
            },
            "mca_coverage": {
                "weight": 0.3,
                "thresholds": [
                    {"min": 3, "points": 95},
                    {"min": 2, "points": 80},
                    {"min": 1.5, "points": 65},
                    {"min": 1, "points": 50},
                    {"points": 25},
                ],
            },
            "net_margin": {
                "weight": 0.2,
                "thresholds": [
                    {"min": 0.20, "points": 95},
                    {"min": 0.10, "points": 80},
                    {"min": 0.05, "points": 65},
                    {"min": 0, "points": 50},
                    {"points": 25},
                ],
            },
        },
    },
    "red_flags": {
        "weight": 0.20,
        "rules": {
            "large_round_cash": {
                "min_amount": 5000,
                "round_to": 1000,
                "points_each": 5,
                "max_points": 20,
                "severity": "MEDIUM",
            },
            "high_mca_dependency": {"above": 0.40, "points": 20, "severity": "HIGH"},
            "moderate_mca_dependency": {"above": 0.25, "points": 10, "severity": "MEDIUM"},
            "revenue_cliff": {"drop": 0.50, "points": 15, "severity": "HIGH"},
            "high_unassigned_income": {"above": 0.20, "points": 10, "severity": "MEDIUM"},
        },
    },
    "continuity": {
        "weight": 0.10,
        "metrics": {
            "max_deposit_gap": {
                "weight": 0.5,
                "thresholds": [
                    {"max": 5, "points": 95},
                    {"max": 10, "points": 80},
                    {"max": 15, "points": 65},
                    {"max": 21, "points": 50},
                    {"points": 30},
                ],
            },
            "deposits_per_month": {
                "weight": 0.3,
                "thresholds": [
                    {"min": 30, "points": 95},
                    {"min": 15, "points": 85},
                    {"min": 8, "points": 70},
                    {"min": 4, "points": 55},
                    {"points": 35},
                ],
            },
            "positive_months": {
                "weight": 0.2,
                "thresholds": [
                    {"min": 0.9, "points": 95},
                    {"min": 0.75, "points": 80},
                    {"min": 0.5, "points": 60},
                    {"points": 35},
                ],
            },
        },
    },
}


# Expense Quality section
EXPENSE_QUALITY_CONFIG = {
    "ratio": {
        "weight": 0.20,
        "metrics": {
            "operating_ratio": {
                "weight": 0.5,
                "thresholds": [
                    {"below": 0.6, "points": 95},
                    {"below": 0.7, "points": 82},
                    {"below": 0.8, "points": 67},
                    {"below": 0.9, "points": 50},
                    {"points": 25},
                ],
            },
            "net_margin": {
                "weight": 0.3,
                "thresholds": [
                    {"min": 0.15, "points": 95},
                    {"min": 0.08, "points": 80},
                    {"min": 0.03, "points": 65},
                    {"min": 0, "points": 50},
                    {"points": 25},
                ],
            },
            "expense_coverage": {
                "weight": 0.2,
                "thresholds": [
                    {"min": 1.3, "points": 95},
                    {"min": 1.15, "points": 80},
                    {"min": 1.05, "points": 65},
                    {"min": 1.0, "points": 50},
                    {"points": 25},
                ],
            },
        },
    },
    "stability": {
        "weight": 0.15,
        "metrics": {
            "expense_cv": {
                "weight": 0.4,
                "thresholds": [
                    {"below": 10, "points": 95},
                    {"below": 20, "points": 82},
                    {"below": 30, "points": 67},
                    {"below": 50, "points": 50},
                    {"points": 30},
                ],
            },
            "max_monthly_variance": {
                "weight": 0.3,
                "thresholds": [
                    {"below": 0.15, "points": 95},
                    {"below": 0.25, "points": 80},
                    {"below": 0.40, "points": 65},
                    {"below": 0.60, "points": 45},
                    {"points": 25},
                ],
            },
            "predictable_share": {
                "weight": 0.3,
                "thresholds": [
                    {"min": 0.5, "points": 95},
                    {"min": 0.35, "points": 80},
                    {"min": 0.2, "points": 65},
                    {"points": 45},
                ],
            },
        },
    },
    "categorization": {
        "weight": 0.10,
        "metrics": {
            "categorized_share": {
                "weight": 0.6,
                "thresholds": [
                    {"min": 0.9, "points": 95},
                    {"min": 0.8, "points": 82},
                    {"min": 0.7, "points": 67},
                    {"min": 0.5, "points": 50},
                    {"points": 30},
                ],
            },
            "unknown_share": {
                "weight": 0.4,
                "thresholds": [
                    {"max": 0.05, "points": 95},
                    {"max": 0.10, "points": 82},
                    {"max": 0.20, "points": 67},
                    {"max": 0.30, "points": 50},
                    {"points": 30},
                ],
            },
        },
    },
    "fixed_vs_variable": {
        "weight": 0.15,
        # Share of payroll treated as a fixed commitment
        "payroll_fixed_share": 0.7,
        "metrics": {
            "fixed_ratio": {
                "weight": 0.4,
                "thresholds": [
                    {"below": 0.30, "points": 95},
                    {"below": 0.45, "points": 80},
                    {"below": 0.60, "points": 65},
                    {"below": 0.75, "points": 45},
                    {"points": 25},
                ],
            },
            "fixed_coverage": {
                "weight": 0.35,
                "thresholds": [
                    {"min": 4, "points": 95},
                    {"min": 3, "points": 80},
                    {"min": 2, "points": 65},
                    {"min": 1.5, "points": 50},
                    {"points": 30},
                ],
            },
            "flexibility": {
                "weight": 0.25,
                "thresholds": [
                    {"min": 0.25, "points": 95},
                    {"min": 0.15, "points": 75},
                    {"min": 0.10, "points": 60},
                    {"points": 45},
                ],
            },
        },
    },
    "owner_draw": {
        "weight": 0.15,
        "metrics": {
            "draw_ratio": {
                "weight": 0.5,
                "thresholds": [
                    {"max": 0, "points": 95},
                    {"below": 0.3, "points": 90},
                    {"below": 0.5, "points": 77},
                    {"below": 0.7, "points": 62},
                    {"max": 1.0, "points": 47},
                    {"points": 25},
                ],
            },
            "draw_consistency": {
                "weight": 0.25,
                "thresholds": [
                    {"below": 20, "points": 85},
                    {"below": 40, "points": 70},
                    {"below": 60, "points": 55},
                    {"points": 40},
                ],
            },
            "draws_vs_mca": {
                "weight": 0.25,
                "thresholds": [
                    {"max": 0.5, "points": 90},
                    {"max": 1.0, "points": 70},
                    {"points": 40},
                ],
            },
        },
        "draws_exceed_mca": {"points": 10, "severity": "MEDIUM"},
    },
    "red_flags": {
        "weight": 0.15,
        "rules": {
            "gambling": {"points": 25, "severity": "CRITICAL"},
            "cash_advance": {"points": 15, "severity": "HIGH"},
            "collection": {"points": 20, "severity": "CRITICAL"},
            "excessive_atm": {"monthly_above": 5000, "points": 15, "severity": "HIGH"},
            "crypto_trading": {"above": 5000, "points": 10, "severity": "MEDIUM"},
            "late_fees": {"above": 500, "points": 10, "severity": "MEDIUM"},
        },
    },
    "trend": {
        "weight": 0.10,
        "metrics": {
            "growth_gap": {
                "weight": 0.4,
                "thresholds": [
                    {"below": -0.10, "points": 95},
                    {"below": 0, "points": 80},
                    {"below": 0.10, "points": 65},
                    {"below": 0.25, "points": 45},
                    {"points": 25},
                ],
            },
            "recent_vs_average": {
                "weight": 0.4,
                "thresholds": [
                    {"max": 0.8, "points": 95},
                    {"max": 1.0, "points": 80},
                    {"max": 1.15, "points": 65},
                    {"max": 1.3, "points": 45},
                    {"points": 25},
                ],
            },
            "expense_growth": {
                "weight": 0.2,
                "thresholds": [
                    {"below": -0.10, "points": 95},
                    {"below": 0, "points": 80},
                    {"below": 0.10, "points": 65},
                    {"below": 0.20, "points": 45},
                    {"points": 25},
                ],
            },
        },
    },
}


# Existing Debt Impact section
EXISTING_DEBT_CONFIG = {
    "position_count": {
        "weight": 0.20,
        "metrics": {
            "active_positions": {
                "weight": 1.0,
                "thresholds": [
                    {"max": 0, "points": 100},
                    {"max": 1, "points": 85},
                    {"max": 2, "points": 67},
                    {"max": 3, "points": 47},
                    {"points": 20},
                ],
            },
        },
    },
    "burden": {
        "weight": 0.25,
        "metrics": {
            "burden_ratio": {
                "weight": 0.5,
                "thresholds": [
                    {"max": 0, "points": 100},
                    {"below": 0.10, "points": 87},
                    {"below": 0.20, "points": 70},
                    {"below": 0.30, "points": 50},
                    {"points": 25},
                ],
            },
            "daily_burden": {
                "weight": 0.3,
                "thresholds": [
                    {"below": 0.10, "points": 85},
                    {"below": 0.20, "points": 70},
                    {"below": 0.30, "points": 50},
                    {"points": 25},
                ],
            },
            "payment_coverage": {
                "weight": 0.2,
                "thresholds": [
                    {"min": 3, "points": 95},
                    {"min": 2, "points": 80},
                    {"min": 1.5, "points": 65},
                    {"min": 1, "points": 50},
                    {"points": 25},
                ],
            },
        },
    },
    "consistency": {
        "weight": 0.15,
        "metrics": {
            "payment_regularity": {
                "weight": 0.5,
                "thresholds": [
                    {"min": 0.95, "points": 95},
                    {"min": 0.85, "points": 82},
                    {"min": 0.75, "points": 67},
                    {"min": 0.60, "points": 50},
                    {"points": 30},
                ],
            },
            "max_payment_gap": {
                "weight": 0.3,
                "thresholds": [
                    {"max": 3, "points": 95},
                    {"max": 7, "points": 80},
                    {"max": 14, "points": 60},
                    {"max": 21, "points": 40},
                    {"points": 20},
                ],
            },
            "amount_variation": {
                "weight": 0.2,
                "thresholds": [
                    {"below": 0.10, "points": 95},
                    {"below": 0.20, "points": 80},
                    {"below": 0.35, "points": 65},
                    {"points": 45},
                ],
            },
        },
    },
    "stacking": {
        "weight": 0.20,
        # Awarded when no stacking events and at most one lender
        "clean_bonus": 10,
    },
    "velocity": {
        "weight": 0.10,
        "metrics": {
            "annualized_disbursals": {
                "weight": 0.5,
                "thresholds": [
                    {"max": 1, "points": 95},
                    {"max": 2, "points": 82},
                    {"max": 4, "points": 67},
                    {"max": 6, "points": 50},
                    {"points": 30},
                ],
            },
            "acceleration": {
                "weight": 0.3,
                "decelerating_points": 90,
                "steady_points": 70,
                "slight_points": 55,
                "accelerating_points": 35,
            },
            "funding_to_revenue": {
                "weight": 0.2,
                "thresholds": [
                    {"max": 0, "points": 100},
                    {"below": 0.20, "points": 80},
                    {"below": 0.40, "points": 60},
                    {"points": 35},
                ],
            },
        },
    },
    "red_flags": {
        "weight": 0.10,
        "rules": {
            "mca_caused_negative": {"points": 15, "severity": "HIGH"},
            "mca_payment_nsf": {"points": 25, "severity": "CRITICAL"},
            "mca_payments_stopped": {
                "min_payments": 10,
                "days_before_end": 15,
                "points": 20,
                "severity": "HIGH",
            },
            "excessive_mca_burden": {"above": 0.40, "points": 15, "severity": "HIGH"},
        },
    },
}


# Cashflow & Charges section
CASHFLOW_CHARGES_CONFIG = {
    "nsf_frequency": {
        "weight": 0.25,
        "metrics": {
            "nsf_per_month": {
                "weight": 0.6,
                "thresholds": [
                    {"max": 0, "points": 100},
                    {"max": 0.5, "points": 90},
                    {"max": 1, "points": 77},
                    {"max": 3, "points": 60},
                    {"max": 5, "points": 45},
                    {"max": 10, "points": 30},
                    {"points": 15},
                ],
            },
            "nsf_free_months": {
                "weight": 0.25,
                "thresholds": [
                    {"min": 1.0, "points": 100},
                    {"min": 0.8, "points": 85},
                    {"min": 0.6, "points": 70},
                    {"min": 0.4, "points": 50},
                    {"points": 30},
                ],
            },
            "max_nsf_in_month": {
                "weight": 0.15,
                "thresholds": [
                    {"max": 0, "points": 100},
                    {"max": 1, "points": 85},
                    {"max": 3, "points": 65},
                    {"max": 5, "points": 45},
                    {"points": 25},
                ],
            },
        },
    },
    "nsf_severity": {
        "weight": 0.20,
        "metrics": {
            "total_fees": {
                "weight": 0.4,
                "thresholds": [
                    {"max": 0, "points": 100},
                    {"below": 100, "points": 90},
                    {"below": 300, "points": 75},
                    {"below": 500, "points": 60},
                    {"below": 1000, "points": 45},
                    {"points": 25},
                ],
            },
            "fees_to_revenue": {
                "weight": 0.35,
                "thresholds": [
                    {"max": 0, "points": 100},
                    {"below": 0.001, "points": 90},
                    {"below": 0.003, "points": 75},
                    {"below": 0.005, "points": 55},
                    {"below": 0.01, "points": 35},
                    {"points": 15},
                ],
            },
            "average_fee": {
                "weight": 0.25,
                "thresholds": [
                    {"below": 25, "points": 85},
                    {"below": 35, "points": 70},
                    {"below": 45, "points": 55},
                    {"points": 40},
                ],
            },
        },
    },
    "nsf_trend": {
        "weight": 0.15,
        "metrics": {
            "half_over_half_change": {
                "weight": 0.5,
                "thresholds": [
                    {"max": -0.5, "points": 95},
                    {"max": -0.2, "points": 82},
                    {"max": 0.2, "points": 65},
                    {"max": 0.5, "points": 45},
                    {"points": 25},
                ],
            },
            "recent_month": {
                "weight": 0.3,
                "none_points": 95,
                "at_or_below_average_points": 70,
                "slightly_above_points": 50,
                "well_above_points": 30,
                "slightly_above_multiple": 1.5,
            },
            "improving_months": {
                "weight": 0.2,
                "thresholds": [
                    {"min": 0.6, "points": 90},
                    {"min": 0.4, "points": 70},
                    {"points": 45},
                ],
            },
        },
    },
    "negative_balance": {
        "weight": 0.20,
        "metrics": {
            "negative_day_ratio": {
                "weight": 0.5,
                "thresholds": [
                    {"max": 0, "points": 100},
                    {"max": 0.05, "points": 87},
                    {"max": 0.15, "points": 70},
                    {"max": 0.30, "points": 50},
                    {"points": 25},
                ],
            },
            "lowest_balance": {
                "weight": 0.25,
                "thresholds": [
                    {"min": 0, "points": 100},
                    {"min": -1000, "points": 85},
                    {"min": -3000, "points": 65},
                    {"min": -5000, "points": 45},
                    {"points": 25},
                ],
            },
            "recovery": {
                "weight": 0.25,
                "thresholds": [
                    {"max": 0.03, "points": 90},
                    {"max": 0.10, "points": 70},
                    {"max": 0.20, "points": 50},
                    {"points": 30},
                ],
            },
        },
    },
    "volatility": {
        "weight": 0.10,
        # Day-over-day move counted as a swing when above this fraction
        "swing_threshold": 0.5,
        "metrics": {
            "balance_cv": {
                "weight": 0.5,
                "thresholds": [
                    {"below": 30, "points": 95},
                    {"below": 50, "points": 82},
                    {"below": 80, "points": 65},
                    {"below": 120, "points": 45},
                    {"points": 25},
                ],
            },
            "swing_ratio": {
                "weight": 0.3,
                "thresholds": [
                    {"max": 0.05, "points": 95},
                    {"max": 0.10, "points": 80},
                    {"max": 0.20, "points": 60},
                    {"points": 40},
                ],
            },
            "range_to_average": {
                "weight": 0.2,
                "thresholds": [
                    {"below": 1, "points": 95},
                    {"below": 2, "points": 80},
                    {"below": 4, "points": 60},
                    {"points": 40},
                ],
            },
        },
    },
    "liquidity": {
        "weight": 0.10,
        "metrics": {
            "days_of_runway": {
                "weight": 0.4,
                "thresholds": [
                    {"min": 30, "points": 95},
                    {"min": 15, "points": 82},
                    {"min": 7, "points": 65},
                    {"min": 3, "points": 45},
                    {"points": 25},
                ],
            },
            "average_balance": {
                "weight": 0.3,
                "thresholds": [
                    {"min": 50000, "points": 95},
                    {"min": 25000, "points": 85},
                    {"min": 10000, "points": 70},
                    {"min": 5000, "points": 55},
                    {"min": 0, "points": 40},
                    {"points": 20},
                ],
            },
            "minimum_balance": {
                "weight": 0.3,
                "thresholds": [
                    {"min": 10000, "points": 95},
                    {"min": 5000, "points": 85},
                    {"min": 1000, "points": 70},
                    {"min": 0, "points": 55},
                    {"min": -1000, "points": 40},
                    {"points": 20},
                ],
            },
        },
    },
}
