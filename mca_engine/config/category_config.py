"""
Category taxonomy and breakdown bucket mappings.

Every classification resolves to one of the normalized categories below, and
every normalized category feeds exactly one breakdown bucket on the side
(revenue or expense) that matches the transaction's direction.
"""

REVENUE_CATEGORIES = frozenset({
    "card_processing",
    "ach_deposit",
    "wire_transfer",
    "check_deposit",
    "cash_deposit",
    "refund",
    "mca_funding",
    "loan_proceeds",
    "zelle_income",
    "state_payment",
    "counseling_revenue",
    "interest_income",
    "regular_revenue",
    "other_income",
    "unassigned_income",
})

EXPENSE_CATEGORIES = frozenset({
    "mca_payment",
    "payroll",
    "rent",
    "utilities",
    "telecom",
    "insurance",
    "nsf_fee",
    "bank_fee",
    "professional_services",
    "inventory",
    "marketing",
    "software_subscriptions",
    "taxes",
    "owner_draw",
    "credit_card_payment",
    "zelle_payment",
    "atm_withdrawal",
    "vehicle",
    "shipping",
    "vendor_payment",
    "settlement",
    "loan_payment",
    "travel_entertainment",
    "personal_expense",
    "business_expense",
    "electronic_withdrawal",
    "expense_reversal",
    "other_expense",
    "unassigned_expense",
})

ALL_CATEGORIES = REVENUE_CATEGORIES | EXPENSE_CATEGORIES

# Shorthand labels seen from upstream taggers
CATEGORY_ALIASES = {
    "nsf": "nsf_fee",
    "overdraft": "nsf_fee",
    "mca": "mca_payment",
    "mca_repayment": "mca_payment",
    "mca_disbursal": "mca_funding",
    "card_settlement": "card_processing",
    "credit_card_sales": "card_processing",
    "ach": "ach_deposit",
    "wire": "wire_transfer",
    "cogs": "inventory",
    "subscriptions": "software_subscriptions",
    "owner_draws": "owner_draw",
    "zelle_receival": "zelle_income",
}

# Normalized category -> RevenueBreakdown field (credits)
REVENUE_BUCKETS = {
    "card_processing": "credit_card_sales",
    "ach_deposit": "ach_deposits",
    "cash_deposit": "ach_deposits",
    "wire_transfer": "wire_transfers",
    "check_deposit": "check_deposits",
    "refund": "refunds_received",
    "expense_reversal": "refunds_received",
    "mca_funding": "mca_funding",
    "loan_proceeds": "loan_proceeds",
    "zelle_income": "zelle_income",
    "state_payment": "state_payments",
    "counseling_revenue": "counseling_revenue",
    "interest_income": "other_revenue",
    "regular_revenue": "regular_revenue",
    "other_income": "other_revenue",
    "unassigned_income": "unassigned_income",
}
DEFAULT_REVENUE_BUCKET = "other_revenue"

# Normalized category -> ExpenseBreakdown field (debits).
# MCA payments are tracked on MCAMetrics instead of a named bucket.
EXPENSE_BUCKETS = {
    "payroll": "payroll",
    "rent": "rent",
    "utilities": "utilities",
    "telecom": "recurring",
    "insurance": "insurance",
    "nsf_fee": "nsf_fees",
    "bank_fee": "bank_fees",
    "professional_services": "professional_services",
    "inventory": "cogs",
    "marketing": "marketing",
    "software_subscriptions": "software_subscriptions",
    "taxes": "taxes",
    "owner_draw": "owner_draws",
    "credit_card_payment": "credit_card_payments",
    "zelle_payment": "zelle_payments",
    "atm_withdrawal": "atm_withdrawals",
    "vehicle": "travel_entertainment",
    "shipping": "vendor_payments",
    "vendor_payment": "vendor_payments",
    "settlement": "settlement",
    "loan_payment": "loan_payment",
    "travel_entertainment": "travel_entertainment",
    "personal_expense": "personal_expenses",
    "business_expense": "business_expenses",
    "electronic_withdrawal": "other_expenses",
    "expense_reversal": "expense_reversals",
    "other_expense": "other_expenses",
    "unassigned_expense": "unassigned_expenses",
}
DEFAULT_EXPENSE_BUCKET = "other_expenses"
