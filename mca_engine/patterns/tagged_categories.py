"""
Tagged category tables for upstream-labelled transaction feeds.

Upstream tagging emits strings such as "Income - Card Settlement" or
"Expense - MCA Repayment - EBF". These tables turn them into the engine's
normalized categories.
"""

UNASSIGNED_SENTINEL = "99.unassigned"

# Exact tag -> normalized category
TAGGED_CATEGORY_MAP = {
    # Income tags
    "Income - State of NE": "state_payment",
    "Income - Zelle Receival": "zelle_income",
    "Income - LFG Counselling": "counseling_revenue",
    "Income - MCA Disbursal": "mca_funding",
    "Income - Wired Inflow": "wire_transfer",
    "Income - Card Settlement": "card_processing",
    "Income - ACH Deposit": "ach_deposit",
    "Income - ACH Credit": "ach_deposit",
    "Income - Check Deposit": "check_deposit",
    "Income - Cash Deposit": "cash_deposit",
    "Income - Refund": "refund",

    # Expense tags
    "Expense - MCA Repayment": "mca_payment",
    "Expense - Software and Subscriptions": "software_subscriptions",
    "Expense - Utilities": "utilities",
    "Expense - Travel and Entertainment": "travel_entertainment",
    "Expense - Rent": "rent",
    "Expense - Personal - Debit Purchases": "personal_expense",
    "Expense - Business - Debit Purchases": "business_expense",
    "Expense - Bank Fees": "bank_fee",
    "Expense - ATM Fees": "bank_fee",
    "Expense - analysis service charge": "bank_fee",
    "Expense - Processing Fees": "bank_fee",
    "Expense - Zelle Pmt": "zelle_payment",
    "Expense - DDV Settlement": "settlement",
    "Expense - Professional Fees": "professional_services",
    "Expense - Legal (Attorney)": "professional_services",
    "Expense - Insurance": "insurance",
    "Expense - Misc": "other_expense",
    "Expense - Restaurants": "other_expense",
    "Expense - Electronic Withdrawal": "electronic_withdrawal",
    "Expense - ATM Withdrawal": "atm_withdrawal",
    "Expense - Pmts to Credit Card": "credit_card_payment",
    "Expense - Overdraft Fees": "nsf_fee",
    "Expense Reversal - Debit Purchases": "expense_reversal",
    "Expense - Payroll": "payroll",
    "Expense - Salary": "payroll",
    "Expense - Owner Draw": "owner_draw",
    "Expense - Owner Distribution": "owner_draw",
    "Expense - Marketing": "marketing",
    "Expense - Advertising": "marketing",
    "Expense - Taxes": "taxes",
    "Expense - Tax Payment": "taxes",
    "Expense - Vendor Payment": "vendor_payment",
    "Expense - Inventory": "inventory",
    "Expense - Shipping": "shipping",
    "Expense - Loan Payment": "loan_payment",
}

TAGGED_CATEGORY_MAP_CASEFOLD = {
    tag.casefold(): category for tag, category in TAGGED_CATEGORY_MAP.items()
}

# "Income - X" / "Expense - X" / "Expense Reversal - X"
TAG_PREFIX_PATTERN = r"(?i)^(Income|Expense\s+Reversal|Expense)\s*-\s*(.+)$"

# Ordered substring rules applied to the remainder of a prefixed tag.
# Each rule is (groups, category); every group needs at least one hit.
TAGGED_INCOME_RULES = [
    ((("mca", "disbursal"),), "mca_funding"),
    ((("zelle",),), "zelle_income"),
    ((("wire",),), "wire_transfer"),
    ((("state",),), "state_payment"),
    ((("counsell", "lfg"),), "counseling_revenue"),
    ((("card",), ("settlement", "processing")), "card_processing"),
    ((("ach",), ("deposit", "credit")), "ach_deposit"),
    ((("check",), ("deposit",)), "check_deposit"),
    ((("cash",), ("deposit",)), "cash_deposit"),
    ((("refund",),), "refund"),
    ((("deposit",),), "ach_deposit"),
]

TAGGED_EXPENSE_RULES = [
    ((("mca", "repayment"),), "mca_payment"),
    ((("settlement",),), "settlement"),
    ((("rent", "lease"),), "rent"),
    ((("software", "subscription"),), "software_subscriptions"),
    ((("travel", "entertainment"),), "travel_entertainment"),
    ((("utilit", "telecom", "electric", "gas", "water"),), "utilities"),
    ((("insurance",),), "insurance"),
    ((("professional", "legal", "attorney", "accounting"),), "professional_services"),
    ((("personal", "debit purchase"),), "personal_expense"),
    ((("business",),), "business_expense"),
    ((("zelle",),), "zelle_payment"),
    ((("bank fee", "overdraft", "nsf", "insufficient"),), "nsf_fee"),
    ((("credit card", "pmts to"),), "credit_card_payment"),
    ((("atm",),), "atm_withdrawal"),
    ((("payroll", "salary", "wages"),), "payroll"),
    ((("owner", "draw"),), "owner_draw"),
    ((("marketing", "advertising"),), "marketing"),
    ((("tax",),), "taxes"),
    ((("vendor",), ("payment",)), "vendor_payment"),
    ((("inventory", "cogs", "supplies"),), "inventory"),
    ((("shipping", "freight", "postage"),), "shipping"),
    ((("loan",), ("payment",)), "loan_payment"),
]
