"""
Transaction categorization patterns for MCA underwriting.
Patterns for US small-business bank statement data (parsed or tagged feeds).

Families are evaluated in insertion order; the first family that matches wins.
"""

# Rows that describe statement furniture rather than money movement
EXCLUDE_PATTERNS = [
    r"(?i)^previous\s*balance",
    r"(?i)^opening\s*balance",
    r"(?i)^beginning\s*balance",
    r"(?i)^closing\s*balance",
    r"(?i)^ending\s*balance",
    r"(?i)^new\s*balance",
    r"(?i)^balance\s*forward",
    r"(?i)^statement\s*period",
]


# Revenue Categories (Credits)
INCOME_PATTERNS = {
    "card_sales": {
        "category": "card_processing",
        "keywords": ["SQUARE", "STRIPE", "CLOVER", "SHOPIFY", "WORLDPAY", "HEARTLAND", "TSYS"],
        "regex_patterns": [
            r"(?i)square",
            r"(?i)stripe",
            r"(?i)paypal\s*(deposit|transfer|settlement)",
            r"(?i)clover",
            r"(?i)toast\s*deposit",
            r"(?i)shopify",
            r"(?i)merchant\s*services",
            r"(?i)card\s*settlement",
            r"(?i)visa\s*(settlement|deposit)",
            r"(?i)mastercard\s*(settlement|deposit)",
            r"(?i)amex\s*(settlement|deposit)",
            r"(?i)discover\s*settlement",
            r"(?i)first\s*data",
            r"(?i)worldpay",
            r"(?i)heartland",
            r"(?i)tsys",
        ],
        "description": "Card Processing Settlements",
    },

    "ach_deposits": {
        "category": "ach_deposit",
        "keywords": ["ACH CREDIT", "ACH DEPOSIT", "DIRECT DEPOSIT", "ELECTRONIC DEPOSIT"],
        "regex_patterns": [
            r"(?i)ach\s*(credit|deposit)",
            r"(?i)electronic\s*deposit",
            r"(?i)direct\s*deposit",
            r"(?i)eft\s*credit",
            r"(?i)online\s*(transfer|banking)",
            r"(?i)ext\s*trnsfr",
        ],
        "description": "ACH Deposits",
    },

    "wire_transfers": {
        "category": "wire_transfer",
        "keywords": ["INCOMING WIRE", "FEDWIRE"],
        "regex_patterns": [
            r"(?i)wire\s*(credit|transfer|in)",
            r"(?i)incoming\s*wire",
            r"(?i)fed\s*wire",
            r"(?i)swift",
            r"(?i)intl\s*wire",
        ],
        "description": "Incoming Wires",
    },

    "check_deposits": {
        "category": "check_deposit",
        "keywords": ["CHECK DEPOSIT", "MOBILE DEPOSIT", "REMOTE DEPOSIT"],
        "regex_patterns": [
            r"(?i)check\s*deposit",
            r"(?i)mobile\s*deposit",
            r"(?i)remote\s*deposit",
            r"(?i)counter\s*deposit",
            r"(?i)atm\s*deposit",
            r"(?i)branch\s*deposit",
        ],
        "description": "Check Deposits",
    },

    "cash_deposits": {
        "category": "cash_deposit",
        "keywords": ["CASH DEPOSIT"],
        "regex_patterns": [
            r"(?i)cash\s*deposit",
            r"(?i)currency\s*deposit",
        ],
        "description": "Cash Deposits",
    },

    "refunds": {
        "category": "refund",
        "keywords": ["REFUND", "CHARGEBACK REVERSAL"],
        "regex_patterns": [
            r"(?i)refund",
            r"(?i)return(?!ed\s*item)",
            r"(?i)reversal",
            r"(?i)credit\s*adjustment",
            r"(?i)chargeback\s*(won|reversal)",
            r"(?i)purchase\s*return",
        ],
        "description": "Refunds & Reversals",
    },

    "loan_proceeds": {
        "category": "loan_proceeds",
        "keywords": ["LOAN PROCEEDS", "SBA LOAN", "LINE OF CREDIT"],
        "regex_patterns": [
            r"(?i)loan\s*proceed",
            r"(?i)sba\s*(loan|deposit)",
            r"(?i)line\s*of\s*credit",
            r"(?i)loc\s*advance",
            r"(?i)term\s*loan",
            r"(?i)business\s*loan",
        ],
        "description": "Loan Proceeds",
    },

    "p2p_income": {
        "category": "zelle_income",
        "keywords": [],
        "regex_patterns": [
            r"(?i)zelle.*(from|credit)",
            r"(?i)venmo.*(from|deposit)",
            r"(?i)cash\s*app.*(from|deposit)",
            r"(?i)paypal.*from",
        ],
        "description": "P2P Receipts",
    },

    "interest": {
        "category": "interest_income",
        "keywords": ["DIVIDEND"],
        "regex_patterns": [
            r"(?i)interest\s*(paid|earned|credit)",
            r"(?i)dividend",
        ],
        "description": "Interest & Dividends",
    },
}


# Expense Categories (Debits)
EXPENSE_PATTERNS = {
    "payroll": {
        "category": "payroll",
        "keywords": ["PAYROLL", "GUSTO", "PAYCHEX", "ZENEFITS", "RIPPLING"],
        "regex_patterns": [
            r"(?i)payroll",
            r"(?i)gusto",
            r"(?i)\badp\b",
            r"(?i)paychex",
            r"(?i)quickbooks\s*payroll",
            r"(?i)square\s*payroll",
            r"(?i)salary",
            r"(?i)wages",
            r"(?i)direct\s*dep.*payroll",
            r"(?i)paycor",
            r"(?i)zenefits",
            r"(?i)rippling",
        ],
        "description": "Payroll",
    },

    "rent": {
        "category": "rent",
        "keywords": ["LANDLORD", "PROPERTY MANAGEMENT"],
        "regex_patterns": [
            r"(?i)\brent\b",
            r"(?i)lease\s*payment",
            r"(?i)property\s*management",
            r"(?i)landlord",
            r"(?i)realty",
            r"(?i)commercial\s*lease",
            r"(?i)office\s*space",
            r"(?i)warehouse\s*rent",
        ],
        "description": "Rent & Lease",
    },

    "utilities": {
        "category": "utilities",
        "keywords": ["DUKE ENERGY", "CON EDISON", "WASTE MANAGEMENT"],
        "regex_patterns": [
            r"(?i)electric",
            r"(?i)\bgas\s*(bill|company|service)",
            r"(?i)water\s*(bill|utility)",
            r"(?i)utility",
            r"(?i)power\s*company",
            r"(?i)energy\s*(company|service)",
            r"(?i)sewage",
            r"(?i)trash",
            r"(?i)waste\s*management",
            r"(?i)\bfpl\b",
            r"(?i)duke\s*energy",
            r"(?i)\bpge\b",
            r"(?i)con\s*edison",
        ],
        "description": "Utilities",
    },

    "telecom": {
        "category": "telecom",
        "keywords": ["VERIZON", "COMCAST", "XFINITY", "SPECTRUM", "CENTURYLINK"],
        "regex_patterns": [
            r"(?i)at&t",
            r"(?i)verizon",
            r"(?i)t-mobile",
            r"(?i)sprint",
            r"(?i)comcast",
            r"(?i)xfinity",
            r"(?i)spectrum",
            r"(?i)\bcox\b",
            r"(?i)\binternet\b",
            r"(?i)phone\s*(bill|service)",
            r"(?i)centurylink",
            r"(?i)frontier",
            r"(?i)windstream",
        ],
        "description": "Telecom & Internet",
    },

    "insurance": {
        "category": "insurance",
        "keywords": ["INSURANCE", "GEICO", "STATE FARM", "ALLSTATE", "LIBERTY MUTUAL"],
        "regex_patterns": [
            r"(?i)insurance",
            r"(?i)geico",
            r"(?i)state\s*farm",
            r"(?i)allstate",
            r"(?i)progressive",
            r"(?i)liberty\s*mutual",
            r"(?i)travelers",
            r"(?i)workers\s*comp",
            r"(?i)liability",
            r"(?i)premium",
            r"(?i)hartford",
            r"(?i)nationwide",
            r"(?i)usaa",
        ],
        "description": "Insurance",
    },

    "nsf": {
        "category": "nsf_fee",
        "keywords": ["NSF", "OVERDRAFT", "INSUFFICIENT FUNDS", "RETURNED ITEM"],
        "regex_patterns": [
            r"(?i)\bnsf\b",
            r"(?i)overdraft",
            r"(?i)insufficient\s*fund",
            r"(?i)returned\s*item",
        ],
        "description": "NSF & Overdraft Fees",
    },

    "bank_fees": {
        "category": "bank_fee",
        "keywords": ["SERVICE CHARGE", "MAINTENANCE FEE"],
        "regex_patterns": [
            r"(?i)service\s*charge",
            r"(?i)monthly\s*(fee|maintenance)",
            r"(?i)account\s*fee",
            r"(?i)wire\s*fee",
            r"(?i)atm\s*fee",
            r"(?i)foreign\s*transaction",
            r"(?i)analysis\s*(fee|charge)",
        ],
        "description": "Bank Fees",
    },

    "professional_services": {
        "category": "professional_services",
        "keywords": ["ATTORNEY", "LAWYER", "ACCOUNTANT", "BOOKKEEPING"],
        "regex_patterns": [
            r"(?i)attorney",
            r"(?i)lawyer",
            r"(?i)\blegal\b",
            r"(?i)law\s*office",
            r"(?i)accountant",
            r"(?i)\bcpa\b",
            r"(?i)accounting",
            r"(?i)consultant",
            r"(?i)bookkeep",
            r"(?i)tax\s*prep",
        ],
        "description": "Professional Services",
    },

    "cogs": {
        "category": "inventory",
        "keywords": ["INVENTORY", "WHOLESALE", "DISTRIBUTOR", "MERCHANDISE"],
        "regex_patterns": [
            r"(?i)inventory",
            r"(?i)supplier",
            r"(?i)wholesale",
            r"(?i)distributor",
            r"(?i)raw\s*material",
            r"(?i)manufacturer",
            r"(?i)vendor\s*payment",
            r"(?i)purchase\s*order",
            r"(?i)\bpo\s*#",
            r"(?i)merchandise",
            r"(?i)cost\s*of\s*goods",
            r"(?i)supplies",
        ],
        "description": "Cost of Goods",
    },

    "marketing": {
        "category": "marketing",
        "keywords": ["MAILCHIMP", "HUBSPOT", "CONSTANT CONTACT"],
        "regex_patterns": [
            r"(?i)google\s*(ads|adwords)",
            r"(?i)facebook\s*(ads|advertising)",
            r"(?i)\bmarketing\b",
            r"(?i)advertising",
            r"(?i)\byelp\b",
            r"(?i)social\s*media",
            r"(?i)\bseo\b",
            r"(?i)instagram\s*ads",
            r"(?i)tiktok\s*ads",
            r"(?i)linkedin\s*ads",
            r"(?i)mailchimp",
            r"(?i)constant\s*contact",
            r"(?i)hubspot",
        ],
        "description": "Marketing & Advertising",
    },

    "subscriptions": {
        "category": "software_subscriptions",
        "keywords": ["QUICKBOOKS", "ADOBE", "MICROSOFT", "DROPBOX", "SALESFORCE"],
        "regex_patterns": [
            r"(?i)subscription",
            r"(?i)monthly\s*(plan|fee)",
            r"(?i)\bsaas\b",
            r"(?i)software",
            r"(?i)quickbooks",
            r"(?i)adobe",
            r"(?i)microsoft",
            r"(?i)\bzoom\b",
            r"(?i)\bslack\b",
            r"(?i)dropbox",
            r"(?i)google\s*workspace",
            r"(?i)salesforce",
            r"(?i)shopify\s*(fee|subscription)",
        ],
        "description": "Software & Subscriptions",
    },

    "taxes": {
        "category": "taxes",
        "keywords": ["EFTPS", "TAX PAYMENT"],
        "regex_patterns": [
            r"(?i)\birs\b",
            r"(?i)tax\s*payment",
            r"(?i)federal\s*tax",
            r"(?i)state\s*tax",
            r"(?i)sales\s*tax",
            r"(?i)payroll\s*tax",
            r"(?i)\beftps\b",
            r"(?i)quarterly\s*tax",
            r"(?i)estimated\s*tax",
            r"(?i)property\s*tax",
            r"(?i)franchise\s*tax",
        ],
        "description": "Taxes",
    },

    "owner_draws": {
        "category": "owner_draw",
        "keywords": ["OWNER DRAW", "SHAREHOLDER"],
        "regex_patterns": [
            r"(?i)owner\s*(draw|distribution)",
            r"(?i)shareholder",
            r"(?i)member\s*distribution",
            r"(?i)partner\s*draw",
            r"(?i)\bdistribution\b",
        ],
        "description": "Owner Draws",
    },

    "credit_card_payments": {
        "category": "credit_card_payment",
        "keywords": ["CREDIT CARD PAYMENT"],
        "regex_patterns": [
            r"(?i)credit\s*card\s*payment",
            r"(?i)card\s*payment",
            r"(?i)chase\s*card",
            r"(?i)amex\s*payment",
            r"(?i)visa\s*payment",
            r"(?i)mastercard\s*payment",
            r"(?i)capital\s*one\s*payment",
            r"(?i)citi\s*card",
            r"(?i)discover\s*payment",
        ],
        "description": "Credit Card Payments",
    },

    "p2p_payments": {
        "category": "zelle_payment",
        "keywords": [],
        "regex_patterns": [
            r"(?i)zelle.*(to|send|payment)",
            r"(?i)venmo.*(to|send|payment)",
            r"(?i)cash\s*app.*(to|send|payment)",
        ],
        "description": "P2P Payments",
    },

    "atm_withdrawals": {
        "category": "atm_withdrawal",
        "keywords": ["ATM WITHDRAWAL", "CASH WITHDRAWAL"],
        "regex_patterns": [
            r"(?i)atm\s*(withdrawal|w/d)",
            r"(?i)cash\s*withdrawal",
            r"(?i)counter\s*withdrawal",
        ],
        "description": "ATM & Cash Withdrawals",
    },

    "vehicle": {
        "category": "vehicle",
        "keywords": ["SUNPASS", "EZPASS"],
        "regex_patterns": [
            r"(?i)\bgas\b(?!\s*(bill|company|service))",
            r"(?i)fuel",
            r"(?i)car\s*payment",
            r"(?i)auto\s*loan",
            r"(?i)vehicle",
            r"(?i)sunpass",
            r"(?i)ezpass",
            r"(?i)\btoll\b",
            r"(?i)parking",
            r"(?i)uber(?!\s*eats)",
            r"(?i)lyft",
        ],
        "description": "Vehicle & Transport",
    },

    "shipping": {
        "category": "shipping",
        "keywords": ["FEDEX", "USPS", "STAMPS.COM"],
        "regex_patterns": [
            r"(?i)fedex",
            r"(?i)\bups\b",
            r"(?i)usps",
            r"(?i)\bdhl\b",
            r"(?i)shipping",
            r"(?i)freight",
            r"(?i)postage",
            r"(?i)stamps\.com",
        ],
        "description": "Shipping & Freight",
    },
}


# MCA lender registry: (pattern, canonical lender name), first match wins
MCA_LENDER_PATTERNS = [
    (r"(?i)ebf\s*holdings", "EBF_HOLDINGS"),
    (r"(?i)\bebf\b", "EBF_HOLDINGS"),
    (r"(?i)everest\s*business(\s*fund)?", "EVEREST_BUSINESS_FUNDING"),
    (r"(?i)lending\s*point", "LENDINGPOINT"),
    (r"(?i)fundbox", "FUNDBOX"),
    (r"(?i)blue\s*vine", "BLUEVINE"),
    (r"(?i)on\s*deck", "ONDECK"),
    (r"(?i)kabbage", "KABBAGE"),
    (r"(?i)can\s*capital", "CAN_CAPITAL"),
    (r"(?i)rapid\s*finance", "RAPID_FINANCE"),
    (r"(?i)credibly", "CREDIBLY"),
    (r"(?i)fora\s*financial", "FORA_FINANCIAL"),
    (r"(?i)pearl\s*capital", "PEARL_CAPITAL"),
    (r"(?i)forward\s*financing", "FORWARD_FINANCING"),
    (r"(?i)clearco", "CLEARCO"),
    (r"(?i)capify", "CAPIFY"),
    (r"(?i)libertas", "LIBERTAS"),
    (r"(?i)bizfi", "BIZFI"),
    (r"(?i)bizfund", "BIZFUND"),
    (r"(?i)yellowstone\s*capital", "YELLOWSTONE_CAPITAL"),
    (r"(?i)national\s*funding", "NATIONAL_FUNDING"),
    (r"(?i)payability", "PAYABILITY"),
    (r"(?i)\bbehalf\b", "BEHALF"),
    (r"(?i)fundkite", "FUNDKITE"),
    (r"(?i)kalamata", "KALAMATA"),
    (r"(?i)cloudfund", "CLOUDFUND"),
    (r"(?i)itria\s*ventures", "ITRIA_VENTURES"),
    (r"(?i)capytal", "CAPYTAL"),
    (r"(?i)square\s*capital", "SQUARE_CAPITAL"),
    (r"(?i)paypal\s*working", "PAYPAL_WORKING_CAPITAL"),
    (r"(?i)pipe\s*(capital|advance|financing)", "PIPE"),
    (r"(?i)merchant\s*cash", "MERCHANT_CASH_ADVANCE"),
    (r"(?i)business\s*advance", "BUSINESS_ADVANCE"),
    (r"(?i)revenue\s*based", "REVENUE_BASED_FINANCING"),
    (r"(?i)daily\s*ach", "DAILY_ACH_LENDER"),
    (r"(?i)split\s*funding", "SPLIT_FUNDING"),
]

# Company names recognised inside tagged strings (e.g. "Expense - MCA - EBF")
KNOWN_MCA_COMPANIES = {
    "EBF": "EBF_HOLDINGS",
    "LENDINGPOINT": "LENDINGPOINT",
    "EVEREST": "EVEREST_BUSINESS_FUNDING",
    "CAPYTAL": "CAPYTAL",
    "CREDIBLY": "CREDIBLY",
    "RAPID FINANCE": "RAPID_FINANCE",
    "CAN CAPITAL": "CAN_CAPITAL",
    "FUNDBOX": "FUNDBOX",
    "KABBAGE": "KABBAGE",
    "BLUEVINE": "BLUEVINE",
    "ONDECK": "ONDECK",
    "PAYABILITY": "PAYABILITY",
    "BEHALF": "BEHALF",
    "CLEARCO": "CLEARCO",
    "SQUARE CAPITAL": "SQUARE_CAPITAL",
    "PAYPAL WORKING": "PAYPAL_WORKING_CAPITAL",
    "FORA FINANCIAL": "FORA_FINANCIAL",
    "YELLOWSTONE CAPITAL": "YELLOWSTONE_CAPITAL",
    "NATIONAL FUNDING": "NATIONAL_FUNDING",
    "PIPE": "PIPE",
    "FORWARD FINANCING": "FORWARD_FINANCING",
    "PEARL CAPITAL": "PEARL_CAPITAL",
    "LIBERTAS": "LIBERTAS",
    "BIZFI": "BIZFI",
    "FUNDKITE": "FUNDKITE",
    "KALAMATA": "KALAMATA",
    "CLOUDFUND": "CLOUDFUND",
    "ITRIA VENTURES": "ITRIA_VENTURES",
}

# Pre-sorted (longest first) so "PAYPAL WORKING" wins over "PIPE"-style short names
KNOWN_MCA_COMPANIES_SORTED = sorted(
    KNOWN_MCA_COMPANIES.items(),
    key=lambda x: len(x[0]),
    reverse=True
)

# "Income - MCA Disbursal - EBF" / "Expense - MCA - Fundbox"
TAG_LENDER_SUFFIX_PATTERN = r"(?i)(?:MCA|MCA Disbursal)\s*-\s*([A-Za-z0-9\s]+)$"

# Last resort lender name for MCA debits, e.g. "MCA-ACME 0412" -> "ACME"
FALLBACK_LENDER_PATTERN = r"(?i)(?:mca|daily|payment)[:\s-]*([a-z0-9]+)"


# Expense behaviours that indicate elevated risk
RISK_PATTERNS = {
    "gambling": {
        "keywords": ["DRAFTKINGS", "FANDUEL", "POKERSTARS", "BOVADA"],
        "regex_patterns": [
            r"(?i)casino",
            r"(?i)draftkings",
            r"(?i)fanduel",
            r"(?i)bet365",
            r"(?i)pokerstars",
            r"(?i)betmgm",
            r"(?i)bovada",
        ],
        "description": "Gambling",
    },
    "cash_advance": {
        "keywords": ["PAYDAY", "CHECK INTO CASH"],
        "regex_patterns": [
            r"(?i)cash\s*advance",
            r"(?i)payday",
            r"(?i)check\s*into\s*cash",
            r"(?i)check\s*cashing",
        ],
        "description": "Cash Advance / Payday",
    },
    "collection": {
        "keywords": ["COLLECTION AGENCY", "DEBT COLLECTOR"],
        "regex_patterns": [
            r"(?i)collection\s*agency",
            r"(?i)debt\s*collector",
            r"(?i)portfolio\s*recovery",
            r"(?i)midland\s*credit",
        ],
        "description": "Debt Collection",
    },
    "crypto": {
        "keywords": ["COINBASE", "BINANCE"],
        "regex_patterns": [
            r"(?i)coinbase",
            r"(?i)binance",
            r"(?i)crypto",
            r"(?i)bitcoin",
            r"(?i)kraken",
            r"(?i)gemini",
        ],
        "description": "Crypto Trading",
    },
    "late_fees": {
        "keywords": [],
        "regex_patterns": [
            r"(?i)late\s*(fee|payment|charge)",
            r"(?i)past\s*due",
        ],
        "description": "Late Fees",
    },
}

# Large cash deposit detection on the revenue side
CASH_DEPOSIT_PATTERN = r"(?i)cash\s*deposit"
