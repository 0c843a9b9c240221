"""
Statement line patterns and keyword tables for transaction extraction.
Patterns target the layout families observed in OCR/AI transcriptions of
US bank and credit-card statements.
"""

# Shared building blocks
DATE_TOKEN = r"\d{1,2}[/-]\d{1,2}[/-]\d{2}(?:\d{2})?\b"
AMOUNT_TOKEN = r"-?\$?-?\d[\d,]*(?:\.\d{1,2})?"
MONEY_TOKEN = r"-?\$-?\d[\d,]*\.\d{2}"

# Type-code column residue left by OCR between description and amount
TYPE_CODE_TOKEN = r"(?:Bd|Hr|<M|pr:|B=|p)"

# "... - $AMOUNT on DATE"
DASH_TAIL = (
    r"\s+-\s*(?P<amount>" + AMOUNT_TOKEN + r")"
    r"\s+(?:on|at|date:?)\s*(?P<date>" + DATE_TOKEN + r")"
)

# Table cell following the description: "| TYPE | $AMOUNT | $BALANCE"
TABLE_TAIL = (
    r"\s*\|\s*(?P<kind>[A-Za-z][A-Za-z ]*?)"
    r"\s*\|\s*(?P<amount>" + AMOUNT_TOKEN + r")"
    r"\s*\|\s*" + AMOUNT_TOKEN
)


# Ordered pattern table. Patterns are NOT mutually exclusive: one line can
# match several entries and later stages reconcile the multiplicity.
TRANSACTION_PATTERNS = (
    {
        "id": 1,
        "name": "table_row",
        "layout": "table",
        "regex": r"(?P<date>" + DATE_TOKEN + r")\s*\|\s*(?P<description>[^|]+?)" + TABLE_TAIL,
        "confidence": 0.8,
        "description": "DATE | DESCRIPTION | TYPE | $AMOUNT | $BALANCE",
    },
    {
        "id": 2,
        "name": "pending_table_row",
        "layout": "table",
        "regex": r"^Pending\s*\|\s*(?P<description>[^|]+?)" + TABLE_TAIL,
        "confidence": 0.7,
        "date_marker": "Pending",
        "description": "Pending | DESCRIPTION | TYPE | $AMOUNT | $BALANCE",
    },
    {
        "id": 3,
        "name": "dash_separator",
        "layout": "inline",
        "regex": r"(?P<description>[A-Za-z][^|$]*?)" + DASH_TAIL,
        "confidence": 0.8,
        "description": "DESCRIPTION - $AMOUNT on DATE",
    },
    {
        "id": 4,
        "name": "whitespace_separator",
        "layout": "inline",
        "regex": (
            r"(?P<description>[A-Za-z][^|$]*?)\s+(?P<amount>-?\$-?\d[\d,]*(?:\.\d{1,2})?)"
            r"\s+(?P<date>" + DATE_TOKEN + r")\b"
        ),
        "confidence": 0.7,
        "description": "DESCRIPTION $AMOUNT DATE",
    },
    {
        "id": 5,
        "name": "posted_row",
        "layout": "posted",
        "regex": (
            r"(?P<date>" + DATE_TOKEN + r")\s+(?P<description>[A-Za-z][^|$]*?)"
            r"(?:\s+" + TYPE_CODE_TOKEN + r")?\s+(?P<amount>" + MONEY_TOKEN + r")"
            r"(?:\s+" + MONEY_TOKEN + r")?"
        ),
        "confidence": 0.75,
        "description": "DATE DESCRIPTION [type code] $AMOUNT [$BALANCE]",
    },
    {
        "id": 6,
        "name": "pending_posted_row",
        "layout": "posted",
        "regex": (
            r"^Pending\s+(?P<description>[A-Za-z][^|$]*?)"
            r"(?:\s+" + TYPE_CODE_TOKEN + r")?\s+(?P<amount>" + MONEY_TOKEN + r")"
            r"\s+" + MONEY_TOKEN
        ),
        "confidence": 0.7,
        "date_marker": "Pending",
        "description": "Pending DESCRIPTION $AMOUNT $BALANCE",
    },
    {
        "id": 7,
        "name": "store_number",
        "layout": "inline",
        "regex": r"(?P<description>#\d+[^|$]*?)" + DASH_TAIL,
        "confidence": 0.75,
        "description": "Merchant fragment starting at a store number (#1234)",
    },
    {
        "id": 8,
        "name": "phone_number",
        "layout": "inline",
        "regex": r"(?P<description>\b\d{3}-\d{3}-?\d{4}\b[^|$]*?)" + DASH_TAIL,
        "confidence": 0.75,
        "description": "Merchant fragment starting at a phone number",
    },
    {
        "id": 9,
        "name": "dotted_domain",
        "layout": "inline",
        "regex": r"(?i)(?P<description>\b[A-Za-z][\w-]*\.(?:com|net|org|tk)\b[^|$]*?)" + DASH_TAIL,
        "confidence": 0.75,
        "description": "Merchant fragment starting at a dotted domain",
    },
    {
        "id": 10,
        "name": "leading_asterisk",
        "layout": "inline",
        "regex": r"(?P<description>\*\s*[A-Za-z][^|$]*?)" + DASH_TAIL,
        "confidence": 0.75,
        "description": "Merchant fragment after a subscription/card-present asterisk",
    },
)


# Prefixes stripped from each physical line before matching
LINE_PREFIX_PATTERNS = (
    # Enumerated summary lines: "Transaction 12:" / "Payment 3:"
    r"^(?:Transaction|Payment)\s+\d+\s*:\s*",
    # OCR row glyphs in front of a posting date: "(® 02/10/2025", "( 02/07/2025"
    r"^\(\s*[^\w\s|]?\s*(?=\d{1,2}[/-]\d{1,2}[/-])",
    # List bullets
    r"^[•*\-]\s+",
)


# Descriptions that are layout noise when they stand alone
NOISE_DESCRIPTIONS = frozenset({
    # Bare state / country abbreviations
    "TX", "CA", "NY", "WA", "AR", "FL", "IL", "US", "USA",
    "S", "B",
    # City/state and billing fragments
    "AUSTIN TX", "PLANO TX", "BILL WA", "BILL CA",
    # Bare domain fragments
    "COM", "AMZN.COM", "UBER.COM", "LYFT.COM", "SPOTIFY.COM", "NETFLIX.COM",
    # Stop words
    "ON", "THE", "A", "AN", "IN", "AT", "TO", "FOR", "OF", "WITH", "BY",
})

# Type-code column residue; a description still ending with one is a broken span
NOISE_SUFFIXES = (" Hr", " Bd", " <M", " pr:", " B=", " p")


# Quality assessment vocabulary
FINANCIAL_TERMS = (
    "PAYMENT", "TRANSACTION", "BALANCE", "DEPOSIT",
    "WITHDRAWAL", "CHARGE", "CREDIT", "DEBIT",
)

MERCHANT_BRANDS = ("AMAZON", "WALMART", "STARBUCKS")

QUALITY_KEYWORDS = FINANCIAL_TERMS + MERCHANT_BRANDS


# Transaction type keywords (lower case, substring match)
# NOTE: "payment" appears in both lists; income is checked first.
INCOME_KEYWORDS = (
    "deposit", "credit", "refund", "payment", "transfer in", "income",
)

EXPENSE_KEYWORDS = (
    "withdrawal", "debit", "purchase", "payment", "fee", "charge",
)

TYPE_KEYWORD_PRIORITY = ("income", "expense")


# Category keyword table. Order matters: the first category with a
# substring hit wins.
CATEGORY_KEYWORDS = {
    "food": (
        "walmart", "target", "grocery", "restaurant", "food", "dining",
        "mcdonalds", "mcdonald's", "taco bell", "domino", "uber eats",
        "buc-ee", "starbucks", "coffee", "cafe", "pizza", "burger",
        "chipotle", "subway", "wendy's", "panera", "aldi", "h-e-b",
    ),
    "transportation": (
        "uber", "lyft", "gas", "fuel", "parking", "transport", "tesla",
        "garage", "shell oil", "valero", "quiktrip", "sheetz", "wawa",
    ),
    "entertainment": (
        "netflix", "spotify", "amazon", "entertainment", "movie",
        "sixflags", "steam",
    ),
    "utilities": (
        "electric", "water", "gas", "internet", "phone", "utility",
    ),
    "shopping": (
        "amazon", "ebay", "online", "shopping", "retail", "dollar tree",
    ),
    "healthcare": (
        "medical", "doctor", "pharmacy", "health", "dental",
    ),
    "finance": (
        "bank", "atm", "withdrawal", "deposit", "transfer", "payment",
    ),
}
