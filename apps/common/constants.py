"""
ResellerHub Constants

Centralized constants for payment reconciliation, plan pricing and panel renewals.
Runtime-tunable values live in SettingsService; these are the fixed business rules.
"""

from decimal import Decimal
from typing import Final

# ===============================================================================
# PHONE NUMBERS 📱
# ===============================================================================

COUNTRY_CODE: Final[str] = "55"                    # Brazil dialing code
MIN_LENGTH_WITH_COUNTRY_CODE: Final[int] = 12      # 55 + area code + 8 digits
AREA_CODE_LENGTH: Final[int] = 2
MOBILE_LOCAL_LENGTH: Final[int] = 11               # area code + 9 + 8 digits
LANDLINE_LOCAL_LENGTH: Final[int] = 10             # area code + 8 digits
MOBILE_PREFIX_DIGIT: Final[str] = "9"

# Shorter digit strings would substring-match unrelated numbers
MIN_MATCHABLE_PHONE_DIGITS: Final[int] = LANDLINE_LOCAL_LENGTH

# ===============================================================================
# CUSTOMER MATCHING 🔍
# ===============================================================================

MAX_CANDIDATES_PER_VARIANT: Final[int] = 20
SCORE_HAS_USERNAME: Final[int] = 2
SCORE_HAS_SERVER: Final[int] = 2
SCORE_HAS_PLAN: Final[int] = 1
SCORE_IS_ACTIVE: Final[int] = 1

# ===============================================================================
# BILLING 💰
# ===============================================================================

DEFAULT_RENEWAL_DAYS: Final[int] = 30
DUPLICATE_WINDOW_SECONDS: Final[int] = 120
DUPLICATE_AMOUNT_TOLERANCE: Final[Decimal] = Decimal("0.01")
PLAN_PRICE_TOLERANCE: Final[Decimal] = Decimal("0.10")    # ±10% of plan price
CENT: Final[Decimal] = Decimal("0.01")

# Durations renewed by calendar month instead of raw days
CALENDAR_MONTH_DURATIONS: Final[dict[int, int]] = {30: 1, 90: 3, 180: 6, 365: 12}
DAYS_PER_MONTH: Final[int] = 30

# ===============================================================================
# PANEL PROVISIONING 🖥️
# ===============================================================================

PANEL_REQUEST_TIMEOUT_SECONDS: Final[int] = 15
PANEL_DB_CONNECT_TIMEOUT_SECONDS: Final[int] = 10
DEFAULT_RENEWAL_MAX_WORKERS: Final[int] = 5
PANEL_UTC_OFFSET_HOURS: Final[int] = -3            # Brasilia time, no DST

# HTTP status codes used by the panel gateways
HTTP_OK: Final[int] = 200
HTTP_BAD_REQUEST: Final[int] = 400
HTTP_UNAUTHORIZED: Final[int] = 401
HTTP_FORBIDDEN: Final[int] = 403
HTTP_NOT_FOUND: Final[int] = 404
HTTP_SERVER_ERROR: Final[int] = 500
HTTP_CLIENT_ERROR_THRESHOLD: Final[int] = 400
