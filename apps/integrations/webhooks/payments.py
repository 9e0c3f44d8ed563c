"""
Payment webhook parsing and authentication for ResellerHub.

Payment processors nest the same facts at different depths depending on the
event version, so every field is read through an ordered lookup table:
the first path that yields a usable value wins.
"""

import hmac
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Final

from django.conf import settings

from apps.common.types import Err, JSONPayload, Ok, Result, TransactionReference
from apps.provisioning.models import PanelCredentials

logger = logging.getLogger(__name__)

# ===============================================================================
# FIELD LOOKUP TABLES
# ===============================================================================

Path = tuple[str, ...]

EVENT_MARKER_PATHS: Final[tuple[Path, ...]] = (("event",), ("type",), ("status",))
DATA_STATUS_PATHS: Final[tuple[Path, ...]] = (("data", "status"),)
APPROVED_EVENT_MARKERS: Final[frozenset[str]] = frozenset({"purchase_approved", "approved"})
APPROVED_DATA_STATUSES: Final[frozenset[str]] = frozenset({"paid"})

TRANSACTION_ID_PATHS: Final[tuple[Path, ...]] = (("data", "id"), ("data", "refId"), ("id",))
CUSTOMER_CONTAINERS: Final[tuple[Path, ...]] = (("data", "customer"), ("data", "buyer"), ("customer",), ("buyer",))
PHONE_KEYS: Final[tuple[str, ...]] = ("phone", "phone_number", "cellphone")
PHONE_FALLBACK_PATHS: Final[tuple[Path, ...]] = (("data", "phone"), ("phone",))
NAME_KEYS: Final[tuple[str, ...]] = ("name", "full_name")
AMOUNT_PATHS: Final[tuple[Path, ...]] = (
    ("data", "amount"),
    ("data", "baseAmount"),
    ("sale", "amount"),
    ("data", "sale", "amount"),
    ("amount",),
)

SECRET_HEADER: Final[str] = "X-Webhook-Secret"
SECRET_BODY_KEYS: Final[tuple[str, ...]] = ("secret", "webhook_secret")

_AMOUNT_NOISE = re.compile(r"[^\d.,]")


def dig(payload: Any, path: Path) -> Any:
    """Value at a nested key path, None when any step is missing"""
    current = payload
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def first_value(payload: Any, paths: tuple[Path, ...], accept: Callable[[Any], bool] | None = None) -> Any:
    """First non-empty value across `paths` (optionally filtered by `accept`)"""
    for path in paths:
        value = dig(payload, path)
        if value in (None, "", [], {}):
            continue
        if accept is None or accept(value):
            return value
    return None


def normalize_amount(raw: Any) -> Decimal | None:
    """
    💰 Parse an amount as sent by the processor.

    Numbers are taken as-is; strings like "R$ 70,00" drop everything but
    digits and separators, with a decimal comma read as a decimal point.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int | float | Decimal):
        try:
            return Decimal(str(raw))
        except InvalidOperation:
            return None

    cleaned = _AMOUNT_NOISE.sub("", str(raw))
    if "," in cleaned and cleaned.rfind(",") > cleaned.rfind("."):
        # "1.234,56" → "1234.56"
        cleaned = cleaned.replace(".", "").replace(",", ".")
    else:
        # "1,234.56" → "1234.56"
        cleaned = cleaned.replace(",", "")
    if not cleaned:
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


# ===============================================================================
# PAYMENT EVENT
# ===============================================================================


@dataclass(frozen=True)
class PaymentEvent:
    """💳 Provider-agnostic view of one payment notification"""

    source: str
    event_type: str
    is_approved: bool
    transaction_id: TransactionReference = ""
    phone: str = ""
    customer_name: str = ""
    amount: Decimal | None = None
    raw: JSONPayload = field(default_factory=dict, compare=False, repr=False)


class PaymentEventParser:
    """Turns a raw processor payload into a PaymentEvent"""

    def __init__(self, source: str = "cakto", method: str = "pix"):
        self.source = source
        self.method = method

    def parse(self, payload: JSONPayload) -> PaymentEvent:
        event_type = str(first_value(payload, EVENT_MARKER_PATHS) or "")
        data_status = str(first_value(payload, DATA_STATUS_PATHS) or "")
        is_approved = event_type in APPROVED_EVENT_MARKERS or data_status in APPROVED_DATA_STATUSES

        customer = first_value(payload, CUSTOMER_CONTAINERS, accept=lambda value: isinstance(value, Mapping)) or {}
        phone = first_value(customer, tuple((key,) for key in PHONE_KEYS)) or first_value(
            payload, PHONE_FALLBACK_PATHS
        )
        name = first_value(customer, tuple((key,) for key in NAME_KEYS))

        amount = None
        for path in AMOUNT_PATHS:
            amount = normalize_amount(dig(payload, path))
            if amount is not None:
                break

        return PaymentEvent(
            source=self.source,
            event_type=event_type or data_status,
            is_approved=is_approved,
            transaction_id=str(first_value(payload, TRANSACTION_ID_PATHS) or ""),
            phone=str(phone or ""),
            customer_name=str(name or ""),
            amount=amount,
            raw=payload,
        )


# ===============================================================================
# SHARED-SECRET AUTHENTICATION
# ===============================================================================


@dataclass(frozen=True)
class SecretMatch:
    """Which secret authenticated the delivery: global (owner None) or a reseller's"""

    owner_id: int | None = None


class WebhookSecretVerifier:
    """
    🔐 Shared-secret check for payment webhooks.

    Secret comes from the X-Webhook-Secret header or the body's
    `secret`/`webhook_secret` field. It must equal the global secret or
    one reseller's secret (constant-time comparison).
    """

    @staticmethod
    def extract_secret(headers: Mapping[str, str], payload: JSONPayload) -> str:
        header_secret = headers.get(SECRET_HEADER, "")
        if header_secret:
            return str(header_secret)
        body_secret = first_value(payload, tuple((key,) for key in SECRET_BODY_KEYS))
        return str(body_secret or "")

    @staticmethod
    def _matches(received: str, expected: str) -> bool:
        return bool(expected) and hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8"))

    @classmethod
    def verify(cls, received: str) -> Result[SecretMatch, str]:
        if not received:
            return Err("Missing webhook secret")

        global_secret = getattr(settings, "PAYMENT_WEBHOOK_SECRET", "")
        if cls._matches(received, global_secret):
            return Ok(SecretMatch())

        reseller_rows = PanelCredentials.objects.exclude(encrypted_payment_webhook_secret="").only(
            "owner_id", "encrypted_payment_webhook_secret"
        )
        for credentials in reseller_rows:
            if cls._matches(received, credentials.get_secret("payment_webhook_secret")):
                return Ok(SecretMatch(owner_id=credentials.owner_id))

        if not global_secret and not reseller_rows.exists():
            logger.error("🔥 [Payment Webhook] No webhook secret configured")
        return Err("Invalid webhook secret")
