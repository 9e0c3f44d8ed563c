"""
Duplicate payment guard for ResellerHub
Detects webhook redeliveries of an event that was already applied.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import timedelta
from decimal import Decimal

from django.db.models import Q
from django.utils import timezone

from apps.common.constants import DUPLICATE_AMOUNT_TOLERANCE, DUPLICATE_WINDOW_SECONDS
from apps.settings.services import SettingsService

from .models import Payment
from .renewal_service import split_amount

logger = logging.getLogger(__name__)


class DuplicateGuard:
    """
    🛡️ Short-window retry detection.

    A confirmed instant-transfer payment for the same customer within the
    window, with an amount inside the tolerance, means this delivery was
    already processed. A repeated processor transaction id is a retry at
    any age.
    """

    METHOD = "pix"

    @classmethod
    def is_retry(cls, customer_id: int, amount: Decimal, external_reference: str = "") -> bool:
        return cls._already_recorded(Q(customer_id=customer_id), [amount], external_reference)

    @classmethod
    def is_replay(cls, customer_ids: Sequence[int], amount: Decimal, external_reference: str = "") -> bool:
        """
        Retry check across a whole match set.

        The first delivery may have reordered the ranking (statuses become
        active), so any matched customer holding a recent payment of any
        share of `amount` counts, whichever customer is primary now.
        """
        if not customer_ids:
            return False
        shares = sorted(set(split_amount(amount, len(customer_ids))))
        return cls._already_recorded(Q(customer_id__in=list(customer_ids)), shares, external_reference)

    @classmethod
    def _already_recorded(cls, customers: Q, amounts: Iterable[Decimal], external_reference: str) -> bool:
        if external_reference and Payment.objects.filter(customers, external_reference=external_reference).exists():
            logger.info(f"🛡️ [Duplicate] Transaction {external_reference} already recorded")
            return True

        window = SettingsService.get_integer_setting(
            "billing.duplicate_window_seconds", DUPLICATE_WINDOW_SECONDS
        )
        tolerance = SettingsService.get_decimal_setting(
            "billing.duplicate_amount_tolerance", DUPLICATE_AMOUNT_TOLERANCE
        )
        since = timezone.now() - timedelta(seconds=window)

        amount_match = Q()
        for amount in amounts:
            amount_match |= Q(amount__gte=amount - tolerance, amount__lte=amount + tolerance)

        recent = Payment.objects.filter(
            customers,
            amount_match,
            method=cls.METHOD,
            confirmed=True,
            created_at__gte=since,
        )
        if recent.exists():
            logger.info(f"🛡️ [Duplicate] Matching payment seen within {window}s, skipping")
            return True
        return False
