"""
Renewal fan-out for ResellerHub
Applies one payment to every matched customer and collects the panel logins to renew.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_DOWN, Decimal

from django.db import transaction
from django.utils import timezone

from apps.common.constants import CENT
from apps.customers.models import Customer

from .due_dates import extend_due_date
from .models import Payment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenewalTarget:
    """🎯 One panel login to renew, with the customer that owns it"""

    username: str
    customer: Customer


@dataclass(frozen=True)
class CustomerRenewal:
    customer_id: int
    previous_due_date: date | None
    new_due_date: date
    payment: Payment | None


@dataclass
class FanoutResult:
    """Outcome of applying a payment across a match set"""

    renewals: list[CustomerRenewal] = field(default_factory=list)
    targets: list[RenewalTarget] = field(default_factory=list)

    @property
    def payments(self) -> list[Payment]:
        return [r.payment for r in self.renewals if r.payment is not None]

    @property
    def primary_due_date(self) -> date | None:
        return self.renewals[0].new_due_date if self.renewals else None


def split_amount(total: Decimal, parts: int) -> list[Decimal]:
    """
    Equal split quantized to cents; leftover cents go to the first share
    so the shares always sum to `total`.
    """
    if parts <= 0:
        return []
    share = (total / parts).quantize(CENT, rounding=ROUND_DOWN)
    shares = [share] * parts
    shares[0] = total - share * (parts - 1)
    return shares


def collect_targets(customers: Sequence[Customer]) -> list[RenewalTarget]:
    """Every distinct panel login across customers; the first (highest ranked) owner wins"""
    targets: list[RenewalTarget] = []
    seen: set[str] = set()
    for customer in customers:
        for username in customer.panel_usernames():
            key = username.lower()
            if key in seen:
                continue
            seen.add(key)
            targets.append(RenewalTarget(username=username, customer=customer))
    return targets


class RenewalFanoutCoordinator:
    """
    💳 Per matched customer: own new due date, status active, one payment row.

    Every customer's due date is extended from its own current due date.
    All local writes commit together before any panel is contacted.
    """

    @staticmethod
    def apply(
        customers: Sequence[Customer],
        amount: Decimal,
        duration_days: int,
        *,
        method: str = "pix",
        source: str = "",
        external_reference: str = "",
        today: date | None = None,
    ) -> FanoutResult:
        today = today or timezone.localdate()
        result = FanoutResult()
        shares = split_amount(amount, len(customers)) if amount > 0 else []

        with transaction.atomic():
            for index, customer in enumerate(customers):
                previous = customer.due_date
                new_due_date = extend_due_date(previous, today, duration_days)

                customer.due_date = new_due_date
                customer.status = "active"
                customer.save(update_fields=["due_date", "status", "updated_at"])

                payment = None
                if shares:
                    payment = Payment.objects.create(
                        customer=customer,
                        amount=shares[index],
                        method=method,
                        confirmed=True,
                        payment_date=today,
                        source=source,
                        external_reference=external_reference,
                    )

                result.renewals.append(
                    CustomerRenewal(
                        customer_id=customer.pk,
                        previous_due_date=previous,
                        new_due_date=new_due_date,
                        payment=payment,
                    )
                )
                logger.info(
                    f"✅ [Renewal] Customer {customer.pk} due {previous} → {new_due_date}"
                    + (f", payment {payment.amount}" if payment else "")
                )

        result.targets = collect_targets(customers)
        return result
