"""
Manual renewal - ResellerHub
Renew one customer on demand: same due-date, payment, ledger and panel steps as a
confirmed payment, without phone matching or the duplicate check.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from apps.billing.renewal_service import RenewalFanoutCoordinator, RenewalTarget
from apps.common.constants import DEFAULT_RENEWAL_DAYS
from apps.common.types import Err, Ok, Result
from apps.customers.models import Customer
from apps.settings.services import SettingsService

from .renewal_dispatcher import PanelRenewalDispatcher, RenewalResult

logger = logging.getLogger(__name__)


@dataclass
class ManualRenewalOutcome:
    customer_id: int
    previous_due_date: date | None
    new_due_date: date
    duration_days: int
    amount: Decimal
    payment_recorded: bool
    server_renewals: list[RenewalResult] = field(default_factory=list)

    def as_dict(self) -> dict[str, object]:
        return {
            "customer_id": self.customer_id,
            "previous_due_date": self.previous_due_date.isoformat() if self.previous_due_date else None,
            "new_due_date": self.new_due_date.isoformat(),
            "duration_days": self.duration_days,
            "payment_recorded": self.payment_recorded,
            "amount": str(self.amount),
            "server_renewals": [result.as_dict() for result in self.server_renewals],
        }


class ManualRenewalService:
    """🔁 Reseller-initiated renewal of a single customer"""

    @staticmethod
    def default_duration(customer: Customer) -> int:
        if customer.plan_id and customer.plan:
            return customer.plan.duration_days
        return SettingsService.get_integer_setting("billing.default_duration_days", DEFAULT_RENEWAL_DAYS)

    @staticmethod
    def default_amount(customer: Customer) -> Decimal:
        if customer.custom_price is not None:
            return customer.custom_price
        if customer.plan_id and customer.plan:
            return customer.plan.price
        return Decimal("0")

    @classmethod
    def renew_customer(  # noqa: PLR0913
        cls,
        customer: Customer,
        duration_days: int | None = None,
        amount: Decimal | None = None,
        method: str = "pix",
        username: str | None = None,
        record_payment: bool = True,
        dispatcher: PanelRenewalDispatcher | None = None,
    ) -> Result[ManualRenewalOutcome, str]:
        """
        Extend the customer's due date, optionally record the payment and
        renew every panel login (or only `username`, which must belong to
        the customer).
        """
        duration = duration_days or cls.default_duration(customer)
        if duration <= 0:
            return Err("Duration must be a positive number of days")

        paid = amount if amount is not None else cls.default_amount(customer)
        if paid < 0:
            return Err("Amount cannot be negative")

        logins = customer.panel_usernames()
        if username:
            wanted = username.strip().lower()
            matching = [login for login in logins if login.lower() == wanted]
            if not matching:
                return Err(f'Username "{username}" does not belong to this customer')
            logins = matching

        fanout = RenewalFanoutCoordinator.apply(
            [customer],
            paid if record_payment else Decimal("0"),
            duration,
            method=method,
            source="manual",
        )
        renewal = fanout.renewals[0]

        targets = [RenewalTarget(username=login, customer=customer) for login in logins]
        results = (dispatcher or PanelRenewalDispatcher()).renew_targets(targets, duration)

        logger.info(
            f"🔁 [Manual Renewal] Customer {customer.pk} renewed {duration} day(s) until {renewal.new_due_date}, "
            f"{sum(r.success for r in results)}/{len(results)} panel renewal(s) succeeded"
        )
        return Ok(
            ManualRenewalOutcome(
                customer_id=customer.pk,
                previous_due_date=renewal.previous_due_date,
                new_due_date=renewal.new_due_date,
                duration_days=duration,
                amount=renewal.payment.amount if renewal.payment else Decimal("0"),
                payment_recorded=renewal.payment is not None,
                server_renewals=results,
            )
        )
