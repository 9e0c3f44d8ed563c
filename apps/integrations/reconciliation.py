"""
Payment reconciliation for ResellerHub.

One confirmed payment notification becomes: matched customers, a renewal
term inferred from the amount, extended due dates with payment rows, and
panel renewals for every login those customers own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from django.db import transaction

from apps.billing.duplicate_guard import DuplicateGuard
from apps.billing.plan_inference import PlanInferenceService, PlanMatch
from apps.billing.renewal_service import FanoutResult, RenewalFanoutCoordinator
from apps.common.constants import HTTP_BAD_REQUEST, HTTP_NOT_FOUND, HTTP_OK, MIN_MATCHABLE_PHONE_DIGITS
from apps.customers.matching_service import CustomerMatcher
from apps.customers.models import Customer
from apps.customers.phone_variants import phone_variants
from apps.provisioning.renewal_dispatcher import PanelRenewalDispatcher, RenewalResult

from .webhooks.payments import PaymentEvent

logger = logging.getLogger(__name__)

OutcomeStatus = Literal["ignored", "no_phone", "no_amount", "not_found", "duplicate", "renewed"]


@dataclass(frozen=True)
class ReconciliationOutcome:
    """Terminal state of one delivery plus the HTTP answer for the processor"""

    status: OutcomeStatus
    http_status: int
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def mutated(self) -> bool:
        return self.status == "renewed"


class PaymentReconciliationService:
    """
    💳 ignored → no_phone / no_amount → not_found → duplicate → renewed

    Local writes (due dates, payments) commit before any panel call, so a
    panel outage never rolls back a confirmed payment.
    """

    def __init__(self, dispatcher: PanelRenewalDispatcher | None = None, method: str = "pix"):
        self.dispatcher = dispatcher or PanelRenewalDispatcher()
        self.method = method

    def reconcile(self, event: PaymentEvent) -> ReconciliationOutcome:
        if not event.is_approved:
            logger.info(f"⏭️ [Reconciliation] Event '{event.event_type}' ignored")
            return ReconciliationOutcome(
                "ignored", HTTP_OK, {"success": True, "message": f"Event {event.event_type or 'unknown'} ignored"}
            )

        variants = phone_variants(event.phone)
        if not variants[0]:
            logger.warning("⚠️ [Reconciliation] Phone not found in payload")
            return ReconciliationOutcome(
                "no_phone", HTTP_BAD_REQUEST, {"success": False, "error": "Phone not found in payload"}
            )
        if len(variants[0]) < MIN_MATCHABLE_PHONE_DIGITS:
            logger.warning(f"⚠️ [Reconciliation] Phone has only {len(variants[0])} digit(s), refusing to match")
            return ReconciliationOutcome(
                "no_phone", HTTP_BAD_REQUEST, {"success": False, "error": "Phone number too short to match"}
            )

        amount = event.amount
        if amount is None or amount <= 0:
            logger.warning(f"⚠️ [Reconciliation] Missing or non-positive amount: {amount}")
            return ReconciliationOutcome(
                "no_amount", HTTP_BAD_REQUEST, {"success": False, "error": "Amount not found in payload"}
            )

        match_set = CustomerMatcher.match(variants)
        primary = match_set.primary
        if primary is None:
            logger.warning(f"⚠️ [Reconciliation] No customer found for phone variants {match_set.searched_variants}")
            return ReconciliationOutcome(
                "not_found",
                HTTP_NOT_FOUND,
                {
                    "success": False,
                    "error": "No customer found with this phone",
                    "searched_variants": match_set.searched_variants,
                },
            )

        plan_match = PlanInferenceService.infer(primary, amount)

        with transaction.atomic():
            # Serializes concurrent deliveries for the same match set around the retry check
            customer_ids = [customer.pk for customer in match_set.customers]
            list(Customer.objects.select_for_update().filter(pk__in=customer_ids).order_by("pk"))
            if DuplicateGuard.is_replay(customer_ids, amount, event.transaction_id):
                return ReconciliationOutcome(
                    "duplicate",
                    HTTP_OK,
                    {"success": True, "message": f"Payment already processed for {primary.name}", "duplicate": True},
                )

            fanout = RenewalFanoutCoordinator.apply(
                match_set.customers,
                amount,
                plan_match.duration_days,
                method=self.method,
                source=event.source,
                external_reference=event.transaction_id,
            )

        renewals = self.dispatcher.renew_targets(fanout.targets, plan_match.duration_days)
        succeeded = sum(result.success for result in renewals)
        logger.info(
            f"✅ [Reconciliation] {len(match_set)} customer(s) renewed for {plan_match.duration_days} day(s) "
            f"({plan_match.source}); panels {succeeded}/{len(renewals)} ok"
        )
        return ReconciliationOutcome("renewed", HTTP_OK, self._success_body(primary, fanout, plan_match, renewals))

    @staticmethod
    def _success_body(
        primary: Customer, fanout: FanoutResult, plan_match: PlanMatch, renewals: list[RenewalResult]
    ) -> dict[str, Any]:
        due = fanout.primary_due_date
        payments = fanout.payments
        return {
            "success": True,
            "message": f"Customer {primary.name} renewed until {due.isoformat() if due else '-'}",
            "customer_id": primary.pk,
            "customer_name": primary.name,
            "new_due_date": due.isoformat() if due else None,
            "duration_days": plan_match.duration_days,
            "plan_name": plan_match.plan_name,
            "pricing_outcome": plan_match.source,
            "customers_renewed": len(fanout.renewals),
            "payment_registered": bool(payments),
            "amount": str(sum(payment.amount for payment in payments)) if payments else "0",
            "server_renewals": [result.as_dict() for result in renewals],
        }
