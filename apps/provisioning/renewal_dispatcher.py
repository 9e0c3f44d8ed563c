"""
Panel Renewal Dispatcher - ResellerHub
Sends each renewal target to its panel: select → open → resolve → charge → renew → refund on failure.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from django.conf import settings
from django.db import close_old_connections

from apps.billing.renewal_service import RenewalTarget
from apps.common.constants import DEFAULT_RENEWAL_MAX_WORKERS
from apps.common.logging import clear_request_id, get_request_id, set_request_id
from apps.common.types import Err, Ok

from .gateways.base import (
    Found,
    NotFound,
    PanelError,
    PanelGateway,
    PanelSession,
    RenewalRequest,
    TransientError,
)
from .ledger import CreditLedgerCoordinator, LedgerCharge
from .panel_registry import PanelGatewayRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenewalResult:
    """📋 Outcome of renewing one panel login"""

    panel: str
    username: str
    success: bool
    detail: str
    customer_id: int | None = None
    skipped: bool = False
    credits_charged: int = 0
    ledger: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "panel": self.panel,
            "username": self.username,
            "success": self.success,
            "result": self.detail,
            "skipped": self.skipped,
        }


class PanelRenewalDispatcher:
    """
    🚀 Renews every target on its own panel.

    Targets are independent: a failure, skip or exception on one never
    stops the others, and any credits charged for a failed renewal are
    refunded to the ledger that paid them.
    """

    def __init__(self, max_workers: int | None = None):
        self.max_workers = max_workers or getattr(
            settings, "PROVISIONING_RENEWAL_MAX_WORKERS", DEFAULT_RENEWAL_MAX_WORKERS
        )

    def renew_targets(self, targets: Sequence[RenewalTarget], duration_days: int) -> list[RenewalResult]:
        if not targets:
            return []

        if self.max_workers <= 1 or len(targets) == 1:
            return [self.renew_target(target, duration_days) for target in targets]

        request_id = get_request_id()
        workers = min(self.max_workers, len(targets))
        logger.info(f"🚀 [Dispatcher] Renewing {len(targets)} login(s) with {workers} worker(s)")
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="panel-renewal") as executor:
            futures = [
                executor.submit(self._renew_in_worker, target, duration_days, request_id) for target in targets
            ]
            # Results keep target order
            return [future.result() for future in futures]

    def _renew_in_worker(self, target: RenewalTarget, duration_days: int, request_id: str | None) -> RenewalResult:
        set_request_id(request_id)
        close_old_connections()
        try:
            return self.renew_target(target, duration_days)
        finally:
            close_old_connections()
            clear_request_id()

    # ===============================================================================
    # SINGLE TARGET
    # ===============================================================================

    def renew_target(self, target: RenewalTarget, duration_days: int) -> RenewalResult:
        """Never raises: every failure becomes a failed RenewalResult"""
        customer = target.customer
        selection = PanelGatewayRegistry.select(customer.server, customer.owner_id)
        if selection.is_skipped or selection.gateway is None:
            logger.info(f"⏭️ [Dispatcher] Skipping {target.username}: {selection.skip_reason}")
            return RenewalResult(
                panel=selection.panel,
                username=target.username,
                success=False,
                detail=selection.skip_reason,
                customer_id=customer.pk,
                skipped=True,
            )

        gateway = selection.gateway
        request = RenewalRequest(
            username=target.username,
            duration_days=duration_days,
            new_due_date=customer.due_date,
            screens=1,
        )
        try:
            with gateway.open(customer.owner_id, selection.credentials) as session:
                return self._renew_in_session(gateway, session, target, request)
        except PanelError as e:
            # Raised before any charge: configuration, login or connection failures
            logger.warning(f"⚠️ [{gateway.display_name}] {target.username}: {e}")
            return self._failure(gateway, target, str(e))
        except Exception as e:
            logger.exception(f"🔥 [{gateway.display_name}] Unexpected error opening session for {target.username}")
            return self._failure(gateway, target, f"Unexpected error: {type(e).__name__}")

    def _renew_in_session(
        self, gateway: PanelGateway, session: PanelSession, target: RenewalTarget, request: RenewalRequest
    ) -> RenewalResult:
        """Lookup, charge and renew while the session is open so refunds reach panel-side ledgers"""
        match gateway.resolve(session, target.username):
            case Found(record):
                pass
            case NotFound(detail) | TransientError(detail):
                logger.warning(f"⚠️ [{gateway.display_name}] {target.username}: {detail}")
                return self._failure(gateway, target, detail)

        external = (lambda: gateway.external_ledger(session, record)) if gateway.supports_external_ledger else None
        match CreditLedgerCoordinator.charge(target.customer.owner_id, gateway.credits_for(request), external):
            case Ok(charge):
                pass
            case Err(message):
                return self._failure(gateway, target, message)

        try:
            outcome = gateway.renew(session, record, request)
        except PanelError as e:
            logger.warning(f"⚠️ [{gateway.display_name}] Renewal of {target.username} failed: {e}")
            return self._failure(gateway, target, str(e), charge)
        except Exception as e:
            logger.exception(f"🔥 [{gateway.display_name}] Unexpected error renewing {target.username}")
            return self._failure(gateway, target, f"Unexpected error: {type(e).__name__}", charge)

        if not outcome.success:
            logger.warning(f"⚠️ [{gateway.display_name}] Renewal of {target.username} failed: {outcome.detail}")
            return self._failure(gateway, target, outcome.detail, charge)

        logger.info(f"✅ [{gateway.display_name}] Renewed {target.username} until {request.new_due_date}")
        return RenewalResult(
            panel=gateway.family,
            username=target.username,
            success=True,
            detail=outcome.detail,
            customer_id=target.customer.pk,
            credits_charged=charge.credits,
            ledger=charge.label,
        )

    @staticmethod
    def _failure(
        gateway: PanelGateway, target: RenewalTarget, detail: str, charge: LedgerCharge | None = None
    ) -> RenewalResult:
        """Failed result; credits already charged go back to the same ledger"""
        if charge is not None and not CreditLedgerCoordinator.refund(charge):
            detail = f"{detail} (credit refund to {charge.label} failed)"
        return RenewalResult(
            panel=gateway.family,
            username=target.username,
            success=False,
            detail=detail,
            customer_id=target.customer.pk,
        )
