"""
Credit Ledger Coordinator - ResellerHub
Charges renewal credits to exactly one ledger and refunds that same ledger on failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F

from apps.common.types import Err, Ok, Result
from apps.customers.models import ResellerAccount

logger = logging.getLogger(__name__)


# ===============================================================================
# LEDGERS
# ===============================================================================


class BalanceStore(Protocol):
    """Panel database able to move a balance column atomically"""

    def debit(self, table: str, column: str, key_column: str, row_key: str, amount: int) -> bool: ...

    def credit(self, table: str, column: str, key_column: str, row_key: str, amount: int) -> None: ...


@dataclass(frozen=True)
class PrimaryLedger:
    """💳 Reseller balance kept in this platform"""

    owner_id: int

    @property
    def label(self) -> str:
        return "primary"

    def charge(self, amount: int) -> Result[int, str]:
        with transaction.atomic():
            account = ResellerAccount.objects.select_for_update().filter(user_id=self.owner_id).first()
            if account is None:
                return Err("reseller has no credit account")
            # Conditional decrement: concurrent renewals for the same owner can never overdraw
            updated = ResellerAccount.objects.filter(pk=account.pk, credits__gte=amount).update(
                credits=F("credits") - amount
            )
            if not updated:
                return Err(f"insufficient credits ({account.credits} available, {amount} needed)")
        return Ok(amount)

    def refund(self, amount: int) -> None:
        ResellerAccount.objects.filter(user_id=self.owner_id).update(credits=F("credits") + amount)


@dataclass(frozen=True)
class ExternalLedger:
    """🗄️ Balance column on the owner's row inside a panel database"""

    table: str
    column: str
    row_key: str
    key_column: str = "id"
    store: BalanceStore | None = field(default=None, compare=False, repr=False)

    @property
    def label(self) -> str:
        return f"external:{self.table}.{self.column}"

    def charge(self, amount: int) -> Result[int, str]:
        if self.store is None:
            return Err("panel database unavailable")
        if not self.store.debit(self.table, self.column, self.key_column, self.row_key, amount):
            return Err(f"insufficient panel balance in {self.table}.{self.column}")
        return Ok(amount)

    def refund(self, amount: int) -> None:
        if self.store is None:
            raise RuntimeError("Cannot refund external ledger without a panel connection")
        self.store.credit(self.table, self.column, self.key_column, self.row_key, amount)


Ledger = PrimaryLedger | ExternalLedger


@dataclass(frozen=True)
class LedgerCharge:
    """Which ledger paid for a renewal, and how much"""

    ledger: Ledger | None
    credits: int

    @classmethod
    def unmetered(cls) -> LedgerCharge:
        return cls(ledger=None, credits=0)

    @property
    def is_unmetered(self) -> bool:
        return self.ledger is None

    @property
    def label(self) -> str:
        return self.ledger.label if self.ledger is not None else "unmetered"


# ===============================================================================
# COORDINATOR
# ===============================================================================


class CreditLedgerCoordinator:
    """
    💳 Charge/refund around a panel renewal.

    Admins are unmetered. Otherwise the primary balance is tried first and,
    when it is absent or insufficient, the panel's own balance row (only
    for families that expose one through `external`).
    """

    @staticmethod
    def owner_is_admin(owner_id: int) -> bool:
        account = ResellerAccount.objects.select_related("user").filter(user_id=owner_id).first()
        if account is not None:
            return account.is_admin
        return get_user_model().objects.filter(pk=owner_id, is_superuser=True).exists()

    @classmethod
    def charge(
        cls,
        owner_id: int,
        credits: int,
        external: Callable[[], ExternalLedger | None] | None = None,
    ) -> Result[LedgerCharge, str]:
        if cls.owner_is_admin(owner_id):
            logger.info(f"👑 [Ledger] Owner {owner_id} is admin, renewal is unmetered")
            return Ok(LedgerCharge.unmetered())

        primary = PrimaryLedger(owner_id)
        match primary.charge(credits):
            case Ok(_):
                logger.info(f"💳 [Ledger] Charged {credits} credit(s) to owner {owner_id} (primary)")
                return Ok(LedgerCharge(primary, credits))
            case Err(primary_error):
                pass

        if external is None:
            logger.warning(f"⚠️ [Ledger] Owner {owner_id}: {primary_error}")
            return Err(f"Insufficient credits: {primary_error}")

        ledger = external()
        if ledger is None:
            logger.warning(f"⚠️ [Ledger] Owner {owner_id}: {primary_error}; no panel balance row found")
            return Err(f"Insufficient credits: {primary_error}; no balance found in panel database")

        match ledger.charge(credits):
            case Ok(_):
                logger.info(f"💳 [Ledger] Charged {credits} credit(s) to owner {owner_id} ({ledger.label})")
                return Ok(LedgerCharge(ledger, credits))
            case Err(external_error):
                logger.warning(f"⚠️ [Ledger] Owner {owner_id}: {primary_error}; {external_error}")
                return Err(f"Insufficient credits: {primary_error}; {external_error}")

    @staticmethod
    def refund(charge: LedgerCharge) -> bool:
        """Return the credits to the ledger that paid; False if the refund itself failed"""
        if charge.ledger is None or charge.credits <= 0:
            return True
        try:
            charge.ledger.refund(charge.credits)
        except Exception:
            logger.exception(f"🔥 [Ledger] Refund of {charge.credits} credit(s) to {charge.label} FAILED")
            return False
        logger.info(f"↩️ [Ledger] Refunded {charge.credits} credit(s) to {charge.label}")
        return True
