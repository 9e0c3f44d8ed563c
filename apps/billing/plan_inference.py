"""
Plan inference for ResellerHub
Works out what a customer bought from the amount they paid.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Literal

from apps.common.constants import DEFAULT_RENEWAL_DAYS, PLAN_PRICE_TOLERANCE
from apps.settings.services import SettingsService

from .models import Plan

if TYPE_CHECKING:
    from apps.customers.models import Customer

logger = logging.getLogger(__name__)

PlanSource = Literal["per_screen", "total", "custom_price", "assigned_plan", "unmatched"]


@dataclass(frozen=True)
class PlanMatch:
    """📦 Inferred renewal term"""

    duration_days: int
    plan_name: str
    source: PlanSource
    plan: Plan | None = None

    @property
    def is_unmatched(self) -> bool:
        """No catalog price fit and no assigned plan: pricing is probably misconfigured"""
        return self.source == "unmatched"


def within_tolerance(price: Decimal, target: Decimal, tolerance: Decimal) -> bool:
    """Tolerance is relative to the plan's own price"""
    return abs(price - target) <= price * tolerance


def nearest_plan(catalog: Iterable[Plan], target: Decimal, tolerance: Decimal) -> Plan | None:
    """Closest-priced plan inside the tolerance band; earlier (cheaper) plans win ties"""
    best: Plan | None = None
    best_distance: Decimal | None = None
    for plan in catalog:
        if not within_tolerance(plan.price, target, tolerance):
            continue
        distance = abs(plan.price - target)
        if best_distance is None or distance < best_distance:
            best, best_distance = plan, distance
    return best


class PlanInferenceService:
    """
    📦 First match wins:

    1. plan price ≈ amount / screens
    2. plan price ≈ total amount
    3. customer custom price ≈ amount → assigned plan's duration
    4. assigned plan, else the default duration (reported as unmatched)
    """

    @staticmethod
    def catalog_for(owner_id: int) -> list[Plan]:
        return list(Plan.objects.filter(owner_id=owner_id).order_by("price", "id"))

    @classmethod
    def infer(cls, customer: Customer, amount: Decimal, catalog: list[Plan] | None = None) -> PlanMatch:
        if catalog is None:
            catalog = cls.catalog_for(customer.owner_id)
        catalog = sorted(catalog, key=lambda plan: plan.price)

        tolerance = SettingsService.get_decimal_setting("billing.plan_price_tolerance", PLAN_PRICE_TOLERANCE)
        screens = max(1, customer.screens or 1)

        if amount > 0:
            per_screen = amount / screens
            plan = nearest_plan(catalog, per_screen, tolerance)
            if plan is not None:
                return PlanMatch(plan.duration_days, plan.name, "per_screen", plan)

            plan = nearest_plan(catalog, amount, tolerance)
            if plan is not None:
                return PlanMatch(plan.duration_days, plan.name, "total", plan)

        assigned = customer.plan
        custom_price = customer.custom_price

        if assigned is not None and custom_price and amount > 0 and within_tolerance(amount, custom_price, tolerance):
            return PlanMatch(assigned.duration_days, assigned.name, "custom_price", assigned)

        if assigned is not None:
            return PlanMatch(assigned.duration_days, assigned.name, "assigned_plan", assigned)

        default_days = SettingsService.get_integer_setting("billing.default_duration_days", DEFAULT_RENEWAL_DAYS)
        logger.warning(
            f"⚠️ [PlanInference] No plan matches amount {amount} for customer "
            f"{customer.pk}; defaulting to {default_days} days"
        )
        return PlanMatch(default_days, "", "unmatched", None)
