"""
Customer matching service for ResellerHub
Finds every customer record a payer's phone could belong to and ranks them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from apps.common.constants import (
    MAX_CANDIDATES_PER_VARIANT,
    MIN_MATCHABLE_PHONE_DIGITS,
    SCORE_HAS_PLAN,
    SCORE_HAS_SERVER,
    SCORE_HAS_USERNAME,
    SCORE_IS_ACTIVE,
)

from .models import Customer
from .phone_variants import phone_variants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchSet:
    """🔍 Ranked customers matched for one phone; `primary` drives plan inference"""

    customers: list[Customer]
    searched_variants: list[str] = field(default_factory=list)

    @property
    def primary(self) -> Customer | None:
        return self.customers[0] if self.customers else None

    @property
    def is_empty(self) -> bool:
        return not self.customers

    def __len__(self) -> int:
        return len(self.customers)


def match_score(customer: Customer) -> int:
    """Completeness score: records wired to a panel and plan win over bare contacts"""
    score = 0
    if (customer.username or "").strip():
        score += SCORE_HAS_USERNAME
    if customer.server_id:
        score += SCORE_HAS_SERVER
    if customer.plan_id:
        score += SCORE_HAS_PLAN
    if customer.status == "active":
        score += SCORE_IS_ACTIVE
    return score


class CustomerMatcher:
    """
    🔍 Global phone lookup across all resellers.

    Storage formatting is inconsistent, so each variant is searched as a
    substring. Variants shorter than MIN_MATCHABLE_PHONE_DIGITS are never
    searched. Results are unioned by id and ranked by match_score, newest
    first on ties.
    """

    @staticmethod
    def match(variants: Iterable[str]) -> MatchSet:
        searched = [variant for variant in variants if len(variant) >= MIN_MATCHABLE_PHONE_DIGITS]
        candidates: dict[int, Customer] = {}

        for variant in searched:
            queryset = (
                Customer.objects.select_related("server", "plan", "owner")
                .filter(phone__contains=variant)
                .order_by("-created_at")[:MAX_CANDIDATES_PER_VARIANT]
            )
            for customer in queryset:
                candidates.setdefault(customer.pk, customer)

        ranked = sorted(
            candidates.values(),
            key=lambda c: (match_score(c), c.created_at, c.pk),
            reverse=True,
        )

        if ranked:
            logger.info(
                f"🔍 [Matcher] {len(ranked)} customer(s) matched, primary={ranked[0].pk} "
                f"(score {match_score(ranked[0])})"
            )
        else:
            logger.info(f"🔍 [Matcher] No customer matched variants {searched}")

        return MatchSet(customers=ranked, searched_variants=searched)

    @classmethod
    def match_phone(cls, raw_phone: object) -> MatchSet:
        """Canonicalize a raw phone and match it"""
        return cls.match(phone_variants(raw_phone))
