"""
Billing models for ResellerHub
Reseller plan catalogs and customer payment records.
"""

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Plan(models.Model):
    """📦 Priced subscription offering in a reseller's catalog"""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="plans",
        verbose_name=_("Reseller"),
    )
    name = models.CharField(_("Plan Name"), max_length=120)
    price = models.DecimalField(
        _("Price"), max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal("0.00"))]
    )
    duration_days = models.PositiveIntegerField(_("Duration (days)"), default=30)

    created_at = models.DateTimeField(_("Created At"), default=timezone.now)

    class Meta:
        verbose_name = _("Plan")
        verbose_name_plural = _("Plans")
        ordering: ClassVar = ["price", "id"]
        indexes: ClassVar = [
            models.Index(fields=["owner", "price"], name="billing_plan_owner_price_idx"),
        ]

    def __str__(self) -> str:
        return f"📦 {self.name} ({self.price} / {self.duration_days}d)"


class Payment(models.Model):
    """💰 Payment received from a customer"""

    METHOD_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("pix", _("Instant Transfer (PIX)")),
        ("cash", _("Cash")),
        ("transfer", _("Bank Transfer")),
    )

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.CASCADE,
        related_name="payments",
        verbose_name=_("Customer"),
    )
    amount = models.DecimalField(_("Amount"), max_digits=10, decimal_places=2)
    method = models.CharField(_("Method"), max_length=20, choices=METHOD_CHOICES, default="pix")
    confirmed = models.BooleanField(_("Confirmed"), default=True)
    payment_date = models.DateField(_("Payment Date"), default=timezone.localdate)
    source = models.CharField(
        _("Source"), max_length=50, blank=True, help_text=_("Where the payment came from (e.g. cakto, manual)")
    )
    external_reference = models.CharField(
        _("External Reference"),
        max_length=120,
        blank=True,
        help_text=_("Payment processor transaction id"),
    )

    created_at = models.DateTimeField(_("Created At"), default=timezone.now)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering: ClassVar = ["-created_at"]
        indexes: ClassVar = [
            models.Index(fields=["customer", "created_at"], name="billing_payment_cust_created"),
            models.Index(fields=["external_reference"], name="billing_payment_ext_ref_idx"),
        ]

    def __str__(self) -> str:
        return f"💰 {self.amount} {self.method} for {self.customer_id}"
