"""
Customer models for ResellerHub
Resellers (credit ledger owners) and the subscribers they sell IPTV access to.
"""

from __future__ import annotations

from typing import ClassVar

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

# ===============================================================================
# RESELLER ACCOUNTS
# ===============================================================================


class ResellerAccount(models.Model):
    """
    💳 Reseller access record.

    Holds the reseller's credit balance in the platform, the primary ledger
    charged for each panel renewal. Admins are never charged.
    """

    ROLE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("admin", _("Admin")),
        ("reseller", _("Reseller")),
    )

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reseller_account",
        verbose_name=_("User"),
    )
    credits = models.PositiveIntegerField(
        _("Credits"), default=0, help_text=_("Panel renewal credits available to this reseller")
    )
    role = models.CharField(_("Role"), max_length=20, choices=ROLE_CHOICES, default="reseller")
    is_active = models.BooleanField(_("Is Active"), default=True)

    created_at = models.DateTimeField(_("Created At"), default=timezone.now)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Reseller Account")
        verbose_name_plural = _("Reseller Accounts")

    def __str__(self) -> str:
        return f"💳 {self.user} ({self.credits} credits)"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin" or bool(self.user.is_superuser)


# ===============================================================================
# CUSTOMERS
# ===============================================================================


class Customer(models.Model):
    """
    📺 End subscriber of a reseller.

    `username` may list several panel logins separated by commas; each one
    is renewed independently on the owner's panels.
    """

    STATUS_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("active", _("Active")),
        ("inactive", _("Inactive")),
        ("suspended", _("Suspended")),
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="customers",
        verbose_name=_("Reseller"),
    )
    name = models.CharField(_("Name"), max_length=200)
    phone = models.CharField(_("Phone"), max_length=40, blank=True, help_text=_("Free-form phone number"))
    username = models.CharField(
        _("Panel Usernames"),
        max_length=500,
        blank=True,
        help_text=_("Comma-separated panel logins"),
    )

    server = models.ForeignKey(
        "provisioning.Server",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="customers",
        verbose_name=_("Server"),
    )
    plan = models.ForeignKey(
        "billing.Plan",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="customers",
        verbose_name=_("Plan"),
    )
    custom_price = models.DecimalField(
        _("Custom Price"),
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Negotiated price overriding the plan price"),
    )
    screens = models.PositiveIntegerField(_("Screens"), default=1, validators=[MinValueValidator(1)])

    due_date = models.DateField(_("Due Date"), null=True, blank=True)
    status = models.CharField(_("Status"), max_length=20, choices=STATUS_CHOICES, default="active")
    notes = models.TextField(_("Notes"), blank=True)

    created_at = models.DateTimeField(_("Created At"), default=timezone.now)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Customer")
        verbose_name_plural = _("Customers")
        ordering: ClassVar = ["-created_at"]
        indexes: ClassVar = [
            models.Index(fields=["phone"], name="customers_phone_idx"),
            models.Index(fields=["owner", "status"], name="customers_owner_status_idx"),
        ]

    def __str__(self) -> str:
        return f"📺 {self.name}"

    def panel_usernames(self) -> list[str]:
        """Split the username field into distinct, trimmed panel logins"""
        seen: list[str] = []
        for raw in (self.username or "").split(","):
            username = raw.strip()
            if username and username not in seen:
                seen.append(username)
        return seen

    @property
    def is_active(self) -> bool:
        return self.status == "active"
