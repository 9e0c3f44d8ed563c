"""
Provisioning models for ResellerHub
Reseller servers and the encrypted credentials used to reach each IPTV panel family.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.common.encryption import decrypt_sensitive_data, encrypt_sensitive_data

logger = logging.getLogger(__name__)


class Server(models.Model):
    """
    🖥️ Panel server a reseller sells access on.

    The panel family is inferred from the server name/host; only servers
    flagged `auto_renew` are renewed automatically after a payment.
    """

    STATUS_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("active", _("Active")),
        ("maintenance", _("Maintenance")),
        ("disabled", _("Disabled")),
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="servers",
        verbose_name=_("Reseller"),
    )
    name = models.CharField(_("Server Name"), max_length=100)
    host = models.CharField(_("Host"), max_length=255, blank=True)
    status = models.CharField(_("Status"), max_length=20, choices=STATUS_CHOICES, default="active")
    auto_renew = models.BooleanField(
        _("Auto Renew"), default=False, help_text=_("Renew panel accounts automatically after payment")
    )

    created_at = models.DateTimeField(_("Created At"), default=timezone.now)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Server")
        verbose_name_plural = _("Servers")
        ordering: ClassVar = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.host})" if self.host else self.name


class PanelCredentials(models.Model):
    """
    🔐 Per-reseller credentials for every supported panel family.

    Secrets are stored Fernet-encrypted; use the get_/set_ helpers.
    """

    SECRET_FIELDS: ClassVar[tuple[str, ...]] = (
        "payment_webhook_secret",
        "rush_password",
        "rush_token",
        "natv_api_key",
        "the_best_password",
        "xui_db_password",
        "xui_api_key",
    )

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="panel_credentials",
        verbose_name=_("Reseller"),
    )

    # Payment processor
    encrypted_payment_webhook_secret = models.TextField(blank=True)

    # Rush (keyed-list HTTP API)
    rush_base_url = models.URLField(_("Rush Base URL"), blank=True)
    rush_username = models.CharField(_("Rush Username"), max_length=150, blank=True)
    encrypted_rush_password = models.TextField(blank=True)
    encrypted_rush_token = models.TextField(blank=True)

    # NATV (activation API)
    natv_base_url = models.URLField(_("NATV Base URL"), blank=True)
    encrypted_natv_api_key = models.TextField(blank=True)
    natv_department_id = models.CharField(_("NATV Department"), max_length=50, blank=True)

    # The Best (token-login API)
    the_best_base_url = models.URLField(_("The Best Base URL"), blank=True)
    the_best_username = models.CharField(_("The Best Username"), max_length=150, blank=True)
    encrypted_the_best_password = models.TextField(blank=True)

    # XUI (direct panel database)
    xui_enabled = models.BooleanField(_("XUI Enabled"), default=False)
    xui_db_host = models.CharField(_("XUI Database Host"), max_length=255, blank=True)
    xui_db_port = models.CharField(_("XUI Database Port"), max_length=20, blank=True)
    xui_db_name = models.CharField(_("XUI Database Name"), max_length=100, blank=True)
    xui_db_user = models.CharField(_("XUI Database User"), max_length=100, blank=True)
    encrypted_xui_db_password = models.TextField(blank=True)

    # XUI One (HTTP line API, used when no panel database is configured)
    xui_api_base_url = models.URLField(_("XUI One API URL"), blank=True)
    xui_api_access_code = models.CharField(_("XUI One Access Code"), max_length=100, blank=True)
    encrypted_xui_api_key = models.TextField(blank=True)

    # VPlay (integration URL)
    vplay_integration_url = models.URLField(_("VPlay Integration URL"), blank=True)
    vplay_key_message = models.CharField(
        _("VPlay Key Message"), max_length=100, blank=True, help_text=_("Sent as `key`; XCLOUD when blank")
    )

    created_at = models.DateTimeField(_("Created At"), default=timezone.now)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Panel Credentials")
        verbose_name_plural = _("Panel Credentials")

    def __str__(self) -> str:
        return f"🔐 Panel credentials for {self.owner}"

    def get_secret(self, name: str) -> str:
        """Decrypt and return one of SECRET_FIELDS"""
        if name not in self.SECRET_FIELDS:
            raise ValueError(f"Unknown secret field: {name}")
        return decrypt_sensitive_data(getattr(self, f"encrypted_{name}"))

    def set_secret(self, name: str, value: str) -> None:
        """Encrypt and store one of SECRET_FIELDS (caller saves)"""
        if name not in self.SECRET_FIELDS:
            raise ValueError(f"Unknown secret field: {name}")
        setattr(self, f"encrypted_{name}", encrypt_sensitive_data(value))

    @property
    def rush_configured(self) -> bool:
        return bool(self.rush_username and (self.encrypted_rush_password or self.encrypted_rush_token))

    @property
    def natv_configured(self) -> bool:
        return bool(self.encrypted_natv_api_key)

    @property
    def the_best_configured(self) -> bool:
        return bool(self.the_best_username and self.encrypted_the_best_password)

    @property
    def xui_configured(self) -> bool:
        return bool(self.xui_enabled and self.xui_db_host and self.xui_db_name and self.xui_db_user)

    @property
    def xui_api_configured(self) -> bool:
        return bool(self.xui_api_base_url and self.xui_api_access_code and self.encrypted_xui_api_key)

    @property
    def vplay_configured(self) -> bool:
        return bool(self.vplay_integration_url.strip())
