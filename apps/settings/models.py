"""
System Settings models for ResellerHub
Runtime-tunable business configuration with type conversion and caching support.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, ClassVar, Literal, cast

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

# Valid data types for system settings
SettingDataType = Literal["string", "integer", "boolean", "decimal", "list", "json"]


class SystemSetting(models.Model):
    """⚙️ System setting with type validation and caching support"""

    DATA_TYPE_CHOICES: ClassVar[list[tuple[str, str]]] = [
        ("string", cast(str, _("String"))),
        ("integer", cast(str, _("Integer"))),
        ("boolean", cast(str, _("Boolean"))),
        ("decimal", cast(str, _("Decimal"))),
        ("list", cast(str, _("List"))),
        ("json", cast(str, _("JSON"))),
    ]

    key = models.CharField(
        _("Key"),
        max_length=100,
        unique=True,
        help_text=_('Unique setting identifier (e.g., "billing.duplicate_window_seconds")'),
    )

    category = models.CharField(
        _("Category"), max_length=50, default="system", help_text=_("Setting category for organization")
    )

    name = models.CharField(_("Name"), max_length=200, blank=True, help_text=_("Human-readable setting name"))

    description = models.TextField(_("Description"), blank=True, help_text=_("What this setting controls"))

    data_type = models.CharField(
        _("Data Type"),
        max_length=20,
        choices=DATA_TYPE_CHOICES,
        default="string",
        help_text=_("Type of data this setting stores"),
    )

    value = models.JSONField(_("Value"), null=True, blank=True, help_text=_("Current setting value"))

    default_value = models.JSONField(
        _("Default Value"), null=True, blank=True, help_text=_("Default value to use if setting is not configured")
    )

    is_active = models.BooleanField(
        _("Is Active"), default=True, help_text=_("Whether this setting is currently active")
    )

    created_at = models.DateTimeField(
        _("Created At"), default=timezone.now, help_text=_("When this setting was created")
    )

    updated_at = models.DateTimeField(_("Updated At"), auto_now=True, help_text=_("When this setting was last updated"))

    class Meta:
        verbose_name = _("System Setting")
        verbose_name_plural = _("System Settings")
        ordering: ClassVar = ["category", "key"]
        indexes: ClassVar = [
            models.Index(fields=["category"], name="settings_category_idx"),
        ]

    def __str__(self) -> str:
        return f"⚙️ {self.key}: {self.get_display_value()}"

    def clean(self) -> None:
        """Validate setting data"""
        super().clean()

        # Validate key format (category.setting_name)
        if self.key and "." not in self.key:
            raise ValidationError({"key": _('Setting key must be in format "category.setting_name"')})

        if self.key and not self.category:
            self.category = self.key.split(".", 1)[0]

    def get_typed_value(self) -> str | int | bool | Decimal | list[Any] | dict[str, Any] | None:
        """Get the setting value converted to its proper Python type"""
        if self.value is None:
            return self.get_typed_default_value()

        return self._convert(self.value)

    def get_typed_default_value(self) -> str | int | bool | Decimal | list[Any] | dict[str, Any] | None:
        """Get the default value converted to its proper Python type"""
        if self.default_value is None:
            return None

        return self._convert(self.default_value)

    def _convert(self, raw_value: Any) -> str | int | bool | Decimal | list[Any] | dict[str, Any] | None:
        if self.data_type == "decimal":
            return Decimal(str(raw_value))
        if self.data_type == "integer":
            return int(raw_value)
        return cast("str | int | bool | Decimal | list[Any] | dict[str, Any] | None", raw_value)

    def get_display_value(self) -> str:
        """Get a human-readable representation of the current value"""
        typed_value = self.get_typed_value()

        if typed_value is None:
            return cast(str, _("(not set)"))

        if self.data_type in ("list", "json"):
            try:
                return json.dumps(typed_value, ensure_ascii=False)
            except (TypeError, ValueError):
                return str(typed_value)
        return str(typed_value)
