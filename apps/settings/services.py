"""
System Settings service layer for ResellerHub
Centralized configuration lookup with caching and type safety.
"""

from __future__ import annotations

import decimal
import json
import logging
from decimal import Decimal
from typing import Any, ClassVar

from django.core.cache import cache

from .models import SystemSetting

logger = logging.getLogger(__name__)

# Type alias for setting values
SettingValue = str | int | bool | Decimal | list[Any] | dict[str, Any] | None

# Sentinel so cached None/False values are distinguishable from a cache miss
_MISSING = object()


class SettingsService:
    """⚙️ Centralized settings management with caching"""

    # Cache configuration
    CACHE_PREFIX: ClassVar[str] = "resellerhub_setting"
    CACHE_TIMEOUT: ClassVar[int] = 3600  # 1 hour
    DEFAULT_CACHE_TIMEOUT: ClassVar[int] = 300  # 5 minutes for defaults
    CACHE_VERSION: ClassVar[int] = 1

    # Default settings values
    DEFAULT_SETTINGS: ClassVar[dict[str, Any]] = {
        # Payment reconciliation
        "billing.duplicate_window_seconds": 120,
        "billing.duplicate_amount_tolerance": "0.01",
        "billing.plan_price_tolerance": "0.10",
        "billing.default_duration_days": 30,
        # Panel provisioning
        "provisioning.panel_request_timeout_seconds": 15,
        "provisioning.panel_db_connect_timeout_seconds": 10,
    }

    @classmethod
    def _get_cache_key(cls, key: str) -> str:
        """Generate cache key for setting"""
        return f"{cls.CACHE_PREFIX}:{key}"

    @classmethod
    def get_setting(cls, key: str, default: Any = None) -> SettingValue:
        """
        🔍 Get setting value with caching

        Args:
            key: Setting key (e.g., 'billing.duplicate_window_seconds')
            default: Default value if setting not found in DB or DEFAULT_SETTINGS

        Returns:
            Setting value or default
        """
        cache_key = cls._get_cache_key(key)

        cached_value = cache.get(cache_key, _MISSING, version=cls.CACHE_VERSION)
        if cached_value is not _MISSING:
            logger.debug("✅ [Settings] Cache hit for key: %s", key)
            return cached_value  # type: ignore[no-any-return]

        try:
            setting = SystemSetting.objects.get(key=key, is_active=True)
        except SystemSetting.DoesNotExist:
            fallback_value = cls.DEFAULT_SETTINGS.get(key, default)
            cache.set(cache_key, fallback_value, timeout=cls.DEFAULT_CACHE_TIMEOUT, version=cls.CACHE_VERSION)
            logger.debug("⚠️ [Settings] Using default for missing key: %s", key)
            return fallback_value  # type: ignore[no-any-return]

        value = setting.get_typed_value()
        cache.set(cache_key, value, timeout=cls.CACHE_TIMEOUT, version=cls.CACHE_VERSION)
        logger.debug("⚡ [Settings] Database hit for key: %s (cached)", key)
        return value

    @classmethod
    def set_setting(cls, key: str, value: Any, data_type: str | None = None) -> SystemSetting:
        """
        🔧 Create or update a setting and invalidate its cache entry
        """
        data_type = data_type or cls._infer_data_type(value)
        json_value = cls._prepare_value_for_json(value)

        setting, _created = SystemSetting.objects.update_or_create(
            key=key,
            defaults={
                "value": json_value,
                "data_type": data_type,
                "category": key.split(".", 1)[0],
                "default_value": cls._prepare_value_for_json(cls.DEFAULT_SETTINGS.get(key)),
            },
        )
        cache.delete(cls._get_cache_key(key), version=cls.CACHE_VERSION)

        logger.info("⚡ [Settings] Updated %s = %s", key, value)
        return setting

    @classmethod
    def get_integer_setting(cls, key: str, default: int = 0) -> int:
        """🔢 Get integer setting with type safety"""
        value = cls.get_setting(key, default)
        try:
            return int(value)  # type: ignore[arg-type]
        except (ValueError, TypeError):
            logger.warning("⚠️ [Settings] Invalid integer value for %s: %s", key, value)
            return default

    @classmethod
    def get_decimal_setting(cls, key: str, default: Decimal | None = None) -> Decimal:
        """💰 Get decimal setting with type safety"""
        value = cls.get_setting(key, default)
        try:
            return Decimal(str(value))
        except (ValueError, TypeError, decimal.InvalidOperation):
            logger.warning("⚠️ [Settings] Invalid decimal value for %s: %s", key, value)
            return default or Decimal("0")

    @staticmethod
    def _infer_data_type(value: Any) -> str:
        if isinstance(value, bool):
            return "boolean"
        if isinstance(value, int):
            return "integer"
        if isinstance(value, Decimal | float):
            return "decimal"
        if isinstance(value, list):
            return "list"
        if isinstance(value, dict):
            return "json"
        return "string"

    @staticmethod
    def _prepare_value_for_json(value: Any) -> Any:
        """Decimals are stored as strings so JSONField round-trips them exactly"""
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, list | dict):
            return json.loads(json.dumps(value, default=str))
        return value
