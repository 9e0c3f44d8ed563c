"""
Django admin configuration for runtime business settings.
"""

from typing import ClassVar

from django.contrib import admin
from django.core.cache import cache
from django.http import HttpRequest

from .models import SystemSetting
from .services import SettingsService


@admin.register(SystemSetting)
class SystemSettingAdmin(admin.ModelAdmin):
    """⚙️ Tunable reconciliation and provisioning values"""

    list_display: ClassVar[tuple[str, ...]] = ('key', 'category', 'data_type', 'value', 'is_active', 'updated_at')
    list_filter: ClassVar[tuple[str, ...]] = ('category', 'data_type', 'is_active')
    search_fields: ClassVar[tuple[str, ...]] = ('key', 'name', 'description')
    readonly_fields: ClassVar[tuple[str, ...]] = ('created_at', 'updated_at')

    def save_model(self, request: HttpRequest, obj: SystemSetting, form: object, change: bool) -> None:
        super().save_model(request, obj, form, change)
        # Edits take effect immediately instead of after the cache timeout
        cache.delete(SettingsService._get_cache_key(obj.key), version=SettingsService.CACHE_VERSION)
