"""
Django admin configuration for Customers app
"""


from typing import ClassVar

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import Customer, ResellerAccount


@admin.register(ResellerAccount)
class ResellerAccountAdmin(admin.ModelAdmin):
    """Reseller credit balances and roles"""

    list_display: ClassVar[tuple[str, ...]] = ('user', 'role', 'credits', 'is_active', 'updated_at')
    list_filter: ClassVar[tuple[str, ...]] = ('role', 'is_active')
    search_fields: ClassVar[tuple[str, ...]] = ('user__username', 'user__email')
    readonly_fields: ClassVar[tuple[str, ...]] = ('created_at', 'updated_at')


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Subscriber admin with panel and billing details"""

    list_display: ClassVar[tuple[str, ...]] = (
        'name', 'phone', 'username', 'owner', 'server', 'plan', 'due_date', 'status'
    )

    list_filter: ClassVar[tuple[str, ...]] = ('status', 'server', 'plan', 'owner')

    search_fields: ClassVar[tuple[str, ...]] = ('name', 'phone', 'username')

    fieldsets: ClassVar[tuple] = (
        (_('Basic Information'), {
            'fields': ('owner', 'name', 'phone', 'status')
        }),
        (_('Panel Access'), {
            'fields': ('server', 'username', 'screens')
        }),
        (_('Billing'), {
            'fields': ('plan', 'custom_price', 'due_date')
        }),
        (_('Notes'), {
            'fields': ('notes',),
            'classes': ('collapse',)
        }),
        (_('Audit Information'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    readonly_fields: ClassVar[tuple[str, ...]] = ('created_at', 'updated_at')
    list_select_related: ClassVar[tuple[str, ...]] = ('owner', 'server', 'plan')
