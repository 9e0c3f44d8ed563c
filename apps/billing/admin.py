"""
Django admin configuration for billing models.
Reseller plan catalogs and the payment rows recorded for each renewal.
"""

from django.contrib import admin
from django.utils.html import format_html
from django.utils.safestring import SafeString
from django.utils.translation import gettext_lazy as _

from .models import Payment, Plan

# ===============================================================================
# PLAN CATALOG ADMIN
# ===============================================================================

@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    """Per-reseller plan catalog"""

    list_display = ['name', 'owner', 'price_display', 'duration_days']
    list_filter = ['owner', 'duration_days']
    search_fields = ['name']
    ordering = ['owner', 'price']

    def price_display(self, obj: Plan) -> str:
        return f"R${obj.price:.2f}"
    price_display.short_description = _('Price')


# ===============================================================================
# PAYMENT ADMIN
# ===============================================================================

@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Payments recorded by webhooks and manual renewals"""

    list_display = [
        'customer',
        'amount_display',
        'method',
        'confirmed_display',
        'source',
        'external_reference',
        'payment_date',
        'created_at',
    ]
    list_filter = ['method', 'confirmed', 'source', 'payment_date']
    search_fields = ['customer__name', 'customer__phone', 'external_reference']
    date_hierarchy = 'payment_date'
    readonly_fields = ['created_at']
    list_select_related = ['customer']

    fieldsets = (
        (_('Payment'), {
            'fields': ('customer', 'amount', 'method', 'confirmed', 'payment_date')
        }),
        (_('Origin'), {
            'fields': ('source', 'external_reference', 'created_at')
        }),
    )

    def amount_display(self, obj: Payment) -> str:
        return f"R${obj.amount:.2f}"
    amount_display.short_description = _('Amount')

    def confirmed_display(self, obj: Payment) -> SafeString:
        if obj.confirmed:
            return format_html('<span style="color: green;">✅ Confirmed</span>')
        return format_html('<span style="color: orange;">⏳ Pending</span>')
    confirmed_display.short_description = _('Status')
