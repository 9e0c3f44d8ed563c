"""
Django admin configuration for provisioning models.
Reseller panel servers and the encrypted credentials for each panel family.
"""

from typing import Any

from django import forms
from django.contrib import admin
from django.http import HttpRequest
from django.utils.html import format_html
from django.utils.safestring import SafeString
from django.utils.translation import gettext_lazy as _

from .models import PanelCredentials, Server
from .panel_registry import detect_family

# ===============================================================================
# SERVER ADMIN
# ===============================================================================

@admin.register(Server)
class ServerAdmin(admin.ModelAdmin):
    """Panel servers and their auto-renew flag"""

    list_display = ['name', 'host', 'owner', 'family_display', 'status', 'auto_renew']
    list_filter = ['status', 'auto_renew', 'owner']
    search_fields = ['name', 'host']
    readonly_fields = ['created_at', 'updated_at']

    def family_display(self, obj: Server) -> SafeString:
        family = detect_family(obj)
        if family is None:
            return format_html('<span style="color: gray;">{}</span>', _('unknown'))
        return format_html('<code>{}</code>', family)
    family_display.short_description = _('Panel Family')


# ===============================================================================
# PANEL CREDENTIALS ADMIN 🔐
# ===============================================================================

class PanelCredentialsForm(forms.ModelForm):
    """
    Secrets are write-only: blank inputs keep the stored value, anything
    typed replaces it (encrypted on save).
    """

    payment_webhook_secret = forms.CharField(required=False, widget=forms.PasswordInput, label=_('Webhook Secret'))
    rush_password = forms.CharField(required=False, widget=forms.PasswordInput, label=_('Rush Password'))
    rush_token = forms.CharField(required=False, widget=forms.PasswordInput, label=_('Rush Token'))
    natv_api_key = forms.CharField(required=False, widget=forms.PasswordInput, label=_('NATV API Key'))
    the_best_password = forms.CharField(required=False, widget=forms.PasswordInput, label=_('The Best Password'))
    xui_db_password = forms.CharField(required=False, widget=forms.PasswordInput, label=_('XUI Database Password'))
    xui_api_key = forms.CharField(required=False, widget=forms.PasswordInput, label=_('XUI One API Key'))

    class Meta:
        model = PanelCredentials
        exclude = ["created_at", *(f"encrypted_{name}" for name in PanelCredentials.SECRET_FIELDS)]

    def save(self, commit: bool = True) -> PanelCredentials:
        credentials: PanelCredentials = super().save(commit=False)
        for name in PanelCredentials.SECRET_FIELDS:
            value = self.cleaned_data.get(name)
            if value:
                credentials.set_secret(name, value)
        if commit:
            credentials.save()
        return credentials


@admin.register(PanelCredentials)
class PanelCredentialsAdmin(admin.ModelAdmin):
    """Per-reseller panel credentials (secrets never displayed)"""

    form = PanelCredentialsForm
    list_display = [
        'owner',
        'rush_configured',
        'natv_configured',
        'the_best_configured',
        'xui_configured',
        'xui_api_configured',
        'vplay_configured',
    ]
    search_fields = ['owner__username']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        (_('Reseller'), {
            'fields': ('owner', 'payment_webhook_secret')
        }),
        (_('Rush'), {
            'fields': ('rush_base_url', 'rush_username', 'rush_password', 'rush_token'),
            'classes': ('collapse',),
        }),
        (_('NATV'), {
            'fields': ('natv_base_url', 'natv_api_key', 'natv_department_id'),
            'classes': ('collapse',),
        }),
        (_('The Best'), {
            'fields': ('the_best_base_url', 'the_best_username', 'the_best_password'),
            'classes': ('collapse',),
        }),
        (_('XUI Database'), {
            'fields': ('xui_enabled', 'xui_db_host', 'xui_db_port', 'xui_db_name', 'xui_db_user', 'xui_db_password'),
            'classes': ('collapse',),
        }),
        (_('XUI One API'), {
            'fields': ('xui_api_base_url', 'xui_api_access_code', 'xui_api_key'),
            'classes': ('collapse',),
        }),
        (_('VPlay'), {
            'fields': ('vplay_integration_url', 'vplay_key_message'),
            'classes': ('collapse',),
        }),
        (_('Audit Information'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    @admin.display(boolean=True, description=_('Rush'))
    def rush_configured(self, obj: PanelCredentials) -> bool:
        return obj.rush_configured

    @admin.display(boolean=True, description=_('NATV'))
    def natv_configured(self, obj: PanelCredentials) -> bool:
        return obj.natv_configured

    @admin.display(boolean=True, description=_('The Best'))
    def the_best_configured(self, obj: PanelCredentials) -> bool:
        return obj.the_best_configured

    @admin.display(boolean=True, description=_('XUI'))
    def xui_configured(self, obj: PanelCredentials) -> bool:
        return obj.xui_configured

    @admin.display(boolean=True, description=_('XUI One'))
    def xui_api_configured(self, obj: PanelCredentials) -> bool:
        return obj.xui_api_configured

    @admin.display(boolean=True, description=_('VPlay'))
    def vplay_configured(self, obj: PanelCredentials) -> bool:
        return obj.vplay_configured

    def get_readonly_fields(self, request: HttpRequest, obj: Any = None) -> list[str]:
        readonly = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            readonly.append('owner')
        return readonly
