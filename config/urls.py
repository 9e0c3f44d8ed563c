"""
URL configuration for ResellerHub
Payment webhooks and the dashboard API.
"""

from django.contrib import admin

# ===============================================================================
# MAIN URL PATTERNS
# ===============================================================================
from django.urls import include, path

urlpatterns = [
    # Django admin interface
    path("admin/", admin.site.urls),
    # Payment processor webhooks
    path("integrations/", include("apps.integrations.urls")),
    # Centralized API endpoints (v1)
    path("api/", include("apps.api.urls")),
]
