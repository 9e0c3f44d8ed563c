# ===============================================================================
# RESELLERHUB API APP CONFIGURATION 🛠️
# ===============================================================================

from django.apps import AppConfig


class ApiConfig(AppConfig):
    """
    Configuration for ResellerHub's centralized API app.

    REST endpoints used by the reseller dashboard; currently the manual
    renewal trigger under /api/provisioning/.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.api"
    label = "resellerhub_api"
    verbose_name = "ResellerHub API"
