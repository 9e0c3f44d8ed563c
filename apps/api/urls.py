# ===============================================================================
# RESELLERHUB API MAIN URLS 🚀
# ===============================================================================
#
# URL Structure:
#   /api/provisioning/  → Panel renewal APIs
#

from django.urls import include, path

from .provisioning import urls as provisioning_urls

app_name = "api"

urlpatterns = [
    path("provisioning/", include((provisioning_urls, "provisioning"))),
]
