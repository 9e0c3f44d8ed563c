# ===============================================================================
# PROVISIONING API URLS - MANUAL RENEWAL 🔁
# ===============================================================================

from django.urls import path

from . import views

urlpatterns = [
    path("customers/<int:customer_id>/renew/", views.customer_renew_api, name="customer_renew"),
]
