from django.urls import path

from . import views

app_name = "integrations"

urlpatterns = [
    # 💳 Payment processor webhooks
    path("webhooks/payments/", views.PaymentWebhookView.as_view(), name="payment_webhook"),
]
