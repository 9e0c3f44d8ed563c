import json
import logging
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from django_ratelimit.decorators import ratelimit

from apps.common.types import Err, Ok, Result

from .reconciliation import PaymentReconciliationService
from .webhooks.payments import PaymentEventParser, WebhookSecretVerifier

logger = logging.getLogger(__name__)


# ===============================================================================
# PAYMENT WEBHOOK ENDPOINT
# ===============================================================================


@method_decorator(
    [
        csrf_exempt,
        ratelimit(key="ip", rate="60/m", method="POST", block=False),
        ratelimit(key="ip", rate="1000/h", method="POST", block=False),
    ],
    name="dispatch",
)
class PaymentWebhookView(View):
    """
    💳 Payment processor webhook

    POST /integrations/webhooks/payments/ → confirmed payments renew customers
    """

    source_name = "cakto"
    payment_method = "pix"
    http_method_names = ["post"]  # noqa: RUF012

    def post(self, request: HttpRequest) -> JsonResponse:
        """📨 Authenticate, parse and reconcile one delivery"""
        if getattr(request, "limited", False):
            logger.warning(f"🚦 [Payment Webhook] Rate limit exceeded for {self.get_client_ip(request)}")
            return JsonResponse({"success": False, "error": "Rate limit exceeded"}, status=429)

        try:
            parsed = self._parse_request(request)
            match parsed:
                case Err(message):
                    return JsonResponse({"success": False, "error": message}, status=400)
                case Ok(payload):
                    pass

            match self._authenticate(request, payload):
                case Err(message):
                    logger.warning(f"🔐 [Payment Webhook] Rejected delivery from {self.get_client_ip(request)}")
                    return JsonResponse({"success": False, "error": message}, status=401)
                case Ok(secret_match):
                    if secret_match.owner_id is not None:
                        logger.info(f"🔐 [Payment Webhook] Authenticated with reseller {secret_match.owner_id} secret")

            event = PaymentEventParser(source=self.source_name, method=self.payment_method).parse(payload)
            outcome = PaymentReconciliationService(method=self.payment_method).reconcile(event)
            logger.info(f"📨 [Payment Webhook] {event.transaction_id or '-'} → {outcome.status}")
            return JsonResponse(outcome.body, status=outcome.http_status)

        except Exception:
            logger.exception(f"💥 [Payment Webhook] Critical error processing {self.source_name} webhook")
            return JsonResponse({"success": False, "error": "Internal error"}, status=500)

    def _parse_request(self, request: HttpRequest) -> Result[dict[str, Any], str]:
        """Parse and validate the incoming request payload."""
        if request.content_type != "application/json":
            return Err("Content-Type must be application/json")

        try:
            payload = json.loads(request.body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return Err("Invalid JSON payload")
        if not isinstance(payload, dict):
            return Err("Invalid JSON payload")
        return Ok(payload)

    def _authenticate(self, request: HttpRequest, payload: dict[str, Any]) -> Result[Any, str]:
        received = WebhookSecretVerifier.extract_secret(request.headers, payload)
        return WebhookSecretVerifier.verify(received)

    def get_client_ip(self, request: HttpRequest) -> str:
        """🌐 Get client IP address"""
        x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
        ip = x_forwarded_for.split(",")[0] if x_forwarded_for else request.META.get("REMOTE_ADDR", "")
        return ip.strip()
