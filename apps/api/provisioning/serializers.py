# ===============================================================================
# PROVISIONING API SERIALIZERS 📊
# ===============================================================================

from decimal import Decimal
from typing import Any

from rest_framework import serializers

from apps.billing.models import Payment


class ManualRenewalRequestSerializer(serializers.Serializer):
    """
    Input for a manual renewal. Every field is optional: duration and
    amount default to the customer's plan (or custom price).
    """

    duration_days = serializers.IntegerField(min_value=1, max_value=3650, required=False)
    amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )
    method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES, default="pix")
    username = serializers.CharField(max_length=150, required=False, allow_blank=True)
    record_payment = serializers.BooleanField(default=True)

    def validate_username(self, value: str) -> str:
        return value.strip()

    def to_service_kwargs(self) -> dict[str, Any]:
        data = self.validated_data
        return {
            "duration_days": data.get("duration_days"),
            "amount": data.get("amount"),
            "method": data["method"],
            "username": data.get("username") or None,
            "record_payment": data["record_payment"],
        }

