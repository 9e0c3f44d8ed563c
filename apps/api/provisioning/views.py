# ===============================================================================
# PROVISIONING API VIEWS - MANUAL PANEL RENEWAL 🔁
# ===============================================================================

import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.request import Request
from rest_framework.response import Response

from apps.common.types import Err, Ok
from apps.customers.models import Customer
from apps.provisioning.manual_renewal import ManualRenewalService

from ..core.permissions import IsCustomerOwnerOrStaff
from ..core.throttling import RenewalAPIThrottle
from .serializers import ManualRenewalRequestSerializer

logger = logging.getLogger(__name__)


@api_view(["POST"])
@permission_classes([IsCustomerOwnerOrStaff])
@throttle_classes([RenewalAPIThrottle])
def customer_renew_api(request: Request, customer_id: int) -> Response:
    """
    🔁 Manual Renewal API

    POST /api/provisioning/customers/<id>/renew/

    Request Body (all optional):
    {
        "duration_days": 30,
        "amount": "35.00",
        "method": "pix",
        "username": "login1",
        "record_payment": true
    }

    Response:
    {
        "success": true,
        "customer_id": 42,
        "new_due_date": "2026-11-18",
        "server_renewals": [{"panel": "rush", "username": "login1", "success": true, "result": "..."}]
    }
    """
    customer = get_object_or_404(Customer.objects.select_related("plan", "server"), pk=customer_id)
    permission = IsCustomerOwnerOrStaff()
    if not permission.has_object_permission(request, None, customer):
        # Same answer as a missing customer so ids of other resellers do not leak
        return Response({"success": False, "error": "Customer not found"}, status=status.HTTP_404_NOT_FOUND)

    serializer = ManualRenewalRequestSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"⚠️ [Manual Renewal API] Validation failed for fields: {list(serializer.errors.keys())}")
        return Response(
            {"success": False, "error": "Validation failed", "errors": serializer.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        result = ManualRenewalService.renew_customer(customer, **serializer.to_service_kwargs())
    except Exception:
        logger.exception(f"🔥 [Manual Renewal API] Renewal of customer {customer.pk} failed")
        return Response(
            {"success": False, "error": "Renewal failed. Please try again."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    match result:
        case Ok(outcome):
            return Response({"success": True, **outcome.as_dict()}, status=status.HTTP_200_OK)
        case Err(message):
            return Response({"success": False, "error": message}, status=status.HTTP_400_BAD_REQUEST)
