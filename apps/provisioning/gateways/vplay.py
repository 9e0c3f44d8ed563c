"""
VPlay Panel Gateway - ResellerHub
Per-reseller integration URL: one keyed POST renews a username for a number of days.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, Final, cast

from apps.common.constants import DAYS_PER_MONTH
from apps.common.types import Err, Ok, Result

from .base import (
    Found,
    HttpPanelSession,
    LookupResult,
    PanelGateway,
    PanelRecord,
    PanelRenewalOutcome,
    PanelSession,
    RenewalRequest,
    json_or_empty,
)

if TYPE_CHECKING:
    from apps.provisioning.models import PanelCredentials

logger = logging.getLogger(__name__)

VPLAY_DEFAULT_KEY_MESSAGE: Final[str] = "XCLOUD"
VPLAY_RENEW_ACTION: Final[str] = "renew"


def vplay_credits(duration_days: int) -> int:
    """Months rounded half up, minimum 1 (75 days → 3)"""
    months = (Decimal(duration_days) / DAYS_PER_MONTH).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(1, int(months))


@dataclass(frozen=True)
class VplayConfig:
    integration_url: str
    key_message: str = VPLAY_DEFAULT_KEY_MESSAGE


class VplayGateway(PanelGateway):
    """▶️ VPlay integration URL"""

    family = "vplay"
    display_name = "VPlay"

    def load_config(self, credentials: PanelCredentials | None) -> Result[VplayConfig, str]:
        if credentials is None or not credentials.vplay_configured:
            return Err("VPlay integration URL not configured")
        return Ok(
            VplayConfig(
                integration_url=credentials.vplay_integration_url.strip().rstrip("/"),
                key_message=credentials.vplay_key_message.strip() or VPLAY_DEFAULT_KEY_MESSAGE,
            )
        )

    def _connect(self, owner_id: int, config: VplayConfig) -> PanelSession:
        return HttpPanelSession(self.family, owner_id, config)

    def credits_for(self, request: RenewalRequest) -> int:
        return vplay_credits(request.duration_days)

    def resolve(self, session: PanelSession, username: str) -> LookupResult:
        # The integration renews by username; unknown users are reported on renew
        return Found(PanelRecord(record_id=username.strip(), username=username.strip(), kind="integration"))

    def renew(self, session: PanelSession, record: PanelRecord, request: RenewalRequest) -> PanelRenewalOutcome:
        http = cast(HttpPanelSession, session)
        body: dict[str, Any] = {
            "key": http.config.key_message,
            "action": VPLAY_RENEW_ACTION,
            "username": record.username,
            "duration": request.duration_days,
        }

        logger.info(f"▶️ [VPlay] Renewing {record.username} for {request.duration_days} day(s)")
        response = http.request("POST", http.config.integration_url, json=body)
        payload = json_or_empty(response)
        data = payload if isinstance(payload, dict) else {}

        if not response.ok:
            return PanelRenewalOutcome(False, f"VPlay renewal failed: HTTP {response.status_code}", data=data)
        if data.get("success") is False:
            return PanelRenewalOutcome(
                False, f"VPlay renewal rejected: {data.get('error') or data.get('message') or 'no reason given'}", data=data
            )
        return PanelRenewalOutcome(True, f"Renewed {request.duration_days} day(s) on VPlay", data=data)
