"""
NATV Panel Gateway - ResellerHub
Activation API: department-scoped, renews by a whole number of months.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, cast

from django.conf import settings

from apps.common.constants import DAYS_PER_MONTH, HTTP_SERVER_ERROR
from apps.common.types import Err, Ok, Result

from .base import (
    Found,
    HttpPanelSession,
    LookupResult,
    PanelConfigurationError,
    PanelGateway,
    PanelRecord,
    PanelRenewalOutcome,
    PanelSession,
    PanelTransientError,
    RenewalRequest,
    first_list,
    json_or_empty,
)

if TYPE_CHECKING:
    from apps.provisioning.models import PanelCredentials

logger = logging.getLogger(__name__)

NATV_DAYS_TO_MONTHS: Final[dict[int, int]] = {30: 1, 60: 2, 90: 3, 120: 4, 150: 5, 180: 6, 360: 12, 365: 12}
NATV_ALLOWED_MONTHS: Final[tuple[int, ...]] = (1, 2, 3, 4, 5, 6, 12)
NATV_DEPARTMENT_KEYS: Final[tuple[str, ...]] = ("departments", "data", "items", "results")


def natv_months(duration_days: int) -> int:
    """Map a day count onto the activation API's allowed month counts"""
    months = NATV_DAYS_TO_MONTHS.get(duration_days) or max(1, round(duration_days / DAYS_PER_MONTH))
    if months in NATV_ALLOWED_MONTHS:
        return months
    # Nearest allowed value; the smaller one wins a tie
    return min(NATV_ALLOWED_MONTHS, key=lambda allowed: (abs(allowed - months), allowed))


@dataclass(frozen=True)
class NatvConfig:
    base_url: str
    api_key: str
    department_id: str = ""


class NatvGateway(PanelGateway):
    """📺 NATV activation API"""

    family = "natv"
    display_name = "NATV"

    def load_config(self, credentials: PanelCredentials | None) -> Result[NatvConfig, str]:
        if credentials is not None and credentials.natv_configured and credentials.natv_base_url:
            return Ok(
                NatvConfig(
                    base_url=credentials.natv_base_url.rstrip("/"),
                    api_key=credentials.get_secret("natv_api_key"),
                    department_id=credentials.natv_department_id.strip(),
                )
            )

        api_key = getattr(settings, "NATV_API_KEY", "")
        base_url = getattr(settings, "NATV_BASE_URL", "")
        if api_key and base_url:
            return Ok(NatvConfig(base_url=base_url.rstrip("/"), api_key=api_key))
        return Err("NATV API key or base URL not configured")

    def _connect(self, owner_id: int, config: NatvConfig) -> PanelSession:
        session = HttpPanelSession(self.family, owner_id, config)
        session.http.headers.update({"Authorization": f"Bearer {config.api_key}"})
        try:
            session.state["department_id"] = config.department_id or self._discover_department(session)
        except Exception:
            session.close()
            raise
        return session

    def _discover_department(self, session: HttpPanelSession) -> str:
        """First department visible to the API key"""
        response = session.request("GET", f"{session.config.base_url}/departments")
        if response.status_code >= HTTP_SERVER_ERROR:
            raise PanelTransientError(
                f"NATV departments unavailable: HTTP {response.status_code}",
                panel=self.family,
                http_status=response.status_code,
            )
        if not response.ok:
            raise PanelConfigurationError(
                f"NATV department lookup failed: HTTP {response.status_code}",
                panel=self.family,
                http_status=response.status_code,
            )

        for department in first_list(json_or_empty(response), NATV_DEPARTMENT_KEYS):
            department_id = department.get("id") if isinstance(department, dict) else department
            if department_id not in (None, ""):
                logger.info(f"🏢 [NATV] Using department {department_id} for owner {session.owner_id}")
                return str(department_id)

        raise PanelConfigurationError("NATV account has no department", panel=self.family)

    def credits_for(self, request: RenewalRequest) -> int:
        return natv_months(request.duration_days)

    def resolve(self, session: PanelSession, username: str) -> LookupResult:
        # Activation is keyed by username; the panel reports unknown users on renew
        return Found(PanelRecord(record_id=username.strip(), username=username.strip(), kind="activation"))

    def renew(self, session: PanelSession, record: PanelRecord, request: RenewalRequest) -> PanelRenewalOutcome:
        http = cast(HttpPanelSession, session)
        months = natv_months(request.duration_days)
        body: dict[str, Any] = {"username": record.username, "months": months}
        if department_id := http.state.get("department_id"):
            body["department_id"] = department_id

        logger.info(f"📺 [NATV] Activating {record.username} for {months} month(s)")
        response = http.request("POST", f"{http.config.base_url}/user/activation", json=body)
        payload = json_or_empty(response)

        if not response.ok:
            return PanelRenewalOutcome(
                False,
                f"NATV activation failed: HTTP {response.status_code}",
                data=payload if isinstance(payload, dict) else {},
            )
        return PanelRenewalOutcome(
            True,
            f"Renewed {months} month(s) on NATV",
            data=payload if isinstance(payload, dict) else {},
        )
