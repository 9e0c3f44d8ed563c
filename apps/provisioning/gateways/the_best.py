"""
The Best Panel Gateway - ResellerHub
Token-login HTTP API: log in once per session, search lines, renew by months.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, cast

from apps.common.constants import HTTP_SERVER_ERROR
from apps.common.types import Err, Ok, Result

from .base import (
    Found,
    HttpPanelSession,
    LookupResult,
    NotFound,
    PanelAuthError,
    PanelError,
    PanelGateway,
    PanelRecord,
    PanelRenewalOutcome,
    PanelSession,
    PanelTransientError,
    RenewalRequest,
    TransientError,
    first_list,
    json_or_empty,
)

if TYPE_CHECKING:
    from apps.provisioning.models import PanelCredentials

logger = logging.getLogger(__name__)

THE_BEST_DEFAULT_BASE_URL: Final[str] = "https://api.painel.best"
THE_BEST_TOKEN_KEYS: Final[tuple[str, ...]] = ("access", "token", "access_token")
THE_BEST_RESULT_KEYS: Final[tuple[str, ...]] = ("results", "data")
THE_BEST_SEARCH_PAGE_SIZE: Final[int] = 10


@dataclass(frozen=True)
class TheBestConfig:
    base_url: str
    username: str
    password: str


class TheBestGateway(PanelGateway):
    """🏆 The Best panel: JWT login, line search, months renewal"""

    family = "the_best"
    display_name = "The Best"

    def load_config(self, credentials: PanelCredentials | None) -> Result[TheBestConfig, str]:
        if credentials is None or not credentials.the_best_configured:
            return Err("The Best credentials not configured")
        return Ok(
            TheBestConfig(
                base_url=(credentials.the_best_base_url or THE_BEST_DEFAULT_BASE_URL).rstrip("/"),
                username=credentials.the_best_username,
                password=credentials.get_secret("the_best_password"),
            )
        )

    def _connect(self, owner_id: int, config: TheBestConfig) -> PanelSession:
        session = HttpPanelSession(self.family, owner_id, config)
        try:
            token = self._login(session)
        except Exception:
            session.close()
            raise
        # Token lives only as long as this session
        session.http.headers.update({"Authorization": f"Bearer {token}"})
        return session

    def _login(self, session: HttpPanelSession) -> str:
        config: TheBestConfig = session.config
        response = session.request(
            "POST",
            f"{config.base_url}/auth/token/",
            json={"username": config.username, "password": config.password},
        )
        if response.status_code >= HTTP_SERVER_ERROR:
            raise PanelTransientError(
                f"The Best login unavailable: HTTP {response.status_code}",
                panel=self.family,
                http_status=response.status_code,
            )
        if not response.ok:
            raise PanelAuthError(
                f"The Best login failed: HTTP {response.status_code}",
                panel=self.family,
                http_status=response.status_code,
            )

        payload = json_or_empty(response)
        token = None
        if isinstance(payload, dict):
            token = next((payload[key] for key in THE_BEST_TOKEN_KEYS if payload.get(key)), None)
        if not token:
            raise PanelAuthError("Token missing from The Best login response", panel=self.family)
        logger.info(f"🔐 [The Best] Logged in as {config.username}")
        return str(token)

    def resolve(self, session: PanelSession, username: str) -> LookupResult:
        http = cast(HttpPanelSession, session)
        wanted = username.strip().lower()
        try:
            response = http.request(
                "GET",
                f"{http.config.base_url}/lines/",
                params={"search": username.strip(), "per_page": THE_BEST_SEARCH_PAGE_SIZE},
            )
        except PanelError as e:
            return TransientError(str(e))

        if not response.ok:
            logger.warning(f"⚠️ [The Best] Line search failed with HTTP {response.status_code}")
            return TransientError(f"The Best search failed: HTTP {response.status_code}")

        lines = first_list(json_or_empty(response), THE_BEST_RESULT_KEYS)
        for line in lines:
            if isinstance(line, dict) and str(line.get("username") or "").strip().lower() == wanted:
                logger.info(f"🔍 [The Best] Found {username} (id={line.get('id')})")
                return Found(PanelRecord(record_id=str(line.get("id")), username=username, kind="line", data=line))

        return NotFound(f'Username "{username}" not found on The Best')

    def renew(self, session: PanelSession, record: PanelRecord, request: RenewalRequest) -> PanelRenewalOutcome:
        http = cast(HttpPanelSession, session)
        response = http.request(
            "POST",
            f"{http.config.base_url}/lines/{record.record_id}/renew/",
            json={"months": request.months},
        )
        payload = json_or_empty(response)
        data = payload if isinstance(payload, dict) else {}

        if not response.ok:
            return PanelRenewalOutcome(False, f"The Best renewal failed: HTTP {response.status_code}", data=data)
        return PanelRenewalOutcome(True, f"Renewed {request.months} month(s) on The Best", data=data)
