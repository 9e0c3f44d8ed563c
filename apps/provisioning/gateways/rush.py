"""
Rush Panel Gateway - ResellerHub
Keyed-list HTTP API with auto-detected authentication and per-type user lists.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, cast

from apps.common.constants import HTTP_UNAUTHORIZED
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
    RenewalRequest,
    TransientError,
    first_list,
    json_or_empty,
)

if TYPE_CHECKING:
    import requests

    from apps.provisioning.models import PanelCredentials

logger = logging.getLogger(__name__)

RUSH_DEFAULT_BASE_URL: Final[str] = "https://api-new.painel.ai"
RUSH_USER_TYPES: Final[tuple[str, ...]] = ("iptv", "p2p")
RUSH_LIST_KEYS: Final[tuple[str, ...]] = ("items", "data", "list")
RUSH_P2P_TYPE_USER_ID: Final[int] = 2  # P2P "original" accounts


@dataclass(frozen=True)
class RushConfig:
    base_url: str
    username: str
    password: str
    token: str


# Auth style → (query params, headers); None when the style lacks credentials
AuthStyle = Callable[[RushConfig], tuple[dict[str, str], dict[str, str]] | None]


def _query_credentials(config: RushConfig) -> tuple[dict[str, str], dict[str, str]] | None:
    if not (config.username and config.password):
        return None
    params = {"username": config.username, "password": config.password}
    if config.token:
        params["token"] = config.token
    return params, {}


def _bearer_token(config: RushConfig) -> tuple[dict[str, str], dict[str, str]] | None:
    if not config.token:
        return None
    return {}, {"Authorization": f"Bearer {config.token}"}


def _api_key_header(config: RushConfig) -> tuple[dict[str, str], dict[str, str]] | None:
    if not config.token:
        return None
    return {}, {"X-API-Key": config.token}


AUTH_STYLES: Final[tuple[tuple[str, AuthStyle], ...]] = (
    ("query", _query_credentials),
    ("bearer", _bearer_token),
    ("api_key", _api_key_header),
)


class RushGateway(PanelGateway):
    """🖥️ Rush panel: search each user type, extend by months"""

    family = "rush"
    display_name = "Rush"

    def load_config(self, credentials: PanelCredentials | None) -> Result[RushConfig, str]:
        if credentials is None or not credentials.rush_configured:
            return Err("Rush credentials not configured")
        return Ok(
            RushConfig(
                base_url=(credentials.rush_base_url or RUSH_DEFAULT_BASE_URL).rstrip("/"),
                username=credentials.rush_username,
                password=credentials.get_secret("rush_password"),
                token=credentials.get_secret("rush_token"),
            )
        )

    def _connect(self, owner_id: int, config: RushConfig) -> PanelSession:
        return HttpPanelSession(self.family, owner_id, config)

    # ===============================================================================
    # AUTHENTICATED REQUESTS
    # ===============================================================================

    def _call(
        self, session: HttpPanelSession, method: str, url: str, params: dict[str, Any] | None = None, **kwargs: Any
    ) -> requests.Response:
        """
        Send a request with the pinned auth style, probing styles in order
        on the first call. The first non-401 answer pins its style.
        """
        config: RushConfig = session.config
        pinned = session.state.get("auth_style")
        styles = [s for s in AUTH_STYLES if s[0] == pinned] if pinned else list(AUTH_STYLES)

        for name, build in styles:
            auth = build(config)
            if auth is None:
                continue
            auth_params, auth_headers = auth
            response = session.request(
                method, url, params={**auth_params, **(params or {})}, headers=auth_headers, **kwargs
            )
            if response.status_code == HTTP_UNAUTHORIZED:
                logger.debug(f"🔐 [Rush] Auth style '{name}' rejected")
                continue
            if not pinned:
                session.state["auth_style"] = name
                logger.info(f"🔐 [Rush] Using auth style '{name}'")
            return response

        raise PanelAuthError("Rush rejected every authentication style", panel=self.family, http_status=401)

    # ===============================================================================
    # LOOKUP / RENEWAL
    # ===============================================================================

    def resolve(self, session: PanelSession, username: str) -> LookupResult:
        http = cast(HttpPanelSession, session)
        wanted = username.strip().lower()
        failures: list[str] = []

        for user_type in RUSH_USER_TYPES:
            url = f"{http.config.base_url}/{user_type}/list"
            try:
                response = self._call(http, "GET", url, params={"search": username.strip()})
            except PanelError as e:
                return TransientError(str(e))

            if not response.ok:
                failures.append(f"{user_type}: HTTP {response.status_code}")
                logger.warning(f"⚠️ [Rush] Listing {user_type} failed with HTTP {response.status_code}")
                continue

            items = first_list(json_or_empty(response), RUSH_LIST_KEYS)
            for item in items:
                if isinstance(item, dict) and str(item.get("username", "")).strip().lower() == wanted:
                    logger.info(f"🔍 [Rush] Found {username} in {user_type} (id={item.get('id')})")
                    return Found(
                        PanelRecord(record_id=str(item.get("id")), username=username, kind=user_type, data=item)
                    )

        if failures:
            return TransientError(f"Rush lookup failed ({', '.join(failures)})")
        return NotFound(f'Username "{username}" not found in {", ".join(RUSH_USER_TYPES)}')

    def renew(self, session: PanelSession, record: PanelRecord, request: RenewalRequest) -> PanelRenewalOutcome:
        http = cast(HttpPanelSession, session)
        body: dict[str, Any] = {"month": request.months}
        if record.kind == "p2p":
            body["typeUserId"] = RUSH_P2P_TYPE_USER_ID
        else:
            body["screen"] = max(1, request.screens)

        url = f"{http.config.base_url}/{record.kind}/extend/{record.record_id}/"
        response = self._call(http, "PUT", url, json=body)

        if not response.ok:
            return PanelRenewalOutcome(False, f"Rush extend failed: HTTP {response.status_code}")

        payload = json_or_empty(response)
        return PanelRenewalOutcome(
            True,
            f"Renewed {request.months} month(s) on Rush {record.kind}",
            data=payload if isinstance(payload, dict) else {},
        )
