"""
XUI One Line API Gateway - ResellerHub
HTTP access-code API (`get_lines` / `edit_line`) for XUI panels without database access.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, cast
from urllib.parse import urlsplit, urlunsplit

import requests
from django.conf import settings

from apps.common.types import Err, Ok, Result

from .base import (
    Found,
    HttpPanelSession,
    LookupResult,
    NotFound,
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
from .xui import due_date_epoch

if TYPE_CHECKING:
    from apps.provisioning.models import PanelCredentials

logger = logging.getLogger(__name__)

XUI_API_SUCCESS: Final[str] = "STATUS_SUCCESS"
XUI_API_LINE_KEYS: Final[tuple[str, ...]] = ("data",)

# XUI One serves plain HTTP on 8000 next to HTTPS on 9000
HTTP_FALLBACK_PORTS: Final[dict[int | None, int | None]] = {443: None, 9000: 8000}


def http_fallback_url(url: str) -> str:
    """Plain-HTTP twin of an HTTPS panel URL"""
    parts = urlsplit(url)
    port = HTTP_FALLBACK_PORTS.get(parts.port, parts.port)
    netloc = f"{parts.hostname}:{port}" if port else (parts.hostname or "")
    return urlunsplit(("http", netloc, parts.path, parts.query, parts.fragment))


@dataclass(frozen=True)
class XuiApiConfig:
    base_url: str
    access_code: str
    api_key: str

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.access_code}/"


class XuiApiSession(HttpPanelSession):
    """
    Line API session. Panels often run self-signed certificates, so a TLS
    failure switches this session to plain HTTP once.
    """

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        if self.state.get("plain_http") and url.startswith("https://"):
            url = http_fallback_url(url)
        try:
            return super().request(method, url, **kwargs)
        except PanelTransientError as e:
            if not (isinstance(e.__cause__, requests.exceptions.SSLError) and url.startswith("https://")):
                raise

        fallback = http_fallback_url(url)
        logger.warning(f"🔓 [XUI One] TLS failed, retrying over {urlsplit(fallback).netloc} without TLS")
        self.state["plain_http"] = True
        return super().request(method, fallback, **kwargs)


class XuiApiGateway(PanelGateway):
    """📡 XUI One line API"""

    family = "xui_api"
    display_name = "XUI One"

    def load_config(self, credentials: PanelCredentials | None) -> Result[XuiApiConfig, str]:
        if credentials is not None and credentials.xui_api_configured:
            return Ok(
                XuiApiConfig(
                    base_url=credentials.xui_api_base_url.rstrip("/"),
                    access_code=credentials.xui_api_access_code.strip("/ "),
                    api_key=credentials.get_secret("xui_api_key"),
                )
            )

        base_url = getattr(settings, "XUI_ONE_BASE_URL", "")
        access_code = getattr(settings, "XUI_ONE_ACCESS_CODE", "")
        api_key = getattr(settings, "XUI_ONE_API_KEY", "")
        if base_url and access_code and api_key:
            return Ok(XuiApiConfig(base_url=base_url.rstrip("/"), access_code=access_code.strip("/ "), api_key=api_key))
        return Err("XUI One API URL, access code or key not configured")

    def _connect(self, owner_id: int, config: XuiApiConfig) -> PanelSession:
        return XuiApiSession(self.family, owner_id, config)

    def _call(
        self, session: XuiApiSession, action: str, method: str = "GET", data: dict[str, str] | None = None
    ) -> requests.Response:
        config: XuiApiConfig = session.config
        return session.request(method, config.endpoint, params={"api_key": config.api_key, "action": action}, data=data)

    @staticmethod
    def _api_error(response: requests.Response, payload: Any) -> str:
        if isinstance(payload, dict) and payload.get("error"):
            return str(payload["error"])
        return f"HTTP {response.status_code}"

    def resolve(self, session: PanelSession, username: str) -> LookupResult:
        http = cast(XuiApiSession, session)
        try:
            response = self._call(http, "get_lines")
        except PanelError as e:
            return TransientError(str(e))

        payload = json_or_empty(response)
        if not response.ok or not isinstance(payload, dict) or payload.get("status") != XUI_API_SUCCESS:
            return TransientError(f"XUI One get_lines failed: {self._api_error(response, payload)}")

        wanted = username.strip().lower()
        for line in first_list(payload, XUI_API_LINE_KEYS):
            if isinstance(line, dict) and str(line.get("username", "")).strip().lower() == wanted:
                logger.info(f"🔍 [XUI One] Found {username} (line {line.get('id')})")
                return Found(PanelRecord(record_id=str(line.get("id")), username=username.strip(), kind="line", data=line))
        return NotFound(f'Username "{username}" not found on XUI One')

    def renew(self, session: PanelSession, record: PanelRecord, request: RenewalRequest) -> PanelRenewalOutcome:
        http = cast(XuiApiSession, session)
        form = {
            "id": record.record_id,
            "exp_date": str(due_date_epoch(request.new_due_date)),
            "enabled": "1",
        }
        response = self._call(http, "edit_line", method="POST", data=form)
        payload = json_or_empty(response)

        if response.ok and isinstance(payload, dict) and payload.get("status") == XUI_API_SUCCESS:
            return PanelRenewalOutcome(True, f"Line {record.record_id} renewed until {request.new_due_date}", data=payload)
        return PanelRenewalOutcome(False, f"XUI One edit_line failed: {self._api_error(response, payload)}")
