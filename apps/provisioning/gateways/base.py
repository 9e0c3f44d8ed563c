"""
Panel Gateway base - ResellerHub
Shared result types, exceptions and session handling for IPTV panel integrations.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, ClassVar

import requests

from apps.billing.due_dates import months_for_duration
from apps.common.constants import PANEL_REQUEST_TIMEOUT_SECONDS
from apps.common.types import Err, Ok, Result
from apps.settings.services import SettingsService

if TYPE_CHECKING:
    from apps.provisioning.ledger import ExternalLedger
    from apps.provisioning.models import PanelCredentials

logger = logging.getLogger(__name__)


# ===============================================================================
# EXCEPTIONS
# ===============================================================================


class PanelError(Exception):
    """Base exception for panel gateway errors"""

    def __init__(self, message: str, panel: str = "", http_status: int = 0):
        super().__init__(message)
        self.panel = panel
        self.http_status = http_status


class PanelAuthError(PanelError):
    """Every authentication style was rejected"""


class PanelNotFoundError(PanelError):
    """Resource does not exist on the panel"""


class PanelTransientError(PanelError):
    """Timeout, connection failure or 5xx - may succeed later"""


class PanelConfigurationError(PanelError):
    """Reseller credentials missing or unusable"""


# ===============================================================================
# LOOKUP RESULTS
# ===============================================================================


@dataclass(frozen=True)
class PanelRecord:
    """User record located on a panel"""

    record_id: str
    username: str
    kind: str = ""  # rush user type, xui table, ...
    data: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Found:
    record: PanelRecord


@dataclass(frozen=True)
class NotFound:
    detail: str


@dataclass(frozen=True)
class TransientError:
    detail: str


LookupResult = Found | NotFound | TransientError


# ===============================================================================
# RENEWAL REQUEST / OUTCOME
# ===============================================================================


@dataclass(frozen=True)
class RenewalRequest:
    """What to renew and for how long"""

    username: str
    duration_days: int
    new_due_date: date
    screens: int = 1

    @property
    def months(self) -> int:
        return months_for_duration(self.duration_days)


@dataclass(frozen=True)
class PanelRenewalOutcome:
    success: bool
    detail: str
    data: dict[str, Any] = field(default_factory=dict, compare=False)


# ===============================================================================
# SESSIONS
# ===============================================================================


class PanelSession:
    """
    Request-scoped handle for one panel conversation.

    Anything learned during the conversation (auth style, tokens,
    department ids) lives here, never at module level.
    """

    def __init__(self, family: str, owner_id: int, config: Any):
        self.family = family
        self.owner_id = owner_id
        self.config = config
        self.state: dict[str, Any] = {}

    def close(self) -> None:
        """Release any held resources"""


class HttpPanelSession(PanelSession):
    """Panel session backed by a requests.Session with a bounded timeout"""

    def __init__(self, family: str, owner_id: int, config: Any, timeout: int | None = None):
        super().__init__(family, owner_id, config)
        self.timeout = timeout or SettingsService.get_integer_setting(
            "provisioning.panel_request_timeout_seconds", PANEL_REQUEST_TIMEOUT_SECONDS
        )
        self.http = requests.Session()
        self.http.headers.update({"Accept": "application/json"})

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        try:
            return self.http.request(method, url, **kwargs)
        except requests.Timeout as e:
            raise PanelTransientError(f"Timeout after {self.timeout}s", panel=self.family) from e
        except requests.ConnectionError as e:
            raise PanelTransientError(f"Connection failed: {e}", panel=self.family) from e

    def close(self) -> None:
        self.http.close()


def json_or_empty(response: requests.Response) -> Any:
    """Decoded JSON body, or an empty dict when the panel answers with non-JSON"""
    try:
        return response.json()
    except ValueError:
        return {}


def first_list(payload: Any, keys: tuple[str, ...]) -> list[Any]:
    """First list found under `keys`, or the payload itself when it is a list"""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


# ===============================================================================
# GATEWAY INTERFACE
# ===============================================================================


class PanelGateway(ABC):
    """
    🖥️ One panel family.

    Usage:
        with gateway.open(owner_id, credentials) as session:
            match gateway.resolve(session, username):
                case Found(record): gateway.renew(session, record, request)
    """

    family: ClassVar[str] = ""
    display_name: ClassVar[str] = ""
    supports_external_ledger: ClassVar[bool] = False

    @abstractmethod
    def load_config(self, credentials: PanelCredentials | None) -> Result[Any, str]:
        """Build the connection config for a reseller, Err when not configured"""

    @abstractmethod
    def _connect(self, owner_id: int, config: Any) -> PanelSession:
        """Create the session; may perform a handshake (login, department lookup)"""

    @abstractmethod
    def resolve(self, session: PanelSession, username: str) -> LookupResult:
        """Locate a username on the panel"""

    @abstractmethod
    def renew(self, session: PanelSession, record: PanelRecord, request: RenewalRequest) -> PanelRenewalOutcome:
        """Extend the located record"""

    def is_enabled(self, credentials: PanelCredentials | None) -> bool:
        return self.load_config(credentials).is_ok()

    def credits_for(self, request: RenewalRequest) -> int:
        """Credits charged for one renewal: whole months, minimum 1"""
        return request.months

    def external_ledger(self, session: PanelSession, record: PanelRecord) -> ExternalLedger | None:
        """Balance row inside the panel's own database, if the family has one"""
        return None

    @contextmanager
    def open(self, owner_id: int, credentials: PanelCredentials | None) -> Iterator[PanelSession]:
        """Scoped session with guaranteed release on every exit path"""
        match self.load_config(credentials):
            case Ok(config):
                pass
            case Err(message):
                raise PanelConfigurationError(message, panel=self.family)

        session = self._connect(owner_id, config)
        try:
            yield session
        finally:
            try:
                session.close()
            except Exception:
                logger.exception(f"🔥 [{self.display_name}] Failed to release session")
