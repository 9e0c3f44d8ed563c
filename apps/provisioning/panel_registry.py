"""
Panel family registry - ResellerHub
Maps a customer's server to the gateway that can renew its logins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, Final

from .gateways.base import PanelGateway
from .gateways.natv import NatvGateway
from .gateways.rush import RushGateway
from .gateways.the_best import TheBestGateway
from .gateways.vplay import VplayGateway
from .gateways.xui import XuiGateway
from .gateways.xui_api import XuiApiGateway
from .models import PanelCredentials, Server

logger = logging.getLogger(__name__)

# ===============================================================================
# FAMILY DETECTION
# ===============================================================================

# Ordered: the first family with a keyword in the server name/host wins
FAMILY_KEYWORDS: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    ("rush", ("rush",)),
    ("natv", ("natv",)),
    ("vplay", ("vplay", "v-play", "v play")),
    ("xui", ("xui", "xtream")),
    ("the_best", ("thebest", "the best", "best")),
)


def detect_family(server: Server | None) -> str | None:
    """Panel family implied by a server's name or host, None when unknown"""
    if server is None:
        return None
    haystack = f"{server.name} {server.host}".lower()
    for family, keywords in FAMILY_KEYWORDS:
        if any(keyword in haystack for keyword in keywords):
            return family
    return None


# A family reachable through several transports uses the first one configured
FAMILY_TRANSPORTS: Final[dict[str, tuple[str, ...]]] = {
    "xui": ("xui", "xui_api"),
}


@dataclass(frozen=True)
class PanelSelection:
    """Gateway chosen for a target, or the reason it is skipped"""

    gateway: PanelGateway | None
    credentials: PanelCredentials | None
    panel: str
    skip_reason: str = ""

    @property
    def is_skipped(self) -> bool:
        return self.gateway is None


# ===============================================================================
# REGISTRY
# ===============================================================================


class PanelGatewayRegistry:
    """🏭 Registry of panel gateway classes keyed by family"""

    _gateways: ClassVar[dict[str, type[PanelGateway]]] = {}

    @classmethod
    def register_gateway(cls, gateway_class: type[PanelGateway]) -> None:
        cls._gateways[gateway_class.family] = gateway_class

    @classmethod
    def create_gateway(cls, family: str) -> PanelGateway:
        if family not in cls._gateways:
            raise ValueError(f"Panel gateway '{family}' not registered")
        return cls._gateways[family]()

    @classmethod
    def list_families(cls) -> list[str]:
        return list(cls._gateways.keys())

    @classmethod
    def select(cls, server: Server | None, owner_id: int) -> PanelSelection:
        """
        🎯 Pick the gateway for a customer's server.

        Skips (rather than fails) targets whose server is missing, has
        auto-renew off, matches no known family, or whose family has no
        credentials for this owner.
        """
        if server is None:
            return PanelSelection(None, None, "", "Customer has no server assigned")

        family = detect_family(server)
        if not server.auto_renew:
            return PanelSelection(None, None, family or server.name, f"Auto-renew disabled for server {server.name}")
        if family is None or family not in cls._gateways:
            return PanelSelection(None, None, server.name, f"No panel integration for server {server.name}")

        credentials = PanelCredentials.objects.filter(owner_id=owner_id).first()
        gateways = [
            cls.create_gateway(name) for name in FAMILY_TRANSPORTS.get(family, (family,)) if name in cls._gateways
        ]
        for gateway in gateways:
            if gateway.is_enabled(credentials):
                return PanelSelection(gateway, credentials, family)
        return PanelSelection(
            None, credentials, family, f"{gateways[0].display_name} integration not configured for this reseller"
        )


for _gateway_class in (RushGateway, NatvGateway, VplayGateway, XuiGateway, XuiApiGateway, TheBestGateway):
    PanelGatewayRegistry.register_gateway(_gateway_class)
