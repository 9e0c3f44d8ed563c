# ===============================================================================
# TEST FACTORIES FOR RESELLERHUB
# ===============================================================================

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model

from apps.billing.models import Plan
from apps.customers.models import Customer, ResellerAccount
from apps.provisioning.models import PanelCredentials, Server

User = get_user_model()


# ===============================================================================
# RESELLERS
# ===============================================================================

def create_reseller(username: str = 'reseller', credits: int = 10, role: str = 'reseller'):
    """Create a user with a reseller credit account."""
    user = User.objects.create_user(username=username, email=f'{username}@example.com', password='testpass123')
    ResellerAccount.objects.create(user=user, credits=credits, role=role)
    return user


def create_admin(username: str = 'admin'):
    """Create an admin reseller (never charged credits)."""
    return create_reseller(username=username, credits=0, role='admin')


# ===============================================================================
# CATALOG
# ===============================================================================

def create_plan(owner, name: str = 'Mensal', price: str = '35.00', duration_days: int = 30) -> Plan:
    """Create a catalog plan for a reseller."""
    return Plan.objects.create(owner=owner, name=name, price=Decimal(price), duration_days=duration_days)


# ===============================================================================
# SERVERS & CREDENTIALS
# ===============================================================================

def create_server(owner, name: str = 'Rush Principal', host: str = '', auto_renew: bool = True) -> Server:
    """Create a panel server; the family is inferred from name/host."""
    return Server.objects.create(owner=owner, name=name, host=host, auto_renew=auto_renew)


@dataclass
class CredentialsRequest:
    """Parameter object for panel credentials (plain-text secrets, encrypted on save)"""
    owner: object
    payment_webhook_secret: str = ''
    rush_username: str = ''
    rush_password: str = ''
    rush_token: str = ''
    rush_base_url: str = 'https://rush.example.com'
    natv_api_key: str = ''
    natv_base_url: str = ''
    natv_department_id: str = ''
    the_best_username: str = ''
    the_best_password: str = ''
    the_best_base_url: str = 'https://best.example.com'
    xui_api_base_url: str = ''
    xui_api_access_code: str = ''
    xui_api_key: str = ''
    vplay_integration_url: str = ''
    vplay_key_message: str = ''


def create_credentials(request: CredentialsRequest) -> PanelCredentials:
    """Create PanelCredentials, encrypting every provided secret."""
    credentials = PanelCredentials(
        owner=request.owner,
        rush_base_url=request.rush_base_url,
        rush_username=request.rush_username,
        natv_base_url=request.natv_base_url,
        natv_department_id=request.natv_department_id,
        the_best_base_url=request.the_best_base_url,
        the_best_username=request.the_best_username,
        xui_api_base_url=request.xui_api_base_url,
        xui_api_access_code=request.xui_api_access_code,
        vplay_integration_url=request.vplay_integration_url,
        vplay_key_message=request.vplay_key_message,
    )
    for name in (
        'payment_webhook_secret', 'rush_password', 'rush_token', 'natv_api_key', 'the_best_password', 'xui_api_key'
    ):
        credentials.set_secret(name, getattr(request, name))
    credentials.save()
    return credentials


# ===============================================================================
# CUSTOMERS
# ===============================================================================

def create_customer(  # noqa: PLR0913
    owner,
    name: str = 'Cliente Teste',
    phone: str = '11987654321',
    username: str = '',
    server: Server | None = None,
    plan: Plan | None = None,
    due_date: date | None = None,
    screens: int = 1,
    custom_price: Decimal | None = None,
    status: str = 'active',
) -> Customer:
    """Create a customer for a reseller."""
    return Customer.objects.create(
        owner=owner,
        name=name,
        phone=phone,
        username=username,
        server=server,
        plan=plan,
        due_date=due_date,
        screens=screens,
        custom_price=custom_price,
        status=status,
    )
