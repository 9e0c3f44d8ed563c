# ===============================================================================
# PROVISIONING THE BEST GATEWAY TESTS
# ===============================================================================

from datetime import date
from unittest.mock import patch

import requests
from django.test import TestCase

from apps.provisioning.gateways.base import (
    Found,
    NotFound,
    PanelAuthError,
    PanelTransientError,
    RenewalRequest,
    TransientError,
)
from apps.provisioning.gateways.the_best import TheBestGateway
from tests.factories.panels import panel_response
from tests.factories.resellerhub import CredentialsRequest, create_credentials, create_reseller


class TheBestGatewayTestCase(TestCase):
    """Test The Best login, search and renewal"""

    def setUp(self):
        self.reseller = create_reseller()
        self.credentials = create_credentials(
            CredentialsRequest(owner=self.reseller, the_best_username='rev', the_best_password='pw')
        )
        self.gateway = TheBestGateway()
        self.request = RenewalRequest(username='maria01', duration_days=30, new_due_date=date(2025, 7, 10))

    @patch.object(requests.Session, 'request')
    def test_login_search_renew(self, mock_request):
        mock_request.side_effect = [
            panel_response(200, {'access': 'jwt-1'}),
            panel_response(200, {'results': [{'id': 11, 'username': 'other'}, {'id': 12, 'username': 'MARIA01'}]}),
            panel_response(200, {'expires_at': '2025-07-10'}),
        ]

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            self.assertEqual(session.http.headers['Authorization'], 'Bearer jwt-1')
            lookup = self.gateway.resolve(session, 'maria01')
            self.assertIsInstance(lookup, Found)
            outcome = self.gateway.renew(session, lookup.record, self.request)

        self.assertTrue(outcome.success)
        login, search, renew = mock_request.call_args_list
        self.assertEqual(login.args, ('POST', 'https://best.example.com/auth/token/'))
        self.assertEqual(login.kwargs['json'], {'username': 'rev', 'password': 'pw'})
        self.assertEqual(search.kwargs['params'], {'search': 'maria01', 'per_page': 10})
        self.assertEqual(renew.args, ('POST', 'https://best.example.com/lines/12/renew/'))
        self.assertEqual(renew.kwargs['json'], {'months': 1})

    @patch.object(requests.Session, 'request')
    def test_alternate_token_key(self, mock_request):
        mock_request.return_value = panel_response(200, {'access_token': 'jwt-2'})

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            self.assertEqual(session.http.headers['Authorization'], 'Bearer jwt-2')

    @patch.object(requests.Session, 'request')
    def test_rejected_login(self, mock_request):
        mock_request.return_value = panel_response(401, {'detail': 'invalid'})

        with self.assertRaises(PanelAuthError):
            with self.gateway.open(self.reseller.pk, self.credentials):
                pass

    @patch.object(requests.Session, 'request')
    def test_login_without_token(self, mock_request):
        mock_request.return_value = panel_response(200, {'user': 'rev'})

        with self.assertRaises(PanelAuthError):
            with self.gateway.open(self.reseller.pk, self.credentials):
                pass

    @patch.object(requests.Session, 'request')
    def test_login_outage_is_transient(self, mock_request):
        mock_request.return_value = panel_response(500)

        with self.assertRaises(PanelTransientError):
            with self.gateway.open(self.reseller.pk, self.credentials):
                pass

    @patch.object(requests.Session, 'request')
    def test_not_found_and_search_failure(self, mock_request):
        mock_request.side_effect = [
            panel_response(200, {'token': 'jwt'}),
            panel_response(200, {'data': []}),
            panel_response(503),
        ]

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            self.assertIsInstance(self.gateway.resolve(session, 'maria01'), NotFound)
            self.assertIsInstance(self.gateway.resolve(session, 'maria01'), TransientError)

    @patch.object(requests.Session, 'request')
    def test_token_is_not_shared_between_sessions(self, mock_request):
        mock_request.side_effect = [
            panel_response(200, {'access': 'jwt-a'}),
            panel_response(200, {'access': 'jwt-b'}),
        ]

        with self.gateway.open(self.reseller.pk, self.credentials) as first:
            first_header = first.http.headers['Authorization']
        with self.gateway.open(self.reseller.pk, self.credentials) as second:
            second_header = second.http.headers['Authorization']

        self.assertEqual((first_header, second_header), ('Bearer jwt-a', 'Bearer jwt-b'))
