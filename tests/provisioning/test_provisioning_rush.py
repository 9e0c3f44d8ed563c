# ===============================================================================
# PROVISIONING RUSH GATEWAY TESTS
# ===============================================================================

from datetime import date
from unittest.mock import patch

import requests
from django.test import TestCase

from apps.provisioning.gateways.base import Found, NotFound, PanelAuthError, RenewalRequest, TransientError
from apps.provisioning.gateways.rush import RushGateway
from tests.factories.panels import panel_response
from tests.factories.resellerhub import CredentialsRequest, create_credentials, create_reseller


class RushGatewayTestCase(TestCase):
    """Test Rush lookup, auth probing and renewal"""

    def setUp(self):
        self.reseller = create_reseller()
        self.credentials = create_credentials(
            CredentialsRequest(owner=self.reseller, rush_username='rev', rush_password='secret', rush_token='tok')
        )
        self.gateway = RushGateway()
        self.request = RenewalRequest(username='maria01', duration_days=90, new_due_date=date(2025, 9, 10))

    def test_not_enabled_without_credentials(self):
        self.assertFalse(self.gateway.is_enabled(None))
        self.assertTrue(self.gateway.is_enabled(self.credentials))

    @patch.object(requests.Session, 'request')
    def test_resolve_and_renew_iptv(self, mock_request):
        mock_request.side_effect = [
            panel_response(200, {'items': [{'id': 7, 'username': 'Maria01'}]}),
            panel_response(200, {'success': True}),
        ]

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')
            self.assertIsInstance(lookup, Found)
            self.assertEqual(lookup.record.kind, 'iptv')
            self.assertEqual(lookup.record.record_id, '7')

            outcome = self.gateway.renew(session, lookup.record, self.request)

        self.assertTrue(outcome.success)
        method, url = mock_request.call_args_list[1].args
        self.assertEqual((method, url), ('PUT', 'https://rush.example.com/iptv/extend/7/'))
        self.assertEqual(mock_request.call_args_list[1].kwargs['json'], {'month': 3, 'screen': 1})
        # Query-string credentials were accepted and pinned
        self.assertEqual(mock_request.call_args_list[1].kwargs['params']['username'], 'rev')

    @patch.object(requests.Session, 'request')
    def test_p2p_renewal_uses_type_user_id(self, mock_request):
        mock_request.side_effect = [
            panel_response(200, {'items': []}),
            panel_response(200, {'data': [{'id': 'p9', 'username': 'maria01'}]}),
            panel_response(200, {}),
        ]

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')
            self.gateway.renew(session, lookup.record, self.request)

        self.assertEqual(lookup.record.kind, 'p2p')
        self.assertEqual(mock_request.call_args_list[2].args[1], 'https://rush.example.com/p2p/extend/p9/')
        self.assertEqual(mock_request.call_args_list[2].kwargs['json'], {'month': 3, 'typeUserId': 2})

    @patch.object(requests.Session, 'request')
    def test_auth_styles_are_tried_in_order(self, mock_request):
        mock_request.side_effect = [
            panel_response(401),
            panel_response(200, [{'id': 1, 'username': 'maria01'}]),
            panel_response(200, {}),
        ]

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')
            self.assertEqual(session.state['auth_style'], 'bearer')
            self.gateway.renew(session, lookup.record, self.request)

        self.assertEqual(mock_request.call_args_list[1].kwargs['headers'], {'Authorization': 'Bearer tok'})
        self.assertEqual(mock_request.call_args_list[2].kwargs['headers'], {'Authorization': 'Bearer tok'})

    @patch.object(requests.Session, 'request')
    def test_every_auth_style_rejected(self, mock_request):
        mock_request.return_value = panel_response(401)

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')

        self.assertIsInstance(lookup, TransientError)
        self.assertEqual(mock_request.call_count, 3)

        with self.assertRaises(PanelAuthError):
            with self.gateway.open(self.reseller.pk, self.credentials) as session:
                self.gateway._call(session, 'GET', 'https://rush.example.com/iptv/list')

    @patch.object(requests.Session, 'request')
    def test_username_not_found(self, mock_request):
        mock_request.return_value = panel_response(200, {'items': [{'id': 2, 'username': 'outro'}]})

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')

        self.assertIsInstance(lookup, NotFound)
        self.assertIn('maria01', lookup.detail)

    @patch.object(requests.Session, 'request')
    def test_listing_failure_is_transient(self, mock_request):
        mock_request.return_value = panel_response(502)

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')

        self.assertIsInstance(lookup, TransientError)

    @patch.object(requests.Session, 'request')
    def test_timeout_is_transient(self, mock_request):
        mock_request.side_effect = requests.Timeout()

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')

        self.assertIsInstance(lookup, TransientError)
        self.assertIn('Timeout', lookup.detail)

    @patch.object(requests.Session, 'request')
    def test_extend_failure(self, mock_request):
        mock_request.side_effect = [
            panel_response(200, {'items': [{'id': 7, 'username': 'maria01'}]}),
            panel_response(422, {'error': 'bad'}),
        ]

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')
            outcome = self.gateway.renew(session, lookup.record, self.request)

        self.assertFalse(outcome.success)
        self.assertIn('422', outcome.detail)
