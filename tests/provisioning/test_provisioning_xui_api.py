# ===============================================================================
# PROVISIONING XUI ONE LINE API TESTS
# ===============================================================================

from datetime import date
from unittest.mock import patch

import requests
from django.test import SimpleTestCase, TestCase, override_settings

from apps.provisioning.gateways.base import Found, NotFound, PanelRecord, RenewalRequest, TransientError
from apps.provisioning.gateways.xui import due_date_epoch
from apps.provisioning.gateways.xui_api import XuiApiGateway, http_fallback_url
from tests.factories.panels import panel_response
from tests.factories.resellerhub import CredentialsRequest, create_credentials, create_reseller

LINES = {
    'status': 'STATUS_SUCCESS',
    'data': [
        {'id': 11, 'username': 'outro', 'exp_date': 1754000000},
        {'id': 42, 'username': 'Maria01', 'exp_date': 1754000000},
    ],
}


class HttpFallbackUrlTestCase(SimpleTestCase):
    """Test the plain-HTTP twin of panel URLs"""

    def test_panel_port_maps_to_http_port(self):
        self.assertEqual(http_fallback_url('https://xui.example.com:9000/abc/'), 'http://xui.example.com:8000/abc/')

    def test_default_https_port_is_dropped(self):
        self.assertEqual(http_fallback_url('https://xui.example.com:443/abc/'), 'http://xui.example.com/abc/')

    def test_query_is_kept(self):
        self.assertEqual(
            http_fallback_url('https://xui.example.com/abc/?action=get_lines'),
            'http://xui.example.com/abc/?action=get_lines',
        )


class XuiApiConfigTestCase(TestCase):
    """Test credential and settings resolution"""

    def setUp(self):
        self.reseller = create_reseller()
        self.gateway = XuiApiGateway()

    def test_not_configured(self):
        self.assertFalse(self.gateway.is_enabled(None))
        self.assertFalse(self.gateway.is_enabled(create_credentials(CredentialsRequest(owner=self.reseller))))

    def test_access_code_alone_is_not_enough(self):
        credentials = create_credentials(
            CredentialsRequest(
                owner=self.reseller, xui_api_base_url='https://xui.example.com:9000', xui_api_access_code='abc'
            )
        )

        self.assertFalse(credentials.xui_api_configured)
        self.assertFalse(self.gateway.is_enabled(credentials))

    @override_settings(
        XUI_ONE_BASE_URL='https://global.example.com/', XUI_ONE_ACCESS_CODE='/painel/', XUI_ONE_API_KEY='chave'
    )
    def test_global_settings_fallback(self):
        config = self.gateway.load_config(None).unwrap()

        self.assertEqual(config.endpoint, 'https://global.example.com/painel/')
        self.assertEqual(config.api_key, 'chave')

    @override_settings(
        XUI_ONE_BASE_URL='https://global.example.com', XUI_ONE_ACCESS_CODE='painel', XUI_ONE_API_KEY='chave'
    )
    def test_reseller_credentials_take_precedence(self):
        credentials = create_credentials(
            CredentialsRequest(
                owner=self.reseller,
                xui_api_base_url='https://loja.example.com:9000',
                xui_api_access_code='loja',
                xui_api_key='segredo',
            )
        )

        config = self.gateway.load_config(credentials).unwrap()

        self.assertEqual(config.endpoint, 'https://loja.example.com:9000/loja/')
        self.assertEqual(config.api_key, 'segredo')


class XuiApiGatewayTestCase(TestCase):
    """Test get_lines lookups and edit_line renewals"""

    def setUp(self):
        self.reseller = create_reseller()
        self.gateway = XuiApiGateway()
        self.credentials = create_credentials(
            CredentialsRequest(
                owner=self.reseller,
                xui_api_base_url='https://xui.example.com:9000/',
                xui_api_access_code='abc',
                xui_api_key='segredo',
            )
        )

    @patch.object(requests.Session, 'request')
    def test_resolve_matches_username_case_insensitively(self, mock_request):
        mock_request.return_value = panel_response(200, LINES)

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')

        self.assertIsInstance(lookup, Found)
        self.assertEqual(lookup.record.record_id, '42')
        self.assertEqual(lookup.record.kind, 'line')
        method, url = mock_request.call_args.args
        self.assertEqual((method, url), ('GET', 'https://xui.example.com:9000/abc/'))
        self.assertEqual(mock_request.call_args.kwargs['params'], {'api_key': 'segredo', 'action': 'get_lines'})

    @patch.object(requests.Session, 'request')
    def test_resolve_not_found(self, mock_request):
        mock_request.return_value = panel_response(200, LINES)

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'ninguem')

        self.assertIsInstance(lookup, NotFound)
        self.assertIn('ninguem', lookup.detail)

    @patch.object(requests.Session, 'request')
    def test_resolve_rejected_status_is_transient(self, mock_request):
        mock_request.return_value = panel_response(200, {'status': 'STATUS_FAILURE', 'error': 'Invalid API key'})

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')

        self.assertIsInstance(lookup, TransientError)
        self.assertIn('Invalid API key', lookup.detail)

    @patch.object(requests.Session, 'request')
    def test_resolve_timeout_is_transient(self, mock_request):
        mock_request.side_effect = requests.Timeout('read timed out')

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')

        self.assertIsInstance(lookup, TransientError)

    @patch.object(requests.Session, 'request')
    def test_renew_posts_edit_line(self, mock_request):
        mock_request.return_value = panel_response(200, {'status': 'STATUS_SUCCESS'})
        record = PanelRecord(record_id='42', username='maria01', kind='line')
        request = RenewalRequest(username='maria01', duration_days=30, new_due_date=date(2025, 9, 10))

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            outcome = self.gateway.renew(session, record, request)

        self.assertTrue(outcome.success)
        self.assertIn('2025-09-10', outcome.detail)
        self.assertEqual(mock_request.call_args.args[0], 'POST')
        self.assertEqual(mock_request.call_args.kwargs['params']['action'], 'edit_line')
        self.assertEqual(
            mock_request.call_args.kwargs['data'],
            {'id': '42', 'exp_date': str(due_date_epoch(date(2025, 9, 10))), 'enabled': '1'},
        )

    @patch.object(requests.Session, 'request')
    def test_renew_failure(self, mock_request):
        mock_request.return_value = panel_response(200, {'status': 'STATUS_FAILURE', 'error': 'Line not found'})
        record = PanelRecord(record_id='42', username='maria01', kind='line')
        request = RenewalRequest(username='maria01', duration_days=30, new_due_date=date(2025, 9, 10))

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            outcome = self.gateway.renew(session, record, request)

        self.assertFalse(outcome.success)
        self.assertIn('Line not found', outcome.detail)

    @patch.object(requests.Session, 'request')
    def test_tls_failure_switches_session_to_http(self, mock_request):
        """Self-signed panels: retry on the plain-HTTP port and stay there"""
        mock_request.side_effect = [
            requests.exceptions.SSLError('certificate verify failed'),
            panel_response(200, LINES),
            panel_response(200, {'status': 'STATUS_SUCCESS'}),
        ]
        request = RenewalRequest(username='maria01', duration_days=30, new_due_date=date(2025, 9, 10))

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')
            outcome = self.gateway.renew(session, lookup.record, request)

        self.assertTrue(outcome.success)
        urls = [call.args[1] for call in mock_request.call_args_list]
        self.assertEqual(
            urls,
            [
                'https://xui.example.com:9000/abc/',
                'http://xui.example.com:8000/abc/',
                'http://xui.example.com:8000/abc/',
            ],
        )

    @patch.object(requests.Session, 'request')
    def test_connection_refused_is_not_retried(self, mock_request):
        mock_request.side_effect = requests.ConnectionError('connection refused')

        with self.gateway.open(self.reseller.pk, self.credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')

        self.assertIsInstance(lookup, TransientError)
        mock_request.assert_called_once()
