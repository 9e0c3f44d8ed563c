# ===============================================================================
# PROVISIONING NATV GATEWAY TESTS
# ===============================================================================

from datetime import date
from unittest.mock import patch

import requests
from django.test import SimpleTestCase, TestCase, override_settings

from apps.provisioning.gateways.base import Found, PanelConfigurationError, PanelTransientError, RenewalRequest
from apps.provisioning.gateways.natv import NatvGateway, natv_months
from tests.factories.panels import panel_response
from tests.factories.resellerhub import CredentialsRequest, create_credentials, create_reseller


class NatvMonthsTestCase(SimpleTestCase):
    """Test day → allowed-month mapping"""

    def test_known_durations(self):
        self.assertEqual(natv_months(30), 1)
        self.assertEqual(natv_months(150), 5)
        self.assertEqual(natv_months(365), 12)

    def test_unlisted_durations_snap_to_allowed_values(self):
        self.assertEqual(natv_months(7), 1)
        self.assertEqual(natv_months(270), 6)   # 9 months → 6 is nearer than 12
        self.assertEqual(natv_months(300), 12)  # 10 months → 12 is nearer than 6


class NatvGatewayTestCase(TestCase):
    """Test NATV department discovery and activation"""

    def setUp(self):
        self.reseller = create_reseller()
        self.gateway = NatvGateway()
        self.request = RenewalRequest(username='maria01', duration_days=90, new_due_date=date(2025, 9, 10))

    def _credentials(self, department_id=''):
        return create_credentials(
            CredentialsRequest(
                owner=self.reseller,
                natv_api_key='natv-key',
                natv_base_url='https://natv.example.com/api/',
                natv_department_id=department_id,
            )
        )

    def test_not_configured(self):
        self.assertFalse(self.gateway.is_enabled(None))

    @override_settings(NATV_API_KEY='global-key', NATV_BASE_URL='https://natv.global/api')
    def test_global_account_fallback(self):
        config = self.gateway.load_config(None).unwrap()

        self.assertEqual(config.api_key, 'global-key')
        self.assertEqual(config.base_url, 'https://natv.global/api')

    @patch.object(requests.Session, 'request')
    def test_configured_department_skips_discovery(self, mock_request):
        credentials = self._credentials(department_id='42')
        mock_request.return_value = panel_response(200, {'status': 'ok'})

        with self.gateway.open(self.reseller.pk, credentials) as session:
            lookup = self.gateway.resolve(session, ' maria01 ')
            self.assertIsInstance(lookup, Found)
            outcome = self.gateway.renew(session, lookup.record, self.request)

        self.assertTrue(outcome.success)
        mock_request.assert_called_once()
        method, url = mock_request.call_args.args
        self.assertEqual((method, url), ('POST', 'https://natv.example.com/api/user/activation'))
        self.assertEqual(
            mock_request.call_args.kwargs['json'], {'username': 'maria01', 'months': 3, 'department_id': '42'}
        )

    @patch.object(requests.Session, 'request')
    def test_department_discovered_once_per_session(self, mock_request):
        credentials = self._credentials()
        mock_request.side_effect = [
            panel_response(200, [{'id': 5, 'name': 'Principal'}, {'id': 6}]),
            panel_response(200, {}),
        ]

        with self.gateway.open(self.reseller.pk, credentials) as session:
            self.assertEqual(session.state['department_id'], '5')
            self.assertEqual(session.http.headers['Authorization'], 'Bearer natv-key')
            lookup = self.gateway.resolve(session, 'maria01')
            self.gateway.renew(session, lookup.record, self.request)

        self.assertEqual(mock_request.call_args_list[0].args[1], 'https://natv.example.com/api/departments')
        self.assertEqual(mock_request.call_args_list[1].kwargs['json']['department_id'], '5')

    @patch.object(requests.Session, 'request')
    def test_no_department_is_configuration_error(self, mock_request):
        credentials = self._credentials()
        mock_request.return_value = panel_response(200, {'departments': []})

        with self.assertRaises(PanelConfigurationError):
            with self.gateway.open(self.reseller.pk, credentials):
                pass

    @patch.object(requests.Session, 'request')
    def test_department_outage_is_transient(self, mock_request):
        credentials = self._credentials()
        mock_request.return_value = panel_response(503)

        with self.assertRaises(PanelTransientError):
            with self.gateway.open(self.reseller.pk, credentials):
                pass

    @patch.object(requests.Session, 'request')
    def test_activation_rejected(self, mock_request):
        credentials = self._credentials(department_id='42')
        mock_request.return_value = panel_response(404, {'error': 'user not found'})

        with self.gateway.open(self.reseller.pk, credentials) as session:
            lookup = self.gateway.resolve(session, 'maria01')
            outcome = self.gateway.renew(session, lookup.record, self.request)

        self.assertFalse(outcome.success)
        self.assertEqual(outcome.data, {'error': 'user not found'})

    def test_credits_follow_activation_months(self):
        self.assertEqual(self.gateway.credits_for(self.request), 3)
