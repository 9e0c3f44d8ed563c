# ===============================================================================
# PROVISIONING ADMIN FORM TESTS
# ===============================================================================

from django.test import TestCase

from apps.provisioning.admin import PanelCredentialsForm
from tests.factories.resellerhub import CredentialsRequest, create_credentials, create_reseller


class PanelCredentialsFormTestCase(TestCase):
    """Test write-only secret handling in the credentials admin form"""

    def setUp(self):
        self.reseller = create_reseller()

    def test_new_secrets_are_encrypted(self):
        form = PanelCredentialsForm(data={
            'owner': self.reseller.pk,
            'rush_username': 'rev',
            'rush_password': 'plain-pass',
            'xui_db_port': '3306',
        })

        self.assertTrue(form.is_valid(), form.errors)
        credentials = form.save()

        self.assertNotEqual(credentials.encrypted_rush_password, 'plain-pass')
        self.assertEqual(credentials.get_secret('rush_password'), 'plain-pass')
        self.assertTrue(credentials.rush_configured)

    def test_blank_input_keeps_stored_secret(self):
        credentials = create_credentials(
            CredentialsRequest(owner=self.reseller, rush_username='rev', rush_password='old-pass')
        )
        form = PanelCredentialsForm(
            instance=credentials,
            data={'owner': self.reseller.pk, 'rush_username': 'rev2', 'rush_password': ''},
        )

        self.assertTrue(form.is_valid(), form.errors)
        form.save()
        credentials.refresh_from_db()

        self.assertEqual(credentials.rush_username, 'rev2')
        self.assertEqual(credentials.get_secret('rush_password'), 'old-pass')
