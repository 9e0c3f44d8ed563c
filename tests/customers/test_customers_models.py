# ===============================================================================
# CUSTOMER MODEL TESTS
# ===============================================================================

from django.test import TestCase

from tests.factories.resellerhub import create_admin, create_customer, create_reseller


class CustomerModelTestCase(TestCase):
    """Test Customer helpers"""

    def setUp(self):
        self.reseller = create_reseller()

    def test_panel_usernames_split_and_dedup(self):
        customer = create_customer(self.reseller, username=' maria01, maria02 ,,maria01 ')

        self.assertEqual(customer.panel_usernames(), ['maria01', 'maria02'])

    def test_panel_usernames_empty(self):
        customer = create_customer(self.reseller, username='')

        self.assertEqual(customer.panel_usernames(), [])

    def test_is_active(self):
        self.assertTrue(create_customer(self.reseller).is_active)
        self.assertFalse(create_customer(self.reseller, status='suspended').is_active)


class ResellerAccountTestCase(TestCase):
    """Test reseller roles"""

    def test_admin_role(self):
        admin = create_admin()
        self.assertTrue(admin.reseller_account.is_admin)

    def test_superuser_is_admin(self):
        user = create_reseller('root')
        user.is_superuser = True
        user.save()
        user.reseller_account.refresh_from_db()

        self.assertTrue(user.reseller_account.is_admin)

    def test_plain_reseller(self):
        self.assertFalse(create_reseller().reseller_account.is_admin)
