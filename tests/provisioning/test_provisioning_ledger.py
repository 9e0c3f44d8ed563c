# ===============================================================================
# PROVISIONING CREDIT LEDGER TESTS
# ===============================================================================

from unittest.mock import MagicMock

from django.contrib.auth import get_user_model
from django.test import TestCase

from apps.customers.models import ResellerAccount
from apps.provisioning.ledger import CreditLedgerCoordinator, ExternalLedger, LedgerCharge, PrimaryLedger
from tests.factories.resellerhub import create_admin, create_reseller

User = get_user_model()


class CreditLedgerCoordinatorTestCase(TestCase):
    """Test which ledger pays for a renewal"""

    def setUp(self):
        self.reseller = create_reseller(credits=10)

    def _balance(self, user=None):
        return ResellerAccount.objects.get(user=user or self.reseller).credits

    def test_primary_charge_and_refund(self):
        charge = CreditLedgerCoordinator.charge(self.reseller.pk, 3).unwrap()

        self.assertIsInstance(charge.ledger, PrimaryLedger)
        self.assertEqual(charge.label, 'primary')
        self.assertEqual(self._balance(), 7)

        self.assertTrue(CreditLedgerCoordinator.refund(charge))
        self.assertEqual(self._balance(), 10)

    def test_insufficient_primary_without_external(self):
        result = CreditLedgerCoordinator.charge(self.reseller.pk, 11)

        self.assertTrue(result.is_err())
        self.assertIn('Insufficient credits', result.error)
        self.assertEqual(self._balance(), 10)

    def test_exact_balance_can_be_spent(self):
        self.assertTrue(CreditLedgerCoordinator.charge(self.reseller.pk, 10).is_ok())
        self.assertEqual(self._balance(), 0)

    def test_admin_is_unmetered(self):
        admin = create_admin()

        charge = CreditLedgerCoordinator.charge(admin.pk, 12).unwrap()

        self.assertTrue(charge.is_unmetered)
        self.assertEqual(charge.label, 'unmetered')
        self.assertTrue(CreditLedgerCoordinator.refund(charge))
        self.assertEqual(self._balance(admin), 0)

    def test_superuser_without_account_is_unmetered(self):
        root = User.objects.create_superuser(username='root', email='root@example.com', password='x')

        self.assertTrue(CreditLedgerCoordinator.charge(root.pk, 1).unwrap().is_unmetered)

    def test_user_without_account_cannot_be_charged(self):
        user = User.objects.create_user(username='solto', password='x')

        result = CreditLedgerCoordinator.charge(user.pk, 1)

        self.assertTrue(result.is_err())
        self.assertIn('no credit account', result.error)

    def test_external_ledger_when_primary_is_short(self):
        store = MagicMock()
        store.debit.return_value = True
        external = ExternalLedger(table='reg_users', column='credits', row_key='3', store=store)

        charge = CreditLedgerCoordinator.charge(self.reseller.pk, 20, external=lambda: external).unwrap()

        self.assertEqual(charge.label, 'external:reg_users.credits')
        store.debit.assert_called_once_with('reg_users', 'credits', 'id', '3', 20)
        self.assertEqual(self._balance(), 10)

        CreditLedgerCoordinator.refund(charge)
        store.credit.assert_called_once_with('reg_users', 'credits', 'id', '3', 20)

    def test_external_not_consulted_when_primary_pays(self):
        external = MagicMock()

        CreditLedgerCoordinator.charge(self.reseller.pk, 2, external=external)

        external.assert_not_called()

    def test_external_balance_row_missing(self):
        result = CreditLedgerCoordinator.charge(self.reseller.pk, 20, external=lambda: None)

        self.assertTrue(result.is_err())
        self.assertIn('no balance found in panel database', result.error)

    def test_external_balance_insufficient(self):
        store = MagicMock()
        store.debit.return_value = False
        external = ExternalLedger(table='reg_users', column='credits', row_key='3', store=store)

        result = CreditLedgerCoordinator.charge(self.reseller.pk, 20, external=lambda: external)

        self.assertTrue(result.is_err())
        self.assertIn('insufficient panel balance', result.error)

    def test_failed_refund_is_reported(self):
        orphan = ExternalLedger(table='reg_users', column='credits', row_key='3', store=None)

        self.assertFalse(CreditLedgerCoordinator.refund(LedgerCharge(orphan, 2)))
