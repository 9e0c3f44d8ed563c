# ===============================================================================
# BILLING RENEWAL FAN-OUT TESTS
# ===============================================================================

from datetime import date
from decimal import Decimal

from django.test import TestCase

from apps.billing.models import Payment
from apps.billing.renewal_service import RenewalFanoutCoordinator, collect_targets, split_amount
from tests.factories.resellerhub import create_customer, create_reseller


class SplitAmountTestCase(TestCase):
    """Test cent-exact payment splits"""

    def test_even_split(self):
        self.assertEqual(split_amount(Decimal('70.00'), 2), [Decimal('35.00'), Decimal('35.00')])

    def test_leftover_cents_go_to_first_share(self):
        shares = split_amount(Decimal('100.00'), 3)

        self.assertEqual(shares, [Decimal('33.34'), Decimal('33.33'), Decimal('33.33')])
        self.assertEqual(sum(shares), Decimal('100.00'))

    def test_no_parts(self):
        self.assertEqual(split_amount(Decimal('10.00'), 0), [])


class RenewalFanoutTestCase(TestCase):
    """Test applying one payment to every matched customer"""

    def setUp(self):
        self.reseller = create_reseller()
        self.today = date(2025, 6, 10)

    def test_each_customer_extends_from_own_due_date(self):
        early = create_customer(self.reseller, name='A', username='a1', due_date=date(2025, 6, 20))
        late = create_customer(self.reseller, name='B', username='b1', due_date=date(2025, 5, 1), status='suspended')

        result = RenewalFanoutCoordinator.apply(
            [early, late], Decimal('70.00'), 30, source='cakto', external_reference='txn_1', today=self.today
        )

        early.refresh_from_db()
        late.refresh_from_db()
        self.assertEqual(early.due_date, date(2025, 7, 20))
        self.assertEqual(late.due_date, date(2025, 7, 10))
        self.assertEqual(late.status, 'active')
        self.assertEqual(result.primary_due_date, date(2025, 7, 20))
        self.assertEqual(result.renewals[1].previous_due_date, date(2025, 5, 1))

    def test_payment_rows_sum_to_amount(self):
        customers = [create_customer(self.reseller, name=f'C{i}') for i in range(3)]

        result = RenewalFanoutCoordinator.apply(customers, Decimal('100.00'), 30, today=self.today)

        payments = Payment.objects.filter(customer__in=customers)
        self.assertEqual(payments.count(), 3)
        self.assertEqual(sum(p.amount for p in payments), Decimal('100.00'))
        self.assertEqual(len(result.payments), 3)
        self.assertTrue(all(p.method == 'pix' and p.confirmed for p in payments))

    def test_payment_carries_transaction_reference(self):
        customer = create_customer(self.reseller)

        RenewalFanoutCoordinator.apply(
            [customer], Decimal('35.00'), 30, source='cakto', external_reference='txn_9', today=self.today
        )

        payment = Payment.objects.get(customer=customer)
        self.assertEqual(payment.external_reference, 'txn_9')
        self.assertEqual(payment.source, 'cakto')
        self.assertEqual(payment.payment_date, self.today)

    def test_zero_amount_records_no_payment(self):
        customer = create_customer(self.reseller)

        result = RenewalFanoutCoordinator.apply([customer], Decimal('0'), 30, today=self.today)

        self.assertEqual(result.payments, [])
        self.assertFalse(Payment.objects.filter(customer=customer).exists())
        customer.refresh_from_db()
        self.assertEqual(customer.due_date, date(2025, 7, 10))

    def test_targets_are_deduplicated_across_customers(self):
        first = create_customer(self.reseller, name='A', username='joao01, joao02')
        second = create_customer(self.reseller, name='B', username='JOAO02,joao03')

        result = RenewalFanoutCoordinator.apply([first, second], Decimal('70.00'), 30, today=self.today)

        self.assertEqual([t.username for t in result.targets], ['joao01', 'joao02', 'joao03'])
        self.assertEqual(result.targets[1].customer, first)
        self.assertEqual(result.targets[2].customer, second)


class CollectTargetsTestCase(TestCase):
    """Test panel login collection"""

    def test_customers_without_usernames_yield_nothing(self):
        reseller = create_reseller()
        customer = create_customer(reseller, username='')

        self.assertEqual(collect_targets([customer]), [])
