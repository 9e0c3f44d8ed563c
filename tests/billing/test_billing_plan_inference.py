# ===============================================================================
# BILLING PLAN INFERENCE TESTS
# ===============================================================================

from decimal import Decimal

from django.test import TestCase

from apps.billing.plan_inference import PlanInferenceService, nearest_plan, within_tolerance
from tests.factories.resellerhub import create_customer, create_plan, create_reseller


class PlanInferenceTestCase(TestCase):
    """Test what a payment amount buys"""

    def setUp(self):
        self.reseller = create_reseller()
        self.monthly = create_plan(self.reseller, 'Mensal', '35.00', 30)
        self.quarterly = create_plan(self.reseller, 'Trimestral', '90.00', 90)
        self.semiannual = create_plan(self.reseller, 'Semestral', '170.00', 180)

    def test_single_screen_exact_price(self):
        customer = create_customer(self.reseller)

        match = PlanInferenceService.infer(customer, Decimal('90.00'))

        self.assertEqual(match.duration_days, 90)
        self.assertEqual(match.plan_name, 'Trimestral')
        self.assertEqual(match.source, 'per_screen')

    def test_two_screens_pay_twice_the_plan(self):
        """R$70 for 2 screens is two monthly plans, not a different plan"""
        customer = create_customer(self.reseller, screens=2)

        match = PlanInferenceService.infer(customer, Decimal('70.00'))

        self.assertEqual(match.duration_days, 30)
        self.assertEqual(match.plan, self.monthly)
        self.assertEqual(match.source, 'per_screen')

    def test_total_price_fallback(self):
        """Per-screen share fits nothing, the total fits a plan"""
        customer = create_customer(self.reseller, screens=3)

        match = PlanInferenceService.infer(customer, Decimal('170.00'))

        self.assertEqual(match.plan, self.semiannual)
        self.assertEqual(match.source, 'total')

    def test_tolerance_band(self):
        customer = create_customer(self.reseller)

        self.assertEqual(PlanInferenceService.infer(customer, Decimal('32.00')).plan, self.monthly)
        self.assertEqual(PlanInferenceService.infer(customer, Decimal('50.00')).source, 'unmatched')

    def test_custom_price_uses_assigned_plan_duration(self):
        customer = create_customer(self.reseller, plan=self.quarterly, custom_price=Decimal('60.00'))

        match = PlanInferenceService.infer(customer, Decimal('60.00'))

        self.assertEqual(match.duration_days, 90)
        self.assertEqual(match.source, 'custom_price')

    def test_assigned_plan_fallback(self):
        customer = create_customer(self.reseller, plan=self.semiannual)

        match = PlanInferenceService.infer(customer, Decimal('12.00'))

        self.assertEqual(match.duration_days, 180)
        self.assertEqual(match.source, 'assigned_plan')
        self.assertFalse(match.is_unmatched)

    def test_unmatched_defaults_to_thirty_days(self):
        customer = create_customer(self.reseller)

        match = PlanInferenceService.infer(customer, Decimal('12.00'))

        self.assertEqual(match.duration_days, 30)
        self.assertTrue(match.is_unmatched)
        self.assertIsNone(match.plan)

    def test_catalog_is_scoped_to_owner(self):
        other = create_reseller('outra_loja')
        create_plan(other, 'Anual', '12.00', 365)
        customer = create_customer(self.reseller)

        match = PlanInferenceService.infer(customer, Decimal('12.00'))

        self.assertEqual(match.source, 'unmatched')


class NearestPlanTestCase(TestCase):
    """Test closest-price selection"""

    def test_closest_plan_wins(self):
        reseller = create_reseller()
        low = create_plan(reseller, 'A', '30.00')
        high = create_plan(reseller, 'B', '33.00')

        self.assertEqual(nearest_plan([low, high], Decimal('32.50'), Decimal('0.10')), high)
        self.assertIsNone(nearest_plan([low, high], Decimal('50.00'), Decimal('0.10')))

    def test_within_tolerance_is_relative_to_price(self):
        self.assertTrue(within_tolerance(Decimal('100.00'), Decimal('110.00'), Decimal('0.10')))
        self.assertFalse(within_tolerance(Decimal('100.00'), Decimal('110.01'), Decimal('0.10')))
