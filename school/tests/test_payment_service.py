# school/tests/test_payment_service.py
from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from school.exceptions import DataValidationError, FeeManagementException
from school.models import FeePayment, FeeStructure
from school.services.payment_service import PaymentStatusService
from school.tests.factories import FeePaymentFactory, FeeStructureFactory, StudentFactory


class PaymentStatusServiceTest(TestCase):

    def setUp(self):
        self.student = StudentFactory()
        self.fee_structure = FeeStructureFactory()
        self.service = PaymentStatusService(today=date(2024, 12, 20))

    def pay(self, amount, payment_date):
        return FeePaymentFactory(
            student=self.student, amount=Decimal(amount), payment_date=payment_date
        )

    def test_payments_are_loaded_oldest_first(self):
        late = self.pay('50', date(2024, 11, 3))
        early = self.pay('100', date(2024, 9, 5))
        FeePaymentFactory(academic_year='2023-2024', student=self.student)

        payments = list(self.service.get_payments(self.student, '2024-2025'))
        self.assertEqual(payments, [early, late])

    def test_build_ledger_does_not_write(self):
        self.pay('250', date(2024, 10, 1))
        ledger = self.service.build_ledger(self.student)

        self.assertEqual(ledger['academic_year'], '2024-2025')
        self.assertEqual(ledger['currency'], 'CDF')
        self.assertEqual(ledger['total_paid'], Decimal('250.00'))
        self.assertEqual(ledger['remaining_until_current'], Decimal('150.00'))
        self.assertEqual(ledger['months'][2]['status'], 'partial')

        self.student.refresh_from_db()
        self.assertIsNone(self.student.fee_status_updated_at)
        self.assertEqual(self.student.fee_balance_due, Decimal('0.00'))

    def test_sync_student_with_arrears(self):
        self.pay('250', date(2024, 10, 1))
        self.service.sync_student(self.student)

        self.student.refresh_from_db()
        self.assertFalse(self.student.is_fee_paid)
        self.assertEqual(self.student.fee_balance_due, Decimal('150.00'))
        self.assertIsNotNone(self.student.fee_status_updated_at)

    def test_sync_student_up_to_date(self):
        self.pay('300', date(2024, 9, 10))
        self.pay('100', date(2024, 12, 2))
        self.service.sync_student(self.student, '2024-2025')

        self.student.refresh_from_db()
        self.assertTrue(self.student.is_fee_paid)
        self.assertEqual(self.student.fee_balance_due, Decimal('0.00'))

    def test_outside_school_months_keeps_paid_flag(self):
        self.student.is_fee_paid = True
        self.student.save()
        self.pay('600', date(2024, 9, 10))

        service = PaymentStatusService(today=date(2025, 7, 15))
        service.sync_student(self.student, '2024-2025')

        self.student.refresh_from_db()
        self.assertTrue(self.student.is_fee_paid)
        self.assertEqual(self.student.fee_balance_due, Decimal('400.00'))

    def test_missing_fee_structure(self):
        other = StudentFactory(class_level='6ème')
        with self.assertRaises(FeeManagementException):
            self.service.build_ledger(other)

    def test_invalid_academic_year(self):
        with self.assertRaises(DataValidationError):
            self.service.build_ledger(self.student, '2024')

    def test_record_payment(self):
        payment = self.service.record_payment(
            self.student, '150', payment_date=date(2025, 2, 3),
            method='mobile_money', recorded_by='Caisse'
        )

        self.assertEqual(payment.amount, Decimal('150.00'))
        self.assertEqual(payment.academic_year, '2024-2025')
        self.assertTrue(payment.reference.startswith('Ref'))
        self.assertEqual(len(payment.reference), 9)
        self.assertEqual(FeePayment.objects.filter(student=self.student).count(), 1)

    def test_record_payment_defaults_to_today(self):
        payment = self.service.record_payment(self.student, 20)
        self.assertEqual(payment.payment_date, date(2024, 12, 20))
        self.assertEqual(payment.payment_method, 'cash')

    def test_record_payment_rejects_bad_input(self):
        with self.assertRaises(DataValidationError):
            self.service.record_payment(self.student, 0)
        with self.assertRaises(DataValidationError):
            self.service.record_payment(self.student, '-5')
        with self.assertRaises(DataValidationError):
            self.service.record_payment(self.student, '500000000')
        with self.assertRaises(DataValidationError):
            self.service.record_payment(self.student, 10, method='bitcoin')
        self.assertFalse(FeePayment.objects.exists())


class FeeModelsTest(TestCase):

    def test_references_are_distinct(self):
        first = FeePaymentFactory()
        second = FeePaymentFactory(student=first.student)
        self.assertNotEqual(first.reference, second.reference)

    def test_explicit_reference_is_kept(self):
        payment = FeePaymentFactory(reference='Ref000001')
        self.assertEqual(payment.reference, 'Ref000001')

    def test_apply_installment(self):
        structure = FeeStructure(academic_year='2025-2026', class_level='1ère')
        structure.apply_installment('monthly_amount', '45')
        self.assertEqual(structure.annual_amount, Decimal('540.00'))
        self.assertEqual(structure.quarterly_amount, Decimal('135.00'))

    def test_due_dates_follow_due_day(self):
        structure = FeeStructureFactory(academic_year='2025-2026', due_day=5)
        dates = structure.get_due_dates()
        self.assertEqual(dates[0], date(2025, 9, 5))
        self.assertEqual(dates[-1], date(2026, 6, 5))

    def test_default_due_day_and_currency(self):
        structure = FeeStructure.objects.create(academic_year='2025-2026', class_level='2ème')
        self.assertEqual(structure.due_day, 15)
        self.assertEqual(structure.currency, 'CDF')

    def test_clean_rejects_bad_year(self):
        structure = FeeStructure(academic_year='2025-2027', class_level='2ème')
        with self.assertRaises(ValidationError):
            structure.clean()
