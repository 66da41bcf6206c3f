# school/services/payment_service.py
import logging

from django.db import DatabaseError, transaction
from django.utils import timezone

from school.constants.financial import (
    FINANCIAL_VALIDATION_RULES,
    PAYMENT_METHOD_DISPLAY,
)
from school.exceptions import DataValidationError, FeeManagementException
from school.models import FeePayment, FeeStructure
from school.services.payment_allocator import AllocationContext, PaymentAllocator
from school.utils.academic import get_default_academic_year, validate_academic_year
from school.utils.financial import FinancialCalculator
from school.utils.validation import normalize_payments

logger = logging.getLogger(__name__)


class PaymentStatusService:
    """
    Loads a student's fee settings and payments, builds the monthly ledger,
    and writes the derived fee status back onto the student.

    Building a ledger never writes; persist_ledger is the only write.
    """

    def __init__(self, today=None):
        self.today = today or timezone.localdate()
        self.calculator = FinancialCalculator()

    def resolve_academic_year(self, academic_year=None):
        if academic_year:
            return validate_academic_year(academic_year)
        return get_default_academic_year(self.today)

    def get_fee_structure(self, student, academic_year):
        try:
            return FeeStructure.objects.get(
                class_level=student.class_level, academic_year=academic_year
            )
        except FeeStructure.DoesNotExist:
            raise FeeManagementException(
                f"No fee structure for class {student.class_level} in {academic_year}",
                details={'student_id': student.student_id, 'academic_year': academic_year},
            )

    def get_payments(self, student, academic_year):
        """Payments of the year, oldest first"""
        return FeePayment.objects.filter(
            student=student, academic_year=academic_year
        ).order_by('payment_date', 'created_at', 'id')

    def build_ledger(self, student, academic_year=None):
        academic_year = self.resolve_academic_year(academic_year)
        fee_structure = self.get_fee_structure(student, academic_year)
        payments = normalize_payments(self.get_payments(student, academic_year))

        context = AllocationContext(
            fee_structure.monthly_amount,
            fee_structure.get_due_dates(),
            today=self.today,
        )
        ledger = PaymentAllocator(context).allocate(payments)
        ledger['academic_year'] = academic_year
        ledger['currency'] = fee_structure.currency
        ledger['monthly_amount'] = context.monthly_amount
        return ledger

    def persist_ledger(self, student, ledger):
        """
        Store the fee status derived from a ledger on the student.

        is_fee_paid reflects whether the month containing today is fully
        covered; outside the school months it is left as it was.
        """
        current_index = ledger['current_month_index']
        update_fields = ['fee_balance_due', 'fee_status_updated_at', 'updated_at']

        if current_index is not None:
            student.is_fee_paid = ledger['months'][current_index]['remaining_amount'] <= 0
            update_fields.append('is_fee_paid')

        student.fee_balance_due = ledger['remaining_until_current']
        student.fee_status_updated_at = timezone.now()
        student.save(update_fields=update_fields)

        logger.info(
            f"Fee status synced for {student.student_id}: "
            f"paid={student.is_fee_paid}, balance due={student.fee_balance_due}"
        )
        return student

    def sync_student(self, student, academic_year=None):
        ledger = self.build_ledger(student, academic_year)
        self.persist_ledger(student, ledger)
        return ledger

    def record_payment(self, student, amount, payment_date=None, method='cash',
                       recorded_by='', academic_year=None, notes=''):
        """Validate and store a payment. The student's status is not resynced here."""
        amount = self.calculator.safe_decimal(amount)
        if amount < FINANCIAL_VALIDATION_RULES['min_amount_per_transaction']:
            raise DataValidationError(
                "Payment amount must be positive",
                validation_errors={'amount': str(amount)},
            )
        if amount > FINANCIAL_VALIDATION_RULES['max_amount_per_transaction']:
            raise DataValidationError(
                "Payment amount exceeds the per-transaction limit",
                validation_errors={'amount': str(amount)},
            )
        if method not in PAYMENT_METHOD_DISPLAY:
            raise DataValidationError(
                f"Unknown payment method: {method}",
                validation_errors={'payment_method': method},
            )

        payment_date = payment_date or self.today
        if academic_year:
            academic_year = validate_academic_year(academic_year)
        else:
            academic_year = get_default_academic_year(payment_date)

        try:
            with transaction.atomic():
                payment = FeePayment.objects.create(
                    student=student,
                    academic_year=academic_year,
                    amount=amount,
                    payment_date=payment_date,
                    payment_method=method,
                    recorded_by=recorded_by or '',
                    notes=notes,
                )
        except DatabaseError as e:
            logger.error(f"Failed to record payment for {student.student_id}: {e}")
            raise FeeManagementException(
                "Payment could not be recorded",
                details={'student_id': student.student_id, 'error': str(e)},
            ) from e

        logger.info(
            f"Payment {payment.reference} of {self.calculator.format_amount(amount)} "
            f"recorded for {student.student_id} ({academic_year})"
        )
        return payment
