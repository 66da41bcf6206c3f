# school/models/financial.py
import time
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.crypto import get_random_string

from school.constants.financial import (
    DEFAULT_CURRENCY,
    DEFAULT_DUE_DAY,
    FINANCIAL_VALIDATION_RULES,
    PAYMENT_METHOD_CHOICES,
    PAYMENT_REFERENCE_PREFIX,
)
from school.exceptions import DataValidationError
from school.utils.academic import calculate_due_dates, validate_academic_year
from school.utils.financial import FinancialCalculator

from .student import Student


def default_currency():
    return getattr(settings, 'DEFAULT_CURRENCY', DEFAULT_CURRENCY)


def default_due_day():
    return getattr(settings, 'FEE_DUE_DAY', DEFAULT_DUE_DAY)


class FeeStructure(models.Model):
    """Tuition settings of one class level for one school year"""

    academic_year = models.CharField(max_length=9, help_text="Format: YYYY-YYYY")
    class_level = models.CharField(max_length=50)

    annual_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    quarterly_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    monthly_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    currency = models.CharField(max_length=5, default=default_currency)
    enrollment_fee = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    late_fee = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    due_day = models.PositiveSmallIntegerField(
        default=default_due_day,
        validators=[
            MinValueValidator(FINANCIAL_VALIDATION_RULES['min_due_day']),
            MaxValueValidator(FINANCIAL_VALIDATION_RULES['max_due_day']),
        ]
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-academic_year', 'class_level']
        unique_together = ['class_level', 'academic_year']
        verbose_name = 'Fee Structure'
        verbose_name_plural = 'Fee Structures'

    def __str__(self):
        return f"{self.class_level} - {self.academic_year} ({self.monthly_amount} {self.currency}/month)"

    def clean(self):
        try:
            validate_academic_year(self.academic_year)
        except DataValidationError as e:
            raise ValidationError({'academic_year': e.message})

    def apply_installment(self, field, value):
        """Set one installment amount and recompute the other two"""
        for name, amount in FinancialCalculator.derive_installments(field, value).items():
            setattr(self, name, amount)
        return self

    def get_due_dates(self):
        return calculate_due_dates(self.academic_year, self.due_day)


class FeePayment(models.Model):
    """A tuition payment as recorded at the bursar's desk"""

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='fee_payments')
    academic_year = models.CharField(max_length=9)
    amount = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(FINANCIAL_VALIDATION_RULES['min_amount_per_transaction'])]
    )
    payment_date = models.DateField(default=timezone.localdate)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='cash')
    reference = models.CharField(max_length=20, blank=True, db_index=True)
    recorded_by = models.CharField(max_length=150, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        # Allocation consumes payments in this order
        ordering = ['payment_date', 'created_at', 'id']
        verbose_name = 'Fee Payment'
        verbose_name_plural = 'Fee Payments'
        indexes = [
            models.Index(fields=['student', 'academic_year'], name='feepayment_student_year_idx'),
        ]

    def __str__(self):
        return f"{self.reference} - {self.amount} ({self.student.student_id})"

    def save(self, *args, **kwargs):
        if not self.reference:
            self.reference = self.generate_reference()
        super().save(*args, **kwargs)

    @classmethod
    def generate_reference(cls):
        """'Ref' followed by the last six digits of the current timestamp"""
        reference = f"{PAYMENT_REFERENCE_PREFIX}{str(int(time.time() * 1000))[-6:]}"
        while cls.objects.filter(reference=reference).exists():
            reference = f"{PAYMENT_REFERENCE_PREFIX}{get_random_string(6, '0123456789')}"
        return reference
