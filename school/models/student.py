# school/models/student.py
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

GENDER_CHOICES = [
    ('M', 'Masculin'),
    ('F', 'Féminin'),
]


class Student(models.Model):
    """A pupil enrolled at the school, identified by their permanent number"""

    student_id = models.CharField(
        max_length=30, unique=True,
        help_text="Permanent registration number (numéro permanent)"
    )
    last_name = models.CharField(max_length=100)
    middle_name = models.CharField(max_length=100, blank=True, help_text="Post-nom")
    first_name = models.CharField(max_length=100, blank=True)
    gender = models.CharField(max_length=1, choices=GENDER_CHOICES)
    date_of_birth = models.DateField(null=True, blank=True)
    place_of_birth = models.CharField(max_length=100, blank=True)

    class_level = models.CharField(max_length=50, help_text="e.g. 4ème")
    section = models.CharField(max_length=100, blank=True, help_text="e.g. Électricité")
    school_code = models.CharField(max_length=20, blank=True)
    is_active = models.BooleanField(default=True)

    # Written only by PaymentStatusService.persist_ledger
    is_fee_paid = models.BooleanField(default=False)
    fee_balance_due = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    fee_status_updated_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['class_level', 'last_name', 'middle_name', 'first_name']
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        indexes = [
            models.Index(fields=['class_level'], name='student_class_level_idx'),
            models.Index(fields=['is_active'], name='student_is_active_idx'),
        ]

    def __str__(self):
        return f"{self.get_full_name()} ({self.student_id})"

    def get_full_name(self):
        return " ".join(part for part in (self.last_name, self.middle_name, self.first_name) if part)

    @property
    def full_class(self):
        return f"{self.class_level} {self.section}".strip()
