# school/models/__init__.py
from .student import Student, GENDER_CHOICES
from .financial import FeeStructure, FeePayment
from .report_card import GradeEntry, PublicBulletin, generate_verification_code

__all__ = [
    'Student',
    'GENDER_CHOICES',
    'FeeStructure',
    'FeePayment',
    'GradeEntry',
    'PublicBulletin',
    'generate_verification_code',
]
