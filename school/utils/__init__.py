# school/utils/__init__.py
from .financial import FinancialCalculator
from .academic import calculate_due_dates, get_default_academic_year, validate_academic_year

__all__ = [
    'FinancialCalculator',
    'calculate_due_dates',
    'get_default_academic_year',
    'validate_academic_year',
]
