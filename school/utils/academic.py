# school/utils/academic.py
"""
Academic calendar helpers: school years and monthly due dates.
"""
import re
from datetime import date

from django.utils import timezone

from school.constants.financial import (
    DEFAULT_DUE_DAY,
    FINANCIAL_VALIDATION_RULES,
    SCHOOL_MONTH_NUMBERS,
)
from school.exceptions import DataValidationError

ACADEMIC_YEAR_PATTERN = re.compile(r'^(\d{4})-(\d{4})$')


def get_default_academic_year(today=None):
    """
    School year a given day belongs to, as 'YYYY-YYYY'.
    January to June close the year started last September; July and
    August already count towards the coming year.
    """
    today = today or timezone.localdate()
    if today.month <= 6:
        return f"{today.year - 1}-{today.year}"
    return f"{today.year}-{today.year + 1}"


def parse_academic_year(academic_year):
    """Return (start_year, end_year) for a 'YYYY-YYYY' string"""
    match = ACADEMIC_YEAR_PATTERN.match(str(academic_year or '').strip())
    if not match:
        raise DataValidationError(
            "Academic year must be in format YYYY-YYYY",
            validation_errors={'academic_year': academic_year},
        )

    start_year, end_year = int(match.group(1)), int(match.group(2))
    if end_year != start_year + 1:
        raise DataValidationError(
            "The second year must be exactly one year after the first year",
            validation_errors={'academic_year': academic_year},
        )
    return start_year, end_year


def validate_academic_year(academic_year):
    """Raise DataValidationError unless the value is a valid school year"""
    parse_academic_year(academic_year)
    return str(academic_year).strip()


def calculate_due_dates(academic_year, due_day=DEFAULT_DUE_DAY):
    """
    Ten monthly due dates for a school year: September to December of the
    first year, January to June of the second.
    """
    start_year, end_year = parse_academic_year(academic_year)

    if not FINANCIAL_VALIDATION_RULES['min_due_day'] <= due_day <= FINANCIAL_VALIDATION_RULES['max_due_day']:
        raise DataValidationError(
            f"Due day must be between {FINANCIAL_VALIDATION_RULES['min_due_day']} "
            f"and {FINANCIAL_VALIDATION_RULES['max_due_day']}",
            validation_errors={'due_day': due_day},
        )

    return [
        date(start_year if month >= 9 else end_year, month, due_day)
        for month in SCHOOL_MONTH_NUMBERS
    ]
