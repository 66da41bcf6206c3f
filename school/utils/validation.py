# school/utils/validation.py
"""
Boundary normalization for loosely shaped records (form posts, imported
JSON, legacy documents) before they reach the ledger and grading code.
"""
import math
from datetime import date, datetime
import logging

from school.constants.academic import (
    FIRST_SEMESTER_COLUMNS,
    GRADE_COLUMN_COUNT,
    MIN_GRADE_ROW_LENGTH,
    SECOND_SEMESTER_COLUMNS,
    STORED_SCORE_COUNT,
)
from school.constants.financial import SCHOOL_MONTH_COUNT
from school.exceptions import DataValidationError
from school.utils.financial import FinancialCalculator

logger = logging.getLogger(__name__)

RAW_SCORE_COLUMNS = FIRST_SEMESTER_COLUMNS + SECOND_SEMESTER_COLUMNS


def parse_score(value):
    """
    Parse a single score cell.
    Returns a float, or None when the cell is empty or unparsable.
    Accepts the French decimal comma ('12,5').
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        score = float(value)
    else:
        text = str(value).strip().replace(',', '.')
        if not text:
            return None
        try:
            score = float(text)
        except ValueError:
            logger.warning(f"Unparsable score value: {value!r}")
            return None

    if not math.isfinite(score):
        return None
    return score


def _read(record, *names):
    """First present attribute/key among names, for dicts and objects alike"""
    for name in names:
        if isinstance(record, dict):
            if record.get(name) is not None:
                return record[name]
        elif getattr(record, name, None) is not None:
            return getattr(record, name)
    return None


def normalize_notes(raw_notes):
    """
    Coerce weighted notes into [{'value': float, 'weight': float}].

    Each note may be a dict using value/weight or valeur/coefficient keys, or
    a (value, weight) pair. Missing numbers default to 0 and negative weights
    are clamped to 0.
    """
    notes = []
    for raw in raw_notes or []:
        if isinstance(raw, (list, tuple)):
            value = raw[0] if len(raw) > 0 else None
            weight = raw[1] if len(raw) > 1 else None
        else:
            value = _read(raw, 'value', 'valeur')
            weight = _read(raw, 'weight', 'coefficient')

        value = parse_score(value) or 0.0
        weight = parse_score(weight) or 0.0
        notes.append({'value': value, 'weight': max(weight, 0.0)})
    return notes


def normalize_payments(raw_payments):
    """
    Coerce payment records into [{'amount': Decimal}] keeping caller order.
    Records without a positive amount are dropped.
    """
    payments = []
    for raw in raw_payments or []:
        amount = FinancialCalculator.safe_decimal(_read(raw, 'amount', 'montant'))
        if amount <= 0:
            logger.warning(f"Ignoring payment record without a positive amount: {raw!r}")
            continue
        payments.append({'amount': amount})
    return payments


def normalize_grade_row(raw_row):
    """
    Coerce a subject's scores into a 9-slot grade row.

    Stored entries carry six scores [P1, P2, EXAM1, P3, P4, EXAM2]; they are
    spread over the raw columns with the derived slots (3, 7, 8) set to 0.
    Rows that already have at least 7 slots keep their layout. Missing or
    unparsable scores stay None so completeness can be judged later.
    Anything other than a list or tuple is treated as an empty row.
    """
    if raw_row is not None and not isinstance(raw_row, (list, tuple)):
        logger.warning(f"Ignoring malformed grade row: {raw_row!r}")
        raw_row = None
    values = list(raw_row or [])
    row = [None] * GRADE_COLUMN_COUNT

    if len(values) >= MIN_GRADE_ROW_LENGTH:
        for column in RAW_SCORE_COLUMNS:
            row[column] = parse_score(values[column])
    else:
        values = (values + [None] * STORED_SCORE_COUNT)[:STORED_SCORE_COUNT]
        for column, value in zip(RAW_SCORE_COLUMNS, values):
            row[column] = parse_score(value)

    for derived in (3, 7, 8):
        row[derived] = 0
    return row


def validate_due_dates(due_dates):
    """
    Check a due-date schedule: one date per school month, strictly increasing.
    Datetimes are reduced to their date. Returns the list of dates.
    """
    dates = []
    for value in due_dates or []:
        if isinstance(value, datetime):
            value = value.date()
        if not isinstance(value, date):
            raise DataValidationError(
                "Due dates must be dates",
                validation_errors={'due_dates': repr(value)},
            )
        dates.append(value)

    if len(dates) != SCHOOL_MONTH_COUNT:
        raise DataValidationError(
            f"Expected {SCHOOL_MONTH_COUNT} due dates, got {len(dates)}",
            validation_errors={'due_dates': len(dates)},
        )

    for previous, following in zip(dates, dates[1:]):
        if following <= previous:
            raise DataValidationError(
                "Due dates must be strictly increasing",
                validation_errors={'due_dates': f"{previous} >= {following}"},
            )
    return dates
