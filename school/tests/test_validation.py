# school/tests/test_validation.py
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from school.exceptions import DataValidationError
from school.utils.validation import (
    normalize_grade_row,
    normalize_notes,
    normalize_payments,
    parse_score,
    validate_due_dates,
)


class ParseScoreTest(SimpleTestCase):

    def test_numbers_and_strings(self):
        self.assertEqual(parse_score(12), 12.0)
        self.assertEqual(parse_score(' 14.5 '), 14.5)
        self.assertEqual(parse_score('12,5'), 12.5)

    def test_missing_values(self):
        for value in (None, '', '   ', 'abs', True, float('nan')):
            self.assertIsNone(parse_score(value), value)


class NormalizeNotesTest(SimpleTestCase):

    def test_mixed_shapes(self):
        notes = normalize_notes([
            {'value': '15', 'weight': 2},
            {'valeur': 10, 'coefficient': '1'},
            (8, 3),
            {'value': None},
        ])
        self.assertEqual(notes, [
            {'value': 15.0, 'weight': 2.0},
            {'value': 10.0, 'weight': 1.0},
            {'value': 8.0, 'weight': 3.0},
            {'value': 0.0, 'weight': 0.0},
        ])

    def test_negative_weight_clamped(self):
        self.assertEqual(normalize_notes([(10, -1)]), [{'value': 10.0, 'weight': 0.0}])


class NormalizePaymentsTest(SimpleTestCase):

    def test_keeps_order_and_drops_non_positive(self):
        payments = normalize_payments([
            {'amount': '150'},
            SimpleNamespace(amount=Decimal('20.005')),
            {'amount': 0},
            {'amount': -40},
            {'montant': '1 000 FC'},
            {'amount': 'n/a'},
        ])
        self.assertEqual(payments, [
            {'amount': Decimal('150.00')},
            {'amount': Decimal('20.01')},
            {'amount': Decimal('1000.00')},
        ])


class NormalizeGradeRowTest(SimpleTestCase):

    def test_stored_scores_spread_over_nine_slots(self):
        self.assertEqual(
            normalize_grade_row(['8', 9, '18', '7', None, '']),
            [8.0, 9.0, 18.0, 0, 7.0, None, None, 0, 0]
        )

    def test_short_stored_row_is_padded(self):
        self.assertEqual(
            normalize_grade_row([5]),
            [5.0, None, None, 0, None, None, None, 0, 0]
        )

    def test_full_row_keeps_layout(self):
        self.assertEqual(
            normalize_grade_row([8, 9, 18, 35, 7, 8, 17, 32, 67]),
            [8.0, 9.0, 18.0, 0, 7.0, 8.0, 17.0, 0, 0]
        )

    def test_empty(self):
        self.assertEqual(normalize_grade_row(None), [None, None, None, 0, None, None, None, 0, 0])

    def test_scalar_row_is_treated_as_empty(self):
        empty = [None, None, None, 0, None, None, None, 0, 0]
        with self.assertLogs('school.utils.validation', level='WARNING'):
            self.assertEqual(normalize_grade_row(5), empty)
        self.assertEqual(normalize_grade_row('12'), empty)
        self.assertEqual(normalize_grade_row({'p1': 8}), empty)


class DueDatesTest(SimpleTestCase):

    def dates(self):
        return [date(2024, m, 15) for m in (9, 10, 11, 12)] + [date(2025, m, 15) for m in range(1, 7)]

    def test_valid_schedule(self):
        schedule = self.dates()
        schedule[0] = datetime(2024, 9, 15, 8, 0)
        self.assertEqual(validate_due_dates(schedule), self.dates())

    def test_wrong_length(self):
        with self.assertRaises(DataValidationError):
            validate_due_dates(self.dates()[:-1])

    def test_duplicate_dates(self):
        schedule = self.dates()
        schedule[2] = schedule[1]
        with self.assertRaises(DataValidationError):
            validate_due_dates(schedule)

    def test_not_dates(self):
        schedule = self.dates()
        schedule[0] = '2024-09-15'
        with self.assertRaises(DataValidationError) as ctx:
            validate_due_dates(schedule)
        self.assertIn('due_dates', ctx.exception.validation_errors)
