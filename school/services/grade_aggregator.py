# school/services/grade_aggregator.py
"""
Report-card arithmetic.

Grade rows have nine slots:
    [P1, P2, EXAM1, TOTAL1, P3, P4, EXAM2, TOTAL2, GENERAL]
Only P1..EXAM2 are read from a row; TOTAL1, TOTAL2 and GENERAL are always
derived. Everything here is a pure function of its arguments.
"""
import logging

from school.constants.academic import (
    FIRST_SEMESTER_COLUMNS,
    GENERAL_TOTAL,
    GRADE_COLUMN_COUNT,
    MIN_GRADE_ROW_LENGTH,
    PERCENTAGE_SENTINEL,
    RANKING_CATEGORIES,
    SECOND_SEMESTER_COLUMNS,
)
from school.utils.validation import normalize_notes, parse_score

logger = logging.getLogger(__name__)


def compute_weighted_average(notes):
    """
    Weighted mean of notes given as {'value', 'weight'} dicts or pairs.
    Returns 0 for an empty list or when every weight is 0.
    """
    notes = normalize_notes(notes)
    total_weight = sum(note['weight'] for note in notes)
    if total_weight <= 0:
        return 0
    return sum(note['value'] * note['weight'] for note in notes) / total_weight


def _score(value):
    """Cell value for summing: missing, unparsable and negative count as 0"""
    score = parse_score(value)
    if score is None or score < 0:
        return 0
    return score


def calculate_totals(grades):
    """Column totals of a grade table; rows shorter than 7 slots are skipped"""
    totals = [0] * GRADE_COLUMN_COUNT

    for row in grades or []:
        if len(row) < MIN_GRADE_ROW_LENGTH:
            continue

        first = [_score(row[c]) for c in FIRST_SEMESTER_COLUMNS]
        second = [_score(row[c]) for c in SECOND_SEMESTER_COLUMNS]
        first_total = sum(first)
        second_total = sum(second)

        totals[0] += first[0]
        totals[1] += first[1]
        totals[2] += first[2]
        totals[3] += first_total
        totals[4] += second[0]
        totals[5] += second[1]
        totals[6] += second[2]
        totals[7] += second_total
        totals[GENERAL_TOTAL] += first_total + second_total

    return totals


def _padded_maxima(maxima):
    values = [_score(value) for value in list(maxima or [])[:GRADE_COLUMN_COUNT]]
    return values + [0] * (GRADE_COLUMN_COUNT - len(values))


def _add_maxima(max_totals, maxima):
    m = _padded_maxima(maxima)
    max_totals[0] += m[0]
    max_totals[1] += m[1]
    max_totals[2] += m[2]
    max_totals[3] += m[0] + m[1] + m[2]
    max_totals[4] += m[4]
    max_totals[5] += m[5]
    max_totals[6] += m[6]
    max_totals[7] += m[4] + m[5] + m[6]
    max_totals[8] += m[8]


def calculate_max_totals(sections):
    """
    Column maxima totals: each section's maxima counted once per subject.
    Semester slots are rebuilt from their columns; the general slot comes
    straight from the section table.
    """
    max_totals = [0] * GRADE_COLUMN_COUNT
    for section in sections or []:
        for _subject in section.get('subjects', []):
            _add_maxima(max_totals, section.get('maxima'))
    return max_totals


def flatten_subjects(sections):
    """Subject names of all sections, in section order"""
    return [subject for section in sections or [] for subject in section.get('subjects', [])]


def maxima_for_subject(subject_name, sections):
    """Maxima row of the section listing the subject; all zeros when none does"""
    for section in sections or []:
        if subject_name in section.get('subjects', []):
            return _padded_maxima(section.get('maxima'))
    logger.warning(f"No maxima defined for subject '{subject_name}', counting it as 0")
    return [0] * GRADE_COLUMN_COUNT


def calculate_max_totals_for_subjects(subject_names, sections):
    """Same as calculate_max_totals, for an explicit list of subject names"""
    max_totals = [0] * GRADE_COLUMN_COUNT
    for name in subject_names:
        _add_maxima(max_totals, maxima_for_subject(name, sections))
    return max_totals


def _percentage(value, maximum):
    if maximum <= 0:
        return PERCENTAGE_SENTINEL
    return f"{value / maximum * 100:.2f}"


def calculate_percentages(totals, max_totals):
    return [_percentage(total, maximum) for total, maximum in zip(totals, max_totals)]


def compute_specific_percentages(totals, max_totals):
    return {
        'exam_percentage': _percentage(totals[2] + totals[6], max_totals[2] + max_totals[6]),
        'total_semester_percentage': _percentage(
            totals[3] + totals[7], max_totals[3] + max_totals[7]
        ),
        'general_percentage': _percentage(totals[GENERAL_TOTAL], max_totals[GENERAL_TOTAL]),
    }


def aggregate_grades(grades, sections):
    """
    Totals, maxima totals and percentages of a grade table.

    Returns: {
        'totals': [9 numbers],
        'max_totals': [9 numbers],
        'percentages': [9 strings],
        'specific': {'exam_percentage', 'total_semester_percentage',
                     'general_percentage'},
    }
    """
    totals = calculate_totals(grades)
    max_totals = calculate_max_totals(sections)
    return {
        'totals': totals,
        'max_totals': max_totals,
        'percentages': calculate_percentages(totals, max_totals),
        'specific': compute_specific_percentages(totals, max_totals),
    }


def semester_completeness(rows):
    """
    Whether every subject has its three scores for each semester.
    The general total is complete only when both semesters are.
    """
    rows = [row for row in rows or [] if len(row) >= MIN_GRADE_ROW_LENGTH]

    def complete(columns):
        return bool(rows) and all(
            all(row[c] is not None for c in columns) for row in rows
        )

    first = complete(FIRST_SEMESTER_COLUMNS)
    second = complete(SECOND_SEMESTER_COLUMNS)
    return {
        'first_semester': first,
        'second_semester': second,
        'general': first and second,
    }


def compute_rankings(class_rows, student_key):
    """
    Class position of one student per ranking category.

    class_rows maps each student key to that student's grade rows. Students
    are ordered by descending total; ties keep their input order. A student
    absent from class_rows gets rank 0.
    """
    aggregates = {key: calculate_totals(rows) for key, rows in class_rows.items()}
    ranked_total = len(aggregates)

    rankings = {}
    for category, column in RANKING_CATEGORIES:
        ordered = sorted(aggregates, key=lambda key: aggregates[key][column], reverse=True)
        rank = ordered.index(student_key) + 1 if student_key in aggregates else 0
        rankings[category] = {'rank': rank, 'total': ranked_total}
    return rankings
