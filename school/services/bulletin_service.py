# school/services/bulletin_service.py
import logging
from collections import defaultdict

from django.conf import settings
from django.db import DatabaseError, transaction

from school.constants.academic import DEFAULT_SECTIONS
from school.exceptions import BulletinVerificationError, GradingSystemException
from school.models import GradeEntry, PublicBulletin, generate_verification_code
from school.services.grade_aggregator import (
    aggregate_grades,
    calculate_max_totals_for_subjects,
    calculate_percentages,
    calculate_totals,
    compute_rankings,
    compute_specific_percentages,
    flatten_subjects,
    semester_completeness,
)
from school.utils.academic import validate_academic_year
from school.utils.validation import normalize_grade_row

logger = logging.getLogger(__name__)


def student_snapshot(student):
    return {
        'student_id': student.student_id,
        'full_name': student.get_full_name(),
        'last_name': student.last_name,
        'middle_name': student.middle_name,
        'first_name': student.first_name,
        'gender': student.gender,
        'date_of_birth': student.date_of_birth.isoformat() if student.date_of_birth else None,
        'place_of_birth': student.place_of_birth,
        'class_level': student.class_level,
        'section': student.section,
        'full_class': student.full_class,
    }


def default_school_snapshot():
    return {
        'name': getattr(settings, 'SCHOOL_NAME', ''),
        'address': getattr(settings, 'SCHOOL_ADDRESS', ''),
        'code': getattr(settings, 'SCHOOL_CODE', ''),
    }


class BulletinService:
    """Builds, publishes and verifies report cards (bulletins)"""

    def __init__(self, sections=None):
        self.sections = sections or DEFAULT_SECTIONS

    def class_rows(self, class_level, academic_year):
        """student_id -> grade rows of every student graded in the class"""
        rows = defaultdict(list)
        entries = GradeEntry.objects.filter(
            class_level=class_level, academic_year=academic_year
        ).select_related('student')
        for entry in entries:
            rows[entry.student.student_id].append(entry.grade_row())
        return dict(rows)

    def build_bulletin(self, student, academic_year, sections=None):
        """
        Report-card figures for one student, without saving anything.
        Subjects follow section order; a subject without scores gets an
        empty row, which keeps its semesters incomplete.
        """
        academic_year = validate_academic_year(academic_year)
        sections = sections or self.sections

        entries = {
            entry.course: entry.grade_row()
            for entry in GradeEntry.objects.filter(student=student, academic_year=academic_year)
        }
        subjects = flatten_subjects(sections)

        unknown = set(entries) - set(subjects)
        if unknown:
            logger.warning(
                f"Courses outside the report-card sections ignored for "
                f"{student.student_id}: {', '.join(sorted(unknown))}"
            )

        grades = {subject: entries.get(subject) or normalize_grade_row([]) for subject in subjects}
        rows = list(grades.values())

        result = aggregate_grades(rows, sections)
        result.update({
            'academic_year': academic_year,
            'student': student_snapshot(student),
            'subjects': subjects,
            'grades': grades,
            'completeness': semester_completeness(rows),
            'rankings': compute_rankings(
                self.class_rows(student.class_level, academic_year), student.student_id
            ),
        })
        return result

    def publish(self, student, academic_year, school=None, verification_code=None):
        """Create or refresh the student's public bulletin for the year"""
        data = self.build_bulletin(student, academic_year)
        fields = {
            'student_snapshot': data['student'],
            'school_snapshot': school or default_school_snapshot(),
            'grades': data['grades'],
            'totals': data['totals'],
            'max_totals': data['max_totals'],
            'percentages': data['percentages'],
            'specific_percentages': data['specific'],
            'rankings': data['rankings'],
            'completeness': data['completeness'],
        }

        try:
            with transaction.atomic():
                bulletin = PublicBulletin.objects.filter(
                    student=student, academic_year=data['academic_year']
                ).first()
                if bulletin is None:
                    bulletin = PublicBulletin.objects.create(
                        verification_code=verification_code or generate_verification_code(),
                        student=student,
                        academic_year=data['academic_year'],
                        **fields,
                    )
                    created = True
                else:
                    for name, value in fields.items():
                        setattr(bulletin, name, value)
                    bulletin.save()
                    created = False
        except DatabaseError as e:
            raise GradingSystemException(
                "Report card could not be published",
                details={'student_id': student.student_id, 'error': str(e)},
            ) from e

        logger.info(
            f"Bulletin {'published' if created else 'updated'} for {student.student_id} "
            f"({data['academic_year']}), code {bulletin.verification_code}"
        )
        return bulletin

    def verify(self, verification_code):
        code = (verification_code or '').strip()
        try:
            bulletin = PublicBulletin.objects.get(verification_code=code)
        except PublicBulletin.DoesNotExist:
            raise BulletinVerificationError(verification_code=code)

        logger.info(f"Bulletin {code} verified")
        return bulletin

    def recompute(self, bulletin, sections=None):
        """Rebuild the stored figures from the bulletin's own grades mapping"""
        sections = sections or self.sections
        if not isinstance(bulletin.grades, dict):
            raise GradingSystemException(
                f"Bulletin {bulletin.verification_code} has no grades mapping",
                details={'grades': repr(bulletin.grades)},
            )
        subjects = list(bulletin.grades.keys())
        rows = [normalize_grade_row(row) for row in bulletin.grades.values()]

        totals = calculate_totals(rows)
        max_totals = calculate_max_totals_for_subjects(subjects, sections)

        bulletin.totals = totals
        bulletin.max_totals = max_totals
        bulletin.percentages = calculate_percentages(totals, max_totals)
        bulletin.specific_percentages = compute_specific_percentages(totals, max_totals)
        bulletin.completeness = semester_completeness(rows)
        bulletin.save(update_fields=[
            'totals', 'max_totals', 'percentages', 'specific_percentages',
            'completeness', 'updated_at',
        ])
        return bulletin
