# school/models/report_card.py
import uuid

from django.db import models

from school.utils.validation import normalize_grade_row

from .student import Student


def generate_verification_code():
    return uuid.uuid4().hex


class GradeEntry(models.Model):
    """
    Scores of one student in one course for a school year.
    grades holds the six raw scores [P1, P2, EXAM1, P3, P4, EXAM2] as entered;
    blank cells are stored as null.
    """

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='grade_entries')
    academic_year = models.CharField(max_length=9)
    class_level = models.CharField(max_length=50)
    course = models.CharField(max_length=100)
    grades = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['student', 'course']
        unique_together = ['student', 'academic_year', 'course']
        verbose_name = 'Grade Entry'
        verbose_name_plural = 'Grade Entries'
        indexes = [
            models.Index(fields=['academic_year', 'class_level'], name='gradeentry_year_class_idx'),
        ]

    def __str__(self):
        return f"{self.student.student_id} - {self.course} ({self.academic_year})"

    def grade_row(self):
        """Scores spread over the 9-slot report-card row"""
        return normalize_grade_row(self.grades)


class PublicBulletin(models.Model):
    """
    Published report card, readable by anyone holding its verification code.
    Student and school details are snapshotted at publication time.
    """

    verification_code = models.CharField(
        max_length=32, primary_key=True, default=generate_verification_code, editable=False
    )
    student = models.ForeignKey(
        Student, on_delete=models.SET_NULL, null=True, blank=True, related_name='bulletins'
    )
    academic_year = models.CharField(max_length=9)
    student_snapshot = models.JSONField(default=dict)
    school_snapshot = models.JSONField(default=dict)

    # subject name -> 9-slot row
    grades = models.JSONField(default=dict)
    totals = models.JSONField(default=list)
    max_totals = models.JSONField(default=list)
    percentages = models.JSONField(default=list)
    specific_percentages = models.JSONField(default=dict)
    rankings = models.JSONField(default=dict)
    completeness = models.JSONField(default=dict)

    published_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-published_at']
        unique_together = ['student', 'academic_year']
        verbose_name = 'Public Bulletin'
        verbose_name_plural = 'Public Bulletins'

    def __str__(self):
        name = self.student_snapshot.get('full_name', 'Unknown')
        return f"Bulletin {name} {self.academic_year} [{self.verification_code}]"

    @property
    def general_percentage(self):
        return self.specific_percentages.get('general_percentage')
