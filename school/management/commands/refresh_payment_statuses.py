from django.core.management.base import BaseCommand
from django.db import DatabaseError
import logging

from school.exceptions import SchoolManagementException
from school.models import Student
from school.services.payment_service import PaymentStatusService

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Rebuild every active student\'s monthly ledger and store the derived fee status'

    def add_arguments(self, parser):
        parser.add_argument('--academic-year', help='School year as YYYY-YYYY (default: current)')
        parser.add_argument('--class-level', help='Only refresh students of this class level')

    def handle(self, *args, **options):
        service = PaymentStatusService()
        academic_year = service.resolve_academic_year(options.get('academic_year'))

        students = Student.objects.filter(is_active=True)
        if options.get('class_level'):
            students = students.filter(class_level=options['class_level'])

        self.stdout.write(f'Refreshing fee statuses for {academic_year}...')

        synced = failed = 0
        for student in students:
            try:
                service.sync_student(student, academic_year)
                synced += 1
            except (SchoolManagementException, DatabaseError) as e:
                failed += 1
                self.stderr.write(f'Error refreshing {student.student_id}: {e}')

        logger.info(f'Fee status refresh for {academic_year}: {synced} synced, {failed} failed')
        self.stdout.write(
            self.style.SUCCESS(f'Refreshed {synced} students ({failed} failed)')
        )
