# school/tests/test_commands.py
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from school.models import PublicBulletin
from school.services.bulletin_service import BulletinService
from school.tests.factories import (
    FeePaymentFactory,
    FeeStructureFactory,
    GradeEntryFactory,
    StudentFactory,
)


class RefreshPaymentStatusesCommandTest(TestCase):

    def setUp(self):
        FeeStructureFactory()
        self.student = StudentFactory()
        FeePaymentFactory(student=self.student, amount=Decimal('700'))

    def run_command(self, *args):
        out, err = StringIO(), StringIO()
        call_command('refresh_payment_statuses', *args, stdout=out, stderr=err)
        return out.getvalue(), err.getvalue()

    def test_syncs_active_students(self):
        unpriced = StudentFactory(class_level='6ème')
        inactive = StudentFactory(is_active=False)

        out, err = self.run_command('--academic-year', '2024-2025')

        self.assertIn('Refreshed 1 students (1 failed)', out)
        self.assertIn(unpriced.student_id, err)
        self.assertNotIn(inactive.student_id, err)

        self.student.refresh_from_db()
        self.assertEqual(self.student.fee_balance_due, Decimal('300.00'))
        inactive.refresh_from_db()
        self.assertIsNone(inactive.fee_status_updated_at)

    def test_class_level_filter(self):
        StudentFactory(class_level='6ème')
        out, err = self.run_command('--academic-year', '2024-2025', '--class-level', '4ème')
        self.assertIn('Refreshed 1 students (0 failed)', out)
        self.assertEqual(err, '')


class RecalculateBulletinsCommandTest(TestCase):

    def test_recalculates_stored_figures(self):
        student = StudentFactory()
        GradeEntryFactory(student=student, course='Religion', grades=[8, 9, 18, 7, 8, 17])
        bulletin = BulletinService().publish(student, '2024-2025')
        expected = list(bulletin.totals)

        PublicBulletin.objects.filter(pk=bulletin.pk).update(totals=[], percentages=[])

        out = StringIO()
        call_command('recalculate_bulletins', stdout=out)

        bulletin.refresh_from_db()
        self.assertEqual(bulletin.totals, expected)
        self.assertEqual(len(bulletin.percentages), 9)
        self.assertIn('Successfully recalculated 1 bulletins', out.getvalue())

    def test_malformed_stored_rows_do_not_stop_the_run(self):
        service = BulletinService()
        scalar_student = StudentFactory()
        GradeEntryFactory(student=scalar_student, course='Religion', grades=[8, 9, 18, 7, 8, 17])
        scalar = service.publish(scalar_student, '2024-2025')

        broken_student = StudentFactory()
        GradeEntryFactory(student=broken_student, course='Religion', grades=[8, 9, 18, 7, 8, 17])
        broken = service.publish(broken_student, '2024-2025')

        healthy_student = StudentFactory()
        GradeEntryFactory(student=healthy_student, course='Religion', grades=[8, 9, 18, 7, 8, 17])
        healthy = service.publish(healthy_student, '2024-2025')
        expected = list(healthy.totals)

        PublicBulletin.objects.filter(pk=scalar.pk).update(grades={'Religion': 5}, totals=[])
        PublicBulletin.objects.filter(pk=broken.pk).update(grades=[5, 5])
        PublicBulletin.objects.filter(pk=healthy.pk).update(totals=[])

        out, err = StringIO(), StringIO()
        call_command('recalculate_bulletins', stdout=out, stderr=err)

        scalar.refresh_from_db()
        self.assertEqual(scalar.totals, [0] * 9)
        self.assertFalse(scalar.completeness['general'])
        healthy.refresh_from_db()
        self.assertEqual(healthy.totals, expected)
        self.assertIn(broken.verification_code, err.getvalue())
        self.assertIn('Successfully recalculated 2 bulletins (1 failed)', out.getvalue())
