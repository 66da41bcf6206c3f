from django.core.management.base import BaseCommand
from django.db import DatabaseError
import logging
from school.exceptions import SchoolManagementException
from school.models import PublicBulletin
from school.services.bulletin_service import BulletinService
logger = logging.getLogger(__name__)

class Command(BaseCommand):
    help = 'Recalculate totals and percentages of all published bulletins'
    def handle(self, *args, **kwargs):
        service = BulletinService()
        bulletins = PublicBulletin.objects.all()
        count = bulletins.count()
        failed = 0
        self.stdout.write(f"Recalculating {count} bulletins...")
        for i, bulletin in enumerate(bulletins, 1):
            try:
                service.recompute(bulletin)
                if i % 50 == 0:
                    self.stdout.write(f"Processed {i}/{count} bulletins...")
            except (SchoolManagementException, DatabaseError) as e:
                failed += 1
                logger.error(f"Failed to recalculate bulletin {bulletin.verification_code}: {e}")
                self.stderr.write(f"Error processing bulletin {bulletin.verification_code}: {e}")
        self.stdout.write(self.style.SUCCESS(
            f"Successfully recalculated {count - failed} bulletins ({failed} failed)"
        ))
