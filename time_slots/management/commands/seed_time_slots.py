import logging
from datetime import datetime, time, timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from time_slots.services import TimeSlotService

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = (
        "Creates one-hour time slots for the coming days, starting tomorrow. "
        "Slots before the split hour belong to Dr. Smith, later ones to Dr. Johnson. "
        "Slots that would overlap an existing slot are skipped."
    )

    def add_arguments(self, parser):
        parser.add_argument('--days', type=int, default=7, help="Number of days to create slots for.")
        parser.add_argument('--start-hour', type=int, default=9, help="Hour of the first slot of each day.")
        parser.add_argument('--end-hour', type=int, default=18, help="Hour at which the last slot of each day ends.")
        parser.add_argument('--split-hour', type=int, default=13, help="First hour served by the second provider.")

    def handle(self, *args, **options):
        days = options['days']
        start_hour = options['start_hour']
        end_hour = options['end_hour']
        split_hour = options['split_hour']

        if days < 1:
            raise CommandError("--days must be at least 1.")
        if not 0 <= start_hour < end_hour <= 24:
            raise CommandError("Hours must satisfy 0 <= --start-hour < --end-hour <= 24.")

        current_tz = timezone.get_current_timezone()
        tomorrow = timezone.localdate() + timedelta(days=1)
        created = skipped = 0

        for day_offset in range(days):
            day = tomorrow + timedelta(days=day_offset)
            for hour in range(start_hour, end_hour):
                start_time = timezone.make_aware(datetime.combine(day, time(hour)), current_tz)
                end_time = start_time + timedelta(hours=1)
                service_provider = "Dr. Smith" if hour < split_hour else "Dr. Johnson"

                if TimeSlotService.has_conflict(start_time, end_time, service_provider):
                    skipped += 1
                    continue
                TimeSlotService.create_time_slot(start_time, end_time, service_provider)
                created += 1

        logger.info("Seeded %d time slot(s), skipped %d", created, skipped)
        self.stdout.write(self.style.SUCCESS(f"Created {created} time slot(s), skipped {skipped} existing."))
