# solicitors/management/commands/pay_bonuses.py
from datetime import datetime, time

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_date

from crm.scoping import LocationScope
from solicitors.services import payout_bonuses


class Command(BaseCommand):
    help = "Mark unpaid solicitor bonus calculations as paid"

    def add_arguments(self, parser):
        parser.add_argument("--solicitor", type=int, help="Only pay this solicitor id")
        parser.add_argument("--location", help="Only pay solicitors of this location")
        parser.add_argument(
            "--before",
            help="Only pay calculations made before this date (YYYY-MM-DD)",
        )

    def handle(self, *args, **options):
        calculated_before = None
        if options["before"]:
            day = parse_date(options["before"])
            if day is None:
                raise CommandError("--before must be a date in YYYY-MM-DD format")
            calculated_before = timezone.make_aware(datetime.combine(day, time.min))

        scope = LocationScope(location_id=options["location"] or None)
        summary = payout_bonuses(
            scope,
            solicitor_id=options["solicitor"],
            calculated_before=calculated_before,
        )

        if summary.count:
            self.stdout.write(self.style.SUCCESS(
                f"Paid {summary.count} bonus calculation(s), total {summary.total}"
            ))
        else:
            self.stdout.write(self.style.WARNING("No unpaid bonus calculations matched"))
