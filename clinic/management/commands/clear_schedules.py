from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date

from clinic.models import Shift


class Command(BaseCommand):
    help = "Delete shifts, optionally only those dated before --before YYYY-MM-DD."

    def add_arguments(self, parser):
        parser.add_argument("--before", help="only delete shifts dated before this day")

    def handle(self, *args, **opts):
        qs = Shift.objects.all()
        if opts.get("before"):
            day = parse_date(opts["before"])
            if day is None:
                raise CommandError(f"Invalid date: {opts['before']}")
            qs = qs.filter(shift_date__lt=day)
        deleted, _ = qs.delete()
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} shift(s)."))
