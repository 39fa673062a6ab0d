# products/management/commands/sweep_near_expiry.py

"""
One-shot near-expiry sweep, for an external cron:

    0 0 * * *  python manage.py sweep_near_expiry
"""

import logging
from datetime import date

from django.core.management.base import BaseCommand, CommandError

from products.services.near_expiry import sweep_near_expiry

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Flag active products that entered the near-expiry window and apply the discount"

    def add_arguments(self, parser):
        parser.add_argument(
            "--as-of",
            dest="as_of",
            default=None,
            help="Evaluate as of this date (YYYY-MM-DD). Defaults to today.",
        )
        parser.add_argument("--days", type=int, default=None, help="Override the threshold window")
        parser.add_argument("--percent", default=None, help="Override the discount percent")

    def handle(self, *args, **options):
        as_of = None
        if options.get("as_of"):
            try:
                as_of = date.fromisoformat(options["as_of"])
            except ValueError as exc:
                raise CommandError("--as-of must be YYYY-MM-DD") from exc

        try:
            updated = sweep_near_expiry(
                as_of=as_of,
                threshold_days=options.get("days"),
                discount_percent=options.get("percent"),
            )
        except Exception as exc:
            logger.exception("Near-expiry sweep command failed")
            raise CommandError(f"Sweep failed: {exc}") from exc

        self.stdout.write(self.style.SUCCESS(f"Near-expiry sweep flagged {updated} product(s)."))
