# products/management/commands/run_expiry_scheduler.py

"""
Foreground daily sweep loop (one per deployment):

    python manage.py run_expiry_scheduler [--run-now]
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from products.scheduler import ExpirySweepScheduler


class Command(BaseCommand):
    help = "Run the near-expiry sweep every day at NEAR_EXPIRY_SWEEP_TIME until interrupted"

    def add_arguments(self, parser):
        parser.add_argument("--run-now", action="store_true", help="Sweep once immediately before waiting")
        parser.add_argument("--at", dest="sweep_time", default=None, help="Override sweep time (HH:MM)")

    def handle(self, *args, **options):
        scheduler = ExpirySweepScheduler(sweep_time=options.get("sweep_time"))

        if options.get("run_now"):
            scheduler.run_once()

        scheduler.start()
        self.stdout.write(
            self.style.SUCCESS(
                f"Expiry scheduler running; next sweep at {scheduler.next_run_at(timezone.localtime()):%Y-%m-%d %H:%M}"
            )
        )

        try:
            while scheduler.is_running:
                scheduler.wait(timeout=60)
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING("Stopping expiry scheduler..."))
        finally:
            scheduler.stop()
