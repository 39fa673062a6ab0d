# products/apps.py

import logging
import os
import sys

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)

# Commands that must never spin up the background sweep
_NO_SCHEDULER_COMMANDS = {
    "makemigrations",
    "migrate",
    "collectstatic",
    "test",
    "shell",
    "run_expiry_scheduler",
    "sweep_near_expiry",
}


def validate_catalog_settings():
    """Fail startup on a malformed discount percent or sweep time."""
    from products.scheduler import configured_sweep_time
    from products.services.expiry import configured_discount_percent

    configured_discount_percent()
    configured_sweep_time()


class ProductsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "products"

    def ready(self):
        validate_catalog_settings()

        catalog = getattr(settings, "CATALOG", {}) or {}
        if not catalog.get("EXPIRY_SCHEDULER_AUTOSTART", False):
            return

        command = sys.argv[1] if len(sys.argv) > 1 else ""
        if command in _NO_SCHEDULER_COMMANDS:
            return

        # runserver autoreloader: only the serving child process
        if command == "runserver" and os.environ.get("RUN_MAIN") != "true":
            return

        from products import scheduler

        if scheduler.start():
            logger.info("Expiry scheduler autostarted")
