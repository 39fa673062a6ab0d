# products/scheduler.py

"""
======================================================
PATH: products/scheduler.py
======================================================
IN-PROCESS NEAR-EXPIRY SCHEDULER

One process-wide daily job: run sweep_near_expiry() at
settings.CATALOG["NEAR_EXPIRY_SWEEP_TIME"] (server local time).

Lifecycle:
- start()  -> spawns a daemon thread (no-op if already running)
- stop()   -> signals the thread and joins it
- is_running / next_run_at(now) for introspection

A failing run is logged and the loop waits for the next slot. Nothing
propagates out of the thread.

For multi-process deployments prefer the one-shot management command
(`manage.py sweep_near_expiry`) from an external cron; duplicate runs are
harmless because the sweep is an idempotent bulk UPDATE.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, time, timedelta
from typing import Callable, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import close_old_connections
from django.utils import timezone

logger = logging.getLogger(__name__)


def parse_sweep_time(value) -> time:
    if isinstance(value, time):
        return value

    raw = str(value or "").strip()
    try:
        hours, minutes = raw.split(":", 1)
        return time(hour=int(hours), minute=int(minutes))
    except (TypeError, ValueError) as exc:
        raise ImproperlyConfigured(
            f"NEAR_EXPIRY_SWEEP_TIME must be HH:MM, got {raw!r}"
        ) from exc


def configured_sweep_time() -> time:
    catalog = getattr(settings, "CATALOG", {}) or {}
    return parse_sweep_time(catalog.get("NEAR_EXPIRY_SWEEP_TIME", "00:00"))


def _default_job():
    from products.services.near_expiry import sweep_near_expiry

    return sweep_near_expiry()


class ExpirySweepScheduler:
    def __init__(self, *, sweep_time=None, job: Optional[Callable[[], object]] = None):
        self._sweep_time = parse_sweep_time(sweep_time) if sweep_time is not None else None
        self._job = job or _default_job
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def sweep_time(self) -> time:
        return self._sweep_time or configured_sweep_time()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def next_run_at(self, now: Optional[datetime] = None) -> datetime:
        """
        Next wall-clock slot strictly after `now`.
        """
        now = now or timezone.localtime()
        candidate = now.replace(
            hour=self.sweep_time.hour,
            minute=self.sweep_time.minute,
            second=0,
            microsecond=0,
        )
        if candidate <= now:
            candidate += timedelta(days=1)
        return candidate

    def run_once(self):
        """
        Execute one sweep. Exceptions are logged, never raised.
        """
        close_old_connections()
        try:
            result = self._job()
            logger.info("Scheduled near-expiry sweep finished", extra={"result": result})
            return result
        except Exception:
            logger.exception("Scheduled near-expiry sweep failed")
            return None
        finally:
            close_old_connections()

    def _seconds_until_next_run(self) -> float:
        now = timezone.localtime()
        return max((self.next_run_at(now) - now).total_seconds(), 0.0)

    def _loop(self):
        logger.info(
            "Expiry scheduler started",
            extra={"sweep_time": self.sweep_time.strftime("%H:%M")},
        )
        while not self._stop_event.is_set():
            if self._stop_event.wait(self._seconds_until_next_run()):
                break
            self.run_once()
        logger.info("Expiry scheduler stopped")

    def start(self) -> bool:
        with self._lock:
            if self.is_running:
                return False

            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._loop,
                name="expiry-sweep-scheduler",
                daemon=True,
            )
            self._thread.start()
            return True

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        with self._lock:
            thread = self._thread
            self._stop_event.set()

        if thread is not None:
            thread.join(timeout=timeout)

        with self._lock:
            if self._thread is thread and (thread is None or not thread.is_alive()):
                self._thread = None

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until stop() is called (or timeout). Returns True once stopped.
        """
        return self._stop_event.wait(timeout)


scheduler = ExpirySweepScheduler()


def start() -> bool:
    return scheduler.start()


def stop(timeout: Optional[float] = 5.0) -> None:
    scheduler.stop(timeout=timeout)
