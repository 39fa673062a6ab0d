# products/tests/test_scheduler.py

from datetime import datetime, time
from unittest import mock
from zoneinfo import ZoneInfo

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase

from products.scheduler import ExpirySweepScheduler, parse_sweep_time

TZ = ZoneInfo("Asia/Kolkata")


@mock.patch("products.scheduler.close_old_connections")
class ExpirySweepSchedulerTests(SimpleTestCase):
    """
    In-process scheduler tests.

    GUARANTEES:
    - Next run is the next wall-clock slot strictly after now
    - A failing sweep is logged, never raised
    - start/stop lifecycle is idempotent
    """

    def test_next_run_later_today(self, _close):
        scheduler = ExpirySweepScheduler(sweep_time="23:30", job=mock.Mock())
        now = datetime(2026, 3, 10, 8, 0, tzinfo=TZ)

        self.assertEqual(scheduler.next_run_at(now), datetime(2026, 3, 10, 23, 30, tzinfo=TZ))

    def test_next_run_rolls_to_tomorrow(self, _close):
        scheduler = ExpirySweepScheduler(sweep_time="00:00", job=mock.Mock())
        now = datetime(2026, 3, 10, 0, 0, tzinfo=TZ)

        self.assertEqual(scheduler.next_run_at(now), datetime(2026, 3, 11, 0, 0, tzinfo=TZ))

    def test_run_once_returns_job_result(self, _close):
        job = mock.Mock(return_value=3)
        scheduler = ExpirySweepScheduler(sweep_time="00:00", job=job)

        self.assertEqual(scheduler.run_once(), 3)
        job.assert_called_once_with()

    def test_run_once_swallows_and_logs_failures(self, _close):
        job = mock.Mock(side_effect=RuntimeError("db down"))
        scheduler = ExpirySweepScheduler(sweep_time="00:00", job=job)

        with self.assertLogs("products.scheduler", level="ERROR"):
            self.assertIsNone(scheduler.run_once())

    def test_start_and_stop(self, _close):
        job = mock.Mock()
        scheduler = ExpirySweepScheduler(sweep_time="00:00", job=job)

        self.assertTrue(scheduler.start())
        self.assertTrue(scheduler.is_running)
        self.assertFalse(scheduler.start())

        scheduler.stop(timeout=5)

        self.assertFalse(scheduler.is_running)
        job.assert_not_called()

    def test_parse_sweep_time(self, _close):
        self.assertEqual(parse_sweep_time("06:15"), time(6, 15))

        with self.assertRaises(ImproperlyConfigured):
            parse_sweep_time("six")
