"""
Midnight scheduler for the occupancy rollover.

A single one-shot job is armed for the next local midnight. When it fires the
rollover runs for the previous local day and the next midnight is computed
again from the current clock, so DST changes never shift the run time.
"""

import threading

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger

from tasks.rollover import scheduled_rollover
from utils.timezone_utils import (
    get_local_now, get_timezone, next_local_midnight, previous_local_date,
)


JOB_ID = 'occupancy_rollover'

STOPPED = 'STOPPED'
WAITING = 'WAITING'
RUNNING = 'RUNNING'


class RolloverScheduler:
    """
    Owns the armed rollover job and the WAITING/RUNNING state.

    Args:
        app: Flask app passed to the rollover.
        scheduler: APScheduler scheduler to use. A daemon BackgroundScheduler
                   is created (and owned) when omitted.
        timezone: Reference timezone name or pytz zone. Defaults to the app's
                  ROLLOVER_TIMEZONE.
        clock: Callable returning an aware "now"; for tests.
    """

    def __init__(self, app, scheduler=None, timezone=None, clock=None):
        self.app = app
        self.tz = get_timezone(timezone or app.config.get('ROLLOVER_TIMEZONE'))
        self._owns_scheduler = scheduler is None
        self._scheduler = scheduler or BackgroundScheduler(daemon=True, timezone=self.tz)
        self._clock = clock or (lambda: get_local_now(self.tz))
        self._job = None
        self._stopped = False
        self.state = STOPPED
        self.next_run = None
        self._lock = threading.RLock()

    def start(self):
        """Arm the first midnight job and return the cancel handle."""
        with self._lock:
            self._stopped = False
            if not self._scheduler.running:
                self._scheduler.start()
            self._arm()
        return self.stop

    def stop(self):
        """
        Cancel the currently armed job. A rollover already running finishes,
        but nothing is armed after it.
        """
        with self._lock:
            self._stopped = True
            self._cancel_job()
            if self.state != RUNNING:
                self.state = STOPPED

    def shutdown(self):
        self.stop()
        if self._owns_scheduler and self._scheduler.running:
            self._scheduler.shutdown(wait=False)

    def _cancel_job(self, job=None):
        job = job or self._job
        if job is not None:
            try:
                job.remove()
            except JobLookupError:
                pass
        self._job = None
        self.next_run = None

    def _arm(self):
        with self._lock:
            if self._stopped:
                self.state = STOPPED
                return None
            now = self._clock()
            run_at = next_local_midnight(now, self.tz)
            delay = run_at - now
            job = self._scheduler.add_job(
                func=self._fire,
                trigger=DateTrigger(run_date=run_at, timezone=self.tz),
                id=JOB_ID,
                name='Occupancy rollover',
                replace_existing=True,
                misfire_grace_time=None,
            )
            # stop() may have run while the job was being added
            if self._stopped:
                self._cancel_job(job)
                self.state = STOPPED
                return None
            self._job = job
            self.next_run = run_at
            self.state = WAITING
        self.app.logger.info(
            f"Occupancy rollover armed for {run_at.isoformat()} "
            f"(in {delay.total_seconds():.0f}s)"
        )
        return delay

    def _fire(self):
        with self._lock:
            self.state = RUNNING
            self._job = None
        target = previous_local_date(self._clock(), self.tz)
        try:
            scheduled_rollover(target, app=self.app)
        finally:
            self._arm()


def start_rollover_scheduler(app, **kwargs):
    """Build and start a RolloverScheduler; returns its cancel handle."""
    return RolloverScheduler(app, **kwargs).start()
