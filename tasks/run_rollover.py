"""
Entry point for a manual occupancy rollover (cron job or administrator).

Archives the assessments of the given date, resets every bed to PENDING and
expires that date's sessions. Without --date it processes yesterday in the
reference timezone. Exits non-zero when the rollover fails.
"""

import os
import sys
import argparse

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tasks.rollover import manual_rollover
from utils.timezone_utils import get_local_now, previous_local_date


def _load_app():
    # A one-off run must not arm the midnight job of the web process.
    os.environ['ROLLOVER_SCHEDULER_ENABLED'] = '0'
    from main import app
    return app


def main(argv=None, app=None):
    parser = argparse.ArgumentParser(description='Run the daily occupancy rollover for one date')
    parser.add_argument('--date', help='Date to process (yyyy-mm-dd). Defaults to yesterday.')
    args = parser.parse_args(argv)

    if app is None:
        app = _load_app()

    target_date = args.date
    if target_date is None:
        target_date = previous_local_date(
            get_local_now(app.config['ROLLOVER_TIMEZONE']),
            app.config['ROLLOVER_TIMEZONE'],
        ).isoformat()

    try:
        written = manual_rollover(target_date, app=app)
    except Exception:
        return 1
    print(f"Rollover for {target_date}: {written} history records written")
    return 0


if __name__ == "__main__":
    sys.exit(main())
