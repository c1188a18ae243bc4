"""
Daily occupancy rollover.

For a calendar date:
  - save an occupancy history snapshot for every assessment of that date
    that has a bed
  - reset bed statuses to PENDING
  - mark that date's assessment sessions as EXPIRED
"""

from flask import current_app
from sqlalchemy.orm import joinedload

from models.database import db
from models.models import (
    Assessment, Bed, OccupancyHistory, Unit,
    BED_PENDING, SESSION_EXPIRED,
)
from utils.timezone_utils import get_timezone, local_day_window, parse_date


def _get_app(explicit_app=None):
    """Return a Flask app instance whether we're inside a request/context or not."""
    if explicit_app is not None:
        return explicit_app
    try:
        return current_app._get_current_object()
    except RuntimeError:
        # Lazy import to avoid circular imports at module load.
        try:
            from main import app as main_app
            return main_app
        except ImportError:
            return None


def _build_snapshot(assessment, window):
    unit = assessment.unit
    author = assessment.author
    start, end = window
    return OccupancyHistory(
        bed=assessment.bed,
        unit_id=unit.id if unit else None,
        hospital_id=unit.hospital.id if unit and unit.hospital else None,
        bed_number=assessment.bed.number,
        bed_status=assessment.bed.status,
        scale=assessment.scale,
        total_score=assessment.total_score,
        classification=assessment.classification,
        items=assessment.items,
        author_id=author.id if author else None,
        author_name=author.full_name if author else None,
        start=start,
        end=end,
    )


def run_rollover(target_date, app=None, propagate=True):
    """
    Archive assessments of ``target_date`` and reset beds and sessions.

    Args:
        target_date: ``yyyy-mm-dd`` string or date.
        app: Optional Flask app to use when running outside an app context.
        propagate: Re-raise failures after logging (manual runs). When False
                   the failure is only logged and None is returned.

    Returns:
        Number of history snapshots written.
    """
    app = _get_app(app)
    if app is None:
        raise RuntimeError("Flask app not available for run_rollover")

    with app.app_context():
        try:
            day = parse_date(target_date)
            tz = get_timezone(app.config.get("ROLLOVER_TIMEZONE"))
            app.logger.info(f"Running occupancy rollover for {day}")

            assessments = (
                Assessment.query
                .options(
                    joinedload(Assessment.bed),
                    joinedload(Assessment.unit).joinedload(Unit.hospital),
                    joinedload(Assessment.author),
                )
                .filter(Assessment.application_date == day)
                .all()
            )

            window = local_day_window(day, tz)
            written = 0
            for assessment in assessments:
                if assessment.bed is None:
                    continue
                db.session.add(_build_snapshot(assessment, window))
                db.session.flush()
                written += 1

            # Intended to keep beds in maintenance (MAINT_*) untouched, but every
            # bed is reset. Pending product confirmation before filtering.
            beds_reset = Bed.query.update(
                {Bed.status: BED_PENDING}, synchronize_session=False
            )

            expired = (
                Assessment.query
                .filter(Assessment.application_date == day)
                .update({Assessment.session_status: SESSION_EXPIRED}, synchronize_session=False)
            )

            db.session.commit()
            app.logger.info(
                f"Rollover for {day} done: snapshots={written}, "
                f"beds_reset={beds_reset}, sessions_expired={expired}"
            )
            return written

        except Exception as e:
            try:
                db.session.rollback()
            except Exception as rollback_error:
                app.logger.warning(f"Rollback after failed rollover also failed: {rollback_error!r}")
            app.logger.warning(f"Occupancy rollover for {target_date} failed: {e!r}")
            if propagate:
                raise
            return None


def manual_rollover(target_date, app=None):
    """
    Run the rollover for one date on demand.
    Used by administrators and the run_rollover command; failures are raised.
    """
    return run_rollover(target_date, app=app, propagate=True)


def scheduled_rollover(target_date, app=None):
    """Run the rollover from the scheduler. Never raises."""
    try:
        return run_rollover(target_date, app=app, propagate=False)
    except Exception as e:
        # No app available, or the failure happened outside the app context.
        print(f"[scheduled_rollover] Error: {e}")
        return None
