"""Tests for the manual rollover command."""

import os
import sys
import types
from datetime import datetime

import pytz

import tasks.run_rollover as run_rollover
from models.database import db
from models.models import OccupancyHistory

from conftest import DAY, add_assessment

SAO_PAULO = pytz.timezone("America/Sao_Paulo")


def test_bad_date_exits_with_error(app, ward):
    assert run_rollover.main(["--date", "2024-13-40"], app=app) == 1


def test_failed_rollover_exits_with_error(app, ward, monkeypatch):
    def fail(target_date, app=None):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(run_rollover, "manual_rollover", fail)
    assert run_rollover.main(["--date", "2024-05-10"], app=app) == 1


def test_explicit_date_runs_rollover(app, ward, capsys):
    add_assessment(app, DAY, bed_id=ward["occupied_bed_id"])

    assert run_rollover.main(["--date", "2024-05-10"], app=app) == 0

    with app.app_context():
        assert db.session.query(OccupancyHistory).count() == 1
    assert "1 history records written" in capsys.readouterr().out


def test_default_date_is_yesterday_in_reference_zone(app, monkeypatch):
    calls = []
    monkeypatch.setattr(run_rollover, "manual_rollover",
                        lambda target_date, app=None: calls.append(target_date) or 0)
    # 01:30 UTC on the 11th is still the 10th in Sao Paulo
    monkeypatch.setattr(run_rollover, "get_local_now",
                        lambda tz=None: datetime(2024, 5, 11, 1, 30, tzinfo=pytz.utc))

    assert run_rollover.main([], app=app) == 0
    assert calls == ["2024-05-09"]


def test_host_app_loaded_with_scheduler_disabled(app, monkeypatch):
    monkeypatch.setenv("ROLLOVER_SCHEDULER_ENABLED", "1")
    monkeypatch.setitem(sys.modules, "main", types.SimpleNamespace(app=app))
    monkeypatch.setattr(run_rollover, "manual_rollover", lambda target_date, app=None: 0)

    assert run_rollover.main(["--date", "2024-05-10"]) == 0
    assert os.environ["ROLLOVER_SCHEDULER_ENABLED"] == "0"
