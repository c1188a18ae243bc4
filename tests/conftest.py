import sys
from datetime import date
from pathlib import Path

import pytest
from flask import Flask

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from models.database import db
from models.models import Assessment, Bed, Hospital, Unit, User


@pytest.fixture
def app(tmp_path):
    app = Flask("occupancy_tests")
    app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'occupancy.db'}",
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        ROLLOVER_TIMEZONE="America/Sao_Paulo",
    )
    db.init_app(app)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ward(app):
    """Hospital with one unit, an author and three beds in different states."""
    with app.app_context():
        hospital = Hospital(name="Hospital Central")
        unit = Unit(name="UTI Adulto", hospital=hospital)
        nurse = User(username="ana", full_name="Ana Souza")
        occupied = Bed(number="101", status="OCCUPIED", unit=unit)
        vacant = Bed(number="102", status="VACANT", unit=unit)
        cleaning = Bed(number="103", status="MAINT_CLEANING", unit=unit)
        db.session.add_all([hospital, unit, nurse, occupied, vacant, cleaning])
        db.session.commit()
        return {
            "hospital_id": hospital.id,
            "unit_id": unit.id,
            "author_id": nurse.id,
            "occupied_bed_id": occupied.id,
            "vacant_bed_id": vacant.id,
            "cleaning_bed_id": cleaning.id,
        }


def add_assessment(app, application_date, bed_id=None, unit_id=None, author_id=None, **fields):
    with app.app_context():
        assessment = Assessment(
            application_date=application_date,
            bed_id=bed_id,
            unit_id=unit_id,
            author_id=author_id,
            scale=fields.get("scale", "FUGULIN"),
            total_score=fields.get("total_score", 24),
            classification=fields.get("classification", "INTERMEDIATE"),
            items=fields.get("items", {"mobility": 3, "hygiene": 2}),
            session_status=fields.get("session_status", "ACTIVE"),
        )
        db.session.add(assessment)
        db.session.commit()
        return assessment.id


DAY = date(2024, 5, 10)
