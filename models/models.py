from .database import db
from datetime import datetime

BED_STATUSES = (
    "VACANT", "PENDING", "OCCUPIED",
    "MAINT_CLEANING", "MAINT_REPAIR", "INACTIVE",
)
SESSION_STATUSES = ("ACTIVE", "RELEASED", "EXPIRED")

BED_PENDING = "PENDING"
SESSION_EXPIRED = "EXPIRED"


class Hospital(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)

    units = db.relationship("Unit", back_populates="hospital", lazy=True)

    def __repr__(self):
        return f"<Hospital {self.name}>"


class Unit(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    hospital_id = db.Column(db.Integer, db.ForeignKey("hospital.id"), nullable=True)

    hospital = db.relationship("Hospital", back_populates="units", lazy=True)
    beds = db.relationship("Bed", backref="unit", lazy=True)

    def __repr__(self):
        return f"<Unit {self.name}>"


class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    full_name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<User {self.username}>"


class Bed(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    number = db.Column(db.String(20), nullable=False)
    status = db.Column(
        db.Enum(*BED_STATUSES, name="bed_status_enum"),
        nullable=False,
        default="VACANT"
    )
    unit_id = db.Column(db.Integer, db.ForeignKey("unit.id"), nullable=True)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow
    )

    def __repr__(self):
        return f"<Bed {self.number} {self.status}>"


class Assessment(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    application_date = db.Column(db.Date, nullable=False, index=True)
    bed_id = db.Column(db.Integer, db.ForeignKey("bed.id"), nullable=True)
    unit_id = db.Column(db.Integer, db.ForeignKey("unit.id"), nullable=True)
    author_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)
    scale = db.Column(db.String(40), nullable=True)
    total_score = db.Column(db.Integer, nullable=True)
    classification = db.Column(db.String(60), nullable=True)
    items = db.Column(db.JSON, nullable=True)
    session_status = db.Column(
        db.Enum(*SESSION_STATUSES, name="session_status_enum"),
        nullable=False,
        default="ACTIVE"
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    bed = db.relationship("Bed", lazy=True)
    unit = db.relationship("Unit", lazy=True)
    author = db.relationship("User", lazy=True)

    def __repr__(self):
        return f"<Assessment {self.id} {self.application_date} {self.session_status}>"


class OccupancyHistory(db.Model):
    """Point-in-time copy of one assessment and its bed context.

    Rows are written by the daily rollover and never updated. ``start`` and
    ``end`` hold the local calendar day as naive UTC datetimes.
    """
    __tablename__ = "occupancy_history"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    bed_id = db.Column(db.Integer, db.ForeignKey("bed.id"), nullable=False)
    unit_id = db.Column(db.Integer, nullable=True)
    hospital_id = db.Column(db.Integer, nullable=True)
    bed_number = db.Column(db.String(20), nullable=True)
    bed_status = db.Column(db.String(20), nullable=True)
    scale = db.Column(db.String(40), nullable=True)
    total_score = db.Column(db.Integer, nullable=True)
    classification = db.Column(db.String(60), nullable=True)
    items = db.Column(db.JSON, nullable=True)
    author_id = db.Column(db.Integer, nullable=True)
    author_name = db.Column(db.String(100), nullable=True)
    start = db.Column(db.DateTime, nullable=False)
    end = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    bed = db.relationship("Bed", lazy=True)

    def __repr__(self):
        return f"<OccupancyHistory {self.id}-B{self.bed_id} {self.start}>"
