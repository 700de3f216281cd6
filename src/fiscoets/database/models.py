"""SQLAlchemy models for fiscoets database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Profile(Base):
    """Entity profile model (one row per operator)."""

    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True)
    entity_type = Column(String, nullable=False)
    name = Column(String, nullable=True)
    fiscal_code = Column(String, nullable=True)
    vat_number = Column(String, nullable=True)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


class FiscalYear(Base):
    """Fiscal year (annualità) model."""

    __tablename__ = "fiscal_years"

    id = Column(Integer, primary_key=True)
    year = Column(Integer, unique=True, nullable=False)
    prior_year_revenue = Column(Numeric(12, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    activities = relationship("Activity", back_populates="fiscal_year", cascade="all, delete-orphan")
    movements = relationship("Movement", back_populates="fiscal_year", cascade="all, delete-orphan")


class Activity(Base):
    """Activity model for all three families, told apart by activity_type."""

    __tablename__ = "activities"

    id = Column(Integer, primary_key=True)
    fiscal_year_id = Column(Integer, ForeignKey("fiscal_years.id"), nullable=False)
    activity_type = Column(String, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    occasional = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    fiscal_year = relationship("FiscalYear", back_populates="activities")
    movements = relationship("Movement", back_populates="allocated_to")


class Movement(Base):
    """Movement (income, expense or prior-year surplus) model."""

    __tablename__ = "movements"

    id = Column(Integer, primary_key=True)
    fiscal_year_id = Column(Integer, ForeignKey("fiscal_years.id"), nullable=False)
    kind = Column(String, nullable=False)
    direction = Column(String, nullable=False)
    category = Column(String, nullable=True)
    description_code = Column(Integer, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    account = Column(String, nullable=False)
    date = Column(Date, nullable=True)
    description = Column(String, nullable=True)
    allocated_to_type = Column(String, nullable=True)
    allocated_to_id = Column(Integer, ForeignKey("activities.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    fiscal_year = relationship("FiscalYear", back_populates="movements")
    allocated_to = relationship("Activity", back_populates="movements")


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Make SQLite enforce foreign keys."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
