# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""SQLAlchemy engine singleton and table definitions."""
from sqlalchemy import (
    Boolean, Column, Date, DateTime, ForeignKey, Integer, MetaData, String, Table,
    Text, create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from missionhub.core.config import settings

metadata = MetaData()

users = Table(
    "users", metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("date_of_birth", Date),
    Column("admin", Boolean, nullable=False, default=False),
    Column("captain_application", Text),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
)

missions = Table(
    "missions", metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("minimum_captain_age", Integer),
    Column("maximum_captain_age", Integer),
    Column("minimum_sidekick_age", Integer),
    Column("maximum_sidekick_age", Integer),
)

mission_questions = Table(
    "mission_questions", metadata,
    Column("id", Integer, primary_key=True),
    Column("mission_id", Integer, ForeignKey("missions.id"), nullable=False),
    Column("position", Integer, nullable=False, default=0),
    Column("prompt", Text, nullable=False),
    Column("question_type", String(32), nullable=False, default="string"),
    Column("required", Boolean, nullable=False, default=False),
    Column("choices", Text),
)

mission_pickups = Table(
    "mission_pickups", metadata,
    Column("id", Integer, primary_key=True),
    Column("mission_id", Integer, ForeignKey("missions.id"), nullable=False),
    Column("name", String(255), nullable=False),
)

roles = Table(
    "roles", metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(64), nullable=False, unique=True),
)

mission_participations = Table(
    "mission_participations", metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("mission_id", Integer, ForeignKey("missions.id"), nullable=False),
    Column("role_id", Integer, ForeignKey("roles.id")),
    Column("pickup_id", Integer, ForeignKey("mission_pickups.id")),
    Column("state", String(32), nullable=False, default="created"),
    Column("comment", Text),
    Column("raw_answers", Text),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
)


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Single shared connection; required for in-memory databases.
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.POOL_SIZE,
        "max_overflow": settings.MAX_OVERFLOW,
        "pool_recycle": settings.POOL_RECYCLE,
    }


def create_schema(bind: Engine) -> None:
    metadata.create_all(bind)


def drop_schema(bind: Engine) -> None:
    metadata.drop_all(bind)


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
