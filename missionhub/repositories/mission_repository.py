# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for missions, their questions and pickups, and roles."""
import json
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from missionhub.core.logging import get_logger
from missionhub.models.domain import Mission, Pickup, Question, Role

logger = get_logger(__name__)

MISSION_COLS = (
    "id, name, minimum_captain_age, maximum_captain_age, "
    "minimum_sidekick_age, maximum_sidekick_age"
)


def _row_to_question(row) -> Question:
    data: Dict[str, Any] = dict(row)
    choices = data.get("choices")
    data["choices"] = json.loads(choices) if choices else []
    data["required"] = bool(data.get("required"))
    return Question(**data)


class MissionRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Write ──────────────────────────────────────────────────────────

    def create_mission(self, name: str, **age_bounds: Optional[int]) -> Mission:
        params = {
            "name": name,
            "min_captain": age_bounds.get("minimum_captain_age"),
            "max_captain": age_bounds.get("maximum_captain_age"),
            "min_sidekick": age_bounds.get("minimum_sidekick_age"),
            "max_sidekick": age_bounds.get("maximum_sidekick_age"),
        }
        with self._engine.begin() as conn:
            mission_id = conn.execute(
                text("""
                    INSERT INTO missions
                        (name, minimum_captain_age, maximum_captain_age,
                         minimum_sidekick_age, maximum_sidekick_age)
                    VALUES (:name, :min_captain, :max_captain, :min_sidekick, :max_sidekick)
                    RETURNING id
                """),
                params,
            ).scalar_one()
        logger.info("Mission created id=%s name=%s", mission_id, name)
        return self.get_mission(mission_id)

    def add_question(self, mission_id: int, prompt: str, question_type: str = "string",
                     required: bool = False, choices: Optional[List[str]] = None,
                     position: Optional[int] = None) -> Question:
        with self._engine.begin() as conn:
            if position is None:
                position = conn.execute(
                    text("SELECT COALESCE(MAX(position), 0) + 1 FROM mission_questions WHERE mission_id = :mid"),
                    {"mid": mission_id},
                ).scalar()
            row = conn.execute(
                text("""
                    INSERT INTO mission_questions
                        (mission_id, position, prompt, question_type, required, choices)
                    VALUES (:mid, :position, :prompt, :qtype, :required, :choices)
                    RETURNING id, mission_id, position, prompt, question_type, required, choices
                """),
                {"mid": mission_id, "position": position, "prompt": prompt,
                 "qtype": question_type, "required": bool(required),
                 "choices": json.dumps(choices or [])},
            ).mappings().one()
        return _row_to_question(row)

    def add_pickup(self, mission_id: int, name: str) -> Pickup:
        with self._engine.begin() as conn:
            pickup_id = conn.execute(
                text("INSERT INTO mission_pickups (mission_id, name) VALUES (:mid, :name) RETURNING id"),
                {"mid": mission_id, "name": name},
            ).scalar_one()
        return Pickup(id=pickup_id, mission_id=mission_id, name=name)

    def ensure_roles(self, names) -> List[Role]:
        """Insert any missing role names; returns every role."""
        with self._engine.begin() as conn:
            existing = {r[0] for r in conn.execute(text("SELECT name FROM roles")).fetchall()}
            for name in names:
                if name not in existing:
                    conn.execute(text("INSERT INTO roles (name) VALUES (:name)"), {"name": name})
        return self.list_roles()

    # ── Read ───────────────────────────────────────────────────────────

    def get_mission(self, mission_id: int) -> Optional[Mission]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {MISSION_COLS} FROM missions WHERE id = :id"), {"id": mission_id},
            ).mappings().first()
            if not row:
                return None
            question_rows = conn.execute(
                text("""
                    SELECT id, mission_id, position, prompt, question_type, required, choices
                    FROM mission_questions WHERE mission_id = :mid ORDER BY position, id
                """),
                {"mid": mission_id},
            ).mappings().all()
        return Mission(**dict(row), questions=[_row_to_question(q) for q in question_rows])

    def get_pickup(self, pickup_id: int) -> Optional[Pickup]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT id, mission_id, name FROM mission_pickups WHERE id = :id"),
                {"id": pickup_id},
            ).mappings().first()
        return Pickup(**row) if row else None

    def get_role(self, role_id: int) -> Optional[Role]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT id, name FROM roles WHERE id = :id"), {"id": role_id},
            ).mappings().first()
        return Role(**row) if row else None

    def get_role_by_name(self, name: str) -> Optional[Role]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT id, name FROM roles WHERE name = :name"), {"name": name},
            ).mappings().first()
        return Role(**row) if row else None

    def list_roles(self) -> List[Role]:
        with self._engine.connect() as conn:
            rows = conn.execute(text("SELECT id, name FROM roles ORDER BY id")).mappings().all()
        return [Role(**r) for r in rows]
