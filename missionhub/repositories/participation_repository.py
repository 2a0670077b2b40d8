# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Data-access layer for mission participations.

Filter helpers return ``(conditions, params)`` fragments that combine with
AND across dimensions; a blank filter value contributes no condition.
"""
import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

from missionhub.core.logging import get_logger
from missionhub.models.domain import Participation, Role

logger = get_logger(__name__)

PARTICIPATION_COLS = (
    "mission_participations.id, mission_participations.user_id, "
    "mission_participations.mission_id, mission_participations.role_id, "
    "mission_participations.pickup_id, mission_participations.state, "
    "mission_participations.comment, mission_participations.raw_answers, "
    "mission_participations.created_at, mission_participations.updated_at"
)

Fragment = Tuple[List[str], Dict[str, Any]]


def _row_to_participation(row) -> Participation:
    data: Dict[str, Any] = dict(row)
    raw = data.get("raw_answers")
    answers = json.loads(raw) if isinstance(raw, str) and raw else raw
    data["raw_answers"] = answers if isinstance(answers, dict) else {}
    return Participation(**data)


def _compact(values: Any) -> List[Any]:
    if values is None:
        return []
    if isinstance(values, (str, int)):
        values = [values]
    return [v for v in values if v is not None and str(v).strip() != ""]


def _in_clause(column: str, prefix: str, values: List[Any]) -> Fragment:
    names = [f"{prefix}{n}" for n in range(len(values))]
    clause = f"{column} IN ({', '.join(':' + n for n in names)})"
    return [clause], dict(zip(names, values))


def _merge(*fragments: Fragment) -> Fragment:
    conditions: List[str] = []
    params: Dict[str, Any] = {}
    for conds, prms in fragments:
        conditions.extend(conds)
        params.update(prms)
    return conditions, params


class ParticipationRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Write ──────────────────────────────────────────────────────────

    def insert(self, participation: Participation, conn: Connection) -> int:
        now = datetime.now(timezone.utc)
        participation.id = conn.execute(
            text("""
                INSERT INTO mission_participations
                    (user_id, mission_id, role_id, pickup_id, state, comment, raw_answers,
                     created_at, updated_at)
                VALUES
                    (:user_id, :mission_id, :role_id, :pickup_id, :state, :comment, :raw_answers,
                     :now, :now)
                RETURNING id
            """),
            self._params(participation) | {"now": now.isoformat()},
        ).scalar_one()
        participation.created_at = participation.updated_at = now
        return participation.id

    def update(self, participation: Participation, conn: Connection) -> None:
        now = datetime.now(timezone.utc)
        conn.execute(
            text("""
                UPDATE mission_participations
                SET role_id = :role_id, pickup_id = :pickup_id, state = :state,
                    comment = :comment, raw_answers = :raw_answers, updated_at = :now
                WHERE id = :id
            """),
            self._params(participation) | {"id": participation.id, "now": now.isoformat()},
        )
        participation.updated_at = now

    def update_state(self, participation_id: int, state: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                text("UPDATE mission_participations SET state = :state, updated_at = :now WHERE id = :id"),
                {"state": state, "id": participation_id,
                 "now": datetime.now(timezone.utc).isoformat()},
            )

    def transaction(self):
        return self._engine.begin()

    # ── Read ───────────────────────────────────────────────────────────

    def get(self, participation_id: int) -> Optional[Participation]:
        rows = self._select(["mission_participations.id = :id"], {"id": participation_id})
        return rows[0] if rows else None

    def find_for_user(self, user_id: int, mission_id: int) -> Optional[Participation]:
        rows = self._select(
            ["mission_participations.user_id = :uid", "mission_participations.mission_id = :mid"],
            {"uid": user_id, "mid": mission_id},
        )
        return rows[0] if rows else None

    def find_all(self, *fragments: Fragment) -> List[Participation]:
        conditions, params = _merge(*fragments)
        return self._select(conditions, params)

    def user_ids(self, *fragments: Fragment) -> List[int]:
        conditions, params = _merge(*fragments)
        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"""
                    SELECT DISTINCT mission_participations.user_id FROM mission_participations{where}
                    ORDER BY mission_participations.user_id
                """),
                params,
            ).fetchall()
        return [r[0] for r in rows]

    def state_counts(self) -> Dict[str, int]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text("SELECT state, COUNT(*) FROM mission_participations GROUP BY state")
            ).fetchall()
        return {r[0]: r[1] for r in rows}

    # ── Filters ────────────────────────────────────────────────────────

    @staticmethod
    def viewable_by(viewer_id: Optional[int], admin: bool, public_states: Iterable[str]) -> Fragment:
        """Anonymous: public states only; members: public plus their own; admins: all."""
        if admin and viewer_id is not None:
            return [], {}
        states_clause, params = _in_clause("mission_participations.state", "vs", list(public_states))
        if viewer_id is None:
            return states_clause, params
        params["viewer_id"] = viewer_id
        return [f"(mission_participations.user_id = :viewer_id OR {states_clause[0]})"], params

    @staticmethod
    def only_role(role: Optional[Role]) -> Fragment:
        if role is None:
            return [], {}
        return ["mission_participations.role_id IS NOT NULL", "mission_participations.role_id = :role_id"], {
            "role_id": role.id,
        }

    @staticmethod
    def with_states(states: Any) -> Fragment:
        states = _compact(states)
        return _in_clause("mission_participations.state", "st", states) if states else ([], {})

    @staticmethod
    def from_pickups(pickup_ids: Any) -> Fragment:
        ids = [int(i) for i in _compact(pickup_ids)]
        return _in_clause("mission_participations.pickup_id", "pk", ids) if ids else ([], {})

    @staticmethod
    def for_mission(mission_id: Optional[int]) -> Fragment:
        if mission_id in (None, ""):
            return [], {}
        return ["mission_participations.mission_id = :mission_id"], {"mission_id": int(mission_id)}

    # ── Private ────────────────────────────────────────────────────────

    def _select(self, conditions: List[str], params: Dict[str, Any]) -> List[Participation]:
        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"""
                    SELECT {PARTICIPATION_COLS} FROM mission_participations{where}
                    ORDER BY mission_participations.id
                """),
                params,
            ).mappings().all()
        return [_row_to_participation(r) for r in rows]

    @staticmethod
    def _params(participation: Participation) -> Dict[str, Any]:
        return {
            "user_id": participation.user_id,
            "mission_id": participation.mission_id,
            "role_id": participation.role_id,
            "pickup_id": participation.pickup_id,
            "state": participation.state,
            "comment": participation.comment,
            "raw_answers": json.dumps(participation.raw_answers or {}),
        }
