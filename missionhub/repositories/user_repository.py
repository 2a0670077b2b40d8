# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for users."""
import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from missionhub.core.logging import get_logger
from missionhub.models.domain import User

logger = get_logger(__name__)

USER_COLS = "id, name, email, date_of_birth, admin, captain_application, created_at, updated_at"


def _row_to_user(row) -> User:
    data: Dict[str, Any] = dict(row)
    application = data.get("captain_application")
    data["captain_application"] = json.loads(application) if isinstance(application, str) else application
    data["admin"] = bool(data.get("admin"))
    return User(**data)


def _iso(value) -> Optional[str]:
    return value.isoformat() if hasattr(value, "isoformat") else value


class UserRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Write ──────────────────────────────────────────────────────────

    def create(self, user: User) -> User:
        now = datetime.now(timezone.utc).isoformat()
        with self._engine.begin() as conn:
            user.id = conn.execute(
                text("""
                    INSERT INTO users
                        (name, email, date_of_birth, admin, captain_application, created_at, updated_at)
                    VALUES
                        (:name, :email, :dob, :admin, :application, :now, :now)
                    RETURNING id
                """),
                self._params(user) | {"now": now},
            ).scalar_one()
        logger.info("User created id=%s", user.id)
        return user

    def update(self, user: User, conn=None) -> None:
        params = self._params(user) | {
            "id": user.id, "now": datetime.now(timezone.utc).isoformat(),
        }
        sql = text("""
            UPDATE users SET name = :name, email = :email, date_of_birth = :dob,
                   admin = :admin, captain_application = :application, updated_at = :now
            WHERE id = :id
        """)
        if conn is not None:
            conn.execute(sql, params)
            return
        with self._engine.begin() as own:
            own.execute(sql, params)

    # ── Read ───────────────────────────────────────────────────────────

    def get(self, user_id: int) -> Optional[User]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {USER_COLS} FROM users WHERE id = :id"), {"id": user_id},
            ).mappings().first()
        return _row_to_user(row) if row else None

    def get_many(self, user_ids: Iterable[int]) -> List[User]:
        ids = sorted({int(i) for i in user_ids})
        if not ids:
            return []
        placeholders = ", ".join(f":u{n}" for n in range(len(ids)))
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"SELECT {USER_COLS} FROM users WHERE id IN ({placeholders}) ORDER BY id"),
                {f"u{n}": uid for n, uid in enumerate(ids)},
            ).mappings().all()
        return [_row_to_user(r) for r in rows]

    def all_ids(self) -> List[int]:
        with self._engine.connect() as conn:
            return [r[0] for r in conn.execute(text("SELECT id FROM users ORDER BY id")).fetchall()]

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(text("SELECT COUNT(*) FROM users")).scalar() or 0

    def verify_connection(self):
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    # ── Private ────────────────────────────────────────────────────────

    @staticmethod
    def _params(user: User) -> Dict[str, Any]:
        return {
            "name": user.name,
            "email": user.email,
            "dob": _iso(user.date_of_birth),
            "admin": bool(user.admin),
            "application": (
                json.dumps(user.captain_application)
                if user.captain_application is not None else None
            ),
        }
