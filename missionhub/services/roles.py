# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Public role list: lookup and rotation.
"""

from typing import Optional, Sequence

from missionhub.models.domain import Role
from missionhub.repositories.mission_repository import MissionRepository


class RoleCatalog:
    """Ordered public roles backed by the ``roles`` lookup table."""

    def __init__(self, mission_repo: MissionRepository, public_roles: Sequence[str]) -> None:
        self._missions = mission_repo
        self._public = tuple(public_roles)

    @property
    def public_roles(self) -> tuple[str, ...]:
        return self._public

    def is_public(self, name: Optional[str]) -> bool:
        return bool(name) and name in self._public

    def get(self, name: Optional[str]) -> Optional[Role]:
        """Role for a public name; None for blank, unknown or non-public names."""
        if not self.is_public(name):
            return None
        return self._missions.get_role_by_name(name)

    def alternate(self, current: Optional[str]) -> str:
        """Next public role after ``current``, wrapping around."""
        if not self._public:
            raise RuntimeError("No public roles configured")
        index = self._public.index(current) if current in self._public else 0
        return self._public[(index + 1) % len(self._public)]

    def seed(self) -> list[Role]:
        return self._missions.ensure_roles(self._public)
