# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package: re-exports the data-access classes."""
from missionhub.repositories.mission_repository import MissionRepository
from missionhub.repositories.participation_repository import ParticipationRepository
from missionhub.repositories.user_repository import UserRepository

__all__ = ["MissionRepository", "ParticipationRepository", "UserRepository"]
