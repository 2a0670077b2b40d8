# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection: wire repositories and services.
"""

from missionhub.core.config import settings
from missionhub.core.database import engine
from missionhub.core.i18n import Translator
from missionhub.repositories.mission_repository import MissionRepository
from missionhub.repositories.participation_repository import ParticipationRepository
from missionhub.repositories.user_repository import UserRepository
from missionhub.services.email_composer import EmailComposer
from missionhub.services.mailer_client import MailerClient
from missionhub.services.navigation import SidebarBuilder
from missionhub.services.notification_client import NotificationClient
from missionhub.services.participation_service import ParticipationService
from missionhub.services.roles import RoleCatalog

# ── Singleton repository instances ──
_user_repo = UserRepository(engine)
_mission_repo = MissionRepository(engine)
_participation_repo = ParticipationRepository(engine)
_notification_client = NotificationClient()
_mailer_client = MailerClient()
_translator = Translator.from_file(settings.LOCALE_PATH)
_roles = RoleCatalog(_mission_repo, settings.PUBLIC_ROLES)

# ── Service instances (with injected dependencies) ──
_participation_service = ParticipationService(
    participation_repo=_participation_repo,
    user_repo=_user_repo,
    mission_repo=_mission_repo,
    notification_client=_notification_client,
    roles=_roles,
    translator=_translator,
)
_email_composer = EmailComposer(
    user_repo=_user_repo,
    participation_service=_participation_service,
    mailer=_mailer_client,
)
_sidebar = SidebarBuilder(_translator)


# ── FastAPI dependency functions ──
def get_participation_service() -> ParticipationService:
    return _participation_service


def get_email_composer() -> EmailComposer:
    return _email_composer


def get_sidebar_builder() -> SidebarBuilder:
    return _sidebar


def get_user_repo() -> UserRepository:
    return _user_repo


def get_mission_repo() -> MissionRepository:
    return _mission_repo


def get_role_catalog() -> RoleCatalog:
    return _roles
