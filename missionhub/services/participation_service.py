# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Mission participation lifecycle.

Joins, updates (with auto-approval), explicit state events, and the
read-side views used by the admin UI and the email audience builder.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from missionhub.core.i18n import Translator, humanize
from missionhub.core.logging import get_logger
from missionhub.metrics import (
    PARTICIPATIONS_CREATED, PARTICIPATIONS_TOTAL, STATE_TRANSITIONS, VALIDATION_FAILURES,
)
from missionhub.models.domain import Participation, User
from missionhub.repositories.mission_repository import MissionRepository
from missionhub.repositories.participation_repository import ParticipationRepository
from missionhub.repositories.user_repository import UserRepository
from missionhub.services import lifecycle
from missionhub.services.answers import AnswerStore, answers_for
from missionhub.services.notification_client import NotificationClient
from missionhub.services.participation_rules import run_validation
from missionhub.services.roles import RoleCatalog

logger = get_logger(__name__)

# Attributes a participant may mass-assign.
ASSIGNABLE_ATTRIBUTES = ("role", "pickup_id", "answers", "comment", "user")
USER_ATTRIBUTES = ("name", "email", "date_of_birth")


class ParticipationService:
    """Business logic for the participation workflow."""

    def __init__(
        self,
        participation_repo: ParticipationRepository,
        user_repo: UserRepository,
        mission_repo: MissionRepository,
        notification_client: NotificationClient,
        roles: RoleCatalog,
        translator: Optional[Translator] = None,
    ) -> None:
        self._repo = participation_repo
        self._users = user_repo
        self._missions = mission_repo
        self._notifications = notification_client
        self._roles = roles
        self._t = translator or Translator()

    @property
    def roles(self) -> RoleCatalog:
        return self._roles

    def seed_gauges(self) -> None:
        counts = self._repo.state_counts()
        for state in lifecycle.STATES:
            PARTICIPATIONS_TOTAL.labels(state=state).set(counts.get(state, 0))
        logger.info("Prometheus gauges loaded from DB")

    # ── Loading ──

    def get_participation(self, participation_id: int) -> Participation:
        """Raises KeyError if the participation does not exist."""
        participation = self._repo.get(participation_id)
        if participation is None:
            raise KeyError(f"Participation {participation_id} not found")
        return self._hydrate(participation)

    def get_user(self, user_id: Optional[int]) -> Optional[User]:
        return self._users.get(user_id) if user_id is not None else None

    def build(self, user_id: int, mission_id: int) -> Participation:
        participation = Participation(
            user_id=user_id, mission_id=mission_id, state=lifecycle.INITIAL_STATE,
        )
        return self._hydrate(participation)

    # ── Attribute assignment ──

    def set_role_name(self, participation: Participation, name: Optional[str]) -> None:
        """Only public role names resolve; anything else clears the role."""
        role = self._roles.get(name)
        participation.role = role
        participation.role_id = role.id if role else None

    def set_pickup(self, participation: Participation, pickup_id: Optional[int]) -> None:
        participation.pickup_id = pickup_id
        participation.pickup = self._missions.get_pickup(pickup_id) if pickup_id else None

    def assign(self, participation: Participation, attributes: Dict[str, Any]) -> None:
        if not isinstance(attributes, dict):
            return
        for key, value in attributes.items():
            if key not in ASSIGNABLE_ATTRIBUTES:
                continue
            if key == "role":
                self.set_role_name(participation, value)
            elif key == "pickup_id":
                self.set_pickup(participation, value)
            elif key == "answers":
                answers_for(participation).assign(value)
            elif key == "comment":
                participation.comment = value
            elif key == "user":
                self._assign_user(participation, value)

    def _assign_user(self, participation: Participation, values: Any) -> None:
        if not isinstance(values, dict) or participation.user is None:
            return
        user = participation.user
        for key in USER_ATTRIBUTES:
            if key in values:
                value = values[key]
                if key == "date_of_birth" and isinstance(value, str):
                    value = date.fromisoformat(value) if value else None
                setattr(user, key, value)

    # ── Validation & persistence ──

    def validate(self, participation: Participation) -> bool:
        valid = run_validation(participation)
        if not participation.new_record:
            self.auto_approve(participation)
        return valid

    def auto_approve(self, participation: Participation) -> bool:
        """Approve an existing, error-free participation that is still preparing."""
        if participation.new_record:
            return False
        if participation.state not in lifecycle.PREPARING_STATES or participation.errors:
            return False
        lifecycle.fire(participation, "approve")
        participation.mark_recently_joined()
        STATE_TRANSITIONS.labels(event="approve", source="auto").inc()
        logger.info("Participation auto-approved id=%s", participation.id,
                    extra={"participation_id": participation.id, "event": "approve"})
        return True

    def save(self, participation: Participation) -> bool:
        previous_state = participation.state
        if not self.validate(participation):
            VALIDATION_FAILURES.labels(entity="participation").inc()
            logger.info(
                "Participation rejected id=%s errors=%s",
                participation.id, participation.errors.full_messages(),
            )
            return False

        created = participation.new_record
        try:
            with self._repo.transaction() as conn:
                if participation.user is not None and participation.user.id is not None:
                    self._users.update(participation.user, conn=conn)
                if created:
                    self._repo.insert(participation, conn)
                else:
                    self._repo.update(participation, conn)
        except Exception:
            logger.error("Participation save rolled back id=%s", participation.id)
            # Rolled back: undo what validation and insert did in memory.
            if created:
                participation.id = None
                participation.created_at = participation.updated_at = None
            participation.state = previous_state
            participation._recently_joined = False
            participation.pop_notifications()
            raise

        if created:
            PARTICIPATIONS_CREATED.labels(role=participation.role_name or "none").inc()
            logger.info(
                "Participation created id=%s user=%s mission=%s role=%s",
                participation.id, participation.user_id, participation.mission_id,
                participation.role_name or "none",
                extra={"participation_id": participation.id, "user_id": participation.user_id,
                       "mission_id": participation.mission_id},
            )
        self.seed_gauges()
        self._dispatch_notifications(participation)
        return True

    # ── Workflow operations ──

    def join_mission(self, user_id: int, mission_id: int,
                     attributes: Optional[Dict[str, Any]] = None) -> Participation:
        """Create a participation; check ``errors`` on the result for rejection."""
        if self._users.get(user_id) is None:
            raise KeyError(f"User {user_id} not found")
        if self._missions.get_mission(mission_id) is None:
            raise KeyError(f"Mission {mission_id} not found")
        participation = self.build(user_id, mission_id)
        self.assign(participation, attributes or {})
        self.save(participation)
        return participation

    def update_with_conditional_save(
        self, participation_id: int, attributes: Dict[str, Any],
        perform_save: bool = True, skip_extra_validation: bool = False,
    ) -> Tuple[Participation, bool]:
        """Assign ``attributes``; save only when ``perform_save``."""
        participation = self.get_participation(participation_id)
        participation.skip_extra_validation = skip_extra_validation
        self.assign(participation, attributes)
        saved = perform_save and self.save(participation)
        return participation, saved

    def fire_event(self, participation_id: int, event: str) -> Participation:
        """Raises KeyError (missing) or ValueError (event not allowed from state)."""
        participation = self.get_participation(participation_id)
        from_state = participation.state
        lifecycle.fire(participation, event)
        self._repo.update_state(participation.id, participation.state)
        STATE_TRANSITIONS.labels(event=event, source="manual").inc()
        logger.info(
            "Participation transition id=%s event=%s %s -> %s",
            participation.id, event, from_state, participation.state,
            extra={"participation_id": participation.id, "event": event,
                   "state": participation.state},
        )
        self.seed_gauges()
        self._dispatch_notifications(participation)
        return participation

    def state_events_for_select(self, participation: Participation) -> List[Tuple[str, str]]:
        return [
            (
                self._t.t(f"mission_participation.{event}", scope="ui.state_events",
                          default=humanize(event)),
                event,
            )
            for event in lifecycle.available_events(participation.state)
        ]

    def alternate_role(self, participation: Participation) -> str:
        return self._roles.alternate(participation.role_name)

    def answers(self, participation: Participation) -> AnswerStore:
        return answers_for(participation)

    # ── Queries ──

    def viewable_by(self, viewer: Optional[User]) -> List[Participation]:
        return self.list_participations(viewer)

    def list_participations(
        self,
        viewer: Optional[User],
        mission_id: Optional[int] = None,
        role: Optional[str] = None,
        states: Optional[List[str]] = None,
        pickups: Optional[List[int]] = None,
    ) -> List[Participation]:
        fragments = [
            self._repo.viewable_by(
                viewer.id if viewer else None,
                bool(viewer and viewer.admin),
                lifecycle.PUBLIC_STATES,
            ),
            self._repo.for_mission(mission_id),
            self._repo.only_role(self._role_filter(role)),
            self._repo.with_states(states),
            self._repo.from_pickups(pickups),
        ]
        return [self._hydrate(p) for p in self._repo.find_all(*fragments)]

    def only_role(self, name: Optional[str]) -> List[Participation]:
        fragment = self._repo.only_role(self._role_filter(name))
        return [self._hydrate(p) for p in self._repo.find_all(fragment)]

    def with_states(self, states: Any) -> List[Participation]:
        fragment = self._repo.with_states(states)
        return [self._hydrate(p) for p in self._repo.find_all(fragment)]

    def from_pickups(self, pickup_ids: Any) -> List[Participation]:
        fragment = self._repo.from_pickups(pickup_ids)
        return [self._hydrate(p) for p in self._repo.find_all(fragment)]

    def user_ids_matching(self, mission_id: Optional[int] = None, role: Optional[str] = None,
                          states: Any = None, pickups: Any = None) -> List[int]:
        return self._repo.user_ids(
            self._repo.for_mission(mission_id),
            self._repo.only_role(self._role_filter(role)),
            self._repo.with_states(states),
            self._repo.from_pickups(pickups),
        )

    def find_for_user(self, user_id: int, mission_id: int) -> Optional[Participation]:
        participation = self._repo.find_for_user(user_id, mission_id)
        return self._hydrate(participation) if participation else None

    # ── Internal ──

    def _role_filter(self, name: Optional[str]):
        """Blank or unknown role names filter nothing."""
        if not name or not str(name).strip():
            return None
        return self._missions.get_role_by_name(str(name).strip())

    def _hydrate(self, participation: Participation) -> Participation:
        if participation.user_id is not None and participation.user is None:
            participation.user = self._users.get(participation.user_id)
        if participation.mission_id is not None and participation.mission is None:
            participation.mission = self._missions.get_mission(participation.mission_id)
        if participation.role_id is not None and participation.role is None:
            participation.role = self._missions.get_role(participation.role_id)
        if participation.pickup_id is not None and participation.pickup is None:
            participation.pickup = self._missions.get_pickup(participation.pickup_id)
        return participation

    def _dispatch_notifications(self, participation: Participation) -> None:
        for kind in participation.pop_notifications():
            self._notifications.notify(kind, participation)
