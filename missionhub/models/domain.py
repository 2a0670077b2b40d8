# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models: pure data structures, NO FastAPI dependency.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr

from missionhub.models.errors import ValidationErrors

QUESTION_TYPES = ("string", "boolean", "multiple_choice")


class Role(BaseModel):
    id: int
    name: str


class Pickup(BaseModel):
    id: int
    mission_id: int
    name: str


class Question(BaseModel):
    """A mission question; ``choices`` only matters for multiple choice."""
    id: int
    mission_id: int
    position: int = 0
    prompt: str = ""
    question_type: str = Field(default="string", pattern="^(string|boolean|multiple_choice)$")
    required: bool = False
    choices: list[str] = Field(default_factory=list)

    @property
    def boolean(self) -> bool:
        return self.question_type == "boolean"

    @property
    def multiple_choice(self) -> bool:
        return self.question_type == "multiple_choice"


class Mission(BaseModel):
    id: int
    name: str
    minimum_captain_age: Optional[int] = None
    maximum_captain_age: Optional[int] = None
    minimum_sidekick_age: Optional[int] = None
    maximum_sidekick_age: Optional[int] = None
    questions: list[Question] = Field(default_factory=list)

    def age_bounds(self, role_name: str) -> tuple[Optional[int], Optional[int]]:
        return (
            getattr(self, f"minimum_{role_name}_age", None),
            getattr(self, f"maximum_{role_name}_age", None),
        )


class User(BaseModel):
    id: Optional[int] = None
    name: str = ""
    email: str = ""
    date_of_birth: Optional[date] = None
    admin: bool = False
    captain_application: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Participation being validated right now, for cross-record checks.
    _current_participation: Any = PrivateAttr(default=None)

    @property
    def current_participation(self):
        return self._current_participation

    @current_participation.setter
    def current_participation(self, value) -> None:
        self._current_participation = value

    @property
    def age(self) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        today = date.today()
        born = self.date_of_birth
        return today.year - born.year - ((today.month, today.day) < (born.month, born.day))

    def build_captain_application(self) -> dict[str, Any]:
        self.captain_application = {}
        return self.captain_application


class Participation(BaseModel):
    """A user's enrollment in a mission."""
    id: Optional[int] = None
    user_id: Optional[int] = None
    mission_id: Optional[int] = None
    role_id: Optional[int] = None
    pickup_id: Optional[int] = None
    state: str = "created"
    comment: Optional[str] = None
    raw_answers: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Loaded associations
    user: Optional[User] = Field(default=None, exclude=True)
    mission: Optional[Mission] = Field(default=None, exclude=True)
    role: Optional[Role] = Field(default=None, exclude=True)
    pickup: Optional[Pickup] = Field(default=None, exclude=True)

    _errors: ValidationErrors = PrivateAttr(default_factory=ValidationErrors)
    _recently_joined: bool = PrivateAttr(default=False)
    _skip_extra_validation: bool = PrivateAttr(default=False)
    _answer_store: Any = PrivateAttr(default=None)
    _pending_notifications: list = PrivateAttr(default_factory=list)

    def queue_notification(self, kind: str) -> None:
        self._pending_notifications.append(kind)

    def pop_notifications(self) -> list[str]:
        kinds, self._pending_notifications = self._pending_notifications, []
        return kinds

    def mark_recently_joined(self) -> None:
        self._recently_joined = True

    @property
    def errors(self) -> ValidationErrors:
        return self._errors

    @property
    def new_record(self) -> bool:
        return self.id is None

    @property
    def recently_joined(self) -> bool:
        return self._recently_joined

    @property
    def skip_extra_validation(self) -> bool:
        return self._skip_extra_validation

    @skip_extra_validation.setter
    def skip_extra_validation(self, value) -> None:
        self._skip_extra_validation = bool(value)

    @property
    def role_name(self) -> str:
        return self.role.name if self.role else ""

    @property
    def captain(self) -> bool:
        return self.role_name == "captain"

    @property
    def sidekick(self) -> bool:
        return self.role_name == "sidekick"

    @property
    def validate_pickup_presence(self) -> bool:
        return self.sidekick and not self.skip_extra_validation

    def still_preparing(self, include_approved: bool = False) -> bool:
        states = ["created", "awaiting_approval"]
        if include_approved:
            states.append("approved")
        return self.state in states

    @property
    def human_state_name(self) -> str:
        return self.state.replace("_", " ").capitalize()

    @property
    def humanized_pickup(self) -> str:
        if self.sidekick:
            return self.pickup.name if self.pickup else "Not yet set"
        return "Not applicable"
