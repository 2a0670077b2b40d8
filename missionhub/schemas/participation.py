# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas for participation endpoints.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from missionhub.models.domain import Participation
from missionhub.models.errors import ErrorDetail


class UserAttributes(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    date_of_birth: Optional[date] = None


class JoinRequest(BaseModel):
    user_id: int = Field(..., ge=1)
    role: Optional[str] = None
    pickup_id: Optional[int] = None
    answers: Optional[Dict[str, Any]] = None
    comment: Optional[str] = Field(default=None, max_length=5000)


class ParticipationUpdate(BaseModel):
    """Partial update; ``save=false`` previews the result without persisting."""
    role: Optional[str] = None
    pickup_id: Optional[int] = None
    answers: Optional[Dict[str, Any]] = None
    comment: Optional[str] = Field(default=None, max_length=5000)
    user: Optional[UserAttributes] = None
    skip_extra_validation: bool = False
    save: bool = True

    def attributes(self) -> Dict[str, Any]:
        return self.model_dump(
            exclude_unset=True, exclude={"skip_extra_validation", "save"}, mode="json",
        )


class ParticipationOut(BaseModel):
    id: Optional[int]
    user_id: Optional[int]
    mission_id: Optional[int]
    role: Optional[str]
    pickup_id: Optional[int]
    pickup: str
    state: str
    human_state_name: str
    comment: Optional[str]
    answers: Dict[str, Any]
    recently_joined: bool = False
    created_at: Optional[str]
    updated_at: Optional[str]

    @classmethod
    def from_domain(cls, p: Participation) -> "ParticipationOut":
        return cls(
            id=p.id, user_id=p.user_id, mission_id=p.mission_id,
            role=p.role_name or None, pickup_id=p.pickup_id, pickup=p.humanized_pickup,
            state=p.state, human_state_name=p.human_state_name, comment=p.comment,
            answers=dict(p.raw_answers), recently_joined=p.recently_joined,
            created_at=p.created_at.isoformat() if p.created_at else None,
            updated_at=p.updated_at.isoformat() if p.updated_at else None,
        )


class ParticipationResult(BaseModel):
    participation: ParticipationOut
    saved: bool
    errors: List[ErrorDetail] = []


class StateEventOption(BaseModel):
    label: str
    event: str


class AnswerOut(BaseModel):
    key: str
    question_id: int
    prompt: str
    question_type: str
    required: bool
    choices: List[str]
    value: Any = None


class AnswersOut(BaseModel):
    participation_id: int
    needed: bool
    answers: List[AnswerOut]


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[Any] = None
    request_id: Optional[str] = None
