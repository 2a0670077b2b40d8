# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Transient admin email: never persisted, validated then handed off.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from missionhub.models.coercion import is_blank, to_boolean
from missionhub.models.errors import ValidationErrors

SCOPE_TYPES = (
    ("All Users", "all_users"),
    ("Filtered Participations", "filtered_participations"),
)
SCOPE_VALUES = tuple(value for _, value in SCOPE_TYPES)
TEMPLATE_MARKER = "{{"


# Ids start at 1, so an unparseable id matches no row.
UNMATCHABLE_ID = 0


def _to_int(value: Any) -> int:
    """Cast a submitted id; malformed input becomes an id that matches nothing."""
    if isinstance(value, bool):
        return UNMATCHABLE_ID
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return UNMATCHABLE_ID


def _compact(values: Any) -> list:
    if values is None:
        return []
    if not isinstance(values, (list, tuple, set)):
        values = [values]
    return [v for v in values if not is_blank(v)]


class EmailFilter(BaseModel):
    """Audience filter for participation-scoped mailings."""
    mission_id: Optional[int] = None
    role: Optional[str] = None
    states: list[str] = Field(default_factory=list)
    pickups: list[int] = Field(default_factory=list)

    @classmethod
    def parse(cls, value: Any) -> "EmailFilter":
        if isinstance(value, EmailFilter):
            return value
        if is_blank(value) or not isinstance(value, dict):
            return cls()
        if list(value.keys()) == ["table"] and isinstance(value["table"], dict):
            value = value["table"]
        role = value.get("role")
        return cls(
            mission_id=_to_int(value["mission_id"]) if not is_blank(value.get("mission_id")) else None,
            role=None if is_blank(role) else str(role).strip(),
            states=[str(s) for s in _compact(value.get("states"))],
            pickups=[_to_int(p) for p in _compact(value.get("pickups"))],
        )


class EmailMessage(BaseModel):
    subject: Optional[str] = None
    html_content: Optional[str] = None
    text_content: Optional[str] = None
    scope_type: Optional[str] = None
    filter: EmailFilter = Field(default_factory=EmailFilter)
    confirmed: Optional[bool] = None

    _errors: ValidationErrors = PrivateAttr(default_factory=ValidationErrors)
    _delivery: Optional[str] = PrivateAttr(default=None)

    @field_validator("filter", mode="before")
    @classmethod
    def parse_filter(cls, v: Any) -> EmailFilter:
        return EmailFilter.parse(v)

    @field_validator("confirmed", mode="before")
    @classmethod
    def parse_confirmed(cls, v: Any) -> Optional[bool]:
        return None if is_blank(v) else to_boolean(v)

    @property
    def errors(self) -> ValidationErrors:
        return self._errors

    @property
    def persisted(self) -> bool:
        return False

    @property
    def delivery(self) -> Optional[str]:
        return self._delivery

    @property
    def participation_scoped(self) -> bool:
        return self.scope_type == "filtered_participations"

    @property
    def uses_template(self) -> bool:
        return any(
            TEMPLATE_MARKER in (content or "")
            for content in (self.html_content, self.text_content, self.subject)
        )

    @classmethod
    def from_json(cls, payload: str) -> "EmailMessage":
        return cls.model_validate_json(payload)
