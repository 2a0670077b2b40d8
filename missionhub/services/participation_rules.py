# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Participation validation pipeline.

Rules run in order and append to the participation's error collection;
nothing here raises for a business failure.
"""

import re
from typing import Callable, Optional

from missionhub.core.i18n import humanize, pluralize
from missionhub.models.coercion import is_blank
from missionhub.models.domain import Participation, User
from missionhub.models.errors import ValidationErrors
from missionhub.services.answers import answers_for

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
AGE_CHECKED_ROLES = ("captain", "sidekick")


def user_errors(user: User) -> ValidationErrors:
    errors = ValidationErrors()
    if is_blank(user.name):
        errors.add("name", "blank", "can't be blank")
    if is_blank(user.email):
        errors.add("email", "blank", "can't be blank")
    elif not EMAIL_PATTERN.match(user.email.strip()):
        errors.add("email", "invalid", "is invalid")
    participation = user.current_participation
    if participation is not None and participation.captain and user.captain_application is None:
        errors.add("captain_application", "blank", "can't be blank")
    return errors


def age_error(role_name: str, minimum: Optional[int], maximum: Optional[int],
              age: int) -> Optional[str]:
    """Record-level message when ``age`` falls outside the role's bounds."""
    prefix = pluralize(humanize(role_name))
    if minimum is not None and maximum is not None:
        if not minimum <= age <= maximum:
            return f"{prefix} must be {minimum}-{maximum} years old."
    elif minimum is not None:
        if age < minimum:
            return f"{prefix} must be older than {minimum}."
    elif maximum is not None:
        if age > maximum:
            return f"{prefix} must be younger than {maximum}."
    return None


# ── Hooks ──

def mark_user_participation(participation: Participation) -> None:
    user = participation.user
    if user is None:
        return
    if participation.captain and user.captain_application is None:
        user.build_captain_application()
    user.current_participation = participation


# ── Rules ──

def check_presence(participation: Participation, errors: ValidationErrors) -> None:
    if participation.user is None:
        errors.add("user", "blank", "can't be blank")
    if participation.mission is None:
        errors.add("mission", "blank", "can't be blank")


def check_user(participation: Participation, errors: ValidationErrors) -> None:
    if participation.user is None:
        return
    nested = user_errors(participation.user)
    if nested:
        errors.add("user", "invalid", "is invalid")
        errors.merge(nested, "user")


def check_pickup(participation: Participation, errors: ValidationErrors) -> None:
    if participation.validate_pickup_presence and participation.pickup is None:
        errors.add("pickup", "blank", "can't be blank")


def check_answers(participation: Participation, errors: ValidationErrors) -> None:
    if participation.skip_extra_validation or participation.mission is None:
        return
    store = answers_for(participation)
    if not store.validate():
        errors.add("answers", "invalid", "is invalid")
        errors.merge(store.errors, "answers")


def check_age(participation: Participation, errors: ValidationErrors) -> None:
    role = participation.role_name.strip()
    if not role or participation.mission is None or participation.user is None:
        return
    if role not in AGE_CHECKED_ROLES:
        return
    minimum, maximum = participation.mission.age_bounds(role)
    message = age_error(role, minimum, maximum, participation.user.age or 0)
    if message:
        errors.add_to_base(message, code="age_range")


RULES: tuple[Callable[[Participation, ValidationErrors], None], ...] = (
    check_presence,
    check_user,
    check_pickup,
    check_answers,
    check_age,
)


def run_validation(participation: Participation) -> bool:
    """Run the before-validation hook then every rule; True when error free."""
    errors = participation.errors
    errors.clear()
    mark_user_participation(participation)
    for rule in RULES:
        rule(participation, errors)
    return errors.empty
