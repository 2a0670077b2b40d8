# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Shared fixtures: a fresh in-memory database per test and stubbed outbound HTTP."""

import itertools
import os
from datetime import date
from unittest.mock import patch

# Must be set before the engine is created on first import.
os.environ["DATABASE_URL"] = "sqlite://"

import pytest

from missionhub.core.database import create_schema, drop_schema, engine
from missionhub.core.dependencies import (
    get_email_composer,
    get_mission_repo,
    get_participation_service,
    get_role_catalog,
    get_user_repo,
)
from missionhub.models.domain import User
from missionhub.services.mailer_client import MailerClient
from missionhub.services.notification_client import NotificationClient


def born(age: int) -> date:
    """Date of birth for someone exactly ``age`` years old today."""
    return date(date.today().year - age, 1, 1)


@pytest.fixture(autouse=True)
def reset_db():
    drop_schema(engine)
    create_schema(engine)
    get_role_catalog().seed()
    yield


@pytest.fixture(autouse=True)
def notify():
    """Records (self, kind, participation) for every participant notification."""
    with patch.object(NotificationClient, "notify", autospec=True) as mock:
        yield mock


@pytest.fixture(autouse=True)
def mailer_post():
    """Records (self, path, payload) for every mailing handed to the mailer."""
    with patch.object(MailerClient, "_post", autospec=True) as mock:
        yield mock


@pytest.fixture
def make_user():
    repo = get_user_repo()
    seq = itertools.count(1)

    def _make(age=30, admin=False, name=None, email=None):
        n = next(seq)
        return repo.create(User(
            name=name or f"Volunteer {n}",
            email=email or f"volunteer{n}@example.org",
            date_of_birth=born(age) if age is not None else None,
            admin=admin,
        ))
    return _make


@pytest.fixture
def missions():
    return get_mission_repo()


@pytest.fixture
def mission(missions):
    return missions.create_mission("Lake Cleanup")


@pytest.fixture
def pickup(missions, mission):
    return missions.add_pickup(mission.id, "Central Station")


@pytest.fixture
def service():
    return get_participation_service()


@pytest.fixture
def composer():
    return get_email_composer()


@pytest.fixture
def approve(service):
    """Join then save once more, which auto-approves an error-free participation."""
    def _approve(user, mission_id, **attributes):
        participation = service.join_mission(user.id, mission_id, attributes)
        assert not participation.errors, participation.errors.full_messages()
        participation, saved = service.update_with_conditional_save(participation.id, {})
        assert saved
        return participation
    return _approve


def notified_kinds(notify_mock):
    return [c.args[1] for c in notify_mock.call_args_list]
