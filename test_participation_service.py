# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Tests for the participation workflow against an in-memory database."""

from unittest.mock import patch

import pytest

from conftest import born, notified_kinds
from missionhub.core.database import engine
from missionhub.core.dependencies import get_mission_repo, get_role_catalog, get_user_repo
from missionhub.core.i18n import Translator
from missionhub.models.domain import Mission, Participation, Role, User
from missionhub.models.errors import ValidationErrors
from missionhub.repositories.participation_repository import ParticipationRepository
from missionhub.services.notification_client import NotificationClient
from missionhub.services.participation_rules import check_age
from missionhub.services.participation_service import ParticipationService


# ============================================
# Joining
# ============================================
class TestJoinMission:
    def test_join_creates_in_created_state(self, service, make_user, mission):
        p = service.join_mission(make_user().id, mission.id, {"comment": "Count me in"})
        assert p.errors.empty
        assert p.id is not None
        assert p.state == "created"
        assert p.comment == "Count me in"

    def test_join_never_auto_approves(self, service, make_user, mission, pickup, notify):
        p = service.join_mission(make_user().id, mission.id,
                                 {"role": "sidekick", "pickup_id": pickup.id})
        assert p.state == "created"
        assert not p.recently_joined
        assert notified_kinds(notify) == []

    def test_rejected_join_is_not_persisted(self, service, make_user, mission):
        p = service.join_mission(make_user().id, mission.id, {"role": "sidekick"})
        assert p.id is None
        assert p.errors.codes_on("pickup") == ["blank"]
        assert service.find_for_user(p.user_id, mission.id) is None

    def test_unknown_user_or_mission(self, service, make_user, mission):
        with pytest.raises(KeyError):
            service.join_mission(999, mission.id)
        with pytest.raises(KeyError):
            service.join_mission(make_user().id, 999)

    def test_non_public_role_name_clears_role(self, service, make_user, mission):
        get_mission_repo().ensure_roles(["staff"])
        p = service.join_mission(make_user().id, mission.id, {"role": "staff"})
        assert p.role is None
        assert p.role_name == ""

    def test_unassignable_attributes_are_ignored(self, service, make_user, mission):
        p = service.join_mission(make_user().id, mission.id, {"state": "completed"})
        assert p.state == "created"

    def test_captain_gets_application_built(self, service, make_user, mission):
        user = make_user()
        p = service.join_mission(user.id, mission.id, {"role": "captain"})
        assert p.errors.empty
        assert get_user_repo().get(user.id).captain_application == {}


# ============================================
# Update & auto-approval
# ============================================
class TestUpdateWithConditionalSave:
    def test_error_free_update_auto_approves(self, service, make_user, mission, pickup, notify):
        p = service.join_mission(make_user().id, mission.id,
                                 {"role": "sidekick", "pickup_id": pickup.id})
        p, saved = service.update_with_conditional_save(p.id, {"comment": "Updated"})
        assert saved
        assert p.state == "approved"
        assert p.recently_joined
        assert notified_kinds(notify) == ["mission_role_approved"]
        assert service.get_participation(p.id).state == "approved"

    def test_invalid_update_stays_preparing(self, service, make_user, mission, pickup, notify):
        p = service.join_mission(make_user().id, mission.id,
                                 {"role": "sidekick", "pickup_id": pickup.id})
        p, saved = service.update_with_conditional_save(p.id, {"pickup_id": None})
        assert not saved
        assert p.state == "created"
        assert "pickup" in p.errors.fields
        assert notified_kinds(notify) == []
        assert service.get_participation(p.id).pickup_id == pickup.id

    def test_preview_without_save(self, service, make_user, mission):
        p = service.join_mission(make_user().id, mission.id)
        p, saved = service.update_with_conditional_save(
            p.id, {"comment": "draft"}, perform_save=False,
        )
        assert saved is False
        assert p.comment == "draft"
        assert p.state == "created"
        assert service.get_participation(p.id).comment is None

    def test_approved_participation_is_not_reapproved(self, service, approve, make_user,
                                                     mission, notify):
        p = approve(make_user(), mission.id)
        notify.reset_mock()
        p, saved = service.update_with_conditional_save(p.id, {"comment": "again"})
        assert saved
        assert p.state == "approved"
        assert notified_kinds(notify) == []

    def test_user_attributes_are_saved_with_participation(self, service, make_user, mission):
        user = make_user()
        p = service.join_mission(user.id, mission.id)
        service.update_with_conditional_save(p.id, {"user": {"name": "Renamed"}})
        assert get_user_repo().get(user.id).name == "Renamed"

    def test_failed_write_restores_in_memory_state(self, service, make_user, mission, notify):
        p = service.join_mission(make_user().id, mission.id)
        p = service.get_participation(p.id)
        with patch.object(ParticipationRepository, "update", side_effect=RuntimeError("disk full")):
            with pytest.raises(RuntimeError):
                service.save(p)
        assert p.state == "created"
        assert not p.recently_joined
        assert p.pop_notifications() == []
        notify.assert_not_called()
        assert service.get_participation(p.id).state == "created"

    def test_failed_insert_keeps_new_record(self, service, make_user, mission):
        def insert_then_fail(participation, conn):
            participation.id = 99
            raise RuntimeError("constraint violated")

        p = service.build(make_user().id, mission.id)
        with patch.object(ParticipationRepository, "insert", side_effect=insert_then_fail):
            with pytest.raises(RuntimeError):
                service.save(p)
        assert p.new_record
        assert p.created_at is None
        assert service.find_for_user(p.user_id, mission.id) is None

    def test_invalid_user_is_reported_nested(self, service, make_user, mission):
        p = service.join_mission(make_user().id, mission.id)
        p, saved = service.update_with_conditional_save(p.id, {"user": {"email": "nope"}})
        assert not saved
        assert p.errors.codes_on("user") == ["invalid"]
        assert p.errors.codes_on("user.email") == ["invalid"]


# ============================================
# Age rules
# ============================================
class TestAgeRules:
    def test_captain_outside_range(self, service, make_user, missions):
        mission = missions.create_mission("Ridge Walk", minimum_captain_age=18,
                                          maximum_captain_age=25)
        p = service.join_mission(make_user(age=30).id, mission.id, {"role": "captain"})
        assert p.id is None
        messages = p.errors.on("base")
        assert len(messages) == 1
        assert "Captains" in messages[0]
        assert "18-25" in messages[0]
        assert p.errors.codes_on("base") == ["age_range"]

    def test_minimum_only(self, service, make_user, missions):
        mission = missions.create_mission("Night Hike", minimum_sidekick_age=16)
        pickup = missions.add_pickup(mission.id, "Harbour")
        p = service.join_mission(make_user(age=12).id, mission.id,
                                 {"role": "sidekick", "pickup_id": pickup.id})
        assert p.errors.on("base") == ["Sidekicks must be older than 16."]

    def test_maximum_only_names_the_maximum(self, service, make_user, missions):
        mission = missions.create_mission("Kids Camp", maximum_captain_age=25)
        p = service.join_mission(make_user(age=30).id, mission.id, {"role": "captain"})
        assert p.errors.on("base") == ["Captains must be younger than 25."]

    def test_unknown_age_counts_as_zero(self, service, make_user, missions):
        mission = missions.create_mission("Ridge Walk", minimum_captain_age=18)
        p = service.join_mission(make_user(age=None).id, mission.id, {"role": "captain"})
        assert p.errors.on("base") == ["Captains must be older than 18."]

    def test_inside_range_passes(self, service, make_user, missions):
        mission = missions.create_mission("Ridge Walk", minimum_captain_age=18,
                                          maximum_captain_age=25)
        p = service.join_mission(make_user(age=21).id, mission.id, {"role": "captain"})
        assert p.errors.empty

    def test_no_role_means_no_age_check(self, service, make_user, missions):
        mission = missions.create_mission("Ridge Walk", minimum_captain_age=18,
                                          maximum_captain_age=25, minimum_sidekick_age=18)
        p = service.join_mission(make_user(age=10).id, mission.id)
        assert p.errors.on("base") == []

    def test_other_roles_are_never_age_checked(self):
        mission = Mission(id=1, name="Ridge Walk", minimum_captain_age=18, maximum_captain_age=25,
                          minimum_sidekick_age=18, maximum_sidekick_age=25)
        user = User(id=1, name="Young", email="young@example.org", date_of_birth=born(10))
        p = Participation(id=1, user_id=1, mission_id=1, role_id=9,
                          user=user, mission=mission, role=Role(id=9, name="staff"))
        errors = ValidationErrors()
        check_age(p, errors)
        assert errors.empty


# ============================================
# Answers through the pipeline
# ============================================
class TestAnswerValidation:
    def test_required_answer_blocks_save(self, service, make_user, missions, mission):
        q = missions.add_question(mission.id, "Emergency contact", required=True)
        p = service.join_mission(make_user().id, mission.id)
        assert p.errors.codes_on("answers") == ["invalid"]
        assert p.errors.codes_on(f"answers.question_{q.id}") == ["blank"]

    def test_answers_are_persisted(self, service, make_user, missions, mission):
        q = missions.add_question(mission.id, "Vegetarian?", question_type="boolean")
        p = service.join_mission(make_user().id, mission.id, {"answers": {f"question_{q.id}": "yes"}})
        reloaded = service.get_participation(p.id)
        assert service.answers(reloaded).read(f"question_{q.id}") is True

    def test_skip_extra_validation(self, service, make_user, missions, mission):
        q = missions.add_question(mission.id, "Emergency contact", required=True)
        p = service.join_mission(make_user().id, mission.id,
                                 {"answers": {f"question_{q.id}": "Mum"}})
        cleared = {"answers": {f"question_{q.id}": ""}, "role": "sidekick"}

        _, saved = service.update_with_conditional_save(p.id, cleared)
        assert not saved

        p, saved = service.update_with_conditional_save(p.id, cleared, skip_extra_validation=True)
        assert saved
        assert p.errors.empty
        assert p.state == "approved"


# ============================================
# Explicit events
# ============================================
class TestFireEvent:
    def test_await_approval_notifies_joined(self, service, make_user, mission, notify):
        p = service.join_mission(make_user().id, mission.id)
        p = service.fire_event(p.id, "await_approval")
        assert p.state == "awaiting_approval"
        assert notified_kinds(notify) == ["joined_mission"]
        assert service.get_participation(p.id).state == "awaiting_approval"

    def test_disallowed_event_raises(self, service, make_user, mission):
        p = service.join_mission(make_user().id, mission.id)
        with pytest.raises(ValueError):
            service.fire_event(p.id, "complete")

    def test_missing_participation(self, service):
        with pytest.raises(KeyError):
            service.fire_event(404, "cancel")

    def test_state_events_for_select_defaults(self, service, make_user, mission):
        p = service.join_mission(make_user().id, mission.id)
        assert service.state_events_for_select(p) == [
            ("Await approval", "await_approval"),
            ("Approve", "approve"),
            ("Cancel", "cancel"),
        ]

    def test_state_events_for_select_translated(self, make_user, mission):
        translated = ParticipationService(
            participation_repo=ParticipationRepository(engine),
            user_repo=get_user_repo(),
            mission_repo=get_mission_repo(),
            notification_client=NotificationClient(),
            roles=get_role_catalog(),
            translator=Translator({"ui": {"state_events": {"mission_participation": {
                "approve": "Approve now"}}}}),
        )
        p = translated.join_mission(make_user().id, mission.id)
        labels = dict((event, label) for label, event in translated.state_events_for_select(p))
        assert labels["approve"] == "Approve now"
        assert labels["cancel"] == "Cancel"


# ============================================
# Roles
# ============================================
class TestAlternateRole:
    def test_wraps_around(self, service, make_user, mission, pickup):
        captain = service.join_mission(make_user().id, mission.id, {"role": "captain"})
        sidekick = service.join_mission(make_user().id, mission.id,
                                        {"role": "sidekick", "pickup_id": pickup.id})
        assert service.alternate_role(captain) == "sidekick"
        assert service.alternate_role(sidekick) == "captain"

    def test_no_role_starts_from_first(self, service, make_user, mission):
        p = service.join_mission(make_user().id, mission.id)
        assert service.alternate_role(p) == "sidekick"


# ============================================
# Queries
# ============================================
class TestQueries:
    @pytest.fixture
    def roster(self, service, approve, make_user, mission, pickup):
        owner = make_user()
        pending = service.join_mission(owner.id, mission.id)
        approved = approve(make_user(), mission.id, role="sidekick", pickup_id=pickup.id)
        captain = approve(make_user(), mission.id, role="captain")
        return {"owner": owner, "pending": pending, "approved": approved, "captain": captain}

    def test_anonymous_sees_public_states_only(self, service, roster):
        ids = {p.id for p in service.viewable_by(None)}
        assert ids == {roster["approved"].id, roster["captain"].id}

    def test_member_sees_own_and_public(self, service, roster):
        ids = {p.id for p in service.viewable_by(roster["owner"])}
        assert ids == {roster["pending"].id, roster["approved"].id, roster["captain"].id}

    def test_admin_sees_all(self, service, roster, make_user):
        admin = make_user(admin=True)
        assert len(service.viewable_by(admin)) == 3

    def test_only_role(self, service, roster):
        assert [p.id for p in service.only_role("captain")] == [roster["captain"].id]

    def test_unknown_or_blank_role_filters_nothing(self, service, roster):
        assert len(service.only_role("pirate")) == 3
        assert len(service.only_role("")) == 3
        assert len(service.only_role(None)) == 3

    def test_with_states_and_pickups(self, service, roster, pickup):
        assert [p.id for p in service.with_states(["created"])] == [roster["pending"].id]
        assert [p.id for p in service.from_pickups([pickup.id])] == [roster["approved"].id]
        assert len(service.with_states([])) == 3

    def test_filtered_results_are_hydrated(self, service, roster, pickup):
        [captain] = service.only_role("captain")
        assert captain.role_name == "captain"
        assert captain.humanized_pickup == "Not applicable"
        [sidekick] = service.from_pickups([pickup.id])
        assert sidekick.humanized_pickup == "Central Station"
        [pending] = service.with_states(["created"])
        assert pending.user.id == roster["owner"].id
        assert pending.mission is not None

    def test_filters_combine_with_and(self, service, roster, mission, pickup, make_user):
        admin = make_user(admin=True)
        result = service.list_participations(
            admin, mission_id=mission.id, role="sidekick", states=["approved"], pickups=[pickup.id],
        )
        assert [p.id for p in result] == [roster["approved"].id]
