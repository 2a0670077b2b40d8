# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Tests for admin sidebar menus."""

from missionhub.core.i18n import Translator
from missionhub.services.navigation import SidebarBuilder


def _labels(items):
    return [item.label for item in items]


class TestCollectionSidebar:
    def test_top_level(self):
        items = SidebarBuilder(Translator()).collection_sidebar("missions")
        assert _labels(items) == ["All Missions", "Add Mission"]
        assert [i.href for i in items] == ["/admin/missions", "/admin/missions/new"]

    def test_nested_under_parent(self):
        items = SidebarBuilder(Translator()).collection_sidebar(
            "mission_participations", parent=("missions", 3),
        )
        assert _labels(items) == [
            "View Mission", "Edit Mission",
            "All Mission Participations", "Add Mission Participation",
        ]
        assert items[2].href == "/admin/missions/3/mission_participations"

    def test_translated_resource_name(self):
        translator = Translator({"sidebar": {"admin": {"mission_participations": "participant"}}})
        items = SidebarBuilder(translator).collection_sidebar("mission_participations")
        assert _labels(items) == ["All Participants", "Add Participant"]


class TestObjectSidebar:
    def test_object_links(self):
        items = SidebarBuilder(Translator()).object_sidebar("missions", 7)
        assert _labels(items) == [
            "All Missions", "Add Mission", "View Mission", "Edit Mission", "Remove Mission",
        ]
        remove = items[-1]
        assert remove.method == "delete"
        assert remove.href == "/admin/missions/7"
        assert remove.confirm == "Are you sure you want to remove this Mission?"

    def test_individual_resource_links(self):
        items = SidebarBuilder(Translator(), base_path="/backoffice/").individual_resource_links(
            "pickups", 2, parent=("missions", 1),
        )
        assert _labels(items) == ["View", "Edit", "Remove"]
        assert items[1].href == "/backoffice/missions/1/pickups/2/edit"

    def test_translated_confirmation(self):
        translator = Translator({"sidebar": {"confirmation": {
            "remove": "Really delete %(object_name)s?"}}})
        items = SidebarBuilder(translator).object_sidebar("users", 1)
        assert items[-1].confirm == "Really delete User?"
