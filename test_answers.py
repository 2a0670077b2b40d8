# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Tests for the per-mission answer store."""

import pytest

from missionhub.models.domain import Mission, Participation, Question
from missionhub.services.answers import AnswerStore, answers_for


@pytest.fixture
def questions():
    return [
        Question(id=1, mission_id=1, position=1, prompt="T-shirt size?",
                 question_type="multiple_choice", choices=["S", "M", "L"]),
        Question(id=2, mission_id=1, position=2, prompt="Vegetarian?", question_type="boolean"),
        Question(id=3, mission_id=1, position=3, prompt="Emergency contact", required=True),
    ]


@pytest.fixture
def store(questions):
    return AnswerStore({}, questions)


class TestLookup:
    def test_needed_reflects_questions(self, store):
        assert store.needed is True
        assert AnswerStore({}, []).needed is False

    def test_each_question_in_order(self, store):
        assert [key for _, key in store.each_question()] == ["question_1", "question_2", "question_3"]

    def test_setter_suffix_is_accepted(self, store, questions):
        assert store.question_for_name("question_2=") == questions[1]

    def test_non_matching_names(self, store):
        assert store.question_for_name("question_x") is None
        assert store.question_for_name("question_99") is None
        assert store.question_for_name("answer_1") is None
        assert not store.responds_to("question_99")


class TestReadWrite:
    def test_boolean_answers_are_coerced(self, store):
        store["question_2"] = "yes"
        assert store.read("question_2") is True
        store["question_2"] = "0"
        assert store.read("question_2") is False
        store["question_2"] = ""
        assert store.read("question_2") is None

    def test_other_answers_are_stringified(self, store):
        store.write("question_3", 12345)
        assert store.raw["question_3"] == "12345"
        store.write("question_3", None)
        assert store.raw["question_3"] == ""

    def test_write_unknown_question_raises(self, store):
        with pytest.raises(KeyError):
            store.write("question_99", "x")

    def test_attribute_access(self, store):
        store["question_1"] = "M"
        assert store.question_1 == "M"
        with pytest.raises(AttributeError):
            store.question_99

    def test_assign_ignores_unknown_and_non_map_input(self, store):
        store.assign({"question_1": "L", "question_99": "x", "comment": "hi"})
        store.assign("not a map")
        assert store.raw == {"question_1": "L"}

    def test_writes_land_in_the_backing_map(self, questions):
        raw = {}
        AnswerStore(raw, questions).write("question_1", "S")
        assert raw == {"question_1": "S"}


class TestValidation:
    def test_required_blank(self, store):
        assert store.validate() is False
        assert store.errors.codes_on("question_3") == ["blank"]
        assert store.errors.on("question_3") == ["is blank"]

    def test_invalid_choice(self, store):
        store.assign({"question_1": "XXL", "question_3": "Mum"})
        assert store.validate() is False
        assert store.errors.codes_on("question_1") == ["invalid_choice"]
        assert store.errors.fields == ["question_1"]

    def test_blank_optional_choice_is_fine(self, store):
        store.assign({"question_1": "", "question_3": "Mum"})
        assert store.validate() is True

    def test_required_boolean_false_counts_as_blank(self, questions):
        questions[1].required = True
        store = AnswerStore({"question_2": False, "question_3": "Mum"}, questions)
        assert store.validate() is False
        assert store.errors.codes_on("question_2") == ["blank"]

    def test_revalidation_clears_previous_errors(self, store):
        store.validate()
        store["question_3"] = "Mum"
        assert store.validate() is True
        assert store.errors.empty


class TestBinding:
    def test_store_is_cached_on_participation(self, questions):
        mission = Mission(id=1, name="Beach", questions=questions)
        p = Participation(mission_id=1, mission=mission)
        assert answers_for(p) is answers_for(p)

    def test_store_writes_through_to_raw_answers(self, questions):
        p = Participation(mission_id=1, mission=Mission(id=1, name="Beach", questions=questions))
        answers_for(p)["question_1"] = "S"
        assert p.raw_answers == {"question_1": "S"}

    def test_participation_without_mission_has_no_questions(self):
        assert answers_for(Participation()).needed is False
