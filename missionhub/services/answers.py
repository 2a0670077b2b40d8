# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Per-participation question answers.

Answers are keyed ``question_<id>``; the mission's ordered question list is
passed in explicitly and decides how each value is coerced and validated.
"""

import re
from typing import Any, Iterator, Optional

from missionhub.models.coercion import is_blank, to_boolean
from missionhub.models.domain import Participation, Question
from missionhub.models.errors import ValidationErrors

VALID_NAME = re.compile(r"^question_(\d+)=?$")


def question_key(question: Question, suffix: str = "") -> str:
    return f"question_{question.id}{suffix}"


class AnswerStore:
    """Typed view over a participation's raw answer map."""

    def __init__(self, raw: dict[str, Any], questions: list[Question]) -> None:
        self._raw = raw
        self._questions = list(questions)
        self._by_id = {q.id: q for q in self._questions}
        self.errors = ValidationErrors()

    @property
    def questions(self) -> list[Question]:
        return list(self._questions)

    @property
    def raw(self) -> dict[str, Any]:
        return self._raw

    @property
    def needed(self) -> bool:
        return bool(self._questions)

    def each_question(self) -> Iterator[tuple[Question, str]]:
        for question in self._questions:
            yield question, question_key(question)

    # ── Lookup ──

    def question_for_name(self, name: str) -> Optional[Question]:
        match = VALID_NAME.match(str(name))
        if not match:
            return None
        return self._by_id.get(int(match.group(1)))

    def responds_to(self, name: str) -> bool:
        return self.question_for_name(name) is not None

    def read(self, name: str) -> Any:
        return self._raw.get(self._key(name))

    def write(self, name: str, value: Any) -> Any:
        question = self.question_for_name(name)
        if question is None:
            raise KeyError(f"No question matches '{name}'")
        normalized = to_boolean(value) if question.boolean else ("" if value is None else str(value))
        self._raw[self._key(name)] = normalized
        return normalized

    def assign(self, attributes: Any) -> None:
        """Bulk write; non-map input and keys outside the pattern are ignored."""
        if not isinstance(attributes, dict):
            return
        for name, value in attributes.items():
            if self.responds_to(name):
                self.write(name, value)

    def __getitem__(self, name: str) -> Any:
        if not self.responds_to(name):
            raise KeyError(name)
        return self.read(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.write(name, value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if self.responds_to(name):
            return self.read(name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    # ── Validation ──

    def validate(self) -> bool:
        self.errors.clear()
        for question, key in self.each_question():
            value = self.read(key)
            if question.required and is_blank(value):
                self.errors.add(key, "blank", "is blank")
            elif not is_blank(value) and question.multiple_choice:
                if value not in question.choices:
                    self.errors.add(key, "invalid_choice", "is an invalid choice")
        return self.errors.empty

    def as_dict(self) -> dict[str, Any]:
        return {key: self.read(key) for _, key in self.each_question()}

    @staticmethod
    def _key(name: str) -> str:
        return str(name).rstrip("=")


def answers_for(participation: Participation) -> AnswerStore:
    """Lazily bind an AnswerStore to ``participation`` on first access."""
    store = participation._answer_store
    if store is None:
        questions = participation.mission.questions if participation.mission else []
        store = AnswerStore(participation.raw_answers, questions)
        participation._answer_store = store
    return store
