# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Validation error collection: field-level and record-level (``base``) errors.
Business rule failures are collected here, never raised.
"""

from typing import Iterator

from pydantic import BaseModel

BASE = "base"


class ErrorDetail(BaseModel):
    field: str
    code: str
    message: str


class ValidationErrors:
    """Ordered collection of validation errors attached to a record."""

    def __init__(self) -> None:
        self._items: list[ErrorDetail] = []

    def add(self, field: str, code: str, message: str) -> None:
        self._items.append(ErrorDetail(field=field, code=code, message=message))

    def add_to_base(self, message: str, code: str = "invalid") -> None:
        self.add(BASE, code, message)

    def merge(self, other: "ValidationErrors", prefix: str) -> None:
        for item in other:
            self.add(f"{prefix}.{item.field}", item.code, item.message)

    def on(self, field: str) -> list[str]:
        return [e.message for e in self._items if e.field == field]

    def codes_on(self, field: str) -> list[str]:
        return [e.code for e in self._items if e.field == field]

    @property
    def fields(self) -> list[str]:
        seen: list[str] = []
        for e in self._items:
            if e.field not in seen:
                seen.append(e.field)
        return seen

    def full_messages(self) -> list[str]:
        return [
            e.message if e.field == BASE else f"{e.field.replace('_', ' ').capitalize()} {e.message}"
            for e in self._items
        ]

    def clear(self) -> None:
        self._items.clear()

    def as_list(self) -> list[dict[str, str]]:
        return [e.model_dump() for e in self._items]

    @property
    def empty(self) -> bool:
        return not self._items

    def __iter__(self) -> Iterator[ErrorDetail]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"ValidationErrors({self.as_list()!r})"
