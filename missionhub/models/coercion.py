# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Form-value coercion shared by answers and email confirmation."""
from typing import Any, Optional

TRUE_VALUES = frozenset({"1", "t", "true", "y", "yes", "on"})


def to_boolean(value: Any) -> Optional[bool]:
    """Truthy-string rule: blank -> None, known truthy tokens -> True, else False."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and not value.strip():
        return None
    return str(value).strip().lower() in TRUE_VALUES


def is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return not value
    return False
