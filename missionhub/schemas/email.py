# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas for admin email endpoints.
"""

from typing import Any, List, Optional

from pydantic import BaseModel

from missionhub.models.errors import ErrorDetail


class EmailRequest(BaseModel):
    subject: Optional[str] = None
    html_content: Optional[str] = None
    text_content: Optional[str] = None
    scope_type: Optional[str] = None
    filter: Optional[Any] = None
    confirmed: Optional[Any] = None


class EmailPreview(BaseModel):
    valid: bool
    valid_other_than_confirmed: bool
    user_count: int
    delivery: str
    errors: List[ErrorDetail]


class EmailQueued(BaseModel):
    status: str
    delivery: str
    user_count: int
    persisted: bool = False
