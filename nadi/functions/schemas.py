"""Request handler bodies. Fields are optional so that missing values map to a 400, not a 422."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Body(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EmailTestRequest(_Body):
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class PushTestRequest(_Body):
    user_id: Optional[str] = Field(None, alias="userId")
    title: Optional[str] = None
    body: Optional[str] = None


class MemberValidationRequest(_Body):
    ic_number: Optional[str] = None
    email: Optional[str] = None


class FunctionResponse(BaseModel):
    """Status code plus JSON body of one handler invocation."""

    status_code: int = 200
    body: dict[str, Any]
