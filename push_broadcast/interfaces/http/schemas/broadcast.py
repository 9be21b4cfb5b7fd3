from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TokenErrorSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    token: str
    error: str


class BroadcastResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: int
    failure: int
    errors: list[TokenErrorSchema]


class ErrorResponse(BaseModel):
    error: str
