from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr


StateValue = Union[StrictStr, StrictBool, StrictInt, StrictFloat]


@dataclass(frozen=True)
class ChatSession:
    id: str
    client_secret: str
    expires_at: int
    user: str


class StartSessionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: StrictStr | None = Field(default=None, alias="userId")
    # None = поле не передано; {} = передан пустой набор. Провайдер различает эти случаи.
    state_variables: dict[str, StateValue] | None = Field(default=None, alias="stateVariables")


class StartSessionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(alias="clientSecret")
    expires_at: int = Field(alias="expiresAt")
    session_id: str = Field(alias="sessionId")
    user_id: str = Field(alias="userId")


class AuthStatusOut(BaseModel):
    ok: bool
    reissued: bool


class ErrorOut(BaseModel):
    error: str
