from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from chatkit_gate.models.session import ChatSession


StateVariables = Mapping[str, str | int | float | bool]


class ChatSessionProvider(ABC):
    @abstractmethod
    def create_session(
        self,
        user_id: str,
        workflow_id: str,
        state_variables: StateVariables | None = None,
    ) -> ChatSession:  # pragma: no cover - interface
        ...
