from __future__ import annotations

import json
import logging
from typing import Any

import requests

from chatkit_gate.models.session import ChatSession
from chatkit_gate.services.chatkit.base import ChatSessionProvider, StateVariables


logger = logging.getLogger(__name__)

CHATKIT_BETA_HEADER = "chatkit_beta=v1"


class ChatKitProviderError(RuntimeError):
    pass


class OpenAIChatKitService(ChatSessionProvider):
    def __init__(self, api_key: str, base_url: str = "https://api.openai.com/v1", timeout: float = 30.0) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def create_session(
        self,
        user_id: str,
        workflow_id: str,
        state_variables: StateVariables | None = None,
    ) -> ChatSession:
        workflow: dict[str, Any] = {"id": workflow_id}
        # Пустой словарь передаём как есть: отсутствие state_variables означает другое состояние.
        if state_variables is not None:
            workflow["state_variables"] = dict(state_variables)
        payload = {"user": user_id, "workflow": workflow}

        try:
            resp = requests.post(
                f"{self._base_url}/chatkit/sessions",
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                    "OpenAI-Beta": CHATKIT_BETA_HEADER,
                },
                data=json.dumps(payload),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise ChatKitProviderError("chatkit_request_failed") from exc

        if resp.status_code >= 400:
            logger.warning("ChatKit session request rejected: status=%s", resp.status_code)
            raise ChatKitProviderError(f"chatkit_http_{resp.status_code}")

        try:
            body: Any = resp.json()
        except ValueError as exc:
            raise ChatKitProviderError("chatkit_invalid_json") from exc

        return _parse_session(body)


def _parse_session(body: Any) -> ChatSession:
    """
    Достаёт из ответа ChatKit четыре поля, которые нужны клиенту.

    client_secret встречается и строкой, и объектом вида {"value": "..."}.
    """
    if not isinstance(body, dict):
        raise ChatKitProviderError("chatkit_invalid_session")

    client_secret = body.get("client_secret")
    if isinstance(client_secret, dict):
        client_secret = client_secret.get("value")
    session_id = body.get("id")
    user = body.get("user")
    expires_at = body.get("expires_at")

    if not isinstance(client_secret, str) or not client_secret:
        raise ChatKitProviderError("chatkit_invalid_session")
    if not isinstance(session_id, str) or not session_id:
        raise ChatKitProviderError("chatkit_invalid_session")
    if not isinstance(user, str):
        raise ChatKitProviderError("chatkit_invalid_session")
    if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
        raise ChatKitProviderError("chatkit_invalid_session")

    return ChatSession(id=session_id, client_secret=client_secret, expires_at=int(expires_at), user=user)
