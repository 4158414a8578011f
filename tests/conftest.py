"""
Pytest config.

Puts `backend/` on sys.path so `import chatkit_gate` works without an editable install,
and wires the FastAPI app to test settings and a fake ChatKit provider.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_backend_on_syspath() -> None:
    backend = Path(__file__).resolve().parents[1] / "backend"
    backend_str = str(backend)
    if backend_str not in sys.path:
        sys.path.insert(0, backend_str)


_ensure_backend_on_syspath()

from fastapi.testclient import TestClient  # noqa: E402

from chatkit_gate.api.deps import get_session_provider  # noqa: E402
from chatkit_gate.core.config import Settings, get_settings  # noqa: E402
from chatkit_gate.main import app  # noqa: E402
from chatkit_gate.models.session import ChatSession  # noqa: E402
from chatkit_gate.services.chatkit.base import ChatSessionProvider  # noqa: E402


TEST_DOMAIN_KEY = "test-domain-key-for-testing-purposes-only"


class FakeChatKitProvider(ChatSessionProvider):
    def __init__(self) -> None:
        self.calls: list[dict] = []
        self.error: Exception | None = None

    def create_session(self, user_id, workflow_id, state_variables=None):  # type: ignore[no-untyped-def]
        self.calls.append({"user_id": user_id, "workflow_id": workflow_id, "state_variables": state_variables})
        if self.error is not None:
            raise self.error
        return ChatSession(id="cksess_123", client_secret="ek_secret", expires_at=1_900_000_000, user=user_id)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        OPENAI_API_KEY="sk-test",
        OPENAI_ROUTER_AGENT_ID="wf_router",
        CHATKIT_DOMAIN_KEY=TEST_DOMAIN_KEY,
    )


@pytest.fixture
def provider() -> FakeChatKitProvider:
    return FakeChatKitProvider()


@pytest.fixture
def client(settings: Settings, provider: FakeChatKitProvider):  # type: ignore[no-untyped-def]
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_session_provider] = lambda: provider
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
