from __future__ import annotations

import logging

from fastapi import Depends

from chatkit_gate.core.config import Settings, get_settings
from chatkit_gate.core.errors import ConfigurationError
from chatkit_gate.services.chatkit.base import ChatSessionProvider
from chatkit_gate.services.chatkit.openai_client import OpenAIChatKitService


logger = logging.getLogger(__name__)


def require_session_config(settings: Settings = Depends(get_settings)) -> Settings:
    missing = settings.missing_for_session()
    if missing:
        logger.error("%s is not configured", missing)
        raise ConfigurationError(missing)
    return settings


def require_domain_key(settings: Settings = Depends(get_settings)) -> str:
    if not settings.chatkit_domain_key:
        logger.error("CHATKIT_DOMAIN_KEY is not configured")
        raise ConfigurationError("CHATKIT_DOMAIN_KEY")
    return settings.chatkit_domain_key


def get_session_provider(settings: Settings = Depends(require_session_config)) -> ChatSessionProvider:
    return OpenAIChatKitService(
        api_key=settings.openai_api_key or "",
        base_url=settings.openai_base_url,
        timeout=settings.chatkit_request_timeout_seconds,
    )
