from __future__ import annotations

import json
import logging
import uuid

from fastapi import APIRouter, Cookie, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from chatkit_gate.core.config import Settings
from chatkit_gate.core.errors import MalformedRequestError, UpstreamFailure
from chatkit_gate.core.security import CHATKIT_AUTH_COOKIE, auth_cookie_kwargs, needs_reissue
from chatkit_gate.models.session import AuthStatusOut, ErrorOut, StartSessionIn, StartSessionOut
from chatkit_gate.services.chatkit.base import ChatSessionProvider

from .deps import get_session_provider, require_domain_key, require_session_config


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chatkit", tags=["chatkit"])


def _reject_constant(name: str) -> object:
    raise ValueError(f"non-standard JSON constant: {name}")


async def _read_start_payload(request: Request) -> StartSessionIn:
    content_type = request.headers.get("content-type") or ""
    if "application/json" not in content_type:
        return StartSessionIn()

    raw = await request.body()
    try:
        data = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as exc:
        logger.warning("Failed parsing /api/chatkit/start payload: %s", exc)
        raise MalformedRequestError("Invalid JSON payload") from exc

    if data is None:
        return StartSessionIn()
    try:
        return StartSessionIn.model_validate(data)
    except ValidationError as exc:
        logger.warning("Rejected /api/chatkit/start payload: %s error(s)", exc.error_count())
        raise MalformedRequestError("Invalid request payload") from exc


def _resolve_user_id(payload: StartSessionIn) -> str:
    if payload.user_id and payload.user_id.strip():
        return payload.user_id
    return str(uuid.uuid4())


@router.post(
    "/start",
    status_code=201,
    response_model=StartSessionOut,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
async def start_session(
    request: Request,
    settings: Settings = Depends(require_session_config),
    provider: ChatSessionProvider = Depends(get_session_provider),
    auth_token: str | None = Cookie(default=None, alias=CHATKIT_AUTH_COOKIE),
) -> JSONResponse:
    cookie_to_set = needs_reissue(auth_token, settings.chatkit_domain_key or "")
    payload = await _read_start_payload(request)
    user_id = _resolve_user_id(payload)

    try:
        session = await run_in_threadpool(
            provider.create_session,
            user_id,
            settings.chatkit_workflow_id or "",
            payload.state_variables,
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unable to create ChatKit session")
        raise UpstreamFailure() from exc

    logger.info("ChatKit session created: session_id=%s user_id=%s", session.id, session.user)
    out = StartSessionOut(
        client_secret=session.client_secret,
        expires_at=session.expires_at,
        session_id=session.id,
        user_id=session.user,
    )
    response = JSONResponse(out.model_dump(by_alias=True), status_code=201)
    if cookie_to_set is not None:
        logger.info("Issued new ChatKit auth cookie, expires_at=%s", cookie_to_set.expires_at)
        response.set_cookie(**auth_cookie_kwargs(cookie_to_set))
    return response


@router.get("/auth", response_model=AuthStatusOut, responses={500: {"model": ErrorOut}})
def prime_auth_cookie(
    domain_key: str = Depends(require_domain_key),
    auth_token: str | None = Cookie(default=None, alias=CHATKIT_AUTH_COOKIE),
) -> JSONResponse:
    cookie_to_set = needs_reissue(auth_token, domain_key)
    response = JSONResponse(AuthStatusOut(ok=True, reissued=cookie_to_set is not None).model_dump())
    if cookie_to_set is not None:
        response.set_cookie(**auth_cookie_kwargs(cookie_to_set))
    return response
