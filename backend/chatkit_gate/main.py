from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from chatkit_gate.api.routes_chatkit import router as chatkit_router
from chatkit_gate.core.config import get_settings
from chatkit_gate.core.errors import ChatKitGateError


logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
)

app = FastAPI(title="ChatKit Gate API", version="0.1.0")


@app.exception_handler(ChatKitGateError)
async def _gate_error_handler(_: Request, exc: ChatKitGateError) -> JSONResponse:
    # Ответ содержит только публичное сообщение; причина остаётся в логах.
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


app.include_router(chatkit_router, prefix="/api")
