"""FastAPI entrypoint exposing the URI builtins to remote evaluators."""

import logging
from time import monotonic
from typing import Any

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from uri_builtins.config import get_settings
from uri_builtins.registry import BUILTINS, BuiltinError, UnknownBuiltinError, call_builtin

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
app = FastAPI(title=settings.app_name, version=settings.app_version)
started_at_monotonic = monotonic()
request_logger = logging.getLogger("uri_builtins.request")


class BuiltinCall(BaseModel):
    """Request body for a single builtin evaluation."""

    operand: Any


def _rejected_body(request: Request) -> JSONResponse | None:
    limit = settings.max_request_body_bytes
    declared = request.headers.get("content-length")
    if limit <= 0 or declared is None or request.method.upper() != "POST":
        return None
    if not declared.isdigit():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid Content-Length header"},
        )
    if int(declared) > limit:
        return JSONResponse(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            content={"detail": "Request payload too large"},
        )
    return None


@app.middleware("http")
async def builtin_request_middleware(request: Request, call_next: Any) -> Response:
    started = monotonic()
    response = _rejected_body(request)
    if response is None:
        try:
            response = await call_next(request)
        except Exception:
            request_logger.exception(
                "request method=%s path=%s status=500 latency_ms=%s",
                request.method,
                request.url.path,
                int((monotonic() - started) * 1000),
            )
            raise

    request_logger.info(
        "request method=%s path=%s status=%s latency_ms=%s",
        request.method,
        request.url.path,
        response.status_code,
        int((monotonic() - started) * 1000),
    )
    return response


@app.get("/api/v1/builtins", tags=["builtins"])
async def list_builtins() -> dict[str, list[dict[str, str]]]:
    return {
        "builtins": [
            {
                "name": builtin.name,
                "operand_type": builtin.operand_type,
                "result_type": builtin.result_type,
            }
            for builtin in BUILTINS.values()
        ]
    }


@app.post("/api/v1/builtins/{name}", tags=["builtins"], response_model=None)
async def evaluate_builtin(name: str, call: BuiltinCall) -> dict[str, Any] | JSONResponse:
    try:
        result = call_builtin(name, call.operand)
    except UnknownBuiltinError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Builtin not found") from exc
    except BuiltinError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"code": exc.code, "message": exc.message},
        )

    return {"result": result}


@app.get("/api/v1/health", tags=["health"])
async def basic_health() -> dict[str, int | str]:
    return {
        "status": "healthy",
        "version": settings.app_version,
        "uptime_seconds": int(monotonic() - started_at_monotonic),
    }
