"""FastAPI middleware for request ID injection and error handling."""

from collections.abc import Callable
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

import structlog
from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from shared.exceptions import PROBLEM_BASE_URI, ProblemDetailError

logger = structlog.get_logger()

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

PROBLEM_MEDIA_TYPE = "application/problem+json"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Inject a unique request ID into every request and response.

    Header name: X-Request-ID. Default format: UUID v4.
    The ID is bound into structlog contextvars for the request's duration.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Callable[..., Response]]
    ):
        rid = request.headers.get("X-Request-ID", str(uuid4()))
        request_id_var.set(rid)
        structlog.contextvars.bind_contextvars(request_id=rid)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            structlog.contextvars.unbind_contextvars("request_id")


def problem_response(
    request: Request,
    status: int,
    title: str,
    detail: str,
    type_uri: str = "about:blank",
    violations: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Build an RFC 9457 problem document for the current request."""
    body: dict[str, Any] = {
        "type": type_uri,
        "title": title,
        "status": status,
        "detail": detail,
        "instance": str(request.url.path),
    }
    if violations:
        body["violations"] = violations
    return JSONResponse(status_code=status, content=body, media_type=PROBLEM_MEDIA_TYPE)


async def problem_detail_handler(request: Request, exc: ProblemDetailError) -> JSONResponse:
    logger.info("problem_returned", status=exc.status, title=exc.title, path=request.url.path)
    return problem_response(
        request,
        status=exc.status,
        title=exc.title,
        detail=exc.detail,
        type_uri=exc.type_uri,
        violations=exc.violations,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI/Pydantic request-shape errors as a 422 problem with violations.

    Path, query and body locations are kept in the field name
    (e.g. "body.hours", "path.day") so clients can tell them apart.
    """
    violations = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())) or "(root)",
            "message": err.get("msg", "Validation error"),
            "constraint": err.get("type", "validation"),
        }
        for err in exc.errors()
    ]
    return problem_response(
        request,
        status=422,
        title="Validation Error",
        detail=f"Request contains {len(violations)} validation error(s)",
        type_uri=f"{PROBLEM_BASE_URI}/validation-error",
        violations=violations,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return problem_response(
        request,
        status=exc.status_code,
        title=exc.detail if isinstance(exc.detail, str) else "Error",
        detail=detail,
    )
