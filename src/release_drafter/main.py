"""FastAPI webhook receiver for the release drafter.

This module is the HTTP surface that GitHub delivers webhooks to:
- POST /webhook - Receive a GitHub event and route it by X-GitHub-Event
- GET /health - Health check for load balancers and monitoring

Routing:
- "create"  -> ReleaseDrafter (tags only; branches are skipped)
- "issues"  -> IssueResponder ("opened" only)
- anything else (including "ping") is acknowledged and ignored

Signature verification and delivery retries are handled in front of
this service, not here.

To run locally:
    uvicorn release_drafter.main:app --reload --port 8000
"""

from __future__ import annotations

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from release_drafter import __version__
from release_drafter.config import load_settings
from release_drafter.drafter import ReleaseDrafter
from release_drafter.errors import MalformedEventError, PlatformError
from release_drafter.logging_config import get_logger, setup_logging
from release_drafter.platform.github import GitHubClient
from release_drafter.responder import IssueResponder
from release_drafter.schemas import IssueEvent

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Application Lifespan (startup/shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the drafter and responder once at startup.

    Both are stateless between deliveries, so one instance serves all
    requests.
    """
    setup_logging()
    settings = load_settings()
    platform = GitHubClient(
        token=settings.github_token,
        base_url=settings.api_base_url,
        timeout=settings.timeout,
    )
    app.state.drafter = ReleaseDrafter(platform, settings=settings)
    app.state.responder = IssueResponder(platform, settings=settings)
    logger.info("app_started", api_base_url=settings.api_base_url)
    yield


# ---------------------------------------------------------------------------
# FastAPI App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Release Drafter",
    description="Publishes a release note for every new tag",
    version=__version__,
    lifespan=lifespan,
)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        start = time.time()
        response = await call_next(request)
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            github_event=request.headers.get("x-github-event"),
            delivery=request.headers.get("x-github-delivery"),
            duration=round(time.time() - start, 3),
        )
        return response


app.add_middleware(LoggingMiddleware)


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


@app.exception_handler(MalformedEventError)
async def malformed_event_handler(request: Request, exc: MalformedEventError) -> JSONResponse:
    """Payloads missing required fields are rejected with 422."""
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.exception_handler(PlatformError)
async def platform_error_handler(request: Request, exc: PlatformError) -> JSONResponse:
    """GitHub failures surface as 502; the drafter has already logged them."""
    return JSONResponse(status_code=502, content=exc.to_dict())


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}


@app.post("/webhook")
async def receive_webhook(request: Request) -> dict[str, Any]:
    """Route one GitHub webhook delivery.

    Returns:
        {"status": "done" | "skipped" | "commented" | "ignored", ...}
    """
    event_name = request.headers.get("x-github-event", "")
    try:
        payload = await request.json()
    except ValueError as e:
        raise MalformedEventError(["<body>"]) from e

    if event_name == "create":
        drafter: ReleaseDrafter = request.app.state.drafter
        outcome = await drafter.handle_payload(payload)
        result: dict[str, Any] = {"status": outcome.state.value, "tag": outcome.event.ref_name}
        if outcome.release is not None:
            result["release"] = outcome.release.model_dump(exclude_none=True)
        return result

    if event_name == "issues":
        responder: IssueResponder = request.app.state.responder
        commented = await responder.respond(IssueEvent.from_payload(payload))
        return {"status": "commented" if commented else "skipped"}

    return {"status": "ignored", "event": event_name}
