"""
Webhook server for GitHub pull request and push events.

FastAPI application that authenticates deliveries, translates them into
store writes and answers GitHub with a status code it understands:
200 for processed (or ignored) events, 401 for bad signatures, 400 for an
unreadable body and 500 for anything else.

Usage:
    github-memory webhook

    # Or programmatically:
    with open_store(path) as store:
        run(store, webhook_secret=secret, port=3000)
"""

from __future__ import annotations

import json
from typing import Optional

import structlog
import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from github_memory import __version__
from github_memory.errors import Unauthorized
from github_memory.store.base import MemoryStore
from github_memory.webhook.signature import SIGNATURE_HEADER, WebhookGate
from github_memory.webhook.translator import EventTranslator

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["webhooks"])


def get_gate(request: Request) -> WebhookGate:
    return request.app.state.gate


def get_translator(request: Request) -> EventTranslator:
    return request.app.state.translator


@router.get("/health")
async def health() -> dict:
    """Liveness check, no authentication."""
    return {"status": "ok", "message": "GitHub memory webhook server is running"}


@router.post("/webhook")
async def handle_github_webhook(
    request: Request,
    x_hub_signature_256: Optional[str] = Header(None, alias=SIGNATURE_HEADER),
    x_github_event: Optional[str] = Header(None),
    gate: WebhookGate = Depends(get_gate),
    translator: EventTranslator = Depends(get_translator),
):
    """
    Handle a GitHub webhook delivery.

    Args:
        request: FastAPI request
        x_hub_signature_256: GitHub signature header
        x_github_event: GitHub event type header
    """
    # Signature is computed over the raw bytes, before any JSON parsing
    body = await request.body()

    try:
        gate.check(body, x_hub_signature_256)
    except Unauthorized as e:
        logger.warning("Rejected webhook", github_event=x_github_event, reason=str(e))
        raise HTTPException(status_code=401, detail=str(e))

    try:
        payload = json.loads(body)
    except ValueError as e:
        logger.error("Failed to parse webhook payload", error=str(e))
        raise HTTPException(status_code=400, detail="Invalid payload")

    if not isinstance(payload, dict):
        logger.error("Webhook payload is not an object", github_event=x_github_event)
        raise HTTPException(status_code=400, detail="Invalid payload")

    logger.info(
        "Received webhook event",
        github_event=x_github_event,
        delivery=request.headers.get("x-github-delivery"),
    )

    try:
        writes = await run_in_threadpool(translator.handle, x_github_event, payload)
    except Exception:
        logger.exception("Error processing webhook", github_event=x_github_event)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return {
        "message": "Webhook processed successfully",
        "event": x_github_event,
        "writes": writes,
    }


def create_app(store: MemoryStore, webhook_secret: str | None = None) -> FastAPI:
    """Create the webhook application around an already-open store.

    Args:
        store: Store that receives the translated writes
        webhook_secret: Shared secret; None or empty disables signature checks
    """
    app = FastAPI(
        title="GitHub Memory Webhooks",
        description="Indexes GitHub pull request and push events",
        version=__version__,
    )

    app.state.gate = WebhookGate(webhook_secret)
    app.state.translator = EventTranslator(store)

    app.include_router(router)

    if not app.state.gate.enabled:
        logger.warning("Webhook secret not configured, signature verification disabled")

    return app


def run(
    store: MemoryStore,
    webhook_secret: str | None = None,
    host: str = "0.0.0.0",
    port: int = 3000,
    log_level: str = "info",
) -> None:
    """Serve the webhook application until interrupted.

    Args:
        store: Open store to write into
        webhook_secret: Shared secret for X-Hub-Signature-256
        host: Host to bind to
        port: Port to listen on
        log_level: uvicorn log level
    """
    logger.info("Starting webhook server", url=f"http://{host}:{port}/webhook")
    uvicorn.run(
        create_app(store, webhook_secret),
        host=host,
        port=port,
        log_level=log_level,
    )
