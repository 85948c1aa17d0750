"""FastAPI application exposing certification checklist sessions and SSE events."""

from __future__ import annotations

import logging
import queue
from collections.abc import Generator
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, StreamingResponse

from certportal.common.paths import ENV_FILE

load_dotenv(dotenv_path=ENV_FILE)

from certportal.checklist.catalog import REFERENCE_CATALOG, load_catalog_definition
from certportal.checklist.guidance import GuidanceRegistry
from certportal.checklist.model import resolve_default_step, validate_catalog
from certportal.common.errors import ItemNotFound, SessionNotFound, StepNotFound
from certportal.common.models import (
    ChecklistSnapshot,
    GroupedItems,
    ItemCompletionRequest,
    SessionSummary,
    StepGuidance,
    StepSelectRequest,
)
from certportal.common.settings import load_settings
from certportal.common.store import EventBus, Session, SessionStore
from certportal.utils.report import generate_progress_report, render_progress_markdown


settings = load_settings()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

catalog = load_catalog_definition(settings.catalog_path) if settings.catalog_path else REFERENCE_CATALOG
validate_catalog(catalog)
resolve_default_step(catalog, settings.default_step_id)
event_bus = EventBus()
session_store = SessionStore(
    event_bus=event_bus,
    catalog=catalog,
    default_step_id=settings.default_step_id,
    event_log_dir=settings.event_log_dir,
)
guidance = GuidanceRegistry()

app = FastAPI(title="Certification Portal API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _session(session_id: str) -> Session:
    try:
        return session_store.get(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/sessions", response_model=SessionSummary)
def create_session() -> SessionSummary:
    return session_store.create().summary()


@app.get("/sessions/{session_id}", response_model=ChecklistSnapshot)
def get_session(session_id: str) -> ChecklistSnapshot:
    return _session(session_id).model.snapshot()


@app.delete("/sessions/{session_id}")
def delete_session(session_id: str) -> dict[str, str]:
    try:
        session_store.delete(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return {"status": "deleted"}


@app.put("/sessions/{session_id}/steps/{step_id}/items/{item_id}", response_model=GroupedItems)
def set_item_completion(session_id: str, step_id: str, item_id: str, request: ItemCompletionRequest) -> GroupedItems:
    model = _session(session_id).model
    try:
        model.set_item_completion(step_id, item_id, request.completed)
    except (StepNotFound, ItemNotFound) as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return get_step(session_id, step_id)


@app.post("/sessions/{session_id}/selection", response_model=SessionSummary)
def select_step(session_id: str, request: StepSelectRequest) -> SessionSummary:
    session = _session(session_id)
    try:
        session.model.select_step(request.step_id)
    except StepNotFound as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return session.summary()


@app.get("/sessions/{session_id}/steps/{step_id}", response_model=GroupedItems)
def get_step(session_id: str, step_id: str) -> GroupedItems:
    model = _session(session_id).model
    try:
        critical, non_critical = model.items_grouped_by_criticality(step_id)
        step = model.step_view(step_id)
    except StepNotFound as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return GroupedItems(step=step, critical=critical, non_critical=non_critical)


@app.get("/sessions/{session_id}/steps/{step_id}/guidance", response_model=StepGuidance)
def get_step_guidance(session_id: str, step_id: str) -> StepGuidance:
    model = _session(session_id).model
    if step_id not in model.step_ids:
        raise HTTPException(status_code=404, detail=f"Step not found: {step_id}")
    return guidance.lookup(step_id)


@app.get("/sessions/{session_id}/progress")
def get_progress(session_id: str) -> dict[str, Any]:
    return generate_progress_report(_session(session_id).model.snapshot())


@app.get("/sessions/{session_id}/report.md", response_class=PlainTextResponse)
def get_progress_markdown(session_id: str) -> str:
    report = generate_progress_report(_session(session_id).model.snapshot())
    return render_progress_markdown(report)


EVENT_POLL_SECONDS = 25.0


def event_stream(
    session_id: str, session_queue: queue.Queue[str], poll_seconds: float = EVENT_POLL_SECONDS
) -> Generator[str, None, None]:
    """Yield SSE frames until the session is deleted."""
    while True:
        try:
            event = session_queue.get(timeout=poll_seconds)
        except queue.Empty:
            try:
                session_store.get(session_id)
            except SessionNotFound:
                return
            yield ": keepalive\n\n"
            continue
        yield f"data: {event}\n\n"


@app.get("/sessions/{session_id}/events")
def stream_events(session_id: str) -> StreamingResponse:
    _session(session_id)
    session_queue = event_bus.subscribe(session_id)
    return StreamingResponse(event_stream(session_id, session_queue), media_type="text/event-stream")
