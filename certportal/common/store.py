"""In-memory session store and per-session event streams."""

from __future__ import annotations

import json
import logging
import queue
import threading
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from certportal.checklist.catalog import REFERENCE_CATALOG
from certportal.checklist.model import ChangeListener, ChecklistModel
from certportal.common.errors import SessionNotFound
from certportal.common.io import append_jsonl
from certportal.common.models import CatalogDefinition, SessionSummary

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


EVENT_QUEUE_SIZE = 256


@dataclass
class EventBus:
    """In-memory per-session event queues used by SSE endpoint.

    Only sessions with a subscriber get a queue. Each queue is bounded and
    drops its oldest event when full.
    """

    queues: dict[str, queue.Queue[str]]

    def __init__(self, maxsize: int = EVENT_QUEUE_SIZE) -> None:
        self.queues = {}
        self.maxsize = maxsize
        self._lock = threading.Lock()

    def publish(self, session_id: str, event: dict[str, Any]) -> None:
        with self._lock:
            session_queue = self.queues.get(session_id)
        if session_queue is None:
            return
        message = json.dumps(event, default=str)
        while True:
            try:
                session_queue.put_nowait(message)
                return
            except queue.Full:
                try:
                    session_queue.get_nowait()
                except queue.Empty:
                    pass

    def subscribe(self, session_id: str) -> queue.Queue[str]:
        with self._lock:
            if session_id not in self.queues:
                self.queues[session_id] = queue.Queue(maxsize=self.maxsize)
            return self.queues[session_id]

    def drop(self, session_id: str) -> None:
        with self._lock:
            self.queues.pop(session_id, None)


@dataclass
class Session:
    session_id: str
    model: ChecklistModel
    created_at: datetime = field(default_factory=_now)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            created_at=self.created_at,
            selected_step_id=self.model.selected_step_id,
            overall_progress=self.model.overall_progress(),
        )


class SessionStore:
    """One checklist model per session; nothing outlives the process."""

    def __init__(
        self,
        event_bus: EventBus | None = None,
        catalog: CatalogDefinition | None = None,
        default_step_id: str | None = None,
        event_log_dir: Path | None = None,
    ) -> None:
        self.event_bus = event_bus or EventBus()
        self.catalog = catalog or REFERENCE_CATALOG
        self.default_step_id = default_step_id
        self.event_log_dir = event_log_dir
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def log_path(self, session_id: str) -> Path | None:
        if self.event_log_dir is None:
            return None
        return self.event_log_dir / f"{session_id}.jsonl"

    def _listener(self, session_id: str) -> ChangeListener:
        log_path = self.log_path(session_id)

        def on_change(event: dict[str, Any]) -> None:
            payload = {"session_id": session_id, **event}
            if log_path is not None:
                try:
                    append_jsonl(log_path, payload)
                except OSError:
                    logger.exception("Could not append activity log %s", log_path)
            self.event_bus.publish(session_id, payload)

        return on_change

    def create(self, catalog: CatalogDefinition | None = None) -> Session:
        session_id = new_id("ses")
        model = ChecklistModel.create(
            catalog or self.catalog,
            selected_step_id=self.default_step_id,
            on_change=self._listener(session_id),
        )
        session = Session(session_id=session_id, model=model)
        with self._lock:
            self._sessions[session_id] = session
        logger.info("Created session %s with %d steps", session_id, len(model.step_ids))
        return session

    def get(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def delete(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFound(session_id)
        self.event_bus.drop(session_id)
        logger.info("Deleted session %s", session_id)

    def list_ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)
