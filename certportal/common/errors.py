"""Error taxonomy for the checklist model and session store."""

from __future__ import annotations


class ChecklistError(Exception):
    """Base error for checklist operations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidCatalog(ChecklistError):
    """Raised when a catalog definition is malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class StepNotFound(ChecklistError, LookupError):
    def __init__(self, step_id: str) -> None:
        super().__init__(f"Step not found: {step_id}")
        self.step_id = step_id


class ItemNotFound(ChecklistError, LookupError):
    def __init__(self, step_id: str, item_id: str) -> None:
        super().__init__(f"Item not found: {step_id}/{item_id}")
        self.step_id = step_id
        self.item_id = item_id


class EmptyStep(ChecklistError):
    """Raised when a progress ratio would divide by zero."""


class SessionNotFound(ChecklistError, LookupError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id
