"""Shared pydantic models and enums for the certification portal."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class StepStatus(str, Enum):
    COMPLETE = "complete"
    IN_PROGRESS = "in_progress"
    NOT_STARTED = "not_started"


class ResourceType(str, Enum):
    DOC = "doc"
    TOOL = "tool"
    TEST = "test"


class ItemDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    critical: bool = False


class StepDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    items: tuple[ItemDefinition, ...] = ()


class CatalogDefinition(BaseModel):
    """Static catalog: ordered steps, each with ordered items."""

    model_config = ConfigDict(frozen=True)

    steps: tuple[StepDefinition, ...] = ()


class ItemView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    completed: bool
    critical: bool


class StepView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    items: tuple[ItemView, ...]
    completed_count: int
    total_count: int
    progress: float
    status: StepStatus


class ChecklistSnapshot(BaseModel):
    """Read-only view of a whole checklist handed to the presentation layer."""

    model_config = ConfigDict(frozen=True)

    steps: tuple[StepView, ...]
    selected_step_id: str
    overall_progress: float
    certification_ready: bool


class GroupedItems(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: StepView
    critical: tuple[ItemView, ...]
    non_critical: tuple[ItemView, ...]


class Resource(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    url: str = "#"
    type: ResourceType


class StepGuidance(BaseModel):
    model_config = ConfigDict(frozen=True)

    step_id: str
    resources: tuple[Resource, ...] = ()
    actions: tuple[str, ...] = ()


class SessionSummary(BaseModel):
    session_id: str
    created_at: datetime
    selected_step_id: str
    overall_progress: float


class ItemCompletionRequest(BaseModel):
    completed: bool


class StepSelectRequest(BaseModel):
    step_id: str

