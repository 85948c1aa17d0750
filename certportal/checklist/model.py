"""Checklist state model: completion flags, selection cursor and derived progress."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from certportal.common.errors import EmptyStep, InvalidCatalog, ItemNotFound, StepNotFound
from certportal.common.io import utcnow_iso
from certportal.common.models import (
    CatalogDefinition,
    ChecklistSnapshot,
    ItemView,
    StepDefinition,
    StepStatus,
    StepView,
)

logger = logging.getLogger(__name__)

ChangeListener = Callable[[dict[str, Any]], None]


def progress_ratio(completed: int, total: int) -> float:
    if total <= 0:
        raise EmptyStep("Cannot compute progress over zero items")
    return completed / total


def status_for(completed: int, total: int) -> StepStatus:
    if completed == 0:
        return StepStatus.NOT_STARTED
    if completed == total:
        return StepStatus.COMPLETE
    return StepStatus.IN_PROGRESS


def validate_catalog(definition: CatalogDefinition) -> None:
    """Raise InvalidCatalog unless step ids and per-step item ids are unique and non-empty."""
    if not definition.steps:
        raise InvalidCatalog("Catalog must contain at least one step", field="steps")
    seen_steps: set[str] = set()
    for idx, step in enumerate(definition.steps):
        if step.id in seen_steps:
            raise InvalidCatalog(f"Duplicate step id: {step.id}", field=f"steps[{idx}].id")
        seen_steps.add(step.id)
        if not step.items:
            raise InvalidCatalog(f"Step {step.id} has no items", field=f"steps[{idx}].items")
        seen_items: set[str] = set()
        for item_idx, item in enumerate(step.items):
            if item.id in seen_items:
                raise InvalidCatalog(
                    f"Duplicate item id in step {step.id}: {item.id}",
                    field=f"steps[{idx}].items[{item_idx}].id",
                )
            seen_items.add(item.id)


def resolve_default_step(definition: CatalogDefinition, selected_step_id: str | None) -> str:
    """Return the initial selection: the designated step, or the first one."""
    if selected_step_id is None:
        return definition.steps[0].id
    if selected_step_id not in {step.id for step in definition.steps}:
        raise InvalidCatalog(f"Default step not in catalog: {selected_step_id}", field="selected_step_id")
    return selected_step_id


class ChecklistModel:
    """Owns a catalog, per-item completion flags and the selected step.

    The catalog definition is immutable. Completion flags and the selection
    cursor are held as two separate pieces of state; every read builds fresh
    frozen views so callers never hold a mutable alias.
    """

    def __init__(
        self,
        definition: CatalogDefinition,
        selected_step_id: str,
        on_change: ChangeListener | None = None,
    ) -> None:
        self._definition = definition
        self._steps: dict[str, StepDefinition] = {step.id: step for step in definition.steps}
        self._completed: dict[str, dict[str, bool]] = {
            step.id: {item.id: False for item in step.items} for step in definition.steps
        }
        self._selected_step_id = selected_step_id
        self._on_change = on_change
        self._lock = threading.RLock()

    @classmethod
    def create(
        cls,
        definition: CatalogDefinition,
        selected_step_id: str | None = None,
        on_change: ChangeListener | None = None,
    ) -> ChecklistModel:
        validate_catalog(definition)
        return cls(definition, resolve_default_step(definition, selected_step_id), on_change=on_change)

    @property
    def definition(self) -> CatalogDefinition:
        return self._definition

    @property
    def step_ids(self) -> tuple[str, ...]:
        return tuple(step.id for step in self._definition.steps)

    @property
    def selected_step_id(self) -> str:
        with self._lock:
            return self._selected_step_id

    def _step(self, step_id: str) -> StepDefinition:
        step = self._steps.get(step_id)
        if step is None:
            logger.warning("Unknown step id requested: %s", step_id)
            raise StepNotFound(step_id)
        return step

    def _notify(self, action: str, step_id: str, item_id: str | None, outcome: str) -> None:
        # Runs outside the lock; the mutation is already committed.
        if self._on_change is None:
            return
        event = {
            "timestamp": utcnow_iso(),
            "component": "checklist",
            "action": action,
            "step_id": step_id,
            "item_id": item_id,
            "outcome": outcome,
        }
        try:
            self._on_change(event)
        except Exception:
            logger.exception("Change listener failed for %s on %s", action, step_id)

    def set_item_completion(self, step_id: str, item_id: str, completed: bool) -> None:
        if not isinstance(completed, bool):
            raise TypeError(f"completed must be a bool, got {type(completed).__name__}")
        with self._lock:
            self._step(step_id)
            flags = self._completed[step_id]
            if item_id not in flags:
                logger.warning("Unknown item id requested: %s/%s", step_id, item_id)
                raise ItemNotFound(step_id, item_id)
            flags[item_id] = completed
            logger.debug("Set %s/%s completed=%s", step_id, item_id, completed)
        self._notify("item_completion", step_id, item_id, "completed" if completed else "pending")

    def select_step(self, step_id: str) -> None:
        with self._lock:
            self._step(step_id)
            self._selected_step_id = step_id
            logger.debug("Selected step %s", step_id)
        self._notify("select_step", step_id, None, "selected")

    def completed_count(self, step_id: str) -> int:
        with self._lock:
            self._step(step_id)
            return sum(1 for done in self._completed[step_id].values() if done)

    def item_count(self, step_id: str) -> int:
        return len(self._step(step_id).items)

    def step_progress(self, step_id: str) -> float:
        with self._lock:
            return progress_ratio(self.completed_count(step_id), self.item_count(step_id))

    def overall_progress(self) -> float:
        with self._lock:
            total = sum(len(flags) for flags in self._completed.values())
            completed = sum(sum(1 for done in flags.values() if done) for flags in self._completed.values())
            return progress_ratio(completed, total)

    def step_status(self, step_id: str) -> StepStatus:
        with self._lock:
            return status_for(self.completed_count(step_id), self.item_count(step_id))

    def _item_views(self, step: StepDefinition) -> tuple[ItemView, ...]:
        flags = self._completed[step.id]
        return tuple(
            ItemView(id=item.id, title=item.title, completed=flags[item.id], critical=item.critical)
            for item in step.items
        )

    def items(self, step_id: str) -> tuple[ItemView, ...]:
        with self._lock:
            return self._item_views(self._step(step_id))

    def items_grouped_by_criticality(self, step_id: str) -> tuple[tuple[ItemView, ...], tuple[ItemView, ...]]:
        """Partition a step's items into (critical, non_critical), keeping catalog order in each."""
        views = self.items(step_id)
        critical = tuple(item for item in views if item.critical)
        non_critical = tuple(item for item in views if not item.critical)
        return critical, non_critical

    def outstanding_critical(self, step_id: str) -> tuple[ItemView, ...]:
        critical, _ = self.items_grouped_by_criticality(step_id)
        return tuple(item for item in critical if not item.completed)

    def is_certification_ready(self) -> bool:
        with self._lock:
            return all(
                self._completed[step.id][item.id]
                for step in self._definition.steps
                for item in step.items
                if item.critical
            )

    def step_view(self, step_id: str) -> StepView:
        with self._lock:
            step = self._step(step_id)
            items = self._item_views(step)
            completed = sum(1 for item in items if item.completed)
            return StepView(
                id=step.id,
                title=step.title,
                description=step.description,
                items=items,
                completed_count=completed,
                total_count=len(items),
                progress=progress_ratio(completed, len(items)),
                status=status_for(completed, len(items)),
            )

    def snapshot(self) -> ChecklistSnapshot:
        with self._lock:
            return ChecklistSnapshot(
                steps=tuple(self.step_view(step.id) for step in self._definition.steps),
                selected_step_id=self._selected_step_id,
                overall_progress=self.overall_progress(),
                certification_ready=self.is_certification_ready(),
            )
