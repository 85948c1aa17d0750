"""Checklist state model, reference catalog and guidance lookup."""

from .catalog import REFERENCE_CATALOG, load_catalog_definition
from .guidance import GuidanceRegistry, STEP_ACTIONABLE_STEPS, STEP_RESOURCES
from .model import ChecklistModel, progress_ratio, resolve_default_step, status_for, validate_catalog

__all__ = [
    "REFERENCE_CATALOG",
    "load_catalog_definition",
    "GuidanceRegistry",
    "STEP_ACTIONABLE_STEPS",
    "STEP_RESOURCES",
    "ChecklistModel",
    "progress_ratio",
    "resolve_default_step",
    "status_for",
    "validate_catalog",
]
