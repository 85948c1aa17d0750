"""Shared models, errors, settings and storage helpers."""
