"""Certification portal: checklist state model, guidance lookup and API support."""
