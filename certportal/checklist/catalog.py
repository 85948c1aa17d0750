"""Reference certification catalog and JSON catalog loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from certportal.common.errors import InvalidCatalog
from certportal.common.io import read_json
from certportal.common.models import CatalogDefinition


REFERENCE_STEPS: list[dict[str, Any]] = [
    {
        "id": "performance",
        "title": "Performance & Responsiveness",
        "description": "Ensure fast app launch, smooth navigation, and sustained performance",
        "items": [
            {"id": "app-launch", "title": "Fast App Launch (< 3 seconds)", "critical": True},
            {"id": "ui-navigation", "title": "Snappy UI Navigation", "critical": True},
            {"id": "playback-start", "title": "Quick Playback Start", "critical": True},
            {"id": "sustained-performance", "title": "Sustained Performance (4K HDR)", "critical": True},
            {"id": "benchmark-testing", "title": "Benchmark Testing Complete", "critical": False},
            {"id": "memory-management", "title": "Memory Management Optimized", "critical": False},
            {"id": "thermal-testing", "title": "Thermal Management Tested", "critical": False},
        ],
    },
    {
        "id": "ux-ui",
        "title": "User Experience & UI Compliance",
        "description": "Adhere to Netflix UI/UX guidelines for consistent brand experience",
        "items": [
            {"id": "netflix-button", "title": "Netflix Button Integration", "critical": True},
            {"id": "app-discoverability", "title": "App Discoverability", "critical": True},
            {"id": "branding-accuracy", "title": "Branding Accuracy", "critical": True},
            {"id": "ui-ux-review", "title": "UI/UX Manual Testing", "critical": False},
            {"id": "accessibility-testing", "title": "Accessibility Testing", "critical": False},
        ],
    },
    {
        "id": "security",
        "title": "Security & Content Protection (DRM)",
        "description": "Implement robust security measures for content protection",
        "items": [
            {"id": "widevine-drm", "title": "Widevine L1 DRM Implementation", "critical": True},
            {"id": "hdcp", "title": "HDCP 2.2 Implementation", "critical": True},
            {"id": "secure-boot", "title": "Secure Boot & TEE", "critical": True},
            {"id": "drm-integration", "title": "DRM Integration Kits", "critical": False},
            {"id": "security-audits", "title": "Security Audits", "critical": False},
            {"id": "firmware-integrity", "title": "Firmware Integrity Checks", "critical": False},
        ],
    },
    {
        "id": "technical",
        "title": "Technical Specifications",
        "description": "Support necessary codecs and formats for optimal streaming",
        "items": [
            {"id": "video-codecs", "title": "H.264/H.265 Codec Support", "critical": True},
            {"id": "audio-codecs", "title": "Dolby Audio Support", "critical": True},
            {"id": "hdr-support", "title": "HDR Standards Support", "critical": True},
            {"id": "codec-testing", "title": "Codec Testing Complete", "critical": False},
            {"id": "hdr-validation", "title": "HDR Validation", "critical": False},
            {"id": "network-optimization", "title": "Network Stack Optimization", "critical": False},
        ],
    },
    {
        "id": "network",
        "title": "Network Connectivity & Stability",
        "description": "Ensure robust and stable internet connection handling",
        "items": [
            {"id": "wifi-ethernet", "title": "Wi-Fi/Ethernet Performance", "critical": True},
            {"id": "adaptive-streaming", "title": "Adaptive Bitrate Streaming", "critical": True},
            {"id": "network-emulation", "title": "Network Emulation Testing", "critical": False},
            {"id": "throughput-monitoring", "title": "Throughput Monitoring", "critical": False},
        ],
    },
]

REFERENCE_CATALOG = CatalogDefinition.model_validate({"steps": REFERENCE_STEPS})


def load_catalog_definition(path: Path) -> CatalogDefinition:
    """Load a catalog from a JSON file shaped like ``{"steps": [...]}``.

    A bare list of steps is accepted as well. Uniqueness rules are checked
    later by ``ChecklistModel.create``.
    """
    try:
        payload = read_json(path)
    except FileNotFoundError as exc:
        raise InvalidCatalog(f"Catalog file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidCatalog(f"Catalog file is not valid JSON: {path}") from exc
    if isinstance(payload, list):
        payload = {"steps": payload}
    if not isinstance(payload, dict):
        raise InvalidCatalog("Catalog payload must be an object or a list of steps")
    try:
        return CatalogDefinition.model_validate(payload)
    except ValidationError as exc:
        raise InvalidCatalog(f"Catalog file has an invalid shape: {exc.error_count()} error(s)") from exc
