"""Per-step resources and actionable guidance, looked up by step id.

The checklist model never holds this content. The presentation layer resolves
it through ``GuidanceRegistry`` and renders it verbatim.
"""

from __future__ import annotations

from typing import Any

from certportal.common.models import Resource, StepGuidance

STEP_RESOURCES: dict[str, list[dict[str, Any]]] = {
    "performance": [
        {"title": "Performance Profiling Tools", "url": "#", "type": "tool"},
        {"title": "Valgrind Memory Analysis", "url": "#", "type": "tool"},
        {"title": "Benchmark Testing Guide", "url": "#", "type": "doc"},
        {"title": "Thermal Management Best Practices", "url": "#", "type": "doc"},
    ],
    "ux-ui": [
        {"title": "Netflix UI/UX Guidelines", "url": "#", "type": "doc"},
        {"title": "Accessibility Testing Checklist", "url": "#", "type": "test"},
        {"title": "Brand Guidelines", "url": "#", "type": "doc"},
    ],
    "security": [
        {"title": "Widevine DRM SDK", "url": "#", "type": "tool"},
        {"title": "Security Audit Checklist", "url": "#", "type": "test"},
        {"title": "DRM Integration Guide", "url": "#", "type": "doc"},
    ],
    "technical": [
        {"title": "Codec Validation Tools", "url": "#", "type": "tool"},
        {"title": "HDR Testing Suite", "url": "#", "type": "test"},
        {"title": "Network Optimization Guide", "url": "#", "type": "doc"},
    ],
    "network": [
        {"title": "Network Emulation Tools", "url": "#", "type": "tool"},
        {"title": "Throughput Monitoring Guide", "url": "#", "type": "doc"},
        {"title": "Connection Stability Tests", "url": "#", "type": "test"},
    ],
}

STEP_ACTIONABLE_STEPS: dict[str, list[str]] = {
    "performance": [
        "Use performance profiling tools (e.g., custom scripts, industry-standard benchmarks for embedded Linux) "
        "to measure app launch times, UI frame rates, and CPU/GPU utilization.",
        "Implement efficient memory allocation and garbage collection to prevent slowdowns. "
        "Tools like valgrind (for Linux) can help identify memory leaks.",
        "Ensure your device's cooling system can handle sustained high-performance demands without throttling. "
        "Monitor temperatures during stress tests.",
    ],
    "ux-ui": [
        "Conduct thorough manual testing against Netflix's latest UI guidelines (usually provided in partner "
        "documentation). Pay attention to navigation flows, visual consistency, and responsiveness.",
        "Ensure the app is accessible to users with disabilities (e.g., screen reader compatibility, "
        "proper focus management).",
    ],
    "security": [
        "Utilize Netflix-provided DRM SDKs and validation tools to ensure correct implementation and secure key ladders.",
        "Engage with third-party security firms or internal security teams to conduct penetration testing "
        "and vulnerability assessments.",
        "Implement mechanisms to verify firmware authenticity and prevent unauthorized modifications.",
    ],
    "technical": [
        "Use media analysis tools (e.g., ffmpeg, custom decoders) to verify correct decoding and rendering "
        "of various Netflix content streams.",
        "Test HDR content playback on a calibrated display to ensure accurate color reproduction and dynamic range.",
        "Optimize your Linux network stack for efficient streaming, including TCP/IP tuning and buffer management.",
    ],
    "network": [
        "Use network simulation tools (e.g., netem on Linux) to test performance under various network conditions "
        "(low bandwidth, high latency, packet loss).",
        "Monitor network throughput and buffer levels during streaming to identify bottlenecks.",
    ],
}


class GuidanceRegistry:
    """Step id -> resources and guidance text."""

    def __init__(
        self,
        resources: dict[str, list[dict[str, Any]]] | None = None,
        actions: dict[str, list[str]] | None = None,
    ) -> None:
        self._resources = STEP_RESOURCES if resources is None else resources
        self._actions = STEP_ACTIONABLE_STEPS if actions is None else actions

    def lookup(self, step_id: str) -> StepGuidance:
        # Unknown steps get empty guidance rather than an error.
        return StepGuidance(
            step_id=step_id,
            resources=tuple(Resource.model_validate(entry) for entry in self._resources.get(step_id, [])),
            actions=tuple(self._actions.get(step_id, [])),
        )

    def step_ids(self) -> list[str]:
        return sorted(set(self._resources) | set(self._actions))
