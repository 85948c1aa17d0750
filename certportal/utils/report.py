"""Progress report generation.

Summarizes a checklist snapshot the way the portal header and step cards
present it:
- overall percent complete
- per-step "N of M completed" with status
- critical requirements still outstanding
"""

from __future__ import annotations

from typing import Any

from certportal.common.models import ChecklistSnapshot, StepStatus

STATUS_LABELS = {
    StepStatus.COMPLETE: "Complete",
    StepStatus.IN_PROGRESS: "In progress",
    StepStatus.NOT_STARTED: "Not started",
}


def percent(ratio: float) -> int:
    """Round a [0, 1] ratio to a whole percent, halves rounding up."""
    return int(ratio * 100 + 0.5)


def generate_progress_report(snapshot: ChecklistSnapshot) -> dict[str, Any]:
    steps: list[dict[str, Any]] = []
    for step in snapshot.steps:
        steps.append(
            {
                "step_id": step.id,
                "title": step.title,
                "completed": step.completed_count,
                "total": step.total_count,
                "percent": percent(step.progress),
                "status": step.status.value,
                "selected": step.id == snapshot.selected_step_id,
                "outstanding_critical": [
                    item.title for item in step.items if item.critical and not item.completed
                ],
            }
        )
    return {
        "overall_percent": percent(snapshot.overall_progress),
        "overall_progress": snapshot.overall_progress,
        "certification_ready": snapshot.certification_ready,
        "selected_step_id": snapshot.selected_step_id,
        "steps": steps,
    }


def render_progress_markdown(report: dict[str, Any]) -> str:
    lines = [
        "# Certification Progress",
        "",
        f"**Overall:** {report['overall_percent']}% Complete",
        f"**Certification ready:** {'yes' if report['certification_ready'] else 'no'}",
        "",
        "| Step | Completed | Percent | Status |",
        "|------|-----------|---------|--------|",
    ]
    for step in report["steps"]:
        marker = " (selected)" if step["selected"] else ""
        label = STATUS_LABELS[StepStatus(step["status"])]
        lines.append(
            f"| {step['title']}{marker} | {step['completed']} of {step['total']} completed "
            f"| {step['percent']}% | {label} |"
        )

    outstanding = [step for step in report["steps"] if step["outstanding_critical"]]
    if outstanding:
        lines.extend(["", "## Outstanding Critical Requirements", ""])
        for step in outstanding:
            lines.append(f"### {step['title']}")
            lines.extend(f"- {title}" for title in step["outstanding_critical"])
            lines.append("")
    return "\n".join(lines).rstrip() + "\n"
