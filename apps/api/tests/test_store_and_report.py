import json
from pathlib import Path

import pytest

from certportal.common.errors import SessionNotFound
from certportal.common.io import read_jsonl
from certportal.common.models import CatalogDefinition
from certportal.common.settings import load_settings
from certportal.common.store import EventBus, SessionStore
from certportal.utils.report import generate_progress_report, percent, render_progress_markdown


def test_sessions_are_independent() -> None:
    store = SessionStore()
    first = store.create()
    second = store.create()
    assert first.session_id != second.session_id
    assert first.session_id.startswith("ses_")

    first.model.set_item_completion("network", "wifi-ethernet", True)
    first.model.select_step("network")
    assert second.model.step_progress("network") == 0.0
    assert second.model.selected_step_id == "performance"
    assert store.get(first.session_id) is first


def test_store_delete_and_missing_session() -> None:
    store = SessionStore()
    session = store.create()
    store.delete(session.session_id)
    assert session.session_id not in store.list_ids()
    with pytest.raises(SessionNotFound):
        store.get(session.session_id)
    with pytest.raises(SessionNotFound):
        store.delete(session.session_id)


def test_store_uses_designated_default_step() -> None:
    store = SessionStore(default_step_id="technical")
    assert store.create().model.selected_step_id == "technical"


def test_mutations_reach_event_bus_and_activity_log(tmp_path: Path) -> None:
    bus = EventBus()
    store = SessionStore(event_bus=bus, event_log_dir=tmp_path)
    session = store.create()
    session_queue = bus.subscribe(session.session_id)
    session.model.set_item_completion("ux-ui", "branding-accuracy", True)
    session.model.select_step("ux-ui")

    published = [json.loads(session_queue.get_nowait()) for _ in range(session_queue.qsize())]
    assert [event["action"] for event in published] == ["item_completion", "select_step"]
    assert all(event["session_id"] == session.session_id for event in published)

    logged = read_jsonl(tmp_path / f"{session.session_id}.jsonl")
    assert [event["item_id"] for event in logged] == ["branding-accuracy", None]


def test_unwritable_activity_log_does_not_fail_the_toggle(tmp_path: Path) -> None:
    not_a_dir = tmp_path / "events"
    not_a_dir.write_text("occupied", encoding="utf-8")
    bus = EventBus()
    store = SessionStore(event_bus=bus, event_log_dir=not_a_dir)
    session = store.create()
    session_queue = bus.subscribe(session.session_id)

    session.model.set_item_completion("performance", "app-launch", True)

    assert session.model.completed_count("performance") == 1
    assert json.loads(session_queue.get_nowait())["item_id"] == "app-launch"


def test_events_are_not_queued_without_a_subscriber() -> None:
    bus = EventBus()
    session = SessionStore(event_bus=bus).create()
    for _ in range(250):
        session.model.set_item_completion("performance", "app-launch", True)
        session.model.set_item_completion("performance", "app-launch", False)
    assert bus.queues == {}


def test_subscriber_queue_is_bounded_and_keeps_newest() -> None:
    bus = EventBus(maxsize=3)
    session_queue = bus.subscribe("ses_bounded")
    for idx in range(10):
        bus.publish("ses_bounded", {"seq": idx})
    assert [json.loads(session_queue.get_nowait())["seq"] for _ in range(session_queue.qsize())] == [7, 8, 9]


def test_delete_drops_the_event_queue() -> None:
    bus = EventBus()
    store = SessionStore(event_bus=bus)
    session = store.create()
    bus.subscribe(session.session_id)
    store.delete(session.session_id)
    assert session.session_id not in bus.queues
    session.model.select_step("network")
    assert session.session_id not in bus.queues


def test_session_summary_reports_progress() -> None:
    session = SessionStore().create()
    session.model.set_item_completion("network", "wifi-ethernet", True)
    summary = session.summary()
    assert summary.selected_step_id == "performance"
    assert summary.overall_progress == pytest.approx(1 / 28)


def test_two_step_progress_report() -> None:
    catalog = CatalogDefinition.model_validate(
        {
            "steps": [
                {"id": "a", "title": "Step A", "items": [{"id": f"a{i}", "title": f"A{i}", "critical": i == 3} for i in range(4)]},
                {"id": "b", "title": "Step B", "items": [{"id": f"b{i}", "title": f"B{i}"} for i in range(6)]},
            ]
        }
    )
    model = SessionStore(catalog=catalog).create().model
    model.set_item_completion("a", "a0", True)
    model.set_item_completion("a", "a1", True)

    report = generate_progress_report(model.snapshot())
    assert report["overall_progress"] == pytest.approx(0.2)
    assert report["overall_percent"] == 20
    assert report["certification_ready"] is False
    step_a, step_b = report["steps"]
    assert (step_a["completed"], step_a["total"], step_a["percent"], step_a["status"]) == (2, 4, 50, "in_progress")
    assert step_a["outstanding_critical"] == ["A3"]
    assert step_a["selected"] is True
    assert step_b["status"] == "not_started"

    markdown = render_progress_markdown(report)
    assert "**Overall:** 20% Complete" in markdown
    assert "| Step A (selected) | 2 of 4 completed | 50% | In progress |" in markdown
    assert "## Outstanding Critical Requirements" in markdown
    assert "- A3" in markdown


def test_percent_rounds_halves_up() -> None:
    assert percent(3 / 7) == 43
    assert percent(0.125) == 13
    assert percent(1.0) == 100


def test_load_settings_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CERTPORTAL_CATALOG", str(tmp_path / "catalog.json"))
    monkeypatch.setenv("CERTPORTAL_DEFAULT_STEP", "security")
    monkeypatch.setenv("CERTPORTAL_EVENT_LOG_DIR", "")
    monkeypatch.setenv("CERTPORTAL_LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.catalog_path == tmp_path / "catalog.json"
    assert settings.default_step_id == "security"
    assert settings.event_log_dir is None
    assert settings.log_level == "DEBUG"
