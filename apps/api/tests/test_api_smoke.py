import importlib.util
import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from apps.api import main
from apps.api.main import app, event_stream
from certportal.common.errors import InvalidCatalog


def _new_session(client: TestClient) -> str:
    resp = client.post("/sessions")
    assert resp.status_code == 200
    return resp.json()["session_id"]


def test_health() -> None:
    client = TestClient(app)
    assert client.get("/health").json() == {"status": "ok"}


def test_api_checklist_flow_smoke() -> None:
    client = TestClient(app)
    session_id = _new_session(client)

    snapshot = client.get(f"/sessions/{session_id}")
    assert snapshot.status_code == 200
    payload = snapshot.json()
    assert payload["selected_step_id"] == "performance"
    assert payload["overall_progress"] == 0.0
    assert len(payload["steps"]) == 5

    for item_id in ("benchmark-testing", "memory-management", "app-launch"):
        resp = client.put(f"/sessions/{session_id}/steps/performance/items/{item_id}", json={"completed": True})
        assert resp.status_code == 200
    step = resp.json()
    assert step["step"]["completed_count"] == 3
    assert step["step"]["status"] == "in_progress"
    assert [item["id"] for item in step["critical"]] == [
        "app-launch",
        "ui-navigation",
        "playback-start",
        "sustained-performance",
    ]
    assert step["critical"][0]["completed"] is True

    selection = client.post(f"/sessions/{session_id}/selection", json={"step_id": "security"})
    assert selection.status_code == 200
    assert selection.json()["selected_step_id"] == "security"

    progress = client.get(f"/sessions/{session_id}/progress").json()
    assert progress["selected_step_id"] == "security"
    assert progress["steps"][0]["percent"] == 43

    report = client.get(f"/sessions/{session_id}/report.md")
    assert report.status_code == 200
    assert "3 of 7 completed" in report.text


def test_api_guidance_lookup() -> None:
    client = TestClient(app)
    session_id = _new_session(client)
    resp = client.get(f"/sessions/{session_id}/steps/network/guidance")
    assert resp.status_code == 200
    body = resp.json()
    assert body["step_id"] == "network"
    assert [resource["type"] for resource in body["resources"]] == ["tool", "doc", "test"]
    assert len(body["actions"]) == 2


def test_api_unknown_ids_return_404() -> None:
    client = TestClient(app)
    session_id = _new_session(client)

    assert client.get("/sessions/ses_missing").status_code == 404
    assert client.put(f"/sessions/{session_id}/steps/nope/items/app-launch", json={"completed": True}).status_code == 404
    assert client.put(f"/sessions/{session_id}/steps/performance/items/nope", json={"completed": True}).status_code == 404
    assert client.get(f"/sessions/{session_id}/steps/nope").status_code == 404
    assert client.get(f"/sessions/{session_id}/steps/nope/guidance").status_code == 404

    bad_select = client.post(f"/sessions/{session_id}/selection", json={"step_id": "nope"})
    assert bad_select.status_code == 404
    assert client.get(f"/sessions/{session_id}").json()["selected_step_id"] == "performance"


def test_api_rejects_non_bool_completion() -> None:
    client = TestClient(app)
    session_id = _new_session(client)
    resp = client.put(f"/sessions/{session_id}/steps/performance/items/app-launch", json={"completed": "maybe"})
    assert resp.status_code == 422


def test_api_delete_session() -> None:
    client = TestClient(app)
    session_id = _new_session(client)
    assert client.delete(f"/sessions/{session_id}").status_code == 200
    assert client.get(f"/sessions/{session_id}").status_code == 404
    assert client.delete(f"/sessions/{session_id}").status_code == 404


def test_event_stream_ends_after_session_is_deleted() -> None:
    session = main.session_store.create()
    session_queue = main.event_bus.subscribe(session.session_id)
    session.model.set_item_completion("security", "hdcp", True)

    stream = event_stream(session.session_id, session_queue, poll_seconds=0.01)
    first = next(stream)
    assert first.startswith("data: ")
    assert json.loads(first[len("data: ") :].strip())["item_id"] == "hdcp"
    assert next(stream) == ": keepalive\n\n"

    main.session_store.delete(session.session_id)
    assert list(stream) == []


def test_startup_aborts_on_unknown_default_step(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CERTPORTAL_DEFAULT_STEP", "not-a-step")
    spec = importlib.util.spec_from_file_location("certportal_api_startup", Path(main.__file__))
    module = importlib.util.module_from_spec(spec)
    with pytest.raises(InvalidCatalog):
        spec.loader.exec_module(module)
