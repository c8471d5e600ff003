"""에이전트 도구 목록과 실행 경로를 검증합니다. 실패는 항상 200 응답 본문으로 전달됩니다."""

import copy

import pytest

from tests.conftest import QUIZ_FIELDS


@pytest.fixture
def document(client, library):
    return client.post(
        f"/api/libraries/{library.library_id}/documents",
        json={"title": "Guide", "body": "Step one. Step two."},
    ).json()


def _call(client, kind, record_id, tool, arguments=None):
    return client.post(f"/api/agent/{kind}/{record_id}/tools/{tool}", json=arguments or {})


def test_tool_listing_per_kind(client, document, quiz_template):
    resp = client.get(f"/api/agent/document/{document['doc_id']}/tools")
    assert resp.status_code == 200
    body = resp.json()
    assert [t["name"] for t in body["tools"]] == ["get_document", "update_document", "patch_document"]
    assert body["max_steps"] == 10
    patch_spec = body["tools"][2]["input_schema"]
    assert "operations" in patch_spec["properties"]

    names = [t["name"] for t in client.get(f"/api/agent/template/{quiz_template['template_id']}/tools").json()["tools"]]
    assert "create_template_version" in names
    assert "patch_component" in names


def test_unknown_kind_and_tool_are_404(client, document):
    assert client.get("/api/agent/widget/1/tools").status_code == 404
    assert _call(client, "document", document["doc_id"], "delete_everything").status_code == 404


def test_invalid_arguments_are_returned_as_validation_error(client, document):
    resp = _call(client, "document", document["doc_id"], "patch_document", {"operations": []})
    assert resp.status_code == 200
    assert resp.json()["success"] is False
    assert resp.json()["error_code"] == "validation_error"


def test_read_write_loop(client, document):
    did = document["doc_id"]
    read = _call(client, "document", did, "get_document")
    assert read.status_code == 200
    assert read.json()["content"] == "Step one. Step two."

    patched = _call(client, "document", did, "patch_document", {
        "operations": [{"search": "Step two.", "replace": "Step 2."}],
    })
    assert patched.json()["success"] is True

    stale = _call(client, "document", did, "update_document", {"title": "Guide", "content": "rewrite"})
    assert stale.status_code == 200
    assert stale.json()["error_code"] == "stale_context"
    assert "get_document" in stale.json()["error"]

    _call(client, "document", did, "get_document")
    ok = _call(client, "document", did, "update_document", {"title": "Guide", "content": "rewrite"})
    assert ok.json()["success"] is True
    assert client.get(f"/api/documents/{did}").json()["body"] == "rewrite"


def test_structural_change_through_tool_is_rejected(client, quiz_template):
    tid = quiz_template["template_id"]
    fields = copy.deepcopy(QUIZ_FIELDS)
    fields.append({"id": "hint", "type": "text"})
    _call(client, "template", tid, "get_template")
    resp = _call(client, "template", tid, "update_template_schema", {"fields": fields})
    assert resp.status_code == 200
    assert resp.json()["error_code"] == "structural_change_rejected"

    created = _call(client, "template", tid, "create_template_version", {"fields": fields})
    assert created.json()["success"] is True
    assert created.json()["schema_version"] == 2


def test_activity_tools(client, section, quiz_template):
    aid = client.post(
        f"/api/sections/{section.section_id}/activities",
        json={"template_id": quiz_template["template_id"], "name": "Quiz 1"},
    ).json()["activity_id"]

    read = _call(client, "activity", aid, "get_template")
    assert read.json()["current_data"]["question"] == "2 + 2?"
    assert read.json()["upgrade_available"] is False

    resp = _call(client, "activity", aid, "update_activity", {"data": {"question": "5 - 1?"}})
    assert resp.json()["success"] is True
    assert client.get(f"/api/activities/{aid}").json()["data"]["question"] == "5 - 1?"


def test_clearing_history_allows_write_without_read(client, document):
    did = document["doc_id"]
    _call(client, "document", did, "update_document", {"title": "Guide", "content": "one"})
    assert _call(client, "document", did, "update_document", {"title": "Guide", "content": "two"}).json()["success"] is False

    resp = client.delete(f"/api/agent/document/{did}/messages")
    assert resp.status_code == 200
    current = client.get(f"/api/documents/{did}").json()
    assert current["messages"] == []
    assert current["content_modified_at"] is None

    assert _call(client, "document", did, "update_document", {"title": "Guide", "content": "two"}).json()["success"] is True


def test_empty_activity_name_is_returned_as_validation_error(client, section, quiz_template):
    aid = client.post(
        f"/api/sections/{section.section_id}/activities",
        json={"template_id": quiz_template["template_id"], "name": "Quiz 1"},
    ).json()["activity_id"]
    _call(client, "activity", aid, "get_template")

    resp = _call(client, "activity", aid, "update_activity", {"name": ""})
    assert resp.status_code == 200
    assert resp.json()["success"] is False
    assert resp.json()["error_code"] == "validation_error"
    assert client.get(f"/api/activities/{aid}").json()["name"] == "Quiz 1"


def test_update_template_requires_sample_data(client, quiz_template):
    tid = quiz_template["template_id"]
    _call(client, "template", tid, "get_template")

    resp = _call(client, "template", tid, "update_template", {
        "fields": QUIZ_FIELDS,
        "component": "<div>{{ data.question }}</div>",
    })
    assert resp.status_code == 200
    assert resp.json()["error_code"] == "validation_error"

    current = client.get(f"/api/templates/{tid}").json()
    assert current["sample_data"] == quiz_template["sample_data"]
    assert current["component"] == quiz_template["component"]
    assert client.get(f"/api/templates/{tid}/versions/1").json()["sample_data"] == quiz_template["sample_data"]
