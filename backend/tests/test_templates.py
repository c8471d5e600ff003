"""템플릿 컴포넌트 편집, 구조적 스키마 변경 차단, 버전 이력을 검증합니다."""

import copy

from studio.models.template import TemplateVersion
from studio.services.mutation_service import MutationService
from tests.conftest import QUIZ_FIELDS


def _with_hint():
    fields = copy.deepcopy(QUIZ_FIELDS)
    fields.append({"id": "hint", "type": "text", "label": "Hint"})
    return fields


def _relabelled():
    fields = copy.deepcopy(QUIZ_FIELDS)
    fields[0]["label"] = "Prompt"
    return fields


def test_create_template_records_version_one(client, db, quiz_template):
    assert quiz_template["schema_version"] == 1
    rows = db.query(TemplateVersion).filter(TemplateVersion.template_id == quiz_template["template_id"]).all()
    assert [r.version for r in rows] == [1]
    assert rows[0].component == quiz_template["component"]


def test_structural_schema_edit_is_rejected(client, quiz_template):
    tid = quiz_template["template_id"]
    resp = client.patch(f"/api/templates/{tid}/schema", json={"fields": _with_hint()})
    assert resp.status_code == 409
    body = resp.json()
    assert body["error_code"] == "structural_change_rejected"
    assert "create_template_version" in body["error"]
    assert f"/api/templates/{tid}/versions" in body["error"]

    current = client.get(f"/api/templates/{tid}").json()
    assert len(current["input_schema"]) == 2
    assert current["schema_version"] == 1


def test_retyping_nested_field_is_structural(client, quiz_template):
    fields = copy.deepcopy(QUIZ_FIELDS)
    fields[1]["fields"][1]["type"] = "text"
    resp = client.patch(f"/api/templates/{quiz_template['template_id']}/schema", json={"fields": fields})
    assert resp.status_code == 409


def test_cosmetic_schema_edit_updates_current_snapshot(client, quiz_template):
    tid = quiz_template["template_id"]
    resp = client.patch(f"/api/templates/{tid}/schema", json={"fields": _relabelled()})
    assert resp.status_code == 200
    assert resp.json()["schema_version"] == 1

    snapshot = client.get(f"/api/templates/{tid}/versions/1").json()
    assert snapshot["input_schema"][0]["label"] == "Prompt"
    assert snapshot["is_latest_version"] is True


def test_reordering_fields_is_not_structural(client, quiz_template):
    tid = quiz_template["template_id"]
    resp = client.patch(f"/api/templates/{tid}/schema", json={"fields": list(reversed(QUIZ_FIELDS))})
    assert resp.status_code == 200


def test_create_version_bumps_schema_version(client, quiz_template):
    tid = quiz_template["template_id"]
    resp = client.post(f"/api/templates/{tid}/versions", json={"input_schema": _with_hint()})
    assert resp.status_code == 200, resp.text
    assert resp.json()["schema_version"] == 2

    listing = client.get(f"/api/templates/{tid}/versions").json()
    assert listing["current_version"] == 2
    assert [v["version"] for v in listing["versions"]] == [2, 1]

    v1 = client.get(f"/api/templates/{tid}/versions/1").json()
    assert len(v1["input_schema"]) == 2
    assert v1["is_latest_version"] is False
    assert v1["latest_version"] == 2

    v2 = client.get(f"/api/templates/{tid}/versions/2").json()
    assert [f["id"] for f in v2["input_schema"]] == ["question", "choices", "hint"]
    # 컴포넌트를 보내지 않으면 이전 값이 새 버전으로 이어진다.
    assert v2["component"] == quiz_template["component"]


def test_create_version_rejects_cosmetic_change(client, quiz_template):
    tid = quiz_template["template_id"]
    resp = client.post(f"/api/templates/{tid}/versions", json={"input_schema": _relabelled()})
    assert resp.status_code == 422
    assert resp.json()["error_code"] == "validation_error"
    assert client.get(f"/api/templates/{tid}").json()["schema_version"] == 1


def test_create_version_requires_fresh_read(client, quiz_template):
    tid = quiz_template["template_id"]
    client.patch(f"/api/templates/{tid}/schema", json={"fields": _relabelled()})
    stale = client.post(f"/api/templates/{tid}/versions", json={"input_schema": _with_hint()})
    assert stale.status_code == 409
    assert stale.json()["error_code"] == "stale_context"

    client.get(f"/api/templates/{tid}/content")
    resp = client.post(f"/api/templates/{tid}/versions", json={"input_schema": _with_hint()})
    assert resp.status_code == 200


def test_missing_version_is_404(client, quiz_template):
    assert client.get(f"/api/templates/{quiz_template['template_id']}/versions/9").status_code == 404


def test_patch_component(client, quiz_template):
    tid = quiz_template["template_id"]
    resp = client.post(
        f"/api/templates/{tid}/patch",
        json={"operations": [{"search": "<h2>", "replace": "<h1>"}, {"search": "</h2>", "replace": "</h1>"}]},
    )
    assert resp.status_code == 200
    assert resp.json()["operations_applied"] == 2
    component = client.get(f"/api/templates/{tid}").json()["component"]
    assert "<h1>{{ data.question }}</h1>" in component
    # 비구조적 변경은 현재 버전 스냅샷에도 반영된다.
    assert client.get(f"/api/templates/{tid}/versions/1").json()["component"] == component


def test_patch_without_component_is_validation_error(client):
    tid = client.post("/api/templates", json={"name": "Empty"}).json()["template_id"]
    resp = client.post(
        f"/api/templates/{tid}/patch",
        json={"operations": [{"search": "a", "replace": "b"}]},
    )
    assert resp.status_code == 422
    assert resp.json()["error_code"] == "validation_error"


def test_replace_with_structural_fields_is_rejected(client, quiz_template):
    tid = quiz_template["template_id"]
    resp = client.put(
        f"/api/templates/{tid}/content",
        json={"component": "<div/>", "input_schema": _with_hint()},
    )
    assert resp.status_code == 409
    assert resp.json()["error_code"] == "structural_change_rejected"
    assert client.get(f"/api/templates/{tid}").json()["component"] == quiz_template["component"]


def test_replace_with_dependencies(client, quiz_template):
    tid = quiz_template["template_id"]
    resp = client.put(
        f"/api/templates/{tid}/content",
        json={
            "component": "<div>new</div>",
            "dependencies": [{"name": "chart", "url": "https://cdn.example.com/chart.js", "global": "Chart"}],
        },
    )
    assert resp.status_code == 200
    template = client.get(f"/api/templates/{tid}").json()
    assert template["dependencies"][0]["global"] == "Chart"


def test_list_templates_by_kind(client, quiz_template):
    client.post("/api/templates", json={"name": "Shell", "kind": "interface"})
    names = [t["name"] for t in client.get("/api/templates", params={"kind": "interface"}).json()]
    assert names == ["Shell"]


def test_delete_template_in_use_is_conflict(client, section, quiz_template):
    client.post(
        f"/api/sections/{section.section_id}/activities",
        json={"template_id": quiz_template["template_id"], "name": "Quiz 1"},
    )
    assert client.delete(f"/api/templates/{quiz_template['template_id']}").status_code == 409


def test_replace_template_with_non_string_content_is_validation_error(db, quiz_template):
    result = MutationService(db).replace("template", quiz_template["template_id"], {"component": "<div/>"})
    assert result.success is False
    assert result.error_code == "validation_error"
