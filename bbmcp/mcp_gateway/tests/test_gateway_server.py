import pytest
from fastapi.testclient import TestClient

from bbmcp.mcp_gateway.dispatch import ToolContext, ToolDispatcher
from bbmcp.mcp_gateway.editor import InMemoryEditor
from bbmcp.mcp_gateway.server import create_app


@pytest.fixture
def editor():
    return InMemoryEditor()


@pytest.fixture
def client(editor):
    app = create_app(ToolDispatcher(context=ToolContext(editor=editor)))
    return TestClient(app)


def _call(client, tool_id, scope_name, arguments=None):
    body = {"tool_id": tool_id, "scope_name": scope_name}
    if arguments is not None:
        body["arguments"] = arguments
    return client.post("/tools/call", json=body)


def test_health_check(client, monkeypatch):
    monkeypatch.setenv("BBMCP_MAX_CUBES", "12")
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "bbmcp_gateway"
    assert data["status"] == "ok"
    assert data["config"]["max_cubes"] == 12


def test_list_tools_publishes_declared_schemas(client):
    response = client.post("/tools/list")
    assert response.status_code == 200
    tools = {tool["id"]: tool for tool in response.json()["tools"]}
    assert set(tools) == {"project", "model", "texture", "animation"}
    scopes = {scope["name"]: scope for scope in tools["model"]["scopes"]}
    schema = scopes["model.add_cube"]["inputSchema"]
    assert schema["required"] == ["name", "from", "to"]
    assert schema["additionalProperties"] is False


def test_call_flow(client, editor):
    assert _call(client, "project", "project.create", {"name": "robot", "format": "geckolib"}).status_code == 200
    response = _call(client, "model", "model.add_bone", {"name": "root"})
    assert response.status_code == 200
    assert response.json() == {"result": {"name": "root", "parent": None}}
    assert editor.operations() == ["add_bone"]


def test_schema_failure_envelope(client):
    _call(client, "project", "project.create", {"name": "robot", "format": "geckolib"})
    response = _call(client, "model", "model.add_bone", {"name": 7})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "invalid_payload"
    assert error["http_status"] == 400
    assert error["tool"] == "model.add_bone"
    assert error["path"] == "$.name"
    assert error["reason"] == "type"
    assert error["details"]["reason"] == "schema_validation"


def test_no_project_is_conflict(client):
    response = _call(client, "model", "model.list_bones")
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "invalid_state"


def test_not_found_mapping(client):
    _call(client, "project", "project.create", {"name": "robot", "format": "geckolib"})
    response = _call(client, "model", "model.delete_bone", {"name": "ghost"})
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


def test_unknown_scope(client):
    response = _call(client, "model", "model.explode", {})
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "not_found"
    assert error["http_status"] == 404
    assert error["tool"] == "model.explode"
    assert error["details"] == {"tool_id": "model"}


def test_scope_must_belong_to_tool(client):
    response = _call(client, "texture", "model.add_bone", {"name": "root"})
    assert response.status_code == 404


def test_editor_error_is_bad_gateway(client, editor):
    _call(client, "project", "project.create", {"name": "robot", "format": "geckolib"})
    editor.fail_on.add("add_bone")
    response = _call(client, "model", "model.add_bone", {"name": "root"})
    assert response.status_code == 502
    assert response.json()["error"]["code"] == "editor_error"


def test_duplicate_name_carries_fix(client):
    _call(client, "project", "project.create", {"name": "robot", "format": "geckolib"})
    _call(client, "model", "model.add_bone", {"name": "root"})
    error = _call(client, "model", "model.add_bone", {"name": "root"}).json()["error"]
    assert error["reason"] == "duplicate_name"
    assert "fix" in error["details"]


def test_malformed_request_body(client):
    response = client.post("/tools/call", json={"tool_id": "model"})
    assert response.status_code == 400
    data = response.json()
    assert data["error"]["code"] == "invalid_payload"
    assert data["error"]["details"]["errors"]


def test_stale_revision_is_conflict(client):
    created = _call(client, "project", "project.create", {"name": "robot", "format": "geckolib"}).json()["result"]
    stale = created["revision"]
    _call(client, "model", "model.add_bone", {"name": "root"})
    response = _call(client, "model", "model.add_bone", {"name": "arm", "ifRevision": stale})
    assert response.status_code == 409
    error = response.json()["error"]
    assert error["details"]["reason"] == "revision_mismatch"
    assert "fix" in error["details"]
