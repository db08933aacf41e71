import pytest
from fastapi import HTTPException

from bbmcp.common.error_envelope import build_error_envelope, error_response


def test_build_error_envelope_shape():
    envelope = build_error_envelope(
        code="invalid_payload",
        message="$.name must be string",
        tool="model.add_bone",
        path="$.name",
        reason="type",
    )
    data = envelope.model_dump()
    assert data["error"]["code"] == "invalid_payload"
    assert data["error"]["http_status"] == 400
    assert data["error"]["path"] == "$.name"
    assert data["error"]["reason"] == "type"
    assert data["error"]["details"] == {}


def test_error_response_raises_http_exception():
    with pytest.raises(HTTPException) as exc:
        error_response(code="not_found", message="missing", status_code=404)
    assert exc.value.status_code == 404
    assert exc.value.detail["error"]["code"] == "not_found"
