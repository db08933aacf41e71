from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from bbmcp.common.contracts import ToolError
from bbmcp.common.error_envelope import build_error_envelope, error_response
from bbmcp.config import runtime_config
from bbmcp.mcp_gateway.dispatch import ToolDispatcher

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    "invalid_payload": 400,
    "limit_exceeded": 400,
    "not_found": 404,
    "invalid_state": 409,
    "editor_error": 502,
}

# --- Error Handling ---

async def _http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail:
        return JSONResponse(content=detail, status_code=exc.status_code)

    envelope = build_error_envelope(
        code="http.exception",
        message=str(detail) if detail else "HTTP exception",
        status_code=exc.status_code,
    )
    return JSONResponse(content=envelope.model_dump(), status_code=exc.status_code)


async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    envelope = build_error_envelope(
        code="invalid_payload",
        message="Request body validation failed",
        status_code=400,
        details={"errors": [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]} for err in exc.errors()
        ]},
    )
    return JSONResponse(content=envelope.model_dump(), status_code=400)


async def _generic_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    envelope = build_error_envelope(
        code="internal.error",
        message="Internal server error",
        status_code=500,
    )
    return JSONResponse(content=envelope.model_dump(), status_code=500)


def register_error_handlers(target_app: FastAPI) -> None:
    target_app.add_exception_handler(HTTPException, _http_exception_handler)
    target_app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    target_app.add_exception_handler(Exception, _generic_exception_handler)


def tool_error_response(error: ToolError, tool: str) -> JSONResponse:
    status_code = STATUS_BY_CODE.get(error.code, 400)
    envelope = build_error_envelope(
        code=error.code,
        message=error.message,
        status_code=status_code,
        tool=tool,
        path=error.path,
        reason=error.reason,
        details=dict(error.details, fix=error.fix) if error.fix else error.details,
    )
    return JSONResponse(content=envelope.model_dump(mode="json"), status_code=status_code)

# --- Models ---

class ToolCallRequest(BaseModel):
    tool_id: str
    scope_name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)

# --- App Factory ---

def create_app(dispatcher: Optional[ToolDispatcher] = None) -> FastAPI:
    logging.getLogger("bbmcp").setLevel(runtime_config.get_log_level())
    service_name = runtime_config.get_service_name()

    app = FastAPI(title="bbmcp Gateway")
    register_error_handlers(app)
    app.state.dispatcher = dispatcher or ToolDispatcher()

    @app.get("/health")
    async def health_check():
        return {
            "service": service_name,
            "version": "0.1.0",
            "time": time.time(),
            "status": "ok",
            "config": runtime_config.config_snapshot(),
        }

    @app.post("/tools/list")
    async def list_tools():
        inventory = app.state.dispatcher.inventory
        tools = []
        for tool in inventory.list_tools():
            t_data = {
                "id": tool.id,
                "name": tool.name,
                "summary": tool.summary,
                "scopes": []
            }
            for scope in tool.scopes.values():
                t_data["scopes"].append({
                    "name": scope.name,
                    "description": scope.description,
                    "inputSchema": scope.input_schema,
                })
            tools.append(t_data)

        return {"tools": tools}

    @app.post("/tools/call")
    async def call_tool(req: ToolCallRequest):
        dispatcher = app.state.dispatcher
        scope = dispatcher.inventory.get_scope(req.tool_id, req.scope_name)
        if not scope:
            error_response(
                code="not_found",
                message=f"Scope {req.tool_id}.{req.scope_name} not found",
                status_code=404,
                tool=req.scope_name,
                details={"tool_id": req.tool_id},
            )

        response = dispatcher.run(scope, req.arguments)
        if not response.ok:
            return tool_error_response(response.error, scope.name)
        return {"result": response.data}

    return app


app = create_app()
