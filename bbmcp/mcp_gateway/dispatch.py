"""Tool dispatch boundary: schema check first, handler second."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from bbmcp.common.contracts import ToolResponse
from bbmcp.config import runtime_config
from bbmcp.mcp_gateway.editor import EditorPort, InMemoryEditor
from bbmcp.mcp_gateway.inventory import Inventory, Scope, build_inventory
from bbmcp.model_validation.schemas import Limits
from bbmcp.schema_validation.engine import validate_schema
from bbmcp.session.mutators import SessionMutators
from bbmcp.session.store import SessionStateStore
from bbmcp.texture_draw.service import PillowTextureDrawer

logger = logging.getLogger(__name__)


@dataclass
class ToolContext:
    """Collaborators shared by every tool handler."""
    store: SessionStateStore = field(default_factory=SessionStateStore)
    editor: EditorPort = field(default_factory=InMemoryEditor)
    drawer: PillowTextureDrawer = field(default_factory=PillowTextureDrawer)
    limits: Limits = field(default_factory=Limits.from_config)
    require_revision: bool = field(default_factory=runtime_config.get_require_revision)
    mutators: SessionMutators = field(init=False)

    def __post_init__(self) -> None:
        self.mutators = SessionMutators(self.store.get_state)


class ToolDispatcher:
    def __init__(self, inventory: Optional[Inventory] = None, context: Optional[ToolContext] = None):
        self.inventory = inventory or build_inventory()
        self.context = context or ToolContext()

    def call(self, scope_name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResponse:
        scope = self.inventory.find_scope(scope_name)
        if scope is None:
            logger.warning(f"Unknown tool: {scope_name}")
            return ToolResponse.failure(
                "not_found",
                f"Unknown tool: {scope_name}.",
                details={"tool": scope_name},
            )
        return self.run(scope, arguments)

    def run(self, scope: Scope, arguments: Optional[Dict[str, Any]] = None) -> ToolResponse:
        payload = {} if arguments is None else arguments
        result = validate_schema(scope.compiled_schema, payload)
        if not result.ok:
            logger.warning(f"Rejected {scope.name}: {result.message}")
            details = {
                "reason": "schema_validation",
                "path": result.path,
                "rule": result.reason,
                "tool": scope.name,
            }
            if result.details:
                details.update({k: v for k, v in result.details.items() if k not in details})
            return ToolResponse.failure(
                "invalid_payload",
                result.message or "Invalid payload.",
                path=result.path,
                reason=result.reason,
                details=details,
            )
        if scope.mutating:
            failure = self._check_revision(payload)
            if failure:
                return failure
        return scope.handler(self.context, payload)

    def _check_revision(self, payload: Dict[str, Any]) -> Optional[ToolResponse]:
        store = self.context.store
        # Without a project the handler reports invalid_state itself.
        if store.ensure_active() is not None:
            return None
        error = store.check_revision(payload.get("ifRevision"), self.context.require_revision)
        return ToolResponse.from_error(error) if error else None
