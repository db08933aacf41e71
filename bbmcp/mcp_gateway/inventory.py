from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from bbmcp.common.contracts import ToolResponse
from bbmcp.schema_validation.schemas import JsonSchema

if TYPE_CHECKING:
    from bbmcp.mcp_gateway.dispatch import ToolContext

Handler = Callable[["ToolContext", Dict[str, Any]], ToolResponse]


@dataclass
class Scope:
    name: str  # e.g. "model.add_bone"
    description: str
    input_schema: Dict[str, Any]
    handler: Handler
    mutating: bool = False  # guarded by ifRevision
    compiled_schema: JsonSchema = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Compiled once; every call reuses the frozen tree.
        self.compiled_schema = JsonSchema.compile(self.input_schema)


@dataclass
class Tool:
    id: str  # e.g. "model"
    name: str
    summary: str
    scopes: Dict[str, Scope] = field(default_factory=dict)

    def register_scope(self, scope: Scope) -> None:
        self.scopes[scope.name] = scope


class Inventory:
    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register_tool(self, tool: Tool) -> None:
        self._tools[tool.id] = tool

    def clear(self) -> None:
        """Resets the inventory, clearing all registered tools."""
        self._tools.clear()

    def get_tool(self, tool_id: str) -> Optional[Tool]:
        return self._tools.get(tool_id)

    def list_tools(self) -> List[Tool]:
        return list(self._tools.values())

    def get_scope(self, tool_id: str, scope_name: str) -> Optional[Scope]:
        tool = self.get_tool(tool_id)
        if not tool:
            return None
        return tool.scopes.get(scope_name)

    def find_scope(self, scope_name: str) -> Optional[Scope]:
        for tool in self._tools.values():
            if scope_name in tool.scopes:
                return tool.scopes[scope_name]
        return None

    def scope_names(self) -> List[str]:
        return [name for tool in self._tools.values() for name in tool.scopes]


def build_inventory() -> Inventory:
    """Inventory with every bbmcp tool registered."""
    from bbmcp.mcp_gateway.tools import animations, model, project, textures

    inventory = Inventory()
    for module in (project, model, textures, animations):
        module.register(inventory)
    return inventory
