"""Editor port: the host application collaborator the tools drive.

Every call returns None on success or a ToolError when the host refuses.
Tools call the editor first and only mirror the change into the shadow
session when the editor accepted it.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Set, Tuple

from bbmcp.common.contracts import ToolError

logger = logging.getLogger(__name__)


class EditorPort(Protocol):
    def add_bone(self, payload: Dict[str, Any]) -> Optional[ToolError]: ...

    def update_bone(self, name: str, payload: Dict[str, Any]) -> Optional[ToolError]: ...

    def delete_bone(self, name: str) -> Optional[ToolError]: ...

    def add_cube(self, payload: Dict[str, Any]) -> Optional[ToolError]: ...

    def update_cube(self, name: str, payload: Dict[str, Any]) -> Optional[ToolError]: ...

    def delete_cube(self, name: str) -> Optional[ToolError]: ...

    def add_texture(self, payload: Dict[str, Any]) -> Optional[ToolError]: ...

    def update_texture(self, name: str, payload: Dict[str, Any]) -> Optional[ToolError]: ...

    def delete_texture(self, name: str) -> Optional[ToolError]: ...

    def add_animation(self, payload: Dict[str, Any]) -> Optional[ToolError]: ...

    def update_animation(self, name: str, payload: Dict[str, Any]) -> Optional[ToolError]: ...

    def delete_animation(self, name: str) -> Optional[ToolError]: ...

    def set_keyframes(self, clip: str, payload: Dict[str, Any]) -> Optional[ToolError]: ...

    def set_trigger_keyframes(self, clip: str, payload: Dict[str, Any]) -> Optional[ToolError]: ...


class InMemoryEditor:
    """
    Headless editor used by the standalone gateway and by tests.

    Records every accepted call as (operation, args). `fail_on` makes the
    named operation return an editor_error instead.
    """

    def __init__(self, fail_on: Optional[Set[str]] = None):
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.fail_on: Set[str] = set(fail_on or ())

    def _record(self, operation: str, *args: Any) -> Optional[ToolError]:
        if operation in self.fail_on:
            logger.warning(f"Editor refused {operation}")
            return ToolError(
                code="editor_error",
                message=f"Editor rejected {operation}.",
                details={"operation": operation},
            )
        self.calls.append((operation, args))
        return None

    def operations(self) -> List[str]:
        return [operation for operation, _ in self.calls]

    def add_bone(self, payload):
        return self._record("add_bone", payload)

    def update_bone(self, name, payload):
        return self._record("update_bone", name, payload)

    def delete_bone(self, name):
        return self._record("delete_bone", name)

    def add_cube(self, payload):
        return self._record("add_cube", payload)

    def update_cube(self, name, payload):
        return self._record("update_cube", name, payload)

    def delete_cube(self, name):
        return self._record("delete_cube", name)

    def add_texture(self, payload):
        return self._record("add_texture", payload)

    def update_texture(self, name, payload):
        return self._record("update_texture", name, payload)

    def delete_texture(self, name):
        return self._record("delete_texture", name)

    def add_animation(self, payload):
        return self._record("add_animation", payload)

    def update_animation(self, name, payload):
        return self._record("update_animation", name, payload)

    def delete_animation(self, name):
        return self._record("delete_animation", name)

    def set_keyframes(self, clip, payload):
        return self._record("set_keyframes", clip, payload)

    def set_trigger_keyframes(self, clip, payload):
        return self._record("set_trigger_keyframes", clip, payload)
