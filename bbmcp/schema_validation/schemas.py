"""Schema Validation Schemas (JSON-Schema subset + results)."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

SchemaType = Literal["object", "array", "string", "number", "boolean", "null"]

ValidationReason = Literal[
    "type",
    "enum",
    "minItems",
    "maxItems",
    "required",
    "additionalProperties",
    "anyOf",
]


class JsonSchema(BaseModel):
    """
    One node of a tool input schema.

    Built once per tool from the declared JSON dict and reused for every call.
    A node without `type` places no type constraint on the value; a node with
    no rule keys at all accepts anything.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    type: Optional[SchemaType] = None
    enum: Optional[List[Any]] = None
    any_of: Optional[List["JsonSchema"]] = Field(default=None, alias="anyOf")
    properties: Optional[Dict[str, "JsonSchema"]] = None
    required: Optional[List[str]] = None
    additional_properties: Optional[bool] = Field(default=None, alias="additionalProperties")
    items: Optional["JsonSchema"] = None
    min_items: Optional[int] = Field(default=None, alias="minItems")
    max_items: Optional[int] = Field(default=None, alias="maxItems")
    description: Optional[str] = None

    @classmethod
    def compile(cls, raw: Mapping[str, Any]) -> "JsonSchema":
        """Build a schema tree from its JSON dict form."""
        return cls.model_validate(dict(raw))

    @property
    def is_array_node(self) -> bool:
        return (
            self.type == "array"
            or self.items is not None
            or self.min_items is not None
            or self.max_items is not None
        )

    @property
    def is_object_node(self) -> bool:
        return self.type == "object" or self.properties is not None or self.required is not None


JsonSchema.model_rebuild()


class ValidationResult(BaseModel):
    """Outcome of validating one value. Failures carry exactly one reason."""
    ok: bool
    message: Optional[str] = None
    path: Optional[str] = None
    reason: Optional[ValidationReason] = None
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failure(
        cls,
        *,
        message: str,
        path: str,
        reason: ValidationReason,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ValidationResult":
        return cls(ok=False, message=message, path=path, reason=reason, details=details)
