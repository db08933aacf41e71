"""Texture drawing op models."""
from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"

HexColor = Annotated[str, Field(pattern=HEX_COLOR_PATTERN)]


class SetPixelOp(BaseModel):
    op: Literal["set_pixel"] = "set_pixel"
    x: int
    y: int
    color: HexColor


class FillRectOp(BaseModel):
    op: Literal["fill_rect"] = "fill_rect"
    x: int
    y: int
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    color: HexColor


class DrawRectOp(BaseModel):
    """Rectangle outline; line_width grows inward."""
    model_config = ConfigDict(populate_by_name=True)

    op: Literal["draw_rect"] = "draw_rect"
    x: int
    y: int
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    color: HexColor
    line_width: Optional[int] = Field(default=None, alias="lineWidth")


class DrawLineOp(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    op: Literal["draw_line"] = "draw_line"
    x1: int
    y1: int
    x2: int
    y2: int
    color: HexColor
    line_width: Optional[int] = Field(default=None, alias="lineWidth")


TextureOp = Annotated[
    Union[SetPixelOp, FillRectOp, DrawRectOp, DrawLineOp],
    Field(discriminator="op"),
]

TEXTURE_OP_ADAPTER = TypeAdapter(TextureOp)
