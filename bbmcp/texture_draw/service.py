"""Pillow-backed texture canvases for the texture.paint tool."""
from __future__ import annotations

import io
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from PIL import Image, ImageColor, ImageDraw
from pydantic import ValidationError

from bbmcp.config import runtime_config
from bbmcp.texture_draw.models import (
    TEXTURE_OP_ADAPTER,
    DrawLineOp,
    DrawRectOp,
    FillRectOp,
    SetPixelOp,
    TextureOp,
)

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]


class TextureDrawError(ValueError):
    """Raised for unknown canvases, malformed ops and op-count overruns."""


def parse_color(color: str) -> RGBA:
    rgba = ImageColor.getrgb(color)
    if len(rgba) == 3:
        return rgba + (255,)
    return rgba


def _line_width(value: Optional[int]) -> int:
    return value if value and value > 0 else 1


class PillowTextureDrawer:
    """Keeps one RGBA canvas per texture name."""

    def __init__(self, max_ops: Optional[int] = None):
        self.max_ops = max_ops or runtime_config.get_max_texture_ops()
        self._canvases: Dict[str, Image.Image] = {}

    def has_canvas(self, name: str) -> bool:
        return name in self._canvases

    def ensure_canvas(self, name: str, width: int, height: int, background: Optional[str] = None) -> Image.Image:
        """Return the canvas for `name`, creating or resizing it as needed."""
        if width <= 0 or height <= 0:
            raise TextureDrawError(f"Texture '{name}' needs a positive size, got {width}x{height}")
        fill = parse_color(background) if background else (0, 0, 0, 0)
        canvas = self._canvases.get(name)
        if canvas is None:
            canvas = Image.new("RGBA", (width, height), fill)
        elif canvas.size != (width, height):
            resized = Image.new("RGBA", (width, height), fill)
            resized.paste(canvas, (0, 0))
            canvas = resized
        self._canvases[name] = canvas
        return canvas

    def rename(self, old_name: str, new_name: str) -> None:
        if old_name in self._canvases:
            self._canvases[new_name] = self._canvases.pop(old_name)

    def clear(self) -> None:
        self._canvases.clear()

    def drop(self, name: str) -> None:
        self._canvases.pop(name, None)

    def checkpoint(self, name: str) -> Optional[Image.Image]:
        """Copy of the current canvas, or None when there is none yet."""
        canvas = self._canvases.get(name)
        return canvas.copy() if canvas is not None else None

    def restore(self, name: str, saved: Optional[Image.Image]) -> None:
        """Put back a checkpoint; a None checkpoint removes the canvas."""
        if saved is None:
            self.drop(name)
        else:
            self._canvases[name] = saved

    def apply_ops(self, name: str, ops: Iterable[Union[TextureOp, Dict[str, Any]]]) -> int:
        canvas = self._canvases.get(name)
        if canvas is None:
            raise TextureDrawError(f"No canvas for texture '{name}'")
        ops = list(ops)
        if len(ops) > self.max_ops:
            raise TextureDrawError(f"Too many texture ops ({len(ops)}); max is {self.max_ops}")

        parsed: List[TextureOp] = []
        for index, op in enumerate(ops):
            try:
                parsed.append(op if not isinstance(op, dict) else TEXTURE_OP_ADAPTER.validate_python(op))
            except ValidationError as exc:
                raise TextureDrawError(f"ops[{index}] is not a valid texture op: {exc.errors()[0]['msg']}") from exc

        draw = ImageDraw.Draw(canvas)
        for op in parsed:
            handler = getattr(self, f"_draw_{op.op}")
            handler(draw, op)
        logger.debug(f"Applied {len(parsed)} op(s) to texture '{name}'")
        return len(parsed)

    def _draw_set_pixel(self, draw: ImageDraw.ImageDraw, op: SetPixelOp) -> None:
        draw.point((op.x, op.y), fill=parse_color(op.color))

    def _draw_fill_rect(self, draw: ImageDraw.ImageDraw, op: FillRectOp) -> None:
        box = (op.x, op.y, op.x + op.width - 1, op.y + op.height - 1)
        draw.rectangle(box, fill=parse_color(op.color))

    def _draw_draw_rect(self, draw: ImageDraw.ImageDraw, op: DrawRectOp) -> None:
        box = (op.x, op.y, op.x + op.width - 1, op.y + op.height - 1)
        draw.rectangle(box, outline=parse_color(op.color), width=_line_width(op.line_width))

    def _draw_draw_line(self, draw: ImageDraw.ImageDraw, op: DrawLineOp) -> None:
        draw.line(
            [(op.x1, op.y1), (op.x2, op.y2)],
            fill=parse_color(op.color),
            width=_line_width(op.line_width),
        )

    def get_pixel(self, name: str, x: int, y: int) -> RGBA:
        return self._canvases[name].getpixel((x, y))

    def export_png(self, name: str) -> bytes:
        canvas = self._canvases.get(name)
        if canvas is None:
            raise TextureDrawError(f"No canvas for texture '{name}'")
        buf = io.BytesIO()
        canvas.save(buf, format="PNG")
        return buf.getvalue()
