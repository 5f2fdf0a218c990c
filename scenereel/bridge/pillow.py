from __future__ import annotations

import asyncio
import io
import logging
from typing import Dict, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont
from pydantic import ValidationError

from ..errors import BridgeLaunchError, CaptureError, ExternalProcessError
from ..types import ElementState, FrameState, SectionKind, StepsKind, TitleKind
from .base import BridgeConfig, RenderBridge

logger = logging.getLogger(__name__)

_FONT_SIZES = {"title": 0.07, "section": 0.055, "body": 0.04, "narration": 0.03}


def _color(css: Dict[str, str], key: str, fallback: str) -> Tuple[int, int, int, int]:
    value = css.get(key, fallback)
    try:
        rgb = ImageColor.getrgb(value)
    except ValueError:
        rgb = ImageColor.getrgb(fallback)
    if len(rgb) == 3:
        return rgb + (255,)
    return rgb


def _load_font(size: int) -> ImageFont.ImageFont:
    try:
        return ImageFont.load_default(size=size)
    except TypeError:  # Pillow < 10.1 has no sized default font
        return ImageFont.load_default()


class PillowBridge(RenderBridge):
    """Rasterizes frame snapshots with Pillow; no browser required.

    Elements are drawn as text blocks centered horizontally at their layout
    anchor, then transformed (scale, rotation, opacity, translation).
    """

    def __init__(self) -> None:
        self._config: Optional[BridgeConfig] = None
        self._fonts: Dict[str, ImageFont.ImageFont] = {}
        self._frames = 0

    @property
    def is_open(self) -> bool:
        return self._config is not None

    async def launch(self, config: BridgeConfig) -> None:
        try:
            self._fonts = {role: _load_font(max(8, int(config.height * frac))) for role, frac in _FONT_SIZES.items()}
        except OSError as exc:
            raise BridgeLaunchError(f"could not load a font for rendering: {exc}") from exc
        self._config = config
        self._frames = 0
        logger.debug("Pillow bridge ready at %dx%d", config.width, config.height)

    async def capture_frame(self, frame_json: str) -> bytes:
        if self._config is None:
            raise ExternalProcessError("capture requested before the bridge was launched")
        try:
            state = FrameState.from_json(frame_json)
        except ValidationError as exc:
            raise CaptureError(self._frames, f"invalid frame state: {exc}") from exc
        png = await asyncio.to_thread(self._draw, state)
        self._frames += 1
        return png

    async def close(self) -> None:
        if self._config is not None:
            logger.debug("Pillow bridge closed after %d frames", self._frames)
        self._config = None
        self._fonts = {}

    def _draw(self, state: FrameState) -> bytes:
        config = self._config
        css = state.theme.css_properties
        canvas = Image.new("RGBA", (config.width, config.height), _color(css, "--reel-bg-primary", "#0f172a"))
        fg = _color(css, "--reel-fg-primary", "#f8fafc")
        accent = _color(css, "--reel-accent", "#3b82f6")

        for element in state.elements:
            if not element.visible or element.opacity <= 0.0:
                continue
            sprite = self._element_sprite(element, accent if isinstance(element.kind, SectionKind) else fg)
            if element.item_transforms:
                # Item alphas are already baked into the sprite.
                element = element.model_copy(update={"opacity": 1.0})
            canvas = _composite(canvas, sprite, element)

        if state.active_narration:
            self._draw_caption(canvas, state.active_narration, _color(css, "--reel-fg-secondary", "#cbd5e1"))

        buf = io.BytesIO()
        canvas.convert("RGB").save(buf, format="PNG")
        return buf.getvalue()

    def _element_sprite(self, element: ElementState, color: Tuple[int, int, int, int]) -> Image.Image:
        if isinstance(element.kind, TitleKind):
            font = self._fonts["title"]
        elif isinstance(element.kind, SectionKind):
            font = self._fonts["section"]
        else:
            font = self._fonts["body"]

        if isinstance(element.kind, StepsKind):
            lines = [f"{i + 1}. {item}" for i, item in enumerate(element.items)]
            alphas = [t.opacity for t in element.item_transforms] or [1.0] * len(lines)
        else:
            lines = [element.content]
            alphas = [1.0]

        probe = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
        boxes = [probe.textbbox((0, 0), line or " ", font=font) for line in lines]
        line_h = max((b[3] - b[1] for b in boxes), default=1) + 8
        width = max((b[2] - b[0] for b in boxes), default=1) + 16
        sprite = Image.new("RGBA", (max(1, width), max(1, line_h * len(lines))), (0, 0, 0, 0))
        draw = ImageDraw.Draw(sprite)
        for i, line in enumerate(lines):
            alpha = int(color[3] * max(0.0, min(1.0, alphas[i] if i < len(alphas) else 1.0)))
            draw.text((8, i * line_h), line, font=font, fill=color[:3] + (alpha,))
        return sprite

    def _draw_caption(self, canvas: Image.Image, text: str, color: Tuple[int, int, int, int]) -> None:
        font = self._fonts["narration"]
        draw = ImageDraw.Draw(canvas)
        box = draw.textbbox((0, 0), text, font=font)
        x = (canvas.width - (box[2] - box[0])) / 2
        y = canvas.height * 0.9 - (box[3] - box[1])
        draw.text((x, y), text, font=font, fill=color)


def _composite(canvas: Image.Image, sprite: Image.Image, element: ElementState) -> Image.Image:
    width, height = canvas.size
    target_w = max(1, int(sprite.width * element.scale))
    target_h = max(1, int(sprite.height * element.scale))
    sp = sprite.resize((target_w, target_h), Image.LANCZOS)
    if abs(element.rotation) > 0.001:
        sp = sp.rotate(element.rotation, expand=True, resample=Image.BICUBIC)
    opacity = max(0.0, min(1.0, element.opacity))
    if opacity < 1.0:
        alpha = sp.getchannel("A")
        alpha = Image.eval(alpha, lambda a: int(a * opacity))
        sp.putalpha(alpha)

    px = int(width / 2 + element.translate_x - sp.width / 2)
    py = int(element.layout_y * height + element.translate_y - sp.height / 2)
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    layer.paste(sp, (px, py), sp)
    return Image.alpha_composite(canvas, layer)
