"""
RasterSurface - Pillow-backed DrawingSurface

Paints into an RGBA Image. Paths are flattened to polylines by BaseSurface;
fills and strokes are rasterized as L masks, then composited with the current
style (solid color or gradient), shadow first.

Limitations:
- no anti-aliasing on path edges
- text is drawn unrotated at the transformed anchor point
- radial gradients use distance from the inner circle center, normalized
  between r0 and r1 (matches canvas for concentric or offset-inner cases)
"""

import math
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageChops, ImageDraw, ImageFilter, ImageFont

from sceneplay.errors import RenderTargetError
from sceneplay.models.color import Color
from sceneplay.rendering.surface import BaseSurface, Gradient, Point, Style, Subpath, parse_font
from sceneplay.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RENDER)

RGBA = Tuple[int, int, int, int]

# canvas textAlign / textBaseline -> Pillow anchor characters
_H_ANCHOR = {"left": "l", "start": "l", "center": "m", "right": "r", "end": "r"}
_V_ANCHOR = {"top": "a", "hanging": "a", "middle": "m", "alphabetic": "s", "ideographic": "s", "bottom": "d"}


@lru_cache(maxsize=64)
def load_font(family: str, size: float) -> ImageFont.FreeTypeFont:
    """
    Resolve a font family to a Pillow font.

    Tries the family as given, then as "<family>.ttf", then DejaVuSans (ships
    with most Linux distros), then Pillow's built-in scalable default.
    """
    size = max(1, int(round(size)))
    # CSS font lists: "Arial, sans-serif" -> first family
    family = family.split(",")[0].strip().strip("'\"") or "sans-serif"
    candidates = [family, f"{family}.ttf", f"{family.lower()}.ttf", "DejaVuSans.ttf"]
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


class RasterSurface(BaseSurface):
    """
    DrawingSurface rendering to a PIL.Image (RGBA).

    Example:
        surface = RasterSurface(400, 300)
        draw(surface, "circle", {"x": 100, "y": 100, "r": 40, "fill": "#ff0000"})
        surface.get_pixel(100, 100)     # Color(#ff0000)
        surface.write_png("frame.png")
    """

    def __init__(self, width: int = 800, height: int = 600, background: Optional[str] = "#ffffff"):
        super().__init__(width, height)
        self.background = background
        self.image = Image.new("RGBA", (self.width, self.height), self._background_rgba())

    def _background_rgba(self) -> RGBA:
        if not self.background:
            return (0, 0, 0, 0)
        return Color.from_css(self.background).to_rgba()

    # ===== Output =====

    def get_pixel(self, x: int, y: int) -> Color:
        r, g, b, a = self.image.getpixel((int(x), int(y)))
        return Color(r, g, b, a / 255.0)

    def write_png(self, path: Union[str, Path]) -> None:
        self._ensure_open()
        try:
            self.image.save(path)
        except OSError as ex:
            raise RenderTargetError("Failed to write frame image", details={"path": str(path), "error": str(ex)}) from ex

    def close(self) -> None:
        super().close()
        self.image.close()

    # ===== Colors & styles =====

    def _parse(self, value: str) -> Color:
        try:
            return Color.from_css(value)
        except ValueError:
            # canvas ignores unparsable colors; keep the default black
            log.warn("Unparsable color, using black", value=str(value))
            return Color.black()

    def _style_image(self, style: Style, bbox: Tuple[int, int, int, int]) -> Image.Image:
        size = (bbox[2] - bbox[0], bbox[3] - bbox[1])
        if isinstance(style, Gradient):
            return self._gradient_image(style, bbox)
        return Image.new("RGBA", size, self._parse(style).to_rgba())

    def _gradient_lut(self, gradient: Gradient) -> List[RGBA]:
        stops = [(offset, self._parse(color)) for offset, color in gradient.stops]
        if not stops:
            return [(0, 0, 0, 0)] * 256

        lut = []
        for i in range(256):
            t = i / 255.0
            if t <= stops[0][0]:
                color = stops[0][1]
            elif t >= stops[-1][0]:
                color = stops[-1][1]
            else:
                color = stops[-1][1]
                for (o0, c0), (o1, c1) in zip(stops, stops[1:]):
                    if o0 <= t <= o1:
                        color = c0 if o1 == o0 else c0.lerp(c1, (t - o0) / (o1 - o0))
                        break
            lut.append(color.to_rgba())
        return lut

    def _gradient_image(self, gradient: Gradient, bbox: Tuple[int, int, int, int]) -> Image.Image:
        left, top, right, bottom = bbox
        lut = np.array(self._gradient_lut(gradient), dtype=np.uint8)

        # pixel centers, device space
        ys, xs = np.mgrid[top:bottom, left:right].astype(np.float64) + 0.5

        if gradient.kind == "linear":
            x0, y0, x1, y1 = gradient.coords
            (ax, ay), (bx, by) = self.to_device(x0, y0), self.to_device(x1, y1)
            dx, dy = bx - ax, by - ay
            denom = dx * dx + dy * dy
            if denom == 0:
                return Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))
            position = ((xs - ax) * dx + (ys - ay) * dy) / denom
        else:
            x0, y0, r0, x1, y1, r1 = gradient.coords
            ax, ay = self.to_device(x0, y0)
            span = r1 - r0
            if span == 0:
                position = np.ones_like(xs)
            else:
                position = (np.hypot(xs - ax, ys - ay) - r0) / span

        position = np.nan_to_num(position, nan=1.0, posinf=1.0, neginf=0.0)
        index = (np.clip(position, 0.0, 1.0) * 255 + 0.5).astype(np.intp)
        return Image.fromarray(lut[index].astype(np.uint8))

    # ===== Masks =====

    def _new_mask(self) -> Image.Image:
        return Image.new("L", (self.width, self.height), 0)

    def _fill_mask(self, path: List[Subpath]) -> Image.Image:
        mask = self._new_mask()
        draw = ImageDraw.Draw(mask)
        for sub in path:
            if len(sub.points) >= 3:
                draw.polygon(sub.points, fill=255)
        return mask

    def _stroke_mask(self, path: List[Subpath]) -> Image.Image:
        mask = self._new_mask()
        draw = ImageDraw.Draw(mask)
        width = max(1, int(round(self.line_width)))
        joint = "curve" if self.line_join == "round" else None

        for sub in path:
            points = list(sub.points)
            if len(points) < 2:
                continue
            if sub.closed:
                points.append(points[0])

            pieces = _dash(points, self._state.line_dash) if self._state.line_dash else [points]
            for piece in pieces:
                if len(piece) < 2:
                    continue
                if self.line_cap == "square" and not sub.closed:
                    piece = _extend_ends(piece, width / 2.0)
                draw.line(piece, fill=255, width=width, joint=joint)
                if self.line_cap == "round":
                    radius = width / 2.0
                    for cx, cy in (piece[0], piece[-1]):
                        draw.ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=255)
        return mask

    def _text_mask(self, text: str, anchor: Point, stroke: bool) -> Image.Image:
        size, family = parse_font(self.font)
        font = load_font(family, size)
        align = _H_ANCHOR.get(self.text_align, "l") + _V_ANCHOR.get(self.text_baseline, "s")

        mask = self._new_mask()
        ImageDraw.Draw(mask).text(anchor, text, fill=255, font=font, anchor=align)
        if not stroke:
            return mask

        outline = self._new_mask()
        width = max(1, int(round(self.line_width)))
        ImageDraw.Draw(outline).text(anchor, text, fill=255, font=font, anchor=align, stroke_width=width, stroke_fill=255)
        return ImageChops.subtract(outline, mask)

    # ===== Compositing =====

    def _composite(self, mask: Image.Image, style: Style) -> None:
        bbox = mask.getbbox()
        if bbox is None:
            return

        self._composite_shadow(mask)

        paint = self._style_image(style, bbox)
        paint.putalpha(ImageChops.multiply(paint.getchannel("A"), mask.crop(bbox)))
        self.image.alpha_composite(paint, dest=bbox[:2])

    def _composite_shadow(self, mask: Image.Image) -> None:
        state = self._state
        color = self._parse(state.shadow_color)
        if color.is_transparent:
            return
        if state.shadow_blur <= 0 and state.shadow_offset_x == 0 and state.shadow_offset_y == 0:
            return

        shadow = self._new_mask()
        shadow.paste(mask, (int(round(state.shadow_offset_x)), int(round(state.shadow_offset_y))))
        if state.shadow_blur > 0:
            shadow = shadow.filter(ImageFilter.GaussianBlur(state.shadow_blur / 2.0))

        tint = Image.new("RGBA", self.image.size, color.to_rgb() + (0,))
        tint.putalpha(shadow.point(lambda v: int(v * color.alpha)))
        self.image.alpha_composite(tint)

    # ===== Hooks =====

    def _paint_fill(self, path: List[Subpath], style: Style) -> None:
        self._composite(self._fill_mask(path), style)

    def _paint_stroke(self, path: List[Subpath]) -> None:
        if self.line_width <= 0:
            return
        self._composite(self._stroke_mask(path), self.stroke_style)

    def _paint_text(self, text: str, anchor: Point, stroke: bool) -> None:
        if not text:
            return
        style = self.stroke_style if stroke else self.fill_style
        self._composite(self._text_mask(text, anchor, stroke), style)

    def _paint_clear(self) -> None:
        self.image.paste(self._background_rgba(), (0, 0, self.width, self.height))

    def measure_text(self, text: str) -> float:
        size, family = parse_font(self.font)
        return float(load_font(family, size).getlength(str(text)))


def _dash(points: List[Point], pattern: Sequence[float]) -> List[List[Point]]:
    """Split a polyline into the 'on' pieces of a dash pattern"""
    if not any(pattern):
        return [points]

    pieces: List[List[Point]] = []
    index, remaining, on = 0, pattern[0], True
    current: List[Point] = [points[0]]

    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        length = math.hypot(x1 - x0, y1 - y0)
        travelled = 0.0
        while length - travelled > remaining:
            travelled += remaining
            t = travelled / length
            split = (x0 + (x1 - x0) * t, y0 + (y1 - y0) * t)
            if on:
                current.append(split)
                pieces.append(current)
            current = [split]
            on = not on
            index = (index + 1) % len(pattern)
            remaining = pattern[index]
        remaining -= length - travelled
        if on:
            current.append((x1, y1))
        else:
            current = [(x1, y1)]

    if on and len(current) >= 2:
        pieces.append(current)
    return pieces


def _extend_ends(points: List[Point], amount: float) -> List[Point]:
    """Lengthen both ends of a polyline (square caps)"""
    def push(tip: Point, prev: Point) -> Point:
        dx, dy = tip[0] - prev[0], tip[1] - prev[1]
        length = math.hypot(dx, dy)
        if length == 0:
            return tip
        return (tip[0] + dx / length * amount, tip[1] + dy / length * amount)

    return [push(points[0], points[1])] + points[1:-1] + [push(points[-1], points[-2])]
