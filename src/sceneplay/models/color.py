"""
Color model - CSS color strings as used by scene property bags

Scenes carry colors as CSS-style strings ("#45B7D1", "rgba(0,0,0,0.3)",
"transparent", "gold"). Color parses them once and renders to RGBA for
raster surfaces.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from PIL import ImageColor

from sceneplay.utils.colors import clamp_channel, clamp_unit, hsl_to_rgb, lerp_channel

_FUNC_RE = re.compile(r"^(rgba?|hsla?)\(\s*([^)]*)\)$")


def _split_args(body: str):
    # accepts "1, 2, 3", "1 2 3" and "1 2 3 / 0.5"
    return [p for p in re.split(r"[\s,/]+", body.strip()) if p]


def _parse_alpha(token: str) -> float:
    if token.endswith("%"):
        return clamp_unit(float(token[:-1]) / 100.0)
    return clamp_unit(float(token))


def _parse_rgb_channel(token: str) -> int:
    if token.endswith("%"):
        return clamp_channel(float(token[:-1]) * 2.55)
    return clamp_channel(float(token))


@dataclass(frozen=True)
class Color:
    """
    Immutable RGBA color

    Channels r, g, b are 0-255; alpha is 0.0-1.0 (CSS convention).

    Examples:
        color = Color.from_css("#ff0000")
        color = Color.from_css("rgba(0, 0, 0, 0.3)")
        r, g, b, a = color.to_rgba()          # alpha scaled to 0-255
        mid = Color.black().lerp(Color.white(), 0.5)
    """

    r: int
    g: int
    b: int
    alpha: float = 1.0

    # === CONSTRUCTORS ===

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int, alpha: float = 1.0) -> 'Color':
        return cls(clamp_channel(r), clamp_channel(g), clamp_channel(b), clamp_unit(alpha))

    @classmethod
    def from_css(cls, value: str) -> 'Color':
        """
        Parse a CSS color string

        Supported: #rgb, #rgba, #rrggbb, #rrggbbaa, rgb(), rgba(), hsl(),
        hsla(), "transparent" and the named colors Pillow knows.

        Raises:
            ValueError: if the string is not a recognizable color
        """
        return _parse_css(str(value).strip().lower())

    # === RENDERING ===

    def to_rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def to_rgba(self) -> Tuple[int, int, int, int]:
        """RGBA with alpha scaled to 0-255 (Pillow convention)"""
        return (self.r, self.g, self.b, clamp_channel(self.alpha * 255))

    def to_css(self) -> str:
        if self.alpha >= 1.0:
            return f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        return f"rgba({self.r}, {self.g}, {self.b}, {self.alpha:g})"

    @property
    def is_transparent(self) -> bool:
        return self.alpha <= 0.0

    # === ADJUSTMENTS ===

    def with_alpha(self, alpha: float) -> 'Color':
        return Color(self.r, self.g, self.b, clamp_unit(alpha))

    def lerp(self, other: 'Color', t: float) -> 'Color':
        """Blend toward `other`; t=0 gives self, t=1 gives other"""
        t = clamp_unit(t)
        return Color(
            lerp_channel(self.r, other.r, t),
            lerp_channel(self.g, other.g, t),
            lerp_channel(self.b, other.b, t),
            self.alpha + (other.alpha - self.alpha) * t,
        )

    @staticmethod
    def black() -> 'Color':
        return Color(0, 0, 0)

    @staticmethod
    def white() -> 'Color':
        return Color(255, 255, 255)

    @staticmethod
    def transparent() -> 'Color':
        return Color(0, 0, 0, 0.0)

    def __str__(self) -> str:
        return f"Color({self.to_css()})"


@lru_cache(maxsize=512)
def _parse_css(value: str) -> Color:
    if value in ("transparent", "none"):
        return Color.transparent()

    if value.startswith("#"):
        digits = value[1:]
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) not in (6, 8):
            raise ValueError(f"Invalid hex color: {value!r}")
        try:
            channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
        except ValueError:
            raise ValueError(f"Invalid hex color: {value!r}") from None
        alpha = channels[3] / 255.0 if len(channels) == 4 else 1.0
        return Color(channels[0], channels[1], channels[2], alpha)

    match = _FUNC_RE.match(value)
    if match:
        func, body = match.groups()
        args = _split_args(body)
        if len(args) not in (3, 4):
            raise ValueError(f"Invalid color function: {value!r}")
        try:
            alpha = _parse_alpha(args[3]) if len(args) == 4 else 1.0
            if func.startswith("rgb"):
                r, g, b = (_parse_rgb_channel(a) for a in args[:3])
            else:
                hue = float(args[0].removesuffix("deg"))
                sat = float(args[1].rstrip("%")) / 100.0
                light = float(args[2].rstrip("%")) / 100.0
                r, g, b = hsl_to_rgb(hue, sat, light)
        except ValueError:
            raise ValueError(f"Invalid color function: {value!r}") from None
        return Color(r, g, b, alpha)

    # Named colors ("gold", "steelblue", ...)
    r, g, b = ImageColor.getrgb(value)[:3]
    return Color(r, g, b)
