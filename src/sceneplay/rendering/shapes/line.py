"""
Line and arrow renderers

Stroke-only shapes: color comes from props["color"], not fill/stroke.
"""

import math
from typing import Any, List, Mapping, Tuple

from sceneplay.models.enums import ShapeType
from sceneplay.rendering.shapes.base import (
    RenderContext,
    ShapeRenderer,
    apply_gradient,
    effect_scope,
    number,
    register_shape,
)


def _dash_pattern(value: Any) -> List[float]:
    if not isinstance(value, (list, tuple)):
        return []
    try:
        return [float(v) for v in value]
    except (TypeError, ValueError):
        return []


@register_shape(ShapeType.LINE)
class LineRenderer(ShapeRenderer):
    """
    Props: x1, y1, x2, y2, color, strokeWidth, gradient, dash [on, off, ...], glow

    Round caps. The dash pattern is reset to solid after stroking.
    """

    def draw(self, surface, props: Mapping[str, Any], ctx: RenderContext) -> None:
        defaults = ctx.defaults
        x1, y1 = number(props, "x1"), number(props, "y1")
        x2, y2 = number(props, "x2"), number(props, "y2")
        color = props.get("color") or defaults.line_color
        dash = _dash_pattern(props.get("dash"))

        glow = color if props.get("glow") else None
        with effect_scope(surface, glow, defaults.line_glow_blur):
            surface.stroke_style = color
            surface.line_width = number(props, "strokeWidth") or defaults.line_width
            surface.line_cap = "round"

            if dash:
                surface.set_line_dash(dash)

            if props.get("gradient"):
                surface.stroke_style = apply_gradient(
                    surface.create_linear_gradient(x1, y1, x2, y2), props.get("gradient"), color
                )

            surface.begin_path()
            surface.move_to(x1, y1)
            surface.line_to(x2, y2)
            surface.stroke()

            if dash:
                surface.set_line_dash([])


def arrow_head(tip: Tuple[float, float], angle: float, length: float, spread: float) -> List[Tuple[float, float]]:
    """End points of the two head strokes, each `spread` radians off the shaft"""
    x, y = tip
    return [
        (x - length * math.cos(angle - spread), y - length * math.sin(angle - spread)),
        (x - length * math.cos(angle + spread), y - length * math.sin(angle + spread)),
    ]


@register_shape(ShapeType.ARROW)
class ArrowRenderer(ShapeRenderer):
    """
    Props: x, y, dx, dy, color, strokeWidth, gradient, glow, headSize

    Shaft from (x, y) to (x + dx, y + dy), then two head strokes at the tip.
    """

    def draw(self, surface, props: Mapping[str, Any], ctx: RenderContext) -> None:
        defaults = ctx.defaults
        x, y = number(props, "x"), number(props, "y")
        dx, dy = number(props, "dx"), number(props, "dy")
        color = props.get("color") or defaults.line_color
        head = number(props, "headSize") or defaults.arrow_head_size
        angle = math.atan2(dy, dx)
        tip = (x + dx, y + dy)

        glow = color if props.get("glow") else None
        with effect_scope(surface, glow, defaults.arrow_glow_blur):
            surface.stroke_style = color
            surface.line_width = number(props, "strokeWidth") or defaults.arrow_width
            surface.line_cap = "round"
            surface.line_join = "round"

            if props.get("gradient"):
                surface.stroke_style = apply_gradient(
                    surface.create_linear_gradient(x, y, tip[0], tip[1]), props.get("gradient"), color
                )

            surface.begin_path()
            surface.move_to(x, y)
            surface.line_to(*tip)
            surface.stroke()

            surface.begin_path()
            for end in arrow_head(tip, angle, head, math.radians(defaults.arrow_head_angle)):
                surface.move_to(*tip)
                surface.line_to(*end)
            surface.stroke()
