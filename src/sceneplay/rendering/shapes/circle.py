"""
Circle and ellipse renderers
"""

import math
from typing import Any, Mapping

from sceneplay.models.enums import ShapeType
from sceneplay.rendering.shapes.base import (
    RenderContext,
    ShapeRenderer,
    effect_scope,
    number,
    paint,
    register_shape,
    shadow_color,
    shadow_scope,
)


@register_shape(ShapeType.CIRCLE)
class CircleRenderer(ShapeRenderer):
    """
    Props: x, y, r, fill, stroke, strokeWidth, gradient {from, to}, shadow, glow

    The radial gradient's inner circle sits up and left of the center
    (x - r/3, y - r/3) for a lit-sphere look. shadow and glow share one
    shadow slot: color prefers shadow, blur prefers glow.
    """

    def draw(self, surface, props: Mapping[str, Any], ctx: RenderContext) -> None:
        x, y = number(props, "x"), number(props, "y")
        r = max(0.0, number(props, "r"))
        shadow, glow = shadow_color(props.get("shadow"), ctx), shadow_color(props.get("glow"), ctx)
        defaults = ctx.defaults

        color = shadow or glow
        blur = defaults.glow_blur if glow else defaults.shadow_blur
        offset = defaults.shadow_offset if shadow else 0.0

        with effect_scope(surface, color, blur, offset):
            surface.begin_path()
            surface.arc(x, y, r, 0, 2 * math.pi)
            gradient = surface.create_radial_gradient(x - r / 3, y - r / 3, 0, x, y, r)
            paint(surface, props, ctx, gradient)


@register_shape(ShapeType.ELLIPSE)
class EllipseRenderer(ShapeRenderer):
    """
    Props: x, y, rx, ry, rotation (degrees), fill, stroke, strokeWidth,
    gradient, shadow

    Drawn around the origin after translate(x, y) + rotate(rotation).
    """

    def draw(self, surface, props: Mapping[str, Any], ctx: RenderContext) -> None:
        rx = max(0.0, number(props, "rx"))
        ry = max(0.0, number(props, "ry"))
        rotation = number(props, "rotation")

        with shadow_scope(surface, props, ctx):
            surface.save()
            try:
                surface.translate(number(props, "x"), number(props, "y"))
                if rotation:
                    surface.rotate(math.radians(rotation))

                surface.begin_path()
                surface.ellipse(0, 0, rx, ry, 0, 0, 2 * math.pi)
                gradient = surface.create_radial_gradient(0, 0, 0, 0, 0, max(rx, ry))
                paint(surface, props, ctx, gradient)
            finally:
                surface.restore()
