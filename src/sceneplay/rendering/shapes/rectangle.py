"""
Rectangle renderer
"""

from typing import Any, Mapping

from sceneplay.models.enums import ShapeType
from sceneplay.rendering.shapes.base import RenderContext, ShapeRenderer, number, paint, register_shape, shadow_scope


def rounded_rect(surface, x: float, y: float, width: float, height: float, radius: float) -> None:
    """Rounded rectangle path: straight edges joined by quadratic corners"""
    r = radius
    surface.move_to(x + r, y)
    surface.line_to(x + width - r, y)
    surface.quadratic_curve_to(x + width, y, x + width, y + r)
    surface.line_to(x + width, y + height - r)
    surface.quadratic_curve_to(x + width, y + height, x + width - r, y + height)
    surface.line_to(x + r, y + height)
    surface.quadratic_curve_to(x, y + height, x, y + height - r)
    surface.line_to(x, y + r)
    surface.quadratic_curve_to(x, y, x + r, y)


@register_shape(ShapeType.RECTANGLE)
class RectangleRenderer(ShapeRenderer):
    """
    Props: x, y, width, height, borderRadius, fill, stroke, strokeWidth,
    gradient (diagonal, top-left to bottom-right), shadow
    """

    def draw(self, surface, props: Mapping[str, Any], ctx: RenderContext) -> None:
        x, y = number(props, "x"), number(props, "y")
        width, height = number(props, "width"), number(props, "height")
        radius = number(props, "borderRadius")

        with shadow_scope(surface, props, ctx):
            surface.begin_path()
            if radius:
                rounded_rect(surface, x, y, width, height, radius)
            else:
                surface.rect(x, y, width, height)

            gradient = surface.create_linear_gradient(x, y, x + width, y + height)
            paint(surface, props, ctx, gradient)
