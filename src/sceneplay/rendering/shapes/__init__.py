"""
Shape renderers

Importing this package registers every renderer in SHAPE_RENDERERS.
draw() is the single entry point used by the scene renderer.
"""

from typing import Any, Mapping, Optional

from sceneplay.errors import UnknownShapeError
from sceneplay.models.enums import ShapeType
from sceneplay.rendering.shapes.base import SHAPE_RENDERERS, RenderContext, ShapeRenderer, register_shape
from sceneplay.rendering.shapes import circle, line, polygon, rectangle, text  # noqa: F401  (registration)


def draw(surface, shape_type: str, props: Mapping[str, Any], ctx: Optional[RenderContext] = None) -> None:
    """
    Draw one resolved layer.

    Args:
        surface: DrawingSurface
        shape_type: Wire tag ("circle", "arrow", ...)
        props: Resolved properties
        ctx: Defaults and issue sink (fresh one if omitted)

    Raises:
        UnknownShapeError: shape_type is not a registered variant
        RenderTargetError: surface failed (propagates from the surface)
    """
    ctx = ctx or RenderContext()
    try:
        renderer = SHAPE_RENDERERS[ShapeType.parse(shape_type)]
    except (ValueError, KeyError):
        raise UnknownShapeError(str(shape_type), layer_id=ctx.layer_id) from None

    surface.save()
    try:
        renderer.draw(surface, props, ctx)
    finally:
        surface.restore()


__all__ = [
    "SHAPE_RENDERERS",
    "RenderContext",
    "ShapeRenderer",
    "draw",
    "register_shape",
]
