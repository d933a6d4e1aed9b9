"""
Base Shape Renderer

All shape renderers inherit from ShapeRenderer, implement draw(), and are
registered for their ShapeType with @register_shape.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Type

from sceneplay.errors import SceneplayError
from sceneplay.models.config import RenderDefaults
from sceneplay.models.enums import ShapeType
from sceneplay.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RENDER)


@dataclass
class RenderContext:
    """
    Per-layer drawing context

    Attributes:
        defaults: Fallback values for props a layer leaves out
        layer_id: Layer being drawn (for issue reports)
        issues: Non-fatal problems collected while drawing
    """

    defaults: RenderDefaults = field(default_factory=RenderDefaults)
    layer_id: Optional[str] = None
    issues: List[SceneplayError] = field(default_factory=list)

    def report(self, error: SceneplayError) -> None:
        log.warn(error.message, layer=self.layer_id, code=error.code)
        self.issues.append(error)


class ShapeRenderer:
    """
    Base class for shape renderers

    Renderers are stateless: everything comes from the resolved props and the
    context. draw() runs between a save()/restore() pair issued by the
    dispatcher, so any state it sets (styles, transform, dash) is undone
    before the next layer.
    """
    SHAPE_TYPE: ShapeType

    def draw(self, surface, props: Mapping[str, Any], ctx: RenderContext) -> None:
        raise NotImplementedError


SHAPE_RENDERERS: Dict[ShapeType, ShapeRenderer] = {}


def register_shape(shape_type: ShapeType):
    """Class decorator: instantiate and register a renderer for shape_type"""
    def decorator(cls: Type[ShapeRenderer]) -> Type[ShapeRenderer]:
        cls.SHAPE_TYPE = shape_type
        SHAPE_RENDERERS[shape_type] = cls()
        return cls
    return decorator


# ===== Prop helpers =====

def number(props: Mapping[str, Any], key: str, default: float = 0.0) -> float:
    """Numeric prop; missing or non-numeric values give default"""
    value = props.get(key)
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def gradient_colors(gradient: Any, base: Optional[str]) -> tuple:
    """(from, to) colors of a gradient prop, each falling back to base"""
    if isinstance(gradient, Mapping):
        return (gradient.get("from") or base, gradient.get("to") or base)
    return (base, base)


def apply_gradient(grad, gradient: Any, base: Optional[str]):
    start, end = gradient_colors(gradient, base)
    grad.add_color_stop(0, start or "#000")
    grad.add_color_stop(1, end or "#000")
    return grad


@contextmanager
def effect_scope(surface, color: Optional[str], blur: float, offset: float = 0.0) -> Iterator[None]:
    """
    Shadow/glow for the drawing inside the block.

    No-op when color is falsy. Otherwise saves state, sets the shadow and
    restores on exit.
    """
    if not color:
        yield
        return

    surface.save()
    try:
        surface.shadow_color = color
        surface.shadow_blur = blur
        surface.shadow_offset_x = offset
        surface.shadow_offset_y = offset
        yield
    finally:
        surface.restore()


def paint(surface, props: Mapping[str, Any], ctx: RenderContext, gradient=None) -> None:
    """
    Fill then stroke the current path.

    fill: only when props["fill"] is set; gradient (already built by the
    caller) replaces the solid color when props["gradient"] is set.
    stroke: only when props["stroke"] is set; width strokeWidth or default.
    """
    fill = props.get("fill")
    if fill:
        if gradient is not None and props.get("gradient"):
            surface.fill_style = apply_gradient(gradient, props.get("gradient"), fill)
        else:
            surface.fill_style = fill
        surface.fill()

    stroke = props.get("stroke")
    if stroke:
        surface.stroke_style = stroke
        surface.line_width = number(props, "strokeWidth") or ctx.defaults.stroke_width
        surface.stroke()


def shadow_color(value: Any, ctx: RenderContext) -> Optional[str]:
    """props["shadow"]: a color string, or True for the configured default color"""
    if value is True:
        return ctx.defaults.shadow_color
    if not value or isinstance(value, bool):
        return None
    return str(value)


def shadow_scope(surface, props: Mapping[str, Any], ctx: RenderContext):
    """Drop shadow used by the filled shapes"""
    defaults = ctx.defaults
    return effect_scope(surface, shadow_color(props.get("shadow"), ctx), defaults.shadow_blur, defaults.shadow_offset)
