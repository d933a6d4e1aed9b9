"""
Polygon and path renderers

Both build an arbitrary outline and fill it with a linear gradient across
the outline's bounding box.
"""

from typing import Any, Iterable, List, Mapping, Optional, Tuple

from sceneplay.errors import InvalidShapeError
from sceneplay.models.enums import ShapeType
from sceneplay.rendering.path_parser import parse_path, trace_path
from sceneplay.rendering.shapes.base import RenderContext, ShapeRenderer, paint, register_shape, shadow_scope


def parse_points(raw: Any, layer_id: Optional[str] = None) -> List[Tuple[float, float]]:
    """
    Accept [{"x": 1, "y": 2}, ...] or [[1, 2], ...]; malformed entries are dropped.

    Raises:
        InvalidShapeError: raw is not a list of points at all
    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        raise InvalidShapeError("polygon", f"points must be a list, got {type(raw).__name__}", layer_id=layer_id)

    points = []
    for item in raw:
        try:
            if isinstance(item, Mapping):
                points.append((float(item["x"]), float(item["y"])))
            else:
                px, py = item
                points.append((float(px), float(py)))
        except (KeyError, TypeError, ValueError):
            continue
    return points


def bounds(points: List[Tuple[float, float]]) -> Optional[Tuple[float, float, float, float]]:
    if not points:
        return None
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


@register_shape(ShapeType.POLYGON)
class PolygonRenderer(ShapeRenderer):
    """
    Props: points, fill, stroke, strokeWidth, gradient, shadow

    Fewer than 3 usable points: reported, nothing drawn.
    """

    def draw(self, surface, props: Mapping[str, Any], ctx: RenderContext) -> None:
        try:
            points = parse_points(props.get("points"), layer_id=ctx.layer_id)
        except InvalidShapeError as ex:
            ctx.report(ex)
            return
        if len(points) < 3:
            ctx.report(InvalidShapeError("polygon", f"needs at least 3 points, got {len(points)}", layer_id=ctx.layer_id))
            return

        with shadow_scope(surface, props, ctx):
            surface.begin_path()
            surface.move_to(*points[0])
            for point in points[1:]:
                surface.line_to(*point)
            surface.close_path()

            gradient = surface.create_linear_gradient(*bounds(points))
            paint(surface, props, ctx, gradient)


@register_shape(ShapeType.PATH)
class PathRenderer(ShapeRenderer):
    """
    Props: path (M/L/Z mini-language), fill, stroke, strokeWidth, gradient, shadow

    Unsupported commands are reported one by one; whatever parsed is drawn.
    """

    def draw(self, surface, props: Mapping[str, Any], ctx: RenderContext) -> None:
        data = props.get("path")
        if not data:
            return

        commands = parse_path(str(data), issues=ctx.issues, layer_id=ctx.layer_id)
        if not commands:
            return

        with shadow_scope(surface, props, ctx):
            surface.begin_path()
            trace_path(surface, commands)

            box = bounds([(c.x, c.y) for c in commands if c.op != "Z"]) or (0, 0, 0, 0)
            gradient = surface.create_linear_gradient(*box)
            paint(surface, props, ctx, gradient)
