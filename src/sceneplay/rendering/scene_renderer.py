"""
SceneRenderer - paints one scene at one time offset

Resolves every layer, then draws them in paint order onto a surface. One bad
layer never stops the others: unknown types, undrawable props and skipped
path commands are collected into the FrameReport. Only a surface failure
(RenderTargetError) aborts the pass.
"""

from typing import Optional

from sceneplay.animations.evaluator import resolve_scene
from sceneplay.errors import InvalidShapeError, RenderTargetError, SceneplayError, UnknownShapeError
from sceneplay.models.config import RenderDefaults
from sceneplay.models.frame import FrameReport
from sceneplay.models.scene import Scene
from sceneplay.rendering.shapes import RenderContext, draw
from sceneplay.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RENDER)


class SceneRenderer:
    """
    Stateless scene painter

    Example:
        renderer = SceneRenderer()
        surface = RasterSurface(800, 600)
        report = renderer.render(scene, 1500, surface)
        report.painted      # ["sun", "earth"]
        report.issues       # []
    """

    def __init__(self, defaults: Optional[RenderDefaults] = None):
        self.defaults = defaults or RenderDefaults()

    def render(self, scene: Scene, time_ms: float, surface) -> FrameReport:
        """
        Clear the surface and paint every layer at time_ms.

        Args:
            scene: Scene to paint
            time_ms: Cursor; clamped into [0, duration]
            surface: DrawingSurface

        Returns:
            FrameReport with resolved layers, painted ids and issues

        Raises:
            RenderTargetError: surface unusable; partial output is discarded
                by the next clear()
        """
        cursor = scene.clamp(time_ms)
        report = FrameReport(cursor_ms=cursor, layers=resolve_scene(scene, cursor))

        surface.clear()
        for layer in report.layers:
            ctx = RenderContext(defaults=self.defaults, layer_id=layer.layer_id)
            try:
                draw(surface, layer.shape_type, layer.props, ctx)
            except UnknownShapeError as ex:
                ctx.report(ex)
                report.issues.extend(ctx.issues)
                continue
            except RenderTargetError:
                raise
            except Exception as ex:
                # malformed props the renderer did not anticipate
                ctx.report(InvalidShapeError(layer.shape_type, f"{type(ex).__name__}: {ex}", layer_id=layer.layer_id))
                report.issues.extend(ctx.issues)
                continue

            report.issues.extend(ctx.issues)
            if not any(isinstance(issue, InvalidShapeError) for issue in ctx.issues):
                report.painted.append(layer.layer_id)

        if report.issues:
            log.debug(
                "Frame painted with issues",
                scene=scene.id,
                cursor_ms=round(cursor, 2),
                issues=len(report.issues),
            )
        return report


def issue_summary(report: FrameReport) -> str:
    """One-line "CODE x N" summary of a report's issues, for logs"""
    counts = {}
    for issue in report.issues:
        if isinstance(issue, SceneplayError):
            counts[issue.code] = counts.get(issue.code, 0) + 1
    return ", ".join(f"{code} x {count}" for code, count in sorted(counts.items()))
