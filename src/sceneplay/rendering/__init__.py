"""
Rendering: drawing surfaces, shape renderers and the scene painter
"""

from .surface import BaseSurface, DrawingSurface, Gradient, SurfaceState
from .recording_surface import DrawOp, RecordingSurface
from .raster_surface import RasterSurface
from .shapes import RenderContext, draw
from .scene_renderer import SceneRenderer

__all__ = [
    "BaseSurface",
    "DrawingSurface",
    "Gradient",
    "SurfaceState",
    "DrawOp",
    "RecordingSurface",
    "RasterSurface",
    "RenderContext",
    "draw",
    "SceneRenderer",
]
