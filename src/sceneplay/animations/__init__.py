"""
Animation system for scene layers

- base: BaseAnimation contract
- interpolate, orbit: animation implementations
- evaluator: pure (layer, time) -> resolved props
"""

from .base import BaseAnimation
from .interpolate import InterpolateAnimation
from .orbit import OrbitAnimation, ORBIT_PROPERTY
from .evaluator import resolve, resolve_layer, resolve_scene

__all__ = [
    "BaseAnimation",
    "InterpolateAnimation",
    "OrbitAnimation",
    "ORBIT_PROPERTY",
    "resolve",
    "resolve_layer",
    "resolve_scene",
]
