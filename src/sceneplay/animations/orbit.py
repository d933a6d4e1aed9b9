"""
Circular orbital motion driving x and y together
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict

from sceneplay.animations.base import BaseAnimation
from sceneplay.errors import SceneValidationError
from sceneplay.models.enums import AnimationKind

ORBIT_PROPERTY = "orbit"


@dataclass(frozen=True)
class OrbitAnimation(BaseAnimation):
    """
    Places the layer on a circle around (center_x, center_y).

    The angle grows continuously with time and is never clamped, so a period
    shorter than the scene repeats. Starting angle 0 is the rightmost point
    (center_x + radius, center_y); with screen coordinates (y down) the motion
    is clockwise.

    Overwrites x and y unconditionally - whatever base props or earlier
    animations wrote is replaced.
    """
    KIND = AnimationKind.ORBIT

    center_x: float
    center_y: float
    radius: float
    period_ms: float
    property: str = field(default=ORBIT_PROPERTY)

    def __post_init__(self):
        issues = []
        if not self.radius > 0:
            issues.append({"field": "radius", "message": "radius must be greater than 0", "value": self.radius})
        if not self.period_ms > 0:
            issues.append({"field": "duration", "message": "orbit period must be greater than 0", "value": self.period_ms})
        if issues:
            raise SceneValidationError("Invalid orbit animation", issues=issues)

    def angle_at(self, time_ms: float) -> float:
        # Angle from the phase, not from time_ms / period_ms directly: whole
        # periods then land on exactly 0 rad instead of k * 2pi with rounding.
        phase = (time_ms % self.period_ms) / self.period_ms
        return phase * 2 * math.pi

    def position_at(self, time_ms: float):
        angle = self.angle_at(time_ms)
        return (
            self.center_x + self.radius * math.cos(angle),
            self.center_y + self.radius * math.sin(angle),
        )

    def apply(self, props: Dict[str, Any], time_ms: float) -> None:
        props["x"], props["y"] = self.position_at(time_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "property": ORBIT_PROPERTY,
            "centerX": self.center_x,
            "centerY": self.center_y,
            "radius": self.radius,
            "duration": self.period_ms,
        }
