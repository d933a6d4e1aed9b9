"""
Linear property interpolation over a [start, end] time window
"""

from dataclasses import dataclass
from typing import Any, Dict

from sceneplay.animations.base import BaseAnimation
from sceneplay.errors import SceneValidationError
from sceneplay.models.enums import AnimationKind


@dataclass(frozen=True)
class InterpolateAnimation(BaseAnimation):
    """
    Moves one numeric property from `from_value` to `to_value`.

    Before start_ms the property is left untouched (base value, or whatever an
    earlier animation wrote). Inside the window the value is linear in time.
    From end_ms on the value is pinned to `to_value` exactly.

    Example:
        anim = InterpolateAnimation("r", 10, 50, start_ms=0, end_ms=1000)
        props = {"r": 10}
        anim.apply(props, 500)   # props["r"] == 30.0
    """
    KIND = AnimationKind.INTERPOLATE

    property: str
    from_value: float
    to_value: float
    start_ms: float = 0.0
    end_ms: float = 1000.0

    def __post_init__(self):
        if self.end_ms <= self.start_ms:
            raise SceneValidationError(
                f"Animation on '{self.property}' has an empty time window",
                issues=[{
                    "field": "end",
                    "message": "end must be greater than start",
                    "start": self.start_ms,
                    "end": self.end_ms,
                }],
            )

    def progress(self, time_ms: float) -> float:
        """Fraction of the window elapsed at time_ms, clamped to [0, 1]"""
        raw = (time_ms - self.start_ms) / (self.end_ms - self.start_ms)
        return max(0.0, min(1.0, raw))

    def value_at(self, time_ms: float) -> float:
        progress = self.progress(time_ms)
        if progress >= 1.0:
            # exact boundary: from + (to - from) * 1 can drift in floating point
            return self.to_value
        return self.from_value + (self.to_value - self.from_value) * progress

    def is_active(self, time_ms: float) -> bool:
        return time_ms >= self.start_ms

    def apply(self, props: Dict[str, Any], time_ms: float) -> None:
        if not self.is_active(time_ms):
            return
        props[self.property] = self.value_at(time_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "property": self.property,
            "from": self.from_value,
            "to": self.to_value,
            "start": self.start_ms,
            "end": self.end_ms,
        }
