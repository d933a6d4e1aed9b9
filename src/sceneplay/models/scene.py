"""
Scene model - immutable description of one animated visualization

A Scene is produced once by the answer generator (parsed from the wire
format in sceneplay.schemas.scene) and then only read. Nothing in the engine
mutates it; a new answer replaces the whole Scene.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple

from sceneplay.errors import SceneValidationError

if TYPE_CHECKING:
    from sceneplay.animations.base import BaseAnimation


def _freeze(props: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(props or {}))


@dataclass(frozen=True)
class Layer:
    """
    One drawable shape plus its animations.

    shape_type is kept as the raw tag from the wire. Unknown tags are not a
    load error: the renderer reports and skips that layer only.

    Attributes:
        id: Unique within the scene
        shape_type: "circle", "rectangle", ... (see ShapeType)
        base_props: Read-only property bag; unknown keys are carried, not rejected
        animations: Applied in declaration order
    """

    id: str
    shape_type: str
    base_props: Mapping[str, Any] = field(default_factory=dict)
    animations: Tuple["BaseAnimation", ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "base_props", _freeze(self.base_props))
        object.__setattr__(self, "animations", tuple(self.animations))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.shape_type,
            "props": dict(self.base_props),
            "animations": [a.to_dict() for a in self.animations],
        }


@dataclass(frozen=True)
class Scene:
    """
    Top-level animation description.

    Invariants (checked on construction):
    - duration_ms > 0, fps > 0
    - layer ids unique
    - layer order is paint order (later layers paint over earlier ones)
    """

    id: str
    duration_ms: float
    fps: float
    layers: Tuple[Layer, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "layers", tuple(self.layers))

        issues = []
        if not self.duration_ms > 0:
            issues.append({"field": "duration", "message": "duration must be greater than 0", "value": self.duration_ms})
        if not self.fps > 0:
            issues.append({"field": "fps", "message": "fps must be greater than 0", "value": self.fps})

        seen = set()
        for index, layer in enumerate(self.layers):
            if layer.id in seen:
                issues.append({"field": f"layers.{index}.id", "message": f"duplicate layer id '{layer.id}'"})
            seen.add(layer.id)

        if issues:
            raise SceneValidationError(f"Scene '{self.id}' failed validation", issues=issues)

    def clamp(self, time_ms: float) -> float:
        """Clamp a time offset into [0, duration_ms]"""
        return max(0.0, min(float(time_ms), float(self.duration_ms)))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the wire format"""
        return {
            "id": self.id,
            "duration": self.duration_ms,
            "fps": self.fps,
            "layers": [layer.to_dict() for layer in self.layers],
        }
