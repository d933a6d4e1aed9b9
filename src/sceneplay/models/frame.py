"""
Per-tick frame models

ResolvedLayer - one layer's properties at one time instant
FrameReport   - everything a consumer needs to paint one tick
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from sceneplay.errors import SceneplayError


@dataclass(frozen=True)
class ResolvedLayer:
    """
    Layer properties resolved at a single time instant.

    Transient: recomputed on every evaluation, never cached across times.
    """

    layer_id: str
    shape_type: str
    props: Mapping[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.layer_id, "type": self.shape_type, "props": dict(self.props)}


@dataclass
class FrameReport:
    """
    Result of one paint pass.

    Attributes:
        cursor_ms: Playback cursor the frame was painted at
        layers: Resolved layers in paint order (skipped layers included)
        issues: Non-fatal errors collected during the pass (unknown shapes,
                skipped path commands); never abort the remaining layers
        painted: Ids of layers that were actually drawn
    """

    cursor_ms: float
    layers: List[ResolvedLayer] = field(default_factory=list)
    issues: List[SceneplayError] = field(default_factory=list)
    painted: List[str] = field(default_factory=list)
    timestamp: float = field(default_factory=time.time)

    @property
    def ok(self) -> bool:
        return not self.issues

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cursor_ms": self.cursor_ms,
            "layers": [layer.to_dict() for layer in self.layers],
            "issues": [{"code": e.code, "message": e.message, "details": e.details} for e in self.issues],
            "painted": list(self.painted),
        }
