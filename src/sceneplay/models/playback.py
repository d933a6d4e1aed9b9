"""
Playback state snapshot
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from sceneplay.models.enums import PlaybackMode
from sceneplay.models.scene import Scene


@dataclass(frozen=True)
class PlaybackState:
    """
    Read-only view of the controller at one moment.

    cursor_ms is always within [0, scene.duration_ms]; 0 with no scene.
    """

    cursor_ms: float = 0.0
    mode: PlaybackMode = PlaybackMode.IDLE
    scene: Optional[Scene] = None
    generation: int = 0

    @property
    def progress(self) -> float:
        """Cursor as a fraction of the scene duration (0.0 with no scene)"""
        if self.scene is None:
            return 0.0
        return self.cursor_ms / self.scene.duration_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cursor_ms": self.cursor_ms,
            "mode": self.mode.name.lower(),
            "scene_id": self.scene.id if self.scene else None,
            "generation": self.generation,
            "progress": self.progress,
        }
