"""
RecordingSurface - headless DrawingSurface

Keeps every call with a snapshot of the drawing state at that moment.
Used by tests to assert what a renderer did without decoding pixels.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from sceneplay.rendering.surface import BaseSurface, Point, Style, Subpath, parse_font


@dataclass(frozen=True)
class DrawOp:
    name: str
    args: Tuple[Any, ...]
    state: Dict[str, Any]
    depth: int


class RecordingSurface(BaseSurface):
    """
    DrawingSurface that records instead of painting.

    measure_text uses a fixed advance of half the font size per character,
    so layout-dependent code (text backgrounds) is deterministic.

    Example:
        surface = RecordingSurface()
        draw(surface, "line", {"x1": 0, "y1": 0, "x2": 10, "y2": 10})
        surface.names()          # ["save", "begin_path", "move_to", ...]
        surface.ops("stroke")[0].state["line_cap"]   # "round"
    """

    def __init__(self, width: int = 800, height: int = 600):
        super().__init__(width, height)
        self.operations: List[DrawOp] = []
        self.painted_paths: List[List[Subpath]] = []

    def _record(self, op: str, *args) -> None:
        self.operations.append(DrawOp(op, tuple(args), self._state.snapshot(), len(self._stack)))

    # ===== Queries =====

    def names(self) -> List[str]:
        return [op.name for op in self.operations]

    def ops(self, name: str) -> List[DrawOp]:
        return [op for op in self.operations if op.name == name]

    def reset(self) -> None:
        self.operations.clear()
        self.painted_paths.clear()

    # ===== Hooks =====

    def _paint_fill(self, path: List[Subpath], style: Style) -> None:
        self.painted_paths.append([Subpath(list(s.points), s.closed) for s in path])

    def _paint_stroke(self, path: List[Subpath]) -> None:
        self.painted_paths.append([Subpath(list(s.points), s.closed) for s in path])

    def _paint_text(self, text: str, anchor: Point, stroke: bool) -> None:
        pass

    def _paint_clear(self) -> None:
        pass

    def measure_text(self, text: str) -> float:
        size, _ = parse_font(self.font)
        return len(str(text)) * size * 0.5
