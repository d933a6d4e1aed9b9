"""
DrawingSurface Protocol
=======================
Minimal 2D immediate-mode drawing contract used by the shape renderers.

Modelled on the HTML canvas 2D context: a style/transform state stack, a
current path built from move/line/curve commands, and paint operations that
consume it. Two implementations:

- RecordingSurface: records every call (headless tests, debugging)
- RasterSurface: paints into a Pillow RGBA image
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from sceneplay.errors import RenderTargetError

Point = Tuple[float, float]
# Affine matrix (a, b, c, d, e, f): x' = a*x + c*y + e, y' = b*x + d*y + f
Transform = Tuple[float, float, float, float, float, float]

IDENTITY: Transform = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

# Segments per full turn when flattening arcs and ellipses
ARC_SEGMENTS = 64
CURVE_SEGMENTS = 16


@dataclass
class Gradient:
    """
    Linear or radial gradient, coordinates in user space.

    linear: coords = (x0, y0, x1, y1)
    radial: coords = (x0, y0, r0, x1, y1, r1)
    """

    kind: str
    coords: Tuple[float, ...]
    stops: List[Tuple[float, str]] = field(default_factory=list)

    def add_color_stop(self, offset: float, color: str) -> None:
        if not 0.0 <= offset <= 1.0:
            raise ValueError(f"Gradient stop offset out of range: {offset}")
        self.stops.append((float(offset), color))
        self.stops.sort(key=lambda s: s[0])


Style = Union[str, Gradient]


@dataclass
class SurfaceState:
    """Everything save()/restore() captures"""

    fill_style: Style = "#000"
    stroke_style: Style = "#000"
    line_width: float = 1.0
    line_cap: str = "butt"
    line_join: str = "miter"
    line_dash: Tuple[float, ...] = ()
    shadow_color: str = "rgba(0, 0, 0, 0)"
    shadow_blur: float = 0.0
    shadow_offset_x: float = 0.0
    shadow_offset_y: float = 0.0
    font: str = "10px sans-serif"
    text_align: str = "start"
    text_baseline: str = "alphabetic"
    transform: Transform = IDENTITY

    def snapshot(self) -> dict:
        return {
            "fill_style": self.fill_style,
            "stroke_style": self.stroke_style,
            "line_width": self.line_width,
            "line_cap": self.line_cap,
            "line_join": self.line_join,
            "line_dash": self.line_dash,
            "shadow_color": self.shadow_color,
            "shadow_blur": self.shadow_blur,
            "shadow_offset_x": self.shadow_offset_x,
            "shadow_offset_y": self.shadow_offset_y,
            "font": self.font,
            "text_align": self.text_align,
            "text_baseline": self.text_baseline,
            "transform": self.transform,
        }


@dataclass
class Subpath:
    """Flattened subpath in device coordinates"""

    points: List[Point] = field(default_factory=list)
    closed: bool = False


class DrawingSurface(Protocol):
    """
    Protocol every render target implements.

    State:       save, restore, translate, rotate
    Path:        begin_path, move_to, line_to, quadratic_curve_to, arc,
                 ellipse, rect, close_path
    Paint:       fill, stroke, fill_rect, fill_text, stroke_text, clear
    Styles:      fill_style, stroke_style, line_width, line_cap, line_join,
                 set_line_dash, shadow_*, font, text_align, text_baseline
    Factories:   create_linear_gradient, create_radial_gradient
    Metrics:     measure_text

    Paint operations raise RenderTargetError when the surface is unusable.
    """

    width: int
    height: int

    fill_style: Style
    stroke_style: Style
    line_width: float
    line_cap: str
    line_join: str
    shadow_color: str
    shadow_blur: float
    shadow_offset_x: float
    shadow_offset_y: float
    font: str
    text_align: str
    text_baseline: str

    def save(self) -> None: ...
    def restore(self) -> None: ...
    def translate(self, x: float, y: float) -> None: ...
    def rotate(self, angle: float) -> None: ...

    def begin_path(self) -> None: ...
    def move_to(self, x: float, y: float) -> None: ...
    def line_to(self, x: float, y: float) -> None: ...
    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None: ...
    def arc(self, x: float, y: float, radius: float, start: float, end: float, counterclockwise: bool = False) -> None: ...
    def ellipse(self, x: float, y: float, rx: float, ry: float, rotation: float, start: float, end: float, counterclockwise: bool = False) -> None: ...
    def rect(self, x: float, y: float, w: float, h: float) -> None: ...
    def close_path(self) -> None: ...

    def fill(self) -> None: ...
    def stroke(self) -> None: ...
    def fill_rect(self, x: float, y: float, w: float, h: float) -> None: ...
    def fill_text(self, text: str, x: float, y: float) -> None: ...
    def stroke_text(self, text: str, x: float, y: float) -> None: ...
    def clear(self) -> None: ...

    def set_line_dash(self, segments: Sequence[float]) -> None: ...
    def get_line_dash(self) -> List[float]: ...
    def create_linear_gradient(self, x0: float, y0: float, x1: float, y1: float) -> Gradient: ...
    def create_radial_gradient(self, x0: float, y0: float, r0: float, x1: float, y1: float, r1: float) -> Gradient: ...
    def measure_text(self, text: str) -> float: ...


def _state_property(name: str):
    def getter(self):
        return getattr(self._state, name)

    def setter(self, value):
        setattr(self._state, name, value)

    return property(getter, setter)


class BaseSurface:
    """
    Shared state stack, transform and path building.

    Subclasses implement the _paint_* hooks; the public paint methods check
    the surface is open, let _record() observe the call, then delegate.
    """

    fill_style = _state_property("fill_style")
    stroke_style = _state_property("stroke_style")
    line_width = _state_property("line_width")
    line_cap = _state_property("line_cap")
    line_join = _state_property("line_join")
    shadow_color = _state_property("shadow_color")
    shadow_blur = _state_property("shadow_blur")
    shadow_offset_x = _state_property("shadow_offset_x")
    shadow_offset_y = _state_property("shadow_offset_y")
    font = _state_property("font")
    text_align = _state_property("text_align")
    text_baseline = _state_property("text_baseline")

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self._state = SurfaceState()
        self._stack: List[SurfaceState] = []
        self._path: List[Subpath] = []
        self._closed = False

    # ===== Lifecycle =====

    def close(self) -> None:
        """Release the target; any later paint call raises RenderTargetError"""
        self._closed = True

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise RenderTargetError("Drawing surface is closed", details={"surface": type(self).__name__})

    def _record(self, op: str, *args) -> None:
        pass

    @property
    def state(self) -> SurfaceState:
        return self._state

    @property
    def depth(self) -> int:
        """Number of unmatched save() calls"""
        return len(self._stack)

    # ===== State =====

    def save(self) -> None:
        self._record("save")
        self._stack.append(replace(self._state))

    def restore(self) -> None:
        self._record("restore")
        # unbalanced restore is ignored, like canvas
        if self._stack:
            self._state = self._stack.pop()

    def translate(self, x: float, y: float) -> None:
        self._record("translate", x, y)
        a, b, c, d, e, f = self._state.transform
        self._state.transform = (a, b, c, d, e + a * x + c * y, f + b * x + d * y)

    def rotate(self, angle: float) -> None:
        """Rotate the user space clockwise by angle radians"""
        self._record("rotate", angle)
        a, b, c, d, e, f = self._state.transform
        cos, sin = math.cos(angle), math.sin(angle)
        self._state.transform = (
            a * cos + c * sin,
            b * cos + d * sin,
            c * cos - a * sin,
            d * cos - b * sin,
            e,
            f,
        )

    def set_line_dash(self, segments: Sequence[float]) -> None:
        self._record("set_line_dash", list(segments))
        values = [float(s) for s in segments]
        if any(v < 0 or math.isnan(v) for v in values):
            return
        if len(values) % 2:
            values = values * 2
        self._state.line_dash = tuple(values)

    def get_line_dash(self) -> List[float]:
        return list(self._state.line_dash)

    def create_linear_gradient(self, x0: float, y0: float, x1: float, y1: float) -> Gradient:
        return Gradient("linear", (x0, y0, x1, y1))

    def create_radial_gradient(self, x0: float, y0: float, r0: float, x1: float, y1: float, r1: float) -> Gradient:
        return Gradient("radial", (x0, y0, r0, x1, y1, r1))

    def to_device(self, x: float, y: float) -> Point:
        a, b, c, d, e, f = self._state.transform
        return (a * x + c * y + e, b * x + d * y + f)

    # ===== Path =====

    def begin_path(self) -> None:
        self._record("begin_path")
        self._path = []

    def _current(self) -> Optional[Subpath]:
        return self._path[-1] if self._path else None

    def _ensure_subpath(self) -> Subpath:
        current = self._current()
        if current is None:
            current = Subpath()
            self._path.append(current)
        elif current.closed:
            # drawing after close_path continues from the subpath start
            start = current.points[0] if current.points else None
            current = Subpath([start] if start else [])
            self._path.append(current)
        return current

    def move_to(self, x: float, y: float) -> None:
        self._record("move_to", x, y)
        self._path.append(Subpath([self.to_device(x, y)]))

    def line_to(self, x: float, y: float) -> None:
        self._record("line_to", x, y)
        self._ensure_subpath().points.append(self.to_device(x, y))

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        self._record("quadratic_curve_to", cpx, cpy, x, y)
        sub = self._ensure_subpath()
        end = self.to_device(x, y)
        if not sub.points:
            sub.points.append(self.to_device(cpx, cpy))
        x0, y0 = sub.points[-1]
        cx, cy = self.to_device(cpx, cpy)
        for i in range(1, CURVE_SEGMENTS + 1):
            t = i / CURVE_SEGMENTS
            u = 1.0 - t
            sub.points.append((
                u * u * x0 + 2 * u * t * cx + t * t * end[0],
                u * u * y0 + 2 * u * t * cy + t * t * end[1],
            ))
        sub.points[-1] = end

    def arc(self, x: float, y: float, radius: float, start: float, end: float, counterclockwise: bool = False) -> None:
        self._record("arc", x, y, radius, start, end, counterclockwise)
        if radius < 0:
            raise ValueError(f"Negative arc radius: {radius}")
        self._add_elliptic_arc(x, y, radius, radius, 0.0, start, end, counterclockwise)

    def ellipse(self, x: float, y: float, rx: float, ry: float, rotation: float, start: float, end: float, counterclockwise: bool = False) -> None:
        self._record("ellipse", x, y, rx, ry, rotation, start, end, counterclockwise)
        if rx < 0 or ry < 0:
            raise ValueError(f"Negative ellipse radius: {rx}, {ry}")
        self._add_elliptic_arc(x, y, rx, ry, rotation, start, end, counterclockwise)

    def _add_elliptic_arc(self, x, y, rx, ry, rotation, start, end, counterclockwise) -> None:
        tau = 2 * math.pi
        sweep = end - start
        if not counterclockwise:
            if sweep >= tau:
                sweep = tau
            else:
                sweep = sweep % tau
        else:
            if -sweep >= tau:
                sweep = -tau
            else:
                sweep = -((-sweep) % tau)

        steps = max(2, int(math.ceil(abs(sweep) / tau * ARC_SEGMENTS)))
        cos_r, sin_r = math.cos(rotation), math.sin(rotation)
        points = []
        for i in range(steps + 1):
            theta = start + sweep * i / steps
            px, py = rx * math.cos(theta), ry * math.sin(theta)
            points.append(self.to_device(x + px * cos_r - py * sin_r, y + px * sin_r + py * cos_r))

        # arc joins the current point with a straight segment
        sub = self._ensure_subpath()
        sub.points.extend(points)

    def rect(self, x: float, y: float, w: float, h: float) -> None:
        self._record("rect", x, y, w, h)
        corners = [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]
        self._path.append(Subpath([self.to_device(px, py) for px, py in corners], closed=True))

    def close_path(self) -> None:
        self._record("close_path")
        current = self._current()
        if current is not None and current.points:
            current.closed = True

    @property
    def path(self) -> List[Subpath]:
        return self._path

    # ===== Paint =====

    def fill(self) -> None:
        self._ensure_open()
        self._record("fill")
        self._paint_fill(self._path, self._state.fill_style)

    def stroke(self) -> None:
        self._ensure_open()
        self._record("stroke")
        self._paint_stroke(self._path)

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None:
        self._ensure_open()
        self._record("fill_rect", x, y, w, h)
        corners = [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]
        # separate path, the current one is left alone
        shape = [Subpath([self.to_device(px, py) for px, py in corners], closed=True)]
        self._paint_fill(shape, self._state.fill_style)

    def fill_text(self, text: str, x: float, y: float) -> None:
        self._ensure_open()
        self._record("fill_text", text, x, y)
        self._paint_text(str(text), self.to_device(x, y), stroke=False)

    def stroke_text(self, text: str, x: float, y: float) -> None:
        self._ensure_open()
        self._record("stroke_text", text, x, y)
        self._paint_text(str(text), self.to_device(x, y), stroke=True)

    def clear(self) -> None:
        self._ensure_open()
        self._record("clear")
        self._path = []
        self._paint_clear()

    def measure_text(self, text: str) -> float:
        raise NotImplementedError

    # ===== Hooks =====

    def _paint_fill(self, path: List[Subpath], style: Style) -> None:
        raise NotImplementedError

    def _paint_stroke(self, path: List[Subpath]) -> None:
        raise NotImplementedError

    def _paint_text(self, text: str, anchor: Point, stroke: bool) -> None:
        raise NotImplementedError

    def _paint_clear(self) -> None:
        raise NotImplementedError


def parse_font(font: str) -> Tuple[float, str]:
    """
    Split a CSS-ish font string into (size_px, family).

    "16px Arial" -> (16.0, "Arial"); "bold 20px Open Sans" -> (20.0, "Open Sans")
    """
    size = 10.0
    family = "sans-serif"
    parts = str(font).split()
    for index, part in enumerate(parts):
        if part.endswith("px"):
            try:
                size = float(part[:-2])
            except ValueError:
                continue
            rest = " ".join(parts[index + 1:]).strip().strip("'\"")
            if rest:
                family = rest
            break
    return size, family
