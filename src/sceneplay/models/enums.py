"""
Enums for the scene playback engine
"""

from enum import Enum, auto


class ShapeType(Enum):
    """
    Closed set of drawable shape variants.

    Values are the tags used on the wire (layer "type" field).
    """
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    POLYGON = "polygon"
    PATH = "path"
    LINE = "line"
    ARROW = "arrow"
    TEXT = "text"

    @classmethod
    def parse(cls, tag: str) -> "ShapeType":
        """Resolve a wire tag (case-insensitive), raise ValueError if unknown"""
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown shape type: {tag!r}") from None


class PlaybackMode(Enum):
    """
    Playback state machine modes

    IDLE: Scene loaded (or none), cursor at 0, not advancing
    PLAYING: Cursor advances with wall-clock time
    PAUSED: Cursor frozen at an arbitrary value
    COMPLETED: Cursor at duration, stopped
    """
    IDLE = auto()
    PLAYING = auto()
    PAUSED = auto()
    COMPLETED = auto()


class AnimationKind(Enum):
    """Animation variants understood by the evaluator"""
    INTERPOLATE = auto()
    ORBIT = auto()


class MediaKind(Enum):
    """External media produced by non-scene answer renderers"""
    MANIM = "manim"
    PLOT = "plot"
    SVG = "svg"
    PHYSICS = "physics"


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    SCENE = auto()       # Scene parsing, validation
    ANIMATION = auto()   # Property resolution
    RENDER = auto()      # Shape drawing, surfaces
    PATH = auto()        # Path mini-language interpreter
    PLAYBACK = auto()    # State machine transitions
    FRAME_LOOP = auto()  # Per-frame scheduling
    EVENT = auto()       # Event bus events and handling
    SESSION = auto()     # Transport adapter

    GENERAL = auto()    # Default general category
