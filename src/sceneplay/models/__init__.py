"""
Models package - Data models for scene playback
"""

from .enums import ShapeType, PlaybackMode, AnimationKind, MediaKind, LogLevel, LogCategory
from .color import Color
from .scene import Layer, Scene
from .media import ExternalMedia

__all__ = [
    'ShapeType',
    'PlaybackMode',
    'AnimationKind',
    'MediaKind',
    'LogLevel',
    'LogCategory',
    'Color',
    'Layer',
    'Scene',
    'ExternalMedia',
]
