"""
Playback events published on the EventBus

The transport (UI, SSE, websocket...) subscribes to these instead of polling
the controller.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from sceneplay.models.enums import PlaybackMode
from sceneplay.models.frame import FrameReport
from sceneplay.models.media import ExternalMedia


class EventType(Enum):
    SCENE_LOADED = auto()
    PLAYBACK_STATE_CHANGED = auto()
    PLAYBACK_TICK = auto()
    PLAYBACK_COMPLETED = auto()
    EXTERNAL_MEDIA_RECEIVED = auto()


class EventSource(Enum):
    """Event source identifiers"""
    PLAYBACK_CONTROLLER = auto()
    FRAME_LOOP = auto()
    SESSION = auto()


@dataclass(init=False)
class Event:
    """
    Base event class.

    - type: EventType
    - source: EventSource
    - timestamp: auto
    """

    type: EventType
    source: Optional[EventSource]
    timestamp: float = field(default_factory=time.time)

    def __init__(self, *, type: EventType, source: Optional[EventSource]):
        self.type = type
        self.source = source
        self.timestamp = time.time()

    def to_data(self) -> Dict[str, Any]:
        """Structured payload (everything except type/source/timestamp)"""
        data = {}
        for k, v in self.__dict__.items():
            if k in ("type", "source", "timestamp"):
                continue
            data[k] = v
        return data


@dataclass(init=False)
class SceneLoadedEvent(Event):
    scene_id: str
    generation: int
    duration_ms: float

    def __init__(self, scene_id: str, generation: int, duration_ms: float):
        super().__init__(type=EventType.SCENE_LOADED, source=EventSource.SESSION)
        self.scene_id = scene_id
        self.generation = generation
        self.duration_ms = duration_ms


@dataclass(init=False)
class PlaybackStateChangedEvent(Event):
    old: PlaybackMode
    new: PlaybackMode
    cursor_ms: float

    def __init__(self, old: PlaybackMode, new: PlaybackMode, cursor_ms: float):
        super().__init__(type=EventType.PLAYBACK_STATE_CHANGED, source=EventSource.PLAYBACK_CONTROLLER)
        self.old = old
        self.new = new
        self.cursor_ms = cursor_ms


@dataclass(init=False)
class PlaybackTickEvent(Event):
    """One painted frame: cursor plus resolved layers in paint order"""
    cursor_ms: float
    generation: int
    report: FrameReport

    def __init__(self, cursor_ms: float, generation: int, report: FrameReport):
        super().__init__(type=EventType.PLAYBACK_TICK, source=EventSource.FRAME_LOOP)
        self.cursor_ms = cursor_ms
        self.generation = generation
        self.report = report

    @property
    def resolved_layers(self) -> List:
        return self.report.layers


@dataclass(init=False)
class PlaybackCompletedEvent(Event):
    scene_id: str
    generation: int

    def __init__(self, scene_id: str, generation: int):
        super().__init__(type=EventType.PLAYBACK_COMPLETED, source=EventSource.PLAYBACK_CONTROLLER)
        self.scene_id = scene_id
        self.generation = generation


@dataclass(init=False)
class ExternalMediaReceivedEvent(Event):
    media: ExternalMedia

    def __init__(self, media: ExternalMedia):
        super().__init__(type=EventType.EXTERNAL_MEDIA_RECEIVED, source=EventSource.SESSION)
        self.media = media
