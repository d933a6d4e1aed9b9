"""Services layer"""

from .event_bus import EventBus
from .playback_session import PlaybackSession
from .sample_scenes import mock_answer

__all__ = [
    "EventBus",
    "PlaybackSession",
    "mock_answer",
]
