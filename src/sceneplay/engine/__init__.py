"""Playback engine: state machine and frame loop"""

from .playback_controller import PlaybackController
from .frame_loop import FrameLoop

__all__ = ["PlaybackController", "FrameLoop"]
