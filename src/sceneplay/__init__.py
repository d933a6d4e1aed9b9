"""
sceneplay - declarative animation scenes with deterministic playback

Packages:
- models, schemas: scene data and its wire format
- animations: (layer, time) -> resolved properties
- rendering: drawing surfaces and shape renderers
- engine: playback state machine and frame loop
- services: event bus, playback session, sample scenes
"""

__version__ = "0.1.0"
