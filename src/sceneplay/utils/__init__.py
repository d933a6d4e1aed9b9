"""
Utility functions for sceneplay
"""

from .colors import (
    hsl_to_rgb,
    clamp_unit,
    clamp_channel,
    lerp_channel,
)

__all__ = [
    'hsl_to_rgb',
    'clamp_unit',
    'clamp_channel',
    'lerp_channel',
]
