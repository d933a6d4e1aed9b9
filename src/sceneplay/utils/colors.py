"""
Color conversion utilities

Pure functions for color space conversions and channel math.
CSS string parsing lives in sceneplay.models.color.
"""

from typing import Tuple


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> Tuple[int, int, int]:
    """
    Convert HSL to RGB (0-255)

    Args:
        hue: Hue in degrees (wraps at 360)
        saturation: 0.0-1.0
        lightness: 0.0-1.0

    Returns:
        (r, g, b) tuple with values 0-255

    Example:
        hsl_to_rgb(0, 1.0, 0.5)    # (255, 0, 0) red
        hsl_to_rgb(120, 1.0, 0.5)  # (0, 255, 0) green
    """
    hue = (hue % 360) / 360.0
    saturation = clamp_unit(saturation)
    lightness = clamp_unit(lightness)

    if saturation == 0:
        v = round(lightness * 255)
        return (v, v, v)

    q = lightness * (1 + saturation) if lightness < 0.5 else lightness + saturation - lightness * saturation
    p = 2 * lightness - q

    def channel(t: float) -> float:
        t %= 1.0
        if t < 1 / 6:
            return p + (q - p) * 6 * t
        if t < 1 / 2:
            return q
        if t < 2 / 3:
            return p + (q - p) * (2 / 3 - t) * 6
        return p

    return (
        round(channel(hue + 1 / 3) * 255),
        round(channel(hue) * 255),
        round(channel(hue - 1 / 3) * 255),
    )


def clamp_unit(value: float) -> float:
    """Clamp to 0.0-1.0"""
    return max(0.0, min(1.0, value))


def clamp_channel(value: float) -> int:
    """Round and clamp to 0-255"""
    return max(0, min(255, int(round(value))))


def lerp_channel(a: int, b: int, t: float) -> int:
    """Linear blend of two 0-255 channel values, t in 0.0-1.0"""
    return clamp_channel(a + (b - a) * t)
