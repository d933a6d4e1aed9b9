"""
Configuration models

Typed views over the merged YAML config. Every field has a default so a
partial (or empty) config still produces a usable object.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

from sceneplay.models.enums import LogLevel


def _pick(cls, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Keep only keys that are fields of cls (unknown keys ignored)"""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in names}


@dataclass(frozen=True)
class LoggingConfig:
    level: LogLevel = LogLevel.INFO
    colors: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LoggingConfig":
        data = data or {}
        level_name = str(data.get("level", "INFO")).upper()
        try:
            level = LogLevel[level_name]
        except KeyError:
            raise ValueError(f"Unknown log level: {level_name}") from None
        return cls(level=level, colors=bool(data.get("colors", True)))


@dataclass(frozen=True)
class PlaybackConfig:
    fps: Optional[float] = None     # None = scene fps
    autoplay: bool = False
    max_frame_delta_ms: float = 250.0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PlaybackConfig":
        return cls(**_pick(cls, data))


@dataclass(frozen=True)
class RenderDefaults:
    """
    Drawing defaults applied when a property bag leaves a value out.

    Flattened from the nested render.yaml sections (canvas / line / arrow /
    text) so renderers read plain attributes.
    """
    width: int = 800
    height: int = 600

    stroke_width: float = 2
    shadow_color: str = "rgba(0, 0, 0, 0.3)"
    shadow_blur: float = 8
    shadow_offset: float = 2
    glow_blur: float = 15

    line_color: str = "#000"
    line_width: float = 2
    line_glow_blur: float = 6

    arrow_width: float = 3
    arrow_head_size: float = 12
    arrow_head_angle: float = 30
    arrow_glow_blur: float = 8

    font_size: float = 16
    font_family: str = "Arial"
    text_color: str = "#000"
    text_stroke_width: float = 1
    text_background: str = "rgba(255, 255, 255, 0.9)"
    text_padding: float = 8
    text_shadow_blur: float = 4
    text_shadow_offset: float = 1

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RenderDefaults":
        data = dict(data or {})
        flat: Dict[str, Any] = {}

        for section in ("canvas",):
            flat.update(data.pop(section, None) or {})
        for section in ("line", "arrow", "text"):
            for key, value in (data.pop(section, None) or {}).items():
                flat[key if key.startswith(section) else f"{section}_{key}"] = value
        flat.update(data)

        # text section uses bare "font_size"/"font_family" keys
        for key in ("font_size", "font_family"):
            if f"text_{key}" in flat:
                flat[key] = flat.pop(f"text_{key}")

        return cls(**_pick(cls, flat))


@dataclass(frozen=True)
class AppConfig:
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    render: RenderDefaults = field(default_factory=RenderDefaults)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AppConfig":
        data = data or {}
        return cls(
            logging=LoggingConfig.from_dict(data.get("logging")),
            playback=PlaybackConfig.from_dict(data.get("playback")),
            render=RenderDefaults.from_dict(data.get("render")),
        )
