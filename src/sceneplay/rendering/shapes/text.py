"""
Text renderer
"""

from typing import Any, Mapping

from sceneplay.models.enums import ShapeType
from sceneplay.rendering.shapes.base import RenderContext, ShapeRenderer, effect_scope, number, register_shape, shadow_color


def _background_color(background: Any, default: str) -> str:
    if isinstance(background, Mapping):
        return background.get("color") or default
    if isinstance(background, str):
        return background
    return default


@register_shape(ShapeType.TEXT)
class TextRenderer(ShapeRenderer):
    """
    Props: x, y, text, fontSize, fontFamily, color, stroke, strokeWidth,
    shadow, background {color}

    Centered on (x, y). The optional background box is the measured text
    width plus padding on each side, by fontSize plus padding, and is drawn
    without the text shadow.
    """

    def draw(self, surface, props: Mapping[str, Any], ctx: RenderContext) -> None:
        defaults = ctx.defaults
        x, y = number(props, "x"), number(props, "y")
        text = props.get("text")
        text = "" if text is None else str(text)
        size = number(props, "fontSize") or defaults.font_size
        family = props.get("fontFamily") or defaults.font_family

        surface.font = f"{size:g}px {family}"
        surface.text_align = "center"
        surface.text_baseline = "middle"

        background = props.get("background")
        if background:
            padding = defaults.text_padding
            box_width = surface.measure_text(text) + padding * 2
            box_height = size + padding * 2
            surface.fill_style = _background_color(background, defaults.text_background)
            surface.fill_rect(x - box_width / 2, y - box_height / 2, box_width, box_height)

        with effect_scope(surface, shadow_color(props.get("shadow"), ctx), defaults.text_shadow_blur, defaults.text_shadow_offset):
            stroke = props.get("stroke")
            if stroke:
                surface.stroke_style = stroke
                surface.line_width = number(props, "strokeWidth") or defaults.text_stroke_width
                surface.stroke_text(text, x, y)

            surface.fill_style = props.get("color") or defaults.text_color
            surface.fill_text(text, x, y)
