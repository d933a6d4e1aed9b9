"""
Animation Evaluator

Pure mapping (layer, time) -> resolved property set.

No state is kept between calls: every call starts from a fresh copy of the
layer's base props, so scrubbing backwards, repeated calls and out-of-order
calls all return the same values for the same time.
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from sceneplay.models.frame import ResolvedLayer
from sceneplay.models.scene import Layer, Scene


def resolve(layer: Layer, time_ms: float) -> Mapping[str, Any]:
    """
    Resolve a layer's properties at time_ms.

    Animations are applied in declaration order on top of a shallow copy of
    base_props. When two animations write the same property, the one applied
    last wins (later-declared overrides earlier for overlapping windows; an
    orbit overrides any earlier x/y).

    Args:
        layer: Layer to evaluate (not modified)
        time_ms: Time offset, >= 0; callers clamp to the scene duration

    Returns:
        Read-only mapping of property name -> value
    """
    props: Dict[str, Any] = dict(layer.base_props)
    for animation in layer.animations:
        animation.apply(props, time_ms)
    return MappingProxyType(props)


def resolve_layer(layer: Layer, time_ms: float) -> ResolvedLayer:
    return ResolvedLayer(layer_id=layer.id, shape_type=layer.shape_type, props=resolve(layer, time_ms))


def resolve_scene(scene: Scene, time_ms: float) -> List[ResolvedLayer]:
    """Resolve every layer at time_ms, in paint order"""
    return [resolve_layer(layer, time_ms) for layer in scene.layers]
