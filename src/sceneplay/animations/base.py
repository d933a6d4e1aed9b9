"""
Base Animation Class

All animations inherit from BaseAnimation and implement apply().
"""

from typing import Any, Dict

from sceneplay.models.enums import AnimationKind


class BaseAnimation:
    """
    Base class for all layer animations

    An animation is immutable data plus a pure apply() step. The evaluator
    calls apply() for every animation of a layer, in declaration order, on a
    scratch dict that starts as a copy of the layer's base props.

    IMPORTANT:
    - apply() may only write into the dict it receives.
    - apply() must depend on nothing but (self, props, time_ms); the same
      inputs always produce the same output.

    Subclasses MUST implement apply(self, props, time_ms) and to_dict().
    """
    KIND: AnimationKind

    # Property name on the wire ("x", "r", "orbit", ...)
    property: str

    def apply(self, props: Dict[str, Any], time_ms: float) -> None:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the wire format"""
        raise NotImplementedError
