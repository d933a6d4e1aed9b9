"""
Scene wire-format schemas - Pydantic models for the JSON produced by the
answer generator

Shape of the payload:

    { id, duration(ms), fps,
      layers: [ { id, type, props: {...}, animations: [
          {property, from, to, start(ms), end(ms)} |
          {property: "orbit", centerX, centerY, radius, duration(ms)}
      ]} ] }

Unknown keys are ignored everywhere so generator drift does not break
loading. Shape types are NOT checked here: an unknown type is a per-layer
render issue, not a load error.
"""

from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    ValidationError,
    field_validator,
    model_validator,
)

from sceneplay.animations.base import BaseAnimation
from sceneplay.animations.interpolate import InterpolateAnimation
from sceneplay.animations.orbit import ORBIT_PROPERTY, OrbitAnimation
from sceneplay.errors import SceneValidationError
from sceneplay.models.scene import Layer, Scene
from sceneplay.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SCENE)

DEFAULT_FPS = 30.0
DEFAULT_ANIMATION_END_MS = 1000.0


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True, allow_inf_nan=False)


class InterpolateSchema(_WireModel):
    """Linear interpolation of one numeric property"""
    property: str = Field(min_length=1, description="Property to animate (e.g. 'x', 'r', 'opacity')")
    from_value: float = Field(alias="from")
    to_value: float = Field(alias="to")
    start: float = Field(0.0, description="Window start (ms)")
    end: Optional[float] = Field(None, description="Window end (ms)")
    duration: Optional[float] = Field(None, description="Fallback for a missing end (ms)")

    @field_validator("property")
    @classmethod
    def _not_orbit(cls, value: str) -> str:
        if value == ORBIT_PROPERTY:
            raise ValueError("orbit animations need centerX, centerY, radius and duration")
        return value

    @model_validator(mode="after")
    def _window(self) -> "InterpolateSchema":
        if self.resolved_end() <= self.start:
            raise ValueError(f"end ({self.resolved_end()}) must be greater than start ({self.start})")
        return self

    def resolved_end(self) -> float:
        if self.end is not None:
            return self.end
        if self.duration is not None:
            return self.duration
        return DEFAULT_ANIMATION_END_MS

    def to_animation(self) -> InterpolateAnimation:
        return InterpolateAnimation(
            property=self.property,
            from_value=self.from_value,
            to_value=self.to_value,
            start_ms=self.start,
            end_ms=self.resolved_end(),
        )


class OrbitSchema(_WireModel):
    """Circular motion of x/y around a center"""
    property: Literal["orbit"]
    center_x: float = Field(validation_alias=AliasChoices("centerX", "center_x"))
    center_y: float = Field(validation_alias=AliasChoices("centerY", "center_y"))
    radius: float = Field(gt=0)
    period: float = Field(gt=0, validation_alias=AliasChoices("duration", "periodMs", "period"))

    def to_animation(self) -> OrbitAnimation:
        return OrbitAnimation(
            center_x=self.center_x,
            center_y=self.center_y,
            radius=self.radius,
            period_ms=self.period,
        )


def _animation_tag(value: Any) -> str:
    prop = value.get("property") if isinstance(value, dict) else getattr(value, "property", None)
    return "orbit" if prop == ORBIT_PROPERTY else "interpolate"


AnimationSchema = Annotated[
    Union[
        Annotated[OrbitSchema, Tag("orbit")],
        Annotated[InterpolateSchema, Tag("interpolate")],
    ],
    Discriminator(_animation_tag),
]


class LayerSchema(_WireModel):
    """One drawable shape plus its animations"""
    id: str = Field(min_length=1)
    type: str = Field(validation_alias=AliasChoices("type", "shapeType"), min_length=1)
    props: Dict[str, Any] = Field(default_factory=dict, validation_alias=AliasChoices("props", "baseProps"))
    animations: List[AnimationSchema] = Field(default_factory=list)

    @field_validator("props", mode="before")
    @classmethod
    def _none_props(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("animations", mode="before")
    @classmethod
    def _none_animations(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_layer(self) -> Layer:
        animations: List[BaseAnimation] = [a.to_animation() for a in self.animations]
        return Layer(id=self.id, shape_type=self.type, base_props=self.props, animations=tuple(animations))


class SceneSchema(_WireModel):
    """Top-level scene payload"""
    id: str = Field(min_length=1)
    duration: float = Field(gt=0, validation_alias=AliasChoices("duration", "durationMs"), description="Total length (ms)")
    fps: float = Field(DEFAULT_FPS, gt=0)
    layers: List[LayerSchema] = Field(default_factory=list)

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
        json_schema_extra={
            "example": {
                "id": "orbit_demo",
                "duration": 4000,
                "fps": 30,
                "layers": [
                    {
                        "id": "planet",
                        "type": "circle",
                        "props": {"x": 150, "y": 100, "r": 12, "fill": "#4ECDC4"},
                        "animations": [
                            {"property": "orbit", "centerX": 100, "centerY": 100, "radius": 50, "duration": 2000}
                        ],
                    }
                ],
            }
        },
    )

    @field_validator("layers")
    @classmethod
    def _unique_ids(cls, layers: List[LayerSchema]) -> List[LayerSchema]:
        seen = set()
        for layer in layers:
            if layer.id in seen:
                raise ValueError(f"duplicate layer id '{layer.id}'")
            seen.add(layer.id)
        return layers

    def to_scene(self) -> Scene:
        return Scene(
            id=self.id,
            duration_ms=self.duration,
            fps=self.fps,
            layers=tuple(layer.to_layer() for layer in self.layers),
        )


# =====================================================================
# Entry points
# =====================================================================

def _issues_from(exc: ValidationError) -> List[Dict[str, Any]]:
    return [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


def parse_scene(data: Union[Mapping[str, Any], Scene]) -> Scene:
    """
    Validate a wire-format scene and build the immutable Scene.

    Raises:
        SceneValidationError: with one issue per failing field
    """
    if isinstance(data, Scene):
        return data

    try:
        schema = SceneSchema.model_validate(data)
    except ValidationError as exc:
        scene_id = data.get("id") if isinstance(data, Mapping) else None
        issues = _issues_from(exc)
        log.warn("Scene rejected", scene=scene_id, issues=len(issues))
        raise SceneValidationError(f"Scene '{scene_id}' failed validation", issues=issues) from exc

    scene = schema.to_scene()
    log.debug("Scene parsed", scene=scene.id, layers=len(scene.layers), duration_ms=scene.duration_ms)
    return scene


def parse_scene_json(payload: Union[str, bytes]) -> Scene:
    """Same as parse_scene, from a JSON document"""
    try:
        schema = SceneSchema.model_validate_json(payload)
    except ValidationError as exc:
        issues = _issues_from(exc)
        log.warn("Scene rejected", issues=len(issues))
        raise SceneValidationError("Scene JSON failed validation", issues=issues) from exc
    return schema.to_scene()
