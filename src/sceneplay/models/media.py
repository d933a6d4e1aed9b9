"""
External media descriptor

Answers rendered by external tools (Manim video, Matplotlib image, SVG
diagram, physics simulation) are not scenes. The engine only passes them
through to the transport; it never plays them.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from sceneplay.models.enums import MediaKind

# Which wire field carries the URL for each media kind
MEDIA_URL_FIELDS: Dict[MediaKind, str] = {
    MediaKind.MANIM: "videoUrl",
    MediaKind.PLOT: "imageUrl",
    MediaKind.SVG: "svgUrl",
    MediaKind.PHYSICS: "simulationUrl",
}

DEFAULT_TITLES: Dict[MediaKind, str] = {
    MediaKind.MANIM: "Manim Animation",
    MediaKind.PLOT: "Scientific Plot",
    MediaKind.SVG: "Technical Diagram",
    MediaKind.PHYSICS: "Physics Simulation",
}


@dataclass(frozen=True)
class ExternalMedia:
    kind: MediaKind
    url: str
    title: str
    data_url: Optional[str] = None

    @classmethod
    def from_visualization(cls, data: Dict[str, Any]) -> Optional["ExternalMedia"]:
        """
        Build from an answer's visualization dict.

        Returns None when the dict is not an external media descriptor (no
        known type, or the type's URL field is missing) - the caller then
        treats it as a scene.
        """
        try:
            kind = MediaKind(str(data.get("type", "")).lower())
        except ValueError:
            return None

        url = data.get(MEDIA_URL_FIELDS[kind])
        if not url:
            return None

        return cls(
            kind=kind,
            url=url,
            title=data.get("title") or DEFAULT_TITLES[kind],
            data_url=data.get("dataUrl"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "type": self.kind.value,
            MEDIA_URL_FIELDS[self.kind]: self.url,
            "title": self.title,
        }
        if self.data_url:
            data["dataUrl"] = self.data_url
        return data
