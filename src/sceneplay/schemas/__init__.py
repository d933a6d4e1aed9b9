"""
Pydantic schemas for the scene wire format and error payloads
"""

from .scene import SceneSchema, LayerSchema, InterpolateSchema, OrbitSchema, parse_scene, parse_scene_json
from .error import ErrorDetail, IssueReport, error_detail, issue_report

__all__ = [
    "SceneSchema",
    "LayerSchema",
    "InterpolateSchema",
    "OrbitSchema",
    "parse_scene",
    "parse_scene_json",
    "ErrorDetail",
    "IssueReport",
    "error_detail",
    "issue_report",
]
