"""
Error schemas - Pydantic models for error payloads handed to the transport

The engine itself is in-process; whatever carries its errors to a client
(HTTP, SSE, websockets) serializes these models.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from sceneplay.errors import SceneplayError


class ErrorDetail(BaseModel):
    """Detailed error information"""
    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        None,
        description="Additional context (field paths, offending values, etc.)"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the error occurred"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "code": "SCENE_INVALID",
                "message": "Scene 'orbit_demo' failed validation",
                "details": {
                    "issues": [
                        {"field": "duration", "message": "Input should be greater than 0"}
                    ]
                },
                "timestamp": "2025-11-26T10:30:00Z"
            }
        }
    }


class IssueReport(BaseModel):
    """Batch of non-fatal issues collected during one paint pass"""
    cursor_ms: float = Field(description="Cursor the frame was painted at")
    issues: List[ErrorDetail] = Field(default_factory=list)


def error_detail(exc: SceneplayError) -> ErrorDetail:
    """Convert a domain error into its wire representation"""
    return ErrorDetail(code=exc.code, message=exc.message, details=exc.details or None)


def issue_report(report) -> IssueReport:
    """Wire form of a FrameReport's issue batch"""
    return IssueReport(cursor_ms=report.cursor_ms, issues=[error_detail(e) for e in report.issues])
