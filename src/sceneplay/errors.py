"""
Domain errors for scene loading and rendering

Every error carries a machine-readable code, a human message and a details
dict so the transport layer can forward it without knowing the concrete type.

Severity:
- SceneValidationError: raised by load_scene, scene is not installed
- UnknownShapeError: per layer, collected, layer skipped
- UnsupportedPathCommandError: per path command, collected, command skipped
- InvalidShapeError: per layer, collected, layer skipped
- RenderTargetError: fails the current paint pass only
"""

from typing import Any, Dict, List, Optional


class SceneplayError(Exception):
    """Base class for domain-specific errors"""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class SceneValidationError(SceneplayError):
    """Malformed scene (missing fields, non-positive numbers, empty windows)"""

    def __init__(self, message: str, issues: Optional[List[Dict[str, Any]]] = None):
        self.issues: List[Dict[str, Any]] = list(issues or [])
        super().__init__(
            code="SCENE_INVALID",
            message=message,
            details={"issues": self.issues},
        )


class UnknownShapeError(SceneplayError):
    """Layer type is not one of the registered shape variants"""

    def __init__(self, shape_type: str, layer_id: Optional[str] = None):
        self.shape_type = shape_type
        self.layer_id = layer_id
        super().__init__(
            code="UNKNOWN_SHAPE",
            message=f"Unknown layer type: {shape_type!r}",
            details={"shape_type": shape_type, "layer_id": layer_id},
        )


class UnsupportedPathCommandError(SceneplayError):
    """Path command outside the supported M/L/Z subset, or malformed"""

    def __init__(self, command: str, reason: str = "unsupported command", layer_id: Optional[str] = None):
        self.command = command
        self.reason = reason
        self.layer_id = layer_id
        super().__init__(
            code="UNSUPPORTED_PATH_COMMAND",
            message=f"Path command {command!r} skipped: {reason}",
            details={"command": command, "reason": reason, "layer_id": layer_id},
        )


class RenderTargetError(SceneplayError):
    """Drawing surface unavailable or failed mid-pass"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="RENDER_TARGET_ERROR", message=message, details=details)


class InvalidShapeError(SceneplayError):
    """Known shape type whose props cannot be drawn (e.g. polygon with < 3 points)"""

    def __init__(self, shape_type: str, reason: str, layer_id: Optional[str] = None):
        self.shape_type = shape_type
        self.reason = reason
        self.layer_id = layer_id
        super().__init__(
            code="INVALID_SHAPE",
            message=f"Cannot draw {shape_type}: {reason}",
            details={"shape_type": shape_type, "reason": reason, "layer_id": layer_id},
        )
