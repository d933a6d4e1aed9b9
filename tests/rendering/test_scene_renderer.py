"""
Tests for SceneRenderer: one pass over every layer, issues collected.
"""

import pytest

from sceneplay.errors import InvalidShapeError, RenderTargetError, UnknownShapeError, UnsupportedPathCommandError
from sceneplay.models.enums import ShapeType
from sceneplay.rendering.scene_renderer import SceneRenderer, issue_summary
from sceneplay.rendering.shapes import SHAPE_RENDERERS
from sceneplay.schemas.error import issue_report
from sceneplay.schemas.scene import parse_scene


@pytest.fixture
def renderer(render_defaults):
    return SceneRenderer(render_defaults)


@pytest.fixture
def mixed_scene():
    return parse_scene({
        "id": "mixed",
        "duration": 1000,
        "layers": [
            {"id": "bg", "type": "rectangle", "props": {"x": 0, "y": 0, "width": 200, "height": 200, "fill": "#eee"}},
            {"id": "mystery", "type": "hexagon", "props": {}},
            {"id": "wave", "type": "path", "props": {"path": "M 0 0 C 1 1 2 2 3 3 L 10 10 L 0 10 Z", "fill": "#00f"}},
            {"id": "sliver", "type": "polygon", "props": {"points": [[0, 0], [1, 1]], "fill": "#f00"}},
            {"id": "label", "type": "text", "props": {"x": 100, "y": 100, "text": "ok"}},
        ],
    })


class TestRender:

    def test_layers_painted_in_order(self, renderer, pulse_scene, recording_surface):
        report = renderer.render(pulse_scene, 500, recording_surface)

        assert report.cursor_ms == 500
        assert report.painted == ["dot"]
        assert report.layers[0].props["r"] == pytest.approx(30)
        assert recording_surface.names()[0] == "clear"

    def test_time_clamped_to_duration(self, renderer, pulse_scene, recording_surface):
        assert renderer.render(pulse_scene, 99999, recording_surface).cursor_ms == 2000
        assert renderer.render(pulse_scene, -5, recording_surface).cursor_ms == 0

    def test_bad_layers_do_not_stop_others(self, renderer, mixed_scene, recording_surface):
        report = renderer.render(mixed_scene, 0, recording_surface)

        assert report.painted == ["bg", "wave", "label"]
        assert [type(issue) for issue in report.issues] == [
            UnknownShapeError,
            UnsupportedPathCommandError,
            InvalidShapeError,
        ]
        assert not report.ok
        assert recording_surface.depth == 0

    def test_malformed_points_do_not_stop_later_layers(self, renderer, recording_surface):
        scene = parse_scene({
            "id": "broken_points",
            "duration": 1000,
            "layers": [
                {"id": "shard", "type": "polygon", "props": {"points": 5, "fill": "#f00"}},
                {"id": "good", "type": "circle", "props": {"x": 10, "y": 10, "r": 5, "fill": "#0f0"}},
            ],
        })

        report = renderer.render(scene, 0, recording_surface)

        assert report.painted == ["good"]
        assert [type(issue) for issue in report.issues] == [InvalidShapeError]
        assert report.issues[0].layer_id == "shard"

    def test_unexpected_renderer_error_becomes_issue(self, renderer, mixed_scene, recording_surface, monkeypatch):
        def explode(surface, props, ctx):
            raise ZeroDivisionError("division by zero")

        monkeypatch.setattr(SHAPE_RENDERERS[ShapeType.RECTANGLE], "draw", explode)

        report = renderer.render(mixed_scene, 0, recording_surface)

        assert report.painted == ["wave", "label"]
        crash = report.issues[0]
        assert isinstance(crash, InvalidShapeError)
        assert crash.layer_id == "bg"
        assert crash.reason == "ZeroDivisionError: division by zero"
        assert recording_surface.depth == 0

    def test_resolved_layers_include_skipped(self, renderer, mixed_scene, recording_surface):
        report = renderer.render(mixed_scene, 0, recording_surface)

        assert [layer.layer_id for layer in report.layers] == ["bg", "mystery", "wave", "sliver", "label"]

    def test_summary(self, renderer, mixed_scene, recording_surface):
        report = renderer.render(mixed_scene, 0, recording_surface)

        assert issue_summary(report) == "INVALID_SHAPE x 1, UNKNOWN_SHAPE x 1, UNSUPPORTED_PATH_COMMAND x 1"

    def test_surface_failure_propagates(self, renderer, pulse_scene, recording_surface):
        recording_surface.close()

        with pytest.raises(RenderTargetError):
            renderer.render(pulse_scene, 0, recording_surface)

    def test_same_frame_twice_is_identical(self, renderer, pulse_scene, raster_surface):
        renderer.render(pulse_scene, 750, raster_surface)
        first = raster_surface.image.tobytes()
        renderer.render(pulse_scene, 750, raster_surface)

        assert raster_surface.image.tobytes() == first

    def test_report_serializes(self, renderer, mixed_scene, recording_surface):
        data = renderer.render(mixed_scene, 0, recording_surface).to_dict()

        assert data["painted"] == ["bg", "wave", "label"]
        assert {issue["code"] for issue in data["issues"]} == {
            "UNKNOWN_SHAPE", "UNSUPPORTED_PATH_COMMAND", "INVALID_SHAPE",
        }

    def test_issue_report_payload(self, renderer, mixed_scene, recording_surface):
        payload = issue_report(renderer.render(mixed_scene, 250, recording_surface))

        assert payload.cursor_ms == 250
        assert [issue.code for issue in payload.issues] == [
            "UNKNOWN_SHAPE", "UNSUPPORTED_PATH_COMMAND", "INVALID_SHAPE",
        ]
        assert payload.issues[0].details["layer_id"] == "mystery"
