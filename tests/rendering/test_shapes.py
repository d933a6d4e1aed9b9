"""
Tests for the shape renderers.

Drawn onto a RecordingSurface so assertions are made on the calls and
the drawing state at each call, not on pixels.
"""

import math

import pytest

from sceneplay.errors import InvalidShapeError, UnknownShapeError, UnsupportedPathCommandError
from sceneplay.models.config import RenderDefaults
from sceneplay.rendering.shapes import SHAPE_RENDERERS, RenderContext, draw
from sceneplay.rendering.shapes.line import arrow_head
from sceneplay.rendering.surface import Gradient
from sceneplay.models.enums import ShapeType


@pytest.fixture
def ctx(render_defaults):
    return RenderContext(defaults=render_defaults, layer_id="layer")


class TestRegistry:

    def test_every_shape_type_registered(self):
        assert set(SHAPE_RENDERERS) == set(ShapeType)

    def test_unknown_type_raises(self, recording_surface, ctx):
        with pytest.raises(UnknownShapeError) as exc_info:
            draw(recording_surface, "hexagon", {}, ctx)

        assert exc_info.value.shape_type == "hexagon"
        assert exc_info.value.layer_id == "layer"
        assert recording_surface.operations == []

    def test_tag_is_case_insensitive(self, recording_surface, ctx):
        draw(recording_surface, "Circle", {"x": 1, "y": 1, "r": 1, "fill": "#000"}, ctx)

        assert "arc" in recording_surface.names()

    @pytest.mark.parametrize("shape_type, props", [
        ("circle", {"x": 10, "y": 10, "r": 5, "fill": "#f00", "shadow": "#000"}),
        ("ellipse", {"x": 10, "y": 10, "rx": 5, "ry": 3, "rotation": 45, "fill": "#f00"}),
        ("rectangle", {"x": 0, "y": 0, "width": 10, "height": 10, "borderRadius": 2, "fill": "#f00"}),
        ("line", {"x1": 0, "y1": 0, "x2": 10, "y2": 10, "dash": [4, 2], "glow": True}),
        ("arrow", {"x": 0, "y": 0, "dx": 10, "dy": 0, "glow": True}),
        ("text", {"x": 5, "y": 5, "text": "hi", "shadow": "#000", "background": True}),
        ("polygon", {"points": [[0, 0], [5, 0], [0, 5]], "fill": "#f00", "shadow": "#000"}),
        ("path", {"path": "M 0 0 L 5 0 L 0 5 Z", "fill": "#f00"}),
    ])
    def test_state_balanced_after_draw(self, recording_surface, ctx, shape_type, props):
        draw(recording_surface, shape_type, props, ctx)

        assert recording_surface.depth == 0
        assert recording_surface.state.shadow_blur == 0
        assert recording_surface.get_line_dash() == []


class TestCircle:

    def test_filled(self, recording_surface, ctx):
        draw(recording_surface, "circle", {"x": 50, "y": 60, "r": 20, "fill": "#f00"}, ctx)

        arc = recording_surface.ops("arc")[0]
        assert arc.args[:5] == (50, 60, 20, 0, 2 * math.pi)
        assert recording_surface.ops("fill")[0].state["fill_style"] == "#f00"
        assert recording_surface.ops("stroke") == []

    def test_nothing_painted_without_fill_or_stroke(self, recording_surface, ctx):
        draw(recording_surface, "circle", {"x": 50, "y": 60, "r": 20}, ctx)

        assert recording_surface.ops("fill") == []
        assert recording_surface.ops("stroke") == []

    def test_stroke_width_falls_back_to_default(self, recording_surface, ctx):
        draw(recording_surface, "circle", {"x": 0, "y": 0, "r": 5, "stroke": "#00f"}, ctx)

        stroke = recording_surface.ops("stroke")[0]
        assert stroke.state["stroke_style"] == "#00f"
        assert stroke.state["line_width"] == ctx.defaults.stroke_width

    def test_radial_gradient_offset_toward_top_left(self, recording_surface, ctx):
        props = {"x": 30, "y": 30, "r": 30, "fill": "#fff", "gradient": {"from": "#ff0", "to": "#f80"}}
        draw(recording_surface, "circle", props, ctx)

        style = recording_surface.ops("fill")[0].state["fill_style"]
        assert isinstance(style, Gradient)
        assert style.kind == "radial"
        assert style.coords == (20, 20, 0, 30, 30, 30)
        assert style.stops == [(0.0, "#ff0"), (1.0, "#f80")]

    def test_gradient_missing_end_uses_fill(self, recording_surface, ctx):
        props = {"x": 0, "y": 0, "r": 5, "fill": "#123456", "gradient": {"from": "#fff"}}
        draw(recording_surface, "circle", props, ctx)

        style = recording_surface.ops("fill")[0].state["fill_style"]
        assert style.stops[-1] == (1.0, "#123456")

    def test_shadow(self, recording_surface, ctx):
        draw(recording_surface, "circle", {"x": 0, "y": 0, "r": 5, "fill": "#f00", "shadow": "rgba(0,0,0,0.5)"}, ctx)

        state = recording_surface.ops("fill")[0].state
        assert state["shadow_color"] == "rgba(0,0,0,0.5)"
        assert state["shadow_blur"] == ctx.defaults.shadow_blur
        assert state["shadow_offset_x"] == ctx.defaults.shadow_offset

    def test_shadow_true_uses_configured_color(self, recording_surface):
        ctx = RenderContext(defaults=RenderDefaults(shadow_color="#336699"), layer_id="layer")
        draw(recording_surface, "circle", {"x": 0, "y": 0, "r": 5, "fill": "#f00", "shadow": True}, ctx)

        assert recording_surface.ops("fill")[0].state["shadow_color"] == "#336699"

    def test_shadow_false_draws_plain(self, recording_surface, ctx):
        draw(recording_surface, "rectangle", {"x": 0, "y": 0, "width": 5, "height": 5, "fill": "#f00", "shadow": False}, ctx)

        assert recording_surface.ops("fill")[0].state["shadow_blur"] == 0

    def test_glow_has_no_offset(self, recording_surface, ctx):
        draw(recording_surface, "circle", {"x": 0, "y": 0, "r": 5, "fill": "#f00", "glow": "#ff0"}, ctx)

        state = recording_surface.ops("fill")[0].state
        assert state["shadow_color"] == "#ff0"
        assert state["shadow_blur"] == ctx.defaults.glow_blur
        assert state["shadow_offset_x"] == 0


class TestEllipse:

    def test_drawn_around_translated_origin(self, recording_surface, ctx):
        draw(recording_surface, "ellipse", {"x": 40, "y": 30, "rx": 20, "ry": 10, "rotation": 90, "fill": "#0f0"}, ctx)

        assert recording_surface.ops("translate")[0].args == (40, 30)
        assert recording_surface.ops("rotate")[0].args[0] == pytest.approx(math.pi / 2)
        assert recording_surface.ops("ellipse")[0].args[:4] == (0, 0, 20, 10)

    def test_rotation_applied_to_points(self, recording_surface, ctx):
        draw(recording_surface, "ellipse", {"x": 40, "y": 30, "rx": 20, "ry": 10, "rotation": 90, "fill": "#0f0"}, ctx)

        first = recording_surface.painted_paths[0][0].points[0]
        assert first == (pytest.approx(40), pytest.approx(50))


class TestRectangle:

    def test_plain(self, recording_surface, ctx):
        draw(recording_surface, "rectangle", {"x": 5, "y": 5, "width": 20, "height": 10, "fill": "#000"}, ctx)

        assert recording_surface.ops("rect")[0].args == (5, 5, 20, 10)

    def test_rounded_corners(self, recording_surface, ctx):
        draw(recording_surface, "rectangle", {"x": 0, "y": 0, "width": 40, "height": 20, "borderRadius": 5, "fill": "#000"}, ctx)

        assert recording_surface.ops("rect") == []
        assert len(recording_surface.ops("quadratic_curve_to")) == 4

    def test_diagonal_gradient(self, recording_surface, ctx):
        props = {"x": 10, "y": 20, "width": 100, "height": 50, "fill": "#000", "gradient": {"from": "#fff", "to": "#000"}}
        draw(recording_surface, "rectangle", props, ctx)

        style = recording_surface.ops("fill")[0].state["fill_style"]
        assert style.kind == "linear"
        assert style.coords == (10, 20, 110, 70)


class TestLine:

    def test_round_cap_and_default_width(self, recording_surface, ctx):
        draw(recording_surface, "line", {"x1": 0, "y1": 0, "x2": 10, "y2": 10}, ctx)

        stroke = recording_surface.ops("stroke")[0]
        assert stroke.state["line_cap"] == "round"
        assert stroke.state["line_width"] == ctx.defaults.line_width
        assert stroke.state["stroke_style"] == ctx.defaults.line_color

    def test_dash_applied_then_reset(self, recording_surface, ctx):
        draw(recording_surface, "line", {"x1": 0, "y1": 0, "x2": 100, "y2": 0, "dash": [5, 5]}, ctx)

        assert [op.args[0] for op in recording_surface.ops("set_line_dash")] == [[5.0, 5.0], []]
        assert recording_surface.ops("stroke")[0].state["line_dash"] == (5.0, 5.0)

    def test_glow_uses_line_color(self, recording_surface, ctx):
        draw(recording_surface, "line", {"x1": 0, "y1": 0, "x2": 1, "y2": 1, "color": "#0ff", "glow": True}, ctx)

        state = recording_surface.ops("stroke")[0].state
        assert state["shadow_color"] == "#0ff"
        assert state["shadow_blur"] == ctx.defaults.line_glow_blur

    def test_gradient_along_line(self, recording_surface, ctx):
        props = {"x1": 0, "y1": 0, "x2": 50, "y2": 0, "gradient": {"from": "#f00", "to": "#00f"}}
        draw(recording_surface, "line", props, ctx)

        style = recording_surface.ops("stroke")[0].state["stroke_style"]
        assert style.coords == (0, 0, 50, 0)


class TestArrow:

    def test_head_geometry(self):
        left, right = arrow_head((100, 0), 0.0, 12, math.radians(30))

        assert left == (pytest.approx(100 - 12 * math.cos(math.radians(30))), pytest.approx(6))
        assert right == (pytest.approx(100 - 12 * math.cos(math.radians(30))), pytest.approx(-6))

    def test_shaft_then_head(self, recording_surface, ctx):
        draw(recording_surface, "arrow", {"x": 0, "y": 0, "dx": 100, "dy": 0}, ctx)

        assert len(recording_surface.ops("stroke")) == 2
        shaft, head = recording_surface.painted_paths
        assert shaft[0].points == [(0, 0), (100, 0)]
        assert len(head) == 2
        assert all(sub.points[0] == (100, 0) for sub in head)

    def test_round_join_and_width(self, recording_surface, ctx):
        draw(recording_surface, "arrow", {"x": 0, "y": 0, "dx": 0, "dy": 50}, ctx)

        state = recording_surface.ops("stroke")[-1].state
        assert state["line_join"] == "round"
        assert state["line_width"] == ctx.defaults.arrow_width

    def test_head_size_prop(self, recording_surface, ctx):
        draw(recording_surface, "arrow", {"x": 0, "y": 0, "dx": 100, "dy": 0, "headSize": 20}, ctx)

        tail = recording_surface.painted_paths[1][0].points[1]
        assert tail[0] == pytest.approx(100 - 20 * math.cos(math.radians(30)))


class TestText:

    def test_font_and_alignment(self, recording_surface, ctx):
        draw(recording_surface, "text", {"x": 50, "y": 50, "text": "Force", "fontSize": 20, "fontFamily": "Arial"}, ctx)

        state = recording_surface.ops("fill_text")[0].state
        assert state["font"] == "20px Arial"
        assert state["text_align"] == "center"
        assert state["text_baseline"] == "middle"

    def test_background_box_sized_from_measurement(self, recording_surface, ctx):
        props = {"x": 100, "y": 50, "text": "abcd", "fontSize": 20, "background": {"color": "#eee"}}
        draw(recording_surface, "text", props, ctx)

        # recording surface measures half the font size per character
        width, height = 40 + 2 * ctx.defaults.text_padding, 20 + 2 * ctx.defaults.text_padding
        box = recording_surface.ops("fill_rect")[0]
        assert box.args == (100 - width / 2, 50 - height / 2, width, height)
        assert box.state["fill_style"] == "#eee"

    def test_background_not_shadowed(self, recording_surface, ctx):
        props = {"x": 0, "y": 0, "text": "a", "shadow": "#000", "background": True}
        draw(recording_surface, "text", props, ctx)

        assert recording_surface.ops("fill_rect")[0].state["shadow_blur"] == 0
        assert recording_surface.ops("fill_text")[0].state["shadow_blur"] == ctx.defaults.text_shadow_blur

    def test_stroke_before_fill(self, recording_surface, ctx):
        draw(recording_surface, "text", {"x": 0, "y": 0, "text": "a", "stroke": "#000"}, ctx)

        names = [n for n in recording_surface.names() if n.endswith("_text")]
        assert names == ["stroke_text", "fill_text"]

    def test_non_string_text(self, recording_surface, ctx):
        draw(recording_surface, "text", {"x": 0, "y": 0, "text": 42}, ctx)

        assert recording_surface.ops("fill_text")[0].args[0] == "42"


class TestPolygonAndPath:

    def test_polygon_point_formats(self, recording_surface, ctx):
        points = [{"x": 0, "y": 0}, [10, 0], (10, 10)]
        draw(recording_surface, "polygon", {"points": points, "fill": "#000"}, ctx)

        path = recording_surface.painted_paths[0][0]
        assert path.points == [(0, 0), (10, 0), (10, 10)]
        assert path.closed

    def test_polygon_too_few_points_reported(self, recording_surface, ctx):
        draw(recording_surface, "polygon", {"points": [[0, 0], [1, 1]], "fill": "#000"}, ctx)

        assert recording_surface.ops("fill") == []
        assert isinstance(ctx.issues[0], InvalidShapeError)

    @pytest.mark.parametrize("points", [5, "0,0 10,0 10,10", {"x": 1, "y": 2}])
    def test_polygon_points_not_a_list_reported(self, recording_surface, ctx, points):
        draw(recording_surface, "polygon", {"points": points, "fill": "#000"}, ctx)

        assert recording_surface.ops("fill") == []
        assert isinstance(ctx.issues[0], InvalidShapeError)
        assert "points must be a list" in ctx.issues[0].reason
        assert recording_surface.depth == 0

    def test_polygon_gradient_over_bounds(self, recording_surface, ctx):
        props = {"points": [[10, 5], [50, 20], [30, 60]], "fill": "#000", "gradient": {"from": "#fff", "to": "#000"}}
        draw(recording_surface, "polygon", props, ctx)

        assert recording_surface.ops("fill")[0].state["fill_style"].coords == (10, 5, 50, 60)

    def test_path_curve_reported_rest_drawn(self, recording_surface, ctx):
        draw(recording_surface, "path", {"path": "M 0 0 Q 5 5 10 0 L 10 10 Z", "fill": "#000"}, ctx)

        assert len(recording_surface.ops("fill")) == 1
        assert [type(issue) for issue in ctx.issues] == [UnsupportedPathCommandError]

    def test_empty_path_draws_nothing(self, recording_surface, ctx):
        draw(recording_surface, "path", {"path": "", "fill": "#000"}, ctx)

        assert recording_surface.ops("fill") == []
        assert ctx.issues == []
