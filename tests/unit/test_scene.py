"""Unit tests for scene primitives."""

import pytest

from skewtlogp.plot.scene import Line, Polyline, Rect, RenderScene, SceneBuilder, Text
from skewtlogp.plot.styles import DEFAULT_STYLE, LineStyle


class TestPrimitives:
    """Tests for individual primitives."""

    def test_rect_scaled(self):
        rect = Rect(1.0, 2.0, 3.0, 4.0, "#ffffff", "mask").scaled(2.0)
        assert (rect.x, rect.y, rect.width, rect.height) == (2.0, 4.0, 6.0, 8.0)
        assert rect.fill == "#ffffff"
        assert rect.layer == "mask"

    def test_polyline_scaled(self):
        line = Polyline(((0.0, 1.0), (2.0, 3.0)), "#000000", 1.5, (3.0,)).scaled(2.0)
        assert line.points == ((0.0, 2.0), (4.0, 6.0))
        assert line.width == 3.0
        assert line.dash == (6.0,)

    def test_line_scaled_solid(self):
        line = Line(0.0, 0.0, 1.0, 1.0, "#0000ff", 0.75).scaled(4.0)
        assert (line.x2, line.y2, line.width) == (4.0, 4.0, 3.0)
        assert line.dash is None

    def test_text_scaled_keeps_rotation(self):
        text = Text("1000", 10.0, 20.0, 7.0, rotation=-30.0).scaled(3.0)
        assert (text.x, text.y, text.font_size) == (30.0, 60.0, 21.0)
        assert text.rotation == -30.0
        assert text.content == "1000"

    def test_primitives_are_frozen(self):
        rect = Rect(0.0, 0.0, 1.0, 1.0, "#ffffff")
        with pytest.raises(AttributeError):
            rect.x = 5.0

    def test_to_dict(self):
        data = Polyline(((0.0, 1.0),), "#ff0000", 2.0, layer="dewpoint_trace").to_dict()
        assert data == {
            "type": "polyline",
            "layer": "dewpoint_trace",
            "points": [[0.0, 1.0]],
            "color": "#ff0000",
            "width": 2.0,
            "dash": None,
        }

    def test_text_to_dict_type(self):
        assert Text("a", 0.0, 0.0, 1.0).to_dict()["type"] == "text"


class TestRenderScene:
    """Tests for the scene container and builder."""

    @pytest.fixture
    def scene(self):
        builder = SceneBuilder(100.0, 200.0)
        builder.add(Rect(0.0, 0.0, 100.0, 200.0, "#ffffff", "background"))
        builder.extend([
            Line(0.0, 0.0, 10.0, 10.0, "#000000", 1.0, layer="isotherm"),
            Line(5.0, 0.0, 15.0, 10.0, "#000000", 1.0, layer="isotherm"),
        ])
        builder.add(Text("x", 1.0, 1.0, 5.0, layer="labels"))
        return builder.build()

    def test_length_and_iteration(self, scene):
        assert len(scene) == 4
        assert [p.kind for p in scene] == ["rect", "line", "line", "text"]

    def test_layers_in_order(self, scene):
        assert scene.layers() == ["background", "isotherm", "labels"]

    def test_by_layer(self, scene):
        assert len(scene.by_layer("isotherm")) == 2
        assert scene.by_layer("missing") == []

    def test_scaled(self, scene):
        scaled = scene.scaled(2.0)
        assert (scaled.width, scaled.height) == (200.0, 400.0)
        assert scaled.primitives[1].x2 == 20.0

    def test_to_dict(self, scene):
        data = scene.to_dict()
        assert data["width"] == 100.0
        assert len(data["primitives"]) == 4

    def test_builder_does_not_share_state(self, scene):
        assert RenderScene(1.0, 1.0).primitives == ()
        assert isinstance(scene.primitives, tuple)


class TestStyles:
    """Tests for line styles."""

    def test_scaled_width_and_dash(self):
        style = LineStyle("#008000", 0.75, (3.0,))
        assert style.scaled_width(2.0) == 1.5
        assert style.scaled_dash(2.0) == (6.0,)
        assert LineStyle("#000000", 1.0).scaled_dash(2.0) is None

    def test_with_colors(self):
        style = DEFAULT_STYLE.with_colors({"isobar": "#123456", "background": "#eeeeee"})
        assert style.isobar.color == "#123456"
        assert style.isobar.width == DEFAULT_STYLE.isobar.width
        assert style.background == "#eeeeee"
        assert DEFAULT_STYLE.isobar.color == "#0000ff"

    def test_unknown_element(self):
        with pytest.raises(ValueError):
            DEFAULT_STYLE.with_colors({"clouds": "#ffffff"})
