import pytest

from sceneplay.engine.playback_controller import PlaybackController
from sceneplay.models.config import AppConfig, PlaybackConfig, RenderDefaults
from sceneplay.rendering.recording_surface import RecordingSurface
from sceneplay.rendering.raster_surface import RasterSurface
from sceneplay.schemas.scene import parse_scene
from sceneplay.services.event_bus import EventBus


class FakeClock:
    """Monotonic clock that moves a fixed step on every read"""

    def __init__(self, step_ms: float = 15.625):
        self.now = 0.0
        self.step = step_ms / 1000.0

    def __call__(self) -> float:
        self.now += self.step
        return self.now


@pytest.fixture
def fake_clock():
    # 1/64 s: every multiple is exact in binary floating point
    return FakeClock(step_ms=15.625)


@pytest.fixture
def pulse_scene_data():
    """One circle growing r 10 -> 50 over [0, 1000] ms."""
    return {
        "id": "pulse",
        "duration": 2000,
        "fps": 30,
        "layers": [
            {
                "id": "dot",
                "type": "circle",
                "props": {"x": 50, "y": 50, "r": 10, "fill": "#ff0000"},
                "animations": [
                    {"property": "r", "from": 10, "to": 50, "start": 0, "end": 1000},
                ],
            }
        ],
    }


@pytest.fixture
def pulse_scene(pulse_scene_data):
    return parse_scene(pulse_scene_data)


@pytest.fixture
def short_scene():
    """125 ms scene, finishes after exactly 8 fake-clock ticks."""
    return parse_scene({
        "id": "short",
        "duration": 125,
        "fps": 1000,
        "layers": [
            {"id": "box", "type": "rectangle", "props": {"x": 0, "y": 0, "width": 10, "height": 10, "fill": "#000"}},
        ],
    })


@pytest.fixture
def controller():
    return PlaybackController()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def recording_surface():
    return RecordingSurface(200, 200)


@pytest.fixture
def raster_surface():
    return RasterSurface(200, 200, background="#ffffff")


@pytest.fixture
def render_defaults():
    return RenderDefaults()


@pytest.fixture
def fast_config():
    """Config with a 1 kHz frame loop so async tests finish quickly."""
    return AppConfig(playback=PlaybackConfig(fps=1000.0, autoplay=False, max_frame_delta_ms=250.0))


@pytest.fixture
def stalled_clock():
    """A clock that jumps a full second between frames."""
    return FakeClock(step_ms=1000.0)
