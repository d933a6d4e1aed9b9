"""
PlaybackSession - transport-facing adapter for one viewing session

External collaborators (HTTP routes, SSE streams, UI bindings) talk to the
engine only through this class: they hand over answers, send transport
commands and subscribe to events on the session's EventBus.

Events published:
- SCENE_LOADED             after a scene validated and became active
- PLAYBACK_STATE_CHANGED   on every controller mode change
- PLAYBACK_TICK            after every painted frame (cursor + resolved layers)
- PLAYBACK_COMPLETED       once per play cycle
- EXTERNAL_MEDIA_RECEIVED  when an answer is a manim/plot/svg/physics result
"""

from typing import Any, Mapping, Optional, Union

from sceneplay.engine.frame_loop import FrameLoop
from sceneplay.engine.playback_controller import PlaybackController
from sceneplay.errors import SceneValidationError
from sceneplay.models.config import AppConfig
from sceneplay.models.events import ExternalMediaReceivedEvent, SceneLoadedEvent
from sceneplay.models.frame import FrameReport
from sceneplay.models.media import ExternalMedia
from sceneplay.models.playback import PlaybackState
from sceneplay.models.scene import Scene
from sceneplay.rendering.recording_surface import RecordingSurface
from sceneplay.rendering.scene_renderer import SceneRenderer
from sceneplay.schemas.scene import parse_scene
from sceneplay.services.event_bus import EventBus
from sceneplay.utils.logger import get_category_logger, LogCategory

log = get_category_logger(LogCategory.SESSION)


class PlaybackSession:
    """
    One controller + frame loop + event bus per viewer.

    Example:
        session = PlaybackSession()
        session.event_bus.subscribe(EventType.PLAYBACK_TICK, on_tick)

        await session.ingest_answer(mock_answer("How do planets orbit?"))
        await session.play()
        ...
        await session.seek(1500)
        await session.close()
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        event_bus: Optional[EventBus] = None,
        surface=None,
        renderer: Optional[SceneRenderer] = None,
        **loop_options: Any,
    ) -> None:
        """
        Args:
            config: Render/playback settings (ConfigManager().load() or defaults)
            event_bus: Bus to publish on (new one if omitted)
            surface: DrawingSurface (headless RecordingSurface if omitted)
            renderer: Scene painter (built from config.render if omitted)
            **loop_options: Extra FrameLoop arguments (e.g. clock)
        """
        self.config = config or AppConfig()
        self.event_bus = event_bus or EventBus()
        self.controller = PlaybackController()
        self.renderer = renderer or SceneRenderer(self.config.render)
        self.surface = surface if surface is not None else RecordingSurface(
            self.config.render.width, self.config.render.height
        )
        self.frame_loop = FrameLoop(
            self.controller,
            self.renderer,
            self.surface,
            self.event_bus,
            fps=self.config.playback.fps,
            max_delta_ms=self.config.playback.max_frame_delta_ms,
            **loop_options,
        )
        self.media: Optional[ExternalMedia] = None

    # ===== Read-only view =====

    @property
    def state(self) -> PlaybackState:
        return self.controller.state()

    @property
    def scene(self) -> Optional[Scene]:
        return self.controller.scene

    # ===== Ingest =====

    async def ingest_answer(self, answer: Mapping[str, Any]) -> Union[Scene, ExternalMedia]:
        """
        Take an answer ({"text": ..., "visualization": {...}}).

        External media descriptors are passed through as an
        EXTERNAL_MEDIA_RECEIVED event; anything else must be a scene.

        Raises:
            SceneValidationError: visualization missing or not a valid scene
        """
        visualization = answer.get("visualization") if isinstance(answer, Mapping) else None
        if not isinstance(visualization, Mapping):
            raise SceneValidationError(
                "Answer has no visualization",
                issues=[{"field": "visualization", "message": "field required"}],
            )

        media = ExternalMedia.from_visualization(visualization)
        if media is not None:
            self.media = media
            log.info("External media received", kind=media.kind.value, title=media.title)
            await self.event_bus.publish(ExternalMediaReceivedEvent(media))
            return media

        return await self.load_scene(visualization)

    async def load_scene(self, data: Union[Mapping[str, Any], Scene]) -> Scene:
        """
        Validate and activate a scene.

        The previous scene stays active when validation fails (the error
        propagates before anything is touched).
        """
        scene = parse_scene(data)

        await self.frame_loop.stop()
        generation = self.controller.load_scene(scene)
        self.media = None

        await self.event_bus.publish(SceneLoadedEvent(scene.id, generation, scene.duration_ms))
        await self._flush()
        await self.frame_loop.render_now()

        if self.config.playback.autoplay:
            await self.play()
        return scene

    # ===== Transport commands =====

    async def play(self) -> bool:
        changed = self.controller.play()
        await self._flush()
        if changed:
            await self.frame_loop.start()
        return changed

    async def pause(self) -> bool:
        changed = self.controller.pause()
        if changed:
            await self.frame_loop.stop()
        await self._flush()
        return changed

    async def seek(self, time_ms: float) -> Optional[FrameReport]:
        """Move the cursor and repaint immediately"""
        if not self.controller.seek(time_ms):
            return None
        await self._flush()
        return await self.frame_loop.render_now()

    async def restart(self) -> Optional[FrameReport]:
        """Back to 0 and repaint; resumes ticking if play was requested"""
        if not self.controller.restart():
            return None
        await self._flush()
        report = await self.frame_loop.render_now()
        if self.controller.is_playing:
            await self.frame_loop.start()
        return report

    async def close(self) -> None:
        await self.frame_loop.stop()
        close = getattr(self.surface, "close", None)
        if close is not None:
            close()
        log.info("Session closed", frames_rendered=self.frame_loop.frames_rendered)

    async def _flush(self) -> None:
        await self.frame_loop.publish_controller_events()
