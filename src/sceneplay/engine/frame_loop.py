"""
FrameLoop - asyncio per-frame scheduler

Drives a PlaybackController from wall-clock time while it is PLAYING:
sleep one frame, measure the real elapsed time, advance the controller,
paint the scene, publish a PLAYBACK_TICK event.

Architecture:
- One asyncio task per play cycle; it exits on its own when the controller
  stops playing (pause, completion) or a new scene is loaded
- Each task is bound to the generation current at start(); a tick whose
  generation no longer matches is discarded
- The cursor comes only from the controller; the loop never accumulates time
  of its own
"""

import asyncio
import time
from typing import TYPE_CHECKING, Callable, Dict, Optional

from sceneplay.engine.playback_controller import PlaybackController
from sceneplay.errors import RenderTargetError
from sceneplay.models.events import PlaybackTickEvent
from sceneplay.models.frame import FrameReport
from sceneplay.rendering.scene_renderer import SceneRenderer, issue_summary
from sceneplay.utils.logger import get_category_logger, LogCategory

if TYPE_CHECKING:
    from sceneplay.services.event_bus import EventBus

log = get_category_logger(LogCategory.FRAME_LOOP)


class FrameLoop:
    """
    Cooperative render loop for one playback session.

    Args:
        controller: State machine to advance
        renderer: Paints (scene, cursor) onto the surface
        surface: DrawingSurface target
        event_bus: Receives tick, state-change and completion events
        fps: Tick rate; None = the loaded scene's own fps
        max_delta_ms: Wall-clock gaps above this are clamped (suspended
            process, debugger) so the cursor does not jump to the end
        clock: Monotonic seconds source (injectable for tests)

    Example:
        loop = FrameLoop(controller, SceneRenderer(), RasterSurface(), bus)
        controller.play()
        await loop.start()
        ...
        await loop.stop()
    """

    def __init__(
        self,
        controller: PlaybackController,
        renderer: SceneRenderer,
        surface,
        event_bus: "EventBus",
        fps: Optional[float] = None,
        max_delta_ms: float = 250.0,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.controller = controller
        self.renderer = renderer
        self.surface = surface
        self.event_bus = event_bus
        self.fps = fps
        self.max_delta_ms = max_delta_ms
        self.clock = clock

        self.render_task: Optional[asyncio.Task] = None

        # Metrics
        self.frames_rendered = 0
        self.failed_passes = 0
        self.stale_ticks = 0

    @property
    def running(self) -> bool:
        return self.render_task is not None and not self.render_task.done()

    def frame_interval(self) -> float:
        """Seconds between ticks"""
        fps = self.fps
        if not fps and self.controller.scene is not None:
            fps = self.controller.scene.fps
        return 1.0 / (fps or 30.0)

    # === Lifecycle ===

    async def start(self) -> None:
        """Start ticking (bound to the controller's current generation)"""
        if self.running:
            log.warn("FrameLoop already running")
            return
        if not self.controller.is_playing:
            log.debug("FrameLoop not started: controller is not playing", mode=self.controller.mode.name)
            return

        generation = self.controller.generation
        self.render_task = asyncio.create_task(self._run(generation))
        log.info(f"FrameLoop started @ {1.0 / self.frame_interval():g} FPS", generation=generation)

    async def stop(self) -> None:
        """Cancel the running task, if any"""
        if not self.running:
            return
        self.render_task.cancel()
        try:
            await self.render_task
        except asyncio.CancelledError:
            pass

        log.info(
            "FrameLoop stopped",
            frames_rendered=self.frames_rendered,
            failed_passes=self.failed_passes,
        )

    # === Rendering ===

    async def render_now(self) -> Optional[FrameReport]:
        """Paint and publish the current cursor without advancing"""
        return await self._render(self.controller.generation)

    async def _render(self, generation: int) -> Optional[FrameReport]:
        scene = self.controller.scene
        if scene is None:
            return None
        if generation != self.controller.generation:
            self.stale_ticks += 1
            log.debug("Stale frame discarded", tick_generation=generation, generation=self.controller.generation)
            return None

        cursor = self.controller.cursor_ms
        try:
            report = self.renderer.render(scene, cursor, self.surface)
        except RenderTargetError as e:
            # only this pass fails, the next tick tries again
            self.failed_passes += 1
            log.error(f"Render pass failed: {e.message}", cursor_ms=round(cursor, 2), context=e.details)
            return None
        except Exception as e:
            # counted like a target failure; the next tick tries again
            self.failed_passes += 1
            log.error("Render pass crashed", cursor_ms=round(cursor, 2), exception=e)
            return None

        self.frames_rendered += 1
        if report.issues:
            log.debug("Frame issues", summary=issue_summary(report))

        await self.event_bus.publish(PlaybackTickEvent(cursor, generation, report))
        return report

    async def publish_controller_events(self) -> None:
        for event in self.controller.drain_events():
            await self.event_bus.publish(event)

    # === Core Loop ===

    async def _run(self, generation: int) -> None:
        frame_delay = self.frame_interval()
        last = self.clock()

        while True:
            await asyncio.sleep(frame_delay)

            if generation != self.controller.generation:
                self.stale_ticks += 1
                log.debug("Scene replaced, loop exits", tick_generation=generation)
                return
            if not self.controller.is_playing:
                return

            now = self.clock()
            delta_ms = min((now - last) * 1000.0, self.max_delta_ms)
            last = now

            self.controller.advance(delta_ms, generation)
            await self._render(generation)
            await self.publish_controller_events()

            if not self.controller.is_playing:
                return

    def get_metrics(self) -> Dict:
        return {
            "running": self.running,
            "frame_interval_ms": self.frame_interval() * 1000.0,
            "frames_rendered": self.frames_rendered,
            "failed_passes": self.failed_passes,
            "stale_ticks": self.stale_ticks,
        }
