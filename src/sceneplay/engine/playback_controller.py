"""
Playback Controller - scene time state machine

Owns the playback cursor for one loaded scene and moves it under
play / pause / seek / restart / advance. Knows nothing about rendering or
wall-clock time: the frame loop feeds it deltas.

State machine:

    load_scene   any       -> IDLE (cursor 0, generation + 1)
    play         IDLE      -> PLAYING
                 PAUSED    -> PLAYING
    pause        PLAYING   -> PAUSED
    seek         COMPLETED -> PAUSED (only when t < duration)
    restart      any       -> PLAYING if play was requested, else PAUSED
    advance      PLAYING   -> COMPLETED (when the cursor reaches duration)

Everything else is a no-op. State changes are queued as events; callers
publish them with drain_events().
"""

import math
from typing import Callable, List, Optional

from sceneplay.models.enums import PlaybackMode
from sceneplay.models.events import Event, PlaybackCompletedEvent, PlaybackStateChangedEvent
from sceneplay.models.playback import PlaybackState
from sceneplay.models.scene import Scene
from sceneplay.utils.logger import get_category_logger, LogCategory

log = get_category_logger(LogCategory.PLAYBACK)

CompletionListener = Callable[[Scene, int], None]


class PlaybackController:
    """
    Deterministic playback state machine.

    Guarantees:
    - cursor always within [0, duration]
    - cursor never decreases while PLAYING
    - completion listeners fire exactly once per play cycle (re-armed by
      restart, load_scene, or seeking back from the end)
    - advance() with a stale generation is ignored

    Example:
        controller = PlaybackController()
        controller.load_scene(scene)            # generation 1, IDLE
        controller.play()
        controller.advance(16.7, generation=1)
        controller.cursor_ms                    # 16.7
    """

    def __init__(self) -> None:
        self._scene: Optional[Scene] = None
        self._cursor_ms = 0.0
        self._mode = PlaybackMode.IDLE
        self._generation = 0

        # play requested and not since cancelled by pause/seek-back
        self._play_intent = False
        self._completion_fired = False

        self._completion_listeners: List[CompletionListener] = []
        self._outbox: List[Event] = []

    # ===== Read-only view =====

    @property
    def scene(self) -> Optional[Scene]:
        return self._scene

    @property
    def cursor_ms(self) -> float:
        return self._cursor_ms

    @property
    def mode(self) -> PlaybackMode:
        return self._mode

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_playing(self) -> bool:
        return self._mode == PlaybackMode.PLAYING

    def state(self) -> PlaybackState:
        return PlaybackState(
            cursor_ms=self._cursor_ms,
            mode=self._mode,
            scene=self._scene,
            generation=self._generation,
        )

    # ===== Listeners / events =====

    def add_completion_listener(self, listener: CompletionListener) -> None:
        self._completion_listeners.append(listener)

    def remove_completion_listener(self, listener: CompletionListener) -> None:
        if listener in self._completion_listeners:
            self._completion_listeners.remove(listener)

    def drain_events(self) -> List[Event]:
        """Return and clear the queued state-change / completion events"""
        events, self._outbox = self._outbox, []
        return events

    def _set_mode(self, mode: PlaybackMode) -> None:
        if mode == self._mode:
            return
        old = self._mode
        self._mode = mode
        self._outbox.append(PlaybackStateChangedEvent(old, mode, self._cursor_ms))
        log.debug(f"{old.name} → {mode.name}", cursor_ms=round(self._cursor_ms, 2), generation=self._generation)

    def _fire_completion(self) -> None:
        if self._completion_fired:
            return
        self._completion_fired = True
        self._outbox.append(PlaybackCompletedEvent(self._scene.id, self._generation))
        log.info("Playback completed", scene=self._scene.id, generation=self._generation)

        for listener in list(self._completion_listeners):
            try:
                listener(self._scene, self._generation)
            except Exception as e:
                log.error(f"Completion listener failed: {getattr(listener, '__name__', listener)}", exception=e)

    # ===== Commands =====

    def load_scene(self, scene: Scene) -> int:
        """
        Replace the active scene (from any state).

        Returns:
            The new generation; ticks tagged with older generations are ignored
        """
        self._scene = scene
        self._generation += 1
        self._cursor_ms = 0.0
        self._play_intent = False
        self._completion_fired = False
        self._set_mode(PlaybackMode.IDLE)

        log.info(
            "Scene loaded",
            scene=scene.id,
            generation=self._generation,
            duration_ms=scene.duration_ms,
            layers=len(scene.layers),
        )
        return self._generation

    def play(self) -> bool:
        if self._scene is None:
            return False
        if self._mode not in (PlaybackMode.IDLE, PlaybackMode.PAUSED):
            return False
        self._play_intent = True
        self._set_mode(PlaybackMode.PLAYING)
        return True

    def pause(self) -> bool:
        if self._mode != PlaybackMode.PLAYING:
            return False
        self._play_intent = False
        self._set_mode(PlaybackMode.PAUSED)
        return True

    def seek(self, time_ms: float) -> bool:
        """
        Move the cursor to time_ms, clamped into [0, duration].

        Mode is kept, except that seeking back from COMPLETED pauses (and
        re-arms completion).
        """
        if self._scene is None:
            return False

        self._cursor_ms = self._scene.clamp(time_ms)
        if self._cursor_ms < self._scene.duration_ms:
            self._completion_fired = False
            if self._mode == PlaybackMode.COMPLETED:
                self._play_intent = False
                self._set_mode(PlaybackMode.PAUSED)

        log.debug("Seek", requested_ms=time_ms, cursor_ms=self._cursor_ms, mode=self._mode.name)
        return True

    def restart(self) -> bool:
        """Back to 0; keeps playing if play was requested, else paused"""
        if self._scene is None:
            return False

        self._cursor_ms = 0.0
        self._completion_fired = False
        self._set_mode(PlaybackMode.PLAYING if self._play_intent else PlaybackMode.PAUSED)
        return True

    def advance(self, delta_ms: float, generation: Optional[int] = None) -> bool:
        """
        Move the cursor forward by delta_ms while PLAYING.

        Args:
            delta_ms: Elapsed time; negative or NaN deltas are ignored
            generation: Generation the tick was scheduled for (None = current)

        Returns:
            True if the cursor moved (or completed)
        """
        if generation is not None and generation != self._generation:
            log.debug("Stale tick ignored", tick_generation=generation, generation=self._generation)
            return False
        if self._mode != PlaybackMode.PLAYING or self._scene is None:
            return False
        if math.isnan(delta_ms) or delta_ms < 0:
            return False

        duration = self._scene.duration_ms
        self._cursor_ms = min(self._cursor_ms + delta_ms, duration)

        if self._cursor_ms >= duration:
            self._cursor_ms = duration
            self._set_mode(PlaybackMode.COMPLETED)
            self._fire_completion()
        return True
