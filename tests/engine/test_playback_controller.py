"""
Tests for the PlaybackController state machine.

Tests that PlaybackController:
- Follows the documented transitions (and no-ops)
- Keeps the cursor within [0, duration]
- Fires completion exactly once per play cycle
- Rejects ticks from a stale generation
"""

from unittest.mock import MagicMock

import pytest

from sceneplay.models.enums import PlaybackMode
from sceneplay.models.events import EventType


class TestInitialState:

    def test_created_idle_without_scene(self, controller):
        state = controller.state()

        assert state.mode == PlaybackMode.IDLE
        assert state.scene is None
        assert state.cursor_ms == 0
        assert state.generation == 0

    def test_commands_without_scene_are_noops(self, controller):
        assert controller.play() is False
        assert controller.seek(100) is False
        assert controller.restart() is False
        assert controller.advance(10) is False
        assert controller.mode == PlaybackMode.IDLE


class TestTransitions:

    def test_load_resets_to_idle_and_bumps_generation(self, controller, pulse_scene):
        assert controller.load_scene(pulse_scene) == 1
        controller.play()
        controller.advance(300)

        assert controller.load_scene(pulse_scene) == 2
        assert controller.mode == PlaybackMode.IDLE
        assert controller.cursor_ms == 0

    def test_play_pause_play(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)

        assert controller.play() is True
        assert controller.mode == PlaybackMode.PLAYING
        assert controller.play() is False

        assert controller.pause() is True
        assert controller.mode == PlaybackMode.PAUSED
        assert controller.pause() is False

        assert controller.play() is True
        assert controller.mode == PlaybackMode.PLAYING

    def test_pause_from_idle_is_noop(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)

        assert controller.pause() is False
        assert controller.mode == PlaybackMode.IDLE

    def test_play_after_completion_is_noop(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)
        controller.play()
        controller.advance(5000)

        assert controller.mode == PlaybackMode.COMPLETED
        assert controller.play() is False
        assert controller.mode == PlaybackMode.COMPLETED

    def test_seek_back_from_completed_pauses(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)
        controller.play()
        controller.advance(5000)

        controller.seek(500)
        assert controller.mode == PlaybackMode.PAUSED
        assert controller.cursor_ms == 500

    def test_seek_to_end_keeps_completed(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)
        controller.play()
        controller.advance(5000)

        controller.seek(99999)
        assert controller.mode == PlaybackMode.COMPLETED
        assert controller.cursor_ms == pulse_scene.duration_ms

    def test_seek_keeps_mode(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)
        controller.play()

        controller.seek(800)
        assert controller.mode == PlaybackMode.PLAYING
        controller.seek(200)
        assert controller.mode == PlaybackMode.PLAYING
        assert controller.cursor_ms == 200

    def test_restart_while_playing_keeps_playing(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)
        controller.play()
        controller.advance(700)

        controller.restart()
        assert controller.cursor_ms == 0
        assert controller.mode == PlaybackMode.PLAYING

    def test_restart_after_completion_plays_again(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)
        controller.play()
        controller.advance(5000)

        controller.restart()
        assert controller.mode == PlaybackMode.PLAYING

    def test_restart_when_paused_stays_paused(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)
        controller.play()
        controller.advance(400)
        controller.pause()

        controller.restart()
        assert controller.mode == PlaybackMode.PAUSED
        assert controller.cursor_ms == 0

    def test_restart_from_idle_pauses(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)

        controller.restart()
        assert controller.mode == PlaybackMode.PAUSED


class TestCursor:

    @pytest.mark.parametrize("requested,expected", [(-50, 0), (0, 0), (1234.5, 1234.5), (2000, 2000), (9999, 2000)])
    def test_seek_clamps(self, controller, pulse_scene, requested, expected):
        controller.load_scene(pulse_scene)
        controller.seek(requested)

        assert controller.cursor_ms == expected

    def test_advance_never_overshoots(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)
        controller.play()
        controller.advance(1900)
        controller.advance(500)

        assert controller.cursor_ms == 2000
        assert controller.mode == PlaybackMode.COMPLETED

    def test_advance_monotonic(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)
        controller.play()
        seen = []
        for delta in (16.6, 0, 33.3, -20, float("nan"), 16.6):
            controller.advance(delta)
            seen.append(controller.cursor_ms)

        assert seen == sorted(seen)
        assert controller.cursor_ms == pytest.approx(66.5)

    def test_advance_ignored_unless_playing(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)

        assert controller.advance(100) is False
        controller.play()
        controller.pause()
        assert controller.advance(100) is False
        assert controller.cursor_ms == 0

    def test_progress(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)
        controller.seek(500)

        assert controller.state().progress == pytest.approx(0.25)


class TestGeneration:

    def test_stale_tick_discarded(self, controller, pulse_scene):
        old = controller.load_scene(pulse_scene)
        controller.play()
        controller.advance(100, generation=old)

        new = controller.load_scene(pulse_scene)
        controller.play()

        assert controller.advance(500, generation=old) is False
        assert controller.cursor_ms == 0
        assert controller.advance(500, generation=new) is True
        assert controller.cursor_ms == 500


class TestCompletion:

    def test_listener_fires_once(self, controller, pulse_scene):
        listener = MagicMock()
        controller.add_completion_listener(listener)
        controller.load_scene(pulse_scene)
        controller.play()

        controller.advance(2500)
        controller.advance(100)
        controller.seek(2000)

        listener.assert_called_once_with(pulse_scene, 1)

    def test_restart_rearms_completion(self, controller, pulse_scene):
        listener = MagicMock()
        controller.add_completion_listener(listener)
        controller.load_scene(pulse_scene)
        controller.play()
        controller.advance(2500)

        controller.restart()
        controller.advance(2500)

        assert listener.call_count == 2

    def test_failing_listener_does_not_block_others(self, controller, pulse_scene):
        broken = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        controller.add_completion_listener(broken)
        controller.add_completion_listener(healthy)
        controller.load_scene(pulse_scene)
        controller.play()

        controller.advance(2000)

        healthy.assert_called_once()
        assert controller.mode == PlaybackMode.COMPLETED

    def test_removed_listener_not_called(self, controller, pulse_scene):
        listener = MagicMock()
        controller.add_completion_listener(listener)
        controller.remove_completion_listener(listener)
        controller.load_scene(pulse_scene)
        controller.play()
        controller.advance(2000)

        listener.assert_not_called()


class TestQueuedEvents:

    def test_state_changes_and_completion_queued_in_order(self, controller, pulse_scene):
        controller.load_scene(pulse_scene)
        controller.play()
        controller.advance(2000)

        events = controller.drain_events()
        assert [e.type for e in events] == [
            EventType.PLAYBACK_STATE_CHANGED,
            EventType.PLAYBACK_STATE_CHANGED,
            EventType.PLAYBACK_COMPLETED,
        ]
        assert (events[0].old, events[0].new) == (PlaybackMode.IDLE, PlaybackMode.PLAYING)
        assert events[1].new == PlaybackMode.COMPLETED
        assert controller.drain_events() == []
