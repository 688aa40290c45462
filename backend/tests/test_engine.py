"""
Tests for engine.py - the snake simulation engine.
"""

import pytest
import random
import sys
import os
from unittest.mock import Mock

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import (
    UP, DOWN, LEFT, RIGHT,
    START, RUNNING, PAUSED, GAME_OVER,
    STARTED, RESUMED, PAUSED_EVENT, RESET, FOOD_EATEN, MILESTONE, GAME_OVER_EVENT,
    BASE_SPEED, GRID_SIZE, INITIAL_FOOD,
)
from engine import EngineConfig, SnakeEngine
from players.random_player import RandomPlayer


class FirstChoiceRandom(random.Random):
    """Always picks the first free cell, i.e. the next cell along row 0."""

    def choice(self, seq):
        return seq[0]


def running_engine(**config_overrides) -> SnakeEngine:
    engine = SnakeEngine(config=EngineConfig(**config_overrides), rng=random.Random(7))
    engine.start()
    return engine


class TestEngineConfig:
    """Tests for EngineConfig validation."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.grid_size == GRID_SIZE == 15
        assert config.initial_snake == [(0, 0)]
        assert config.initial_food == INITIAL_FOOD == (5, 5)
        assert config.base_speed == BASE_SPEED == 200
        assert config.speed_decrement == 5
        assert config.min_speed == 40
        assert config.milestone_interval == 5

    @pytest.mark.parametrize("overrides", [
        {"grid_size": 1},
        {"initial_snake": []},
        {"initial_snake": [(15, 0)]},
        {"initial_food": (0, 0)},
        {"initial_snake": [(1, 1), (1, 1)]},
        {"initial_direction": "NORTH"},
        {"min_speed": 0},
        {"base_speed": 30},
        {"milestone_interval": 0},
    ])
    def test_invalid_configuration_rejected(self, overrides):
        with pytest.raises(ValueError):
            SnakeEngine(config=EngineConfig(**overrides))


class TestLifecycle:
    """Tests for start(), pause() and reset()."""

    def test_new_engine_is_in_start_configuration(self):
        state = SnakeEngine().get_current_state()
        assert state.lifecycle_state == START
        assert state.snake == ((0, 0),)
        assert state.food == (5, 5)
        assert state.score == 0
        assert state.speed == 200
        assert state.direction == RIGHT

    def test_start_runs_game(self):
        engine = SnakeEngine()
        engine.start()
        assert engine.get_current_state().lifecycle_state == RUNNING

    def test_start_while_running_is_noop(self):
        engine = running_engine(initial_food=(1, 0))
        engine.tick()
        before = engine.get_current_state()
        engine.start()
        assert engine.get_current_state() == before

    def test_pause_and_resume_keep_state(self):
        engine = running_engine(initial_food=(1, 0))
        engine.tick()
        engine.request_direction_change(DOWN)
        engine.pause()
        paused = engine.get_current_state()
        assert paused.lifecycle_state == PAUSED

        engine.start()
        resumed = engine.get_current_state()
        assert resumed.lifecycle_state == RUNNING
        assert resumed.snake == paused.snake
        assert resumed.score == paused.score == 1
        assert resumed.food == paused.food
        # The pending turn survives the pause
        engine.tick()
        assert engine.get_current_state().head == (1, 1)

    def test_pause_outside_running_is_noop(self):
        engine = SnakeEngine()
        engine.pause()
        assert engine.get_current_state().lifecycle_state == START

    def test_start_after_game_over_begins_fresh_session(self):
        engine = running_engine(
            initial_snake=[(2, 2), (2, 1), (1, 1), (1, 2), (1, 3)],
            initial_direction=DOWN,
        )
        engine.score = 3
        engine.request_direction_change(LEFT)
        engine.tick()
        assert engine.get_current_state().lifecycle_state == GAME_OVER

        engine.start()
        state = engine.get_current_state()
        assert state.lifecycle_state == RUNNING
        assert state.score == 0
        assert state.direction == DOWN
        assert len(state.snake) == 5

    def test_start_resets_direction(self):
        engine = running_engine()
        engine.request_direction_change(DOWN)
        engine.tick()
        engine.reset()
        engine.start()
        engine.tick()
        assert engine.get_current_state().head == (1, 0)

    @pytest.mark.parametrize("target", [START, RUNNING, PAUSED, GAME_OVER])
    def test_reset_restores_start_configuration(self, target):
        """reset() from any state yields the exact START configuration."""
        engine = SnakeEngine(config=EngineConfig(initial_food=(1, 0)), rng=FirstChoiceRandom())
        if target != START:
            engine.start()
            for _ in range(6):
                engine.tick()
            assert engine.score == 6
            assert engine.speed == 195
        if target == PAUSED:
            engine.pause()
        if target == GAME_OVER:
            engine.lifecycle_state = GAME_OVER

        engine.reset()

        expected = SnakeEngine(config=EngineConfig(initial_food=(1, 0))).get_current_state()
        assert engine.get_current_state() == expected
        assert engine.get_current_state().lifecycle_state == START


class TestMovement:
    """Tests for tick() movement and wrapping."""

    def test_tick_moves_right_by_default(self):
        engine = running_engine()
        assert engine.tick() is True
        state = engine.get_current_state()
        assert state.snake == ((1, 0),)
        assert state.score == 0

    def test_wraps_right_edge(self):
        engine = running_engine(initial_snake=[(14, 3)])
        engine.tick()
        assert engine.get_current_state().head == (0, 3)

    def test_wraps_top_edge(self):
        engine = running_engine(initial_snake=[(4, 0)])
        engine.request_direction_change(UP)
        engine.tick()
        assert engine.get_current_state().head == (4, 14)

    def test_normal_tick_keeps_length(self):
        engine = running_engine(initial_snake=[(3, 3), (2, 3), (1, 3)])
        engine.tick()
        assert engine.get_current_state().snake == ((4, 3), (3, 3), (2, 3))

    def test_tick_outside_running_is_noop(self):
        engine = SnakeEngine()
        before = engine.get_current_state()
        assert engine.tick() is False
        assert engine.get_current_state() == before

        engine.start()
        engine.pause()
        paused = engine.get_current_state()
        assert engine.tick() is False
        assert engine.get_current_state() == paused

    def test_moving_into_vacating_tail_is_allowed(self):
        """The tail leaves its cell in the same tick, so chasing it is safe."""
        engine = running_engine(
            initial_snake=[(1, 1), (1, 2), (2, 2), (2, 1)],
            initial_direction=UP,
        )
        engine.request_direction_change(RIGHT)
        assert engine.tick() is True
        state = engine.get_current_state()
        assert state.lifecycle_state == RUNNING
        assert state.snake == ((2, 1), (1, 1), (1, 2), (2, 2))


class TestDirectionIntake:
    """Tests for request_direction_change()."""

    def test_reverse_is_rejected(self):
        engine = running_engine()
        assert engine.request_direction_change(LEFT) is False
        assert engine.pending_direction == RIGHT

    def test_perpendicular_is_accepted(self):
        engine = running_engine()
        assert engine.request_direction_change(UP) is True
        assert engine.pending_direction == UP

    def test_last_valid_request_wins(self):
        engine = running_engine(initial_snake=[(5, 5)], initial_food=(10, 10))
        engine.request_direction_change(UP)
        engine.request_direction_change(DOWN)
        engine.tick()
        assert engine.get_current_state().head == (5, 6)

    def test_reverse_checked_against_last_move_not_pending(self):
        """UP then LEFT between ticks must not turn the snake back onto itself."""
        engine = running_engine(initial_snake=[(5, 5), (4, 5), (3, 5)], initial_food=(10, 10))
        engine.request_direction_change(UP)
        assert engine.request_direction_change(LEFT) is False
        engine.tick()
        state = engine.get_current_state()
        assert state.head == (5, 4)
        assert state.direction == UP

    def test_pending_direction_applies_on_next_tick_only(self):
        engine = running_engine(initial_snake=[(5, 5)], initial_food=(10, 10))
        engine.request_direction_change(DOWN)
        assert engine.get_current_state().direction == RIGHT
        engine.tick()
        assert engine.get_current_state().direction == DOWN

    def test_unknown_direction_fails_fast(self):
        engine = running_engine()
        before = engine.get_current_state()
        with pytest.raises(ValueError):
            engine.request_direction_change("SIDEWAYS")
        assert engine.get_current_state() == before
        assert engine.pending_direction == RIGHT


class TestCollision:
    """Tests for self-collision handling."""

    def test_steering_into_second_segment_ends_game(self):
        engine = running_engine(
            initial_snake=[(1, 1), (1, 2), (0, 2)],
            initial_direction=RIGHT,
        )
        before = engine.get_current_state()
        engine.request_direction_change(DOWN)

        assert engine.tick() is False
        after = engine.get_current_state()
        assert after.lifecycle_state == GAME_OVER
        assert after.snake == before.snake
        assert after.food == before.food
        assert after.score == before.score

    def test_collision_with_body_ends_game(self):
        engine = running_engine(
            initial_snake=[(2, 2), (2, 1), (1, 1), (1, 2), (1, 3)],
            initial_direction=DOWN,
        )
        engine.request_direction_change(LEFT)
        engine.tick()
        state = engine.get_current_state()
        assert state.lifecycle_state == GAME_OVER
        assert state.snake == ((2, 2), (2, 1), (1, 1), (1, 2), (1, 3))

    def test_growth_into_tail_collides_without_scoring(self):
        """When eating, the tail stays, so its cell is occupied."""
        engine = running_engine(
            initial_snake=[(1, 1), (1, 2), (2, 2), (2, 1)],
            initial_direction=UP,
        )
        engine.food = (2, 1)
        engine.request_direction_change(RIGHT)
        engine.tick()
        state = engine.get_current_state()
        assert state.lifecycle_state == GAME_OVER
        assert state.score == 0
        assert state.food == (2, 1)
        assert len(state.snake) == 4

    def test_single_segment_never_self_collides(self):
        engine = running_engine(initial_snake=[(5, 5)], initial_food=(10, 10))
        for direction in (UP, LEFT, DOWN, RIGHT) * 5:
            engine.request_direction_change(direction)
            assert engine.tick() is True
        assert engine.get_current_state().lifecycle_state == RUNNING

    def test_ticks_after_game_over_are_ignored(self):
        engine = running_engine(
            initial_snake=[(1, 1), (1, 2), (0, 2)],
            initial_direction=RIGHT,
        )
        engine.request_direction_change(DOWN)
        engine.tick()
        frozen = engine.get_current_state()
        assert engine.tick() is False
        assert engine.get_current_state() == frozen


class TestFoodAndScoring:
    """Tests for growth ticks, food placement and the speed curve."""

    def test_growth_tick(self):
        engine = running_engine(initial_food=(1, 0))
        engine.tick()
        state = engine.get_current_state()
        assert state.snake == ((1, 0), (0, 0))
        assert state.score == 1
        assert state.food not in state.snake
        assert 0 <= state.food[0] < 15 and 0 <= state.food[1] < 15

    def test_food_never_placed_on_snake(self):
        engine = SnakeEngine(config=EngineConfig(grid_size=4, initial_food=(1, 0)), rng=random.Random(3))
        engine.start()
        player = RandomPlayer(rng=random.Random(5))
        for _ in range(300):
            if engine.get_current_state().lifecycle_state != RUNNING:
                break
            engine.request_direction_change(player.get_move(engine.get_current_state()))
            engine.tick()
            state = engine.get_current_state()
            if len(state.snake) < 16:
                assert state.food not in state.snake

    def test_full_board_falls_back_to_any_cell(self):
        engine = running_engine(
            grid_size=2,
            initial_snake=[(0, 0), (1, 0), (1, 1)],
            initial_food=(0, 1),
            initial_direction=LEFT,
        )
        engine.request_direction_change(DOWN)
        assert engine.tick() is True
        state = engine.get_current_state()
        assert len(state.snake) == 4
        assert state.score == 1
        assert state.food in {(0, 0), (0, 1), (1, 0), (1, 1)}

    def test_food_placement_without_guard_samples_whole_grid(self):
        rng = Mock()
        rng.randrange.side_effect = [0, 0]
        engine = SnakeEngine(
            config=EngineConfig(initial_food=(1, 0), avoid_snake_on_food=False), rng=rng
        )
        engine.start()
        engine.tick()
        # Unguarded placement may land on the snake, as (0, 0) does here
        assert engine.get_current_state().food == (0, 0)
        rng.choice.assert_not_called()

    def test_milestones_speed_up_until_floor(self):
        engine = SnakeEngine(
            config=EngineConfig(grid_size=20, initial_food=(1, 0), base_speed=50, min_speed=40),
            rng=FirstChoiceRandom(),
        )
        engine.start()
        speeds = {}
        for _ in range(15):
            engine.tick()
            state = engine.get_current_state()
            speeds[state.score] = state.speed

        assert speeds[4] == 50
        assert speeds[5] == 45
        assert speeds[9] == 45
        assert speeds[10] == 40
        assert speeds[15] == 40

    def test_speed_never_increases_within_session(self):
        engine = SnakeEngine(config=EngineConfig(initial_food=(1, 0)), rng=FirstChoiceRandom())
        engine.start()
        last = engine.speed
        for _ in range(14):
            engine.tick()
            assert engine.speed <= last
            last = engine.speed
        assert engine.score == 14
        assert engine.speed == 190


class TestEvents:
    """Tests for engine event emission."""

    def test_lifecycle_events(self):
        engine = SnakeEngine()
        seen = []
        for event in (STARTED, RESUMED, PAUSED_EVENT, RESET):
            engine.subscribe(event, lambda s, e=event: seen.append((e, s.lifecycle_state)))

        engine.start()
        engine.start()  # already running, no event
        engine.pause()
        engine.pause()  # already paused, no event
        engine.start()
        engine.reset()

        assert seen == [
            (STARTED, RUNNING),
            (PAUSED_EVENT, PAUSED),
            (RESUMED, RUNNING),
            (RESET, START),
        ]

    def test_food_and_milestone_events_carry_snapshot(self):
        engine = SnakeEngine(config=EngineConfig(initial_food=(1, 0)), rng=FirstChoiceRandom())
        eaten, milestones = [], []
        engine.subscribe(FOOD_EATEN, lambda s: eaten.append(s.score))
        engine.subscribe(MILESTONE, lambda s: milestones.append((s.score, s.speed)))
        engine.start()
        for _ in range(10):
            engine.tick()

        assert eaten == list(range(1, 11))
        assert milestones == [(5, 195), (10, 190)]

    def test_game_over_event(self):
        engine = running_engine(
            initial_snake=[(1, 1), (1, 2), (0, 2)],
            initial_direction=RIGHT,
        )
        listener = Mock()
        engine.subscribe(GAME_OVER_EVENT, listener)
        engine.request_direction_change(DOWN)
        engine.tick()

        listener.assert_called_once()
        state = listener.call_args[0][0]
        assert state.lifecycle_state == GAME_OVER

    def test_listener_may_call_back_into_engine(self):
        engine = SnakeEngine(config=EngineConfig(initial_food=(1, 0)))
        engine.subscribe(FOOD_EATEN, lambda s: engine.pause())
        engine.start()
        engine.tick()
        assert engine.get_current_state().lifecycle_state == PAUSED

    def test_failing_listener_does_not_stop_tick_or_other_listeners(self):
        engine = SnakeEngine(config=EngineConfig(initial_food=(1, 0)), rng=FirstChoiceRandom())
        failing = Mock(side_effect=RuntimeError("speaker unplugged"))
        recorder = Mock()
        engine.subscribe(FOOD_EATEN, failing)
        engine.subscribe(FOOD_EATEN, recorder)
        engine.start()

        assert engine.tick() is True
        assert engine.tick() is True

        assert failing.call_count == 2
        assert recorder.call_count == 2
        state = engine.get_current_state()
        assert state.score == 2
        assert state.lifecycle_state == RUNNING

    def test_listeners_see_state_committed_by_the_tick(self):
        engine = SnakeEngine(config=EngineConfig(initial_food=(1, 0)), rng=FirstChoiceRandom())
        seen = []
        engine.subscribe(FOOD_EATEN, lambda s: engine.reset())
        engine.subscribe(FOOD_EATEN, lambda s: seen.append((s.score, s.lifecycle_state, s.head)))
        engine.start()
        engine.tick()

        # The reset ran between the two listeners, but the snapshot is the tick's
        assert seen == [(1, RUNNING, (1, 0))]
        assert engine.get_current_state().lifecycle_state == START

    def test_unsubscribe(self):
        engine = SnakeEngine()
        listener = Mock()
        engine.subscribe(STARTED, listener)
        engine.unsubscribe(STARTED, listener)
        engine.start()
        listener.assert_not_called()

    def test_unknown_event_rejected(self):
        with pytest.raises(ValueError):
            SnakeEngine().subscribe("exploded", lambda s: None)


class TestInvariants:
    """Property-style checks over long seeded autopilot runs."""

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_invariants_hold_for_every_tick(self, seed):
        engine = SnakeEngine(rng=random.Random(seed))
        player = RandomPlayer(rng=random.Random(seed + 100))
        engine.start()

        for _ in range(500):
            before = engine.get_current_state()
            if before.lifecycle_state != RUNNING:
                break
            engine.request_direction_change(player.get_move(before))
            engine.tick()
            after = engine.get_current_state()

            assert len(after.snake) >= 1
            assert len(set(after.snake)) == len(after.snake)
            assert all(0 <= x < 15 and 0 <= y < 15 for x, y in after.snake)
            assert abs(len(after.snake) - len(before.snake)) <= 1
            grew = len(after.snake) == len(before.snake) + 1
            assert grew == (after.score == before.score + 1)
