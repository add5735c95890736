"""Tests for the GameEngine module."""

import json

import numpy as np
import pytest

from classic_snake.config import GameConfig
from classic_snake.engine import GameEngine, GameStatus, TickResult
from classic_snake.errors import ConfigurationError
from classic_snake.grid import CellType
from classic_snake.snake import Direction


def _started(width=21, height=21, seed=0) -> GameEngine:
    engine = GameEngine(seed=seed)
    engine.start(width, height)
    return engine


def _put_food(engine: GameEngine, index: int) -> None:
    engine.state.food = index


def _assert_invariants(engine: GameEngine) -> None:
    cells = engine.snake_cells
    assert len(set(cells)) == len(cells)
    assert not any(engine.is_wall(c) for c in cells)
    if engine.status == GameStatus.PLAYING:
        assert engine.food_cell not in cells
        assert not engine.is_wall(engine.food_cell)


class TestEngineInit:
    def test_starts_at_menu(self):
        engine = GameEngine(seed=0)
        assert engine.status == GameStatus.MENU
        assert engine.score == 0
        assert engine.high_score == 0
        assert engine.snake_cells == ()
        assert engine.food_cell is None

    def test_tick_at_menu_is_noop(self):
        engine = GameEngine(seed=0)
        result = engine.tick()
        assert result == TickResult(
            new_head=None, ate_food=False, status=GameStatus.MENU,
        )

    def test_set_direction_at_menu_is_noop(self):
        engine = GameEngine(seed=0)
        engine.set_direction(Direction.UP)
        assert engine.direction is None


class TestEngineStart:
    def test_initial_snake_ends_at_center(self):
        engine = _started(21, 21)
        # (21 * 21) // 2 == 220 is row 10, col 10.
        assert engine.snake_cells == (218, 219, 220)
        assert engine.direction == Direction.RIGHT
        assert engine.status == GameStatus.PLAYING
        assert engine.score == 0

    def test_center_on_wall_column_is_clamped(self):
        engine = _started(20, 20)
        # (20 * 20) // 2 == 200 sits on column 0; the head stays in row 10.
        assert len(engine.snake_cells) == 3
        assert engine.snake_cells == (201, 202, 203)
        assert engine.direction == Direction.RIGHT
        assert engine.status == GameStatus.PLAYING

    def test_returns_engine_state(self):
        engine = GameEngine(seed=0)
        state = engine.start(21, 21)
        assert state is engine.state
        assert state.snake.head == 220
        assert state.food == engine.food_cell

    def test_initial_food_valid(self):
        for seed in range(20):
            _assert_invariants(_started(seed=seed))

    def test_invalid_dimensions_raise_without_state(self):
        engine = GameEngine(seed=0)
        with pytest.raises(ConfigurationError):
            engine.start(2, 10)
        assert engine.state is None
        assert engine.status == GameStatus.MENU

    def test_oversized_dimensions_raise_without_state(self):
        engine = GameEngine(seed=0)
        with pytest.raises(ConfigurationError, match="at most"):
            engine.start(10**10, 10**10)
        assert engine.state is None
        assert engine.status == GameStatus.MENU

    def test_invalid_restart_keeps_previous_game(self):
        engine = _started()
        before = engine.snake_cells
        with pytest.raises(ConfigurationError):
            engine.start(10, 1)
        assert engine.snake_cells == before
        assert engine.status == GameStatus.PLAYING

    def test_narrow_grid_shortens_snake(self):
        engine = _started(4, 6)
        assert len(engine.snake_cells) == 2
        _assert_invariants(engine)

    def test_single_interior_cell_is_won_at_once(self):
        engine = _started(3, 3)
        assert engine.snake_cells == (4,)
        assert engine.food_cell is None
        assert engine.status == GameStatus.WON

    def test_custom_initial_length(self):
        engine = GameEngine(GameConfig(initial_length=5), seed=0)
        engine.start(21, 21)
        assert engine.snake_cells == (216, 217, 218, 219, 220)


class TestEngineMovement:
    def test_moves_right_by_default(self):
        engine = _started()
        _put_food(engine, engine.state.grid.index(1, 1))
        result = engine.tick()
        assert result.new_head == 221
        assert result.ate_food is False
        assert result.status == GameStatus.PLAYING
        assert engine.snake_cells == (219, 220, 221)

    @pytest.mark.parametrize(
        ("direction", "expected"),
        [(Direction.UP, 199), (Direction.DOWN, 241)],
    )
    def test_turns(self, direction, expected):
        engine = _started()
        _put_food(engine, engine.state.grid.index(1, 1))
        engine.set_direction(direction)
        assert engine.tick().new_head == expected

    def test_reversal_ignored(self):
        engine = _started()
        _put_food(engine, engine.state.grid.index(1, 1))
        engine.set_direction(Direction.LEFT)
        engine.tick()
        assert engine.direction == Direction.RIGHT
        assert engine.snake_cells[-1] == 221

    def test_last_valid_request_wins(self):
        engine = _started()
        _put_food(engine, engine.state.grid.index(1, 1))
        engine.set_direction(Direction.UP)
        engine.set_direction(Direction.DOWN)
        assert engine.tick().new_head == 241

    def test_reversal_does_not_erase_pending_turn(self):
        engine = _started()
        _put_food(engine, engine.state.grid.index(1, 1))
        engine.set_direction(Direction.UP)
        engine.set_direction(Direction.LEFT)
        assert engine.tick().new_head == 199

    def test_reversal_allowed_for_single_cell_snake(self):
        engine = GameEngine(GameConfig(initial_length=1), seed=0)
        engine.start(21, 21)
        _put_food(engine, engine.state.grid.index(1, 1))
        engine.set_direction(Direction.LEFT)
        assert engine.tick().new_head == 219


class TestEngineFood:
    def test_eating_grows_and_scores(self):
        engine = _started()
        _put_food(engine, 221)
        result = engine.tick()
        assert result.ate_food is True
        assert engine.snake_cells == (218, 219, 220, 221)
        assert engine.score == 1
        _assert_invariants(engine)

    def test_eat_then_move_keeps_length(self):
        engine = _started()
        _put_food(engine, 221)
        engine.tick()
        _put_food(engine, engine.state.grid.index(1, 1))
        engine.tick()
        assert engine.snake_cells == (219, 220, 221, 222)

    def test_board_full_after_eating_is_won(self):
        # 6x3 interior has four cells; the snake takes three, food the last.
        engine = _started(6, 3)
        assert engine.snake_cells == (7, 8, 9)
        assert engine.food_cell == 10
        result = engine.tick()
        assert result.ate_food is True
        assert result.status == GameStatus.WON
        assert engine.food_cell is None
        assert engine.high_score == 1


class TestEngineCollision:
    def test_wall_collision_ends_game(self):
        engine = _started()
        _put_food(engine, engine.state.grid.index(1, 1))
        for _ in range(9):
            assert engine.tick().status == GameStatus.PLAYING
        before = engine.snake_cells
        result = engine.tick()
        assert result.status == GameStatus.GAME_OVER
        assert result.new_head is None
        assert engine.snake_cells == before

    def test_self_collision_ends_game(self):
        engine = _started()
        for _ in range(2):
            _put_food(engine, engine.snake_cells[-1] + 1)
            engine.tick()
        assert len(engine.snake_cells) == 5
        _put_food(engine, engine.state.grid.index(1, 1))

        engine.set_direction(Direction.DOWN)
        engine.tick()
        engine.set_direction(Direction.LEFT)
        engine.tick()
        engine.set_direction(Direction.UP)
        before = engine.snake_cells
        result = engine.tick()
        assert result.status == GameStatus.GAME_OVER
        assert engine.snake_cells == before

    def test_tick_after_game_over_is_idempotent(self):
        engine = _started()
        _put_food(engine, engine.state.grid.index(1, 1))
        while engine.status == GameStatus.PLAYING:
            engine.tick()
        snapshot = engine.get_state()
        result = engine.tick()
        assert result.status == GameStatus.GAME_OVER
        assert engine.get_state() == snapshot

    def test_set_direction_after_game_over_is_noop(self):
        engine = _started()
        _put_food(engine, engine.state.grid.index(1, 1))
        while engine.status == GameStatus.PLAYING:
            engine.tick()
        engine.set_direction(Direction.UP)
        assert engine.state.pending_direction is None


class TestHighScore:
    def test_high_score_updates_on_game_over(self):
        engine = _started()
        _put_food(engine, 221)
        engine.tick()
        _put_food(engine, engine.state.grid.index(1, 1))
        while engine.status == GameStatus.PLAYING:
            engine.tick()
        assert engine.status == GameStatus.GAME_OVER
        assert engine.high_score == 1

    def test_high_score_survives_restart(self):
        engine = _started()
        _put_food(engine, 221)
        engine.tick()
        _put_food(engine, engine.state.grid.index(1, 1))
        while engine.status == GameStatus.PLAYING:
            engine.tick()

        engine.start(21, 21)
        assert engine.status == GameStatus.PLAYING
        assert engine.score == 0
        assert engine.high_score == 1

        # A worse game does not lower it.
        _put_food(engine, engine.state.grid.index(1, 1))
        while engine.status == GameStatus.PLAYING:
            engine.tick()
        assert engine.high_score == 1


class TestEngineInvariants:
    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_random_play_keeps_invariants(self, seed):
        engine = _started(12, 10, seed=seed)
        rng = np.random.default_rng(seed)
        turns = list(Direction)
        for _ in range(500):
            if engine.status != GameStatus.PLAYING:
                engine.start(12, 10)
            if rng.random() < 0.3:
                engine.set_direction(turns[rng.integers(len(turns))])
            length = len(engine.snake_cells)
            score = engine.score
            result = engine.tick()
            if result.ate_food:
                assert len(engine.snake_cells) == length + 1
                assert engine.score == score + 1
            elif result.status == GameStatus.PLAYING:
                assert len(engine.snake_cells) == length
            _assert_invariants(engine)


class TestEngineRender:
    def test_render_codes(self):
        engine = _started(21, 21)
        cells = engine.render()
        assert cells.shape == (21, 21)
        assert cells[0, 0] == CellType.WALL
        assert cells[10, 10] == CellType.HEAD
        assert cells[10, 9] == CellType.SNAKE
        assert cells[10, 8] == CellType.SNAKE
        food_row, food_col = engine.state.grid.row_col(engine.food_cell)
        assert cells[food_row, food_col] == CellType.FOOD
        assert (cells == CellType.EMPTY).sum() == 19 * 19 - 4

    def test_render_before_start_raises(self):
        with pytest.raises(RuntimeError):
            GameEngine(seed=0).render()


class TestEngineSerialization:
    def test_menu_state(self):
        assert GameEngine(seed=0).get_state() == {
            "status": "menu", "high_score": 0,
        }

    def test_state_is_json_serializable(self):
        engine = _started()
        engine.tick()
        serialized = json.dumps(engine.get_state())
        assert isinstance(serialized, str)

    def test_state_structure(self):
        state = _started().get_state()
        assert state["status"] == "playing"
        assert state["direction"] == "right"
        assert state["snake"]["head"] == 220
        assert state["grid"] == {"width": 21, "height": 21}
        assert len(state["cells"]) == 21


class TestEngineDeterminism:
    def test_same_seed_same_outcome(self):
        actions = [
            Direction.RIGHT, Direction.DOWN, Direction.DOWN,
            Direction.LEFT, Direction.UP,
        ]
        assert self._run(123, actions) == self._run(123, actions)

    def test_seed_from_config(self):
        a = GameEngine(GameConfig(seed=9))
        b = GameEngine(GameConfig(seed=9))
        a.start(21, 21)
        b.start(21, 21)
        assert a.food_cell == b.food_cell

    @staticmethod
    def _run(seed: int, actions: list[Direction]) -> dict:
        engine = GameEngine(seed=seed)
        engine.start(20, 20)
        for action in actions:
            engine.set_direction(action)
            engine.tick()
        return engine.get_state()
