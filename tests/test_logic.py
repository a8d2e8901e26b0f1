"""
Tests for logic.py - move selection.
"""

import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from boa_snake.board import UP, DOWN, LEFT, RIGHT, DIRECTIONS
from boa_snake.heuristic import DEATH_SCORE
from boa_snake import logic
from boa_snake.logic import (
    FALLBACK_MOVE,
    MoveEvaluation,
    create_worker_pool,
    decide,
    score_moves,
    select_move,
)


@pytest.fixture
def bottom_edge_snake(snake_factory):
    """Head on the bottom edge with its neck directly above."""
    return snake_factory([(5, 0), (5, 1), (5, 2)], health=54)


@pytest.fixture
def pocket_snake(snake_factory):
    """Head at (1,5): left leads into a dead-end pocket, right stays open."""
    return snake_factory([
        (1, 5), (1, 6), (0, 6), (0, 7), (1, 7), (2, 7), (3, 7), (3, 6),
        (3, 5), (3, 4), (2, 4), (1, 4), (0, 4), (0, 3), (1, 3),
    ])


class TestSelectMove:
    """Tests for select_move."""

    def test_highest_score_wins(self):
        evaluations = [MoveEvaluation(UP, 3), MoveEvaluation(LEFT, 9), MoveEvaluation(RIGHT, 4)]
        assert select_move(evaluations).move == LEFT

    def test_ties_keep_first_evaluated(self):
        evaluations = [MoveEvaluation(DOWN, 7), MoveEvaluation(LEFT, 7)]
        assert select_move(evaluations).move == DOWN

    def test_death_score_can_still_be_selected(self):
        evaluations = [MoveEvaluation(RIGHT, DEATH_SCORE)]
        assert select_move(evaluations).move == RIGHT

    def test_nothing_to_select(self):
        assert select_move([]) is None


class TestScoreMoves:
    """Tests for score_moves."""

    def test_only_legal_moves_are_scored(self, bottom_edge_snake, board_factory):
        board = board_factory([bottom_edge_snake])
        evaluations = score_moves(board, bottom_edge_snake, 150)
        assert [e.move for e in evaluations] == [LEFT, RIGHT]

    def test_dead_end_scores_death(self, pocket_snake, board_factory):
        board = board_factory([pocket_snake])
        scores = {e.move: e.score for e in score_moves(board, pocket_snake, 150)}

        assert scores[LEFT] == DEATH_SCORE
        assert scores[RIGHT] > DEATH_SCORE

    def test_snapshot_is_not_modified(self, snake_factory, board_factory):
        snake = snake_factory([(5, 5), (5, 4), (5, 3), (5, 3)], health=100)
        board = board_factory([snake])
        body = list(snake.body)

        score_moves(board, snake, 150)

        assert snake.body == body
        assert snake.length == 4


class TestDecide:
    """Tests for decide."""

    def test_never_reverses_or_leaves_the_board(self, bottom_edge_snake, board_factory):
        board = board_factory([bottom_edge_snake])
        assert decide(board, bottom_edge_snake, 150) in (LEFT, RIGHT)

    def test_avoids_dead_end(self, pocket_snake, board_factory):
        board = board_factory([pocket_snake])
        assert decide(board, pocket_snake, 150) == RIGHT

    def test_enclosed_snake_falls_back(self, enclosed_snake, board_factory):
        board = board_factory([enclosed_snake])
        assert decide(board, enclosed_snake, 150) == FALLBACK_MOVE
        assert FALLBACK_MOVE == UP

    def test_stacked_start_body_gets_a_real_move(self, snake_factory, board_factory):
        snake = snake_factory([(5, 5), (5, 5), (5, 5)], health=100)
        board = board_factory([snake])
        assert decide(board, snake, 150) in DIRECTIONS

    def test_timeout_below_safety_margin_still_moves(self, bottom_edge_snake, board_factory):
        board = board_factory([bottom_edge_snake])
        assert decide(board, bottom_edge_snake, 50) in (LEFT, RIGHT)

    def test_worker_pool_matches_sequential_choice(self, pocket_snake, board_factory):
        board = board_factory([pocket_snake])
        with ThreadPoolExecutor(max_workers=2) as pool:
            assert decide(board, pocket_snake, 150, executor=pool) == RIGHT


class TestWorkerPool:
    """Tests for decide with a worker pool."""

    def test_busy_pool_still_returns_a_legal_move(self, bottom_edge_snake, board_factory):
        """Searches that never start fall back to the static score, not to FALLBACK_MOVE."""
        board = board_factory([bottom_edge_snake])
        with ThreadPoolExecutor(max_workers=1) as pool:
            pool.submit(time.sleep, 0.5)
            assert decide(board, bottom_edge_snake, 150, executor=pool) in (LEFT, RIGHT)

    def test_busy_pool_keeps_every_legal_move(self, bottom_edge_snake, board_factory):
        board = board_factory([bottom_edge_snake])
        with ThreadPoolExecutor(max_workers=1) as pool:
            pool.submit(time.sleep, 0.5)
            evaluations = score_moves(board, bottom_edge_snake, 150, executor=pool)
        assert [e.move for e in evaluations] == [LEFT, RIGHT]

    def test_shut_down_pool_still_returns_a_legal_move(self, pocket_snake, board_factory):
        board = board_factory([pocket_snake])
        pool = ThreadPoolExecutor(max_workers=1)
        pool.shutdown()
        assert decide(board, pocket_snake, 150, executor=pool) == RIGHT

    def test_failing_search_does_not_escape(self, monkeypatch, bottom_edge_snake, board_factory):
        def broken(*args):
            raise ValueError("worker died")

        monkeypatch.setattr(logic, "evaluate_move", broken)
        board = board_factory([bottom_edge_snake])
        with ThreadPoolExecutor(max_workers=2) as pool:
            assert decide(board, bottom_edge_snake, 150, executor=pool) in (LEFT, RIGHT)

    def test_process_pool_matches_sequential_choice(self, pocket_snake, board_factory):
        board = board_factory([pocket_snake])
        sequential = decide(board, pocket_snake, 300)
        with create_worker_pool(2) as pool:
            # Start the workers before the turn clock runs
            pool.submit(abs, -1).result()
            assert decide(board, pocket_snake, 300, executor=pool) == sequential == RIGHT

    def test_busy_process_pool_returns_a_legal_move(self, bottom_edge_snake, board_factory):
        board = board_factory([bottom_edge_snake])
        with create_worker_pool(1) as pool:
            pool.submit(time.sleep, 0.5)
            assert decide(board, bottom_edge_snake, 150, executor=pool) in (LEFT, RIGHT)

    def test_pool_size_from_environment(self, monkeypatch):
        monkeypatch.setenv("BOA_WORKERS", "3")
        pool = create_worker_pool()
        try:
            assert pool._max_workers == 3
        finally:
            pool.shutdown()
