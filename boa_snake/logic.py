"""
Turn entry point: evaluate every legal first move and pick the best one.
"""

import os
import typing
import time
from concurrent.futures import Executor, ProcessPoolExecutor, wait
from dataclasses import dataclass

import numpy as np

from boa_snake.board import Board, Snake, UP
from boa_snake.heuristic import score_position
from boa_snake.moves import available_moves, move_snake, normalize_snake
from boa_snake.search import LookaheadSearch

# Headroom for serialization and the network round trip
SAFETY_MARGIN_MS = 100

# Returned when no move is safe
FALLBACK_MOVE = UP

DEFAULT_WORKERS = 4


@dataclass
class MoveEvaluation:
    """Search result for one first move."""
    move: str
    score: int
    nodes_evaluated: int = 0
    depth_reached: int = 0


def create_worker_pool(workers: typing.Optional[int] = None) -> Executor:
    """
    Create the per-process pool used to search first moves in parallel.

    Args:
        workers: Pool size, defaults to $BOA_WORKERS or DEFAULT_WORKERS
    """
    if workers is None:
        workers = int(os.environ.get("BOA_WORKERS", DEFAULT_WORKERS))
    return ProcessPoolExecutor(max_workers=workers)


def evaluate_move(board: Board, snake: Snake, direction: str,
                  time_limit_ms: float, start_time: float) -> MoveEvaluation:
    """Apply a first move and search the subtree behind it."""
    moved_snake = move_snake(board, snake, direction)
    lookahead = LookaheadSearch(time_limit_ms, start_time=start_time)
    score = lookahead.search(board, moved_snake)
    return MoveEvaluation(
        move=direction,
        score=score,
        nodes_evaluated=lookahead.nodes_evaluated,
        depth_reached=lookahead.depth_reached,
    )


def score_moves(board: Board, snake: Snake, timeout_ms: float,
                executor: typing.Optional[Executor] = None,
                start_time: typing.Optional[float] = None) -> typing.List[MoveEvaluation]:
    """
    Search every legal first move.

    Args:
        board: Turn snapshot, never modified
        snake: Our snake from the snapshot
        timeout_ms: Total time allowed for the turn
        executor: Worker pool; searches run in this process when None
        start_time: Turn start (time.time()), shared by every branch

    Returns:
        One evaluation per legal move in canonical order; a branch that
        misses the turn deadline or fails in its worker is scored by the
        static heuristic instead
    """
    if start_time is None:
        start_time = time.time()
    snake = normalize_snake(snake)
    time_limit_ms = timeout_ms - SAFETY_MARGIN_MS
    safe_moves = available_moves(board, snake)

    if executor is None:
        return [
            evaluate_move(board, snake, direction, time_limit_ms, start_time)
            for direction in safe_moves
        ]

    futures = {}
    for direction in safe_moves:
        try:
            futures[direction] = executor.submit(
                evaluate_move, board, snake, direction, time_limit_ms, start_time)
        except RuntimeError:
            # Shut down or broken pool
            break

    remaining = max(0.0, timeout_ms / 1000.0 - (time.time() - start_time))
    wait(futures.values(), timeout=remaining)

    evaluations = []
    for direction in safe_moves:
        future = futures.get(direction)
        evaluation = None
        if future is not None and future.done():
            try:
                evaluation = future.result()
            except Exception as e:
                print(f"Search for {direction} failed: {e!r}")
        elif future is not None:
            future.cancel()
        if evaluation is None:
            evaluation = static_evaluation(board, snake, direction)
        evaluations.append(evaluation)

    return evaluations


def static_evaluation(board: Board, snake: Snake, direction: str) -> MoveEvaluation:
    """Score a first move without searching behind it."""
    return MoveEvaluation(move=direction, score=score_position(board, move_snake(board, snake, direction)))


def select_move(evaluations: typing.List[MoveEvaluation]) -> typing.Optional[MoveEvaluation]:
    """Highest score wins, ties go to the first evaluated move."""
    if not evaluations:
        return None
    scores = np.array([evaluation.score for evaluation in evaluations], dtype=np.int64)
    return evaluations[int(np.argmax(scores))]


def decide(board: Board, snake: Snake, timeout_ms: float,
           executor: typing.Optional[Executor] = None,
           start_time: typing.Optional[float] = None) -> str:
    """Pick the move for this turn, falling back to FALLBACK_MOVE."""
    best = select_move(score_moves(board, snake, timeout_ms, executor, start_time))
    if best is None:
        return FALLBACK_MOVE
    return best.move
