"""
Time-boxed lookahead search for BoaSnake

Breadth-first expansion of our own future moves against a static board:
- FIFO work queue, roughly level by level
- Every popped state is scored and rewarded for the turns it survived
- Stops as soon as the turn deadline is reached (anytime result)
"""

import typing
import time
from collections import deque
from dataclasses import dataclass

from boa_snake.board import Board, Snake
from boa_snake.heuristic import DEATH_SCORE, saturating_add, score_position
from boa_snake.moves import available_moves, move_snake


@dataclass
class SearchNode:
    snake: Snake
    turn: int


class LookaheadSearch:
    """
    Single-agent breadth-first search bounded by wall-clock time.
    """

    def __init__(self, time_limit_ms: float, start_time: typing.Optional[float] = None):
        """
        Initialize the search.

        Args:
            time_limit_ms: Budget in milliseconds, measured from start_time
            start_time: Shared turn start (time.time()); defaults to now
        """
        self.time_limit = time_limit_ms / 1000.0  # Convert to seconds
        self.start_time = time.time() if start_time is None else start_time
        self.nodes_evaluated = 0
        self.depth_reached = 0

    def is_time_up(self) -> bool:
        """Check if we've exceeded time limit."""
        return time.time() - self.start_time >= self.time_limit

    def search(self, board: Board, snake: Snake) -> int:
        """
        Best score reachable from this snake state.

        Args:
            board: Board to search on, never modified
            snake: Snake state after the first move

        Returns:
            Running maximum of score + turns survived
        """
        self.nodes_evaluated = 0
        self.depth_reached = 0

        possible_moves = available_moves(board, snake)
        max_score = score_position(board, snake)

        if not possible_moves or max_score == DEATH_SCORE:
            return max_score

        queue = deque(
            SearchNode(snake=move_snake(board, snake, mv), turn=1)
            for mv in possible_moves
        )

        while queue:
            node = queue.popleft()
            if self.is_time_up():
                break

            self.nodes_evaluated += 1
            self.depth_reached = max(self.depth_reached, node.turn)

            score = score_position(board, node.snake)
            max_score = max(max_score, saturating_add(score, node.turn))

            if score != DEATH_SCORE:
                for mv in available_moves(board, node.snake):
                    queue.append(SearchNode(
                        snake=move_snake(board, node.snake, mv),
                        turn=node.turn + 1,
                    ))

        return max_score


def search(board: Board, snake: Snake, time_limit_ms: float,
           start_time: typing.Optional[float] = None) -> int:
    """Run a LookaheadSearch and return its score."""
    return LookaheadSearch(time_limit_ms, start_time=start_time).search(board, snake)
