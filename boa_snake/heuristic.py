"""
Static position scoring for the BoaSnake engine.

Scores are bounded to the signed 32-bit range. DEATH_SCORE and WIN_SCORE
are the two ends of that range and every addition saturates into it.
"""

import numpy as np

from boa_snake.board import Board, Snake
from boa_snake.moves import available_moves

# Score bounds
DEATH_SCORE = int(np.iinfo(np.int32).min)
WIN_SCORE = int(np.iinfo(np.int32).max)

# Evaluation weights
SPACE_VALUE = 2
FOOD_VALUE = 1
KILL_BONUS = 20

# Eating only pays off at or below this health
HEALTH_THRESHOLD = 5


def saturating_add(score: int, bonus: int) -> int:
    """Add two scores, clamping the result to [DEATH_SCORE, WIN_SCORE]."""
    return int(np.clip(score + bonus, DEATH_SCORE, WIN_SCORE))


def score_position(board: Board, snake: Snake) -> int:
    """
    Score a hypothetical position for the given snake.

    Args:
        board: Board the snake sits on (opponents are static)
        snake: Snake to evaluate

    Returns:
        Integer desirability, DEATH_SCORE if the snake cannot survive
    """
    safe_moves = available_moves(board, snake)
    will_eat = snake.head in board.food

    # More escape routes is better
    score = SPACE_VALUE * len(safe_moves)

    if will_eat and snake.health <= HEALTH_THRESHOLD:
        score = saturating_add(score, FOOD_VALUE)
    elif will_eat:
        # Eating at high health costs a little
        score = saturating_add(score, -FOOD_VALUE)

    # Head-to-head with a shorter snake kills it
    for other in board.snakes:
        if other.id == snake.id:
            continue
        if other.head == snake.head and snake.length > other.length:
            if len(board.snakes) == 2:
                score = WIN_SCORE
            else:
                score = saturating_add(score, KILL_BONUS)

    if not safe_moves or snake.health == 0 or snake.head == snake.tail:
        score = DEATH_SCORE

    return score
