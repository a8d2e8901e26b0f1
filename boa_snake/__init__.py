from boa_snake.logic import decide
from boa_snake.moves import available_moves, move_snake
from boa_snake.heuristic import score_position
from boa_snake.search import search

__all__ = ["decide", "available_moves", "move_snake", "score_position", "search"]
