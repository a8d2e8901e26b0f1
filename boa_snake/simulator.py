"""
Local Battlesnake game engine for offline benchmarking.

Simulates the standard Battlesnake rules:
- (0,0) = bottom-left
- Health starts at 100, decreases by 1 per turn
- Eating food restores health to 100 and stacks the tail (grows next turn)
- Death on wall collision, starvation, body collision, or head-to-head
  with a longer/equal snake
- Last snake alive wins
"""

import random
import typing
from dataclasses import dataclass, field

from boa_snake.board import Board, Coord, Snake, DIRECTIONS, MAX_HEALTH

MoveFunc = typing.Callable[[typing.Dict], str]

DEFAULT_TIMEOUT_MS = 500


@dataclass
class GameResult:
    """Result of a single simulated game"""
    winner: typing.Optional[str]
    turns: int = 0
    death_reasons: typing.Dict[str, str] = field(default_factory=dict)
    final_snakes: typing.Dict[str, typing.Dict] = field(default_factory=dict)


def create_snake(snake_id: str, start: Coord) -> Snake:
    """Create a new snake stacked on its spawn point."""
    return Snake(
        id=snake_id,
        name=snake_id,
        health=MAX_HEALTH,
        body=[start, start, start],
        head=start,
        length=3,
    )


def spawn_food(board: Board, rng: random.Random, count: int = 1) -> None:
    """Spawn food on unoccupied squares."""
    occupied = set(board.food)
    for snake in board.snakes:
        occupied.update(snake.body)

    free = [Coord(x, y) for x in range(board.width) for y in range(board.height)
            if Coord(x, y) not in occupied]
    for pos in rng.sample(free, min(count, len(free))):
        board.food.add(pos)


def make_game_state(board: Board, snake: Snake, turn: int, timeout_ms: int) -> typing.Dict:
    """Build the request payload a snake server would receive."""
    return {
        "game": {"id": "local-test", "timeout": timeout_ms},
        "turn": turn,
        "board": board.to_dict(),
        "you": snake.to_dict(),
    }


def _step_snake(snake: Snake, direction: str) -> None:
    new_head = snake.head.shift(direction)
    snake.body.insert(0, new_head)
    snake.body.pop()
    snake.head = new_head
    snake.health -= 1


def run_game(
    strategies: typing.Dict[str, MoveFunc],
    width: int = 11,
    height: int = 11,
    max_turns: int = 500,
    seed: typing.Optional[int] = None,
    food_spawn_chance: float = 0.15,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    verbose: bool = False,
) -> GameResult:
    """
    Run a full game.

    Args:
        strategies: snake id -> function taking a game state, returning a move
        width, height: board dimensions
        max_turns: turn limit
        seed: random seed for reproducibility
        food_spawn_chance: probability of spawning food each turn
        timeout_ms: move timeout reported to the strategies
        verbose: print moves every turn

    Returns:
        GameResult with winner, turns survived and death reasons
    """
    rng = random.Random(seed)

    spawn_points = [
        Coord(1, 1), Coord(width - 2, height - 2),
        Coord(1, height - 2), Coord(width - 2, 1),
        Coord(width // 2, 1), Coord(width // 2, height - 2),
        Coord(1, height // 2), Coord(width - 2, height // 2),
    ]

    board = Board(width=width, height=height)
    for i, snake_id in enumerate(strategies):
        board.snakes.append(create_snake(snake_id, spawn_points[i % len(spawn_points)]))

    board.food.add(Coord(width // 2, height // 2))
    spawn_food(board, rng, len(board.snakes))

    death_reasons: typing.Dict[str, str] = {}
    # Solo games end when the only snake dies, others when one is left
    last_standing = 0 if len(board.snakes) == 1 else 1
    turns_played = 0

    for turn in range(max_turns):
        if len(board.snakes) <= last_standing:
            break

        moves = {}
        for snake in board.snakes:
            state = make_game_state(board, snake, turn, timeout_ms)
            direction = strategies[snake.id](state)
            if direction not in DIRECTIONS:
                direction = DIRECTIONS[0]
            moves[snake.id] = direction

        if verbose:
            print(f"Turn {turn}: {moves}")

        for snake in board.snakes:
            _step_snake(snake, moves[snake.id])

        # Feed snakes; the stacked tail grows the body on the next move
        eaten = set()
        for snake in board.snakes:
            if snake.head in board.food:
                snake.health = MAX_HEALTH
                snake.body.append(snake.body[-1])
                snake.length = len(snake.body)
                eaten.add(snake.head)
        board.food -= eaten

        dead = {}
        for snake in board.snakes:
            if not board.in_bounds(snake.head):
                dead[snake.id] = f"wall collision (turn {turn})"
            elif snake.health <= 0:
                dead[snake.id] = f"starvation (turn {turn})"

        for snake in board.snakes:
            if snake.id in dead:
                continue
            for other in board.snakes:
                if snake.head in other.body[1:]:
                    dead[snake.id] = f"body collision with {other.id} (turn {turn})"
                    break

        for snake in board.snakes:
            if snake.id in dead:
                continue
            for other in board.snakes:
                if other.id != snake.id and other.head == snake.head and other.length >= snake.length:
                    dead[snake.id] = f"head-to-head loss vs {other.id} (turn {turn})"
                    break

        death_reasons.update(dead)
        board.snakes = [s for s in board.snakes if s.id not in dead]

        if eaten or rng.random() < food_spawn_chance or not board.food:
            spawn_food(board, rng, 1)

        turns_played = turn + 1

    if len(board.snakes) == 1:
        winner = board.snakes[0].id
    elif len(board.snakes) > 1:
        # Longest snake wins on timeout
        winner = max(board.snakes, key=lambda s: s.length).id
    else:
        winner = None

    return GameResult(
        winner=winner,
        turns=turns_played,
        death_reasons=death_reasons,
        final_snakes={s.id: {"length": s.length, "health": s.health} for s in board.snakes},
    )
