import typing

from boa_snake.board import (
    Board,
    Coord,
    Snake,
    DIRECTIONS,
    LEFT,
    RIGHT,
    DOWN,
    UP,
    MAX_HEALTH,
)


def available_moves(board: Board, snake: Snake) -> typing.List[str]:
    """
    Moves that do not immediately kill the snake.

    Rules are applied in order and only ever remove directions. Other
    snakes are not taken into account.

    Args:
        board: Current board
        snake: Snake to move

    Returns:
        Surviving directions in canonical order, empty if the snake is doomed
    """
    is_move_safe = set(DIRECTIONS)

    # Prevent the snake from moving backwards into its neck
    my_head = snake.body[0]
    if len(snake.body) >= 2:
        my_neck = snake.body[1]

        if my_neck.x < my_head.x:  # Neck is left of head, don't move left
            is_move_safe.discard(LEFT)
        elif my_neck.x > my_head.x:  # Neck is right of head, don't move right
            is_move_safe.discard(RIGHT)
        elif my_neck.y < my_head.y:  # Neck is below head, don't move down
            is_move_safe.discard(DOWN)
        elif my_neck.y > my_head.y:  # Neck is above head, don't move up
            is_move_safe.discard(UP)

    # Stay in bounds
    if my_head.y == board.height - 1:
        is_move_safe.discard(UP)
    if my_head.y == 0:
        is_move_safe.discard(DOWN)
    if my_head.x == 0:
        is_move_safe.discard(LEFT)
    if my_head.x == board.width - 1:
        is_move_safe.discard(RIGHT)

    # Don't run into our own body; the tail moves away this turn
    tail = snake.body[-1]
    for direction in DIRECTIONS:
        next_pos = my_head.shift(direction)
        if next_pos in snake.body and next_pos != tail:
            is_move_safe.discard(direction)

    return [direction for direction in DIRECTIONS if direction in is_move_safe]


def move_snake(board: Board, snake: Snake, direction: str) -> Snake:
    """
    Simulate one move and return the resulting snake.

    The input snake is left untouched. Growth lags eating by one turn: the
    tail is only kept when the snake was at full health before this move.
    Lethal results (out of bounds, zero health) are not detected here.
    """
    new_snake = snake.copy()
    new_snake.shout = None
    new_snake.health = max(0, snake.health - 1)

    new_head: Coord = snake.head.shift(direction)
    new_snake.head = new_head
    new_snake.body.insert(0, new_head)

    if new_head in board.food:
        new_snake.health = MAX_HEALTH

    if snake.health == MAX_HEALTH:
        new_snake.length += 1
    else:
        new_snake.body.pop()

    return new_snake


def normalize_snake(snake: Snake) -> Snake:
    """
    Drop a duplicated tail segment from a snapshot.

    The wire format stacks the last segment after eating (and at game start);
    one copy is removed so self-collision checks see the real tail.
    """
    body = snake.body
    if len(body) > 2 and body[-2] == body[-1]:
        snake = snake.copy()
        snake.body.pop()
        snake.length = len(snake.body)
    return snake
