"""
Shared fixtures for the BoaSnake tests.
"""

import os
import sys

import pytest

# Make the project importable without installing it
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from boa_snake.board import Board, Coord, Snake  # noqa: E402


def make_snake(body, health=90, snake_id="you", name="you"):
    """Build a snake from a list of (x, y) tuples, head first."""
    coords = [Coord(x, y) for x, y in body]
    return Snake(
        id=snake_id,
        name=name,
        health=health,
        body=coords,
        head=coords[0],
        length=len(coords),
    )


def make_board(snakes=(), food=(), width=11, height=11):
    return Board(
        width=width,
        height=height,
        food={Coord(x, y) for x, y in food},
        snakes=list(snakes),
    )


@pytest.fixture
def snake_factory():
    return make_snake


@pytest.fixture
def board_factory():
    return make_board


@pytest.fixture
def enclosed_snake():
    """Snake whose head at (1,1) is walled in by its own body on every side."""
    return make_snake([
        (1, 1), (1, 2), (2, 2), (2, 1), (2, 0), (1, 0), (0, 0), (0, 1), (0, 2), (0, 3),
    ])


@pytest.fixture
def sample_game_state():
    """A move request as sent by the Battlesnake engine."""
    return {
        "game": {"id": "game-1", "ruleset": {"name": "standard"}, "timeout": 200},
        "turn": 14,
        "board": {
            "height": 11,
            "width": 11,
            "food": [{"x": 5, "y": 5}, {"x": 9, "y": 0}],
            "hazards": [{"x": 0, "y": 10}],
            "snakes": [
                {
                    "id": "snake-a",
                    "name": "boa",
                    "health": 54,
                    "body": [{"x": 5, "y": 0}, {"x": 5, "y": 1}, {"x": 5, "y": 2}],
                    "head": {"x": 5, "y": 0},
                    "length": 3,
                    "latency": "111",
                    "shout": "",
                },
                {
                    "id": "snake-b",
                    "name": "other",
                    "health": 16,
                    "body": [{"x": 1, "y": 8}, {"x": 2, "y": 8}, {"x": 3, "y": 8}],
                    "head": {"x": 1, "y": 8},
                    "length": 3,
                    "latency": "222",
                    "shout": "",
                },
            ],
        },
        "you": {
            "id": "snake-a",
            "name": "boa",
            "health": 54,
            "body": [{"x": 5, "y": 0}, {"x": 5, "y": 1}, {"x": 5, "y": 2}],
            "head": {"x": 5, "y": 0},
            "length": 3,
            "latency": "111",
            "shout": "",
        },
    }
