"""
Board model for the BoaSnake engine.

Plain value types rebuilt from each turn's snapshot. The search only ever
works on copies produced by the transition in moves.py.
"""

import typing
from dataclasses import dataclass, field

# Constants
X = 'x'
Y = 'y'
LEFT = 'left'
RIGHT = 'right'
DOWN = 'down'
UP = 'up'

DIRECTIONS = [UP, DOWN, LEFT, RIGHT]

MAX_HEALTH = 100

# Unit vector for each move, (0, 0) is the bottom-left corner
DELTAS = {
    UP: (0, 1),
    DOWN: (0, -1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}


@dataclass(frozen=True)
class Coord:
    """A cell on the grid."""
    x: int
    y: int

    def shift(self, direction: str) -> "Coord":
        """Return the neighbouring cell in the given direction."""
        dx, dy = DELTAS[direction]
        return Coord(self.x + dx, self.y + dy)

    @classmethod
    def from_dict(cls, data: typing.Dict) -> "Coord":
        return cls(int(data[X]), int(data[Y]))

    def to_dict(self) -> typing.Dict:
        return {X: self.x, Y: self.y}


@dataclass
class Snake:
    """
    A snake on the board.

    Attributes:
        id: Unique snake id
        name: Display name
        health: 0-100
        body: Coordinates from head (index 0) to tail
        head: Always body[0]
        length: Always len(body) after a committed transition
        shout: Cosmetic, ignored by the engine
    """
    id: str
    name: str
    health: int
    body: typing.List[Coord]
    head: Coord
    length: int
    shout: typing.Optional[str] = None
    latency: str = ""

    @property
    def tail(self) -> Coord:
        return self.body[-1]

    def copy(self) -> "Snake":
        return Snake(
            id=self.id,
            name=self.name,
            health=self.health,
            body=list(self.body),
            head=self.head,
            length=self.length,
            shout=self.shout,
            latency=self.latency,
        )

    @classmethod
    def from_dict(cls, data: typing.Dict) -> "Snake":
        body = [Coord.from_dict(seg) for seg in data['body']]
        head = Coord.from_dict(data['head']) if 'head' in data else body[0]
        return cls(
            id=data['id'],
            name=data.get('name', data['id']),
            health=max(0, min(MAX_HEALTH, int(data['health']))),
            body=body,
            head=head,
            length=int(data.get('length', len(body))),
            shout=data.get('shout'),
            latency=str(data.get('latency', "")),
        )

    def to_dict(self) -> typing.Dict:
        return {
            'id': self.id,
            'name': self.name,
            'health': self.health,
            'body': [seg.to_dict() for seg in self.body],
            'head': self.head.to_dict(),
            'length': self.length,
            'shout': self.shout,
            'latency': self.latency,
        }


@dataclass
class Board:
    """Grid bounds plus everything on it for the current turn."""
    width: int
    height: int
    food: typing.Set[Coord] = field(default_factory=set)
    # Parsed and carried, never consulted by the engine
    hazards: typing.Set[Coord] = field(default_factory=set)
    snakes: typing.List[Snake] = field(default_factory=list)

    def in_bounds(self, pos: Coord) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    @classmethod
    def from_dict(cls, data: typing.Dict) -> "Board":
        return cls(
            width=int(data['width']),
            height=int(data['height']),
            food={Coord.from_dict(f) for f in data.get('food', [])},
            hazards={Coord.from_dict(h) for h in data.get('hazards', [])},
            snakes=[Snake.from_dict(s) for s in data.get('snakes', [])],
        )

    def to_dict(self) -> typing.Dict:
        return {
            'width': self.width,
            'height': self.height,
            'food': [f.to_dict() for f in sorted(self.food, key=lambda c: (c.x, c.y))],
            'hazards': [h.to_dict() for h in sorted(self.hazards, key=lambda c: (c.x, c.y))],
            'snakes': [s.to_dict() for s in self.snakes],
        }
