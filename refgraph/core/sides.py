"""
Side and Edge primitives of the reference graph.

Positions are never materialised: a position is just its integer
identifier. A Side is one end (face) of a position and is the vertex type
of the graph. An Edge joins two Sides; what an Edge means (a Block or an
Adjacency) is decided by the record that wraps it.

Author: Kevin R. Roy
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from ..errors import InvalidCoordinate

# Position identifiers are signed 64-bit integers on the wire
MAX_COORDINATE = 2 ** 63 - 1


class Face(Enum):
    """Which end of a position a Side refers to."""
    LEFT = 'left'
    RIGHT = 'right'

    @property
    def opposite(self) -> 'Face':
        return Face.RIGHT if self is Face.LEFT else Face.LEFT

    @classmethod
    def parse(cls, value) -> 'Face':
        """Accept a Face, or its name/value in any case ('LEFT', 'left')."""
        if isinstance(value, Face):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown face: {value!r} (expected 'left' or 'right')") from None


@dataclass(frozen=True)
class Side:
    """A graph vertex: one face of one position."""
    coordinate: int
    face: Face

    def __post_init__(self):
        # bool is an int subclass but never a valid position id
        if not isinstance(self.coordinate, int) or isinstance(self.coordinate, bool):
            raise InvalidCoordinate(f"Coordinate must be an integer, got {self.coordinate!r}")
        if not 0 <= self.coordinate <= MAX_COORDINATE:
            raise InvalidCoordinate(
                f"Coordinate {self.coordinate} outside [0, {MAX_COORDINATE}]"
            )
        if not isinstance(self.face, Face):
            raise TypeError(f"face must be a Face, got {self.face!r}")

    def __lt__(self, other: 'Side') -> bool:
        if not isinstance(other, Side):
            return NotImplemented
        return (self.coordinate, self.face.value) < (other.coordinate, other.face.value)

    def __str__(self) -> str:
        return f"{self.coordinate}{'L' if self.face is Face.LEFT else 'R'}"


@dataclass(frozen=True)
class Edge:
    """An ordered pair of Sides: left endpoint, right endpoint."""
    left: Side
    right: Side

    def sides(self) -> Tuple[Side, Side]:
        return self.left, self.right

    def reversed(self) -> 'Edge':
        """Same Sides with the endpoints swapped."""
        return Edge(left=self.right, right=self.left)

    def other(self, side: Side) -> Side:
        """Return the endpoint opposite to `side`.

        Raises:
            ValueError: If `side` is not an endpoint of this edge
        """
        if side == self.left:
            return self.right
        if side == self.right:
            return self.left
        raise ValueError(f"{side} is not an endpoint of {self}")

    def __str__(self) -> str:
        return f"{self.left}-{self.right}"
