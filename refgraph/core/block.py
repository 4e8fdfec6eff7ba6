"""
Blocks: maximal runs of sequentially numbered positions with their bases.

Author: Kevin R. Roy
"""

from dataclasses import dataclass
from typing import Tuple

from ..errors import CoordinateOutOfRange, InvalidBlockGeometry, LengthMismatch
from ..utils.sequence import reverse_complement
from .sides import Edge, Face, Side


@dataclass(frozen=True)
class Block:
    """
    A contiguous run of bases, represented as one Edge plus the sequence.

    The left Side always carries the numerically smaller coordinate, so
    base lookups resolve by offset from `edge.left.coordinate` whatever the
    genomic 5'/3' direction of the fragment.

    Attributes:
        edge: Edge joining the two end Sides of the run (opposite faces)
        bases: Base string, one character per position in the span
    """
    edge: Edge
    bases: str

    def __post_init__(self):
        left, right = self.edge.left, self.edge.right
        if left.face == right.face:
            raise InvalidBlockGeometry(
                f"Block edge {self.edge} must join opposite faces, "
                f"both ends are {left.face.value}"
            )
        if left.coordinate >= right.coordinate:
            raise InvalidBlockGeometry(
                f"Block edge {self.edge}: left coordinate {left.coordinate} "
                f"must be smaller than right coordinate {right.coordinate}"
            )
        expected = right.coordinate - left.coordinate + 1
        if len(self.bases) != expected:
            raise LengthMismatch(
                f"Block {self.edge} spans {expected} positions "
                f"but has {len(self.bases)} bases"
            )

    @classmethod
    def create(cls, edge: Edge, bases: str) -> 'Block':
        """Validate and build a Block."""
        return cls(edge=edge, bases=bases)

    @classmethod
    def from_span(cls, start: int, bases: str) -> 'Block':
        """Build a Block whose first base sits at position `start`."""
        return cls(
            edge=Edge(
                left=Side(start, Face.LEFT),
                right=Side(start + len(bases) - 1, Face.RIGHT),
            ),
            bases=bases,
        )

    @property
    def start(self) -> int:
        return self.edge.left.coordinate

    @property
    def end(self) -> int:
        """Last position id in the block (inclusive)."""
        return self.edge.right.coordinate

    @property
    def length(self) -> int:
        return len(self.bases)

    @property
    def left(self) -> Side:
        return self.edge.left

    @property
    def right(self) -> Side:
        return self.edge.right

    @property
    def sides(self) -> Tuple[Side, Side]:
        return self.edge.left, self.edge.right

    def contains(self, coordinate: int) -> bool:
        return self.start <= coordinate <= self.end

    def overlaps(self, other: 'Block') -> bool:
        """True if the two blocks share any position id."""
        return self.start <= other.end and other.start <= self.end

    def base_at(self, coordinate: int) -> str:
        """
        Return the base stored for a position id.

        Raises:
            CoordinateOutOfRange: If coordinate is outside [start, end]
        """
        if not self.contains(coordinate):
            raise CoordinateOutOfRange(
                f"Coordinate {coordinate} outside block [{self.start}, {self.end}]"
            )
        return self.bases[coordinate - self.start]

    def reverse_complement_bases(self) -> str:
        """Bases as read from the right end towards the left, complemented."""
        return reverse_complement(self.bases)

    def __len__(self) -> int:
        return len(self.bases)

    def __repr__(self) -> str:
        return f"Block({self.start}-{self.end}, {len(self.bases)} bp)"
