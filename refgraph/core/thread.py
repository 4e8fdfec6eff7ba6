"""
Traversal layer: DirectedBlocks and Threads.

A Thread is an ordered walk over oriented blocks plus a [start, end) window
on the concatenated, already-oriented sequence. Offsets always refer to the
oriented sequence, never to a block's stored forward strand, so reverse
complementing happens before slicing.

Author: Kevin R. Roy
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple
import logging

from ..errors import BrokenPath, OffsetOutOfRange
from .block import Block
from .graph import ReferenceGraph
from .sides import Side

logger = logging.getLogger(__name__)


def oriented_bases(block: Block, orientation: bool) -> str:
    """Bases of `block` as read in the given direction.

    Args:
        block: Block to read
        orientation: True reads left to right (stored bases), False reads
            right to left (reverse complement)
    """
    return block.bases if orientation else block.reverse_complement_bases()


@dataclass(frozen=True)
class DirectedBlock:
    """A Block plus a traversal direction (True = left to right)."""
    block: Block
    orientation: bool = True

    @property
    def entry_side(self) -> Side:
        """Side through which the walk enters the block."""
        return self.block.edge.left if self.orientation else self.block.edge.right

    @property
    def exit_side(self) -> Side:
        """Side through which the walk leaves the block."""
        return self.block.edge.right if self.orientation else self.block.edge.left

    @property
    def bases(self) -> str:
        return oriented_bases(self.block, self.orientation)

    @property
    def length(self) -> int:
        return self.block.length

    def flipped(self) -> 'DirectedBlock':
        """Same block traversed the other way."""
        return DirectedBlock(block=self.block, orientation=not self.orientation)

    def __str__(self) -> str:
        return f"{self.block.start}{'+' if self.orientation else '-'}"


@dataclass(frozen=True)
class Thread:
    """
    A walk through the graph and a window on its sequence.

    Build Threads with `build_thread`, which checks that the walk is joined
    in the graph and that the offsets fit the path.

    Attributes:
        path: Oriented blocks in walk order
        start_offset: First position of the window (0-based, inclusive)
        end_offset: End of the window (exclusive)
    """
    path: Tuple[DirectedBlock, ...]
    start_offset: int
    end_offset: int

    @property
    def path_length(self) -> int:
        """Total number of bases over all blocks of the walk."""
        return sum(d.length for d in self.path)

    @property
    def length(self) -> int:
        """Length of the resolved sequence."""
        return self.end_offset - self.start_offset

    def reverse(self) -> 'Thread':
        """
        The same walk traversed backwards.

        Block order and orientations flip and the window is mirrored, so the
        reversed thread resolves to the reverse complement of this one.
        """
        total = self.path_length
        return Thread(
            path=tuple(d.flipped() for d in reversed(self.path)),
            start_offset=total - self.end_offset,
            end_offset=total - self.start_offset,
        )

    def __str__(self) -> str:
        walk = ','.join(str(d) for d in self.path)
        return f"Thread({walk} [{self.start_offset}, {self.end_offset}))"


def _check_junction(graph: ReferenceGraph, previous: DirectedBlock, current: DirectedBlock, index: int):
    exit_side = previous.exit_side
    entry_side = current.entry_side

    if graph.has_adjacency(exit_side, entry_side):
        return
    if exit_side == entry_side and graph.options.allow_virtual_junctions:
        logger.debug(f"Accepting zero-length junction at {exit_side}")
        return

    raise BrokenPath(
        f"Path step {index - 1}->{index}: exit side {exit_side} of {previous} "
        f"is not joined to entry side {entry_side} of {current}"
    )


def build_thread(
    graph: ReferenceGraph,
    path: Iterable[DirectedBlock],
    start_offset: int = 0,
    end_offset: Optional[int] = None,
) -> Thread:
    """
    Validate a walk and window, and build a Thread.

    Args:
        graph: Graph the walk runs through
        path: Oriented blocks in walk order
        start_offset: Window start on the oriented sequence
        end_offset: Window end (exclusive); None means the full path length

    Returns:
        Thread

    Raises:
        BrokenPath: If a block is not registered in the graph, or two
            consecutive blocks are not joined by an Adjacency
        OffsetOutOfRange: If an offset is not an integer, or unless
            0 <= start_offset <= end_offset <= path length
    """
    path = tuple(path)

    for i, directed in enumerate(path):
        if not graph.has_block(directed.block):
            raise BrokenPath(f"Path step {i}: block {directed.block!r} is not registered in the graph")
        if i > 0:
            _check_junction(graph, path[i - 1], directed, i)

    total = sum(d.length for d in path)
    if end_offset is None:
        end_offset = total

    for name, value in (('start_offset', start_offset), ('end_offset', end_offset)):
        if not isinstance(value, int) or isinstance(value, bool):
            raise OffsetOutOfRange(f"{name} must be an integer, got {value!r}")

    if not 0 <= start_offset <= end_offset <= total:
        raise OffsetOutOfRange(
            f"Offsets [{start_offset}, {end_offset}) do not fit path of length {total}"
        )

    return Thread(path=path, start_offset=start_offset, end_offset=end_offset)


def resolve_sequence(thread: Thread) -> str:
    """
    Return the bases a Thread spells out.

    Each block contributes its stored bases when forward and its reverse
    complement when reverse; the concatenation is then sliced to
    [start_offset, end_offset).
    """
    oriented = ''.join(d.bases for d in thread.path)
    return oriented[thread.start_offset:thread.end_offset]
