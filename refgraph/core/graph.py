"""
Reference graph: Blocks joined by Adjacencies.

Vertices are Sides. Each Block contributes one edge between its two end
Sides; each Adjacency contributes one edge between two Block end Sides.
The graph keeps a Side -> incident edge index so traversal never scans the
full edge set.

Membership changes are serialised by a lock (single writer). Once built,
`freeze()` turns the graph read-only and it can be shared between threads
without locking.

Author: Kevin R. Roy
"""

from bisect import bisect_left, bisect_right, insort
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Set
import logging
import threading

from ..config import DEFAULT_OPTIONS, GraphOptions
from ..errors import (
    DanglingEndpoint,
    DuplicateAdjacency,
    GraphFrozen,
    OverlappingCoordinateRange,
    SelfAdjacencyNotAllowed,
)
from .block import Block
from .sides import Edge, Side

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Adjacency:
    """
    An observed junction between two Block end Sides.

    Adjacencies are undirected for identity purposes: the edge A-B and the
    edge B-A describe the same junction.
    """
    edge: Edge

    @classmethod
    def create(cls, edge: Edge, graph: 'ReferenceGraph') -> 'Adjacency':
        """Validate `edge` against the blocks registered in `graph`."""
        graph.validate_adjacency_edge(edge)
        return cls(edge=edge)

    @property
    def key(self) -> FrozenSet[Side]:
        """Unordered pair of end Sides."""
        return frozenset(self.edge.sides())

    @property
    def is_self_loop(self) -> bool:
        """True if both ends are the same Side."""
        return self.edge.left == self.edge.right

    def __hash__(self):
        return hash(self.key)

    def __eq__(self, other):
        if not isinstance(other, Adjacency):
            return False
        return self.key == other.key

    def __repr__(self) -> str:
        return f"Adjacency({self.edge.left}, {self.edge.right})"


class ReferenceGraph:
    """Aggregate of Blocks and Adjacencies with Side lookups."""

    def __init__(self, options: Optional[GraphOptions] = None):
        self.options = options or DEFAULT_OPTIONS

        self._blocks_by_start: Dict[int, Block] = {}
        self._starts: List[int] = []  # sorted block start coordinates
        self._side_to_block: Dict[Side, Block] = {}

        self._adjacencies: Dict[FrozenSet[Side], Adjacency] = {}
        self._incident: Dict[Side, Set[Adjacency]] = defaultdict(set)

        self._lock = threading.Lock()
        self._frozen = False

    @classmethod
    def build(
        cls,
        blocks: Iterable[Block],
        adjacencies: Iterable[Edge] = (),
        options: Optional[GraphOptions] = None,
        freeze: bool = True,
    ) -> 'ReferenceGraph':
        """
        Build a graph in one pass: all blocks first, then adjacency edges.

        Args:
            blocks: Blocks to register
            adjacencies: Edges (or Adjacency records) joining block ends
            options: Validation options
            freeze: If True, return a read-only graph

        Returns:
            The populated ReferenceGraph
        """
        graph = cls(options)
        for block in blocks:
            graph.add_block(block)
        for item in adjacencies:
            edge = item.edge if isinstance(item, Adjacency) else item
            graph.add_adjacency(Adjacency.create(edge, graph))
        if freeze:
            graph.freeze()
        return graph

    # ------------------------------------------------------------------
    # Build phase
    # ------------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> 'ReferenceGraph':
        """End the build phase. Further additions raise GraphFrozen."""
        with self._lock:
            self._frozen = True
        logger.info(
            f"Reference graph frozen with {len(self._starts)} blocks "
            f"and {len(self._adjacencies)} adjacencies"
        )
        return self

    def _check_writable(self):
        if self._frozen:
            raise GraphFrozen("Reference graph is frozen; no further blocks or adjacencies can be added")

    def add_block(self, block: Block) -> None:
        """
        Register a Block.

        Raises:
            OverlappingCoordinateRange: If the block's span intersects a
                registered block's span
            GraphFrozen: If the graph is read-only
        """
        with self._lock:
            self._check_writable()

            # Registered spans are disjoint and sorted, so only the blocks
            # either side of the insertion point can intersect
            i = bisect_left(self._starts, block.start)
            candidates = []
            if i > 0:
                candidates.append(self._blocks_by_start[self._starts[i - 1]])
            if i < len(self._starts):
                candidates.append(self._blocks_by_start[self._starts[i]])

            for existing in candidates:
                if existing.overlaps(block):
                    raise OverlappingCoordinateRange(
                        f"Block [{block.start}, {block.end}] overlaps registered "
                        f"block [{existing.start}, {existing.end}]"
                    )

            insort(self._starts, block.start)
            self._blocks_by_start[block.start] = block
            for side in block.sides:
                self._side_to_block[side] = block

        logger.debug(f"Added block [{block.start}, {block.end}] ({block.length} bp)")

    def validate_adjacency_edge(self, edge: Edge) -> None:
        """
        Check that an edge may be registered as an Adjacency.

        Raises:
            DanglingEndpoint: If either end is not a registered Block end Side
            SelfAdjacencyNotAllowed: If both ends lie on one Block and the
                options forbid it
        """
        missing = [side for side in edge.sides() if side not in self._side_to_block]
        if missing:
            raise DanglingEndpoint(
                f"Adjacency {edge}: no registered block ends at "
                f"{', '.join(str(s) for s in missing)}"
            )

        if not self.options.allow_self_adjacency:
            if self._side_to_block[edge.left] is self._side_to_block[edge.right]:
                raise SelfAdjacencyNotAllowed(
                    f"Adjacency {edge} joins block "
                    f"[{self._side_to_block[edge.left].start}, "
                    f"{self._side_to_block[edge.left].end}] to itself"
                )

    def add_adjacency(self, adjacency: Adjacency) -> None:
        """
        Register an Adjacency after re-validating it against the current blocks.

        Adding a junction that is already registered is ignored, unless the
        graph options reject duplicates.

        Raises:
            DanglingEndpoint, SelfAdjacencyNotAllowed: See validate_adjacency_edge
            DuplicateAdjacency: If the junction exists and duplicates are rejected
            GraphFrozen: If the graph is read-only
        """
        with self._lock:
            self._check_writable()
            self.validate_adjacency_edge(adjacency.edge)

            if adjacency.key in self._adjacencies:
                if self.options.reject_duplicate_adjacencies:
                    raise DuplicateAdjacency(f"Adjacency {adjacency.edge} is already registered")
                logger.debug(f"Ignoring repeated adjacency {adjacency.edge}")
                return

            self._adjacencies[adjacency.key] = adjacency
            for side in adjacency.edge.sides():
                self._incident[side].add(adjacency)

        logger.debug(f"Added adjacency {adjacency.edge}")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def blocks(self) -> List[Block]:
        """Registered blocks in coordinate order."""
        return [self._blocks_by_start[start] for start in self._starts]

    @property
    def adjacencies(self) -> List[Adjacency]:
        """Registered adjacencies, ordered by their smaller end Side."""
        return sorted(self._adjacencies.values(), key=lambda a: sorted(a.edge.sides()))

    @property
    def n_blocks(self) -> int:
        return len(self._starts)

    @property
    def n_adjacencies(self) -> int:
        return len(self._adjacencies)

    @property
    def total_bases(self) -> int:
        return sum(block.length for block in self._blocks_by_start.values())

    def block_for_side(self, side: Side) -> Optional[Block]:
        """Block ending at `side`, or None."""
        return self._side_to_block.get(side)

    def block_starting_at(self, coordinate: int) -> Optional[Block]:
        """Block whose left Side sits at `coordinate`, or None."""
        return self._blocks_by_start.get(coordinate)

    def block_at(self, coordinate: int) -> Optional[Block]:
        """Block containing position `coordinate`, or None."""
        i = bisect_right(self._starts, coordinate) - 1
        if i < 0:
            return None
        block = self._blocks_by_start[self._starts[i]]
        return block if block.contains(coordinate) else None

    def has_block(self, block: Block) -> bool:
        return self._blocks_by_start.get(block.start) == block

    def has_adjacency(self, a: Side, b: Side) -> bool:
        """True if an Adjacency joins Sides `a` and `b` (either direction)."""
        return frozenset((a, b)) in self._adjacencies

    def adjacencies_at(self, side: Side) -> Set[Adjacency]:
        """Adjacencies incident on `side`."""
        return set(self._incident.get(side, ()))

    def neighbors(self, side: Side) -> Set[Side]:
        """
        Sides joined to `side` by one Block edge or one Adjacency edge.

        A Side has at most one Block edge but any number of Adjacencies.
        Unknown Sides have no neighbours.
        """
        result = set()
        block = self._side_to_block.get(side)
        if block is not None:
            result.add(block.edge.other(side))
        for adjacency in self._incident.get(side, ()):
            result.add(adjacency.edge.other(side))
        return result

    def __contains__(self, item) -> bool:
        if isinstance(item, Block):
            return self.has_block(item)
        if isinstance(item, Adjacency):
            return item.key in self._adjacencies
        if isinstance(item, Side):
            return item in self._side_to_block
        return False

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "building"
        return (
            f"ReferenceGraph(blocks={len(self._starts)}, "
            f"adjacencies={len(self._adjacencies)}, {state})"
        )
