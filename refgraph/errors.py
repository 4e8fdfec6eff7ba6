"""
Error types raised while building and traversing a reference graph.

Every failure in this package is a construction-time data-integrity error.
They all derive from ValueError so callers that only care about "bad input"
can catch that.

Author: Kevin R. Roy
"""


class ReferenceGraphError(ValueError):
    """Base class for all reference graph validation failures."""


class InvalidCoordinate(ReferenceGraphError):
    """Position identifier is not a non-negative 64-bit integer."""


class InvalidBlockGeometry(ReferenceGraphError):
    """Block edge does not join opposite faces in increasing coordinate order."""


class LengthMismatch(ReferenceGraphError):
    """Block bases do not cover exactly the block's position span."""


class DanglingEndpoint(ReferenceGraphError):
    """Adjacency end is not the end Side of any registered Block."""


class SelfAdjacencyNotAllowed(ReferenceGraphError):
    """Adjacency joins a Block to itself while the graph forbids it."""


class DuplicateAdjacency(ReferenceGraphError):
    """Adjacency between the same pair of Sides is already registered."""


class OverlappingCoordinateRange(ReferenceGraphError):
    """Two Blocks claim the same position identifiers."""


class CoordinateOutOfRange(ReferenceGraphError):
    """Base lookup outside a Block's span."""


class BrokenPath(ReferenceGraphError):
    """Consecutive DirectedBlocks of a Thread are not joined in the graph."""


class OffsetOutOfRange(ReferenceGraphError):
    """Thread offsets fall outside the path length."""


class InvalidCigar(ReferenceGraphError):
    """CIGAR string or unit could not be interpreted."""


class CigarLengthMismatch(ReferenceGraphError):
    """CIGAR does not account for the full aligned length on one side."""


class GraphFrozen(ReferenceGraphError):
    """Graph has left its build phase and no longer accepts members."""
