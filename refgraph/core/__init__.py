"""
Core reference graph model: sides, blocks, graph, threads and alignments.

Author: Kevin R. Roy
"""

from .alignment import (
    GraphToGraphAlignment,
    StringToGraphAlignment,
    string_alignment_from_segment,
)
from .block import Block
from .cigar import (
    CigarOperation,
    CigarUnit,
    cigar_from_segment,
    format_cigar,
    parse_cigar_string,
    parse_cigar_to_operations,
    query_length,
    reference_length,
)
from .graph import Adjacency, ReferenceGraph
from .sides import Edge, Face, Side
from .thread import (
    DirectedBlock,
    Thread,
    build_thread,
    oriented_bases,
    resolve_sequence,
)

__all__ = [
    # Primitives
    'Face',
    'Side',
    'Edge',
    'Block',
    # Graph
    'Adjacency',
    'ReferenceGraph',
    # Traversal
    'DirectedBlock',
    'Thread',
    'build_thread',
    'oriented_bases',
    'resolve_sequence',
    # CIGAR
    'CigarUnit',
    'CigarOperation',
    'parse_cigar_string',
    'format_cigar',
    'reference_length',
    'query_length',
    'parse_cigar_to_operations',
    'cigar_from_segment',
    # Alignments
    'GraphToGraphAlignment',
    'StringToGraphAlignment',
    'string_alignment_from_segment',
]
