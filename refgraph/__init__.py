"""
refgraph - graph-based reference structures for pangenome tooling.

Author: Kevin R. Roy
"""

__version__ = "0.1.0"
__author__ = "Kevin R. Roy"

from .config import GraphOptions
from .core import (
    Adjacency,
    Block,
    DirectedBlock,
    Edge,
    Face,
    GraphToGraphAlignment,
    ReferenceGraph,
    Side,
    StringToGraphAlignment,
    Thread,
    build_thread,
    resolve_sequence,
)
from .errors import ReferenceGraphError

__all__ = [
    "Face",
    "Side",
    "Edge",
    "Block",
    "Adjacency",
    "ReferenceGraph",
    "DirectedBlock",
    "Thread",
    "build_thread",
    "resolve_sequence",
    "GraphToGraphAlignment",
    "StringToGraphAlignment",
    "GraphOptions",
    "ReferenceGraphError",
    "__version__",
]
