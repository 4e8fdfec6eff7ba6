"""
Build reference graphs from plain records.

The loader takes the nested dict/list structure produced by a YAML or JSON
parser and validates every record before it enters the in-memory model.
It is a convenience for tooling and tests, not a storage format.

Document layout:

    options:                      # optional, see GraphOptions
      allow_self_adjacency: true
    blocks:
      - start: 10                 # shorthand: LEFT face at start
        bases: ACCTA
      - left: {coordinate: 20, face: left}
        right: {coordinate: 24, face: right}
        bases: GGTTA
    adjacencies:
      - left: 14R                 # Sides as '<coordinate><L|R>' ...
        right: 20L
      - left: {coordinate: 24, face: right}   # ... or as mappings
        right: {coordinate: 10, face: left}
    threads:                      # optional
      - name: forward
        path: 10+,20-             # blocks named by left coordinate
        start: 0
        end: 7

Author: Kevin R. Roy
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging
import re

import yaml

from ..config import GraphOptions
from ..core.block import Block
from ..core.graph import Adjacency, ReferenceGraph
from ..core.sides import Edge, Face, Side
from ..core.thread import DirectedBlock, Thread, build_thread
from ..errors import BrokenPath

logger = logging.getLogger(__name__)

ON_ERROR_CHOICES = ('abort', 'skip')

SIDE_PATTERN = re.compile(r'^(\d+)\s*([LlRr])$')
PATH_TOKEN_PATTERN = re.compile(r'^(\d+)\s*([+-])$')


@dataclass
class LoadResult:
    """Outcome of loading a graph document.

    Attributes:
        graph: The populated (frozen) graph
        threads: Threads from the document, by name
        errors: Messages for records skipped under on_error='skip'
    """
    graph: ReferenceGraph
    threads: Dict[str, Thread] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_side(value: Union[str, Dict[str, Any]]) -> Side:
    """Parse a Side from '14R' / '20L' or {'coordinate': 14, 'face': 'right'}."""
    if isinstance(value, dict):
        if 'coordinate' not in value or 'face' not in value:
            raise ValueError(f"Side needs 'coordinate' and 'face': {value!r}")
        return Side(coordinate=value['coordinate'], face=Face.parse(value['face']))

    match = SIDE_PATTERN.match(str(value).strip())
    if not match:
        raise ValueError(f"Cannot parse side {value!r} (expected e.g. '14R' or '20L')")
    face = Face.LEFT if match.group(2).upper() == 'L' else Face.RIGHT
    return Side(coordinate=int(match.group(1)), face=face)


def parse_block(record: Dict[str, Any]) -> Block:
    """Parse and validate one block record."""
    if not isinstance(record, dict):
        raise ValueError(f"Block record must be a mapping, got {record!r}")
    if 'bases' not in record:
        raise ValueError("Block record is missing 'bases'")

    bases = record['bases']
    if not isinstance(bases, str):
        raise ValueError(f"Block 'bases' must be a string, got {bases!r}")
    if 'start' in record:
        start = record['start']
        if not isinstance(start, int) or isinstance(start, bool):
            raise ValueError(f"Block 'start' must be an integer, got {start!r}")
        return Block.from_span(start, bases)
    if 'left' in record and 'right' in record:
        edge = Edge(left=parse_side(record['left']), right=parse_side(record['right']))
        return Block.create(edge, bases)
    raise ValueError("Block record needs either 'start' or both 'left' and 'right'")


def parse_adjacency_edge(record: Dict[str, Any]) -> Edge:
    """Parse the edge of one adjacency record ({'left': ..., 'right': ...})."""
    if isinstance(record, (list, tuple)) and len(record) == 2:
        return Edge(left=parse_side(record[0]), right=parse_side(record[1]))
    if not isinstance(record, dict) or 'left' not in record or 'right' not in record:
        raise ValueError(f"Adjacency record needs 'left' and 'right': {record!r}")
    return Edge(left=parse_side(record['left']), right=parse_side(record['right']))


def parse_path_spec(spec: Union[str, List[str]], graph: ReferenceGraph) -> List[DirectedBlock]:
    """
    Parse a block walk such as '10+,20-' against a graph.

    Each token names a block by its left coordinate; '+' walks it left to
    right and '-' right to left.

    Raises:
        ValueError: If a token is malformed
        BrokenPath: If no block starts at a named coordinate
    """
    tokens = spec.split(',') if isinstance(spec, str) else list(spec)

    path = []
    for token in tokens:
        token = str(token).strip()
        if not token:
            continue
        match = PATH_TOKEN_PATTERN.match(token)
        if not match:
            raise ValueError(f"Cannot parse path step {token!r} (expected e.g. '10+' or '20-')")
        coordinate = int(match.group(1))
        block = graph.block_starting_at(coordinate)
        if block is None:
            raise BrokenPath(f"No block starts at coordinate {coordinate}")
        path.append(DirectedBlock(block=block, orientation=match.group(2) == '+'))
    return path


def load_graph(
    document: Dict[str, Any],
    options: Optional[GraphOptions] = None,
    on_error: str = 'abort',
) -> LoadResult:
    """
    Build a graph, plus any threads, from a document.

    Args:
        document: Parsed document (see module docstring)
        options: Validation options; defaults to the document's 'options'
        on_error: 'abort' re-raises the first invalid record, 'skip'
            records it in LoadResult.errors and carries on

    Returns:
        LoadResult with a frozen graph
    """
    if on_error not in ON_ERROR_CHOICES:
        raise ValueError(f"on_error must be one of {ON_ERROR_CHOICES}, got {on_error!r}")
    if not isinstance(document, dict):
        raise ValueError("Graph document must be a mapping")

    if options is None:
        options = GraphOptions.from_dict(document.get('options') or {})

    graph = ReferenceGraph(options)
    result = LoadResult(graph=graph)

    def handle(kind: str, index: int, exc: ValueError):
        message = f"{kind} {index}: {exc}"
        if on_error == 'abort':
            raise type(exc)(message) from exc
        result.errors.append(message)

    for i, record in enumerate(document.get('blocks') or []):
        try:
            graph.add_block(parse_block(record))
        except ValueError as e:
            handle('block', i, e)

    for i, record in enumerate(document.get('adjacencies') or []):
        try:
            graph.add_adjacency(Adjacency.create(parse_adjacency_edge(record), graph))
        except ValueError as e:
            handle('adjacency', i, e)

    graph.freeze()

    for i, record in enumerate(document.get('threads') or []):
        try:
            if not isinstance(record, dict) or 'path' not in record:
                raise ValueError("Thread record needs a 'path'")
            name = str(record.get('name', f"thread_{i}"))
            result.threads[name] = build_thread(
                graph,
                parse_path_spec(record['path'], graph),
                start_offset=record.get('start', 0),
                end_offset=record.get('end'),
            )
        except ValueError as e:
            handle('thread', i, e)

    if result.errors:
        logger.warning(f"Graph document had {len(result.errors)} invalid records:")
        for err in result.errors[:10]:
            logger.warning(f"  {err}")
        if len(result.errors) > 10:
            logger.warning(f"  ... and {len(result.errors) - 10} more")

    logger.info(
        f"Loaded graph with {graph.n_blocks} blocks, {graph.n_adjacencies} adjacencies "
        f"and {len(result.threads)} threads"
    )
    return result


def load_graph_yaml(
    path: Path,
    options: Optional[GraphOptions] = None,
    on_error: str = 'abort',
) -> LoadResult:
    """Load a graph document from a YAML (or JSON) file."""
    with open(path) as f:
        document = yaml.safe_load(f) or {}
    logger.debug(f"Read graph document from {path}")
    return load_graph(document, options=options, on_error=on_error)
