"""
Tabular output and summaries for reference graphs.

Author: Kevin R. Roy
"""

from pathlib import Path
from typing import Any, Dict, Tuple
import logging

import pandas as pd

from ..core.graph import ReferenceGraph
from ..utils.sequence import gc_content

logger = logging.getLogger(__name__)

BLOCK_COLUMNS = ['start', 'end', 'left_face', 'right_face', 'length', 'gc_content', 'bases']
ADJACENCY_COLUMNS = ['left_coordinate', 'left_face', 'right_coordinate', 'right_face']


def blocks_to_dataframe(graph: ReferenceGraph, include_bases: bool = True) -> pd.DataFrame:
    """One row per block, in coordinate order."""
    rows = []
    for block in graph.blocks:
        row = {
            'start': block.start,
            'end': block.end,
            'left_face': block.left.face.value,
            'right_face': block.right.face.value,
            'length': block.length,
            'gc_content': round(gc_content(block.bases), 4),
        }
        if include_bases:
            row['bases'] = block.bases
        rows.append(row)

    columns = BLOCK_COLUMNS if include_bases else BLOCK_COLUMNS[:-1]
    return pd.DataFrame(rows, columns=columns)


def adjacencies_to_dataframe(graph: ReferenceGraph) -> pd.DataFrame:
    """One row per adjacency, as registered (left end, right end)."""
    rows = [
        {
            'left_coordinate': adjacency.edge.left.coordinate,
            'left_face': adjacency.edge.left.face.value,
            'right_coordinate': adjacency.edge.right.coordinate,
            'right_face': adjacency.edge.right.face.value,
        }
        for adjacency in graph.adjacencies
    ]
    return pd.DataFrame(rows, columns=ADJACENCY_COLUMNS)


def write_graph_tsv(
    graph: ReferenceGraph,
    output_dir: Path,
    include_bases: bool = True,
) -> Tuple[Path, Path]:
    """
    Write blocks.tsv and adjacencies.tsv.

    Args:
        graph: Graph to export
        output_dir: Directory for the two files (created if missing)
        include_bases: Include the base strings in blocks.tsv

    Returns:
        Paths to (blocks.tsv, adjacencies.tsv)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    blocks_path = output_dir / 'blocks.tsv'
    adjacencies_path = output_dir / 'adjacencies.tsv'

    blocks_to_dataframe(graph, include_bases=include_bases).to_csv(blocks_path, sep='\t', index=False)
    adjacencies_to_dataframe(graph).to_csv(adjacencies_path, sep='\t', index=False)

    logger.info(f"Wrote {graph.n_blocks} blocks to {blocks_path}")
    logger.info(f"Wrote {graph.n_adjacencies} adjacencies to {adjacencies_path}")

    return blocks_path, adjacencies_path


def summarize_graph(graph: ReferenceGraph) -> Dict[str, Any]:
    """Headline statistics for a graph."""
    blocks = graph.blocks
    lengths = [block.length for block in blocks]

    # Block end sides with no adjacency are free ends of the graph
    free_ends = sum(
        1 for block in blocks for side in block.sides
        if not graph.adjacencies_at(side)
    )

    return {
        'n_blocks': len(blocks),
        'n_adjacencies': graph.n_adjacencies,
        'total_bases': sum(lengths),
        'min_block_length': min(lengths) if lengths else 0,
        'max_block_length': max(lengths) if lengths else 0,
        'mean_block_length': sum(lengths) / len(lengths) if lengths else 0.0,
        'self_loops': sum(1 for a in graph.adjacencies if a.is_self_loop),
        'free_ends': free_ends,
        'gc_content': gc_content(''.join(block.bases for block in blocks)),
    }


def print_graph_summary(graph: ReferenceGraph, name: str = "graph"):
    """Print a human-readable summary of the graph."""
    summary = summarize_graph(graph)

    print("\n" + "=" * 60)
    print(f"=== Reference graph: {name} ===")
    print("=" * 60)

    print(f"\nBlocks: {summary['n_blocks']} ({summary['total_bases']:,} bp)")
    if summary['n_blocks']:
        print(f"  - Block length: {summary['min_block_length']}-{summary['max_block_length']} bp "
              f"(mean {summary['mean_block_length']:.1f})")
        print(f"  - GC content: {summary['gc_content'] * 100:.1f}%")

    print(f"\nAdjacencies: {summary['n_adjacencies']}")
    if summary['self_loops']:
        print(f"  - Self loops: {summary['self_loops']}")
    print(f"  - Free block ends: {summary['free_ends']}")

    options = graph.options
    print("\nValidation options:")
    for key, value in options.to_dict().items():
        print(f"  - {key}: {value}")

    print()
