"""
I/O modules for refgraph.

Author: Kevin R. Roy
"""

from .loader import (
    LoadResult,
    load_graph,
    load_graph_yaml,
    parse_path_spec,
    parse_side,
)
from .output import (
    adjacencies_to_dataframe,
    blocks_to_dataframe,
    print_graph_summary,
    summarize_graph,
    write_graph_tsv,
)

__all__ = [
    'LoadResult',
    'load_graph',
    'load_graph_yaml',
    'parse_path_spec',
    'parse_side',
    'blocks_to_dataframe',
    'adjacencies_to_dataframe',
    'write_graph_tsv',
    'summarize_graph',
    'print_graph_summary',
]
