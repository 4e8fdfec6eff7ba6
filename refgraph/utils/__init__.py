"""
Utility modules for refgraph.

Author: Kevin R. Roy
"""

from .sequence import (
    count_mismatches,
    gc_content,
    reverse_complement,
)

__all__ = [
    'reverse_complement',
    'gc_content',
    'count_mismatches',
]
