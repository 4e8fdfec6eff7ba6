"""
Sequence manipulation utilities.

Provides the DNA string helpers shared by blocks, threads and the loader.

Author: Kevin R. Roy
"""

_COMPLEMENT = {
    'A': 'T', 'T': 'A', 'G': 'C', 'C': 'G', 'N': 'N',
    'a': 't', 't': 'a', 'g': 'c', 'c': 'g', 'n': 'n'
}


def reverse_complement(seq: str) -> str:
    """Return reverse complement of DNA sequence.

    Case is preserved. Symbols outside ACGTN become 'N'.
    """
    return ''.join(_COMPLEMENT.get(base, 'N') for base in reversed(seq))


def gc_content(seq: str) -> float:
    """Calculate GC content of a sequence (0.0 to 1.0)."""
    seq = seq.upper()
    gc = sum(1 for base in seq if base in 'GC')
    total = sum(1 for base in seq if base in 'ACGT')
    return gc / total if total > 0 else 0.0


def count_mismatches(seq1: str, seq2: str) -> int:
    """Count mismatches between two equal-length sequences, ignoring case.

    Raises ValueError if sequences have different lengths.
    """
    if len(seq1) != len(seq2):
        raise ValueError(f"Sequences must be equal length: {len(seq1)} vs {len(seq2)}")
    return sum(a != b for a, b in zip(seq1.upper(), seq2.upper()))
