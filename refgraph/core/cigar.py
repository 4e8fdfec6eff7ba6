"""
CIGAR handling for alignments onto reference graph threads.

The operation vocabulary is the SAM one. Only the reference/query
consumption of each operation matters to this package; in an alignment the
"reference" is always thread1's resolved sequence.

Author: Kevin R. Roy
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence
import re

import pysam

from ..errors import InvalidCigar

# CIGAR operation codes (SAM format, as used by pysam)
CIGAR_OPS = {
    0: 'M',   # Match/mismatch
    1: 'I',   # Insertion
    2: 'D',   # Deletion
    3: 'N',   # Skipped region (intron)
    4: 'S',   # Soft clip
    5: 'H',   # Hard clip
    6: 'P',   # Padding
    7: '=',   # Sequence match
    8: 'X',   # Sequence mismatch
}

OP_CODES = {char: code for code, char in CIGAR_OPS.items()}

# Operations that consume reference bases
REF_CONSUMING_OPS = {'M', 'D', 'N', '=', 'X'}

# Operations that consume query (read) bases
QUERY_CONSUMING_OPS = {'M', 'I', 'S', '=', 'X'}

CIGAR_PATTERN = re.compile(r'(\d+)([MIDNSHP=X])')


@dataclass(frozen=True)
class CigarUnit:
    """One CIGAR operation and its length."""
    operation: str
    length: int

    def __post_init__(self):
        if self.operation not in OP_CODES:
            raise InvalidCigar(f"Unknown CIGAR operation: {self.operation!r}")
        if not isinstance(self.length, int) or self.length < 0:
            raise InvalidCigar(f"CIGAR length must be a non-negative integer, got {self.length!r}")

    @property
    def consumes_reference(self) -> bool:
        return self.operation in REF_CONSUMING_OPS

    @property
    def consumes_query(self) -> bool:
        return self.operation in QUERY_CONSUMING_OPS

    def __str__(self) -> str:
        return f"{self.length}{self.operation}"


@dataclass
class CigarOperation:
    """A CIGAR operation placed on reference and query coordinates."""
    op_char: str
    length: int
    ref_start: int
    ref_end: int
    query_start: int
    query_end: int


def parse_cigar_string(cigar_str: str) -> List[CigarUnit]:
    """Parse a CIGAR string such as '5M1I3M' into CigarUnits.

    An empty string or '*' gives an empty list.

    Raises:
        InvalidCigar: If the string has characters outside valid operations
    """
    cigar_str = cigar_str.strip()
    if cigar_str in ('', '*'):
        return []

    units = []
    consumed = 0
    for match in CIGAR_PATTERN.finditer(cigar_str):
        if match.start() != consumed:
            break
        units.append(CigarUnit(operation=match.group(2), length=int(match.group(1))))
        consumed = match.end()

    if consumed != len(cigar_str):
        raise InvalidCigar(f"Malformed CIGAR string: {cigar_str!r}")
    return units


def format_cigar(units: Iterable[CigarUnit]) -> str:
    """Render CigarUnits back into a CIGAR string."""
    return ''.join(str(unit) for unit in units)


def reference_length(units: Iterable[CigarUnit]) -> int:
    """Total length of reference-consuming operations (M, D, N, =, X)."""
    return sum(unit.length for unit in units if unit.consumes_reference)


def query_length(units: Iterable[CigarUnit]) -> int:
    """Total length of query-consuming operations (M, I, S, =, X)."""
    return sum(unit.length for unit in units if unit.consumes_query)


def parse_cigar_to_operations(units: Sequence[CigarUnit]) -> List[CigarOperation]:
    """
    Place each CIGAR operation on reference and query coordinates.

    Coordinates are 0-based offsets into the aligned sequences (thread1's
    resolved sequence for the reference, the query string or thread2 for
    the query).

    Args:
        units: CIGAR units in alignment order

    Returns:
        List of CigarOperation objects
    """
    operations = []
    ref_pos = 0
    query_pos = 0

    for unit in units:
        ref_end = ref_pos + unit.length if unit.consumes_reference else ref_pos
        query_end = query_pos + unit.length if unit.consumes_query else query_pos

        operations.append(CigarOperation(
            op_char=unit.operation,
            length=unit.length,
            ref_start=ref_pos,
            ref_end=ref_end,
            query_start=query_pos,
            query_end=query_end,
        ))

        ref_pos = ref_end
        query_pos = query_end

    return operations


def cigar_from_segment(read: pysam.AlignedSegment) -> List[CigarUnit]:
    """
    Convert a pysam record's CIGAR into CigarUnits.

    Args:
        read: pysam AlignedSegment object

    Returns:
        List of CigarUnit (empty for records without a CIGAR)
    """
    if read.cigartuples is None:
        return []

    units = []
    for op_code, length in read.cigartuples:
        if op_code not in CIGAR_OPS:
            raise InvalidCigar(f"Unsupported CIGAR operation code {op_code} in read {read.query_name}")
        units.append(CigarUnit(operation=CIGAR_OPS[op_code], length=length))
    return units
