"""
Alignment records onto reference graph threads.

Both records are static value objects checked when built: the CIGAR must
account for the full resolved length of thread1 on the reference side, and
for the full query (a second thread, or an external string) on the query
side.

Author: Kevin R. Roy
"""

from dataclasses import InitVar, dataclass
from typing import List, Sequence, Tuple, Union
import logging

import pysam

from ..errors import CigarLengthMismatch, InvalidCigar
from ..utils.sequence import count_mismatches
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
from .thread import Thread, resolve_sequence

logger = logging.getLogger(__name__)

CigarInput = Union[str, Sequence[CigarUnit]]

# Columns where both sequences have a base
ALIGNED_COLUMN_OPS = {'M', '=', 'X'}


def _normalise_cigar(cigar: CigarInput) -> Tuple[CigarUnit, ...]:
    if isinstance(cigar, str):
        return tuple(parse_cigar_string(cigar))
    units = tuple(cigar)
    for unit in units:
        if not isinstance(unit, CigarUnit):
            raise InvalidCigar(f"Expected CigarUnit, got {unit!r}")
    return units


def _check_reference_side(cigar: Tuple[CigarUnit, ...], thread1: Thread):
    consumed = reference_length(cigar)
    if consumed != thread1.length:
        raise CigarLengthMismatch(
            f"CIGAR {format_cigar(cigar)} consumes {consumed} reference bases "
            f"but thread1 resolves to {thread1.length}"
        )


def _count_column_mismatches(ref_seq: str, query_seq: str, operations: List[CigarOperation]) -> int:
    mismatches = 0
    for op in operations:
        if op.op_char in ALIGNED_COLUMN_OPS:
            mismatches += count_mismatches(
                ref_seq[op.ref_start:op.ref_end],
                query_seq[op.query_start:op.query_end],
            )
    return mismatches


@dataclass(frozen=True)
class GraphToGraphAlignment:
    """
    Alignment of one graph walk (thread2, the query) onto another (thread1).

    Attributes:
        thread1: Reference-side thread
        thread2: Query-side thread
        cigar: CIGAR units in alignment order (a CIGAR string is accepted)
    """
    thread1: Thread
    thread2: Thread
    cigar: Tuple[CigarUnit, ...]

    def __post_init__(self):
        object.__setattr__(self, 'cigar', _normalise_cigar(self.cigar))
        _check_reference_side(self.cigar, self.thread1)

        consumed = query_length(self.cigar)
        if consumed != self.thread2.length:
            raise CigarLengthMismatch(
                f"CIGAR {format_cigar(self.cigar)} consumes {consumed} query bases "
                f"but thread2 resolves to {self.thread2.length}"
            )

    @classmethod
    def create(cls, thread1: Thread, thread2: Thread, cigar: CigarInput) -> 'GraphToGraphAlignment':
        return cls(thread1=thread1, thread2=thread2, cigar=cigar)

    @property
    def cigar_string(self) -> str:
        return format_cigar(self.cigar)

    def operations(self) -> List[CigarOperation]:
        return parse_cigar_to_operations(self.cigar)

    def mismatches(self) -> int:
        """Number of aligned columns whose bases differ."""
        return _count_column_mismatches(
            resolve_sequence(self.thread1),
            resolve_sequence(self.thread2),
            self.operations(),
        )


@dataclass(frozen=True)
class StringToGraphAlignment:
    """
    Alignment of a flat string (the query) onto a graph walk.

    The query string itself is not stored, only checked: the CIGAR must
    consume exactly its length when the record is built.

    Attributes:
        thread1: Reference-side thread
        cigar: CIGAR units in alignment order (a CIGAR string is accepted)
        query: The aligned string, or just its length (init only)
    """
    thread1: Thread
    cigar: Tuple[CigarUnit, ...]
    query: InitVar[Union[str, int]]

    def __post_init__(self, query):
        object.__setattr__(self, 'cigar', _normalise_cigar(self.cigar))
        _check_reference_side(self.cigar, self.thread1)
        self.validate_query(query)

    @classmethod
    def create(
        cls,
        thread1: Thread,
        cigar: CigarInput,
        query: Union[str, int],
    ) -> 'StringToGraphAlignment':
        """
        Build an alignment and check it against the query.

        Args:
            thread1: Reference-side thread
            cigar: CIGAR units or string
            query: The aligned string, or just its length

        Raises:
            CigarLengthMismatch: If either side is not fully accounted for
        """
        return cls(thread1=thread1, cigar=cigar, query=query)

    @property
    def cigar_string(self) -> str:
        return format_cigar(self.cigar)

    @property
    def query_length(self) -> int:
        """Query length implied by the CIGAR."""
        return query_length(self.cigar)

    def validate_query(self, query: Union[str, int]) -> None:
        """
        Raises:
            CigarLengthMismatch: If the CIGAR's query consumption differs
                from the query length
        """
        expected = query if isinstance(query, int) else len(query)
        consumed = self.query_length
        if consumed != expected:
            raise CigarLengthMismatch(
                f"CIGAR {self.cigar_string} consumes {consumed} query bases "
                f"but the query string has {expected}"
            )

    def operations(self) -> List[CigarOperation]:
        return parse_cigar_to_operations(self.cigar)

    def mismatches(self, query: str) -> int:
        """Number of aligned columns where `query` differs from the thread."""
        self.validate_query(query)
        return _count_column_mismatches(resolve_sequence(self.thread1), query, self.operations())


def string_alignment_from_segment(
    read: pysam.AlignedSegment,
    thread: Thread,
) -> StringToGraphAlignment:
    """
    Build a StringToGraphAlignment from a record aligned to a thread.

    The record must have been aligned against the thread's resolved
    sequence, with its alignment starting at the first base of the thread
    window. The read's own sequence is the external query string.

    Args:
        read: pysam AlignedSegment object
        thread: Thread whose resolved sequence the read was aligned to

    Returns:
        StringToGraphAlignment

    Raises:
        InvalidCigar: If the record has no CIGAR or no query
        CigarLengthMismatch: If the CIGAR does not cover thread or read
    """
    cigar = cigar_from_segment(read)
    if not cigar:
        raise InvalidCigar(f"Read {read.query_name} has no CIGAR")

    if read.query_sequence is not None:
        query = read.query_sequence
    else:
        query = read.infer_query_length()
        if query is None:
            raise InvalidCigar(f"Read {read.query_name} has no query sequence")

    alignment = StringToGraphAlignment.create(thread1=thread, cigar=cigar, query=query)
    logger.debug(f"Read {read.query_name}: {alignment.cigar_string} onto {thread}")
    return alignment
