"""Tests for refgraph CIGAR handling and alignment records."""

import pysam
import pytest
from refgraph.core.alignment import (
    GraphToGraphAlignment,
    StringToGraphAlignment,
    string_alignment_from_segment,
)
from refgraph.core.block import Block
from refgraph.core.cigar import (
    CigarUnit,
    cigar_from_segment,
    format_cigar,
    parse_cigar_string,
    parse_cigar_to_operations,
    query_length,
    reference_length,
)
from refgraph.core.graph import ReferenceGraph
from refgraph.core.sides import Edge, Face, Side
from refgraph.core.thread import DirectedBlock, build_thread
from refgraph.errors import CigarLengthMismatch, InvalidCigar


BLOCK_A = Block.from_span(10, "ACCTA")
BLOCK_B = Block.from_span(20, "GGTTAC")

GRAPH = ReferenceGraph.build(
    blocks=[BLOCK_A, BLOCK_B],
    adjacencies=[Edge(Side(14, Face.RIGHT), Side(20, Face.LEFT))],
)

# ACCTAGGTTAC
THREAD_AB = build_thread(GRAPH, [DirectedBlock(BLOCK_A, True), DirectedBlock(BLOCK_B, True)])
# TAGGT
THREAD_A_REV = build_thread(GRAPH, [DirectedBlock(BLOCK_A, False)])


def make_segment(query_sequence, cigarstring, name="read1"):
    segment = pysam.AlignedSegment()
    segment.query_name = name
    segment.query_sequence = query_sequence
    segment.cigarstring = cigarstring
    return segment


class TestCigarParsing:
    """Test CIGAR string parsing and lengths."""

    def test_parse_simple(self):
        """Test parsing a simple CIGAR string."""
        units = parse_cigar_string("5M1I3M")
        assert units == [CigarUnit("M", 5), CigarUnit("I", 1), CigarUnit("M", 3)]

    def test_parse_empty(self):
        """Test that '*' and '' give no units."""
        assert parse_cigar_string("*") == []
        assert parse_cigar_string("") == []

    def test_parse_malformed(self):
        """Test that junk in a CIGAR string is rejected."""
        with pytest.raises(InvalidCigar):
            parse_cigar_string("5M1Q3M")
        with pytest.raises(InvalidCigar):
            parse_cigar_string("M5")
        with pytest.raises(InvalidCigar):
            parse_cigar_string("5M 3M")

    def test_format_round_trip(self):
        """Test rendering units back to a string."""
        assert format_cigar(parse_cigar_string("3S10M2D4=1X")) == "3S10M2D4=1X"

    def test_reference_and_query_lengths(self):
        """Test consumption totals."""
        units = parse_cigar_string("2S5M1I2D3=1X4H")
        assert reference_length(units) == 5 + 2 + 3 + 1
        assert query_length(units) == 2 + 5 + 1 + 3 + 1

    def test_skip_consumes_reference_only(self):
        """Test that N consumes reference but not query."""
        units = parse_cigar_string("4M10N4M")
        assert reference_length(units) == 18
        assert query_length(units) == 8

    def test_invalid_unit(self):
        """Test CigarUnit validation."""
        with pytest.raises(InvalidCigar):
            CigarUnit("Q", 3)
        with pytest.raises(InvalidCigar):
            CigarUnit("M", -1)

    def test_operations_coordinates(self):
        """Test placing operations on reference/query coordinates."""
        ops = parse_cigar_to_operations(parse_cigar_string("3M2I4M1D2M"))

        assert [(o.op_char, o.ref_start, o.ref_end, o.query_start, o.query_end) for o in ops] == [
            ('M', 0, 3, 0, 3),
            ('I', 3, 3, 3, 5),
            ('M', 3, 7, 5, 9),
            ('D', 7, 8, 9, 9),
            ('M', 8, 10, 9, 11),
        ]


class TestGraphToGraphAlignment:
    """Test thread-to-thread alignments."""

    def test_valid_alignment(self):
        """Test a CIGAR accounting for both threads."""
        thread2 = build_thread(GRAPH, [DirectedBlock(BLOCK_B, True)], 0, 6)
        # 11 reference bases, 6 query bases
        alignment = GraphToGraphAlignment(THREAD_AB, thread2, parse_cigar_string("5D6M"))
        assert alignment.cigar_string == "5D6M"

    def test_cigar_string_accepted(self):
        """Test that a CIGAR string is normalised to units."""
        alignment = GraphToGraphAlignment.create(THREAD_A_REV, THREAD_A_REV, "5M")
        assert alignment.cigar == (CigarUnit("M", 5),)

    def test_reference_mismatch(self):
        """Test that thread1's length must be consumed exactly."""
        with pytest.raises(CigarLengthMismatch, match="reference"):
            GraphToGraphAlignment(THREAD_AB, THREAD_A_REV, "5M")

    def test_query_mismatch(self):
        """Test that thread2's length must be consumed exactly."""
        with pytest.raises(CigarLengthMismatch, match="query"):
            GraphToGraphAlignment(THREAD_A_REV, THREAD_A_REV, "5M1I")

    def test_mismatch_count(self):
        """Test counting differing aligned columns between threads."""
        forward = build_thread(GRAPH, [DirectedBlock(BLOCK_A, True)])
        # ACCTA vs TAGGT: A/T C/A C/G T/G A/T all differ
        alignment = GraphToGraphAlignment(forward, THREAD_A_REV, "5M")
        assert alignment.mismatches() == 5

        same = GraphToGraphAlignment(forward, forward, "5=")
        assert same.mismatches() == 0


class TestStringToGraphAlignment:
    """Test string-to-thread alignments."""

    def test_valid_alignment(self):
        """Test an alignment covering thread and query."""
        alignment = StringToGraphAlignment.create(THREAD_AB, "5M1I6M", "ACCTAAGGTTAC")
        assert alignment.query_length == 12

    def test_query_length_mismatch(self):
        """Test that a wrong query consumption fails."""
        with pytest.raises(CigarLengthMismatch):
            StringToGraphAlignment.create(THREAD_AB, "11M", "ACCTAAGGTTAC")

    def test_reference_length_mismatch(self):
        """Test that a wrong reference consumption fails."""
        with pytest.raises(CigarLengthMismatch):
            StringToGraphAlignment.create(THREAD_AB, "10M", "ACCTAGGTTA")

    def test_constructor_checks_query(self):
        """Test that direct construction checks query consumption."""
        with pytest.raises(CigarLengthMismatch, match="query"):
            StringToGraphAlignment(THREAD_A_REV, "5M50I", "TAGGT")
        with pytest.raises(TypeError):
            StringToGraphAlignment(THREAD_A_REV, "5M")

    def test_query_given_as_length(self):
        """Test validating against a bare query length."""
        StringToGraphAlignment.create(THREAD_AB, "11M", 11)
        with pytest.raises(CigarLengthMismatch):
            StringToGraphAlignment.create(THREAD_AB, "11M", 12)

    def test_soft_clip_counts_towards_query(self):
        """Test that soft clips consume query bases."""
        StringToGraphAlignment.create(THREAD_A_REV, "2S5M", "NNTAGGT")

    def test_mismatches_against_reverse_thread(self):
        """Test mismatch counting on a reverse-oriented thread."""
        alignment = StringToGraphAlignment.create(THREAD_A_REV, "5M", "TAGCT")
        assert alignment.mismatches("TAGCT") == 1
        assert alignment.mismatches("TAGGT") == 0

    def test_mismatches_skip_indels(self):
        """Test that inserted bases are not compared."""
        alignment = StringToGraphAlignment.create(THREAD_AB, "5M1I6M", "ACCTAAGGTTAC")
        assert alignment.mismatches("ACCTAAGGTTAC") == 0

    def test_operations(self):
        """Test the coordinate view of the CIGAR."""
        alignment = StringToGraphAlignment(THREAD_AB, "5M1I6M", "ACCTAAGGTTAC")
        ops = alignment.operations()
        assert ops[1].op_char == 'I'
        assert (ops[2].ref_start, ops[2].query_start) == (5, 6)


class TestPysamBridge:
    """Test building alignments from pysam records."""

    def test_cigar_from_segment(self):
        """Test converting cigartuples to units."""
        segment = make_segment("ACCTAAGGTTAC", "5M1I6M")
        assert format_cigar(cigar_from_segment(segment)) == "5M1I6M"

    def test_cigar_from_segment_without_cigar(self):
        """Test that a record without CIGAR gives no units."""
        segment = pysam.AlignedSegment()
        segment.query_name = "unmapped"
        assert cigar_from_segment(segment) == []

    def test_string_alignment_from_segment(self):
        """Test building a StringToGraphAlignment from a record."""
        segment = make_segment("ACCTAAGGTTAC", "5M1I6M")
        alignment = string_alignment_from_segment(segment, THREAD_AB)
        assert alignment.cigar_string == "5M1I6M"
        assert alignment.mismatches("ACCTAAGGTTAC") == 0

    def test_string_alignment_from_segment_length_mismatch(self):
        """Test that a record not covering the thread fails."""
        segment = make_segment("ACCTAGGTT", "9M")
        with pytest.raises(CigarLengthMismatch):
            string_alignment_from_segment(segment, THREAD_AB)

    def test_string_alignment_from_segment_without_cigar(self):
        """Test that a record without CIGAR is rejected."""
        segment = pysam.AlignedSegment()
        segment.query_name = "unmapped"
        segment.query_sequence = "ACGT"
        with pytest.raises(InvalidCigar):
            string_alignment_from_segment(segment, THREAD_AB)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
