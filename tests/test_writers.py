"""
Tests for the FASTA, PHYLIP, MEGA and NEXUS writers.
"""

import io

import pytest

from nexusconvert.core.alignment import Alignment, FormatInfo
from nexusconvert.core.parser import NexusAlignmentParser
from nexusconvert.exceptions import ValidationError
from nexusconvert.io.writers import (
    FastaWriter, MegaWriter, NexusWriter, PhylipWriter, fixed_width_row, get_writer, pad_sequence,
    strip_placeholder,
)

STAMP = "Mon Jan 01 00:00:00 2024"


@pytest.fixture
def alignment():
    """Three records of unequal length."""
    aln = Alignment(FormatInfo(datatype="DNA", gap="-", missing="?", interleave=False))
    aln.add("seqA", "ACGTACGTAC")
    aln.add("seqB", "ACGTAC")
    aln.add("outgroup1", "TTTTACGTAC")
    return aln


class TestPadding:
    """Test fixed-width helpers."""

    def test_strip_placeholder(self):
        assert strip_placeholder("xxx_seqA") == "seqA"
        assert strip_placeholder("seqA") == "seqA"
        assert strip_placeholder("xxx_") == "xxx_"

    def test_pad_sequence(self):
        assert pad_sequence("ACG", 6) == "ACG---"
        assert pad_sequence("ACGTAC", 3) == "ACGTAC"

    def test_fixed_width_row(self):
        assert fixed_width_row("ab", "AC", 5, 4) == "ab   AC--"


class TestFastaWriter:
    """Test FASTA output."""

    def test_format(self, alignment):
        text = FastaWriter().format(alignment)

        assert text == ">seqA\nACGTACGTAC\n>seqB\nACGTAC\n>outgroup1\nTTTTACGTAC\n"

    def test_no_wrapping(self):
        aln = Alignment()
        aln.add("long", "A" * 150)

        assert FastaWriter(wrap_width=60).format(aln) == ">long\n" + "A" * 150 + "\n"

    def test_empty(self):
        assert FastaWriter().format(Alignment()) == ""

    def test_placeholder_removed_from_labels(self):
        aln = Alignment()
        aln.add("xxx_seqA", "ACGT")

        assert FastaWriter().format(aln) == ">seqA\nACGT\n"


class TestPhylipWriter:
    """Test sequential PHYLIP output."""

    def test_placeholder_kept(self):
        aln = Alignment()
        aln.add("xxx_seqA", "ACGT")

        assert PhylipWriter().format(aln) == "1 4\nxxx_seqA          ACGT\n"

    def test_format(self, alignment):
        lines = PhylipWriter().format(alignment).splitlines()

        assert lines[0] == "3 10"
        assert lines[1] == "seqA" + " " * 15 + "ACGTACGTAC"
        assert lines[2] == "seqB" + " " * 15 + "ACGTAC----"
        assert lines[3] == "outgroup1" + " " * 10 + "TTTTACGTAC"

    def test_rows_are_nchar_wide(self, alignment):
        lines = PhylipWriter().format(alignment).splitlines()
        label_width = 10 + len("outgroup1")

        for row in lines[1:]:
            assert len(row[label_width:]) == 10

    def test_dimensions_follow_subset(self, alignment):
        text = PhylipWriter().format(alignment.subset(["seqB"]))

        assert text == "1 6\n" + "seqB" + " " * 10 + "ACGTAC\n"

    def test_empty(self):
        assert PhylipWriter().format(Alignment()) == "0 0\n"


class TestMegaWriter:
    """Test MEGA output."""

    def test_format(self, alignment):
        text = MegaWriter().format(alignment.subset(["seqA", "seqB"]), title="out.mega")

        assert text == (
            "#mega\n"
            "!Title out.mega;\n"
            "!Format DataType=DNA indel=-;\n"
            "\n"
            "#seqA\nACGTACGTAC\n\n"
            "#seqB\nACGTAC\n\n"
        )

    def test_wrapping(self, alignment):
        text = MegaWriter(wrap_width=4).format(alignment.subset(["seqA"]), title="t")

        assert text.endswith("#seqA\nACGT\nACGT\nAC\n\n")

    def test_sequences_not_padded(self, alignment):
        assert "#seqB\nACGTAC\n\n" in MegaWriter().format(alignment, title="t")


class TestNexusWriter:
    """Test NEXUS re-emission."""

    def test_format(self, alignment):
        text = NexusWriter(timestamp=STAMP).format(alignment)

        assert text == "\n".join([
            "#NEXUS",
            f"[written {STAMP} by nexusconvert]",
            "",
            "BEGIN DATA;",
            "DIMENSIONS NTAX=3 NCHAR=10;",
            "FORMAT DATATYPE = DNA GAP = - MISSING = ? Interleave = no;",
            "\tMATRIX",
            "\tseqA" + " " * 15 + "ACGTACGTAC",
            "\tseqB" + " " * 15 + "ACGTAC----",
            "\toutgroup1" + " " * 10 + "TTTTACGTAC",
            ";",
            "END;",
            "",
            "",
        ])

    def test_interleave_forced_to_no(self, alignment):
        alignment.format.interleave = True

        assert "Interleave = no;" in NexusWriter(timestamp=STAMP).format(alignment)

    def test_default_timestamp(self, alignment):
        second_line = NexusWriter().format(alignment).splitlines()[1]

        assert second_line.startswith("[written ")
        assert second_line.endswith(" by nexusconvert]")

    def test_placeholder_removed_from_labels(self):
        aln = Alignment(FormatInfo(datatype="DNA", gap="-", missing="?"))
        aln.add("xxx_seqA", "ACGT")
        aln.add("seqB", "AC")

        lines = NexusWriter(timestamp=STAMP).format(aln).splitlines()

        assert "\tseqA" + " " * 10 + "ACGT" in lines
        assert "\tseqB" + " " * 10 + "AC--" in lines

    def test_protein_note(self):
        aln = Alignment(FormatInfo(datatype="protein", gap="-", missing="?"))
        aln.add("p1", "MKV")

        lines = NexusWriter(timestamp=STAMP).format(aln).splitlines()

        assert lines[6] == "\tMATRIX"
        assert lines[7] == "\t[Note: terminal stop codons removed for protein data, if detected.]"

    def test_blank_metadata(self):
        text = NexusWriter(timestamp=STAMP).format(Alignment())

        assert "DIMENSIONS NTAX=0 NCHAR=0;" in text
        assert "FORMAT DATATYPE =  GAP =  MISSING =  Interleave = no;" in text

    def test_round_trip(self, sample_nexus_alignment):
        parser = NexusAlignmentParser()
        original, _, _ = parser.parse(sample_nexus_alignment)

        reparsed, _, _ = parser.parse(NexusWriter(timestamp=STAMP).format(original))

        assert [(r.label, r.sequence) for r in reparsed] == [(r.label, r.sequence) for r in original]
        assert reparsed.format.datatype == original.format.datatype
        assert reparsed.format.gap == original.format.gap
        assert reparsed.format.missing == original.format.missing

    def test_round_trip_protein(self):
        aln = Alignment(FormatInfo(datatype="protein", gap="-", missing="?"))
        aln.add("p1", "MKVL")
        aln.add("p2", "MK")

        reparsed, _, _ = NexusAlignmentParser().parse(NexusWriter(timestamp=STAMP).format(aln))

        assert reparsed.labels() == ["p1", "p2"]
        assert reparsed.get("p2") == "MK"


class TestGetWriter:
    """Test writer lookup."""

    @pytest.mark.parametrize("name,cls,extension", [
        ("fasta", FastaWriter, "fasta"),
        ("PHYLIP", PhylipWriter, "phylip"),
        ("mega", MegaWriter, "mega"),
        ("nexus", NexusWriter, "nex"),
    ])
    def test_lookup(self, name, cls, extension):
        writer = get_writer(name)

        assert isinstance(writer, cls)
        assert writer.extension == extension

    def test_passes_options(self):
        assert get_writer("mega", wrap_width=60).wrap_width == 60

    def test_unknown_format(self):
        with pytest.raises(ValidationError) as exc_info:
            get_writer("genbank")

        assert exc_info.value.field == 'output_format'

    def test_write_to_handle(self, alignment):
        handle = io.StringIO()

        FastaWriter().write(alignment.subset(["seqB"]), handle)

        assert handle.getvalue() == ">seqB\nACGTAC\n"
