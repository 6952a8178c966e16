#!/usr/bin/env python3
"""
Alignment writers for nexusconvert.

Each writer serializes a whole Alignment into one document. NTAX, NCHAR and
the label column width are computed from the records passed in, so a
filtered subset gets its own dimensions.
"""

import datetime
import io
import logging
from abc import ABC, abstractmethod
from typing import Dict, IO, Optional, Type

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from ..core.alignment import Alignment
from ..core.constants import (
    FORMAT_EXTENSIONS, FORMAT_FASTA, FORMAT_MEGA, FORMAT_NEXUS, FORMAT_PHYLIP,
    LABEL_PADDING, MEGA_FORMAT_DIRECTIVE, PAD_CHAR, PROGRAM_NAME, PROTEIN_NOTE, SPLIT_NAME_PLACEHOLDER,
)
from ..core.transforms import wrap_sequence
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def pad_sequence(sequence: str, nchar: int) -> str:
    """Right-pad with gap characters up to ``nchar``."""
    return sequence + PAD_CHAR * max(0, nchar - len(sequence))


def fixed_width_row(label: str, sequence: str, label_width: int, nchar: int) -> str:
    """Label left-justified in ``label_width`` columns followed by the padded sequence."""
    return label.ljust(label_width) + pad_sequence(sequence, nchar)


def strip_placeholder(label: str) -> str:
    """Remove the legacy ``xxx_`` placeholder; a label that is only the placeholder is kept."""
    return label.replace(SPLIT_NAME_PLACEHOLDER, "") or label


class AlignmentWriter(ABC):
    """Base class for the format writers."""

    format_name: str = ""

    def __init__(self, wrap_width: Optional[int] = None, timestamp: Optional[str] = None):
        self.wrap_width = wrap_width
        self.timestamp = timestamp

    @property
    def extension(self) -> str:
        return FORMAT_EXTENSIONS[self.format_name]

    @abstractmethod
    def format(self, alignment: Alignment, title: str = "") -> str:
        """Serialize ``alignment`` to a string."""

    def write(self, alignment: Alignment, handle: IO, title: str = "") -> None:
        handle.write(self.format(alignment, title))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class FastaWriter(AlignmentWriter):
    """
    Two-line FASTA: ``>label`` then the raw sequence, no wrapping or padding.
    Labels are written without the ``xxx_`` placeholder.
    """

    format_name = FORMAT_FASTA

    def format(self, alignment: Alignment, title: str = "") -> str:
        handle = io.StringIO()
        records = (SeqRecord(Seq(r.sequence), id=strip_placeholder(r.label), description="")
                   for r in alignment)
        SeqIO.write(records, handle, "fasta-2line")
        return handle.getvalue()


class PhylipWriter(AlignmentWriter):
    """Sequential PHYLIP with a ``NTAX NCHAR`` header and fixed-width rows."""

    format_name = FORMAT_PHYLIP

    def format(self, alignment: Alignment, title: str = "") -> str:
        nchar = alignment.nchar
        label_width = LABEL_PADDING + alignment.longest_label
        lines = [f"{alignment.ntax} {nchar}"]
        for record in alignment:
            lines.append(fixed_width_row(record.label, record.sequence, label_width, nchar))
        return "\n".join(lines) + "\n"


class MegaWriter(AlignmentWriter):
    """Sequential MEGA; sequences are wrapped when ``wrap_width`` is set."""

    format_name = FORMAT_MEGA

    def format(self, alignment: Alignment, title: str = "") -> str:
        parts = ["#mega\n", f"!Title {title};\n", f"{MEGA_FORMAT_DIRECTIVE}\n\n"]
        for record in alignment:
            parts.append(f"#{record.label}\n{wrap_sequence(record.sequence, self.wrap_width)}\n\n")
        return "".join(parts)


class NexusWriter(AlignmentWriter):
    """
    Re-emits a NEXUS DATA block; Interleave is always written as ``no``.
    Labels are written without the ``xxx_`` placeholder.
    """

    format_name = FORMAT_NEXUS

    def _stamp(self) -> str:
        if self.timestamp is not None:
            return self.timestamp
        return datetime.datetime.now().strftime("%a %b %d %H:%M:%S %Y")

    def format(self, alignment: Alignment, title: str = "") -> str:
        fmt = alignment.format
        nchar = alignment.nchar
        labels = [strip_placeholder(record.label) for record in alignment]
        label_width = LABEL_PADDING + max((len(label) for label in labels), default=0)

        lines = [
            "#NEXUS",
            f"[written {self._stamp()} by {PROGRAM_NAME}]",
            "",
            "BEGIN DATA;",
            f"DIMENSIONS NTAX={alignment.ntax} NCHAR={nchar};",
            f"FORMAT DATATYPE = {fmt.datatype} GAP = {fmt.gap} MISSING = {fmt.missing} Interleave = no;",
            "\tMATRIX",
        ]
        if fmt.datatype.lower() == "protein":
            lines.append(f"\t{PROTEIN_NOTE}")
        for label, record in zip(labels, alignment):
            lines.append("\t" + fixed_width_row(label, record.sequence, label_width, nchar))
        lines.extend([";", "END;", "", ""])
        return "\n".join(lines)


WRITERS: Dict[str, Type[AlignmentWriter]] = {
    FORMAT_FASTA: FastaWriter,
    FORMAT_PHYLIP: PhylipWriter,
    FORMAT_MEGA: MegaWriter,
    FORMAT_NEXUS: NexusWriter,
}


def get_writer(format_name: str, **kwargs) -> AlignmentWriter:
    """Return a writer instance for ``format_name``."""
    try:
        writer_cls = WRITERS[format_name.lower()]
    except KeyError:
        raise ValidationError(f"Unknown output format: {format_name}",
                              field='output_format', value=format_name)
    return writer_cls(**kwargs)
