#!/usr/bin/env python3
"""
Sequence and label transforms applied between parsing and writing.

Stages run in a fixed order for every record:
    dash strip -> ambiguity collapse -> substring -> reverse complement
    -> header fix
Line wrapping is presentation-only and is applied by the MEGA writer.
"""

import logging
import re
from typing import List, Optional

from .alignment import Alignment, AlignmentRecord, SubstringSpec
from .parser import keep_nonempty_label, strip_dashes

logger = logging.getLogger(__name__)

COMPLEMENT_TABLE = str.maketrans("ACGTacgt", "TGCAtgca")
AMBIGUITY_TABLE = str.maketrans({
    **{code: "T" for code in "YKDHBN"},
    **{code: "A" for code in "RWMV"},
    "S": "G",
})
HEADER_SUFFIX_PATTERN = re.compile(r"\.fasta.*$")


def reverse_complement(sequence: str) -> str:
    """
    Reverse complement over A/C/G/T; every other symbol passes through.
    The result is uppercase.
    """
    return sequence.translate(COMPLEMENT_TABLE)[::-1].upper()


def collapse_ambiguity(sequence: str) -> str:
    """
    Replace nucleotide ambiguity codes with a single base.

    Assumes nucleotide data: Y,K,D,H,B,N -> T; R,W,M,V -> A; S -> G.
    """
    return sequence.translate(AMBIGUITY_TABLE)


def extract_substring(sequence: str, spec: SubstringSpec) -> str:
    """
    Slice ``sequence`` using 1-based inclusive bounds. Inverted bounds select
    the same interval; the caller handles the implied reverse complement.
    A sequence shorter than the requested end yields a shorter result.
    """
    start, stop, _ = spec.normalize()
    return sequence[start:stop]


def fix_header(label: str) -> str:
    """Drop everything from the first ``.fasta`` suffix onward."""
    return HEADER_SUFFIX_PATTERN.sub("", label)


def wrap_sequence(sequence: str, width: Optional[int]) -> str:
    """Insert a line break every ``width`` characters."""
    if not width or width <= 0:
        return sequence
    return "\n".join(sequence[i:i + width] for i in range(0, len(sequence), width))


class SequenceTransformPipeline:
    """
    Ordered per-record transforms.

    When both ``reverse_complement`` and an inverted substring are given the
    sliced sequence is reverse complemented once.
    """

    def __init__(self, reverse_complement: bool = False,
                 substring: Optional[SubstringSpec] = None,
                 no_ambiguity: bool = False,
                 header_fix: bool = False,
                 header_dash_strip: bool = False):
        self.substring = substring
        self.no_ambiguity = no_ambiguity
        self.header_fix = header_fix
        self.header_dash_strip = header_dash_strip

        implied = False
        if substring is not None:
            _, _, implied = substring.normalize()
            if implied:
                logger.debug(f"Substring {substring} is inverted; reverse complement enabled")
        self.reverse_complement = reverse_complement or implied

    @classmethod
    def from_config(cls, config, **overrides) -> "SequenceTransformPipeline":
        """Build from a TransformConfig-like object; keyword arguments replace its values."""
        options = dict(
            reverse_complement=config.reverse_complement,
            substring=config.substring,
            no_ambiguity=config.no_ambiguity,
            header_fix=config.header_fix,
            header_dash_strip=config.header_dash_strip,
        )
        options.update(overrides)
        return cls(**options)

    @property
    def enabled(self) -> bool:
        return any((self.reverse_complement, self.substring is not None, self.no_ambiguity,
                    self.header_fix, self.header_dash_strip))

    def transform_record(self, record: AlignmentRecord) -> AlignmentRecord:
        label, sequence = record.label, record.sequence
        if self.header_dash_strip:
            label = strip_dashes(label)
        if self.no_ambiguity:
            sequence = collapse_ambiguity(sequence)
        if self.substring is not None:
            sequence = extract_substring(sequence, self.substring)
        if self.reverse_complement:
            sequence = reverse_complement(sequence)
        if self.header_fix:
            label = fix_header(label)
        return AlignmentRecord(keep_nonempty_label(record.label, label), sequence)

    def apply(self, alignment: Alignment) -> Alignment:
        """Transform every record of ``alignment`` in place and return it."""
        if not self.enabled:
            return alignment
        transformed: List[AlignmentRecord] = [self.transform_record(r) for r in alignment]
        alignment.replace_records(transformed)
        logger.debug(f"Applied transforms to {len(transformed)} records")
        return alignment
