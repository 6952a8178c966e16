#!/usr/bin/env python3
"""
Alignment data model for nexusconvert.

An Alignment is an ordered label -> sequence mapping plus the FORMAT metadata
read from the NEXUS DATA block. Inserting an existing label overwrites the
earlier sequence (last write wins) and keeps the label's original position.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..exceptions import RangeError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class AlignmentRecord:
    """A single taxon label and its sequence."""
    label: str
    sequence: str


@dataclass
class FormatInfo:
    """
    Metadata from the FORMAT declaration.

    All fields are empty when the input carries no FORMAT line; writers echo
    the blanks back.
    """
    datatype: str = ""
    gap: str = ""
    missing: str = ""
    interleave: Optional[bool] = None

    @property
    def interleaved(self) -> bool:
        return bool(self.interleave)


@dataclass
class SubstringSpec:
    """
    User-facing, 1-based inclusive substring bounds.

    ``end < start`` asks for the reverse complement of positions end..start.
    """
    start: int
    end: int

    @classmethod
    def parse(cls, text: str) -> "SubstringSpec":
        """Parse a ``START:END`` string such as ``1:1000``."""
        parts = str(text).split(":")
        if len(parts) != 2:
            raise ValidationError(f"Substring must be given as START:END, got '{text}'",
                                  field='substring', value=text)
        try:
            return cls(int(parts[0]), int(parts[1]))
        except ValueError:
            raise ValidationError(f"Substring bounds must be integers, got '{text}'",
                                  field='substring', value=text)

    @property
    def inverted(self) -> bool:
        return self.end < self.start

    def normalize(self) -> Tuple[int, int, bool]:
        """
        Convert to a 0-based half-open range.

        Returns:
            Tuple of (start, stop, implied_reverse_complement)

        Raises:
            RangeError: if the range is empty or starts before the sequence
        """
        low, high = (self.end, self.start) if self.inverted else (self.start, self.end)
        start = low - 1
        stop = high
        if start < 0 or stop <= start:
            raise RangeError(f"Invalid substring range {self.start}:{self.end}",
                             start=self.start, end=self.end)
        return start, stop, self.inverted

    def __str__(self) -> str:
        return f"{self.start}:{self.end}"


class FetchFilter:
    """Substring-or-regex containment match against labels."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        try:
            self._regex = re.compile(pattern)
        except re.error:
            logger.debug(f"Fetch pattern '{pattern}' is not a valid regex; using literal match")
            self._regex = re.compile(re.escape(pattern))

    def matches(self, label: str) -> bool:
        return self._regex.search(label) is not None

    def select(self, labels: Iterable[str]) -> List[str]:
        return [label for label in labels if self.matches(label)]

    def __repr__(self) -> str:
        return f"FetchFilter({self.pattern!r})"


class Alignment:
    """Ordered collection of AlignmentRecords with FORMAT metadata."""

    def __init__(self, format_info: Optional[FormatInfo] = None):
        self.format = format_info or FormatInfo()
        self._records: Dict[str, str] = {}

    def add(self, label: str, sequence: str) -> None:
        """Insert a record, overwriting any earlier record with the same label."""
        if label in self._records:
            logger.warning(f"Duplicate label '{label}': keeping the later sequence")
        self._records[label] = sequence

    def remove(self, label: str) -> None:
        del self._records[label]

    def get(self, label: str) -> str:
        return self._records[label]

    def labels(self, sort: bool = False) -> List[str]:
        """Labels in insertion order, or sorted when ``sort`` is set."""
        return sorted(self._records) if sort else list(self._records)

    def records(self, labels: Optional[Iterable[str]] = None) -> List[AlignmentRecord]:
        if labels is None:
            labels = self._records
        return [AlignmentRecord(label, self._records[label]) for label in labels]

    def subset(self, labels: Iterable[str]) -> "Alignment":
        """New Alignment holding only ``labels``, in the order given."""
        sub = Alignment(self.format)
        for label in labels:
            sub._records[label] = self._records[label]
        return sub

    def replace_records(self, records: Iterable[AlignmentRecord]) -> None:
        """Replace every record, applying the usual overwrite policy."""
        self._records = {}
        for record in records:
            self.add(record.label, record.sequence)

    @property
    def ntax(self) -> int:
        return len(self._records)

    @property
    def nchar(self) -> int:
        """Length of the longest sequence, 0 when empty."""
        return max((len(seq) for seq in self._records.values()), default=0)

    @property
    def longest_label(self) -> int:
        return max((len(label) for label in self._records), default=0)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, label: str) -> bool:
        return label in self._records

    def __iter__(self) -> Iterator[AlignmentRecord]:
        for label, sequence in self._records.items():
            yield AlignmentRecord(label, sequence)

    def __repr__(self) -> str:
        return f"<Alignment: {self.ntax} taxa, {self.nchar} characters>"
