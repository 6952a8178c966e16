#!/usr/bin/env python3
"""
NEXUS DATA block parser for nexusconvert.

The parser does not implement the NEXUS grammar. It scans the input line by
line for a FORMAT declaration and the first MATRIX ... END; span, then splits
each matrix row into a taxon label and a sequence.
"""

import logging
import re
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from ..exceptions import FileOperationError, MalformedRecordError
from .alignment import Alignment, FormatInfo
from .constants import DEFAULT_GAP_CHAR, STREAM_PATH

logger = logging.getLogger(__name__)

FORMAT_TOKEN = "FORMAT DATATYPE"
MATRIX_TOKEN = "MATRIX"
END_TOKEN = "END;"

FORMAT_PATTERN = re.compile(
    r"FORMAT DATATYPE = (?P<datatype>.*?) GAP = (?P<gap>.*?) "
    r"MISSING = (?P<missing>.*?) Interleave = (?P<interleave>.*?);"
)
KEY_VALUE_PATTERN = re.compile(r"(\w+)\s*=\s*([^\s;]+)")
RECORD_SEPARATOR = re.compile(r"\s{2,}")


def _parse_bool(value: str) -> Optional[bool]:
    value = value.strip().lower()
    if value in ('yes', 'true', 'on', '1'):
        return True
    if value in ('no', 'false', 'off', '0'):
        return False
    return None


def parse_format_line(line: str) -> Optional[FormatInfo]:
    """
    Read the FORMAT declaration.

    The fixed ``FORMAT DATATYPE = <type> GAP = <gap> MISSING = <missing>
    Interleave = <bool>;`` layout is tried first. Other layouts fall back to a
    ``KEY=VALUE`` scan. Returns None when neither yields a datatype.
    """
    match = FORMAT_PATTERN.search(line)
    if match:
        return FormatInfo(
            datatype=match.group('datatype').strip(),
            gap=match.group('gap').strip(),
            missing=match.group('missing').strip(),
            interleave=_parse_bool(match.group('interleave')),
        )

    fields = {key.lower(): value for key, value in KEY_VALUE_PATTERN.findall(line)}
    if 'datatype' not in fields:
        return None
    logger.warning(f"FORMAT line does not follow the fixed layout, read as KEY=VALUE pairs: {line.strip()}")
    interleave = fields.get('interleave')
    return FormatInfo(
        datatype=fields['datatype'],
        gap=fields.get('gap', ''),
        missing=fields.get('missing', ''),
        interleave=_parse_bool(interleave) if interleave is not None else None,
    )


def strip_dashes(label: str) -> str:
    """Turn ``.1`` version suffixes into ``-1`` and then drop every dash."""
    return label.replace(".1", "-1").replace("-", "")


def keep_nonempty_label(original: str, rewritten: str) -> str:
    """Return ``rewritten`` unless a label rewrite emptied it."""
    if rewritten:
        return rewritten
    logger.warning(f"Rewriting label '{original}' leaves it empty; keeping '{original}'")
    return original


def normalize_label(label: str, dash_strip: bool = False) -> str:
    label = label.strip().replace(" ", "_")
    if dash_strip:
        label = keep_nonempty_label(label, strip_dashes(label))
    return label


def split_record(line: str, line_number: Optional[int] = None) -> Tuple[str, str]:
    """
    Split a matrix row on the first run of two or more whitespace characters.

    Raises:
        MalformedRecordError: if the row does not have both fields
    """
    parts = RECORD_SEPARATOR.split(line.strip(), maxsplit=1)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise MalformedRecordError(
            f"Cannot split MATRIX row into label and sequence (line {line_number}): '{line.strip()}'",
            record=line, line_number=line_number,
        )
    return parts[0], parts[1]


def _is_comment(line: str) -> bool:
    text = line.strip()
    return text.startswith("[") and text.endswith("]")


class NexusAlignmentParser:
    """
    Extract the alignment held in a NEXUS DATA block.

    Args:
        keep_gaps: keep gap characters in sequences (they are removed by default)
        dash_strip: apply the ``.1`` -> ``-1`` / remove-dashes label rewrite
    """

    def __init__(self, keep_gaps: bool = False, dash_strip: bool = False):
        self.keep_gaps = keep_gaps
        self.dash_strip = dash_strip

    def parse(self, lines: Union[str, Sequence[str]]) -> Tuple[Alignment, str, str]:
        """
        Parse raw input lines.

        Returns:
            Tuple of (alignment, text before the MATRIX line, text after END;)
        """
        if isinstance(lines, str):
            lines = lines.splitlines()
        lines = [line.rstrip("\r\n") for line in lines]

        format_info = FormatInfo()
        block: List[Tuple[int, str]] = []
        start_index = None
        end_index = None
        inside = False

        for index, line in enumerate(lines):
            if not line.strip():
                continue
            if inside:
                block.append((index, line))
                if END_TOKEN in line:
                    inside = False
                    end_index = index
                    break
                continue
            if MATRIX_TOKEN in line:
                inside = True
                start_index = index
                block.append((index, line))
            elif FORMAT_TOKEN in line:
                parsed = parse_format_line(line)
                if parsed is None:
                    logger.warning(f"Unreadable FORMAT line {index + 1}: {line.strip()}")
                else:
                    format_info = parsed

        if start_index is None:
            logger.warning("No MATRIX block found; the alignment is empty")
            return Alignment(format_info), "\n".join(lines), ""

        if format_info.interleaved:
            logger.warning("Interleaved matrices are not supported; rows sharing a label overwrite each other")

        rows = block[1:]
        if end_index is None:
            logger.warning("MATRIX block is not terminated by END;")
        elif rows:
            rows = rows[:-1]
        rows = [(index, line) for index, line in rows if not _is_comment(line)]
        if rows and rows[-1][1].strip() == ";":
            rows = rows[:-1]

        alignment = Alignment(format_info)
        gap_chars = {DEFAULT_GAP_CHAR}
        if len(format_info.gap) == 1:
            gap_chars.add(format_info.gap)

        for index, line in rows:
            label, sequence = split_record(line, line_number=index + 1)
            label = normalize_label(label, self.dash_strip)
            sequence = self._normalize_sequence(sequence, gap_chars)
            alignment.add(label, sequence)

        leading = "\n".join(lines[:start_index])
        trailing = "\n".join(lines[end_index + 1:]) if end_index is not None else ""
        logger.info(f"Parsed {alignment.ntax} records from MATRIX block "
                    f"(datatype={format_info.datatype or 'unknown'})")
        return alignment, leading, trailing

    def _normalize_sequence(self, sequence: str, gap_chars) -> str:
        sequence = "".join(sequence.split()).rstrip(";").upper()
        if not self.keep_gaps:
            for gap in gap_chars:
                sequence = sequence.replace(gap.upper(), "")
        return sequence

    def parse_file(self, source: Optional[Union[str, Path]] = None) -> Tuple[Alignment, str, str]:
        """Read ``source`` (stdin when None or '-') and parse it."""
        return self.parse(read_lines(source))


def read_text(source: Optional[Union[str, Path]] = None) -> str:
    """Read the whole input file, or stdin when ``source`` is None or '-'."""
    if source is None or str(source) == STREAM_PATH:
        logger.debug("Reading input from standard input")
        return sys.stdin.read()
    path = Path(source)
    try:
        text = path.read_text()
    except OSError as e:
        raise FileOperationError(f"Cannot read input file {path}: {e}",
                                 file_path=path, operation="read") from e
    logger.info(f"Read {path}")
    return text


def read_lines(source: Optional[Union[str, Path]] = None) -> List[str]:
    return read_text(source).splitlines()
