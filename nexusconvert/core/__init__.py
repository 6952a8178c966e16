#!/usr/bin/env python3
"""
Core alignment logic for nexusconvert.

This package contains:
- The alignment data model
- The NEXUS DATA block parser
- The sequence transform pipeline
"""

from .alignment import Alignment, AlignmentRecord, FormatInfo, SubstringSpec, FetchFilter
from .parser import NexusAlignmentParser, parse_format_line, split_record, read_text
from .transforms import SequenceTransformPipeline, reverse_complement, collapse_ambiguity
from .progress_logger import ProgressLogger

__all__ = [
    'Alignment',
    'AlignmentRecord',
    'FormatInfo',
    'SubstringSpec',
    'FetchFilter',
    'NexusAlignmentParser',
    'parse_format_line',
    'split_record',
    'read_text',
    'SequenceTransformPipeline',
    'reverse_complement',
    'collapse_ambiguity',
    'ProgressLogger',
]
