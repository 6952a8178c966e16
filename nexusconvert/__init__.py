#!/usr/bin/env python3
"""
nexusconvert: convert NEXUS alignments to FASTA, PHYLIP and MEGA, reformat
NEXUS files, and append TREES, PAUP and MrBayes blocks.
"""

from .core.constants import VERSION
from .core.alignment import Alignment, AlignmentRecord, FormatInfo, SubstringSpec, FetchFilter
from .core.parser import NexusAlignmentParser
from .core.transforms import SequenceTransformPipeline
from .core.conversion_coordinator import ConversionCoordinator
from .io.writers import get_writer
from .io.output_manager import OutputManager
from .exceptions import NexusConvertError

__version__ = VERSION
PACKAGE_NAME = "nexusconvert"

__all__ = [
    '__version__',
    'Alignment',
    'AlignmentRecord',
    'FormatInfo',
    'SubstringSpec',
    'FetchFilter',
    'NexusAlignmentParser',
    'SequenceTransformPipeline',
    'ConversionCoordinator',
    'get_writer',
    'OutputManager',
    'NexusConvertError',
]
