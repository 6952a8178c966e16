#!/usr/bin/env python3
"""
Exception hierarchy for nexusconvert.

All errors raised by the package derive from NexusConvertError and carry a
``context`` dictionary describing the failing operation.
"""

from .conversion_exceptions import (
    NexusConvertError,
    ValidationError,
    RangeError,
    ConfigurationError,
)
from .io_exceptions import (
    FileOperationError,
    AlignmentParsingError,
    MalformedRecordError,
    TreeParsingError,
    UnopenableDestinationError,
)

__all__ = [
    'NexusConvertError',
    'ValidationError',
    'RangeError',
    'ConfigurationError',
    'FileOperationError',
    'AlignmentParsingError',
    'MalformedRecordError',
    'TreeParsingError',
    'UnopenableDestinationError',
]
