#!/usr/bin/env python3
"""
File and parsing exceptions for nexusconvert.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .conversion_exceptions import NexusConvertError


class FileOperationError(NexusConvertError):
    """Raised when reading or writing a file fails."""

    def __init__(self, message: str, file_path: Optional[Union[str, Path]] = None,
                 operation: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)
        self.file_path = file_path
        self.operation = operation
        if file_path is not None:
            self.context['file_path'] = str(file_path)
        if operation is not None:
            self.context['operation'] = operation


class AlignmentParsingError(FileOperationError):
    """Raised when an alignment cannot be parsed."""

    def __init__(self, message: str, file_path: Optional[Union[str, Path]] = None,
                 format_type: Optional[str] = None, line_number: Optional[int] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, file_path=file_path, operation='parse', context=context)
        self.format_type = format_type
        self.line_number = line_number
        if format_type is not None:
            self.context['format_type'] = format_type
        if line_number is not None:
            self.context['line_number'] = line_number


class MalformedRecordError(AlignmentParsingError):
    """A MATRIX line could not be split into a label and a sequence."""

    def __init__(self, message: str, record: Optional[str] = None,
                 line_number: Optional[int] = None, file_path: Optional[Union[str, Path]] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, file_path=file_path, format_type='nexus',
                         line_number=line_number, context=context)
        self.record = record
        if record is not None:
            self.context['record'] = record


class TreeParsingError(FileOperationError):
    """Raised when a tree file or tree statement cannot be read."""

    def __init__(self, message: str, file_path: Optional[Union[str, Path]] = None,
                 format_type: Optional[str] = None, position: Optional[int] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, file_path=file_path, operation='parse', context=context)
        self.format_type = format_type
        self.position = position
        if format_type is not None:
            self.context['format_type'] = format_type
        if position is not None:
            self.context['position'] = position


class UnopenableDestinationError(FileOperationError):
    """An output path could not be created or opened for writing."""

    def __init__(self, message: str, file_path: Optional[Union[str, Path]] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, file_path=file_path, operation='write', context=context)
