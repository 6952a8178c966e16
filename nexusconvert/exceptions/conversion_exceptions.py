#!/usr/bin/env python3
"""
Base and validation exceptions for nexusconvert.
"""

from typing import Any, Dict, Optional


class NexusConvertError(Exception):
    """
    Base exception for all nexusconvert errors.

    Attributes:
        context: Free-form details about the failing operation
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context) if context else {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ValidationError(NexusConvertError):
    """Raised when a user-supplied value is invalid."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)
        self.field = field
        self.value = value
        if field is not None:
            self.context['field'] = field
        if value is not None:
            self.context['value'] = value


class RangeError(ValidationError):
    """Raised when substring bounds are empty or negative after normalization."""

    def __init__(self, message: str, start: Optional[int] = None, end: Optional[int] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, field='substring', value=f"{start}:{end}", context=context)
        self.start = start
        self.end = end
        self.context['start'] = start
        self.context['end'] = end


class ConfigurationError(NexusConvertError):
    """Exception raised for configuration-related errors."""

    def __init__(self, message: str, config_file: Optional[str] = None,
                 section: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)
        self.config_file = config_file
        self.section = section
        if config_file is not None:
            self.context['config_file'] = config_file
        if section is not None:
            self.context['section'] = section
