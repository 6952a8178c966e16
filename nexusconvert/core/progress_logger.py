#!/usr/bin/env python3
"""
Progress logging utility for nexusconvert.

Writes per-file progress on a single console line using carriage returns,
so split runs over many records do not flood the terminal.
"""

import sys
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


class ProgressLogger:
    """
    Handles dynamic progress logging with overwriting capabilities.

    Uses carriage return (\\r) to overwrite progress lines. In verbose mode
    the overwriting display is disabled and completions go to the logger.
    """

    def __init__(self, show_progress: bool = True, verbose: bool = False, stream=None):
        """
        Initialize progress logger.

        Args:
            show_progress: Whether to show dynamic progress updates
            verbose: Whether to show detailed logging (disables progress overwriting)
            stream: Output stream (default: stdout)
        """
        self.show_progress = show_progress and not verbose
        self.verbose = verbose
        self.stream = stream
        self.current_line = ""
        self.completed_tasks: List[str] = []

    @property
    def _out(self):
        return self.stream if self.stream is not None else sys.stdout

    def _clear(self):
        if self.current_line:
            self._out.write('\r' + ' ' * len(self.current_line) + '\r')
            self.current_line = ""

    def progress(self, message: str, current: Optional[int] = None,
                 total: Optional[int] = None):
        """
        Show progress message with optional counter.

        Args:
            message: Progress message to display
            current: Current item number (1-based)
            total: Total number of items
        """
        if not self.show_progress:
            return

        if current is not None and total is not None:
            progress_msg = f"{message} [{current}/{total}]"
        else:
            progress_msg = message

        self._clear()
        self._out.write(progress_msg)
        self._out.flush()
        self.current_line = progress_msg

    def complete(self, final_message: str, count: Optional[int] = None,
                 file_type: Optional[str] = None):
        """
        Complete current progress with final message.

        Args:
            final_message: Final completion message
            count: Number of items processed
            file_type: Type of files processed
        """
        if count is not None:
            completion_msg = f"{final_message} ({count} {file_type or 'items'})"
        else:
            completion_msg = final_message

        if not self.show_progress:
            if self.verbose:
                logger.info(completion_msg)
            return

        self._clear()
        self._out.write(completion_msg + "\n")
        self._out.flush()
        self.completed_tasks.append(completion_msg)
