#!/usr/bin/env python3
"""
Conversion coordinator for nexusconvert.

This module wires the conversion workflow together: read the NEXUS input,
parse the MATRIX block, drop unwanted records, run the transform pipeline,
and hand the result to the output manager with the selected writer.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .alignment import Alignment, FetchFilter
from .constants import FORMAT_MEGA
from .parser import NexusAlignmentParser, read_text
from .progress_logger import ProgressLogger
from .transforms import SequenceTransformPipeline
from ..io.output_manager import OutputManager
from ..io.writers import get_writer

logger = logging.getLogger(__name__)


def drop_records(alignment: Alignment, patterns: List[str]) -> int:
    """
    Remove every record whose label matches one of ``patterns``.

    Returns:
        Number of records removed
    """
    removed = 0
    for pattern in patterns:
        for label in FetchFilter(pattern).select(alignment.labels()):
            alignment.remove(label)
            logger.debug(f"Dropped {label} (matches '{pattern}')")
            removed += 1
    return removed


class ConversionCoordinator:
    """
    Runs one conversion described by a NexusConvertConfig.

    Args:
        config: Validated conversion configuration
        progress: Progress display used for split output
    """

    def __init__(self, config, progress: Optional[ProgressLogger] = None):
        self.config = config
        self.progress = progress
        # Raises RangeError for bad substring bounds before any input is read.
        # Dash stripping runs in the parser so the drop filter sees final labels.
        self.pipeline = SequenceTransformPipeline.from_config(config.transform, header_dash_strip=False)

    def load(self) -> Alignment:
        """Read and parse the input, then apply the drop filter."""
        io_config = self.config.input_output
        text = read_text(io_config.input_file)
        parser = NexusAlignmentParser(keep_gaps=self.config.parse.keep_gaps,
                                      dash_strip=self.config.transform.header_dash_strip)
        alignment, _, _ = parser.parse(text)

        if self.config.selection.drop:
            removed = drop_records(alignment, self.config.selection.drop)
            logger.info(f"Dropped {removed} records; {alignment.ntax} remain")
        return alignment

    def run(self) -> List[Path]:
        """
        Execute the conversion.

        Returns:
            Paths written (empty when writing to stdout)
        """
        io_config = self.config.input_output
        selection = self.config.selection

        alignment = self.pipeline.apply(self.load())

        wrap_width = self.config.transform.wrap_width if io_config.output_format == FORMAT_MEGA else None
        if self.config.transform.wrap_width and wrap_width is None:
            logger.debug(f"Line wrapping is ignored for {io_config.output_format} output")
        writer = get_writer(io_config.output_format, wrap_width=wrap_width)

        fetch = FetchFilter(selection.fetch) if selection.fetch else None
        manager = OutputManager(writer, io_config.output, progress=self.progress)
        written = manager.write(alignment, split=selection.split, fetch=fetch)
        logger.debug(f"Conversion finished; {len(written)} files written")
        return written
