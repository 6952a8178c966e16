#!/usr/bin/env python3
"""
Output management for nexusconvert.

The three output modes are implemented here once and work with any writer:
    combined - every record in one destination
    split    - one destination per record (optionally filtered by a fetch pattern)
    subset   - one destination with the records matching a fetch pattern
"""

import contextlib
import logging
import sys
from pathlib import Path
from typing import Iterator, IO, List, Optional, Union

from ..core.alignment import Alignment, FetchFilter
from ..core.constants import STREAM_PATH
from ..core.progress_logger import ProgressLogger
from ..exceptions import UnopenableDestinationError
from .writers import AlignmentWriter, strip_placeholder

logger = logging.getLogger(__name__)


def is_stream(output: Optional[Union[str, Path]]) -> bool:
    return output is None or str(output) == STREAM_PATH


@contextlib.contextmanager
def open_destination(path: Optional[Union[str, Path]]) -> Iterator[IO]:
    """
    Open ``path`` for writing, or yield stdout for None / '-'.

    Raises:
        UnopenableDestinationError: if the file cannot be created
    """
    if is_stream(path):
        yield sys.stdout
        return
    try:
        handle = open(path, 'w')
    except OSError as e:
        raise UnopenableDestinationError(f"Cannot open output file {path}: {e}",
                                         file_path=path) from e
    logger.debug(f"Opened {path} for writing")
    with handle:
        yield handle


class OutputManager:
    """
    Writes an Alignment in one of the three output modes.

    Args:
        writer: Format writer to serialize with
        output: Output path; None or '-' means stdout for combined and subset runs
        progress: Optional progress display for split runs
    """

    def __init__(self, writer: AlignmentWriter, output: Optional[Union[str, Path]] = None,
                 progress: Optional[ProgressLogger] = None):
        self.writer = writer
        self.output = None if is_stream(output) else str(output)
        self.progress = progress or ProgressLogger(show_progress=False)

    @property
    def split_directory(self) -> Path:
        if self.output is None:
            return Path.cwd()
        return Path(self.output).parent

    def split_path(self, label: str) -> Path:
        name = strip_placeholder(label)
        return self.split_directory / f"{name}.{self.writer.extension}"

    def subset_path(self) -> Optional[Path]:
        if self.output is None:
            return None
        return Path(f"{self.output}.subset.{self.writer.extension}")

    def _emit(self, alignment: Alignment, path: Optional[Union[str, Path]], title: str) -> None:
        with open_destination(path) as handle:
            self.writer.write(alignment, handle, title=title)
        if path is not None:
            logger.info(f"Wrote {alignment.ntax} records to {path}")

    def write_combined(self, alignment: Alignment) -> List[Path]:
        """Write every record, in insertion order, to the output path."""
        title = self.output or "stdout"
        self._emit(alignment, self.output, title)
        return [Path(self.output)] if self.output else []

    def write_split(self, alignment: Alignment, fetch: Optional[FetchFilter] = None) -> List[Path]:
        """Write each (matching) record, sorted by label, to its own file."""
        labels = alignment.labels(sort=True)
        if fetch is not None:
            labels = fetch.select(labels)
            if not labels:
                logger.warning(f"Fetch pattern '{fetch.pattern}' matched no records")

        written = []
        for index, label in enumerate(labels, start=1):
            path = self.split_path(label)
            self.progress.progress(f"Writing {path.name}", index, len(labels))
            self._emit(alignment.subset([label]), path, label)
            written.append(path)
        self.progress.complete("Split output written", len(written), "files")
        return written

    def write_subset(self, alignment: Alignment, fetch: FetchFilter) -> List[Path]:
        """Write the records matching ``fetch``, sorted by label, to one destination."""
        labels = fetch.select(alignment.labels(sort=True))
        if not labels:
            logger.warning(f"Fetch pattern '{fetch.pattern}' matched no records")
        path = self.subset_path()
        title = f"{self.output or 'stdout'}_subset--{fetch.pattern}"
        self._emit(alignment.subset(labels), path, title)
        return [path] if path is not None else []

    def write(self, alignment: Alignment, split: bool = False,
              fetch: Optional[FetchFilter] = None) -> List[Path]:
        """Dispatch to the mode selected by ``split`` and ``fetch``."""
        if split:
            return self.write_split(alignment, fetch)
        if fetch is not None:
            return self.write_subset(alignment, fetch)
        return self.write_combined(alignment)
