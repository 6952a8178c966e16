#!/usr/bin/env python3
"""
I/O operations for nexusconvert.

This package handles all output operations:
- Format writers (NEXUS, FASTA, PHYLIP, MEGA)
- Output modes (combined, split, subset)
- TREES, PAUP and MrBayes block templating
"""

from .writers import (
    AlignmentWriter, FastaWriter, PhylipWriter, MegaWriter, NexusWriter, get_writer,
)
from .output_manager import OutputManager, open_destination
from .blocks import build_trees_block, build_paup_block, build_mrbayes_block, find_tree_name

__all__ = [
    'AlignmentWriter',
    'FastaWriter',
    'PhylipWriter',
    'MegaWriter',
    'NexusWriter',
    'get_writer',
    'OutputManager',
    'open_destination',
    'build_trees_block',
    'build_paup_block',
    'build_mrbayes_block',
    'find_tree_name',
]
