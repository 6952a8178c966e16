#!/usr/bin/env python3
"""
Utility functions for nexusconvert.

Common utility functions used across the nexusconvert modules.
"""

import re
from pathlib import Path
from typing import Union


def get_display_path(path: Union[str, Path]) -> str:
    """Get a display-friendly path representation."""
    path_obj = Path(path)

    if path_obj.is_absolute():
        try:
            rel_path = path_obj.relative_to(Path.cwd())
            if len(str(rel_path)) < len(str(path_obj)):
                return str(rel_path)
        except ValueError:
            pass  # Path is not relative to current directory

    return str(path_obj)


def format_taxon_for_paup(taxon_name: str) -> str:
    """Format a taxon name for PAUP*/MrBayes (handles spaces, special chars by quoting)."""
    if not isinstance(taxon_name, str):
        taxon_name = str(taxon_name)

    # Quote names containing whitespace or NEXUS punctuation
    special_chars = r'[\s\(\)\[\]\{\}/\\,;=\*`"\'<>]'
    if re.search(special_chars, taxon_name) or ':' in taxon_name:
        clean_name = taxon_name.replace("'", "_")
        return f"'{clean_name}'"

    return taxon_name
