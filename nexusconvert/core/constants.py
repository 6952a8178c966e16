#!/usr/bin/env python3
"""
Constants shared across nexusconvert.
"""

VERSION = "0.2.0"
PROGRAM_NAME = "nexusconvert"

# Output formats and the extensions used for derived destinations
FORMAT_NEXUS = "nexus"
FORMAT_FASTA = "fasta"
FORMAT_PHYLIP = "phylip"
FORMAT_MEGA = "mega"
FORMAT_EXTENSIONS = {
    FORMAT_NEXUS: "nex",
    FORMAT_FASTA: "fasta",
    FORMAT_PHYLIP: "phylip",
    FORMAT_MEGA: "mega",
}

# Fixed-width layout: labels are padded to this many columns past the longest label
LABEL_PADDING = 10
PAD_CHAR = "-"
DEFAULT_GAP_CHAR = "-"

# Stream placeholder for stdin/stdout
STREAM_PATH = "-"

# Legacy placeholder stripped from labels when naming split files
SPLIT_NAME_PLACEHOLDER = "xxx_"

PROTEIN_NOTE = "[Note: terminal stop codons removed for protein data, if detected.]"
MEGA_FORMAT_DIRECTIVE = "!Format DataType=DNA indel=-;"

# Block templating defaults
DEFAULT_PAUP_NREPS = 1000
DEFAULT_MRBAYES_NGEN = 10000000
DEBUG_LOG_FILE = "nexusconvert_debug.log"
