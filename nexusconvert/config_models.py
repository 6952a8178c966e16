#!/usr/bin/env python3
"""
Configuration models for nexusconvert using Pydantic for validation.

This module defines the structure and validation rules for nexusconvert
configuration files, supporting YAML, TOML and legacy INI formats.
"""

from typing import List, Literal, Optional
from pathlib import Path
from pydantic import BaseModel, Field, validator, ConfigDict

from .core.alignment import SubstringSpec
from .core.constants import DEFAULT_MRBAYES_NGEN, DEFAULT_PAUP_NREPS, STREAM_PATH
from .exceptions import NexusConvertError

OutputFormat = Literal["nexus", "fasta", "phylip", "mega"]


class InputOutputConfig(BaseModel):
    """Input/Output configuration settings."""

    model_config = ConfigDict(extra='forbid')

    input_file: Optional[Path] = Field(
        default=None, description="Input NEXUS file (stdin when unset or '-')"
    )
    output: Optional[str] = Field(
        default=None, description="Output path (stdout when unset or '-')"
    )
    output_format: OutputFormat = Field(
        default="fasta", description="Format to write"
    )
    debug: bool = Field(
        default=False, description="Enable debug mode with detailed logging"
    )

    @validator('input_file')
    def validate_input_file(cls, v):
        """Validate that the input file exists."""
        if v is not None and str(v) != STREAM_PATH and not Path(v).exists():
            raise ValueError(f"Input file not found: {v}")
        return v

    @validator('output_format', pre=True)
    def lowercase_format(cls, v):
        return v.lower() if isinstance(v, str) else v


class SelectionConfig(BaseModel):
    """Record selection and output mode settings."""

    model_config = ConfigDict(extra='forbid')

    split: bool = Field(
        default=False, description="Write each record to its own file"
    )
    fetch: Optional[str] = Field(
        default=None, description="Pattern selecting records for subset/split output"
    )
    drop: List[str] = Field(
        default_factory=list, description="Patterns of records to remove"
    )

    @validator('drop', pre=True)
    def split_drop_patterns(cls, v):
        """Accept a comma-separated string as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v

    @validator('fetch')
    def empty_fetch_is_none(cls, v):
        return v or None


class ParseConfig(BaseModel):
    """MATRIX parsing settings."""

    model_config = ConfigDict(extra='forbid')

    keep_gaps: bool = Field(
        default=False, description="Keep gap characters in sequences"
    )


class TransformConfig(BaseModel):
    """Sequence and label transform settings."""

    model_config = ConfigDict(extra='forbid')

    reverse_complement: bool = Field(
        default=False, description="Reverse complement every sequence"
    )
    substring: Optional[SubstringSpec] = Field(
        default=None, description="1-based START:END slice; END < START implies reverse complement"
    )
    no_ambiguity: bool = Field(
        default=False, description="Collapse nucleotide ambiguity codes"
    )
    wrap_width: Optional[int] = Field(
        default=None, gt=0, description="Wrap MEGA sequences to this many characters"
    )
    header_fix: bool = Field(
        default=False, description="Strip '.fasta...' suffixes from labels"
    )
    header_dash_strip: bool = Field(
        default=False, description="Rewrite '.1' to '-1' and remove dashes from labels"
    )

    @validator('substring', pre=True)
    def parse_substring(cls, v):
        """Accept 'START:END' strings and [start, end] pairs."""
        if v is None or isinstance(v, SubstringSpec):
            spec = v
        elif isinstance(v, str):
            try:
                spec = SubstringSpec.parse(v)
            except NexusConvertError as e:
                raise ValueError(str(e))
        elif isinstance(v, dict) and {'start', 'end'} <= set(v):
            spec = SubstringSpec(int(v['start']), int(v['end']))
        elif isinstance(v, (list, tuple)) and len(v) == 2:
            spec = SubstringSpec(int(v[0]), int(v[1]))
        else:
            return v
        if spec is not None:
            try:
                spec.normalize()
            except NexusConvertError as e:
                raise ValueError(str(e))
        return spec


class TreesBlockConfig(BaseModel):
    """TREES block settings."""

    model_config = ConfigDict(extra='forbid')

    tree_files: List[Path] = Field(..., min_length=1, description="Newick files, one tree each")
    rooting: Literal["none", "unrooted", "rooted"] = Field(
        default="none", description="Rooting comment written before each tree"
    )

    @validator('tree_files')
    def validate_tree_files(cls, v):
        for path in v:
            if not Path(path).exists():
                raise ValueError(f"Tree file not found: {path}")
        return v


def _blank_outgroup(v):
    if v is None or str(v).strip() in ("", "NA"):
        return None
    return v


class PaupBlockConfig(BaseModel):
    """PAUP block settings."""

    model_config = ConfigDict(extra='forbid')

    log: str = Field(..., description="PAUP log file")
    method: Literal["parsimony", "likelihood"] = Field(default="parsimony")
    statistics: Literal["simple", "bootstrap"] = Field(default="simple")
    outgroup: Optional[str] = Field(default=None, description="Outgroup taxon")
    nreps: int = Field(default=DEFAULT_PAUP_NREPS, ge=1, description="Search/bootstrap replicates")
    describe_trees: bool = Field(default=True, description="Report tree scores")
    quit: bool = Field(default=True, description="Close PAUP when done")

    @validator('outgroup')
    def blank_outgroup(cls, v):
        return _blank_outgroup(v)


class MrBayesBlockConfig(BaseModel):
    """MrBayes block settings."""

    model_config = ConfigDict(extra='forbid')

    log: str = Field(..., description="MrBayes log file")
    ngen: int = Field(default=DEFAULT_MRBAYES_NGEN, ge=1, description="MCMC generations")
    outgroup: Optional[str] = Field(default=None, description="Outgroup taxon")
    use_tree: bool = Field(default=False, description="Start from the first tree in the file")

    @validator('outgroup')
    def blank_outgroup(cls, v):
        return _blank_outgroup(v)


class NexusConvertConfig(BaseModel):
    """Main nexusconvert conversion configuration."""

    model_config = ConfigDict(
        extra='forbid',  # Don't allow extra fields
        validate_assignment=True,  # Validate on assignment
    )

    input_output: InputOutputConfig = Field(default_factory=InputOutputConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    parse: ParseConfig = Field(default_factory=ParseConfig)
    transform: TransformConfig = Field(default_factory=TransformConfig)
