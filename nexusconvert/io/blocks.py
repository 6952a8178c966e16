#!/usr/bin/env python3
"""
Templating of auxiliary NEXUS blocks: TREES, PAUP and MrBayes.

The blocks are plain text appended after an existing NEXUS document. Apart
from locating an existing ``tree NAME = ...;`` statement, the document body
is never parsed.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from ..core.constants import DEFAULT_MRBAYES_NGEN, DEFAULT_PAUP_NREPS
from ..core.utils import format_taxon_for_paup
from ..exceptions import FileOperationError, TreeParsingError, ValidationError

logger = logging.getLogger(__name__)

ROOTING_TAGS = {
    "none": "",
    "unrooted": "[&U] ",
    "rooted": "[&R] ",
}
TREE_STATEMENT_PATTERN = re.compile(r"^\s*tree\s+(?P<name>\S+?)\s*=\s*(?P<body>.*?);?\s*$")

PAUP_METHODS = ("parsimony", "likelihood")
PAUP_STATISTICS = ("simple", "bootstrap")

# Substitution parameters are placeholders to be replaced with fitted values.
ML_BASE_FREQ = "(0.2892 0.2928 0.1309)"
ML_RMAT = "(3.7285 46.5293 1.3888 2.3793 16.4374)"
ML_RATES = "\tRates = gamma Shape = 0.9350 Pinvar = 0.5691;"


def read_tree_file(path: Union[str, Path]) -> str:
    """
    Return the tree on the first line of a Newick file, terminated by ``;``.

    Raises:
        FileOperationError: if the file cannot be read
        TreeParsingError: if the first line is empty
    """
    path = Path(path)
    try:
        with open(path, 'r') as f:
            first_line = f.readline()
    except OSError as e:
        raise FileOperationError(f"Cannot read tree file {path}: {e}",
                                 file_path=path, operation="read") from e
    tree = first_line.strip()
    if not tree:
        raise TreeParsingError(f"Tree file {path} has no tree on its first line",
                               file_path=path, format_type="newick", position=0)
    return tree if tree.endswith(";") else tree + ";"


def find_tree(text: str) -> Optional[Tuple[str, str]]:
    """
    Locate the first ``tree NAME = ...;`` statement.

    Returns:
        Tuple of (name, tree string) or None if there is no tree statement
    """
    for line in text.splitlines():
        if not line.lstrip().startswith("tree "):
            continue
        match = TREE_STATEMENT_PATTERN.match(line)
        if match:
            return match.group('name'), match.group('body').strip()
    return None


def find_tree_name(text: str) -> Optional[str]:
    found = find_tree(text)
    return found[0] if found else None


def append_block(text: str, block: str) -> str:
    """Append ``block`` after ``text``, adding a newline if ``text`` lacks one."""
    if text and not text.endswith("\n"):
        text += "\n"
    return text + block


def build_trees_block(trees: Sequence[Tuple[str, str]], rooting: str = "none") -> str:
    """
    Build a TREES block.

    Args:
        trees: (tree string, source file name) pairs, numbered from 1
        rooting: 'none', 'unrooted' ([&U]) or 'rooted' ([&R])
    """
    if not trees:
        raise ValidationError("At least one tree is required for a TREES block", field='trees')
    if rooting not in ROOTING_TAGS:
        raise ValidationError(f"Unknown rooting '{rooting}'", field='rooting', value=rooting)

    tag = ROOTING_TAGS[rooting]
    lines = ["", "", "BEGIN TREES;"]
    for k, (tree, _) in enumerate(trees, start=1):
        lines.append(f"\ttree {k} = {tag}{tree}")
    for k, (_, source) in enumerate(trees, start=1):
        lines.append(f"\t[tree {k} file = {source}]")
    lines.append(f"\t[ntrees={len(trees)}]")
    lines.extend(["END;", "", ""])
    return "\n".join(lines)


def build_trees_block_from_files(paths: Sequence[Union[str, Path]], rooting: str = "none") -> str:
    trees = [(read_tree_file(path), str(path)) for path in paths]
    logger.info(f"Read {len(trees)} trees")
    return build_trees_block(trees, rooting)


def build_paup_block(log: str, method: str = "parsimony", statistics: str = "simple",
                     outgroup: Optional[str] = None, nreps: int = DEFAULT_PAUP_NREPS,
                     describe_trees: bool = True, quit: bool = True) -> str:
    """
    Build a PAUP block for one of four analyses:
    simple or bootstrap parsimony, simple (NJ start + GTR search) or
    bootstrap likelihood.
    """
    if method not in PAUP_METHODS:
        raise ValidationError(f"Unknown PAUP method '{method}'", field='method', value=method)
    if statistics not in PAUP_STATISTICS:
        raise ValidationError(f"Unknown PAUP statistics '{statistics}'",
                              field='statistics', value=statistics)
    if nreps < 1:
        raise ValidationError("nreps must be positive", field='nreps', value=nreps)

    outgroup_line = [f"\toutgroup {format_taxon_for_paup(outgroup)};"] if outgroup else []
    lines = ["BEGIN PAUP;", f"\tlog start replace file = {log};", "[Tree searching parameters]"]

    if method == "parsimony" and statistics == "simple":
        if describe_trees:
            lines.append("\tset autoclose = yes criterion = parsimony root=outgroup maxtrees=100 increase=no storebrlens=yes;")
        else:
            lines.append("\tset autoclose = yes criterion = parsimony root=outgroup increase=auto storebrlens=yes;")
        lines.extend(outgroup_line)
        lines.append(f"\thsearch addseq = random nreps = {nreps} swap = tbr hold = 1;")
        lines.append("\tsavetrees file = paup_simpleMP_trees.tre format = altnex brlens = yes;")
        if describe_trees:
            lines.append("\tpscores /TL HI CI RI;")
        lines.append("\tcontree all / majrule = yes strict = no treefile = paup_simpleMP_consensus.tre;")
    elif method == "parsimony":
        lines.extend([
            "\tset autoclose = yes criterion = parsimony root=outgroup increase=auto storebrlens=yes;",
            f"\tbootstrap nreps = {nreps} search = heuristic/ addseq = random nreps = 10 swap = tbr hold = 1;",
            "\tsavetrees from = 1 to = 1 file = paup_MPboot_trees.tre format = altnex brlens = yes savebootp = NodeLabels MaxDecimals = 0;",
        ])
    elif statistics == "simple":
        lines.append("\tset autoclose = yes criterion = distance root=outgroup increase=auto storebrlens=yes;")
        lines.extend(outgroup_line)
        lines.extend([
            "\tDSet distance = JC objective = ME base = equal rates = equal pinv = 0 subst = all negbrlen = setzero;",
            "\tNJ showtree = no breakties = random;",
            "\t    set criterion = like;",
            f"\tLset Base = {ML_BASE_FREQ} Nst = 6 Rmat = {ML_RMAT}",
            ML_RATES,
            "\thsearch addseq = random nreps = 5 swap = tbr;",
            "\tsavetrees file = paup_simpleML_tree.tre format = altnex brlens = yes maxdecimals = 6;",
        ])
    else:
        lines.append("\tset autoclose = yes criterion = like root = outgroup increase = auto storebrlens = yes;")
        lines.extend(outgroup_line)
        lines.extend([
            f"\tLset Base={ML_BASE_FREQ} Nst=6 Rmat={ML_RMAT}",
            ML_RATES,
            f"\tbootstrap nreps = {nreps} search = heuristic/ addseq = random swap = tbr hold = 1;",
            "\tsavetrees from = 1 to = 1 file = paup_MLboot_tree.tre format = altnex brlens = yes savebootp = NodeLabels MaxDecimals = 0;",
        ])

    lines.append("\tlog stop;")
    if quit:
        lines.append("\tquit;")
    lines.extend(["END;", "", ""])
    return "\n".join(lines)


def build_mrbayes_block(log: str, ngen: int = DEFAULT_MRBAYES_NGEN,
                        outgroup: Optional[str] = None,
                        start_tree: Optional[str] = None) -> str:
    """
    Build a generic K2P+I+G MrBayes block.

    Args:
        log: MrBayes log file name
        ngen: Number of MCMC generations
        outgroup: Outgroup taxon
        start_tree: Name of a tree defined in the document, used as starting values
    """
    if ngen < 1:
        raise ValidationError("ngen must be positive", field='ngen', value=ngen)

    lines = [
        "BEGIN MRBAYES;",
        f"\tlog start replace filename = {log};",
        "\tset autoclose = yes nowarn = yes;",
        "[set model parameters using K2P+I+G model followed by set priors and independently estimated parameters]",
        "\tlset applyto = (all) nst=2 [HKY model, but fix stationary state frequencies to use K2P model] rates = invgamma ngammacat=4;",
        "\tprset applyto = (all) statefreqpr = fixed(equal) [statefreqpr fixes the stationary state frequencies, converting the HKY model to K2P];",
        "\tunlink revmat = (all) shape = (all) pinvar = (all) statefreq = (all) tratio = (all);",
        "\tshowmodel;",
    ]
    if start_tree:
        lines.extend([
            "[user specified input tree statements]",
            f"\tstartvals tau = {start_tree} V = {start_tree};",
        ])
    lines.extend([
        "[execute commands]",
        f"\tmcmc ngen = {ngen} printfreq = 1000 samplefreq = 1000 nchains = 4 temp = 0.2 "
        "checkfreq = 50000 diagnfreq = 1000 stopval = 0.01 stoprule = no;",
    ])
    if outgroup:
        lines.append(f"\toutgroup {format_taxon_for_paup(outgroup)};")
    lines.extend([
        "\tsumt relburnin = yes burninfrac = 0.25 contype = halfconpat;",
        "\tsump relburnin = yes burninfrac = 0.25;",
        "\tlog stop;",
        "END;",
        "",
        "",
    ])
    return "\n".join(lines)
