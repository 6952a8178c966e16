#!/usr/bin/env python3
"""
Command line entry point for nexusconvert.

Subcommands convert a NEXUS alignment to FASTA, PHYLIP, MEGA or a
reformatted NEXUS file, append TREES / PAUP / MrBayes blocks to an existing
NEXUS document, or write an example configuration file.
"""

import sys
import argparse
import logging
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional

import pydantic

from .config_loader import (
    create_example_toml_config, create_example_yaml_config, load_configuration, merge_overrides,
)
from .config_models import MrBayesBlockConfig, NexusConvertConfig, PaupBlockConfig, TreesBlockConfig
from .core.constants import (
    DEBUG_LOG_FILE, DEFAULT_MRBAYES_NGEN, DEFAULT_PAUP_NREPS, FORMAT_FASTA, FORMAT_MEGA,
    FORMAT_NEXUS, FORMAT_PHYLIP, PROGRAM_NAME, VERSION,
)
from .core.conversion_coordinator import ConversionCoordinator
from .core.parser import read_text
from .core.progress_logger import ProgressLogger
from .core.utils import get_display_path
from .exceptions import NexusConvertError, ValidationError
from .io.blocks import (
    append_block, build_mrbayes_block, build_paup_block, build_trees_block_from_files, find_tree_name,
)
from .io.output_manager import open_destination

logger = logging.getLogger(__name__)

CONVERSION_COMMANDS = {
    'fasta': FORMAT_FASTA,
    'phylip': FORMAT_PHYLIP,
    'mega': FORMAT_MEGA,
    'nexus': FORMAT_NEXUS,
}

# argparse dest -> (config section, field)
OVERRIDE_FIELDS = {
    'input': ('input_output', 'input_file'),
    'output': ('input_output', 'output'),
    'debug': ('input_output', 'debug'),
    'split': ('selection', 'split'),
    'fetch': ('selection', 'fetch'),
    'drop': ('selection', 'drop'),
    'keep_gaps': ('parse', 'keep_gaps'),
    'revcom': ('transform', 'reverse_complement'),
    'substr': ('transform', 'substring'),
    'no_ambig': ('transform', 'no_ambiguity'),
    'wrap': ('transform', 'wrap_width'),
    'correct_headers': ('transform', 'header_fix'),
    'no_dash': ('transform', 'header_dash_strip'),
}


def add_conversion_options(parser: argparse.ArgumentParser) -> None:
    """Options shared by the four conversion subcommands."""
    # Defaults are None so only options given on the command line override the config file
    io_opts = parser.add_argument_group('Input/Output')
    io_opts.add_argument("-i", "--input", help="Input NEXUS file (default: standard input)")
    io_opts.add_argument("-o", "--output", help="Output file (default: standard output)")
    io_opts.add_argument("--config", help="YAML, TOML or INI configuration file")

    select_opts = parser.add_argument_group('Record Selection')
    select_opts.add_argument("-s", "--split", action="store_const", const=True, default=None,
                             help="Write each record to its own file named after its label")
    select_opts.add_argument("-f", "--fetch",
                             help="Only write records whose label contains this text or regex")
    select_opts.add_argument("-d", "--drop",
                             help="Comma-separated patterns of records to remove")

    transform_opts = parser.add_argument_group('Transforms')
    transform_opts.add_argument("--keep-gaps", action="store_const", const=True, default=None,
                                help="Keep gap characters in sequences")
    transform_opts.add_argument("-n", "--no-dash", action="store_const", const=True, default=None,
                                help="Rewrite '.1' to '-1' and remove dashes from labels")
    transform_opts.add_argument("-c", "--correct-headers", action="store_const", const=True, default=None,
                                help="Remove '.fasta...' suffixes from labels")
    transform_opts.add_argument("--revcom", action="store_const", const=True, default=None,
                                help="Reverse complement every sequence")
    transform_opts.add_argument("--substr", metavar="START:END",
                                help="Keep 1-based positions START..END (END < START also reverse complements)")
    transform_opts.add_argument("--no-ambig", action="store_const", const=True, default=None,
                                help="Collapse nucleotide ambiguity codes to single bases")
    transform_opts.add_argument("-w", "--wrap", type=int,
                                help="Wrap MEGA sequences to this many characters per line")


def add_runtime_options(parser: argparse.ArgumentParser) -> None:
    run_ctrl = parser.add_argument_group('Runtime Control')
    run_ctrl.add_argument("--debug", action="store_const", const=True, default=None,
                          help=f"Enable detailed debug logging (written to {DEBUG_LOG_FILE})")
    run_ctrl.add_argument("--quiet", action="store_true", help="Only report warnings and errors")


def add_document_options(parser: argparse.ArgumentParser) -> None:
    """Input/output options of the block appenders."""
    parser.add_argument("-i", "--input", help="NEXUS document to extend (default: standard input)")
    parser.add_argument("-o", "--output", help="Output file (default: standard output)")


def setup_argument_parser() -> argparse.ArgumentParser:
    """Set up and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description=f"{PROGRAM_NAME} {VERSION}: convert NEXUS alignments and append analysis blocks",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {VERSION}")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    for command, format_name in CONVERSION_COMMANDS.items():
        sub = subparsers.add_parser(command, help=f"Convert a NEXUS alignment to {format_name.upper()}")
        add_conversion_options(sub)
        add_runtime_options(sub)

    trees = subparsers.add_parser("append-trees", help="Append a TREES block built from Newick files")
    add_document_options(trees)
    trees.add_argument("tree_files", nargs="+", help="Newick files; the first line of each is used")
    trees.add_argument("-u", "--rooting", choices=["none", "unrooted", "rooted"], default="none",
                       help="Rooting comment written before each tree")
    add_runtime_options(trees)

    paup = subparsers.add_parser("append-paup", help="Append a PAUP block")
    add_document_options(paup)
    paup.add_argument("-l", "--log", required=True, help="PAUP log file")
    paup.add_argument("-m", "--method", choices=["parsimony", "likelihood"], default="parsimony")
    paup.add_argument("-s", "--statistics", choices=["simple", "bootstrap"], default="simple")
    paup.add_argument("-g", "--outgroup", help="Outgroup taxon")
    paup.add_argument("-r", "--nreps", type=int, default=DEFAULT_PAUP_NREPS,
                      help="Search or bootstrap replicates")
    paup.add_argument("--no-describe", dest="describe_trees", action="store_false",
                      help="Do not report tree scores")
    paup.add_argument("--no-quit", dest="quit", action="store_false",
                      help="Leave PAUP open when the block finishes")
    add_runtime_options(paup)

    mrbayes = subparsers.add_parser("append-mrbayes", help="Append a MrBayes block")
    add_document_options(mrbayes)
    mrbayes.add_argument("-l", "--log", required=True, help="MrBayes log file")
    mrbayes.add_argument("-n", "--ngen", type=int, default=DEFAULT_MRBAYES_NGEN,
                         help="Number of MCMC generations")
    mrbayes.add_argument("-g", "--outgroup", help="Outgroup taxon")
    mrbayes.add_argument("-t", "--use-tree", action="store_true",
                         help="Start the chains from the first tree defined in the document")
    add_runtime_options(mrbayes)

    generate = subparsers.add_parser("generate-config", help="Write an example configuration file")
    generate.add_argument("path", help="Destination file (.yaml, .yml or .toml)")
    generate.add_argument("--format", choices=["yaml", "toml"],
                          help="Template format (default: from the file extension)")
    add_runtime_options(generate)

    return parser


def configure_logging(debug: bool = False, quiet: bool = False) -> None:
    """Set up logging configuration based on arguments."""
    logging.basicConfig(level=logging.WARNING if quiet else logging.INFO, format='%(message)s')

    package_logger = logging.getLogger(PROGRAM_NAME)
    package_logger.setLevel(logging.WARNING if quiet else logging.INFO)

    # Set up debug logging if requested
    if debug:
        package_logger.setLevel(logging.DEBUG)
        debug_log_path = Path.cwd() / DEBUG_LOG_FILE
        fh = logging.FileHandler(debug_log_path, mode='w')
        fh.setLevel(logging.DEBUG)
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        fh.setFormatter(formatter)
        package_logger.addHandler(fh)
        logger.info(f"Debug logging enabled. Detailed log: {get_display_path(debug_log_path)}")


def build_overrides(args: argparse.Namespace) -> Dict[str, Dict[str, Any]]:
    """Collect the options given on the command line as nested config sections."""
    overrides: Dict[str, Dict[str, Any]] = {}
    for dest, (section, field) in OVERRIDE_FIELDS.items():
        value = getattr(args, dest, None)
        if value is not None:
            overrides.setdefault(section, {})[field] = value
    return overrides


def build_conversion_config(args: argparse.Namespace, output_format: str) -> NexusConvertConfig:
    """Load the optional config file and apply command line overrides on top."""
    config = load_configuration(args.config) if args.config else NexusConvertConfig()
    overrides = build_overrides(args)
    overrides.setdefault('input_output', {})['output_format'] = output_format
    return merge_overrides(config, overrides)


def validated(model_cls, **values):
    """Instantiate a block config model, translating pydantic errors."""
    try:
        return model_cls(**values)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid {model_cls.__name__} options:\n  → {e}") from e


def run_conversion(args: argparse.Namespace) -> List[Path]:
    config = build_conversion_config(args, CONVERSION_COMMANDS[args.command])
    show_progress = not (args.quiet or config.input_output.debug)
    coordinator = ConversionCoordinator(config, progress=ProgressLogger(show_progress=show_progress))
    written = coordinator.run()
    for path in written:
        logger.debug(f"Output: {get_display_path(path)}")
    return written


def write_document(args: argparse.Namespace, text: str, block: str) -> None:
    with open_destination(args.output) as handle:
        handle.write(append_block(text, block))
    if args.output:
        logger.info(f"Wrote {get_display_path(args.output)}")


def run_append_trees(args: argparse.Namespace) -> None:
    options = validated(TreesBlockConfig, tree_files=args.tree_files, rooting=args.rooting)
    text = read_text(args.input)
    block = build_trees_block_from_files(options.tree_files, options.rooting)
    write_document(args, text, block)


def run_append_paup(args: argparse.Namespace) -> None:
    options = validated(
        PaupBlockConfig, log=args.log, method=args.method, statistics=args.statistics,
        outgroup=args.outgroup, nreps=args.nreps, describe_trees=args.describe_trees, quit=args.quit,
    )
    text = read_text(args.input)
    block = build_paup_block(
        options.log, method=options.method, statistics=options.statistics,
        outgroup=options.outgroup, nreps=options.nreps,
        describe_trees=options.describe_trees, quit=options.quit,
    )
    write_document(args, text, block)


def run_append_mrbayes(args: argparse.Namespace) -> None:
    options = validated(
        MrBayesBlockConfig, log=args.log, ngen=args.ngen, outgroup=args.outgroup, use_tree=args.use_tree,
    )
    text = read_text(args.input)
    start_tree = None
    if options.use_tree:
        start_tree = find_tree_name(text)
        if start_tree is None:
            logger.warning("No tree definition found; MCMC will start from a random tree")
    block = build_mrbayes_block(options.log, ngen=options.ngen, outgroup=options.outgroup,
                                start_tree=start_tree)
    write_document(args, text, block)


def run_generate_config(args: argparse.Namespace) -> None:
    path = Path(args.path)
    template_format = args.format or ('toml' if path.suffix.lower() == '.toml' else 'yaml')
    if template_format == 'toml':
        create_example_toml_config(path)
    else:
        create_example_yaml_config(path)


COMMAND_HANDLERS = {
    'append-trees': run_append_trees,
    'append-paup': run_append_paup,
    'append-mrbayes': run_append_mrbayes,
    'generate-config': run_generate_config,
}


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for nexusconvert."""
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    # Set up logging first
    configure_logging(bool(args.debug), args.quiet)

    try:
        if args.command in CONVERSION_COMMANDS:
            run_conversion(args)
        else:
            COMMAND_HANDLERS[args.command](args)
    except NexusConvertError as e:
        logger.error(f"{args.command} failed: {e}")
        logger.debug("Full traceback:\n%s", traceback.format_exc())
        sys.exit(1)
    except Exception as e:
        logger.error(f"{args.command} terminated with an unexpected error: {e}")
        logger.debug("Full traceback:\n%s", traceback.format_exc())
        sys.exit(1)


def _shortcut(command: str, argv: Optional[List[str]] = None) -> None:
    main([command] + list(sys.argv[1:] if argv is None else argv))


def nexus2fasta(argv: Optional[List[str]] = None) -> None:
    """Console script: ``nexusconvert fasta``."""
    _shortcut('fasta', argv)


def nexus2phylip(argv: Optional[List[str]] = None) -> None:
    """Console script: ``nexusconvert phylip``."""
    _shortcut('phylip', argv)


def nexus2mega(argv: Optional[List[str]] = None) -> None:
    """Console script: ``nexusconvert mega``."""
    _shortcut('mega', argv)


def reformat_nexus(argv: Optional[List[str]] = None) -> None:
    """Console script: ``nexusconvert nexus``."""
    _shortcut('nexus', argv)


if __name__ == "__main__":
    main()
