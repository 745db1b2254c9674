from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
namespace into configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict

from minipack.domain.config import SUPPORTED_TARGETS

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the minipack CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="minipack",
        description="Resolve the manifest and source files of a multi-entry mini-program.",
    )

    # --- Project Layout ---
    p.add_argument(
        "-c", "--config",
        dest="config_path",
        default=None,
        help="Host configuration file (defaults to ./minipack.config.json when present).",
    )
    p.add_argument(
        "--context",
        dest="context",
        default=None,
        help="Project root directory.",
    )
    p.add_argument(
        "-e", "--entry",
        dest="entry",
        action="append",
        default=None,
        help="Entry document (repeatable). The first one is the main entry.",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help="Output directory, relative to the context.",
    )
    p.add_argument(
        "-r", "--resource",
        dest="resources",
        action="append",
        default=None,
        help="Additional source root (repeatable).",
    )

    # --- Platform ---
    p.add_argument(
        "-t", "--target",
        dest="target",
        choices=SUPPORTED_TARGETS,
        default=None,
        help="Mini-program dialect.",
    )
    p.add_argument(
        "--no-extfile",
        action="store_true",
        help="Do not package the main entry's ext.json.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore any host configuration file.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to a rotating file.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the resolution result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["context"] = args.context
    overrides["entry"] = args.entry
    overrides["output_path"] = args.output_path
    overrides["resources"] = args.resources
    overrides["target"] = args.target

    if args.no_extfile:
        overrides["extfile"] = False

    return overrides
