from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of configuration
sources (defaults, host config file and CLI overrides), resolution against
an in-memory registrar, and result rendering.
"""

import asyncio
import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from minipack.core.pipeline.engine import ResolutionEngine
from minipack.core.pipeline.validator import validate_config
from minipack.domain.config import get_default_config, load_config
from minipack.domain.errors import ConfigurationError, MiniPackError
from minipack.domain.registration_models import ResolutionResult
from minipack.infra.bundler import RecordingRegistrar
from minipack.infra.logging import LoggingConfig, configure_logging, get_logger
from minipack.interface.cli import args as cli_args

logger = get_logger(__name__)

_MERGE_KEYS = ("context", "entry", "output_path", "resources", "target", "extfile")

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 resolution failure,
             2 configuration error, 130 interrupted).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap
    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Configuration hierarchy
    try:
        base_conf = get_default_config() if args.use_defaults else load_config(args.config_path)
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))

    if args.dump_config:
        clean_conf, warnings = validate_config(raw_conf, strict=False)
        for w in warnings:
            logger.warning(f"Configuration Constraint: {w}")
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # 4. Resolution phase
    try:
        registrar = RecordingRegistrar()
        engine = ResolutionEngine(raw_conf, registrar)
        result = asyncio.run(engine.load_entries())
    except KeyboardInterrupt:
        logger.warning("Resolution interrupted by user.")
        return 130
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except MiniPackError as e:
        logger.error(f"Resolution failed: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    # 5. Output rendering phase
    if args.json_output:
        payload = asdict(result)
        payload["ignored_outputs"] = engine.ignored_outputs()
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result, registrar)

    return 0

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge known, non-empty override values into the base configuration.
    """
    out = dict(base)
    for k in _MERGE_KEYS:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: ResolutionResult, registrar: RecordingRegistrar) -> None:
    """
    Print the resolution result as a terminal report.

    Args:
        result: The completed resolution.
        registrar: Registrar holding the declared bundler entries.
    """
    print(f"Entries: {len(result.entries)}")
    for entry in result.entries:
        print(f"  - {entry}")

    print(f"Pages: {len(result.pages)}")
    print(f"Components: {len(result.components)}")
    print(f"Script entries: {len(registrar.scripts)}")
    print(f"Asset chunks: {len(registrar.assets)}")

    subpackages = result.manifest.get("subPackages", [])
    if subpackages:
        print("Subpackages:")
        for pack in subpackages:
            print(f"  - {pack['root']} ({len(pack.get('pages', []))} pages)")

    print("\nFiles:")
    for path in result.files:
        print(f"  {path} -> {result.output_paths.get(path, path)}")


if __name__ == "__main__":
    sys.exit(main())
