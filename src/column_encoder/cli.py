"""
Command-Line Interface for the Column Encoder.

This module provides the command-line interface for encoding column names
in scripts and option documents.

Usage:
    column-encode encode-script --names names.json --input analysis.R
    column-encode encode-script --names names.json --prefix data. < analysis.R
    column-encode decode-script --names names.json --input encoded.R
    column-encode encode-options --options options.json --preloading
    column-encode rename --mapping renames.json --input analysis.R
    column-encode remove --column age --column weight --input analysis.R
    column-encode mapping --names names.json

A names file is a JSON object mapping column names to their type
(``"scale"``, ``"ordinal"``, ``"nominal"`` or ``"unknown"``), or a JSON list
of names of unknown type.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from column_encoder import __version__
from column_encoder.config import Config, create_default_config, merge_configs
from column_encoder.core.column_types import ColumnType
from column_encoder.core.registry import Registry
from column_encoder.core.script_rewrite import (
    remove_column_names_from_script,
    replace_column_names_in_script,
)
from column_encoder.exceptions import ConfigError
from column_encoder.logging_config import setup_logging
from column_encoder.options.meta import META_KEY, collect_names_from_meta
from column_encoder.options.option_tree import encode_column_names_in_options
from column_encoder.output.report import MappingReport, create_mapping_report


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="column-encode",
        description="Replace data column names with safe identifiers in scripts and options.",
        epilog="For more information, see the project documentation.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Configuration file (JSON)",
        metavar="FILE",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # encode-script
    encode_script = subparsers.add_parser("encode-script", help="Encode column names in a script")
    _add_names_argument(encode_script)
    _add_input_argument(encode_script)
    encode_script.add_argument(
        "--prefix",
        action="append",
        default=[],
        help="Allowed prefix before column names, e.g. 'data.' (can be specified multiple times)",
        metavar="P",
    )
    encode_script.add_argument(
        "--show-found",
        action="store_true",
        help="List the column names that were encoded (on stderr)",
    )
    encode_script.set_defaults(handler=run_encode_script)

    # decode-script
    decode_script = subparsers.add_parser("decode-script", help="Decode identifiers in a script")
    _add_names_argument(decode_script)
    _add_input_argument(decode_script)
    decode_script.set_defaults(handler=run_decode_script)

    # encode-options
    encode_options = subparsers.add_parser("encode-options", help="Encode an options document")
    encode_options.add_argument(
        "--options",
        type=Path,
        required=True,
        help="Options document (JSON) with its .meta member",
        metavar="FILE",
    )
    encode_options.add_argument(
        "--names",
        type=Path,
        help="Dataset column names (JSON)",
        metavar="FILE",
    )
    encode_options.add_argument(
        "--preloading",
        action="store_true",
        help="Qualify typed column names with their type",
    )
    encode_options.set_defaults(handler=run_encode_options)

    # rename
    rename = subparsers.add_parser("rename", help="Rename column names in a script")
    rename.add_argument(
        "--mapping",
        type=Path,
        required=True,
        help="JSON object mapping old column names to new ones",
        metavar="FILE",
    )
    _add_input_argument(rename)
    rename.set_defaults(handler=run_rename)

    # remove
    remove = subparsers.add_parser("remove", help="Make a script fail on removed columns")
    remove.add_argument(
        "--column",
        action="append",
        required=True,
        help="Removed column name (can be specified multiple times)",
        metavar="NAME",
    )
    _add_input_argument(remove)
    remove.set_defaults(handler=run_remove)

    # mapping
    mapping = subparsers.add_parser("mapping", help="Print the mapping report")
    _add_names_argument(mapping)
    mapping.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )
    mapping.set_defaults(handler=run_mapping)

    return parser


def _add_names_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--names",
        type=Path,
        required=True,
        help="Column names with their types (JSON)",
        metavar="FILE",
    )


def _add_input_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-i", "--input",
        type=Path,
        help="Script file to read (default: stdin)",
        metavar="FILE",
    )


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = create_parser()
    return parser.parse_args(args)


def args_to_config(args: argparse.Namespace) -> Config:
    """Convert parsed arguments to Config object."""
    config = create_default_config()

    config.verbose = args.verbose
    if args.verbose:
        config.log_level = "DEBUG"
    elif args.quiet:
        config.log_level = "ERROR"

    # Load config file if provided
    if args.config:
        if not args.config.exists():
            raise ConfigError(f"Configuration file not found: {args.config}")
        file_config = Config.load_from_file(args.config)
        # Command-line args override file config
        config = merge_configs(file_config, config)

    return config


def load_names(path: Path) -> Dict[str, ColumnType]:
    """
    Load column names from a names file.

    Args:
        path: JSON file holding an object (name -> type) or a list of names

    Returns:
        Mapping from column name to ColumnType
    """
    data = _load_json(path)
    if isinstance(data, list):
        return {str(name): ColumnType.UNKNOWN for name in data}
    if isinstance(data, dict):
        return {str(name): ColumnType.from_string(type_name) for name, type_name in data.items()}
    raise ConfigError(f"Names file must hold a JSON object or list: {path}")


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e


def _read_input(args: argparse.Namespace) -> str:
    if args.input:
        return args.input.read_text(encoding="utf-8")
    return sys.stdin.read()


def _registry_with_names(config: Config, names_file: Path) -> Registry:
    registry = Registry(config)
    registry.set_names(load_names(names_file))
    return registry


def run_encode_script(args: argparse.Namespace, config: Config) -> int:
    registry = _registry_with_names(config, args.names)
    text = _read_input(args)

    prefixes = args.prefix or config.allowed_prefixes
    result = registry.encode_script_text_with_prefixes(text, prefixes)
    sys.stdout.write(result.text)

    if args.show_found:
        for prefix, names in result.names_by_prefix.items():
            for name in sorted(names):
                print(f"Found: {prefix}{name}", file=sys.stderr)

    return 0


def run_decode_script(args: argparse.Namespace, config: Config) -> int:
    registry = _registry_with_names(config, args.names)
    sys.stdout.write(registry.decode_script_text(_read_input(args)))
    return 0


def run_encode_options(args: argparse.Namespace, config: Config) -> int:
    options = _load_json(args.options)
    if not isinstance(options, dict):
        raise ConfigError(f"Options document must be a JSON object: {args.options}")

    names = load_names(args.names) if args.names else {}
    for name, column_type in collect_names_from_meta(options.get(META_KEY)).items():
        names.setdefault(name, column_type)

    registry = Registry(config)
    registry.set_names(names)

    found = encode_column_names_in_options(options, args.preloading, registry)

    output = {
        "options": options,
        "columns": [[name, column_type.value] for name, column_type in sorted(found)],
    }
    print(json.dumps(output, indent=2))
    return 0


def run_rename(args: argparse.Namespace, config: Config) -> int:
    mapping = _load_json(args.mapping)
    if not isinstance(mapping, dict):
        raise ConfigError(f"Mapping file must hold a JSON object: {args.mapping}")

    text = replace_column_names_in_script(
        _read_input(args),
        {str(old): str(new) for old, new in mapping.items()},
        config.replacement_prefix,
        config.replacement_suffix,
    )
    sys.stdout.write(text)
    return 0


def run_remove(args: argparse.Namespace, config: Config) -> int:
    sys.stdout.write(remove_column_names_from_script(_read_input(args), args.column))
    return 0


def run_mapping(args: argparse.Namespace, config: Config) -> int:
    registry = _registry_with_names(config, args.names)
    if args.json:
        print(MappingReport.from_registry(registry).to_json())
    else:
        print(create_mapping_report(registry))
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    parsed = parse_args(args)

    try:
        config = args_to_config(parsed)
    except (ConfigError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    # Validate configuration
    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Configuration error: {error}", file=sys.stderr)
        return 1

    setup_logging(config.log_level, verbose=config.verbose)

    try:
        return parsed.handler(parsed, config)
    except Exception as e:
        if config.verbose:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
