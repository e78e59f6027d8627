#!/usr/bin/env python
# ============================================================================
# LOOKUP SYNCHRONIZATION SCRIPT
# ============================================================================
# STATUS: Script - Command-line entry point
# PURPOSE: Synchronize enum lookup tables for a set of Pydantic models
# USAGE:
#   python scripts/sync_lookups.py --model app.models:Rabbit --dry-run
#   python scripts/sync_lookups.py --model app.models:Rabbit
#   python scripts/sync_lookups.py --model app.models:Rabbit --dry-run -o lookups.sql
# ============================================================================

import sys
import os
import argparse
import importlib
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from __version__ import __version__
from core.logging import configure_logging
from core.schema import PydanticModelReflector
from infrastructure import LookupInitializer


def load_model(target: str):
    """Import a model class given as 'package.module:ClassName'."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise argparse.ArgumentTypeError(f"Expected module:Class, got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise argparse.ArgumentTypeError(f"Cannot import {module_name}: {e}") from e
    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise argparse.ArgumentTypeError(f"{module_name} has no attribute {attr}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Synchronize enum lookup tables with PostgreSQL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/sync_lookups.py --model app.models:Rabbit --dry-run
  python scripts/sync_lookups.py --model app.models:Rabbit --model app.models:Warren

Environment Variables:
  DATABASE_URL              Full PostgreSQL connection string
  POSTGRES_HOST             Database host
  POSTGRES_DB               Database name
  POSTGRES_USER             Database user (default: postgres)
  POSTGRES_PASSWORD         Database password
  POSTGRES_PORT             Database port (default: 5432)
  POSTGRES_SSLMODE          SSL mode (default: prefer)
  ENUM_LOOKUP_TABLE_PREFIX  Lookup table prefix (default: Enum_)
  ENUM_LOOKUP_TABLE_SUFFIX  Lookup table suffix (default: empty)
  ENUM_LOOKUP_SCHEMA        Lookup schema (default: public)
  ENUM_LOOKUP_NAME_LENGTH   Name column length (default: 255)
  ENUM_LOOKUP_SPLIT_WORDS   Split CamelCase member names into words (default: true)
  ENUM_LOOKUP_STAGING_TABLE Temp staging table name (default: enum_lookup_staging)
  LOG_FORMAT                Set to "json" for JSON log lines
        """
    )
    parser.add_argument(
        "--model", "-m",
        dest="models",
        action="append",
        type=load_model,
        required=True,
        help="Root model class as module:Class (repeatable)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the migration script without executing"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write the dry-run script to this file instead of stdout"
    )
    parser.add_argument(
        "--connection",
        type=str,
        help="PostgreSQL connection string (overrides environment)"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        json_output=args.json_logs,
    )

    initializer = LookupInitializer(connection_string=args.connection)
    reflector = PydanticModelReflector(args.models)

    result = initializer.initialize_all(reflector, dry_run=args.dry_run)

    if args.dry_run and result.script is not None:
        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(result.script)
            print(f"Migration script written to {args.output}")
        else:
            print(result.script)

    print("\n[RESULTS]\n")
    for step in result.steps:
        print(f"[{step.status.upper()}] {step.name}: {step.message}")
        if step.error:
            print(f"   Error: {step.error}")
        if step.details and args.verbose:
            for key, value in step.details.items():
                print(f"   {key}: {value}")

    if not result.success:
        print("Lookup synchronization failed!")
        for error in result.errors:
            print(f"   - {error}")
        return 1

    for warning in result.warnings:
        print(f"Warning: {warning}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
