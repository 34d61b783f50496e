#!/usr/bin/env python3
"""
music-organize: copy or move a tree of audio files into a tidy
Artist/Album (Year)/NN - Title layout built from their tags.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from utils.logging_config import setup_logging, configure_library_logging
from utils.config_loader import load_config, get_config_template
from utils.exceptions import ConfigurationError, MusicOrganizerError, PatternError
from utils.reporting import format_outcome, format_summary, write_csv_report
from pipeline.orchestrator import OrganizePipeline
from pipeline.placeholders import find_unknown_placeholders

EXIT_OK = 0
EXIT_FILE_ERRORS = 1
EXIT_USAGE = 2
EXIT_SOURCE_NOT_FOUND = 3


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="music-organize",
        description="Organize audio files into folders named from their tags",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --src ~/Downloads/music --dst ~/Music --dryrun
  %(prog)s --src ./rips --dst ./library --move
  %(prog)s --src ./in --dst ./out --pattern "{album_name}/{track_num} {track_name}"
        """
    )

    parser.add_argument("--src", type=Path, help="Source folder to scan for audio files")
    parser.add_argument("--dst", "--dest", dest="dst", type=Path, help="Destination root folder")
    parser.add_argument("--pattern", type=str, help="Target path pattern with {placeholders}")
    parser.add_argument(
        "--move", action="store_true", default=None,
        help="Move files instead of copying them"
    )
    parser.add_argument(
        "--overwrite", action="store_true", default=None,
        help="Replace existing targets instead of numbering the new file"
    )
    parser.add_argument(
        "--dryrun", "--dry-run", dest="dry_run", action="store_true", default=None,
        help="Only show where files would go"
    )
    parser.add_argument(
        "--strict-placeholders", action="store_true",
        help="Reject patterns that contain unknown {placeholders}"
    )
    parser.add_argument("--config", type=Path, help="Path to a YAML config file")
    parser.add_argument("--report", type=Path, help="Write a CSV report of every file to this path")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--print-config-template", action="store_true",
        help="Print a commented YAML config file and exit"
    )

    return parser


def apply_cli_overrides(config: dict, args: argparse.Namespace) -> dict:
    """Let command line flags win over file and environment settings."""
    organize = config['organize']
    if args.pattern is not None:
        organize['pattern'] = args.pattern
    for flag in ('move', 'overwrite', 'dry_run'):
        if getattr(args, flag) is not None:
            organize[flag] = getattr(args, flag)
    if args.strict_placeholders:
        organize['unknown_placeholders'] = 'reject'
    if args.verbose:
        config['logging']['level'] = 'DEBUG'
    if args.log_file is not None:
        config['logging']['file'] = str(args.log_file)
    return config


def check_pattern(config: dict):
    """
    Raises:
        PatternError: If unknown placeholders are rejected and the pattern has some
    """
    organize = config['organize']
    unknown = find_unknown_placeholders(organize['pattern'])
    if unknown and organize['unknown_placeholders'] == 'reject':
        raise PatternError(organize['pattern'], unknown)
    return unknown


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.print_config_template:
        print(get_config_template(), end="")
        return EXIT_OK

    if not args.src or not args.dst:
        parser.print_usage()
        print("Both --src and --dst are required.")
        return EXIT_USAGE

    try:
        source_dir = args.src.expanduser().resolve()
        dest_dir = args.dst.expanduser().resolve()

        if not source_dir.is_dir():
            print(f"Source not found: {args.src}")
            return EXIT_SOURCE_NOT_FOUND

        if args.config and not args.config.exists():
            raise ConfigurationError(f"Config file not found: {args.config}")

        config = apply_cli_overrides(load_config(args.config), args)
        unknown = check_pattern(config)

        log_file = config['logging'].get('file')
        logger = setup_logging(config['logging']['level'], Path(log_file) if log_file else None)
        configure_library_logging()

        if unknown:
            logger.warning(f"Pattern has unknown placeholders, kept literally: {', '.join(unknown)}")

        logger.info(f"Source directory: {source_dir}")
        logger.info(f"Destination directory: {dest_dir}")
        logger.info(f"Pattern: {config['organize']['pattern']}")

        pipeline = OrganizePipeline.from_config(config, dest_dir)

        print(f"Scanning: {source_dir}")
        files = pipeline.discover(source_dir)
        print(f"Found {len(files)} file(s).")

        def report(outcome):
            for line in format_outcome(outcome):
                print(line)

        result = pipeline.process_files(files, on_outcome=report)

        print()
        print(format_summary(result))

        if args.report:
            write_csv_report(result, args.report)
            print(f"Report written to: {args.report}")

        return EXIT_OK if result.success else EXIT_FILE_ERRORS

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return EXIT_FILE_ERRORS
    except MusicOrganizerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERRORS
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return EXIT_USAGE


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
