"""dirtag CLI - list and set audio tags for a directory tree."""
import sys
import argparse
import logging
from typing import List, Optional

from .core import DirtagError, PathNotFound
from .models import TagOptions
from .processor import (
    register_signal_handlers,
    unregister_signal_handlers,
    list_tags_at,
    set_tags_at,
    summarize
)
from .utils import (
    Config,
    setup_logging,
    verbose_from_env,
    EXIT_CODE_SUCCESS,
    EXIT_CODE_ERROR,
    EXIT_CODE_USAGE,
    EXIT_CODE_INTERRUPTED
)

logger = logging.getLogger(__name__)

INDEX_HELP = ("the index parameter: -1 means the parent dir of the audio file, "
              "-2 means parent of the parent dir; 0 or positive values are ignored")

# ---------- CLI & Main ----------
def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with list-tags and set-tags subcommands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--path", default=".", help="The path to check (default: current directory)")
    common.add_argument("--verbose", action='store_true', default=None,
                        help="Enable debug logging (overrides DIRTAG_VERBOSE env var)")
    common.add_argument("--log-dir", help="Directory for a rotating log file (overrides DIRTAG_LOG_DIR env var)")

    parser = argparse.ArgumentParser(prog="dirtag", description="dirtag - set audio tags from directory names")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    subparsers.add_parser(
        "list-tags",
        parents=[common],
        help="List audio file tags",
        description="Search audio files in the specified path and list the tags of the audio files",
    )

    set_parser = subparsers.add_parser(
        "set-tags",
        parents=[common],
        help="Set the tags for audio files",
        description=f"Set the tags for the audio files in the specified path; {INDEX_HELP}",
    )
    set_parser.add_argument("--album", default="", help="The album of the audio file")
    set_parser.add_argument("--year", default="", help="The year of the audio file")
    set_parser.add_argument("--artist", default="", help="The artist of the audio file")
    set_parser.add_argument("--albumIndex", "--album-index", dest="album_index", type=int, default=0,
                            help="The path index of the album name")
    set_parser.add_argument("--yearIndex", "--year-index", dest="year_index", type=int, default=0,
                            help="The path index of the album year")
    set_parser.add_argument("--artistIndex", "--artist-index", dest="artist_index", type=int, default=0,
                            help="The path index of the artist")
    set_parser.add_argument("--dry-run", action='store_true', help="Resolve tags without writing files")
    return parser

def options_from_args(args: argparse.Namespace) -> TagOptions:
    """Build the immutable per-run options from parsed arguments."""
    return TagOptions(
        path=args.path or ".",
        album=args.album,
        artist=args.artist,
        year=args.year,
        album_index=args.album_index,
        artist_index=args.artist_index,
        year_index=args.year_index,
    )

def run_list_tags(args: argparse.Namespace) -> int:
    """List tags under args.path. Returns exit code."""
    list_tags_at(args.path or ".")
    return EXIT_CODE_SUCCESS

def run_set_tags(args: argparse.Namespace) -> int:
    """Set tags under args.path. Returns exit code."""
    results = set_tags_at(options_from_args(args), dry_run=args.dry_run)
    summary = summarize(results)

    print("\n--- SUMMARY ---")
    print(f"Total files processed: {summary['processed']}")
    if args.dry_run:
        print("Dry-run: no files written")
    else:
        print(f"Saved: {summary['saved']}")
        print(f"Failed to save: {summary['failed']}")
        for r in results:
            if r.get('error'):
                print(f"  {r['path']}: {r['error']}")

    # Save failures are reported but do not fail the run
    return EXIT_CODE_SUCCESS

COMMANDS = {
    "list-tags": run_list_tags,
    "set-tags": run_set_tags,
}

def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    register_signal_handlers()
    try:
        args = build_parser().parse_args(argv)

        # Setup logging - use env var default if flag not explicitly set
        if args.verbose is None:
            args.verbose = verbose_from_env()

        # Configuration precedence: CLI flag > environment variable > default
        try:
            Config.load_from_env()
            if args.log_dir:
                Config.LOG_DIR = args.log_dir
            Config.validate()
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(EXIT_CODE_USAGE)

        setup_logging(args.verbose, Config.LOG_DIR)

        try:
            exit_code = COMMANDS[args.command](args)
            sys.exit(exit_code)
        except KeyboardInterrupt:
            sys.exit(EXIT_CODE_INTERRUPTED)
        except PathNotFound as e:
            logger.error(str(e))
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(EXIT_CODE_ERROR)
        except DirtagError as e:
            message = f"Failed to {args.command.replace('-', ' ')} at path {args.path}, the error is {e}"
            logger.error(message)
            print(f"Error: {message}", file=sys.stderr)
            sys.exit(EXIT_CODE_ERROR)
        except OSError as e:
            logger.error(f"Unexpected error: {e}", exc_info=True)
            print(f"Unexpected error: {e}", file=sys.stderr)
            sys.exit(EXIT_CODE_ERROR)

    finally:
        # Ensure signal handlers are unregistered on exit
        unregister_signal_handlers()


if __name__ == '__main__':
    main()
