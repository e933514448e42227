#!/usr/bin/env python3
"""
Command-line front end for the code collector.
"""

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path

import pyperclip

# Add the current directory to Python path
sys.path.insert(0, str(Path(__file__).parent))

from code_collector import CodeCollector
from collector_configs import CollectorConfig, load_config
from collection_errors import CollectionError, ConfigError, NoFilesCollectedError

logger = logging.getLogger("code_collector")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Collect source files and their local imports into one text blob",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  collect.py src/main.ts                 # main.ts plus everything it imports
  collect.py --direct a.py b.py          # Just these two files
  collect.py --smart src/app.py --copy   # Follow imports, drop ignored files, copy
  collect.py --all -o context.txt        # Whole project, minus ignored paths
        """
    )

    # Collection modes
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument('--imports', action='store_const', dest='mode', const='imports',
                            help='Follow local imports from the given files (default)')
    mode_group.add_argument('--direct', action='store_const', dest='mode', const='direct',
                            help='Collect exactly the given files and directories')
    mode_group.add_argument('--smart', action='store_const', dest='mode', const='smart',
                            help='Follow imports, then drop files matching ignore patterns')
    mode_group.add_argument('--all', action='store_const', dest='mode', const='all',
                            help='Collect every non-ignored text file in the project')

    parser.add_argument('paths', nargs='*',
                        help='Files or directories to start from (--all defaults to the workspace root)')
    parser.add_argument('--root',
                        help='Workspace root for relative paths (default: common project root of the paths)')
    parser.add_argument('--config', help='JSON configuration file')
    parser.add_argument('--ignore', action='append', default=[], metavar='PATTERN',
                        help='Additional gitignore-style ignore pattern (repeatable)')
    parser.add_argument('--python-batch', action='store_true', default=None,
                        help='Expand Python seeds in one out-of-process walk')
    parser.add_argument('--format', choices=['plain', 'markdown'],
                        help='Output layout (default: plain)')
    parser.add_argument('-o', '--output', help='Write the result to a file')
    parser.add_argument('--copy', action='store_true', help='Copy the result to the clipboard')
    parser.add_argument('--stats', action='store_true',
                        help='Print a per file type breakdown and a token estimate to stderr')
    parser.add_argument('--no-progress', action='store_true', help='Disable progress bars')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase log verbosity (-v info, -vv debug)')

    parser.set_defaults(mode='imports')

    args = parser.parse_args(argv)
    if args.mode != 'all' and not args.paths:
        parser.error(f"--{args.mode} needs at least one path")
    return args


def setup_logging(verbosity: int):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


def build_config(args) -> CollectorConfig:
    config = load_config(args.config) if args.config else CollectorConfig()
    if args.ignore:
        config.extra_ignore_patterns = config.extra_ignore_patterns + args.ignore
    if args.python_batch:
        config.python_batch = True
    if args.format:
        config.output_format = args.format
    if args.no_progress:
        config.show_progress = False
    return config


def emit(result, args) -> int:
    """Deliver the collected text to the requested destinations"""
    status = EXIT_OK

    if args.output:
        try:
            Path(args.output).write_text(result.output, encoding='utf-8')
            print(f"Wrote {args.output}", file=sys.stderr)
        except OSError as e:
            logger.error(f"Cannot write {args.output}: {e}")
            status = EXIT_ERROR

    if args.copy:
        try:
            pyperclip.copy(result.output)
        except pyperclip.PyperclipException as e:
            logger.error(f"Clipboard unavailable: {e}")
            status = EXIT_ERROR

    if not args.output and not args.copy:
        sys.stdout.write(result.output)
        sys.stdout.flush()

    print(result.summary, file=sys.stderr)
    if args.stats:
        print(result.stats.format_breakdown(), file=sys.stderr)
    return status


def run(args) -> int:
    try:
        config = build_config(args)
    except ConfigError as e:
        logger.error(str(e))
        return EXIT_ERROR

    collector = CodeCollector(config=config, workspace_root=args.root, count_tokens=args.stats)

    # First Ctrl+C stops the traversal and keeps the partial result
    cancel_event = threading.Event()

    def on_interrupt(signum, frame):
        if cancel_event.is_set():
            raise KeyboardInterrupt
        logger.warning("Interrupted, finishing with the files collected so far")
        cancel_event.set()

    previous_handler = signal.signal(signal.SIGINT, on_interrupt)
    try:
        if args.mode == 'direct':
            result = collector.gather_direct(args.paths, cancel_event=cancel_event)
        elif args.mode == 'smart':
            result = collector.gather_smart(args.paths, cancel_event=cancel_event)
        elif args.mode == 'all':
            result = collector.collect_all(args.paths or None, cancel_event=cancel_event)
        else:
            result = collector.gather_imports(args.paths, cancel_event=cancel_event)
    except NoFilesCollectedError as e:
        logger.error(str(e))
        print("No text files found to process", file=sys.stderr)
        return EXIT_ERROR
    except CollectionError as e:
        logger.error(f"Collection failed: {e}", extra={'context': e.log_context()})
        return EXIT_ERROR
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    status = emit(result, args)
    if cancel_event.is_set():
        return EXIT_INTERRUPTED
    return status


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        return run(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
