#!/usr/bin/env python3
"""
Command-line interface for freight.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from freight import Project, init
from freight.errors import FreightError, ToolFailedError
from freight.events import Phase, PhaseEvent, discard_events

console = Console()
error_console = Console(stderr=True)

HELP = """\
Alternative for Cargo

Usage: freight [OPTIONS] [COMMAND] [ARGS]...

Commands:
    init         Create a new project (freight init [PATH] [--lib])
    build        Build the library and/or binary into target/debug
    build-tests  Build every test harness into target/debug/tests
    test         Build and run the tests, forwarding ARGS to each test binary
    run          Build and run the binary, forwarding ARGS to it
    run-tests    Run previously built tests, forwarding ARGS to each test binary
    doc          Generate documentation for the library into target/doc
    help         Print out this message

Options:
    -C, --directory DIR  Look for Freight.toml starting from DIR
    -v, --verbose        Show debug logging, including every command run
    -q, --quiet          Do not print progress messages
"""

EVENT_FORMATS = {
    Phase.COMPILING_LIB: "[bold green]   Compiling[/bold green] lib {name}",
    Phase.COMPILING_BIN: "[bold green]   Compiling[/bold green] bin {name}",
    Phase.DONE: "[bold green]    Finished[/bold green] dev",
    Phase.UNIT_TEST_STARTED: "[bold green]     Running[/bold green] unittests {name}",
    Phase.DOC_TEST_STARTED: "[bold green]   Doc-tests[/bold green] {name}",
}


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, rich_tracebacks=True)]
    )


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="freight",
        description="Build and test single-crate Rust projects",
        add_help=False,
    )

    parser.add_argument(
        "--directory", "-C",
        type=Path,
        default=None,
        help="Start directory for locating Freight.toml (default: current directory)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Do not print progress messages"
    )

    parser.add_argument("command", nargs="?", help="Command to run")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments for the command")

    return parser.parse_args(argv)


def print_event(event: PhaseEvent):
    """Render a progress event the way cargo does."""
    console.print(EVENT_FORMATS[event.phase].format(name=escape(event.name or "")), highlight=False)


def forwarded(args: List[str]) -> List[str]:
    """Arguments for a child process; a leading `--` separator is dropped."""
    if args and args[0] == "--":
        return args[1:]
    return args


def start_dir(args: argparse.Namespace) -> Path:
    return args.directory if args.directory is not None else Path.cwd()


def load_project(args: argparse.Namespace) -> Project:
    events = discard_events if args.quiet else print_event
    return Project.discover(start_dir(args), events=events)


def cmd_init(args: argparse.Namespace) -> int:
    init_parser = argparse.ArgumentParser(prog="freight init")
    init_parser.add_argument("path", nargs="?", type=Path, default=None)
    init_parser.add_argument("--lib", action="store_true", help="Create a library crate")
    init_args = init_parser.parse_args(args.args)

    base = start_dir(args)
    path = base / init_args.path if init_args.path is not None else base
    manifest = init(path, lib=init_args.lib)
    if not args.quiet:
        kind = "library" if init_args.lib else "binary"
        console.print(
            f"[bold green]     Created[/bold green] {kind} package `{manifest.crate_name}`",
            highlight=False,
        )
    return 0


def cmd_build(args: argparse.Namespace) -> int:
    load_project(args).build()
    return 0


def cmd_build_tests(args: argparse.Namespace) -> int:
    load_project(args).build_tests()
    return 0


def cmd_test(args: argparse.Namespace) -> int:
    load_project(args).test(forwarded(args.args))
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    return load_project(args).run(forwarded(args.args))


def cmd_run_tests(args: argparse.Namespace) -> int:
    load_project(args).run_tests(forwarded(args.args))
    return 0


def cmd_doc(args: argparse.Namespace) -> int:
    load_project(args).doc()
    return 0


def cmd_help(args: argparse.Namespace) -> int:
    console.print(HELP, highlight=False, markup=False)
    return 0


COMMANDS: Dict[str, Callable[[argparse.Namespace], int]] = {
    "init": cmd_init,
    "build": cmd_build,
    "build-tests": cmd_build_tests,
    "test": cmd_test,
    "run": cmd_run,
    "run-tests": cmd_run_tests,
    "doc": cmd_doc,
    "help": cmd_help,
}


def run_command(args: argparse.Namespace) -> int:
    """Dispatch a parsed command line and return the process exit code."""
    handler = COMMANDS.get(args.command)
    if handler is None:
        console.print("Unsupported command", highlight=False)
        console.print(HELP, highlight=False, markup=False)
        return 1

    try:
        return handler(args)
    except ToolFailedError as e:
        error_console.print(f"[red]error:[/red] {escape(str(e))}", highlight=False)
        return e.return_code if e.return_code > 0 else 1
    except (FreightError, OSError) as e:
        error_console.print(f"[red]error:[/red] {escape(str(e))}", highlight=False)
        if args.verbose:
            error_console.print_exception()
        return 1


def main(argv: Optional[List[str]] = None):
    """Main entry point for CLI."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        sys.exit(run_command(args))
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
