#!/usr/bin/env python3
"""Dotfiles management tool.

Links declared configuration files from a dotfiles directory into the home
directory and reports their link status.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotfileslib import (
    Config,
    DotfilesError,
    execute_add,
    execute_link,
    execute_remove,
    execute_status,
    execute_unlink,
)
from dotfileslib.logger import setup_logger
from dotfileslib.output import print_error, print_info

logger = logging.getLogger('dotfileslib.cli')


# --------------------------------------------------------------------------- #
# Configuration
# --------------------------------------------------------------------------- #

COMMANDS = {
    "add":    execute_add,
    "link":   execute_link,
    "remove": execute_remove,
    "status": execute_status,
    "unlink": execute_unlink,
}


# --------------------------------------------------------------------------- #
# Arguments
# --------------------------------------------------------------------------- #

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per command."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-r", "--root", default=os.environ.get("DOTFILES_ROOT"),
                        help="dotfiles directory (default: $DOTFILES_ROOT)")
    common.add_argument("--home", help="home directory to link into (default: ~)")
    common.add_argument("--dry-run", action="store_true",
                        help="print actions without executing them")
    common.add_argument("--force", action="store_true",
                        help="replace conflicting targets")
    common.add_argument("-v", "--verbose", action="store_true",
                        help="log diagnostics to stderr")

    parser = argparse.ArgumentParser(
        description="Simple dotfiles manager keeping track of file links",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  status   Show the link status of every mapping
  add      Declare a mapping and link it
  remove   Remove a mapping and unlink it
  link     Create links for all mappings
  unlink   Remove links for all mappings
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="command")

    status = subparsers.add_parser("status", parents=[common], help="show mapping status")
    status.add_argument("--json", action="store_true", help="print status as JSON")

    add = subparsers.add_parser("add", parents=[common], help="declare a mapping and link it")
    add.add_argument("source", help="path relative to the dotfiles directory, or a file path "
                     "(absolute or starting with ./, ../ or ~) inside the dotfiles or home directory")
    add.add_argument("target", nargs="?", help="path relative to the home directory (default: source)")
    add.add_argument("--move", action="store_true",
                     help="move an existing home file into the dotfiles directory first")

    remove = subparsers.add_parser("remove", parents=[common], help="remove a mapping and unlink it")
    remove.add_argument("target", help="target path relative to the home directory")

    subparsers.add_parser("link", parents=[common], help="create links for all mappings")
    subparsers.add_parser("unlink", parents=[common], help="remove links for all mappings")

    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Create the runtime configuration from parsed arguments."""
    config = Config(
        Path(args.root).expanduser(),
        home_dir=Path(args.home).expanduser() if args.home else None,
    )

    # Runtime flags
    config.dry_run = args.dry_run
    config.force = args.force
    config.verbose = args.verbose
    config.json = getattr(args, "json", False)
    config.move = getattr(args, "move", False)

    # Command arguments
    config.source = getattr(args, "source", None)
    config.target = getattr(args, "target", None)

    return config


# --------------------------------------------------------------------------- #
# Main
# --------------------------------------------------------------------------- #

def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch the requested command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.root:
        parser.error("the dotfiles directory is required (use --root or set DOTFILES_ROOT)")

    setup_logger(args.verbose)

    # Dispatch command
    try:
        config = build_config(args)
        sys.exit(COMMANDS[args.command](config))
    except DotfilesError as e:
        print_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print_info("\nInterrupted")
        sys.exit(130)
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
