"""
altakit CLI argument parser.

This module implements the command-line interface for altakit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from altakit import __version__
from altakit.core.platform import Architecture, System

logger = logging.getLogger(__name__)


class CLI:
    """altakit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="altakit",
            description="altakit - Alta compiler installer and version checker",
            epilog='Use "altakit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"altakit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./altakit.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_fetch_command(subparsers)
        self._add_check_command(subparsers)

        return parser

    def _add_fetch_command(self, subparsers):
        """Add 'fetch' subcommand."""
        parser = subparsers.add_parser(
            "fetch",
            help="Download and install the compiler",
            description="Download an altac release and install it into a directory",
        )
        parser.add_argument(
            "version_spec",
            nargs="?",
            default="latest",
            metavar="VERSION",
            help="Version (1.2.3), prefix (1 or 1.2), commit hash or 'latest' "
            "(default: latest)",
        )
        parser.add_argument(
            "--dest",
            type=Path,
            required=True,
            metavar="DIR",
            help="Installation directory",
        )
        parser.add_argument(
            "--temp",
            type=Path,
            default=Path(".altakit-tmp"),
            metavar="DIR",
            help="Directory for downloaded archives (default: .altakit-tmp)",
        )
        parser.add_argument(
            "--system",
            metavar="NAME",
            help=f"Target system ({'|'.join(s.value for s in System)} or alias; "
            "default: detected)",
        )
        parser.add_argument(
            "--arch",
            metavar="NAME",
            help=f"Target architecture ({'|'.join(a.value for a in Architecture)} "
            "or alias; default: detected)",
        )
        parser.add_argument(
            "--silent",
            action="store_true",
            help="Only print the installed binary path",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Overwrite existing files in the installation directory",
        )
        parser.add_argument(
            "--always",
            action="store_true",
            help="Download even if this version is already installed",
        )

    def _add_check_command(self, subparsers):
        """Add 'check' subcommand."""
        parser = subparsers.add_parser(
            "check",
            help="Check the installed compiler version",
            description="Exit 0 if the installed altac satisfies the requested "
            "version or commit, 1 otherwise",
        )
        parser.add_argument(
            "--version",
            dest="requested_version",
            metavar="VERSION",
            help="Required version ([v]N.N.N)",
        )
        parser.add_argument(
            "--commit",
            metavar="HASH",
            help="Required commit build (7 characters); overrides --version",
        )
        parser.add_argument(
            "--exact",
            action="store_true",
            help="Require exactly the requested version, not a compatible one",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet or getattr(args, "silent", False):
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "fetch": "altakit.cli.commands.fetch",
            "check": "altakit.cli.commands.check",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
