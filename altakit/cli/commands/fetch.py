"""
Fetch command implementation.

Downloads and installs an Alta compiler release.
"""

import logging
import sys

from altakit.cli.utils import load_cli_config, print_error, safe_print
from altakit.core.download import DownloadProgress
from altakit.core.exceptions import AltaKitError
from altakit.core.platform import detect_architecture, detect_system
from altakit.toolchain.fetcher import CompilerFetcher

logger = logging.getLogger(__name__)


def _print_progress(progress: DownloadProgress) -> None:
    sys.stderr.write(f"\r⬇ {progress}")
    if progress.total_bytes and progress.bytes_downloaded >= progress.total_bytes:
        sys.stderr.write("\n")
    sys.stderr.flush()


def run(args) -> int:
    """
    Run the fetch command.

    Args:
        args: Parsed command-line arguments with:
            - version_spec: Version, prefix, commit or 'latest'
            - dest / temp: Installation and download directories
            - system / arch: Target platform (detected when omitted)
            - silent / force / always: Behaviour flags

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        config = load_cli_config(args)
        fetcher = CompilerFetcher(
            config=config,
            silent=args.silent,
            progress_callback=None if args.silent else _print_progress,
        )
        result = fetcher.fetch(
            args.version_spec,
            args.system or detect_system(),
            args.arch or detect_architecture(),
            args.dest,
            args.temp,
            force=args.force,
            always=args.always,
        )
    except AltaKitError as e:
        print_error(str(e))
        return 1

    if not args.silent:
        status = "already installed" if result.was_cached else "installed"
        safe_print(f"✓ altac {result.version} {status}", file=sys.stderr)
    print(result.binary_path)
    return 0
