"""
Check command implementation.

Verifies that the installed compiler satisfies a version or commit.
"""

import logging

from altakit.cli.utils import load_cli_config, print_error, safe_print
from altakit.core.exceptions import AltaKitError
from altakit.toolchain.checker import CompilerProbe, VersionChecker

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the check command.

    Args:
        args: Parsed command-line arguments with:
            - requested_version: Optional [v]N.N.N
            - commit: Optional 7-character commit hash
            - exact: Require an identical version

    Returns:
        0 if the installed compiler satisfies the request, 1 otherwise
    """
    try:
        config = load_cli_config(args)
        checker = VersionChecker(
            probe=CompilerProbe(config.compiler_executable, timeout=config.timeout)
        )
        result = checker.inspect(
            version=args.requested_version, commit=args.commit, exact=args.exact
        )
    except AltaKitError as e:
        print_error(str(e))
        return 1

    if result.satisfied:
        detail = f" ({result.installed})" if result.installed else ""
        safe_print(f"✓ Installed compiler satisfies the request{detail}")
        return 0

    if result.installed is None:
        safe_print("✗ No installed compiler found")
    else:
        safe_print(f"✗ Installed compiler {result.installed} does not satisfy the request")
    return 1
