"""
Shared utilities for CLI commands.

Provides console output helpers used by the fetch and check commands.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from altakit.config.settings import AltaKitConfig, load_config

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def load_cli_config(args) -> AltaKitConfig:
    """
    Load configuration named by ``--config`` or the default file.

    Args:
        args: Parsed arguments with optional config attribute

    Raises:
        ConfigError: If the configuration is invalid
    """
    config_file: Optional[Path] = getattr(args, "config", None)
    config = load_config(config_file)
    logger.debug(f"Using configuration: {config}")
    return config


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for Windows console.

    Falls back to ASCII-safe characters if Unicode symbols can't be encoded.
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = (
            message.replace("✓", "[OK]")
            .replace("✗", "[FAIL]")
            .replace("⬇", "[DOWNLOAD]")
        )
        print(safe_message, file=file)
