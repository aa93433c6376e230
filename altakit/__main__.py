"""
Entry point for running altakit as a module.

Usage: python -m altakit [command] [options]
"""

from altakit.cli.parser import main

if __name__ == "__main__":
    main()
