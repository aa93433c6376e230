"""
Entry point for running the altakit CLI as a module.

Usage: python -m altakit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
