"""Entry point for running clozepair as a module.

Usage:
    python -m clozepair IMAGE... [options]
"""
from clozepair.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
