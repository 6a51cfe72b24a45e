"""Entry point for the Rough CLI.

This module serves as the main entry point when running the rough package directly.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
