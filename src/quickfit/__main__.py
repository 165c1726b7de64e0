"""
Entry point for running quickfit as a module.

This allows running the CLI with: python -m quickfit
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
