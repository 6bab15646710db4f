"""
Module execution entry point.

Allows running with: python -m create4_cli
"""

import sys
from create4_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
