"""
Module execution entry point.

Allows running with: python -m allowlist_cli
"""

import sys
from allowlist_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
