#!/usr/bin/env python3
"""
Entry point for the Immich duplicate cleaner.
"""

import sys

from dupecleaner.cli import main


if __name__ == "__main__":
    sys.exit(main())
