#!/usr/bin/env python3
"""ZenFocus console entry point.

Run with:
    python main.py study --minutes 25
    python -m zenfocus
"""

import sys

from zenfocus.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
