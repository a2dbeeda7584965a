"""Allows ``python -m quasitree``."""

import sys

from quasitree.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
