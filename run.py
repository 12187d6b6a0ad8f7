#!/usr/bin/env python3
"""
adapt_de Runner
===============

Run a configuration document from a source checkout without installing.

Examples:
    python run.py --config configs/jde.json
    python run.py --config configs/jde.json --objective mypkg.problems:sphere --runs 5
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from adapt_de.cli import main


if __name__ == "__main__":
    sys.exit(main())
