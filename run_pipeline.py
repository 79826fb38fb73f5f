#!/usr/bin/env python3
"""
Entry point for the taxi fare prediction program.

With no arguments this:
 - Loads the trained model from Data/Model.zip
 - Runs one sample prediction and prints it next to the observed fare

See ``taxi_fare.cli`` for the train / evaluate / run actions.
"""

import sys
from pathlib import Path

# Ensure src/ is on sys.path so the package imports from a plain checkout
src_dir = Path(__file__).resolve().parent / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from taxi_fare.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
