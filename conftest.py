import sys
from pathlib import Path

# Flat layout: top-level packages (fractals, rendering, ...) live next to this file.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
