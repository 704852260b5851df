from __future__ import annotations

import sys
from pathlib import Path

# Make local `src` importable when running from repo checkout
ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from modgraph.cli import main  # noqa: E402


if __name__ == "__main__":
    raise SystemExit(main())
