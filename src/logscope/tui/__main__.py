"""``python -m logscope.tui``: launch the Textual viewer."""

from __future__ import annotations

import sys

from ..cli import main

if __name__ == "__main__":
    sys.exit(main())
