"""Run act-testing-mcp from a checkout without installing it.

    python main.py check
    python main.py serve

Puts `src/` on `sys.path` so `cli`, `core` and `adapters` import the same way
they do from the installed `act-testing-mcp` console script.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    src = Path(__file__).resolve().parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
