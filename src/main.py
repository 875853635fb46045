"""`python -m main` from inside `src/`: same commands as `act-testing-mcp`."""

from __future__ import annotations

import sys

# Report and doctor output contain emoji; cp1252 consoles cannot encode them.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
