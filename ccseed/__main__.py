"""Allow ``python -m ccseed``."""

from __future__ import annotations

from ccseed.cli.main import main

if __name__ == "__main__":
    main()
