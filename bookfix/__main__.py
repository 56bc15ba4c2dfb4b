"""Module entrypoint for running bookfix as ``python -m bookfix``."""

from __future__ import annotations

from bookfix.cli import main


if __name__ == "__main__":
    main()
