"""Console entrypoint for the modalkit application.

This module delegates to :mod:`modalkit.cli` so that running
``python -m modalkit`` or the installed ``modalkit`` console script
executes the same application code.
"""

from __future__ import annotations

from modalkit.cli import main as cli_main


def main() -> None:
    """Application entrypoint (delegates to :func:`modalkit.cli.main`)."""
    cli_main()


if __name__ == "__main__":
    main()
