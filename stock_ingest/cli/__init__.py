"""Command line interface (``python -m stock_ingest.cli``)."""

from __future__ import annotations


def main(argv: list[str] | None = None) -> int:
    # Imported lazily so running the package as __main__ does not import it twice
    from .__main__ import main as _main

    return _main(argv)


__all__ = ["main"]
