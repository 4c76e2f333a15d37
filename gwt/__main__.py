"""Entry point shim for `python -m gwt`."""

from __future__ import annotations

from gwt.cli import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
