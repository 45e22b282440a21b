"""Entry point for ``python -m rollcall``."""

from rollcall.cli import main

main()
