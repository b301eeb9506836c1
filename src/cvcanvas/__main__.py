"""Entry point for ``python -m cvcanvas``."""

from cvcanvas.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
