"""Allow ``python -m quillsmith``."""

from __future__ import annotations

from quillsmith.ui.cli import main


if __name__ == "__main__":
    main()
