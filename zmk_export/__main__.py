"""Allow running as ``python -m zmk_export``."""

import sys

from zmk_export.cli import main


if __name__ == "__main__":
    sys.exit(main())
