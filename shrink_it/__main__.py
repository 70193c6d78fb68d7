"""Allow running shrink_it with ``python -m shrink_it``."""

import sys

from shrink_it.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
