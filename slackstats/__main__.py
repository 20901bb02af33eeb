"""Entry point for ``python -m slackstats``."""

import sys

from slackstats.cli import main

if __name__ == "__main__":
    sys.exit(main())
