"""Allow ``python -m npm_footprint``."""
import sys

from npm_footprint.cli import main

sys.exit(main())
