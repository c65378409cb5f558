"""Allow running as ``python -m portstat``."""

import sys

from portstat.cli import main

sys.exit(main())
