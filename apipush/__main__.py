"""Allow running as ``python -m apipush``."""

import sys

from .main import main

sys.exit(main())
