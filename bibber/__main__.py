"""Allow ``python -m bibber``."""

import sys

from .cli import main

sys.exit(main())
