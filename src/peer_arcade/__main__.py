"""Allow ``python -m peer_arcade``."""

import sys

from .cli import main

sys.exit(main())
