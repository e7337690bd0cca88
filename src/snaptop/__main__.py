"""Allow running snaptop with `python -m snaptop`."""

import sys

from snaptop.app import main

sys.exit(main())
