"""Allow ``python -m budgetgrid``."""

import sys

from .cli import main


sys.exit(main())
