"""Allow ``python -m codechunk.cli`` execution."""

import sys

from codechunk.cli.main import main

sys.exit(main())
