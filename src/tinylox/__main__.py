"""Allow ``python -m tinylox``."""

from tinylox.cli import main

raise SystemExit(main())
