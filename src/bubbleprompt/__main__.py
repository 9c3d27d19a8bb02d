"""Allow ``python -m bubbleprompt``."""

from bubbleprompt.cli import main

raise SystemExit(main())
