"""Allow ``python -m rosterdesk``."""

from rosterdesk.cli import main

main()
