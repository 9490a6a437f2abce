"""Allow ``python -m linkcheck``."""

from linkcheck.cli.main import main

main()
