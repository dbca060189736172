"""Allow ``python -m semsearch.cli`` execution."""

from semsearch.cli.search import main

main()
