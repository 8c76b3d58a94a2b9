"""Allow ``python -m suggestor.cli`` execution (runs the suggest tool)."""

from suggestor.cli.suggest import main

main()
