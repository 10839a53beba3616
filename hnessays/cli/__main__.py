"""Allow ``python -m hnessays.cli`` execution; delegates to the run command."""

from hnessays.cli.run import main

main()
