"""Allow ``python -m cargo_depscan``."""

from cargo_depscan.cli import main

main()
