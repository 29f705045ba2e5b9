#!/usr/bin/env python3
"""
SubEdit Entry Point Script

This script initializes the CLI handler and runs the requested command.
"""

import sys
from subedit.cli import CLIHandler

def main() -> None:
    # Basic check for minimal Python version if necessary
    if sys.version_info < (3, 8):
        sys.stderr.write("SubEdit requires Python 3.8 or later.\n")
        sys.exit(1)

    cli = CLIHandler()
    cli.run()

if __name__ == "__main__":
    main()
