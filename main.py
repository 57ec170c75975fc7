"""
Chore Planner — Entry Point.

Single entry point: `python main.py <command>` runs the CLI.
"""

import logging
import sys

from chore_planner.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from chore_planner.cli import main

if __name__ == "__main__":
    sys.exit(main())
