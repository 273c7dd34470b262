"""Run the database bootstrap on its own, without starting the web server."""

from __future__ import annotations

import sys

from showcase.bootstrap import bootstrap_database
from showcase.logging_utils import configure_logging


def main() -> int:
    configure_logging()
    result = bootstrap_database()
    if not result.ok:
        print(f"Bootstrap failed at step '{result.step}': {result.error}")
        return 1
    print(f"Database ready. Existing users: {result.existing_users}. Seeded: {result.seeded}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
