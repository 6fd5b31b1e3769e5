from __future__ import annotations

import asyncio

from pg_export.cli import main


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
