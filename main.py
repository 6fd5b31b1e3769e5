"""Entry point for invoking the exporter via the CLI."""

from __future__ import annotations

import asyncio

from pg_export.cli import main as cli_main

if __name__ == "__main__":
    asyncio.run(cli_main())
