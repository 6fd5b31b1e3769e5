"""
Statement executors - the only place the exporter touches the database.

The exporter renders statements with PostgreSQL-native ``$n`` placeholders;
:class:`PoolExecutor` rewrites them into psycopg's ``%s`` style and runs them
on a pooled async connection.
"""
from __future__ import annotations

import logging
import re
from time import perf_counter
from typing import Any, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import psycopg_pool

logger = logging.getLogger(__name__)

# Quoted literals/identifiers are copied through untouched (bar % escaping).
_TOKEN_RE = re.compile(r"""'(?:[^']|'')*'|"(?:[^"]|"")*"|\$(\d+)|%""")


@runtime_checkable
class StatementExecutor(Protocol):
    """
    Minimal protocol for whatever runs SQL on behalf of the exporter.

    ``execute`` receives statement text using ``$n`` placeholders and the
    parameter list; ``release`` frees the underlying connection(s).
    """

    async def execute(self, text: str, params: Sequence[Any]) -> Any: ...

    async def release(self) -> None: ...


def to_psycopg_query(
    text: str, params: Optional[Sequence[Any]]
) -> Tuple[str, Optional[List[Any]]]:
    """
    Convert ``$n`` placeholders to ``%s`` and order ``params`` to match.

    Without parameters the text is returned unchanged, since psycopg does not
    interpret ``%`` when no parameters are passed.
    """
    if not params:
        return text, None

    order: List[int] = []

    def _sub(m: re.Match[str]) -> str:
        token = m.group(0)
        if m.group(1) is not None:
            order.append(int(m.group(1)))
            return "%s"
        if token == "%":
            return "%%"
        return token.replace("%", "%%")

    query = _TOKEN_RE.sub(_sub, text)
    for n in order:
        if not 1 <= n <= len(params):
            raise ValueError(f"Placeholder ${n} has no matching parameter")
    return query, [params[n - 1] for n in order]


class PoolExecutor:
    """Executes statements on a :class:`psycopg_pool.AsyncConnectionPool`."""

    def __init__(self, pool: psycopg_pool.AsyncConnectionPool, *, conn_timeout: float | None = None) -> None:
        self.pool = pool
        self.conn_timeout = conn_timeout

    @classmethod
    async def connect(
        cls,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 4,
        conn_timeout: float = 30.0,
    ) -> "PoolExecutor":
        pool = psycopg_pool.AsyncConnectionPool(
            dsn,
            min_size=min_size,
            max_size=max(min_size, max_size),
            timeout=conn_timeout,
            open=False,
        )
        await pool.open(wait=True, timeout=conn_timeout)
        logger.info("Opened connection pool (min=%d, max=%d)", min_size, max_size)
        return cls(pool, conn_timeout=conn_timeout)

    async def execute(self, text: str, params: Sequence[Any] = ()) -> int:
        query, args = to_psycopg_query(text, params)
        start = perf_counter()
        async with self.pool.connection(timeout=self.conn_timeout) as conn:
            async with conn.cursor() as cur:
                await cur.execute(query, args)
                rowcount = cur.rowcount
        logger.debug(
            "Executed statement with %d params in %.3f s",
            len(args or ()),
            perf_counter() - start,
        )
        return rowcount

    async def release(self) -> None:
        await self.pool.close()
        logger.info("Connection pool closed")

    def __repr__(self) -> str:
        return f"<PoolExecutor pool={self.pool.name!r}>"
