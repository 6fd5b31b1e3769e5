"""Buffer rows and flush them in bounded batches."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from pg_export.models import Row

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 200

FlushFn = Callable[[List[Row]], Awaitable[None]]


class RowBatcher:
    """
    Accumulates rows and hands full batches to ``flush``.

    A batch is flushed when it reaches ``max_size`` rows, or when the number
    of rows accepted so far equals ``total_rows``. The buffer is swapped out
    before ``flush`` is awaited; if ``flush`` raises, the batch goes back into
    the buffer and the triggering row is un-accepted so the caller can retry
    the same write.
    """

    def __init__(
        self,
        flush: FlushFn,
        *,
        max_size: int = DEFAULT_BATCH_SIZE,
        total_rows: Optional[int] = None,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self._flush = flush
        self.max_size = max_size
        self.total_rows = total_rows
        self.accepted = 0
        self.flush_count = 0
        self._buffer: List[Row] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._buffer)

    def _is_full(self) -> bool:
        return len(self._buffer) >= self.max_size or (
            self.total_rows is not None and self.accepted == self.total_rows
        )

    async def append(self, row: Row) -> bool:
        """Buffer ``row``; return ``True`` if this call flushed a batch."""
        async with self._lock:
            self._buffer.append(row)
            self.accepted += 1
            if not self._is_full():
                return False
            try:
                await self._flush_buffer()
            except BaseException:
                self._buffer.pop()
                self.accepted -= 1
                raise
            return True

    async def drain(self) -> bool:
        """Flush whatever is left in the buffer. Returns ``False`` if it was empty."""
        async with self._lock:
            if not self._buffer:
                return False
            logger.debug("Draining %d leftover rows", len(self._buffer))
            await self._flush_buffer()
            return True

    async def _flush_buffer(self) -> None:
        batch, self._buffer = self._buffer, []
        try:
            await self._flush(batch)
        except BaseException:
            self._buffer = batch
            raise
        self.flush_count += 1
