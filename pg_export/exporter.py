"""
Exporter - lifecycle controller that turns a row stream into a PostgreSQL
table.

``init`` resolves the role map, builds (and optionally runs) the CREATE TABLE
statement; ``write`` buffers rows and flushes full batches as multi-row
INSERTs; ``finish_writing`` flushes leftovers and releases the executor.
"""
from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Iterable, List, Mapping, Optional, Union

from pg_export.config import ExportConfig
from pg_export.core.batching import DEFAULT_BATCH_SIZE, RowBatcher
from pg_export.core.insert import render_insert, validate_row
from pg_export.core.roles import resolve_roles
from pg_export.core.schema import DEFAULT_SRID, build_create_table, quote_ident
from pg_export.errors import AlreadyFinished, AlreadyInitialized, NotInitialized
from pg_export.executor import PoolExecutor, StatementExecutor
from pg_export.models import ExporterState, FieldDescriptor, ResolvedRoles, RoleMap, Row
from pg_export.telemetry.metrics import Metrics
from pg_export.type_map import make_field_type_lookup

logger = logging.getLogger(__name__)


class Exporter:
    def __init__(
        self,
        executor: StatementExecutor,
        table: str,
        *,
        schema: str = "public",
        create_table: bool = False,
        roles: Optional[RoleMap] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        srid: int = DEFAULT_SRID,
        type_map: Optional[Mapping[str, str]] = None,
        metrics: Optional[Metrics] = None,
    ) -> None:
        quote_ident(schema)
        quote_ident(table)
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")

        self.executor = executor
        self.schema = schema
        self.table = table
        self.create_table = create_table
        self.roles = dict(roles or {})
        self.batch_size = batch_size
        self.srid = srid
        self.field_type_of = make_field_type_lookup(type_map)
        self.metrics = metrics or Metrics()

        self.state = ExporterState.CREATED
        self.resolved_roles: Optional[ResolvedRoles] = None
        self.ddl: Optional[str] = None
        self._batcher: Optional[RowBatcher] = None

    @classmethod
    async def from_config(cls, config: ExportConfig, metrics: Optional[Metrics] = None) -> "Exporter":
        """Open a :class:`PoolExecutor` for ``config.dsn`` and wrap it."""
        executor = await PoolExecutor.connect(
            config.dsn,
            min_size=config.pool_min,
            max_size=config.pool_max,
            conn_timeout=config.conn_timeout,
        )
        return cls(
            executor,
            config.table,
            schema=config.schema,
            create_table=config.create_table,
            roles=config.roles,
            batch_size=config.batch_size,
            srid=config.srid,
            type_map=config.type_map,
            metrics=metrics,
        )

    # ---------------------------------------------- #
    # Lifecycle                                       #
    # ---------------------------------------------- #
    async def init(
        self,
        fields: Iterable[Union[FieldDescriptor, Mapping[str, Any]]],
        total_rows: Optional[int] = None,
    ) -> None:
        if self.state is not ExporterState.CREATED:
            raise AlreadyInitialized()

        descriptors = [FieldDescriptor.coerce(f) for f in fields]
        resolved = resolve_roles(descriptors, self.roles)
        ddl = build_create_table(
            self.schema, self.table, resolved, self.field_type_of, self.srid
        )

        if self.create_table:
            start = perf_counter()
            logger.debug("DDL: %s", ddl)
            try:
                await self.executor.execute(ddl, [])
            except Exception as exc:
                self.metrics.record_error(exc)
                logger.error("Creating table %s.%s failed: %s", self.schema, self.table, exc)
                raise
            self.metrics.inc("statements_executed")
            self.metrics.observe_stage("ddl", perf_counter() - start)
            logger.info("Created table %s.%s", self.schema, self.table)

        self.resolved_roles = resolved
        self.ddl = ddl
        self._batcher = RowBatcher(
            self._write_batch, max_size=self.batch_size, total_rows=total_rows
        )
        self.state = ExporterState.INITIALIZED
        logger.info(
            "Exporter initialized for %s.%s (%d fields, total_rows=%s, batch_size=%d)",
            self.schema, self.table, len(descriptors), total_rows, self.batch_size,
        )

    async def write(self, row: Row) -> bool:
        """Buffer one row. Returns ``True`` when this call flushed a batch."""
        if self.state is ExporterState.CREATED:
            raise NotInitialized()
        if self.state is ExporterState.FINISHED:
            raise AlreadyFinished()
        assert self._batcher is not None and self.resolved_roles is not None
        validate_row(row, self.resolved_roles, self.srid)
        return await self._batcher.append(row)

    async def finish_writing(self) -> None:
        if self.state is ExporterState.FINISHED:
            logger.debug("finish_writing called on a finished exporter; ignoring")
            return

        if self._batcher is not None and len(self._batcher):
            logger.warning(
                "Flushing %d leftover rows (%d accepted, %s declared)",
                len(self._batcher), self._batcher.accepted, self._batcher.total_rows,
            )
            await self._batcher.drain()

        await self.executor.release()
        self.state = ExporterState.FINISHED
        txt, _ = self.metrics.summary()
        logger.info("\n%s", txt)

    async def __aenter__(self) -> "Exporter":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None and self.state is not ExporterState.FINISHED:
            # Leftover rows are not flushed after a failure.
            await self.executor.release()
            self.state = ExporterState.FINISHED
            return
        try:
            await self.finish_writing()
        finally:
            if self.state is not ExporterState.FINISHED:
                # The final drain failed; leaving the context still frees the pool.
                await self.executor.release()
                self.state = ExporterState.FINISHED

    # ---------------------------------------------- #
    # Batch flush                                     #
    # ---------------------------------------------- #
    async def _write_batch(self, rows: List[Row]) -> None:
        assert self.resolved_roles is not None
        text, params = render_insert(
            self.schema, self.table, rows, self.resolved_roles, self.srid
        )
        logger.debug("Flushing %d rows to %s.%s", len(rows), self.schema, self.table)
        start = perf_counter()
        try:
            await self.executor.execute(text, params)
        except Exception as exc:
            self.metrics.record_error(exc)
            logger.error("Insert of %d rows into %s.%s failed: %s",
                         len(rows), self.schema, self.table, exc)
            raise
        duration = perf_counter() - start
        self.metrics.inc("statements_executed")
        self.metrics.observe_flush(len(rows), duration)
        logger.info("Flushed %d rows in %.3f s", len(rows), duration)

    @property
    def flush_count(self) -> int:
        return self._batcher.flush_count if self._batcher else 0

    def __repr__(self) -> str:
        return f"<Exporter {self.schema}.{self.table} state={self.state.value}>"
