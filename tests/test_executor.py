import pytest

from pg_export.executor import PoolExecutor, StatementExecutor, to_psycopg_query


class TestToPsycopgQuery:
    def test_no_params_untouched(self):
        text = "insert into \"s\".\"t%\" values ('srid=4326;point(5 5)')"
        assert to_psycopg_query(text, []) == (text, None)

    def test_placeholders_rewritten(self):
        query, args = to_psycopg_query(
            "insert into \"s\".\"t\" values ('srid=4326;point(1 2)', $1, $2), ('srid=4326;point(3 4)', $3, $4)",
            ["a", 1, "b", 2],
        )
        assert query == (
            "insert into \"s\".\"t\" values ('srid=4326;point(1 2)', %s, %s), "
            "('srid=4326;point(3 4)', %s, %s)"
        )
        assert args == ["a", 1, "b", 2]

    def test_params_follow_placeholder_order(self):
        query, args = to_psycopg_query("select $2, $1, $2", ["x", "y"])
        assert query == "select %s, %s, %s"
        assert args == ["y", "x", "y"]

    def test_percent_and_dollar_inside_quotes(self):
        query, args = to_psycopg_query('insert into "s"."t$1%" values ($1)', [7])
        assert query == 'insert into "s"."t$1%%" values (%s)'
        assert args == [7]

    def test_missing_param(self):
        with pytest.raises(ValueError):
            to_psycopg_query("select $3", [1])


class FakeConnection:
    def __init__(self, log):
        self.log = log

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def cursor(self):
        return FakeCursor(self.log)


class FakeCursor(FakeConnection):
    rowcount = 1

    async def execute(self, query, args):
        self.log.append((query, args))


class FakePool:
    name = "fake"

    def __init__(self):
        self.log = []
        self.closed = False

    def connection(self, timeout=None):
        return FakeConnection(self.log)

    async def close(self):
        self.closed = True


class TestPoolExecutor:
    async def test_execute_and_release(self):
        pool = FakePool()
        executor = PoolExecutor(pool)
        assert isinstance(executor, StatementExecutor)

        assert await executor.execute('insert into "s"."t" values ($1)', [5]) == 1
        await executor.release()

        assert pool.log == [('insert into "s"."t" values (%s)', [5])]
        assert pool.closed
