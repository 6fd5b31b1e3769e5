import pytest

from pg_export.config import load_config
from pg_export.models import Role

ENV_VARS = [
    "PG_EXPORT_DSN", "PG_EXPORT_SCHEMA", "PG_EXPORT_TABLE", "PG_EXPORT_CREATE_TABLE",
    "PG_EXPORT_BATCH_SIZE", "PG_EXPORT_SRID", "PG_EXPORT_LATITUDE", "PG_EXPORT_LONGITUDE",
    "PG_EXPORT_TIME", "PG_EXPORT_POOL_MIN", "PG_EXPORT_POOL_MAX", "PG_EXPORT_CONN_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    def test_defaults(self):
        config = load_config(table="points")
        assert config.table == "points"
        assert config.schema == "public"
        assert config.create_table is False
        assert config.roles == {}
        assert config.batch_size == 200
        assert config.srid == 4326

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("PG_EXPORT_TABLE", "obs")
        monkeypatch.setenv("PG_EXPORT_SCHEMA", "geo")
        monkeypatch.setenv("PG_EXPORT_CREATE_TABLE", "true")
        monkeypatch.setenv("PG_EXPORT_BATCH_SIZE", "50")
        monkeypatch.setenv("PG_EXPORT_LATITUDE", "lat")
        monkeypatch.setenv("PG_EXPORT_LONGITUDE", "lon")
        monkeypatch.setenv("PG_EXPORT_TIME", "ts")

        config = load_config()
        assert (config.table, config.schema) == ("obs", "geo")
        assert config.create_table is True
        assert config.batch_size == 50
        assert config.roles == {Role.LATITUDE: "lat", Role.LONGITUDE: "lon", Role.TIME: "ts"}

    @pytest.mark.parametrize("raw", ["0", "-3", "many"])
    def test_invalid_batch_size_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("PG_EXPORT_BATCH_SIZE", raw)
        assert load_config(table="t").batch_size == 200

    def test_overrides_win_over_env(self, monkeypatch):
        monkeypatch.setenv("PG_EXPORT_SRID", "3857")
        assert load_config(table="t", srid=4326, schema=None).srid == 4326


    @pytest.mark.parametrize("raw", ["soon", "0", "-1"])
    def test_invalid_conn_timeout_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("PG_EXPORT_CONN_TIMEOUT", raw)
        assert load_config(table="t").conn_timeout == 30.0

    def test_conn_timeout_from_env(self, monkeypatch):
        monkeypatch.setenv("PG_EXPORT_CONN_TIMEOUT", "2.5")
        assert load_config(table="t").conn_timeout == 2.5
