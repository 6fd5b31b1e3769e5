import pytest

from pg_export.csv_source import describe_fields, iter_rows, load_csv
from pg_export.models import FieldDescriptor


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "obs.csv"
    path.write_text(
        "station,lat,lon,ts\n"
        "alpha,4,3,1995-12-17T03:24:00\n"
        "\n"
        "beta,,1.5,1995-12-18T00:00:00\n",
        encoding="utf-8",
    )
    return path


class TestCsvSource:
    def test_load_csv(self, csv_file):
        fields, total = load_csv(csv_file, {"lat": "float", "lon": "float"})
        assert fields == [
            FieldDescriptor("station", "char"),
            FieldDescriptor("lat", "float"),
            FieldDescriptor("lon", "float"),
            FieldDescriptor("ts", "char"),
        ]
        assert total == 2

    def test_rows_are_typed(self, csv_file):
        fields, _ = load_csv(csv_file, {"lat": "float", "lon": "float"})
        assert list(iter_rows(csv_file, fields)) == [
            ["alpha", 4.0, 3.0, "1995-12-17T03:24:00"],
            ["beta", None, 1.5, "1995-12-18T00:00:00"],
        ]

    def test_unknown_type_column(self):
        with pytest.raises(ValueError):
            describe_fields(["a"], {"b": "float"})

    def test_ragged_row(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("a,b\n1\n", encoding="utf-8")
        fields, _ = load_csv(path)
        with pytest.raises(ValueError):
            list(iter_rows(path, fields))
