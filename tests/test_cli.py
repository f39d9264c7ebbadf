# tests/test_cli.py

import json
import math

import pytest

from cbcce.cli import main
from cbcce.tables import DAY_MILLISECONDS, YEAR_MONTH


def _out(capsys):
    return capsys.readouterr().out.strip()


def test_decompose(capsys):
    assert main(["decompose", "90000000", "--params", "day-milliseconds"]) == 0
    assert _out(capsys).splitlines() == ["day_number = 1", "milliseconds_in_day = 3600000"]


def test_decompose_negative_quantity(capsys):
    assert main(["decompose", "-3600000", "--params", "day-milliseconds"]) == 0
    assert _out(capsys).splitlines() == ["day_number = -1", "milliseconds_in_day = 82800000"]


def test_compose(capsys):
    assert main(["compose", "day_number=1", "milliseconds_in_day=3600000", "--params", "day-milliseconds"]) == 0
    assert _out(capsys) == "90000000"


def test_compose_defaults_missing_fields_to_init(capsys):
    assert main(["compose", "year=2000"]) == 0
    assert _out(capsys) == str(10947 * 86400000)


def test_compose_rejects_unknown_field():
    with pytest.raises(SystemExit):
        main(["compose", "weekday=3"])


def test_compose_rejects_bad_value():
    with pytest.raises(SystemExit):
        main(["compose", "year=two"])


def test_unknown_params():
    with pytest.raises(SystemExit):
        main(["decompose", "0", "--params", "gregorian"])


def test_params_file(tmp_path, capsys):
    path = tmp_path / "days.json"
    data = DAY_MILLISECONDS.to_dict()
    data["coeff"][0]["ceiling"] = math.inf  # json writes Infinity
    path.write_text(json.dumps(data), encoding="utf-8")
    assert main(["decompose", "90000000", "--params-file", str(path)]) == 0
    assert _out(capsys).splitlines()[0] == "day_number = 1"


def test_bad_params_file(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"coeff": [{"cyclelength": 1, "target": "x"}], "canvas": []}), encoding="utf-8")
    with pytest.raises(SystemExit):
        main(["decompose", "0", "--params-file", str(path)])


def test_missing_params_file(tmp_path):
    with pytest.raises(SystemExit, match="Cannot read parameter file"):
        main(["decompose", "0", "--params-file", str(tmp_path / "missing.json")])


def test_params_file_not_json(tmp_path):
    path = tmp_path / "notes.json"
    path.write_text("year, month", encoding="utf-8")
    with pytest.raises(SystemExit, match="Cannot read parameter file"):
        main(["decompose", "0", "--params-file", str(path)])


def test_params_file_bad_ceiling(tmp_path):
    path = tmp_path / "lots.json"
    data = YEAR_MONTH.to_dict()
    data["coeff"][0]["ceiling"] = "lots"
    path.write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(SystemExit, match="ceiling"):
        main(["decompose", "0", "--params-file", str(path)])


def test_day_shortcut(capsys):
    assert main(["1970-01-01"]) == 0
    assert _out(capsys) == "12 1m 1970"


def test_day_with_offset_and_time(capsys):
    assert main(["day", "2000-01-01T23:30", "--offset", "60", "--time"]) == 0
    assert _out(capsys) == "12 1m 2000 00:30:00"


def test_day_honours_offset_in_date(capsys):
    assert main(["day", "1970-01-01T00:30+01:00", "--time"]) == 0
    assert _out(capsys) == "11 1m 1970 23:30:00"
    assert main(["1970-01-01T00:30+01:00", "--offset", "60", "--time"]) == 0
    assert _out(capsys) == "12 1m 1970 00:30:00"


def test_day_bad_date():
    with pytest.raises(SystemExit):
        main(["day", "2000-13-45"])


def test_gregorian(capsys):
    assert main(["gregorian", "2000", "1", "1"]) == 0
    assert _out(capsys) == "1999-12-22"


def test_gregorian_invalid_date():
    with pytest.raises(SystemExit):
        main(["gregorian", "2001", "12", "31"])


def test_params_listing(capsys):
    assert main(["params"]) == 0
    assert _out(capsys).splitlines() == ["day-milliseconds", "milesian", "year-month"]


def test_params_info_and_json(capsys):
    assert main(["params", "milesian"]) == 0
    assert "epoch: -62168083200000" in _out(capsys)
    assert main(["params", "year-month", "--json"]) == 0
    assert json.loads(_out(capsys))["coeff"][0]["cyclelength"] == 12


def test_diag_year_lengths(capsys):
    assert main(["diag", "year-lengths", "--start-year", "1996", "--end-year", "2004", "--only-long"]) == 0
    out = _out(capsys)
    assert "  1999   366" in out
    assert "  2003   366" in out
    assert "  2000 " not in out
    assert "9 years, 2 long, 0 mismatches" in out


def test_diag_round_trip(capsys):
    assert main(["diag", "round-trip", "--N", "200"]) == 0
    assert "milesian" in _out(capsys)
