import json

import pytest

import main


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(main, "setup_logging", lambda: None)


def test_parse_command_prints_estimate_and_calculation(estimate_workbook, capsys):
    path = estimate_workbook(total=1000000)

    assert main.main(["parse", str(path)]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["estimate"]["customer_name"] == "홍길동"
    assert output["calculation"]["final_benefit"] == 1242000


def test_parse_command_options(estimate_workbook, capsys):
    path = estimate_workbook(total=1000000)

    main.main(["parse", str(path), "--supply-cost", "2000000", "--discount-rate", "0", "--extra-discount", "1000"])

    calculation = json.loads(capsys.readouterr().out)["calculation"]
    assert calculation["final_quote"] == 2700000
    assert calculation["final_benefit"] == 2699000


def test_parse_command_missing_file(tmp_path, capsys):
    assert main.main(["parse", str(tmp_path / "none.xlsx")]) == 1
    assert "File not found" in capsys.readouterr().out


def test_parse_command_bad_workbook(tmp_path, capsys):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"garbage")

    assert main.main(["parse", str(path)]) == 1
    assert "Parse failed" in capsys.readouterr().out
