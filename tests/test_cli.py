"""
Tests for the dxf2nest command line.
"""

import argparse
import json

import pytest

from nesting_input.cli import main, parse_bool, parse_file_arg


@pytest.mark.parametrize("value, expected", [
    ("part.dxf", ("part.dxf", 1)),
    ("part.dxf:5", ("part.dxf", 5)),
    ("C:/parts/part.dxf:2", ("C:/parts/part.dxf", 2)),
    ("C:/parts/part.dxf", ("C:/parts/part.dxf", 1)),
])
def test_parse_file_arg(value, expected):
    assert parse_file_arg(value) == expected


def test_parse_bool():
    assert parse_bool("TRUE") is True
    assert parse_bool("no") is False
    with pytest.raises(argparse.ArgumentTypeError):
        parse_bool("maybe")


def test_main_writes_job(tmp_path, square_dxf, capsys):
    source = tmp_path / "square.dxf"
    source.write_text(square_dxf, encoding="utf-8")
    output = tmp_path / "job.json"

    code = main([
        "-i", f"{source}:3", "-o", str(output),
        "--height", "2500", "--allow-rotations", "false", "--name", "cli_job",
    ])

    assert code == 0
    job = json.loads(output.read_text(encoding="utf-8"))
    assert job["name"] == "cli_job"
    assert job["strip_height"] == 2500.0
    assert job["items"][0]["dxf"] == "square.dxf"
    assert job["items"][0]["demand"] == 3
    assert job["items"][0]["allowed_orientations"] == [0.0]
    assert "Converted 1 item(s)" in capsys.readouterr().err


def test_main_prints_to_stdout(tmp_path, circle_dxf, capsys):
    source = tmp_path / "circle.dxf"
    source.write_text(circle_dxf, encoding="utf-8")

    assert main(["-i", str(source)]) == 0

    job = json.loads(capsys.readouterr().out)
    assert len(job["items"]) == 1


def test_main_reports_failed_batch(tmp_path, text_only_dxf, capsys):
    source = tmp_path / "text.dxf"
    source.write_text(text_only_dxf, encoding="utf-8")

    assert main(["-i", str(source)]) == 1

    err = capsys.readouterr().err
    assert "ERROR [text.dxf] extraction: No supported entities found" in err
    assert "No items were successfully converted" in err


def test_main_rejects_missing_file(tmp_path, capsys):
    assert main(["-i", str(tmp_path / "missing.dxf")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_main_rejects_invalid_option(tmp_path, square_dxf, capsys):
    source = tmp_path / "square.dxf"
    source.write_text(square_dxf, encoding="utf-8")

    assert main(["-i", str(source), "--tolerance", "0"]) == 1
    assert "tolerance must be positive" in capsys.readouterr().err


def test_main_reads_config_file(tmp_path, square_dxf):
    source = tmp_path / "square.dxf"
    source.write_text(square_dxf, encoding="utf-8")
    config = tmp_path / "settings.json"
    config.write_text(json.dumps({"problem_name": "from_config", "strip_height": 1200}), encoding="utf-8")
    output = tmp_path / "job.json"

    assert main(["-i", str(source), "--config", str(config), "-o", str(output)]) == 0

    job = json.loads(output.read_text(encoding="utf-8"))
    assert job["name"] == "from_config"
    assert job["strip_height"] == 1200.0
