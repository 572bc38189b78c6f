from __future__ import annotations

import importlib.util
import json
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def script():
    path = REPO_ROOT / "scripts" / "extract_provenance.py"
    spec = importlib.util.spec_from_file_location("extract_provenance_script", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_script_prints_summary_without_raw_json(script, tmp_path, capsys, png, fox_graph):
    target = tmp_path / "render.png"
    target.write_bytes(png.build(png.text("prompt", json.dumps(fox_graph))))

    assert script.main([str(target)]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["positivePrompt"] == "a red fox"
    assert "rawJson" not in payload


def test_script_raw_flag_keeps_graph(script, tmp_path, capsys, png, fox_graph):
    target = tmp_path / "render.png"
    target.write_bytes(png.build(png.text("prompt", json.dumps(fox_graph))))

    assert script.main([str(target), "--raw"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert json.loads(payload["rawJson"]) == fox_graph


def test_script_reports_error_codes(script, tmp_path, capsys):
    target = tmp_path / "broken.png"
    target.write_bytes(b"nope")

    assert script.main([str(target)]) == 1
    assert "[INVALID_CONTAINER]" in capsys.readouterr().out


def test_script_requires_a_path(script, capsys):
    with pytest.raises(SystemExit) as excinfo:
        script.main([])
    assert excinfo.value.code == 2
    assert "path" in capsys.readouterr().err


def test_script_missing_file(script, tmp_path, capsys):
    assert script.main([str(tmp_path / "absent.png")]) == 1
    assert "file not found" in capsys.readouterr().out
