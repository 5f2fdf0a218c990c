"""Tests for the command line interface."""

import json

from typer.testing import CliRunner

from scenereel.cli import app, load_script
from scenereel.demo import demo_scene

runner = CliRunner()


def test_load_script_demo():
    assert load_script("demo") is demo_scene


def test_load_script_from_module():
    assert load_script("scenereel.demo:demo_scene") is demo_scene


def test_load_script_from_file(tmp_path):
    script = tmp_path / "intro.py"
    script.write_text("def scene(m):\n    m.title('Hi')\n    m.wait(1.0)\n")
    assert callable(load_script(f"{script}:scene"))


def test_info_lists_segments():
    result = runner.invoke(app, ["info", "demo"])
    assert result.exit_code == 0
    assert "Elements" in result.output


def test_frame_prints_camel_case_json():
    result = runner.invoke(app, ["frame", "demo", "--time", "1.0"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["fps"] == 30
    assert "activeNarration" in payload


def test_themes_lists_builtins():
    result = runner.invoke(app, ["themes"])
    assert result.exit_code == 0
    assert "dark" in result.output
    assert "light" in result.output


def test_bad_reference_exits_with_error():
    result = runner.invoke(app, ["info", "not-a-reference"])
    assert result.exit_code == 1
