#!/usr/bin/env python3
"""
Test the pngatlas command line front end.
"""

import json
import logging
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add the project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from create_test_files import create_test_scenario, write_sprite
from spriteatlas.cli import build_parser, main


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_pack_and_extract(tmp_path):
    inputs = create_test_scenario(tmp_path / "in", [(16, 16), (8, 24), (30, 6)], trimmed=True)
    out = tmp_path / "atlas.png"
    xml = tmp_path / "atlas.xml"
    js = tmp_path / "atlas.json"

    code = main(["pack", "-t", "-p", "1", "-x", str(xml), "-j", str(js), str(out)]
                + [str(p) for p in inputs])
    assert code == 0
    assert out.exists() and xml.exists() and js.exists()
    assert len(json.loads(js.read_text())["frames"]) == 3

    code = main(["extract", "-o", str(tmp_path / "out"), str(out)])
    assert code == 0
    assert sorted(p.name for p in (tmp_path / "out").iterdir()) == sorted(p.name for p in inputs)


def test_fixed_size_names_every_output(tmp_path):
    inputs = [write_sprite(tmp_path / "in", f"s{i}", 10, 10) for i in range(3)]
    out = tmp_path / "page.png"
    js = tmp_path / "page.json"

    assert main(["pack", "-m", "10", "-j", str(js), str(out)] + [str(p) for p in inputs]) == 0
    for j in (1, 2, 3):
        assert (tmp_path / f"page{j:05d}.png").exists()
        data = json.loads((tmp_path / f"page{j:05d}.json").read_text())
        assert data["meta"]["image"] == str(tmp_path / f"page{j:05d}.png")


def test_padding_not_smaller_than_size_fails(tmp_path):
    src = write_sprite(tmp_path, "a", 2, 2)
    assert main(["pack", "-p", "8", "-m", "8", str(tmp_path / "o.png"), str(src)]) == 1


def test_oversized_sprite_fails(tmp_path):
    src = write_sprite(tmp_path, "a", 9, 2)
    assert main(["pack", "-m", "8", str(tmp_path / "o.png"), str(src)]) == 1


def test_missing_input_fails(tmp_path):
    assert main(["pack", str(tmp_path / "o.png"), str(tmp_path / "missing.png")]) == 1


def test_usage_errors_exit_with_usage():
    with pytest.raises(SystemExit) as exc:
        main(["pack", "only-output.png"])
    assert exc.value.code == 2
    with pytest.raises(SystemExit):
        main(["pack", "-p", "-1", "o.png", "i.png"])


def test_no_command_prints_help():
    assert main([]) == 1


def test_parser_defaults():
    args = build_parser().parse_args(["pack", "o.png", "a.png", "b.png"])
    assert args.trim is False
    assert args.padding == 0
    assert args.size is None
    assert args.inputs == ["a.png", "b.png"]


def test_pixel_cap_overrun_fails_cleanly(tmp_path, monkeypatch):
    src = write_sprite(tmp_path, "big", 40, 40)
    out = tmp_path / "atlas.png"
    assert main(["pack", str(out), str(src)]) == 0
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    assert main(["extract", "-o", str(tmp_path / "out"), str(out)]) == 1
