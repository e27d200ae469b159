import json

import pytest

from fieldmask.cli import main

CONFIG = """
seed: 3
masking:
  - selector:
      jsonpath: "name"
    mask:
      hash: ["Michel", "Marc"]
  - selector:
      jsonpath: "alias"
    mask:
      replacement: "nickname"
"""


def _setup(tmp_path, records: str):
    cfg = tmp_path / "masking.yml"
    cfg.write_text(CONFIG)
    data = tmp_path / "data.jsonl"
    data.write_text(records)
    return str(cfg), str(data)


def test_masks_json_lines(tmp_path, capsys):
    cfg, data = _setup(tmp_path, '{"name": "Alexis", "alias": "a", "nickname": "al"}\n{"name": "Bob"}\n')
    assert main(["--config", cfg, data]) == 0
    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert len(lines) == 2
    assert lines[0]["name"] in ("Michel", "Marc")
    assert lines[0]["alias"] == "al"
    assert lines[1]["name"] in ("Michel", "Marc")


def test_masks_json_array(tmp_path, capsys):
    cfg, data = _setup(tmp_path, '[{"name": "a"}, {"name": "b"}, {"other": 1}]')
    assert main(["--config", cfg, data]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert json.loads(lines[2]) == {"other": 1}


def test_failed_record_is_emitted_without_field(tmp_path, capsys):
    cfg, data = _setup(tmp_path, '{"alias": "secret", "id": 1}\n')
    assert main(["--config", cfg, data]) == 0
    assert json.loads(capsys.readouterr().out) == {"id": 1}


def test_strict_exit_code(tmp_path, capsys):
    cfg, data = _setup(tmp_path, '{"alias": "secret"}\n')
    assert main(["--config", cfg, "--strict", data]) == 1


def test_invalid_config_exit_code(tmp_path, capsys):
    cfg = tmp_path / "bad.yml"
    cfg.write_text("masking:\n  - selector: {jsonpath: x}\n    mask: {regex: '[a-'}\n")
    data = tmp_path / "data.json"
    data.write_text("{}")
    assert main(["--config", str(cfg), str(data)]) == 2
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize(
    "content",
    [
        "seed: 1\nmasking: [name]\n",
        "seed: 1\nmasking:\n  - selector: name\n    mask: {constant: x}\n",
        "seed: abc\nmasking: []\n",
        "seed: 1\nmasking: {name: x}\n",
        "- just\n- a list\n",
        "masking: [\n",
    ],
    ids=["rule-not-mapping", "selector-not-mapping", "seed-not-int", "masking-not-list", "top-level-list", "bad-yaml"],
)
def test_malformed_config_file_exit_code(tmp_path, capsys, monkeypatch, content):
    monkeypatch.delenv("FIELDMASK_SEED", raising=False)
    cfg = tmp_path / "bad.yml"
    cfg.write_text(content)
    data = tmp_path / "data.json"
    data.write_text("{}")
    assert main(["--config", str(cfg), str(data)]) == 2
    assert capsys.readouterr().out == ""


def test_missing_config_file_exit_code(tmp_path, capsys):
    data = tmp_path / "data.json"
    data.write_text("{}")
    assert main(["--config", str(tmp_path / "absent.yml"), str(data)]) == 2
    assert capsys.readouterr().out == ""
