import json
from pathlib import Path

import pytest

from bundleview.cli import main

from bundle_helper import table_bytes, texture, write_bundle


def _bundles(tmp_path: Path) -> Path:
    d = tmp_path / "bundles"
    write_bundle(
        d,
        "chars.bundle",
        {
            "CAB-chars": table_bytes(
                {5: texture("hero", 32, 32), 6: texture("villain")},
                containers=[("chars/hero.png", 5), ("chars/villain.png", 6)],
            )
        },
    )
    return d


def test_scan_prints_summary(tmp_path: Path, capsys):
    d = _bundles(tmp_path)
    assert main(["-r", "silent", "scan", str(d)]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["containers"] == 2
    assert summary["duplicate_containers"] == []
    assert summary["archives"] == [
        {"id": 0, "path": "chars.bundle", "virtual_files": ["CAB-chars"]}
    ]
    assert summary["tables"] == [{"id": 0, "virtual_path": "CAB-chars", "archive": 0}]


def test_find_container(tmp_path: Path, capsys):
    d = _bundles(tmp_path)
    assert main(["-r", "silent", "find", "chars/hero.png", str(d)]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["container"] == "chars/hero.png"
    assert info["archive"] == "chars.bundle"
    assert info["path_id"] == 5
    assert info["fields"]["m_Width"] == 32


def test_find_missing_container(tmp_path: Path, capsys):
    d = _bundles(tmp_path)
    assert main(["-r", "silent", "find", "chars/nobody.png", str(d)]) == 1
    assert capsys.readouterr().out == ""


def test_name_lookup(tmp_path: Path, capsys):
    d = _bundles(tmp_path)
    assert main(["-r", "silent", "name", "CAB-chars", "6", str(d)]) == 0
    assert capsys.readouterr().out.strip() == "chars/villain.png"
    assert main(["-r", "silent", "name", "CAB-chars", "7", str(d)]) == 1


def test_ls_lists_sorted(tmp_path: Path, capsys):
    d = _bundles(tmp_path)
    assert main(["-r", "silent", "ls", str(d)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "chars/hero.png",
        "chars/villain.png",
    ]


def test_json_reporter_emits_summaries(tmp_path: Path, capsys):
    d = _bundles(tmp_path)
    assert main(["-r", "json", "find", "chars/hero.png", str(d)]) == 0
    lines = capsys.readouterr().out.splitlines()
    events = [json.loads(line) for line in lines if line.startswith("{\"")]
    summaries = {e["summary_type"]: e for e in events if e["event"] == "summary"}
    assert summaries["ingest"]["archives"] == "1"
    assert summaries["lookup"]["found"] == "1"


def test_config_supplies_directories(tmp_path: Path, capsys):
    _bundles(tmp_path)
    cfg = tmp_path / "index.json"
    cfg.write_text(json.dumps({"directories": ["bundles"], "reporter": "silent"}))
    assert main(["--config", str(cfg), "ls"]) == 0
    assert len(capsys.readouterr().out.splitlines()) == 2


def test_corrupt_archive_exit_code(tmp_path: Path, capsys):
    d = tmp_path / "bad"
    d.mkdir()
    (d / "junk.bundle").write_bytes(b"definitely not an archive")
    assert main(["-r", "plain", "ls", str(d)]) == 2
    assert "E_ARCHIVE_MAGIC" in capsys.readouterr().err


def test_missing_directory_exit_code(tmp_path: Path):
    assert main(["-r", "silent", "ls", str(tmp_path / "absent")]) == 1


def test_no_directories_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        main(["-r", "silent", "ls"])
    assert exc.value.code == 2
