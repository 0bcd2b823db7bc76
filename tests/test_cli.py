"""Tests for the CLI."""
import json

import pytest

from quotegate import __version__
from quotegate.cli import _load_pool, main
from quotegate.fingerprint import exact_fingerprint


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_command_required():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_fingerprint(capsys):
    assert main(["fingerprint", "Hello, World"]) == 0
    out = capsys.readouterr().out
    assert "hello world" in out


def test_similarity_normalizes_by_default(capsys):
    assert main(["similarity", "אני תומך בחוק", "אני תומך בחוק."]) == 0
    assert "1.0000" in capsys.readouterr().out


def test_similarity_raw(capsys):
    assert main(["similarity", "--raw", "kitten", "sitting"]) == 0
    assert "edit distance 3" in capsys.readouterr().out


def test_resolve(tmp_path, capsys, isolated_config):
    pool = tmp_path / "pool.json"
    pool.write_text(json.dumps([
        {"id": 1, "content": "אני תומך בחוק", "duplicate_group": "g1"},
        {"id": 2, "content": "something else"},
    ], ensure_ascii=False), encoding="utf-8")
    assert main(["resolve", "--subject", "1", "--pool", str(pool), "אני תומך בחוק"]) == 0
    out = capsys.readouterr().out
    assert "EXACT_DUPLICATE" in out
    assert "g1" in out


def test_resolve_missing_pool(tmp_path, capsys, isolated_config):
    assert main(["resolve", "--subject", "1", "--pool", str(tmp_path / "none.json"), "x"]) == 2
    assert "Cannot read pool" in capsys.readouterr().out


def test_limits(capsys, isolated_config):
    (isolated_config / "quotegate.yaml").write_text("origin-limit: 3\n", encoding="utf-8")
    assert main(["limits"]) == 0
    out = capsys.readouterr().out
    assert "origin_limit" in out
    assert "3" in out


def test_bad_config_exit_code(capsys, isolated_config):
    (isolated_config / "quotegate.yaml").write_text("origin-limit: 0\n", encoding="utf-8")
    assert main(["limits"]) == 2
    assert "Configuration error" in capsys.readouterr().out


def test_load_pool_derives_fields(tmp_path):
    pool = tmp_path / "pool.json"
    pool.write_text(json.dumps([{"id": "7", "content": "Draft Law!", "duplicate_of": 3}]), encoding="utf-8")
    [cand] = _load_pool(str(pool))
    assert cand.id == 7
    assert cand.normalized_content == "draft law"
    assert cand.content_hash == exact_fingerprint("Draft Law!")
    assert cand.duplicate_of == 3


def test_load_pool_rejects_non_list(tmp_path):
    pool = tmp_path / "pool.json"
    pool.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError):
        _load_pool(str(pool))


def test_load_pool_rejects_non_object_entries(tmp_path):
    pool = tmp_path / "pool.json"
    pool.write_text(json.dumps([{"id": 1, "content": "ok"}, "not an object"]), encoding="utf-8")
    with pytest.raises(ValueError, match="must be JSON objects"):
        _load_pool(str(pool))


def test_resolve_non_object_pool_entry_exit_code(tmp_path, capsys, isolated_config):
    pool = tmp_path / "pool.json"
    pool.write_text("[1, 2]", encoding="utf-8")
    assert main(["resolve", "--subject", "1", "--pool", str(pool), "x"]) == 2
    assert "Cannot read pool" in capsys.readouterr().out


def test_resolve_json_record(tmp_path, capsys, isolated_config):
    pool = tmp_path / "pool.json"
    pool.write_text(json.dumps([
        {"id": 7, "content": "draft law now", "duplicate_group": "grp", "duplicate_of": 3},
    ]), encoding="utf-8")
    assert main([
        "resolve", "--subject", "1", "--pool", str(pool), "--json",
        "--url", "https://knesset.gov.il/p/1", "--channel", "knesset",
        "--stated-at", "2026-01-01T12:00:00+02:00",
        "draft law now",
    ]) == 0
    record = json.loads(capsys.readouterr().out)
    assert record["classification"] == "EXACT_DUPLICATE"
    assert record["duplicate_of"] == 3
    assert record["duplicate_group"] == "grp"
    assert record["channel"] == "KNESSET"
    assert record["source_credibility"] == 10
    assert record["source_url"] == "https://knesset.gov.il/p/1"
    assert record["stated_at"] == "2026-01-01T10:00:00+00:00"
    assert record["id"] is None


def test_resolve_bad_stated_at(tmp_path, capsys, isolated_config):
    pool = tmp_path / "pool.json"
    pool.write_text("[]", encoding="utf-8")
    assert main(["resolve", "--subject", "1", "--pool", str(pool), "--stated-at", "garbage", "x"]) == 2
    assert "Invalid --stated-at" in capsys.readouterr().out
