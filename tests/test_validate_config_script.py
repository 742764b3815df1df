"""Tests for scripts/validate_config.py."""
import pytest

from conftest import PROJECT_ROOT, load_module


@pytest.fixture(scope="module")
def script():
    return load_module(PROJECT_ROOT / "scripts" / "validate_config.py", "validate_config_script")


def test_valid_file_passes(script, write_config, full_doc, capsys):
    path = write_config(full_doc)

    assert script.main([str(path)]) == 0
    assert f"[OK] {path}: OK" in capsys.readouterr().out


def test_rule_errors_fail(script, write_config, minimal_doc, capsys):
    minimal_doc["source"]["repositoryUrl"] = "not-a-url"
    path = write_config(minimal_doc)

    assert script.main([str(path)]) == 1
    out = capsys.readouterr().out
    assert f"[X] {path}: 1 error(s)" in out
    assert "repositoryUrl" in out


def test_schema_catches_unknown_keys(script, write_config, minimal_doc, capsys):
    minimal_doc["biuld"] = {"buildCommand": "make"}
    path = write_config(minimal_doc)

    assert script.main([str(path)]) == 1
    assert "biuld" in capsys.readouterr().out


def test_unloadable_file_fails(script, tmp_path, capsys):
    missing = tmp_path / "missing.yml"

    assert script.main([str(missing)]) == 1
    assert "not found" in capsys.readouterr().out


def test_warnings_do_not_fail(script, write_config, full_doc, capsys):
    full_doc["region"] = "eu-west-1"
    path = write_config(full_doc)

    assert script.main([str(path)]) == 0
    assert "us-east-1" in capsys.readouterr().out


def test_buildspec_flag_prints_buildspec(script, write_config, minimal_doc, capsys):
    path = write_config(minimal_doc)

    assert script.main(["--buildspec", str(path)]) == 0
    out = capsys.readouterr().out
    assert "base-directory: dist" in out
    assert "npm run build" in out


def test_any_failure_fails_the_run(script, write_config, minimal_doc, tmp_path):
    good = write_config(minimal_doc, "good.yml")

    assert script.main([str(good), str(tmp_path / "missing.yml")]) == 1
