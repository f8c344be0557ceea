"""Tests for the CLI: check, survey, models, explain."""

import json

import pytest
from typer.testing import CliRunner

from modelfit import registry as registry_mod
from modelfit.cli import app
from modelfit.registry import MODELS_ENV_VAR

GB = 1024**3

runner = CliRunner()

LAPTOP = {
    "platform": "macOS",
    "architecture": "arm64",
    "totalMemory": 8 * GB,
    "availableMemory": 4 * GB,
    "cpu": {"coreCount": 8, "instructionSets": ["neon"]},
}

GAMING_PC = {
    "platform": "Linux",
    "architecture": "x86_64",
    "totalMemory": 16 * GB,
    "availableMemory": 12 * GB,
    "cpu": {"coreCount": 8, "instructionSets": ["avx", "avx2", "fma", "f16c"]},
    "accelerator": {
        "available": True,
        "devices": [{"kind": "discrete", "totalDeviceMemory": 8 * GB, "apiVersion": "1.3.0"}],
    },
}


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    monkeypatch.setattr(registry_mod, "USER_MODELS_FILE", tmp_path / "absent.yaml")
    monkeypatch.delenv(MODELS_ENV_VAR, raising=False)
    monkeypatch.setenv("COLUMNS", "120")
    registry_mod._load_registry.cache_clear()


def _host(tmp_path, doc) -> str:
    f = tmp_path / "host.json"
    f.write_text(json.dumps(doc))
    return str(f)


def test_check_json(tmp_path):
    """--json prints the verdict document."""
    result = runner.invoke(app, ["check", "qwen-1.5b", "-H", _host(tmp_path, LAPTOP), "--json"])
    assert result.exit_code == 0, result.output
    d = json.loads(result.stdout)
    assert d["compatible"] is True
    assert d["performanceTier"] == "fair"
    assert d["performanceEstimate"]["bottleneck"] == "none"


def test_check_human(tmp_path):
    """Default output is the human report."""
    result = runner.invoke(app, ["check", "llama-3-70b", "-H", _host(tmp_path, GAMING_PC)])
    assert result.exit_code == 0, result.output
    assert "HARD FAILURES" in result.stdout
    assert "Llama 3 8B Instruct" in result.stdout  # suggested alternative


def test_check_no_alternatives(tmp_path):
    """--no-alternatives drops registry suggestions."""
    result = runner.invoke(
        app, ["check", "llama-3-70b", "-H", _host(tmp_path, GAMING_PC), "--json", "--no-alternatives"]
    )
    d = json.loads(result.stdout)
    assert not any("alternatives" in r for r in d["recommendations"])


def test_check_markdown(tmp_path):
    """--markdown prints a markdown report."""
    result = runner.invoke(app, ["check", "llama-3-8b", "-H", _host(tmp_path, GAMING_PC), "--markdown"])
    assert result.exit_code == 0, result.output
    assert result.stdout.startswith("# modelfit: Llama 3 8B Instruct")


def test_check_unknown_model(tmp_path):
    """An unknown id is a verdict, not a crash."""
    result = runner.invoke(app, ["check", "gpt-9", "-H", _host(tmp_path, LAPTOP), "--json"])
    assert result.exit_code == 0, result.output
    d = json.loads(result.stdout)
    assert d["reason"] == "Unknown model: gpt-9"
    assert d["performanceEstimate"] is None


def test_ci_exit_incompatible(tmp_path):
    """--ci exits 1 when the model is not compatible."""
    result = runner.invoke(app, ["check", "llama-3-8b", "-H", _host(tmp_path, LAPTOP), "--ci", "--json"])
    assert result.exit_code == 1


def test_ci_min_tier(tmp_path):
    """--min-tier fails compatible models below the threshold."""
    host = _host(tmp_path, LAPTOP)
    below = runner.invoke(app, ["check", "qwen-1.5b", "-H", host, "--ci", "--json", "--min-tier", "good"])
    assert below.exit_code == 1
    at = runner.invoke(app, ["check", "qwen-1.5b", "-H", host, "--ci", "--json", "--min-tier", "fair"])
    assert at.exit_code == 0


def test_ci_bad_tier(tmp_path):
    """Unknown tier name is a usage error."""
    result = runner.invoke(app, ["check", "qwen-1.5b", "-H", _host(tmp_path, LAPTOP), "--ci", "--min-tier", "ok"])
    assert result.exit_code == 2
    assert "Unknown tier: ok" in result.output
    assert "Traceback" not in result.output


def test_bad_tier_without_ci(tmp_path):
    """--min-tier is validated even when --ci is not given."""
    result = runner.invoke(app, ["check", "qwen-1.5b", "-H", _host(tmp_path, LAPTOP), "--min-tier", "ok"])
    assert result.exit_code == 2
    assert "Unknown tier: ok" in result.output


def test_bad_tier_with_incompatible_model(tmp_path):
    """A bad --min-tier is a usage error before the incompatible verdict can exit 1."""
    result = runner.invoke(app, ["check", "llama-3-8b", "-H", _host(tmp_path, LAPTOP), "--ci", "--min-tier", "ok"])
    assert result.exit_code == 2
    assert "NOT compatible" not in result.output


def test_missing_host_file(tmp_path):
    """No capability profile: stop before evaluating."""
    result = runner.invoke(app, ["check", "qwen-1.5b", "-H", str(tmp_path / "nope.json")])
    assert result.exit_code == 2
    assert "Capability profile not found" in result.output


def test_extra_models_file(tmp_path):
    """--models adds registry entries."""
    models = tmp_path / "models.yaml"
    models.write_text("- id: tiny\n  memory: {minimum: 1024, recommended: 2048}\n")
    result = runner.invoke(app, ["check", "tiny", "-H", _host(tmp_path, LAPTOP), "--models", str(models), "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["compatible"] is True


def test_survey_json(tmp_path):
    """survey --json lists every model."""
    result = runner.invoke(app, ["survey", "-H", _host(tmp_path, GAMING_PC), "--json"])
    assert result.exit_code == 0, result.output
    d = json.loads(result.stdout)
    assert d["total_models"] == 5
    assert d["compatible"] == 4


def test_survey_bad_category(tmp_path):
    """Unknown category is a usage error."""
    result = runner.invoke(app, ["survey", "-H", _host(tmp_path, GAMING_PC), "-c", "robotics"])
    assert result.exit_code == 2
    assert "Unknown category: robotics" in result.output


def test_models_list():
    """models prints one line per registered model."""
    result = runner.invoke(app, ["models"])
    assert result.exit_code == 0, result.output
    assert "qwen-1.5b" in result.stdout
    assert "accelerator required" in result.stdout


def test_models_json():
    """models --json dumps the profiles."""
    result = runner.invoke(app, ["models", "--json", "-c", "multimodal"])
    assert result.exit_code == 0, result.output
    d = json.loads(result.stdout)
    assert [m["id"] for m in d] == ["llava-1.5-7b"]


def test_explain_tag():
    """explain prints description and fixes."""
    result = runner.invoke(app, ["explain", "vram"])
    assert result.exit_code == 0, result.output
    assert "Tag: vram" in result.stdout
    assert "Fix:" in result.stdout


def test_explain_isa_tag():
    """cpu_<isa> tags resolve to the shared entry."""
    result = runner.invoke(app, ["explain", "cpu_avx2"])
    assert result.exit_code == 0, result.output


def test_explain_unknown_tag():
    """Unknown tag is a usage error."""
    result = runner.invoke(app, ["explain", "warp_drive"])
    assert result.exit_code == 2
    assert "warp_drive" in result.output
