"""Shared pytest fixtures for forge-deployments tests."""

import json
import subprocess
from pathlib import Path
from typing import Any, Dict, List

import pytest

ARTIFACT_NAMES = ["Foo", "Bar", "UniswapV2Factory"]


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_log_json(fixtures_dir: Path) -> Dict[str, Any]:
    """Load and return the sample deployment log fixture."""
    with open(fixtures_dir / "sample_deployment_log.json") as f:
        return json.load(f)


@pytest.fixture
def working_dir(tmp_path: Path) -> Path:
    """Create a foundry project with build artifacts and forge-chronicles installed."""
    project = tmp_path / "project"
    for name in ARTIFACT_NAMES:
        artifact_dir = project / "out" / f"{name}.sol"
        artifact_dir.mkdir(parents=True)
        (artifact_dir / f"{name}.json").write_text('{"abi": []}')

    chronicles = project / "lib" / "forge-chronicles"
    chronicles.mkdir(parents=True)
    (chronicles / "index.js").write_text("// forge-chronicles")
    return project


@pytest.fixture
def sample_log_file(working_dir: Path, sample_log_json: Dict[str, Any]) -> Path:
    """Write the sample deployment log as deployments/json/1.json."""
    log_path = working_dir / "deployments" / "json" / "1.json"
    log_path.parent.mkdir(parents=True)
    with open(log_path, "w") as f:
        json.dump(sample_log_json, f, indent=2)
    return log_path


@pytest.fixture
def doc_generator_calls(monkeypatch) -> List[List[str]]:
    """Replace the forge-chronicles subprocess and record its command lines."""
    calls: List[List[str]] = []

    def fake_run(cmd, **kwargs):
        calls.append(list(cmd))
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    monkeypatch.setattr("forge_deployments.docs.subprocess.run", fake_run)
    return calls
