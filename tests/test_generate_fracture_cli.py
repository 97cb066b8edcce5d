from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent


def test_cli_runs_and_writes_payload(tmp_path: Path):
    out = tmp_path / "fracture.json"
    cmd = [
        sys.executable,
        str(REPO_ROOT / "scripts" / "generate_fracture.py"),
        "--seed",
        "12345",
        "--sides",
        "8",
        "--radius",
        "40",
        "--out",
        str(out),
    ]
    proc = subprocess.run(cmd, capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr
    assert "Profile: default" in proc.stdout
    assert "Digest:" in proc.stdout

    payload = json.loads(out.read_text())
    assert len(payload["crack_pattern"]["layers"]) == 3
    assert 3 <= len(payload["fragments"]["fragments"]) <= 4
    assert payload["min_surface_radius"] <= 40.0 + 1e-9


def test_cli_variant_selects_profile(tmp_path: Path):
    cmd = [
        sys.executable,
        str(REPO_ROOT / "scripts" / "generate_fracture.py"),
        "--variant",
        "gold",
        "--size",
        "small",
    ]
    proc = subprocess.run(cmd, capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr
    assert "Profile: crystal" in proc.stdout
    assert "Fragments: 0" in proc.stdout


def test_cli_rejects_bad_config(tmp_path: Path):
    config = tmp_path / "bad.json"
    config.write_text(json.dumps({"crack_profiles": {}, "fragment_rules": {}}))
    cmd = [
        sys.executable,
        str(REPO_ROOT / "scripts" / "generate_fracture.py"),
        "--config",
        str(config),
    ]
    proc = subprocess.run(cmd, capture_output=True, text=True)
    assert proc.returncode == 1
    assert "Error:" in proc.stdout
