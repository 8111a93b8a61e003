"""Tests for the composite action definition."""

from __future__ import annotations

import re
import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


def _action() -> str:
    return (ROOT / "action.yml").read_text(encoding="utf-8")


def test_provisions_supported_python():
    pyproject = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))
    minimum = re.search(r">=\s*([\d.]+)", pyproject["project"]["requires-python"]).group(1)
    action = _action()

    assert "uses: actions/setup-python@v5" in action
    assert f'python-version: "{minimum}"' in action
    assert "update-environment: false" in action


def test_installs_into_isolated_venv():
    action = _action()

    assert "python3 -m pip" not in action
    assert '-m venv "$venv"' in action
    assert '"$python" -m pip install' in action
    assert '"${{ steps.install.outputs.python }}" -m buddy_run' in action


def test_every_input_is_passed_through():
    action = _action()
    inputs = re.findall(r"^  ([a-z-]+):\n    description:", action.split("outputs:")[0], re.M)

    assert "workspace" in inputs
    for name in inputs:
        assert f"INPUT_{name.upper()}: ${{{{ inputs.{name} }}}}" in action
