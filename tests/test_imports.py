"""Entry modules must import cleanly in a fresh interpreter."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parent.parent / "src"


@pytest.mark.unit
@pytest.mark.parametrize(
    "module",
    ["main", "api.app", "pricing", "pricing.engine", "db.repositories", "booking.orchestrator"],
)
def test_module_imports_first(module):
    env = {**os.environ, "PYTHONPATH": str(SRC), "API_KEY": "test-api-key"}
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=SRC,
        env=env,
        capture_output=True,
        text=True,
        timeout=60,
    )
    assert result.returncode == 0, result.stderr
