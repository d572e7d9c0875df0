"""Root test configuration: keep config.yaml and MDSPEC_* env vars out of tests"""

import pytest

from mdspec.config import Settings


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path, monkeypatch):
    """Run every test from an empty directory with no MDSPEC_* overrides."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(f"MDSPEC_{name.upper()}", raising=False)
