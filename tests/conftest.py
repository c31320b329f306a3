"""
Pytest Configuration

Adds ``src`` and the repository root to ``sys.path`` so the suite runs from a
plain checkout, resets process-wide state (shared HTTP client, cached settings)
around every test, and exposes the shared fixtures from ``tests.fixtures``.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Generator

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
for path in (SRC, ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from AdoRest.Core.settings import reset_settings  # noqa: E402
from AdoRest.Core.transport import reset_http_client  # noqa: E402

from tests.fixtures.credentials import token_source  # noqa: E402,F401
from tests.fixtures.http_mocking import (  # noqa: E402,F401
    make_client,
    recording_transport,
    sleeps,
)


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear ADO_* variables and shared singletons so tests never leak into each other."""

    for name in list(os.environ):
        if name.upper().startswith("ADO_"):
            monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
    reset_http_client()
