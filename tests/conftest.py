from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch):
    # Path resolution must not depend on the developer's shell.
    monkeypatch.delenv("ANOTHERMQ_HOME", raising=False)
    monkeypatch.delenv("APPDATA", raising=False)
    yield
    root = logging.getLogger("anothermq")
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()
    if hasattr(root, "_anothermq_configured"):
        delattr(root, "_anothermq_configured")
