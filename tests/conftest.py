from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from modalkit import runtime
from modalkit.modal.controller import ModalController


@pytest.fixture(autouse=True)
def modalkit_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep settings reads/writes inside the test's temp dir."""
    home = tmp_path / "modalkit_home"
    monkeypatch.setenv("MODALKIT_HOME", str(home))
    monkeypatch.delenv("MODALKIT_WEB_PORT", raising=False)
    return home


@pytest.fixture(autouse=True)
def reset_runtime_modal() -> Iterator[None]:
    runtime.set_modal(None)
    yield
    runtime.set_modal(None)


@pytest.fixture
def modal() -> ModalController:
    return ModalController()
