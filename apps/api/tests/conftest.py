from __future__ import annotations

from pathlib import Path

import pytest

from notevault_api.vault import Vault


class FakeClock:
    def __init__(self, now: int = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


class RecordingOpener:
    def __init__(self) -> None:
        self.opened: list[Path] = []

    def __call__(self, path: Path) -> None:
        self.opened.append(path)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def opener() -> RecordingOpener:
    return RecordingOpener()


@pytest.fixture
def vault(tmp_path, clock, opener) -> Vault:
    return Vault(tmp_path / "vault", clock=clock, opener=opener)
