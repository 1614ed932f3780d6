from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import pytest

from confirm.agent import AuthAvailability, DialogRequest


class FakeDialogService:
    def __init__(self, choice: Optional[int] = 0) -> None:
        self.choice = choice
        self.activated = 0
        self.requests: List[DialogRequest] = []

    def activate(self) -> None:
        self.activated += 1

    def present(self, request: DialogRequest) -> Optional[int]:
        self.requests.append(request)
        return self.choice


class FakeAuthService:
    def __init__(
        self,
        *,
        available: bool = True,
        reason: Optional[str] = None,
        success: bool = True,
        error: Optional[str] = None,
    ) -> None:
        self.available = available
        self.reason = reason
        self.success = success
        self.error = error
        self.reasons: List[str] = []

    def check_availability(self) -> AuthAvailability:
        return AuthAvailability(available=self.available, reason=self.reason)

    def evaluate(self, reason, reply) -> None:
        self.reasons.append(reason)
        reply(self.success, self.error)


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    home = tmp_path / "home"
    home.mkdir(parents=True, exist_ok=True)
    config_path = tmp_path / "config.toml"

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("CONFIRM_CONFIG", str(config_path))
    monkeypatch.delenv("CONFIRM_DIALOG_BACKEND", raising=False)
    monkeypatch.delenv("CONFIRM_DEBUG_LOG", raising=False)
    monkeypatch.delenv("CONFIRM_LOGS_DIR", raising=False)

    return {
        "home": home,
        "config_path": config_path,
        "logs_dir": tmp_path / "logs",
    }


@pytest.fixture
def dialog_factory():
    return FakeDialogService


@pytest.fixture
def auth_factory():
    return FakeAuthService
