"""Confirmation agent: one dialog or one authentication check, decided once."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, Tuple

from confirm.config import Settings
from confirm.debug_log import DebugLogWriter
from confirm.errors import ConfirmError, PlatformUnavailableError
from confirm.request import ParsedRequest

AuthReply = Callable[[bool, Optional[str]], None]
Echo = Callable[[str], None]

UNKNOWN_AUTH_ERROR = "Unknown error"


@dataclass(frozen=True)
class DialogRequest:
    """What to show in the modal dialog; the first button is the default."""

    title: str
    message: str
    buttons: Tuple[str, ...]
    icon_path: Optional[str] = None


@dataclass(frozen=True)
class AuthAvailability:
    available: bool
    reason: Optional[str] = None


class DialogService(Protocol):
    """Modal dialog presentation contract."""

    def activate(self) -> None:
        """Bring this process to the foreground above other applications."""

    def present(self, request: DialogRequest) -> Optional[int]:
        """Show the dialog and return the chosen button index, or None if dismissed."""


class AuthService(Protocol):
    """Device-owner authentication contract."""

    def check_availability(self) -> AuthAvailability:
        """Report whether the device-owner policy can be evaluated."""

    def evaluate(self, reason: str, reply: AuthReply) -> None:
        """Start evaluation; ``reply`` is called once with the outcome, possibly from another thread."""


class _OneShotReply:
    """Latch released by the first reply; later replies are ignored."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self.success = False
        self.error: Optional[str] = None

    def __call__(self, success: bool, error: Optional[str] = None) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self.success = bool(success)
            self.error = error
            self._event.set()

    def wait(self) -> bool:
        self._event.wait()
        return self.success


def _default_echo(text: str) -> None:
    print(text)


class ConfirmationAgent:
    """Runs either the dialog or the authentication path for one request."""

    def __init__(
        self,
        request: ParsedRequest,
        *,
        dialog_service: DialogService,
        auth_service: Optional[AuthService] = None,
        settings: Optional[Settings] = None,
        debug_log: Optional[DebugLogWriter] = None,
        echo: Optional[Echo] = None,
    ) -> None:
        if not request.message:
            raise ValueError("confirmation message must not be empty")
        if request.require_auth and auth_service is None:
            raise ValueError("auth_service is required when authentication is requested")
        self._request = request
        self._dialog_service = dialog_service
        self._auth_service = auth_service
        self._settings = settings or Settings()
        self._debug_log = debug_log
        self._echo = echo or _default_echo

    def decide(self) -> bool:
        mode = "auth" if self._request.require_auth else "dialog"
        self._log(
            "decision.started",
            "decision started",
            {"mode": mode, "message": self._request.message},
        )

        self._dialog_service.activate()
        if self._request.require_auth and self._auth_service is not None:
            affirmed = self._authenticate(self._auth_service)
        else:
            affirmed = self._present_dialog()

        self._log("decision.finished", "decision finished", {"mode": mode, "affirmed": affirmed})
        return affirmed

    def _authenticate(self, auth_service: AuthService) -> bool:
        availability = auth_service.check_availability()
        if not availability.available:
            reason = availability.reason or UNKNOWN_AUTH_ERROR
            self._echo("Authentication not available: {0}".format(reason))
            self._log(
                "auth.unavailable",
                "authentication unavailable",
                {"reason": reason},
                level="warn",
            )
            return False

        reply = _OneShotReply()
        try:
            auth_service.evaluate(self._request.message, reply)
        except Exception as exc:
            self._echo("Authentication failed: {0}".format(exc))
            self._log("auth.error", "authentication failed to start", {"reason": str(exc)}, level="error")
            return False

        success = reply.wait()
        if not success and reply.error:
            self._echo("Authentication failed: {0}".format(reply.error))
            self._log("auth.rejected", "authentication rejected", {"reason": reply.error})
        return success

    def _present_dialog(self) -> bool:
        settings = self._settings
        dialog = DialogRequest(
            title=settings.dialog_title,
            message=self._request.message,
            buttons=(settings.accept_label, settings.decline_label),
            icon_path=self._resolve_icon(),
        )
        try:
            choice = self._dialog_service.present(dialog)
        except ConfirmError:
            raise
        except Exception as exc:
            self._log("dialog.error", "dialog failed", {"reason": str(exc)}, level="error")
            raise PlatformUnavailableError("Dialog failed: {0}".format(exc)) from exc
        return choice == 0

    def _resolve_icon(self) -> Optional[str]:
        raw = self._request.icon_path
        if not raw:
            return None
        path = Path(raw).expanduser()
        if not path.is_file():
            self._log("icon.ignored", "icon path is not a file", {"icon_path": raw})
            return None
        return str(path)

    def _log(self, kind: str, message: str, data: dict, level: str = "info") -> None:
        if self._debug_log is None:
            return
        self._debug_log.write_entry(kind=kind, message=message, level=level, data=data)
