"""LocalAuthentication binding for device-owner authentication."""

from __future__ import annotations

from typing import Any, Optional

from confirm.agent import AuthAvailability, AuthReply
from confirm.errors import PlatformUnavailableError


def _import_local_authentication() -> Any:
    try:
        import LocalAuthentication
    except ImportError as exc:
        raise PlatformUnavailableError(
            "LocalAuthentication is unavailable ({0}); "
            "install pyobjc-framework-LocalAuthentication on macOS.".format(exc)
        ) from exc
    return LocalAuthentication


def _error_text(error: Any) -> Optional[str]:
    if error is None:
        return None
    describe = getattr(error, "localizedDescription", None)
    if callable(describe):
        text = describe()
        return str(text) if text else None
    return str(error) or None


class LocalAuthService:
    """Evaluates LAPolicyDeviceOwnerAuthentication (biometrics with password fallback)."""

    def __init__(self, local_authentication: Optional[Any] = None) -> None:
        self._la = (
            local_authentication
            if local_authentication is not None
            else _import_local_authentication()
        )
        self._context = self._la.LAContext.alloc().init()

    @property
    def _policy(self) -> Any:
        return self._la.LAPolicyDeviceOwnerAuthentication

    def check_availability(self) -> AuthAvailability:
        can_evaluate, error = self._context.canEvaluatePolicy_error_(self._policy, None)
        if can_evaluate:
            return AuthAvailability(available=True)
        return AuthAvailability(available=False, reason=_error_text(error))

    def evaluate(self, reason: str, reply: AuthReply) -> None:
        def on_reply(success: bool, error: Any) -> None:
            reply(bool(success), _error_text(error))

        self._context.evaluatePolicy_localizedReason_reply_(self._policy, reason, on_reply)
