"""Platform bindings for dialogs and device-owner authentication."""

from __future__ import annotations

from confirm.agent import AuthService, DialogService
from confirm.config import DIALOG_BACKEND_APPLESCRIPT, Settings


def build_dialog_service(settings: Settings) -> DialogService:
    if settings.dialog_backend == DIALOG_BACKEND_APPLESCRIPT:
        from confirm.platform.applescript import AppleScriptDialogService

        return AppleScriptDialogService()

    from confirm.platform.appkit import AppKitDialogService

    return AppKitDialogService()


def build_auth_service() -> AuthService:
    from confirm.platform.local_auth import LocalAuthService

    return LocalAuthService()


__all__ = ["build_auth_service", "build_dialog_service"]
