"""AppKit dialog binding (NSAlert above a floating helper window)."""

from __future__ import annotations

from typing import Any, Optional

from confirm.agent import DialogRequest
from confirm.errors import PlatformUnavailableError


def _import_appkit() -> Any:
    try:
        import AppKit
    except ImportError as exc:
        raise PlatformUnavailableError(
            "AppKit is unavailable ({0}); install pyobjc-framework-Cocoa on macOS.".format(exc)
        ) from exc
    return AppKit


class AppKitDialogService:
    """Shows the confirmation as a modal NSAlert."""

    def __init__(self, appkit: Optional[Any] = None) -> None:
        self._appkit = appkit if appkit is not None else _import_appkit()

    def activate(self) -> None:
        app = self._appkit.NSApplication.sharedApplication()
        app.setActivationPolicy_(self._appkit.NSApplicationActivationPolicyRegular)
        app.activateIgnoringOtherApps_(True)

    def present(self, request: DialogRequest) -> Optional[int]:
        appkit = self._appkit
        alert = appkit.NSAlert.alloc().init()
        alert.setMessageText_(request.title)
        alert.setInformativeText_(request.message)
        for label in request.buttons:
            alert.addButtonWithTitle_(label)
        alert.setAlertStyle_(appkit.NSAlertStyleInformational)

        icon = self._load_icon(request.icon_path)
        if icon is not None:
            alert.setIcon_(icon)

        window = self._open_helper_window()
        try:
            response = alert.runModal()
        finally:
            window.orderOut_(None)

        index = int(response) - int(appkit.NSAlertFirstButtonReturn)
        if 0 <= index < len(request.buttons):
            return index
        return None

    def _load_icon(self, icon_path: Optional[str]) -> Any:
        if not icon_path:
            return None
        # initWithContentsOfFile_ returns None for unreadable or non-image files.
        return self._appkit.NSImage.alloc().initWithContentsOfFile_(icon_path)

    def _open_helper_window(self) -> Any:
        appkit = self._appkit
        window = appkit.NSWindow.alloc().initWithContentRect_styleMask_backing_defer_(
            ((0.0, 0.0), (1.0, 1.0)),
            0,
            appkit.NSBackingStoreBuffered,
            False,
        )
        window.setLevel_(appkit.NSFloatingWindowLevel)
        window.setOpaque_(False)
        window.setBackgroundColor_(appkit.NSColor.clearColor())
        window.makeKeyAndOrderFront_(None)
        return window
