"""AppleScript dialog binding driven through ``osascript``."""

from __future__ import annotations

import subprocess
from typing import List, Optional

from confirm.agent import DialogRequest
from confirm.errors import PlatformUnavailableError

USER_CANCELED_CODE = "-128"

# Arguments arrive through argv so no user text is ever spliced into the script.
DIALOG_SCRIPT = """on run argv
	set theMessage to item 1 of argv
	set theTitle to item 2 of argv
	set theIcon to item 3 of argv
	set theButtons to items 4 thru -1 of argv
	activate
	if theIcon is "" then
		set theResult to display dialog theMessage with title theTitle buttons theButtons default button 1
	else
		set theResult to display dialog theMessage with title theTitle buttons theButtons default button 1 with icon (POSIX file theIcon)
	end if
	return button returned of theResult
end run"""


class AppleScriptDialogService:
    """Shows the confirmation with ``display dialog``."""

    def __init__(self, osascript: str = "osascript") -> None:
        self._osascript = osascript

    def activate(self) -> None:
        # The script activates the dialog's host process itself.
        return

    def present(self, request: DialogRequest) -> Optional[int]:
        completed = self._run(request, request.icon_path or "")
        if completed.returncode != 0 and request.icon_path and not self._is_canceled(completed):
            # Icon files osascript cannot load are dropped silently.
            completed = self._run(request, "")

        if completed.returncode == 0:
            chosen = (completed.stdout or "").strip()
            if chosen in request.buttons:
                return request.buttons.index(chosen)
            return None
        if self._is_canceled(completed):
            return None

        detail = (completed.stderr or completed.stdout or "unknown applescript error").strip()
        raise PlatformUnavailableError("osascript dialog failed: {0}".format(detail))

    def _run(self, request: DialogRequest, icon_path: str) -> subprocess.CompletedProcess:
        args: List[str] = [
            self._osascript,
            "-e",
            DIALOG_SCRIPT,
            request.message,
            request.title,
            icon_path,
        ]
        args.extend(request.buttons)
        try:
            return subprocess.run(
                args,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise PlatformUnavailableError(
                "osascript not found; run on macOS or choose the appkit dialog backend."
            ) from exc
        except OSError as exc:
            raise PlatformUnavailableError("osascript could not start: {0}".format(exc)) from exc

    @staticmethod
    def _is_canceled(completed: subprocess.CompletedProcess) -> bool:
        return USER_CANCELED_CODE in (completed.stderr or "")
