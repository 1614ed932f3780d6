from __future__ import annotations

import json
import threading

import pytest

from confirm.agent import ConfirmationAgent
from confirm.config import Settings
from confirm.debug_log import DebugLogWriter
from confirm.errors import PlatformUnavailableError
from confirm.request import ParsedRequest


def test_dialog_accept_affirms(dialog_factory):
    dialog = dialog_factory(choice=0)
    agent = ConfirmationAgent(ParsedRequest(message="Proceed?"), dialog_service=dialog)

    assert agent.decide() is True
    assert dialog.activated == 1
    shown = dialog.requests[0]
    assert shown.title == "Confirmation Required"
    assert shown.message == "Proceed?"
    assert shown.buttons == ("Accept", "Decline")
    assert shown.icon_path is None


@pytest.mark.parametrize("choice", [1, None])
def test_dialog_decline_or_dismiss_declines(dialog_factory, choice):
    dialog = dialog_factory(choice=choice)
    agent = ConfirmationAgent(ParsedRequest(message="Proceed?"), dialog_service=dialog)
    assert agent.decide() is False


def test_dialog_uses_configured_labels(dialog_factory):
    dialog = dialog_factory(choice=0)
    settings = Settings(dialog_title="Deploy", accept_label="Ship it", decline_label="Abort")
    agent = ConfirmationAgent(
        ParsedRequest(message="Deploy to prod?"),
        dialog_service=dialog,
        settings=settings,
    )

    assert agent.decide() is True
    assert dialog.requests[0].title == "Deploy"
    assert dialog.requests[0].buttons == ("Ship it", "Abort")


def test_existing_icon_is_passed_through(dialog_factory, tmp_path):
    icon = tmp_path / "icon.png"
    icon.write_bytes(b"\x89PNG")
    dialog = dialog_factory(choice=0)
    agent = ConfirmationAgent(
        ParsedRequest(message="Proceed?", icon_path=str(icon)),
        dialog_service=dialog,
    )

    assert agent.decide() is True
    assert dialog.requests[0].icon_path == str(icon)


@pytest.mark.parametrize("choice, expected", [(0, True), (1, False)])
def test_missing_icon_is_ignored_silently(dialog_factory, capsys, choice, expected):
    dialog = dialog_factory(choice=choice)
    echoed = []
    agent = ConfirmationAgent(
        ParsedRequest(message="Proceed?", icon_path="/nonexistent/path.png"),
        dialog_service=dialog,
        echo=echoed.append,
    )

    assert agent.decide() is expected
    assert dialog.requests[0].icon_path is None
    assert echoed == []
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_auth_success_affirms_without_dialog(dialog_factory, auth_factory):
    dialog = dialog_factory(choice=1)
    auth = auth_factory(success=True)
    agent = ConfirmationAgent(
        ParsedRequest(message="Unlock vault?", require_auth=True),
        dialog_service=dialog,
        auth_service=auth,
    )

    assert agent.decide() is True
    assert auth.reasons == ["Unlock vault?"]
    assert dialog.requests == []
    assert dialog.activated == 1


def test_auth_failure_declines_and_reports_reason(dialog_factory, auth_factory):
    echoed = []
    auth = auth_factory(success=False, error="User canceled.")
    agent = ConfirmationAgent(
        ParsedRequest(message="Unlock vault?", require_auth=True),
        dialog_service=dialog_factory(),
        auth_service=auth,
        echo=echoed.append,
    )
    assert agent.decide() is False
    assert echoed == ["Authentication failed: User canceled."]


def test_auth_failure_without_reason_stays_quiet(dialog_factory, auth_factory):
    echoed = []
    agent = ConfirmationAgent(
        ParsedRequest(message="Unlock vault?", require_auth=True),
        dialog_service=dialog_factory(),
        auth_service=auth_factory(success=False, error=None),
        echo=echoed.append,
    )
    assert agent.decide() is False
    assert echoed == []


def test_auth_unavailable_reports_platform_reason(dialog_factory, auth_factory):
    echoed = []
    auth = auth_factory(available=False, reason="No identities are enrolled.")
    agent = ConfirmationAgent(
        ParsedRequest(message="Unlock vault?", require_auth=True),
        dialog_service=dialog_factory(),
        auth_service=auth,
        echo=echoed.append,
    )

    assert agent.decide() is False
    assert echoed == ["Authentication not available: No identities are enrolled."]
    assert auth.reasons == []


def test_auth_unavailable_without_reason_reports_unknown_error(dialog_factory, auth_factory):
    echoed = []
    agent = ConfirmationAgent(
        ParsedRequest(message="Unlock vault?", require_auth=True),
        dialog_service=dialog_factory(),
        auth_service=auth_factory(available=False, reason=None),
        echo=echoed.append,
    )

    assert agent.decide() is False
    assert echoed == ["Authentication not available: Unknown error"]


class _ThreadedAuth:
    """Replies from a background thread, twice, like a misbehaving binding."""

    def __init__(self, first: bool) -> None:
        self.first = first
        self.thread = None

    def check_availability(self):
        from confirm.agent import AuthAvailability

        return AuthAvailability(available=True)

    def evaluate(self, reason, reply) -> None:
        def worker():
            reply(self.first, None)
            reply(not self.first, None)

        self.thread = threading.Thread(target=worker)
        self.thread.start()


@pytest.mark.parametrize("first", [True, False])
def test_auth_waits_for_reply_and_keeps_first_answer(dialog_factory, first):
    auth = _ThreadedAuth(first=first)
    agent = ConfirmationAgent(
        ParsedRequest(message="Proceed?", require_auth=True),
        dialog_service=dialog_factory(),
        auth_service=auth,
    )

    assert agent.decide() is first
    auth.thread.join(timeout=5)


def test_auth_start_failure_declines(dialog_factory):
    class _Broken(_ThreadedAuth):
        def evaluate(self, reason, reply) -> None:
            raise RuntimeError("context invalidated")

    echoed = []
    agent = ConfirmationAgent(
        ParsedRequest(message="Proceed?", require_auth=True),
        dialog_service=dialog_factory(),
        auth_service=_Broken(first=True),
        echo=echoed.append,
    )

    assert agent.decide() is False
    assert echoed == ["Authentication failed: context invalidated"]


def test_auth_request_requires_auth_service(dialog_factory):
    with pytest.raises(ValueError):
        ConfirmationAgent(
            ParsedRequest(message="Proceed?", require_auth=True),
            dialog_service=dialog_factory(),
        )


def test_empty_message_is_rejected(dialog_factory):
    with pytest.raises(ValueError):
        ConfirmationAgent(ParsedRequest(message=""), dialog_service=dialog_factory())


def test_decision_is_recorded_in_debug_log(dialog_factory, tmp_path):
    writer = DebugLogWriter(logs_dir=tmp_path / "logs", enabled=True)
    agent = ConfirmationAgent(
        ParsedRequest(message="Wipe disk?", icon_path="/nonexistent/icon.png"),
        dialog_service=dialog_factory(choice=0),
        debug_log=writer,
    )

    assert agent.decide() is True

    lines = writer.active_log_file.read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    kinds = [record["kind"] for record in records]
    assert kinds == ["decision.started", "icon.ignored", "decision.finished"]
    assert records[0]["data"]["mode"] == "dialog"
    assert "Wipe disk?" not in lines[0]
    assert records[-1]["data"]["affirmed"] is True


def test_dialog_binding_failure_becomes_platform_error():
    class _Crashing:
        def activate(self):
            return None

        def present(self, request):
            raise RuntimeError("NSInternalInconsistencyException")

    agent = ConfirmationAgent(ParsedRequest(message="Proceed?"), dialog_service=_Crashing())

    with pytest.raises(PlatformUnavailableError) as exc_info:
        agent.decide()
    assert "Dialog failed: NSInternalInconsistencyException" in str(exc_info.value)
