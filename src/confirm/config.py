"""Configuration loading for the confirm CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

try:  # pragma: no cover - exercised on Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for Python 3.9/3.10
    import tomli as tomllib  # type: ignore[no-redef]

from confirm.errors import ConfigError

CONFIG_ENV_VAR = "CONFIRM_CONFIG"
DIALOG_BACKEND_ENV_VAR = "CONFIRM_DIALOG_BACKEND"
DEBUG_LOG_ENV_VAR = "CONFIRM_DEBUG_LOG"
LOGS_DIR_ENV_VAR = "CONFIRM_LOGS_DIR"

DEFAULT_CONFIG_PATH = Path("~/.config/confirm/config.toml")

DIALOG_BACKEND_APPKIT = "appkit"
DIALOG_BACKEND_APPLESCRIPT = "applescript"
ALLOWED_DIALOG_BACKENDS = (DIALOG_BACKEND_APPKIT, DIALOG_BACKEND_APPLESCRIPT)

DEFAULT_DIALOG_BACKEND = DIALOG_BACKEND_APPKIT
DEFAULT_DIALOG_TITLE = "Confirmation Required"
DEFAULT_ACCEPT_LABEL = "Accept"
DEFAULT_DECLINE_LABEL = "Decline"

DEFAULT_LOGS_ENABLED = False
DEFAULT_LOGS_DIR = "~/Library/Logs/confirm"
DEFAULT_LOGS_MAX_FILE_BYTES = 1024 * 1024
DEFAULT_LOGS_MAX_FILES = 3
DEFAULT_LOGS_REDACTION = "default"
ALLOWED_LOG_REDACTION = ("default", "none", "strict")


@dataclass
class Settings:
    """Resolved runtime settings for one CLI invocation."""

    dialog_backend: str = DEFAULT_DIALOG_BACKEND
    dialog_title: str = DEFAULT_DIALOG_TITLE
    accept_label: str = DEFAULT_ACCEPT_LABEL
    decline_label: str = DEFAULT_DECLINE_LABEL
    logs_enabled: bool = DEFAULT_LOGS_ENABLED
    logs_dir: Path = field(default_factory=lambda: Path(DEFAULT_LOGS_DIR).expanduser())
    logs_max_file_bytes: int = DEFAULT_LOGS_MAX_FILE_BYTES
    logs_max_files: int = DEFAULT_LOGS_MAX_FILES
    logs_redaction: str = DEFAULT_LOGS_REDACTION
    config_path: Optional[Path] = None


def resolve_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    override = str(env.get(CONFIG_ENV_VAR) or "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def _safe_positive_int(value: object, default: int) -> int:
    try:
        converted = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if converted <= 0:
        return default
    return converted


def _safe_bool(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default


def _safe_choice(value: object, allowed: tuple, default: str) -> str:
    normalized = str(value or default).strip().lower()
    if normalized not in allowed:
        return default
    return normalized


def _safe_label(value: object, default: str) -> str:
    text = str(value or "").strip()
    if not text:
        return default
    return text


def _safe_dir(value: object, default: str) -> Path:
    text = str(value or "").strip() or default
    return Path(text).expanduser()


def _read_config_file(path: Path) -> Dict[str, object]:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as fp:
            data = tomllib.load(fp)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError("Invalid config file {0}: {1}".format(path, exc)) from exc
    return data if isinstance(data, dict) else {}


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    env = os.environ if environ is None else environ
    path = Path(config_path).expanduser() if config_path is not None else resolve_config_path(env)
    data = _read_config_file(path)

    dialog = data.get("dialog") if isinstance(data.get("dialog"), dict) else {}
    logs = data.get("logs") if isinstance(data.get("logs"), dict) else {}

    backend = _safe_choice(dialog.get("backend"), ALLOWED_DIALOG_BACKENDS, DEFAULT_DIALOG_BACKEND)  # type: ignore[union-attr]
    logs_enabled = _safe_bool(logs.get("enabled"), DEFAULT_LOGS_ENABLED)  # type: ignore[union-attr]
    logs_dir = _safe_dir(logs.get("dir"), DEFAULT_LOGS_DIR)  # type: ignore[union-attr]

    # Environment wins over the file.
    if DIALOG_BACKEND_ENV_VAR in env:
        backend = _safe_choice(env.get(DIALOG_BACKEND_ENV_VAR), ALLOWED_DIALOG_BACKENDS, backend)
    if DEBUG_LOG_ENV_VAR in env:
        logs_enabled = _safe_bool(env.get(DEBUG_LOG_ENV_VAR), logs_enabled)
    if str(env.get(LOGS_DIR_ENV_VAR) or "").strip():
        logs_dir = _safe_dir(env.get(LOGS_DIR_ENV_VAR), DEFAULT_LOGS_DIR)

    return Settings(
        dialog_backend=backend,
        dialog_title=_safe_label(dialog.get("title"), DEFAULT_DIALOG_TITLE),  # type: ignore[union-attr]
        accept_label=_safe_label(dialog.get("accept_label"), DEFAULT_ACCEPT_LABEL),  # type: ignore[union-attr]
        decline_label=_safe_label(dialog.get("decline_label"), DEFAULT_DECLINE_LABEL),  # type: ignore[union-attr]
        logs_enabled=logs_enabled,
        logs_dir=logs_dir,
        logs_max_file_bytes=_safe_positive_int(
            logs.get("max_file_bytes"),  # type: ignore[union-attr]
            DEFAULT_LOGS_MAX_FILE_BYTES,
        ),
        logs_max_files=_safe_positive_int(
            logs.get("max_files"),  # type: ignore[union-attr]
            DEFAULT_LOGS_MAX_FILES,
        ),
        logs_redaction=_safe_choice(
            logs.get("redaction"),  # type: ignore[union-attr]
            ALLOWED_LOG_REDACTION,
            DEFAULT_LOGS_REDACTION,
        ),
        config_path=path,
    )
