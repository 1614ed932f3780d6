"""Command-line argument parsing into a confirmation request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from confirm.errors import UsageError

HELP_FLAG = "--help"
ICON_FLAG = "--icon"
AUTH_FLAG = "--auth"


@dataclass(frozen=True)
class ParsedRequest:
    """Resolved options for one confirmation run."""

    message: str
    icon_path: Optional[str] = None
    require_auth: bool = False


def is_help_request(args: Sequence[str]) -> bool:
    return not args or HELP_FLAG in args


def parse_request(args: Sequence[str]) -> ParsedRequest:
    """Scan ``args`` left to right.

    ``--icon`` takes the following token, ``--auth`` takes none, and every
    other token becomes part of the message. Help handling is left to the
    caller via :func:`is_help_request`.
    """
    tokens = list(args)
    message = ""
    icon_path: Optional[str] = None
    require_auth = False

    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token == ICON_FLAG:
            if index + 1 >= len(tokens):
                raise UsageError("--icon requires a path argument")
            icon_path = tokens[index + 1]
            index += 2
            continue
        if token == AUTH_FLAG:
            require_auth = True
        elif message:
            message = "{0} {1}".format(message, token)
        else:
            message = token
        index += 1

    if not message:
        raise UsageError("Message is required", show_usage=True)

    return ParsedRequest(message=message, icon_path=icon_path, require_auth=require_auth)
