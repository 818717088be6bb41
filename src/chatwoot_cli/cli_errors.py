"""Exit codes and error rendering for the command line."""
from __future__ import annotations

import json
import sys
from typing import Any, TextIO

import httpx
from pydantic import ValidationError

from chatwoot_cli.config.redact import scrub_secrets_in_text
from chatwoot_cli.domain.error_codes import (
    ErrorCode,
    StructuredError,
    new_structured_error,
    structured_error_from_error,
)
from chatwoot_cli.domain.errors import find_in_chain

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_AUTH = 3
EXIT_NOT_FOUND = 4
EXIT_FORBIDDEN = 5
EXIT_RATE_LIMITED = 6
EXIT_SERVER = 7
EXIT_NETWORK = 8

_EXIT_CODES: dict[ErrorCode, int] = {
    ErrorCode.BAD_REQUEST: EXIT_USAGE,
    ErrorCode.VALIDATION_FAILED: EXIT_USAGE,
    ErrorCode.CONFLICT: EXIT_USAGE,
    ErrorCode.UNAUTHORIZED: EXIT_AUTH,
    ErrorCode.NOT_FOUND: EXIT_NOT_FOUND,
    ErrorCode.FORBIDDEN: EXIT_FORBIDDEN,
    ErrorCode.RATE_LIMITED: EXIT_RATE_LIMITED,
    ErrorCode.SERVER_ERROR: EXIT_SERVER,
    ErrorCode.CIRCUIT_OPEN: EXIT_SERVER,
    ErrorCode.TIMEOUT: EXIT_NETWORK,
}


def exit_code_for(err: BaseException | None) -> int:
    if find_in_chain(err, httpx.TransportError) is not None:
        return EXIT_NETWORK

    structured = structured_error_from_error(err)
    if structured is None:
        return EXIT_ERROR
    code = _EXIT_CODES.get(structured.code)
    if code is not None:
        return code

    # Response models failing to parse is a server-side surprise, not bad input.
    if isinstance(err, ValueError) and not isinstance(err, ValidationError):
        return EXIT_USAGE
    return EXIT_ERROR


def _error_dict(structured: StructuredError) -> dict[str, Any]:
    data = structured.to_dict()
    data["message"] = scrub_secrets_in_text(data["message"])
    return data


def render_error(err: BaseException | None, *, output: str, stream: TextIO | None = None) -> None:
    stream = stream if stream is not None else sys.stderr
    structured = structured_error_from_error(err)
    if structured is None:
        structured = new_structured_error(ErrorCode.UNKNOWN, "unknown error")

    if output == "json":
        print(json.dumps(_error_dict(structured), indent=2), file=stream)
        return

    print(f"Error: {scrub_secrets_in_text(structured.message)}", file=stream)
    if structured.suggestion:
        print(f"Suggestion: {structured.suggestion}", file=stream)
    request_id = structured.context.get("request_id")
    if request_id:
        print(f"Request ID: {request_id}", file=stream)


def report_error(err: BaseException, *, output: str, stream: TextIO | None = None) -> int:
    """Render ``err`` and return the process exit code for it."""
    render_error(err, output=output, stream=stream)
    return exit_code_for(err)
