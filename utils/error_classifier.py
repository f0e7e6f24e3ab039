"""
Map any raised error onto the CLI's stable error taxonomy.

Tagged errors (AuthRequiredError, TransportError with a status code) are
classified by type. Errors raised elsewhere fall back to matching known
substrings in their message, so the table below stays the observable contract
either way. classify() never raises.
"""

from api.errors import AuthRequiredError, TransportError
from models.cli_error import CLIError

CREDENTIAL_ENV_VAR = "EXA_API_KEY"

SUGGESTIONS = {
    "AUTH_REQUIRED": f"Set {CREDENTIAL_ENV_VAR} environment variable or run 'exa auth'",
    "AUTH_INVALID": f"Check your {CREDENTIAL_ENV_VAR} value",
    "RATE_LIMITED": "Wait and retry, or reduce request frequency",
    "NETWORK_ERROR": "Check network connectivity",
}

# Checked in order; first match wins.
_SUBSTRING_RULES = (
    (CREDENTIAL_ENV_VAR, "AUTH_REQUIRED"),
    ("status 401", "AUTH_INVALID"),
    ("status 429", "RATE_LIMITED"),
    ("request failed", "NETWORK_ERROR"),
)


def _build(code: str, message: str) -> CLIError:
    if code == "AUTH_INVALID":
        message = "Invalid API key"
    return CLIError(
        code=code,
        message=message,
        recoverable=True,
        suggestion=SUGGESTIONS[code],
    )


def _code_for_tagged(error: BaseException) -> str | None:
    if isinstance(error, AuthRequiredError):
        return "AUTH_REQUIRED"
    if isinstance(error, TransportError):
        if error.status_code == 401:
            return "AUTH_INVALID"
        if error.status_code == 429:
            return "RATE_LIMITED"
        if error.status_code is None:
            return "NETWORK_ERROR"
    return None


def _code_for_message(message: str) -> str | None:
    for needle, code in _SUBSTRING_RULES:
        if needle in message:
            return code
    return None


def _safe_message(error: BaseException) -> str:
    try:
        message = str(error)
    except Exception:
        return type(error).__name__
    return message or type(error).__name__


def classify(error: BaseException) -> CLIError:
    """
    Classify an error into {code, message, recoverable, suggestion}.

    Args:
        error: Any exception raised while running a command

    Returns:
        CLIError with one of AUTH_REQUIRED, AUTH_INVALID, RATE_LIMITED,
        NETWORK_ERROR or UNKNOWN
    """
    message = _safe_message(error)
    code = _code_for_tagged(error) or _code_for_message(message)
    if code is None:
        return CLIError(code="UNKNOWN", message=message)
    return _build(code, message)
