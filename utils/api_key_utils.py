"""Shared API key utilities."""


def mask_api_key(api_key: str | None) -> str:
    """Return a display-safe form of an API key (first and last 4 chars)."""
    if not api_key:
        return "<unset>"
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:4]}...{api_key[-4:]}"


def redact_api_key(text: str, api_key: str | None) -> str:
    """Replace every occurrence of the key in text with its masked form."""
    if not api_key or not text:
        return text
    return text.replace(api_key, mask_api_key(api_key))
