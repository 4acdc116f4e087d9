"""
Log-safe rendering helpers.

Callback payloads and 1C credentials end up in log lines; these helpers keep
the lines short and the secrets out.
"""


def truncate_text(text: str | None, max_len: int) -> str:
    """
    Shorten text for log previews.

    Rules:
    - None → empty string
    - Longer than max_len → first max_len chars + "..."
    """
    if not text:
        return ""
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def sanitize_secret(secret: str | None) -> str:
    """
    Mask a password or token for logs.
    """
    return "[hidden]" if secret else "[not set]"
