"""Utility functions for masking sensitive data in logs and outputs."""

import re

_EMAIL_PATTERN = re.compile(r"\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b")
_TOKEN_PATTERN = re.compile(r"\b[A-Za-z0-9_-]{32,}\b")


def mask_email(email: str) -> str:
    """
    Mask email address for logging purposes.

    Example: user@example.com -> u***@e***.com

    Args:
        email: Email address to mask

    Returns:
        Masked email address
    """
    if not email or "@" not in email:
        return "***"

    parts = email.split("@")
    if len(parts) != 2:
        return "***"

    local, domain = parts
    masked_local = local[0] + "***" if local else "***"

    domain_parts = domain.split(".")
    if len(domain_parts) >= 2 and domain_parts[0]:
        masked_domain = domain_parts[0][0] + "***." + domain_parts[-1]
    else:
        masked_domain = "***"

    return f"{masked_local}@{masked_domain}"


def mask_sensitive_data(text: str) -> str:
    """
    Mask emails and long tokens in free text before it is logged.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    text = _EMAIL_PATTERN.sub(lambda m: mask_email(m.group()), text)
    return _TOKEN_PATTERN.sub("***REDACTED***", text)
