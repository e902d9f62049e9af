"""Error sanitization utilities to prevent credential leakage in logs."""

import re


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"access[_\s]?key[_\s]?id[:=\s]+([A-Z0-9]{16,128})",
    r"secret[_\s]?access[_\s]?key[:=\s]+([A-Za-z0-9/+=]{40})",
    r"session[_\s]?token[:=\s]+([A-Za-z0-9/+=]+)",
    r"token[:=\s]+([A-Za-z0-9\-_\.]{20,})",
]

# AWS access key ids as they appear inline in error messages
ACCESS_KEY_ID_PATTERN = r"\b(?:AKIA|ASIA)[A-Z0-9]{16}\b"

# Account ids embedded in ARNs (arn:aws:iam::123456789012:role/x)
ARN_ACCOUNT_PATTERN = r"(arn:aws[a-zA-Z\-]*:[a-z0-9\-]*:[a-z0-9\-]*:)\d{12}(:)"


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with credentials and account ids redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(
            pattern,
            lambda m: m.group(0).replace(m.group(1), "[REDACTED]"),
            sanitized,
            flags=re.IGNORECASE,
        )

    sanitized = re.sub(ACCESS_KEY_ID_PATTERN, "[REDACTED]", sanitized)
    sanitized = re.sub(ARN_ACCOUNT_PATTERN, r"\1[REDACTED]\2", sanitized)

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    return sanitize_error_message(str(error))
