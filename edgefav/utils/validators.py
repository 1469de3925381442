"""Input validation utilities."""

from edgefav.core.errors import ValidationError


def require_name(name: str) -> str:
    """Trim a user supplied name, rejecting blanks."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Name is required")
    return cleaned


def require_url(url: str) -> str:
    """
    Trim a user supplied URL, rejecting blanks.

    Only presence is checked; the URL itself is passed through untouched.
    """
    cleaned = (url or "").strip()
    if not cleaned:
        raise ValidationError("URL is required")
    return cleaned


def sanitize_filename(filename: str) -> str:
    """Sanitize filename to prevent path traversal."""
    # Remove path separators and other dangerous characters
    dangerous_chars = ['/', '\\', '..', '\x00']
    sanitized = filename
    for char in dangerous_chars:
        sanitized = sanitized.replace(char, '_')

    # Limit length
    if len(sanitized) > 255:
        sanitized = sanitized[:255]

    return sanitized
