"""Input validators shared by schemas and services."""

import re
from typing import Final

USERNAME_REGEX: Final[str] = r"^[A-Za-z0-9_]{3,50}$"
MAX_FILENAME_LENGTH: Final[int] = 100
DEFAULT_FILENAME: Final[str] = "file.pdf"

_USERNAME_PATTERN: Final[re.Pattern[str]] = re.compile(USERNAME_REGEX)
_UNSAFE_FILENAME_CHARS: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9._-]+")


def is_institutional_email(email: str, domain: str) -> bool:
    """Return True if the address belongs to the institutional domain.

    Only an exact ``@<domain>`` suffix counts; subdomains and look-alikes
    such as ``user@evil-<domain>`` do not.
    """
    email = email.strip().lower()
    local, sep, host = email.rpartition("@")
    return bool(local) and sep == "@" and host == domain.lower()


def validate_username_format(username: str) -> str:
    """Validate username: 3-50 letters, numbers or underscores."""
    if not _USERNAME_PATTERN.match(username):
        raise ValueError(
            "Username must be 3-50 characters and contain only letters, numbers, "
            "and underscores"
        )
    return username


def sanitize_filename(filename: str | None) -> str:
    """Make an uploaded filename safe to embed in a storage key.

    Keeps letters, digits, dots, hyphens and underscores; other runs collapse
    to a single underscore. Leading dots are stripped so the result is never
    hidden or a relative path component.

    Examples:
        >>> sanitize_filename("My CV (final).pdf")
        'My_CV_final_.pdf'
        >>> sanitize_filename("../.hidden.pdf")
        'hidden.pdf'
    """
    if not filename:
        return DEFAULT_FILENAME
    # Browsers on Windows may send the full client path
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_FILENAME_CHARS.sub("_", name).lstrip(".")
    if not name.strip("_"):
        return DEFAULT_FILENAME
    if len(name) > MAX_FILENAME_LENGTH:
        stem, dot, ext = name.rpartition(".")
        if dot and len(ext) <= 10:
            name = stem[: MAX_FILENAME_LENGTH - len(ext) - 1] + "." + ext
        else:
            name = name[:MAX_FILENAME_LENGTH]
    return name
