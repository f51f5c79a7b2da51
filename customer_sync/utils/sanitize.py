"""Input sanitation for values that end up on the wire or in storage"""

import re

_EMAIL_DISALLOWED = re.compile(r"[^A-Za-z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")
_TAGS = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def sanitize_email(value: str | None) -> str:
    """Drop every character not allowed in an e-mail address"""
    if not value:
        return ""
    return _EMAIL_DISALLOWED.sub("", value)


def clean_text(value: str | None) -> str:
    """Strip markup and collapse whitespace in a single-line text value"""
    if not value:
        return ""
    value = _TAGS.sub("", str(value))
    return _WHITESPACE.sub(" ", value).strip()
