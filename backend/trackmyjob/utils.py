import re
import uuid
from datetime import datetime, timezone


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def safe_filename(filename: str, default: str = "file") -> str:
    name = re.sub(r'[^\w\s.-]', '', filename or "").strip().replace(' ', '_')
    return name or default


def escape_like(value: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so user input matches literally."""
    for char in (escape, "%", "_"):
        value = value.replace(char, escape + char)
    return value
