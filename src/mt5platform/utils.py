import re
from datetime import UTC, datetime

UUID_RE = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")


def is_uuid_string(value: str) -> bool:
    return bool(UUID_RE.fullmatch(value))


def now() -> datetime:
    return datetime.now(UTC)
