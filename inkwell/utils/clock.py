from datetime import datetime, timezone


def utcnow() -> datetime:
    # DB kolonları naive UTC tutuyor
    return datetime.now(timezone.utc).replace(tzinfo=None)
