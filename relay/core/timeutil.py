from datetime import datetime, timezone

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def to_wire(ts: datetime) -> str:
    # SQLite hands back naive datetimes; everything we store is UTC.
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
