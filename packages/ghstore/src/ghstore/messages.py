"""Commit messages for writes made through the store."""

from datetime import datetime, timezone


def now(moment: datetime | None = None) -> str:
    """UTC timestamp like ``2024-05-01 12:30:45.123``, without a zone suffix."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]


def create_message(moment: datetime | None = None) -> str:
    return f"create {now(moment)}"


def commit_message(path: str, moment: datetime | None = None) -> str:
    return f"commit {now(moment)}, {path}"


def delete_message(moment: datetime | None = None) -> str:
    return f"delete {now(moment)}"
