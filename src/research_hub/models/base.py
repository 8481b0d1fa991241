from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Column


def utc_now() -> datetime:
    """Return current UTC time as naive datetime (for PostgreSQL TIMESTAMP).

    Database columns use TIMESTAMP WITHOUT TIME ZONE, so we strip tzinfo.
    All times are stored in UTC by convention.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def json_list_column(**kwargs: Any) -> Column:
    """A non-null JSON column holding a list of strings.

    Each field needs its own Column instance; SQLAlchemy binds a column
    to exactly one table.
    """
    return Column(JSON, nullable=False, **kwargs)
