from __future__ import annotations

from werkzeug.routing import IntegerConverter

# Largest value a SQLite/Postgres BIGINT primary key can hold.
MAX_ID = 2**63 - 1


def valid_id(value: int | None) -> bool:
    return value is not None and 0 < value <= MAX_ID


class IdConverter(IntegerConverter):
    """`<id:name>`: a positive integer that fits a primary key column.

    Anything outside that range does not match the route, so it 404s before
    reaching the database.
    """

    def __init__(self, map, *args, **kwargs):
        kwargs.setdefault("min", 1)
        kwargs.setdefault("max", MAX_ID)
        super().__init__(map, *args, **kwargs)
