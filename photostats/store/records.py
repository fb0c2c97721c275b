"""Read-only access to the gallery's photo records (SQLite).

The database and its schema belong to the gallery application; this module
only runs aggregate queries against it.  A RecordStore owns one connection,
opened and closed explicitly by whoever constructs it (the API lifespan or
the CLI).  All values are passed as query parameters; table and column names
come from settings and are validated as plain identifiers.

Timestamps are compared through SQLite's ``datetime()`` so stored ISO-8601
values with a ``Z`` or ``+HH:MM`` suffix are normalized to UTC first.
"""

import logging
import re
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from types import TracebackType
from typing import Self

from photostats.config import get_settings

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class RecordStoreError(RuntimeError):
    """A photo record query failed; the report cannot be produced."""


def _identifier(name: str) -> str:
    if not _IDENTIFIER_RE.match(name):
        msg = f"Invalid SQL identifier: {name!r}"
        raise ValueError(msg)
    return name


def _to_utc_text(boundary: datetime) -> str:
    """Format a boundary as the UTC text SQLite's datetime() produces."""
    if boundary.tzinfo is not None:
        boundary = boundary.astimezone(UTC)
    return boundary.strftime("%Y-%m-%d %H:%M:%S")


class RecordStore:
    """Aggregate queries over the photos table."""

    def __init__(
        self,
        db_path: str | None = None,
        *,
        table: str | None = None,
        date_column: str | None = None,
        size_column: str | None = None,
    ) -> None:
        settings = get_settings()
        self.db_path = db_path if db_path is not None else settings.db_path
        self.table = _identifier(table or settings.photos_table)
        self.date_column = _identifier(date_column or settings.date_column)
        self.size_column = _identifier(size_column or settings.size_column)
        self._conn: sqlite3.Connection | None = None

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    def open(self) -> None:
        """Open the connection with WAL mode for reads alongside the gallery's writer.

        The database file must already exist: a wrong path raises instead of
        leaving a new empty database behind.
        """
        if self._conn is not None:
            return
        if not self.db_path:
            msg = "Record store not configured (DB_PATH is empty)"
            raise RecordStoreError(msg)
        try:
            uri = f"{Path(self.db_path).resolve().as_uri()}?mode=rw"
            conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            conn.execute("PRAGMA temp_store=MEMORY")
        except sqlite3.Error as exc:
            msg = f"Cannot open record store at {self.db_path}: {exc}"
            raise RecordStoreError(msg) from exc
        self._conn = conn
        logger.info("Opened record store %s", self.db_path)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info("Closed record store %s", self.db_path)

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def _fetchall(self, sql: str, params: tuple[object, ...] = ()) -> list[sqlite3.Row]:
        if self._conn is None:
            msg = "Record store is not open"
            raise RecordStoreError(msg)
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            msg = f"Record store query failed: {exc}"
            raise RecordStoreError(msg) from exc

    def count_all(self) -> int:
        rows = self._fetchall(f"SELECT count(*) AS n FROM {self.table}")  # noqa: S608
        return int(rows[0]["n"])

    def count_since(self, boundary: datetime) -> int:
        """Count records taken at or after *boundary*."""
        rows = self._fetchall(
            f"SELECT count(*) AS n FROM {self.table} WHERE datetime({self.date_column}) >= ?",  # noqa: S608
            (_to_utc_text(boundary),),
        )
        return int(rows[0]["n"])

    def daily_counts(self, since: datetime) -> dict[str, int]:
        """Per-date record counts at or after *since*, keyed ``YYYY-MM-DD``.

        Only dates with at least one record are present.
        """
        rows = self._fetchall(
            f"""SELECT DATE({self.date_column}) AS day, count(*) AS n
                FROM {self.table}
                WHERE datetime({self.date_column}) >= ?
                GROUP BY day
                ORDER BY day ASC""",  # noqa: S608
            (_to_utc_text(since),),
        )
        return {str(row["day"]): int(row["n"]) for row in rows if row["day"] is not None}

    def size_stats(self) -> tuple[int, float, int]:
        """Sum, average and max of the size column; 0 for an empty table."""
        col = self.size_column
        rows = self._fetchall(
            f"""SELECT COALESCE(sum({col}), 0) AS total_size,
                       COALESCE(avg({col}), 0) AS avg_size,
                       COALESCE(max({col}), 0) AS max_size
                FROM {self.table}""",  # noqa: S608
        )
        row = rows[0]
        return int(row["total_size"]), float(row["avg_size"]), int(row["max_size"])

    def ping(self) -> bool:
        """Return True if the store answers a trivial query."""
        try:
            self._fetchall("SELECT 1")
        except RecordStoreError:
            return False
        return True
