"""Table gateway: row-level reads and writes against named tables.

Every call returns a ``GatewayResult`` instead of raising, so callers decide
whether a missing row is an empty result or a failure. ``unwrap`` is the one
place where gateway errors become domain errors.

Filters, orderings, and joins are small value objects that compile to
parameterised SQL (``$1..$n``). Identifiers are validated against a strict
pattern before they are interpolated.

Joined columns come back nested under the join alias, e.g. a scores query
joined to answers yields ``{"score": 80, "answers": {"user_id": "u1"}}``.
A left join with no matching row yields ``{"answers": None}``.
"""

import logging
import re
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar

import asyncpg

from thinkscore.errors import NotFoundError, UpstreamDataError
from thinkscore.storage.database import Database

logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorCode = Literal["not_found", "conflict", "constraint", "invalid", "unavailable", "database"]

FilterOp = Literal["eq", "neq", "gt", "gte", "lt", "lte", "in"]

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*(\.[a-z_][a-z0-9_]*)?$")

_OPERATORS: dict[str, str] = {
    "eq": "=",
    "neq": "<>",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
}


# ── Results ──────────────────────────────────────────────


@dataclass
class GatewayError:
    """A failure reported by the gateway.

    Attributes:
        code: Failure class (not_found, conflict, constraint, invalid,
            unavailable, database).
        message: Human-readable detail from the database driver.
    """

    code: ErrorCode
    message: str


@dataclass
class GatewayResult(Generic[T]):
    """Either ``data`` or ``error``; never both."""

    data: T | None = None
    error: GatewayError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_not_found(self) -> bool:
        return self.error is not None and self.error.code == "not_found"

    def unwrap(self, operation: str) -> T:
        """Return ``data`` or raise the matching domain error.

        Args:
            operation: Short description used in the error message
                (e.g. "fetch profile").

        Raises:
            NotFoundError: The gateway reported ``not_found``.
            UpstreamDataError: Any other gateway error.
        """
        if self.error is None:
            return self.data  # type: ignore[return-value]
        if self.error.code == "not_found":
            raise NotFoundError(f"Failed to {operation}: {self.error.message}")
        raise UpstreamDataError(f"Failed to {operation}: {self.error.message}")


# ── Query building blocks ────────────────────────────────


@dataclass(frozen=True)
class Filter:
    column: str
    op: FilterOp
    value: Any


@dataclass(frozen=True)
class Order:
    column: str
    descending: bool = False


@dataclass(frozen=True)
class Join:
    """A foreign-key join from the base table (or an earlier join) to ``table``.

    Attributes:
        table: Joined table name.
        local_key: Column holding the foreign key, unqualified for the base
            table or ``alias.column`` for a column of an earlier join.
        foreign_key: Referenced column in ``table``.
        columns: Columns of ``table`` to return.
        inner: Inner join (drop base rows without a match) instead of left join.
        alias: Name used to qualify filters and nest results (default: table).
    """

    table: str
    local_key: str
    foreign_key: str = "id"
    columns: tuple[str, ...] = ()
    inner: bool = False
    alias: str | None = None

    @property
    def name(self) -> str:
        return self.alias or self.table


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def neq(column: str, value: Any) -> Filter:
    return Filter(column, "neq", value)


def gt(column: str, value: Any) -> Filter:
    return Filter(column, "gt", value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


def lt(column: str, value: Any) -> Filter:
    return Filter(column, "lt", value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, "lte", value)


def is_in(column: str, values: Sequence[Any]) -> Filter:
    return Filter(column, "in", list(values))


# ── SQL compilation ──────────────────────────────────────


def _ident(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier {name!r}")
    return name


def _qualify(table: str, column: str) -> str:
    """Qualify bare column names with the base table."""
    _ident(column)
    return column if "." in column else f"{table}.{column}"


@dataclass
class _Params:
    values: list[Any] = field(default_factory=list)

    def add(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"


def _compile_where(table: str, filters: Sequence[Filter], params: _Params) -> str:
    clauses: list[str] = []
    for f in filters:
        column = _qualify(table, f.column)
        if f.op == "in":
            clauses.append(f"{column} = ANY({params.add(list(f.value))})")
        elif f.value is None and f.op in ("eq", "neq"):
            clauses.append(f"{column} IS {'NOT ' if f.op == 'neq' else ''}NULL")
        else:
            clauses.append(f"{column} {_OPERATORS[f.op]} {params.add(f.value)}")
    return ("WHERE " + " AND ".join(clauses)) if clauses else ""


def _compile_joins(table: str, joins: Sequence[Join]) -> tuple[str, list[str]]:
    sql_parts: list[str] = []
    select_parts: list[str] = []
    for j in joins:
        name = _ident(j.name)
        kind = "INNER JOIN" if j.inner else "LEFT JOIN"
        alias_sql = f" AS {name}" if j.alias else ""
        sql_parts.append(
            f"{kind} {_ident(j.table)}{alias_sql} "
            f"ON {_qualify(table, j.local_key)} = {name}.{_ident(j.foreign_key)}"
        )
        for col in j.columns:
            select_parts.append(f'{name}.{_ident(col)} AS "{name}.{col}"')
    return " ".join(sql_parts), select_parts


def _compile_order(table: str, order_by: Sequence[Order]) -> str:
    if not order_by:
        return ""
    parts = [
        f"{_qualify(table, o.column)} {'DESC' if o.descending else 'ASC'}"
        for o in order_by
    ]
    return "ORDER BY " + ", ".join(parts)


def _plain(row: Any) -> dict[str, Any]:
    """Record -> dict, with UUID values as strings."""
    return {k: str(v) if isinstance(v, uuid.UUID) else v for k, v in dict(row).items()}


def _nest(row: Any, joins: Sequence[Join]) -> dict[str, Any]:
    """Turn ``{"answers.user_id": ...}`` keys into nested dicts."""
    flat = _plain(row)
    nested: dict[str, Any] = {}
    for key, value in flat.items():
        if "." not in key:
            nested[key] = value
    for j in joins:
        prefix = f"{j.name}."
        sub = {k[len(prefix):]: v for k, v in flat.items() if k.startswith(prefix)}
        if not j.inner and all(v is None for v in sub.values()):
            nested[j.name] = None
        else:
            nested[j.name] = sub
    return nested


def _translate(exc: Exception) -> GatewayError:
    if isinstance(exc, asyncpg.UniqueViolationError):
        return GatewayError("conflict", str(exc))
    if isinstance(exc, asyncpg.IntegrityConstraintViolationError):
        return GatewayError("constraint", str(exc))
    if isinstance(exc, (asyncpg.DataError, asyncpg.SyntaxOrAccessError)):
        return GatewayError("invalid", str(exc))
    if isinstance(exc, (OSError, asyncpg.InterfaceError, RuntimeError)):
        return GatewayError("unavailable", str(exc))
    return GatewayError("database", str(exc))


_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, RuntimeError)


# ── Gateway ──────────────────────────────────────────────


class TableGateway:
    """Generic tabular access over the asyncpg ``Database``.

    Usage:
        gateway = TableGateway(db)
        result = await gateway.query(
            "scores",
            columns=("answer_id", "score"),
            joins=(Join("answers", "answer_id", columns=("user_id",), inner=True),),
            filters=(eq("answers.question_id", 7),),
            order_by=(Order("score", descending=True),),
            limit=50,
        )
        rows = result.unwrap("fetch question scores")
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def query(
        self,
        table: str,
        *,
        columns: Sequence[str] | None = None,
        filters: Sequence[Filter] = (),
        joins: Sequence[Join] = (),
        order_by: Sequence[Order] = (),
        limit: int | None = None,
        offset: int | None = None,
    ) -> GatewayResult[list[dict[str, Any]]]:
        """Select rows. An empty match is a successful empty list."""
        try:
            table = _ident(table)
            params = _Params()
            base_cols = (
                [f"{table}.{_ident(c)}" for c in columns] if columns else [f"{table}.*"]
            )
            join_sql, join_cols = _compile_joins(table, joins)
            where_sql = _compile_where(table, filters, params)
            sql = f"SELECT {', '.join(base_cols + join_cols)} FROM {table} {join_sql} {where_sql} "
            sql += _compile_order(table, order_by)
            if limit is not None:
                sql += f" LIMIT {params.add(limit)}"
            if offset:
                sql += f" OFFSET {params.add(offset)}"
        except ValueError as e:
            return GatewayResult(error=GatewayError("invalid", str(e)))

        try:
            rows = await self._db.fetch(sql, *params.values)
        except _DRIVER_ERRORS as e:
            logger.warning("Query on %s failed: %s", table, e)
            return GatewayResult(error=_translate(e))
        return GatewayResult(data=[_nest(row, joins) for row in rows])

    async def query_one(
        self,
        table: str,
        *,
        columns: Sequence[str] | None = None,
        filters: Sequence[Filter] = (),
        joins: Sequence[Join] = (),
        order_by: Sequence[Order] = (),
    ) -> GatewayResult[dict[str, Any]]:
        """Select the first matching row; no match is a ``not_found`` error."""
        result = await self.query(
            table,
            columns=columns,
            filters=filters,
            joins=joins,
            order_by=order_by,
            limit=1,
        )
        if not result.ok:
            return GatewayResult(error=result.error)
        if not result.data:
            return GatewayResult(error=GatewayError("not_found", f"No matching row in {table}"))
        return GatewayResult(data=result.data[0])

    async def count(
        self,
        table: str,
        *,
        filters: Sequence[Filter] = (),
        joins: Sequence[Join] = (),
    ) -> GatewayResult[int]:
        """Count matching rows."""
        try:
            table = _ident(table)
            params = _Params()
            join_sql, _ = _compile_joins(table, joins)
            where_sql = _compile_where(table, filters, params)
            sql = f"SELECT COUNT(*) FROM {table} {join_sql} {where_sql}"
        except ValueError as e:
            return GatewayResult(error=GatewayError("invalid", str(e)))

        try:
            value = await self._db.fetchval(sql, *params.values)
        except _DRIVER_ERRORS as e:
            logger.warning("Count on %s failed: %s", table, e)
            return GatewayResult(error=_translate(e))
        return GatewayResult(data=int(value or 0))

    async def insert(self, table: str, record: dict[str, Any]) -> GatewayResult[dict[str, Any]]:
        """Insert one row and return it as stored."""
        result = await self.insert_many(table, [record])
        if not result.ok:
            return GatewayResult(error=result.error)
        return GatewayResult(data=result.data[0])

    async def insert_many(
        self,
        table: str,
        records: Sequence[dict[str, Any]],
    ) -> GatewayResult[list[dict[str, Any]]]:
        """Insert rows sharing the same keys in one statement."""
        if not records:
            return GatewayResult(data=[])
        try:
            table = _ident(table)
            keys = list(records[0].keys())
            if any(list(r.keys()) != keys for r in records):
                raise ValueError("All records must have the same columns")
            columns = ", ".join(_ident(k) for k in keys)
            params = _Params()
            rows_sql = ", ".join(
                "(" + ", ".join(params.add(r[k]) for k in keys) + ")" for r in records
            )
            sql = f"INSERT INTO {table} ({columns}) VALUES {rows_sql} RETURNING *"
        except ValueError as e:
            return GatewayResult(error=GatewayError("invalid", str(e)))

        try:
            rows = await self._db.fetch(sql, *params.values)
        except _DRIVER_ERRORS as e:
            logger.warning("Insert into %s failed: %s", table, e)
            return GatewayResult(error=_translate(e))
        return GatewayResult(data=[_plain(row) for row in rows])

    async def update(
        self,
        table: str,
        filters: Sequence[Filter],
        patch: dict[str, Any],
    ) -> GatewayResult[list[dict[str, Any]]]:
        """Update matching rows and return them. Zero matches is an empty list."""
        try:
            table = _ident(table)
            if not patch:
                raise ValueError("Empty patch")
            if not filters:
                raise ValueError("Refusing to update without filters")
            params = _Params()
            set_sql = ", ".join(f"{_ident(k)} = {params.add(v)}" for k, v in patch.items())
            where_sql = _compile_where(table, filters, params)
            sql = f"UPDATE {table} SET {set_sql} {where_sql} RETURNING *"
        except ValueError as e:
            return GatewayResult(error=GatewayError("invalid", str(e)))

        try:
            rows = await self._db.fetch(sql, *params.values)
        except _DRIVER_ERRORS as e:
            logger.warning("Update on %s failed: %s", table, e)
            return GatewayResult(error=_translate(e))
        return GatewayResult(data=[_plain(row) for row in rows])

    async def delete(
        self,
        table: str,
        filters: Sequence[Filter],
    ) -> GatewayResult[list[dict[str, Any]]]:
        """Delete matching rows and return them."""
        try:
            table = _ident(table)
            if not filters:
                raise ValueError("Refusing to delete without filters")
            params = _Params()
            where_sql = _compile_where(table, filters, params)
            sql = f"DELETE FROM {table} {where_sql} RETURNING *"
        except ValueError as e:
            return GatewayResult(error=GatewayError("invalid", str(e)))

        try:
            rows = await self._db.fetch(sql, *params.values)
        except _DRIVER_ERRORS as e:
            logger.warning("Delete from %s failed: %s", table, e)
            return GatewayResult(error=_translate(e))
        return GatewayResult(data=[_plain(row) for row in rows])
