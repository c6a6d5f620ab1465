"""Storage layer: asyncpg connection pool and the table gateway.

Components:
- Database: Pooled asyncpg connection manager
- TableGateway: Row-level query/insert/update/delete returning GatewayResult
- Filter / Order / Join: Query building blocks (use eq, gte, is_in, ...)
"""

from thinkscore.storage.database import Database, close_database, get_database
from thinkscore.storage.gateway import (
    Filter,
    GatewayError,
    GatewayResult,
    Join,
    Order,
    TableGateway,
    eq,
    gt,
    gte,
    is_in,
    lt,
    lte,
    neq,
)

__all__ = [
    "Database",
    "get_database",
    "close_database",
    "TableGateway",
    "GatewayResult",
    "GatewayError",
    "Filter",
    "Order",
    "Join",
    "eq",
    "neq",
    "gt",
    "gte",
    "lt",
    "lte",
    "is_in",
]
