"""Query execution package."""

from parish_ledger.queries.executor import (
    QueryExecutionError,
    QueryExecutor,
    default_date_range,
)

__all__ = ["QueryExecutionError", "QueryExecutor", "default_date_range"]
