"""
==========================
Fluent SQL Query Builder.
==========================

This module provides QueryBuilder, a stateful builder that accumulates the
pieces of one SQL statement through chained calls and renders them into a
single string on demand. It never connects to a database, never escapes
values and never validates table or column names.

Clause setters (return the builder):
- table, select, union, join, left_join, right_join, full_join
- where, or_where, where_op, like
- group_by, having, order_by, limit
- min, max, sum, avg
- in_, not_in, exists

Terminal renderers (return SQL text):
- get, first, count, insert, update, delete

Clause order in a rendered SELECT is fixed and independent of the order in
which setters were called. Rendering reads state without clearing it; use
reset() or clone() to reuse a builder.

Usage:
    from sql.query_builder import QueryBuilder

    sql = (
        QueryBuilder()
        .table('users', 'u')
        .left_join('orders', 'u.id', '=', 'o.user_id', 'o')
        .select('u.name', {'COUNT(o.id)': 'orders'})
        .where({'u.active': True})
        .group_by('u.name')
        .order_by({'orders': 'DESC'})
        .get()
    )
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from core.config import BuilderConfig, config
from core.logger import get_logger
from sql.literals import current_timestamp, quote_literal, render_condition

logger = get_logger(__name__)


class QueryBuilderError(Exception):
    """Exception raised when a statement cannot be rendered.

    Base class of all builder failures.
    """
    pass


class EmptyInputError(QueryBuilderError):
    """Raised by insert/update when given no rows."""
    pass


class MissingConditionError(QueryBuilderError):
    """Raised by update when no WHERE predicate has been set.

    An unconditional UPDATE of every row is refused.
    """
    pass


@dataclass
class QueryState:
    """Accumulated, pre-rendered fragments of one statement.

    Attributes:
        tables: FROM targets, each optionally 'name AS alias'
        columns: SELECT projection list, never empty
        joins: Rendered JOIN clauses in call order
        conditions: WHERE fragments, ANDed at render time
        having_conditions: HAVING fragments, ANDed at render time
        group_by_columns: GROUP BY targets
        order_by_clause: Rendered 'ORDER BY ...' or None
        limit_clause: Rendered 'LIMIT ...' or None
        aggregate: (function, column) pair or None
        membership_clause: ('IN' | 'NOT IN', subquery) pair or None
        exists_subquery: Subquery appended as AND EXISTS, or None
        union_queries: Parenthesized queries joined by UNION
    """

    tables: List[str] = field(default_factory=list)
    columns: List[str] = field(default_factory=lambda: ['*'])
    joins: List[str] = field(default_factory=list)
    conditions: List[str] = field(default_factory=list)
    having_conditions: List[str] = field(default_factory=list)
    group_by_columns: List[str] = field(default_factory=list)
    order_by_clause: Optional[str] = None
    limit_clause: Optional[str] = None
    aggregate: Optional[Tuple[str, str]] = None
    membership_clause: Optional[Tuple[str, str]] = None
    exists_subquery: Optional[str] = None
    union_queries: List[str] = field(default_factory=list)


class QueryBuilder:
    """Fluent builder for SELECT, INSERT, UPDATE, DELETE and COUNT statements.

    Every clause setter mutates the builder in place and returns it, so calls
    can be chained. Instances are not thread-safe.

    Attributes:
        state: QueryState holding the accumulated fragments
        settings: BuilderConfig controlling timestamp stamping

    Example:
        >>> QueryBuilder().table('users').where({'id': 1}).get()
        "SELECT * FROM users WHERE id = '1'"
    """

    def __init__(self, settings: Optional[BuilderConfig] = None):
        """
        Args:
            settings: Optional override of config.builder
        """
        self.settings = settings or config.builder
        self.state = QueryState()

    # ==================
    # State management
    # ==================

    def reset(self) -> 'QueryBuilder':
        """Discard all accumulated state."""
        self.state = QueryState()
        return self

    def clone(self) -> 'QueryBuilder':
        """Return an independent copy sharing no mutable state."""
        other = QueryBuilder(self.settings)
        other.state = copy.deepcopy(self.state)
        return other

    # ================
    # Clause setters
    # ================

    def table(self, name: str, alias: Optional[str] = None) -> 'QueryBuilder':
        self.state.tables.append(f"{name} AS {alias}" if alias else name)
        return self

    def select(self, *columns: Union[str, Mapping[str, str]]) -> 'QueryBuilder':
        """
        Replace the projection list.

        Args:
            *columns: Column expressions, or mappings of column to alias.
                All entries of one mapping are joined into a single item.
        """
        rendered = []
        for column in columns:
            if isinstance(column, str):
                rendered.append(column)
            else:
                rendered.append(", ".join(
                    f"{name} AS {alias}" for name, alias in column.items()
                ))
        self.state.columns = rendered or ['*']
        return self

    def union(self, query: str) -> 'QueryBuilder':
        self.state.union_queries.append(f"({query})")
        return self

    def _set_aggregate(self, function: str, column: str) -> 'QueryBuilder':
        self.state.aggregate = (function, column)
        return self

    def min(self, column: str) -> 'QueryBuilder':
        return self._set_aggregate('MIN', column)

    def max(self, column: str) -> 'QueryBuilder':
        return self._set_aggregate('MAX', column)

    def sum(self, column: str) -> 'QueryBuilder':
        return self._set_aggregate('SUM', column)

    def avg(self, column: str) -> 'QueryBuilder':
        return self._set_aggregate('AVG', column)

    def in_(self, subquery: str) -> 'QueryBuilder':
        self.state.membership_clause = ('IN', subquery)
        return self

    def not_in(self, subquery: str) -> 'QueryBuilder':
        self.state.membership_clause = ('NOT IN', subquery)
        return self

    def exists(self, subquery: Union[str, 'QueryBuilder']) -> 'QueryBuilder':
        """
        Set the EXISTS subquery.

        Args:
            subquery: Raw SQL stored as given, or a QueryBuilder rendered
                with get() and wrapped in parentheses
        """
        if isinstance(subquery, QueryBuilder):
            self.state.exists_subquery = f"({subquery.get()})"
        else:
            self.state.exists_subquery = subquery
        return self

    def order_by(self, sort_columns: Optional[Mapping[str, str]] = None) -> 'QueryBuilder':
        """
        Set the ORDER BY clause from a mapping of column to ASC/DESC.

        An empty mapping leaves any previous ORDER BY in place.
        """
        order_clauses = ", ".join(
            f"{column} {direction}" for column, direction in (sort_columns or {}).items()
        )
        if order_clauses:
            self.state.order_by_clause = f"ORDER BY {order_clauses}"
        return self

    def group_by(self, *columns: str) -> 'QueryBuilder':
        self.state.group_by_columns = list(columns)
        return self

    def having(self, condition: str) -> 'QueryBuilder':
        self.state.having_conditions.append(condition)
        return self

    def limit(self, count: int) -> 'QueryBuilder':
        self.state.limit_clause = f"LIMIT {count}"
        return self

    def where_op(self, first: str, operator: str, second: str) -> 'QueryBuilder':
        """Append 'first operator second'. Operands are not quoted."""
        self.state.conditions.append(f"{first} {operator} {second}")
        return self

    def where(self, conditions: Mapping[str, Any]) -> 'QueryBuilder':
        """
        Append one fragment ANDing every column/value pair.

        Args:
            conditions: Mapping of column to value. A two-item list renders
                BETWEEN, a longer list renders IN, anything else renders '='.
        """
        self.state.conditions.append(" AND ".join(
            render_condition(column, value) for column, value in conditions.items()
        ))
        return self

    def or_where(self, conditions: Mapping[str, Any]) -> 'QueryBuilder':
        """Append one parenthesized fragment ORing every column/value pair."""
        or_clause = " OR ".join(
            render_condition(column, value) for column, value in conditions.items()
        )
        self.state.conditions.append(f"({or_clause})")
        return self

    def like(self, column: str, patterns: Union[str, Sequence[str]]) -> 'QueryBuilder':
        if isinstance(patterns, (list, tuple)):
            like_clauses = " OR ".join(
                f"{column} LIKE {quote_literal(pattern)}" for pattern in patterns
            )
            self.state.conditions.append(f"({like_clauses})")
        else:
            self.state.conditions.append(f"{column} LIKE {quote_literal(patterns)}")
        return self

    def _add_join(
        self,
        kind: str,
        table: str,
        first: str,
        operator: str,
        second: str,
        alias: Optional[str]
    ) -> 'QueryBuilder':
        alias_part = f"AS {alias}" if alias else ""
        self.state.joins.append(
            f"{kind} JOIN {table} {alias_part} ON {first} {operator} {second}"
        )
        return self

    def join(
        self,
        table: str,
        first: str,
        operator: str,
        second: str,
        alias: Optional[str] = None
    ) -> 'QueryBuilder':
        return self._add_join('INNER', table, first, operator, second, alias)

    def left_join(
        self,
        table: str,
        first: str,
        operator: str,
        second: str,
        alias: Optional[str] = None
    ) -> 'QueryBuilder':
        return self._add_join('LEFT', table, first, operator, second, alias)

    def right_join(
        self,
        table: str,
        first: str,
        operator: str,
        second: str,
        alias: Optional[str] = None
    ) -> 'QueryBuilder':
        return self._add_join('RIGHT', table, first, operator, second, alias)

    def full_join(
        self,
        table: str,
        first: str,
        operator: str,
        second: str,
        alias: Optional[str] = None
    ) -> 'QueryBuilder':
        return self._add_join('FULL OUTER', table, first, operator, second, alias)

    # ====================
    # Terminal renderers
    # ====================

    @property
    def _from_list(self) -> str:
        return ", ".join(self.state.tables)

    @property
    def _where_text(self) -> str:
        return " AND ".join(self.state.conditions)

    def get(self) -> str:
        """Render the SELECT statement."""
        return self._build_select()

    def first(self) -> str:
        """Render the SELECT statement limited to one row."""
        self.state.limit_clause = 'LIMIT 1'
        return self._build_select()

    def count(self, target: str = '*') -> str:
        """
        Render a COUNT query.

        Only tables, joins and WHERE conditions are applied; grouping,
        ordering, limits and aggregates are ignored.
        """
        sql = f"SELECT COUNT({target}) FROM {self._from_list}"

        if self.state.joins:
            sql += " " + " ".join(self.state.joins)

        if self.state.conditions:
            sql += f" WHERE {self._where_text}"

        logger.debug(f"Rendered COUNT: {sql}")
        return sql

    def insert(self, rows: List[Dict[str, Any]]) -> str:
        """
        Render a multi-row INSERT.

        Every row is stamped in place with the created and updated columns.
        The keys of the first row define the column list for all rows; keys
        missing from later rows render as 'null' rather than 'undefined',
        and no KeyError is raised for them.

        Args:
            rows: Row mappings of column to value

        Returns:
            SQL INSERT statement

        Raises:
            EmptyInputError: If rows is empty
        """
        if not rows:
            logger.error("Refusing to render INSERT without rows")
            raise EmptyInputError("No data to insert")

        now = current_timestamp(self.settings.timestamp_format)
        for row in rows:
            row[self.settings.created_column] = now
            row[self.settings.updated_column] = now

        keys = list(rows[0].keys())
        values = ", ".join(
            "(" + ", ".join(quote_literal(row.get(key)) for key in keys) + ")"
            for row in rows
        )

        sql = f"INSERT INTO {self._from_list} ({', '.join(keys)}) VALUES {values}"
        logger.debug(f"Rendered INSERT of {len(rows)} row(s): {sql}")
        return sql

    def update(self, rows: List[Dict[str, Any]]) -> str:
        """
        Render an UPDATE from the first row.

        Every row is stamped in place with the updated column, but only the
        first row is rendered.

        Raises:
            EmptyInputError: If rows is empty
            MissingConditionError: If no WHERE predicate was set
        """
        if not rows:
            logger.error("Refusing to render UPDATE without rows")
            raise EmptyInputError("No data to update")

        now = current_timestamp(self.settings.timestamp_format)
        for row in rows:
            row[self.settings.updated_column] = now

        assignments = ", ".join(
            f"{key} = {quote_literal(value)}" for key, value in rows[0].items()
        )

        if not self.state.conditions:
            logger.error(f"Refusing to render UPDATE of {self._from_list} without WHERE")
            raise MissingConditionError("WHERE condition is required")

        sql = f"UPDATE {self._from_list} SET {assignments} WHERE {self._where_text}"
        logger.debug(f"Rendered UPDATE: {sql}")
        return sql

    def delete(self) -> str:
        """Render a DELETE, with WHERE only if predicates were set."""
        sql = f"DELETE FROM {self._from_list}"
        if self.state.conditions:
            sql += f" WHERE {self._where_text}"
        logger.debug(f"Rendered DELETE: {sql}")
        return sql

    def _build_select(self) -> str:
        state = self.state

        # An active aggregate replaces the whole statement
        if state.aggregate and state.aggregate[1]:
            function, column = state.aggregate
            sql = f"SELECT {function}({column}) FROM {self._from_list}"
            if state.conditions:
                sql += f" WHERE {self._where_text}"
            logger.debug(f"Rendered aggregate SELECT: {sql}")
            return sql

        sql = f"SELECT {', '.join(state.columns)} FROM {self._from_list}"

        if state.union_queries:
            sql += " " + " UNION ".join(state.union_queries)

        if state.joins:
            sql += " " + " ".join(state.joins)

        if state.conditions:
            sql += f" WHERE {self._where_text}"

        # Appended even without a preceding WHERE
        if state.exists_subquery:
            sql += f" AND EXISTS {state.exists_subquery}"

        if state.group_by_columns:
            sql += f" GROUP BY {', '.join(state.group_by_columns)}"

        if state.having_conditions:
            sql += f" HAVING {' AND '.join(state.having_conditions)}"

        if state.membership_clause and state.membership_clause[1]:
            keyword, subquery = state.membership_clause
            sql += f" {keyword} ({subquery})"

        if state.order_by_clause:
            sql += f" {state.order_by_clause}"

        if state.limit_clause:
            sql += f" {state.limit_clause}"

        logger.debug(f"Rendered SELECT: {sql}")
        return sql


def as_text(statement: str) -> TextClause:
    """
    Wrap a rendered statement for execution through SQLAlchemy.

    Args:
        statement: SQL text returned by a QueryBuilder renderer

    Returns:
        TextClause accepted by Connection.execute()

    Example:
        >>> with engine.connect() as conn:
        ...     rows = conn.execute(as_text(builder.get())).fetchall()
    """
    return text(statement)
