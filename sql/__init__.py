"""
===============================================
SQL statement building package.
===============================================

This package provides a fluent, stateful statement builder that renders
SELECT, INSERT, UPDATE, DELETE and COUNT statements as plain SQL text.

The package follows a clear organization:
    - literals.py: value-to-literal formatting used by predicate setters
    - query_builder.py: QueryBuilder, its QueryState and error types

Architecture:
    - query_builder.py imports from literals.py (not vice versa)
    - Clause setters mutate builder state and return the builder
    - Terminal renderers read state and return SQL strings

Example:
    >>> from sql import QueryBuilder
    >>>
    >>> QueryBuilder().table('users').where({'id': 1}).get()
    "SELECT * FROM users WHERE id = '1'"
"""

__version__ = "1.0.0"
__all__ = [
    'QueryBuilder', 'QueryState', 'as_text',
    'QueryBuilderError', 'EmptyInputError', 'MissingConditionError',
    'format_value', 'quote_literal', 'render_condition',
]

from .literals import format_value, quote_literal, render_condition
from .query_builder import (
    EmptyInputError,
    MissingConditionError,
    QueryBuilder,
    QueryBuilderError,
    QueryState,
    as_text,
)
