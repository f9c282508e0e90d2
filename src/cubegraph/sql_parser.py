"""
SQL parsing for cube definitions.

Thin wrapper around sqlglot: the parser produces the AST, the table walker
reads it. Nothing here inspects the AST beyond splitting statements.
"""

from typing import List, Union

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from .models import SqlParseError

# Dialect used when none is configured
DEFAULT_DIALECT = "mysql"

ParsedSql = Union[exp.Expression, List[exp.Expression]]


class CubeSqlParser:
    """
    Parse cube SQL into sqlglot expressions.

    The parser holds no state between calls, so one instance can be shared
    across builds.
    """

    def __init__(self, dialect: str = DEFAULT_DIALECT):
        self.dialect = dialect

    def astify(self, sql: str) -> ParsedSql:
        """
        Parse SQL text.

        Args:
            sql: SQL text, usually a single SELECT statement

        Returns:
            The expression of a single statement, or the list of expressions
            when the text holds zero or several statements.

        Raises:
            SqlParseError: If sqlglot cannot tokenize or parse the text
        """
        try:
            statements = [s for s in sqlglot.parse(sql, read=self.dialect) if s is not None]
        except SqlglotError as e:
            raise SqlParseError(f"Could not parse SQL ({self.dialect}): {e}") from e

        if len(statements) == 1:
            return statements[0]
        return statements


__all__ = ["DEFAULT_DIALECT", "CubeSqlParser", "ParsedSql"]
