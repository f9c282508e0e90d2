"""
Table lineage extraction from parsed cube SQL.

Walks a sqlglot AST to find every qualified table a cube reads from and
records a Table node plus a SELECT reference for each occurrence.

CTEs and set operations (UNION/INTERSECT/EXCEPT) are transparent: tables
found inside them are attributed to the cube itself. Derived tables in FROM
and unqualified names (including CTE names) do not resolve to a stable
``db.table`` key and are skipped.
"""

import logging
from typing import Any, Iterable, List, Optional, Set

from sqlglot import exp

from .models import (
    DEFAULT_WORKSPACE,
    ComponentType,
    GraphComponent,
    GraphReference,
    ReferenceType,
)

logger = logging.getLogger(__name__)

SET_OPERATIONS = (exp.Union, exp.Intersect, exp.Except)


def _ctes(node: exp.Expression) -> List[exp.CTE]:
    """CTEs attached to a SELECT or set operation"""
    # Note: sqlglot >=28.0.0 uses "with_" instead of "with" (Python keyword)
    with_clause = node.args.get("with_") or node.args.get("with")
    if not with_clause:
        return []
    return [cte for cte in with_clause.expressions if isinstance(cte, exp.CTE)]


def _table_sources(select: exp.Select) -> List[exp.Expression]:
    """Everything a SELECT reads from: the FROM clause and its JOINs"""
    sources = []

    # Note: sqlglot >=28.0.0 uses "from_" instead of "from" (Python keyword)
    from_clause = select.args.get("from_") or select.args.get("from")
    if from_clause:
        if from_clause.this is not None:
            sources.append(from_clause.this)
        sources.extend(from_clause.expressions)

    for join in select.args.get("joins") or []:
        if join.this is not None:
            sources.append(join.this)

    return sources


def table_key(source: exp.Expression) -> Optional[str]:
    """
    Get the ``db.table`` key of a table source.

    Returns None for anything that is not a db-qualified table: derived
    tables, table functions, CTE names, bare table names.
    """
    if not isinstance(source, exp.Table):
        return None
    if not source.db or not source.name:
        return None
    return f"{source.db}.{source.name}"


class TableLineageWalker:
    """
    Accumulates Table nodes and SELECT references across all cubes of a build.

    The accumulators may be passed in so several walkers (or the graph
    builder) share them; the visited-key set is what makes a Table node
    appear only once per build.

    Example:
        walker = TableLineageWalker()
        walker.walk("orders", parser.astify(cube.sql_text()))
        walker.components  # Table nodes
        walker.references  # SELECT references
    """

    def __init__(
        self,
        components: Optional[List[GraphComponent]] = None,
        references: Optional[List[GraphReference]] = None,
        visited_table_keys: Optional[Set[str]] = None,
        workspace: str = DEFAULT_WORKSPACE,
    ):
        self.components = components if components is not None else []
        self.references = references if references is not None else []
        self.visited_table_keys = visited_table_keys if visited_table_keys is not None else set()
        self.workspace = workspace
        self._reference_ids = {reference.custom_id for reference in self.references}

    def walk(self, source_name: str, ast: Any) -> None:
        """
        Record every qualified table read by ``ast`` as lineage of ``source_name``.

        A list of statements, or anything that is not a SELECT or set
        operation, is ignored. Never raises on malformed input.
        """
        if isinstance(ast, list) or not self._is_query(ast):
            logger.debug("Ignoring non-query SQL of %s: %s", source_name, type(ast).__name__)
            return

        # Stack, so branches and CTEs are visited in the order they are written
        pending = [ast]
        seen: Set[int] = set()

        while pending:
            node = pending.pop()
            # Parenthesized queries: (SELECT ...) UNION (SELECT ...)
            while isinstance(node, exp.Subquery):
                node = node.this

            # Guard against malformed, cyclic input
            if node is None or id(node) in seen:
                continue
            seen.add(id(node))

            if isinstance(node, exp.Select):
                self._record_tables(source_name, _table_sources(node))
                pending.extend(reversed([cte.this for cte in _ctes(node)]))
            elif isinstance(node, SET_OPERATIONS):
                pending.append(node.expression)
                pending.append(node.this)
                pending.extend(reversed([cte.this for cte in _ctes(node)]))

    @staticmethod
    def _is_query(node: Any) -> bool:
        while isinstance(node, exp.Subquery):
            node = node.this
        return isinstance(node, (exp.Select,) + SET_OPERATIONS)

    def _record_tables(self, source_name: str, sources: Iterable[exp.Expression]) -> None:
        for source in sources:
            key = table_key(source)
            if key is None:
                logger.debug("Skipping unqualified source in %s: %s", source_name, source)
                continue

            # One reference per occurrence, one node per table
            self.references.append(
                GraphReference(
                    custom_id=self._next_reference_id(f"{source_name}-{key}"),
                    source=source_name,
                    target=key,
                    type=ReferenceType.SELECT,
                )
            )

            if key not in self.visited_table_keys:
                self.visited_table_keys.add(key)
                self.components.append(
                    GraphComponent(
                        custom_id=key,
                        name=key,
                        type=ComponentType.TABLE,
                        workspace=self.workspace,
                    )
                )

    def _next_reference_id(self, base_id: str) -> str:
        """Unique reference id: base_id, then base_id-2, base_id-3, ..."""
        custom_id = base_id
        suffix = 1
        while custom_id in self._reference_ids:
            suffix += 1
            custom_id = f"{base_id}-{suffix}"
        self._reference_ids.add(custom_id)
        return custom_id


def walk(
    source_name: str,
    ast: Any,
    components: List[GraphComponent],
    references: List[GraphReference],
    visited_table_keys: Set[str],
    workspace: str = DEFAULT_WORKSPACE,
) -> None:
    """
    Append Table nodes and SELECT references for ``ast`` to the given accumulators.

    Args:
        source_name: Lineage source of every reference (the cube's name)
        ast: Parsed SQL (a sqlglot expression, or a list of them)
        components: Table nodes are appended here
        references: SELECT references are appended here
        visited_table_keys: Keys of tables that already have a node; updated in place
        workspace: Workspace of new Table nodes
    """
    walker = TableLineageWalker(components, references, visited_table_keys, workspace)
    walker.walk(source_name, ast)


__all__ = ["TableLineageWalker", "walk", "table_key"]
