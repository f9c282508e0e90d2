"""
Metadata model input types and boundary adapters.

The metadata model is computed elsewhere (a cube schema compiler) and
reaches this package as an untyped object graph. The adapters here read it
once, check its shape, and produce typed definitions the graph builder can
rely on. Any shape problem raises MetadataModelError naming the offending
path.

Usage:
    from cubegraph.metadata import MetadataModel

    model = MetadataModel.from_transformer(meta_transformer)
    model = MetadataModel.from_dict(json.load(f))
"""

import inspect
import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .models import MetadataModelError

SqlSource = Union[str, Callable[..., Any]]

_MISSING = object()


# ============================================================================
# Input Types
# ============================================================================


@dataclass
class MemberDefinition:
    """A dimension or measure of a cube."""

    type: str
    sql: Optional[SqlSource] = None  # Documentation only, never executed here
    case: Optional[Any] = None  # Structured conditional (dimensions)


# Dimensions and measures share a shape
DimensionDefinition = MemberDefinition
MeasureDefinition = MemberDefinition


@dataclass
class CubeDefinition:
    """A cube: a named analytical entity backed by a SQL query."""

    name: str
    sql: SqlSource
    dimensions: Dict[str, MemberDefinition] = field(default_factory=dict)
    measures: Dict[str, MemberDefinition] = field(default_factory=dict)

    def sql_text(self) -> str:
        """Produce the SELECT statement backing this cube"""
        sql = self.sql() if callable(self.sql) else self.sql
        if not isinstance(sql, str):
            raise MetadataModelError(
                f"{self.name}.sql: expected a string, got {type(sql).__name__}"
            )
        return sql


@dataclass
class JoinEdge:
    """A precomputed join relationship between two cubes."""

    from_cube: str
    to_cube: str


@dataclass
class MetadataModel:
    """
    Snapshot of a cube metadata model.

    cubes: cube key -> CubeDefinition (the key may differ from the cube name)
    joins: edge key -> JoinEdge
    """

    cubes: Dict[str, CubeDefinition] = field(default_factory=dict)
    joins: Dict[str, JoinEdge] = field(default_factory=dict)

    @classmethod
    def from_transformer(cls, transformer: Any) -> "MetadataModel":
        """
        Read a compiled metadata transformer.

        Expects ``cubeEvaluator.evaluatedCubes`` and ``joinGraph.edges``,
        reachable by attribute or by mapping key. The snake_case spellings
        ``cube_evaluator.evaluated_cubes`` and ``join_graph.edges`` are
        accepted as well.

        Raises:
            MetadataModelError: If the transformer does not have that shape
        """
        evaluator = _require(transformer, "metadata", "cubeEvaluator", "cube_evaluator")
        cubes = _require(evaluator, "cubeEvaluator", "evaluatedCubes", "evaluated_cubes")
        join_graph = _require(transformer, "metadata", "joinGraph", "join_graph")
        edges = _require(join_graph, "joinGraph", "edges")
        return cls._from_parts(cubes, edges, "cubeEvaluator.evaluatedCubes", "joinGraph.edges")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MetadataModel":
        """
        Read a plain dictionary (e.g. loaded from JSON or YAML).

        Format:
            {
                "cubes": {
                    "<key>": {"name": ..., "sql": ..., "dimensions": {...}, "measures": {...}}
                },
                "joins": {"<key>": {"from": ..., "to": ...}}
            }

        Raises:
            MetadataModelError: If the dictionary does not have that shape
        """
        if not isinstance(data, Mapping):
            raise MetadataModelError(
                f"metadata: expected a mapping, got {type(data).__name__}"
            )
        return cls._from_parts(data.get("cubes", {}), data.get("joins", {}), "cubes", "joins")

    @classmethod
    def _from_parts(
        cls, cubes: Any, edges: Any, cubes_path: str, edges_path: str
    ) -> "MetadataModel":
        if not isinstance(cubes, Mapping):
            raise MetadataModelError(
                f"{cubes_path}: expected a mapping, got {type(cubes).__name__}"
            )
        if not isinstance(edges, Mapping):
            raise MetadataModelError(
                f"{edges_path}: expected a mapping, got {type(edges).__name__}"
            )

        model = cls()
        for cube_key, raw_cube in cubes.items():
            model.cubes[cube_key] = _read_cube(raw_cube, f"{cubes_path}.{cube_key}")
        for edge_key, raw_edge in edges.items():
            model.joins[edge_key] = _read_join_edge(raw_edge, f"{edges_path}.{edge_key}")
        return model


# ============================================================================
# Boundary Helpers
# ============================================================================


def _lookup(obj: Any, *names: str) -> Any:
    """Return the first attribute or mapping key found on obj"""
    for name in names:
        if isinstance(obj, Mapping):
            if name in obj:
                return obj[name]
        elif hasattr(obj, name):
            return getattr(obj, name)
    return _MISSING


def _require(obj: Any, path: str, *names: str) -> Any:
    value = _lookup(obj, *names)
    if value is _MISSING:
        raise MetadataModelError(f"{path}: missing required field '{names[0]}'")
    return value


def _read_cube(raw: Any, path: str) -> CubeDefinition:
    if isinstance(raw, CubeDefinition):
        return raw

    name = _require(raw, path, "name")
    if not isinstance(name, str):
        raise MetadataModelError(f"{path}.name: expected a string, got {type(name).__name__}")

    sql = _require(raw, path, "sql")
    if not (isinstance(sql, str) or callable(sql)):
        raise MetadataModelError(
            f"{path}.sql: expected a string or a callable, got {type(sql).__name__}"
        )

    return CubeDefinition(
        name=name,
        sql=sql,
        dimensions=_read_members(_lookup(raw, "dimensions"), f"{path}.dimensions"),
        measures=_read_members(_lookup(raw, "measures"), f"{path}.measures"),
    )


def _read_members(raw: Any, path: str) -> Dict[str, MemberDefinition]:
    if raw is _MISSING or raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise MetadataModelError(f"{path}: expected a mapping, got {type(raw).__name__}")

    members = {}
    for key, raw_member in raw.items():
        if isinstance(raw_member, MemberDefinition):
            members[key] = raw_member
            continue

        member_path = f"{path}.{key}"
        member_type = _require(raw_member, member_path, "type")
        sql = _lookup(raw_member, "sql")
        case = _lookup(raw_member, "case")
        members[key] = MemberDefinition(
            type=str(member_type),
            sql=None if sql is _MISSING else sql,
            case=None if case is _MISSING else case,
        )
    return members


def _read_join_edge(raw: Any, path: str) -> JoinEdge:
    if isinstance(raw, JoinEdge):
        return raw
    from_cube = _require(raw, path, "from", "from_cube")
    to_cube = _require(raw, path, "to", "to_cube")
    return JoinEdge(from_cube=str(from_cube), to_cube=str(to_cube))


# ============================================================================
# Documentation Text
# ============================================================================


def sql_source_text(sql: Optional[SqlSource]) -> Optional[str]:
    """
    Get the textual representation of a member's ``sql``.

    Strings are returned as-is. For callables the source code is used;
    when it is not available (builtins, interactively defined functions)
    the callable's repr is used instead.
    """
    if sql is None:
        return None
    if isinstance(sql, str):
        return sql
    try:
        return inspect.getsource(sql).strip()
    except (OSError, TypeError):
        return repr(sql)


def case_text(case: Any) -> str:
    """Serialize a structured ``case`` expression to indented JSON"""

    def _default(value: Any) -> str:
        if callable(value):
            return sql_source_text(value) or ""
        return str(value)

    return json.dumps(case, indent=2, default=_default)


__all__ = [
    "MemberDefinition",
    "DimensionDefinition",
    "MeasureDefinition",
    "CubeDefinition",
    "JoinEdge",
    "MetadataModel",
    "sql_source_text",
    "case_text",
]
