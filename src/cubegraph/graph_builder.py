"""
Build the cube dependency graph from a metadata model.

Two passes over the cubes:
1. Cube, Dimension and Measure nodes plus the Joins references
2. Parse each cube's SQL and walk it for Table nodes and SELECT references

A cube whose SQL does not parse is logged and contributes no tables; the
rest of the build is unaffected.
"""

import logging
from typing import Any, List, Optional, Set, Union

from .metadata import CubeDefinition, MemberDefinition, MetadataModel, case_text, sql_source_text
from .models import (
    DEFAULT_WORKSPACE,
    ComponentType,
    CubeGraph,
    GraphComponent,
    GraphReference,
    ReferenceType,
    SqlParseError,
)
from .sql_parser import DEFAULT_DIALECT, CubeSqlParser
from .table_walker import TableLineageWalker

logger = logging.getLogger(__name__)

DIMENSION_ID_PREFIX = "dimension-"
MEASURE_ID_PREFIX = "measure-"


def _sql_description(text: str) -> str:
    return f"```sql\n{text}\n```"


def dimension_description(dimension: MemberDefinition) -> str:
    """Markdown description: the sql source, else the case expression, else empty"""
    text = sql_source_text(dimension.sql)
    if text is not None:
        return _sql_description(text)
    if dimension.case is not None:
        return f"```json\n{case_text(dimension.case)}\n```"
    return ""


def measure_description(measure: MemberDefinition) -> str:
    """Markdown description: the sql source, else the measure type"""
    text = sql_source_text(measure.sql)
    if text is not None:
        return _sql_description(text)
    return measure.type


class CubeGraphBuilder:
    """
    Builds a CubeGraph from a MetadataModel.

    Each call to build() starts from scratch; nothing is kept between builds.

    Args:
        dialect: sqlglot dialect of the cubes' SQL
        workspace: Workspace every component is placed in
        legacy_member_ids: Give measures the ``dimension-`` id prefix, as
            existing graphs expect. When False measures use ``measure-``.
        parser: Parser to use instead of a CubeSqlParser for ``dialect``

    Example:
        builder = CubeGraphBuilder(dialect="postgres")
        graph = builder.build(MetadataModel.from_transformer(transformer))
    """

    def __init__(
        self,
        dialect: str = DEFAULT_DIALECT,
        workspace: str = DEFAULT_WORKSPACE,
        legacy_member_ids: bool = True,
        parser: Optional[CubeSqlParser] = None,
    ):
        self.dialect = dialect
        self.workspace = workspace
        self.legacy_member_ids = legacy_member_ids
        self.parser = parser or CubeSqlParser(dialect=dialect)

    def build(self, model: Union[MetadataModel, Any]) -> CubeGraph:
        """
        Build the graph.

        Args:
            model: A MetadataModel, or a raw metadata transformer exposing
                ``cubeEvaluator.evaluatedCubes`` and ``joinGraph.edges``

        Returns:
            CubeGraph with components ordered Cube, Dimension, Measure, Table

        Raises:
            MetadataModelError: If a raw transformer does not have the expected shape
        """
        if not isinstance(model, MetadataModel):
            model = MetadataModel.from_transformer(model)

        seen_ids: Set[str] = set()
        cube_components = [self._cube_component(key, cube) for key, cube in model.cubes.items()]
        seen_ids.update(c.custom_id for c in cube_components)

        references = [
            GraphReference(
                custom_id=edge_key,
                source=edge.from_cube,
                target=edge.to_cube,
                type=ReferenceType.JOINS,
            )
            for edge_key, edge in model.joins.items()
        ]

        dimension_components: List[GraphComponent] = []
        measure_components: List[GraphComponent] = []
        measure_prefix = DIMENSION_ID_PREFIX if self.legacy_member_ids else MEASURE_ID_PREFIX
        for cube in model.cubes.values():
            for key, dimension in cube.dimensions.items():
                self._add_unique(
                    dimension_components,
                    seen_ids,
                    GraphComponent(
                        custom_id=f"{DIMENSION_ID_PREFIX}{cube.name}->{key}",
                        name=key,
                        type=ComponentType.DIMENSION,
                        workspace=self.workspace,
                        parent=cube.name,
                        description=dimension_description(dimension),
                    ),
                )
            for key, measure in cube.measures.items():
                self._add_unique(
                    measure_components,
                    seen_ids,
                    GraphComponent(
                        custom_id=f"{measure_prefix}{cube.name}->{key}",
                        name=key,
                        type=ComponentType.MEASURE,
                        workspace=self.workspace,
                        parent=cube.name,
                        description=measure_description(measure),
                    ),
                )

        walker = TableLineageWalker(references=references, workspace=self.workspace)
        for cube in model.cubes.values():
            self._walk_cube_sql(cube, walker)

        # SELECT references are kept even when the table id is already taken
        table_components: List[GraphComponent] = []
        for table in walker.components:
            self._add_unique(table_components, seen_ids, table)

        graph = CubeGraph(
            components=cube_components
            + dimension_components
            + measure_components
            + table_components,
            references=walker.references,
        )
        logger.info(
            "Built cube graph: %d components, %d references",
            len(graph.components),
            len(graph.references),
        )
        return graph

    def _cube_component(self, cube_key: str, cube: CubeDefinition) -> GraphComponent:
        return GraphComponent(
            custom_id=cube_key,
            name=cube.name,
            type=ComponentType.CUBE,
            workspace=self.workspace,
        )

    @staticmethod
    def _add_unique(
        components: List[GraphComponent], seen_ids: Set[str], component: GraphComponent
    ) -> None:
        if component.custom_id in seen_ids:
            logger.warning(
                "Duplicate component id %s (%s), keeping the first one",
                component.custom_id,
                component.type.value,
            )
            return
        seen_ids.add(component.custom_id)
        components.append(component)

    def _walk_cube_sql(self, cube: CubeDefinition, walker: TableLineageWalker) -> None:
        sql = cube.sql_text()
        try:
            ast = self.parser.astify(sql)
        except SqlParseError as e:
            logger.debug("Parsing SQL of cube %s failed", cube.name, exc_info=True)
            logger.warning("Error when parsing SQL of cube %s: %s", cube.name, e)
            logger.debug("SQL of cube %s:\n%s", cube.name, sql)
            return
        walker.walk(cube.name, ast)


def build_graph(model: Union[MetadataModel, Any], **options: Any) -> CubeGraph:
    """
    Build the dependency graph of a metadata model.

    Convenience wrapper around CubeGraphBuilder; ``options`` are passed to
    its constructor.

    Example:
        graph = build_graph(model, dialect="snowflake")
    """
    return CubeGraphBuilder(**options).build(model)


__all__ = [
    "CubeGraphBuilder",
    "build_graph",
    "dimension_description",
    "measure_description",
    "DIMENSION_ID_PREFIX",
    "MEASURE_ID_PREFIX",
]
