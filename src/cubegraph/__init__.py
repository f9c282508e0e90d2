"""
cubegraph - Dependency graphs for cube metadata models

Turns a semantic layer's cubes, dimensions, measures and joins into a graph
of typed nodes and edges, including the physical tables each cube's SQL
reads from, ready to sync into a graph catalog.
"""

from importlib.metadata import version

__version__ = version("cubegraph")

# Import export functionality
from .export import CSVExporter, JSONExporter
from .graph_builder import CubeGraphBuilder, build_graph
from .metadata import (
    CubeDefinition,
    DimensionDefinition,
    JoinEdge,
    MeasureDefinition,
    MemberDefinition,
    MetadataModel,
)
from .models import (
    ComponentType,
    CubeGraph,
    GraphComponent,
    GraphReference,
    MetadataModelError,
    ReferenceType,
    SqlParseError,
)
from .sql_parser import CubeSqlParser
from .sync import GraphSyncProtocol, sync_cube_graph, sync_metadata_model
from .table_walker import TableLineageWalker

# Import visualization functions
from .visualizations import visualize_cube_graph

__all__ = [
    # Version
    "__version__",
    # Main entry points
    "build_graph",
    "CubeGraphBuilder",
    "sync_cube_graph",
    "sync_metadata_model",
    # Metadata model
    "MetadataModel",
    "CubeDefinition",
    "MemberDefinition",
    "DimensionDefinition",
    "MeasureDefinition",
    "JoinEdge",
    # Graph
    "CubeGraph",
    "GraphComponent",
    "GraphReference",
    "ComponentType",
    "ReferenceType",
    # SQL
    "CubeSqlParser",
    "TableLineageWalker",
    # Errors
    "MetadataModelError",
    "SqlParseError",
    # Sync
    "GraphSyncProtocol",
    # Export
    "JSONExporter",
    "CSVExporter",
    # Visualization
    "visualize_cube_graph",
]
