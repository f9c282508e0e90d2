"""
Hand a finished cube graph to an external graph sync API.

The sync itself (network calls, workspace resolution) is done by the
injected callable. Credentials, the workspace mapping and extra options are
passed through untouched.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Union

from .export import JSONExporter
from .graph_builder import CubeGraphBuilder
from .metadata import MetadataModel
from .models import CubeGraph

logger = logging.getLogger(__name__)


class GraphSyncProtocol(Protocol):
    """Protocol defining the sync API call."""

    def __call__(
        self,
        api_properties: Any,
        workspaces: Dict[str, str],
        graph: Dict[str, Any],
        options: List[Any],
    ) -> Any:
        """Synchronize ``graph`` into the workspaces named by ``workspaces``."""
        ...


def sync_cube_graph(
    graph: CubeGraph,
    api_properties: Any,
    workspaces: Dict[str, str],
    sync: GraphSyncProtocol,
    options: Optional[List[Any]] = None,
) -> Any:
    """
    Synchronize a cube graph.

    Args:
        graph: The graph to synchronize, sent as its JSON payload
        api_properties: Credentials / connection settings of the sync API
        workspaces: Logical workspace name -> remote workspace id
        sync: The sync API call
        options: Extra options for the sync call

    Returns:
        Whatever the sync call returns. Errors it raises propagate.
    """
    payload = JSONExporter.export(graph)
    logger.info(
        "Syncing cube graph: %d components, %d references",
        len(payload["components"]),
        len(payload["references"]),
    )
    return sync(api_properties, workspaces, payload, list(options or []))


def sync_metadata_model(
    model: Union[MetadataModel, Any],
    api_properties: Any,
    workspaces: Dict[str, str],
    sync: GraphSyncProtocol,
    options: Optional[List[Any]] = None,
    **build_options: Any,
) -> Any:
    """
    Build the graph of a metadata model and synchronize it.

    ``build_options`` are passed to CubeGraphBuilder.
    """
    graph = CubeGraphBuilder(**build_options).build(model)
    return sync_cube_graph(graph, api_properties, workspaces, sync, options)


__all__ = ["GraphSyncProtocol", "sync_cube_graph", "sync_metadata_model"]
