"""
Pure visualization functions for cube graphs.

These functions translate a CubeGraph into Graphviz DOT format.
No business logic - just presentation layer.
"""

import graphviz

from .models import ComponentType, CubeGraph, ReferenceType

# Color scheme for different component types
COMPONENT_COLORS = {
    ComponentType.CUBE: "#4CAF50",  # Green
    ComponentType.DIMENSION: "#2196F3",  # Blue
    ComponentType.MEASURE: "#FF9800",  # Orange
    ComponentType.TABLE: "#9E9E9E",  # Grey
}

COMPONENT_SHAPES = {
    ComponentType.CUBE: "box3d",
    ComponentType.DIMENSION: "ellipse",
    ComponentType.MEASURE: "ellipse",
    ComponentType.TABLE: "cylinder",
}


def _sanitize_graphviz_id(node_id: str) -> str:
    """
    Sanitize a node ID for use in Graphviz.

    Graphviz interprets colons as node:port syntax, so we need to replace
    them. Other characters are left alone; graphviz quotes such ids.
    """
    return node_id.replace(":", "__")


def visualize_cube_graph(graph: CubeGraph, include_members: bool = True) -> graphviz.Digraph:
    """
    Create Graphviz visualization of a CubeGraph.

    Args:
        graph: The cube graph to draw
        include_members: Draw Dimension and Measure nodes (attached to their cube)

    Returns:
        graphviz.Digraph object ready to render
    """
    dot = graphviz.Digraph(comment="Cube Dependencies")
    dot.attr(rankdir="LR")
    dot.attr("node", style="filled", fontname="Arial", fontsize="12")
    dot.attr("edge", fontsize="10", color="#555555")

    # Cube references use the display name, cube nodes are keyed by cube key
    cube_ids_by_name = {}
    for component in graph.components_of_type(ComponentType.CUBE):
        cube_ids_by_name.setdefault(component.name, component.custom_id)

    def _node_id(ref: str) -> str:
        return _sanitize_graphviz_id(cube_ids_by_name.get(ref, ref))

    for component in graph.components:
        if not include_members and component.type in (
            ComponentType.DIMENSION,
            ComponentType.MEASURE,
        ):
            continue
        dot.node(
            _sanitize_graphviz_id(component.custom_id),
            label=component.name,
            shape=COMPONENT_SHAPES[component.type],
            fillcolor=COMPONENT_COLORS[component.type],
        )
        if component.parent is not None:
            dot.edge(
                _node_id(component.parent),
                _sanitize_graphviz_id(component.custom_id),
                arrowhead="none",
                color="#BBBBBB",
            )

    for reference in graph.references:
        if reference.type == ReferenceType.JOINS:
            dot.edge(
                _node_id(reference.source),
                _node_id(reference.target),
                style="dashed",
                label="joins",
            )
        else:
            # Data flows from the table into the cube
            dot.edge(_node_id(reference.target), _node_id(reference.source), label="SELECT")

    return dot


__all__ = ["visualize_cube_graph"]
