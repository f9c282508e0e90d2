"""
Tests for Graphviz rendering of cube graphs.
"""

from cubegraph import CubeDefinition, MetadataModel, build_graph, visualize_cube_graph


def test_visualize_cube_graph(sales_model):
    dot = visualize_cube_graph(build_graph(sales_model))
    source = dot.source

    assert "Cube Dependencies" in source
    assert '"db1.orders"' in source
    assert "style=dashed" in source
    assert "SELECT" in source
    assert '"dimension-orders->status"' in source


def test_visualize_without_members(sales_model):
    source = visualize_cube_graph(build_graph(sales_model), include_members=False).source

    assert "dimension-orders->status" not in source
    assert '"db1.users"' in source


def test_cube_references_resolve_to_cube_key():
    """SELECT references use the cube name, drawn edges use the cube node."""
    model = MetadataModel(
        cubes={"orders_key": CubeDefinition(name="Orders", sql="SELECT * FROM db1.orders")}
    )

    source = visualize_cube_graph(build_graph(model)).source

    assert '"db1.orders" -> orders_key' in source


def test_similar_ids_stay_distinct():
    """A table db1.orders and a cube keyed db1_orders are separate nodes."""
    model = MetadataModel(
        cubes={"db1_orders": CubeDefinition(name="db1_orders", sql="SELECT * FROM db1.orders")}
    )

    source = visualize_cube_graph(build_graph(model)).source

    assert '"db1.orders" -> db1_orders' in source
    assert "db1_orders -> db1_orders" not in source
