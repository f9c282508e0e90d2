"""
Tests for reading metadata models at the package boundary.
"""

from types import SimpleNamespace

import pytest

from cubegraph import CubeDefinition, JoinEdge, MemberDefinition, MetadataModel, MetadataModelError
from cubegraph.metadata import case_text, sql_source_text


class TestFromDict:
    def test_reads_cubes_and_joins(self):
        model = MetadataModel.from_dict(
            {
                "cubes": {
                    "orders": {
                        "name": "orders",
                        "sql": "SELECT * FROM db1.orders",
                        "dimensions": {"status": {"type": "string", "sql": "status"}},
                        "measures": {"count": {"type": "count"}},
                    }
                },
                "joins": {"orders-users": {"from": "orders", "to": "users"}},
            }
        )

        cube = model.cubes["orders"]
        assert cube.sql_text() == "SELECT * FROM db1.orders"
        assert cube.dimensions["status"] == MemberDefinition(type="string", sql="status")
        assert cube.measures["count"] == MemberDefinition(type="count")
        assert model.joins["orders-users"] == JoinEdge(from_cube="orders", to_cube="users")

    def test_members_are_optional(self):
        model = MetadataModel.from_dict({"cubes": {"c": {"name": "c", "sql": "SELECT 1"}}})

        assert model.cubes["c"].dimensions == {}
        assert model.cubes["c"].measures == {}
        assert model.joins == {}

    def test_preserves_cube_order(self):
        model = MetadataModel.from_dict(
            {"cubes": {k: {"name": k, "sql": "SELECT 1"} for k in ["z", "a", "m"]}}
        )

        assert list(model.cubes) == ["z", "a", "m"]

    def test_typed_definitions_are_kept(self):
        cube = CubeDefinition(name="c", sql="SELECT 1")

        model = MetadataModel.from_dict({"cubes": {"c": cube}})

        assert model.cubes["c"] is cube


class TestFromTransformer:
    def test_snake_case_transformer(self):
        transformer = SimpleNamespace(
            cube_evaluator=SimpleNamespace(
                evaluated_cubes={
                    "orders": SimpleNamespace(
                        name="orders",
                        sql=lambda: "SELECT 1",
                        dimensions={},
                        measures={},
                    )
                }
            ),
            join_graph=SimpleNamespace(edges={"e": SimpleNamespace(from_cube="a", to_cube="b")}),
        )

        model = MetadataModel.from_transformer(transformer)

        assert model.cubes["orders"].sql_text() == "SELECT 1"
        assert model.joins["e"] == JoinEdge(from_cube="a", to_cube="b")

    def test_mapping_transformer(self):
        transformer = {
            "cubeEvaluator": {"evaluatedCubes": {}},
            "joinGraph": {"edges": {}},
        }

        assert MetadataModel.from_transformer(transformer) == MetadataModel()


class TestValidation:
    """Shape problems raise MetadataModelError naming the offending path."""

    @pytest.mark.parametrize(
        "data, message",
        [
            ([], "metadata: expected a mapping"),
            ({"cubes": []}, "cubes: expected a mapping"),
            ({"cubes": {"c": {"sql": "SELECT 1"}}}, "cubes.c: missing required field 'name'"),
            ({"cubes": {"c": {"name": 3, "sql": "SELECT 1"}}}, "cubes.c.name: expected a string"),
            (
                {"cubes": {"c": {"name": "c", "sql": 3}}},
                "cubes.c.sql: expected a string or a callable",
            ),
            ({"cubes": {"c": {"name": "c"}}}, "cubes.c: missing required field 'sql'"),
            (
                {"cubes": {"c": {"name": "c", "sql": "SELECT 1", "dimensions": {"d": {}}}}},
                "cubes.c.dimensions.d: missing required field 'type'",
            ),
            (
                {"cubes": {"c": {"name": "c", "sql": "SELECT 1", "measures": []}}},
                "cubes.c.measures: expected a mapping",
            ),
            ({"joins": {"e": {"from": "a"}}}, "joins.e: missing required field 'to'"),
        ],
    )
    def test_invalid_shapes(self, data, message):
        with pytest.raises(MetadataModelError) as exc_info:
            MetadataModel.from_dict(data)

        assert message in str(exc_info.value)

    def test_sql_callable_must_return_string(self):
        """A sql callable returning something other than text is rejected."""
        cube = CubeDefinition(name="orders", sql=lambda: None)

        with pytest.raises(MetadataModelError, match="orders.sql: expected a string, got NoneType"):
            cube.sql_text()

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            MetadataModel.from_dict({"cubes": None})


class TestDocumentationText:
    def test_string_sql(self):
        assert sql_source_text("status") == "status"

    def test_missing_sql(self):
        assert sql_source_text(None) is None

    def test_builtin_falls_back_to_repr(self):
        assert sql_source_text(len) == repr(len)

    def test_case_with_callables(self):
        case = {"when": [{"sql": "amount > 100", "label": "big"}], "else": {"label": "small"}}

        text = case_text(case)

        assert '"label": "small"' in text
        assert text.startswith("{\n  ")
