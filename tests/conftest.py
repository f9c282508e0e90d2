"""Shared fixtures for cube graph tests."""

import pytest

from cubegraph import CubeDefinition, JoinEdge, MemberDefinition, MetadataModel


@pytest.fixture
def sales_model():
    """Two cubes reading from overlapping tables, joined orders -> users."""
    return MetadataModel(
        cubes={
            "orders": CubeDefinition(
                name="orders",
                sql=lambda: "SELECT * FROM db1.orders",
                dimensions={
                    "status": MemberDefinition(type="string", sql="status"),
                    "size": MemberDefinition(
                        type="string",
                        case={"when": [{"sql": "amount > 100", "label": "big"}]},
                    ),
                    "id": MemberDefinition(type="number"),
                },
                measures={
                    "count": MemberDefinition(type="count"),
                    "total": MemberDefinition(type="sum", sql="amount"),
                },
            ),
            "users": CubeDefinition(
                name="users",
                sql="""
                SELECT u.id, u.name, COUNT(o.id) AS order_count
                FROM db1.users u
                LEFT JOIN db1.orders o ON o.user_id = u.id
                GROUP BY u.id, u.name
                """,
                dimensions={"status": MemberDefinition(type="string", sql="status")},
            ),
        },
        joins={"orders-users": JoinEdge(from_cube="orders", to_cube="users")},
    )
