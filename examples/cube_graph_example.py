"""
Simple example building the dependency graph of a small cube model
"""

import json

from cubegraph import JSONExporter, MetadataModel, build_graph

# Metadata as it would be dumped from a compiled cube schema
metadata = {
    "cubes": {
        "orders": {
            "name": "orders",
            "sql": """
                WITH paid AS (
                    SELECT * FROM shop.payments WHERE status = 'paid'
                )
                SELECT o.*, p.amount
                FROM shop.orders o
                JOIN paid p ON p.order_id = o.id
            """,
            "dimensions": {
                "status": {"type": "string", "sql": "status"},
                "size": {
                    "type": "string",
                    "case": {
                        "when": [{"sql": "amount > 100", "label": "big"}],
                        "else": {"label": "small"},
                    },
                },
            },
            "measures": {
                "count": {"type": "count"},
                "revenue": {"type": "sum", "sql": "amount"},
            },
        },
        "customers": {
            "name": "customers",
            "sql": """
                SELECT id, email FROM shop.customers
                UNION ALL
                SELECT id, email FROM legacy.customers
            """,
            "dimensions": {"email": {"type": "string", "sql": "email"}},
            "measures": {},
        },
    },
    "joins": {"orders-customers": {"from": "orders", "to": "customers"}},
}


def main():
    print("=" * 80)
    print("Cube Dependency Graph Example")
    print("=" * 80)
    print()

    model = MetadataModel.from_dict(metadata)
    graph = build_graph(model)

    print(f"Components ({len(graph.components)}):")
    for component in graph.components:
        parent = f" (in {component.parent})" if component.parent else ""
        print(f"  [{component.type.value}] {component.custom_id}{parent}")
    print()

    print(f"References ({len(graph.references)}):")
    for reference in graph.references:
        print(f"  {reference.source} --{reference.type.value}--> {reference.target}")
    print()

    print("Sync payload (first component):")
    print(json.dumps(JSONExporter.export(graph)["components"][0], indent=2))


if __name__ == "__main__":
    main()
