"""
Export functionality for cube graphs.

Supports exporting to various formats:
- JSON: The payload handed to the graph sync API
- CSV: Component and reference listings for spreadsheets
"""

import csv
import json
from pathlib import Path
from typing import Any, Dict

from .models import CubeGraph


class JSONExporter:
    """
    Export a cube graph to the JSON payload consumed by the sync API.

    The payload holds ``components`` and ``references`` with camelCase keys
    (``customId``, ``workspace``, ``name``, ``type``, ...).
    """

    @staticmethod
    def export(graph: CubeGraph) -> Dict[str, Any]:
        """
        Export a cube graph to a JSON-serializable dictionary.

        Example:
            data = JSONExporter.export(graph)
            with open("cubes.json", "w") as f:
                json.dump(data, f)
        """
        return graph.to_payload()

    @staticmethod
    def export_to_file(graph: CubeGraph, file_path: str, indent: int = 2):
        """
        Export a cube graph to a JSON file.

        Args:
            graph: The cube graph to export
            file_path: Path to output JSON file
            indent: JSON indentation (default: 2)
        """
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(JSONExporter.export(graph), f, indent=indent)


class CSVExporter:
    """
    Export components and references to CSV (one-way export only).

    Use JSONExporter for anything machine-readable.
    """

    @staticmethod
    def export_components_to_file(graph: CubeGraph, file_path: str):
        """
        Export components to a CSV file, in graph order.

        Args:
            graph: The cube graph to export
            file_path: Path to output CSV file
        """
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["custom_id", "type", "name", "workspace", "parent", "description"])
            for component in graph.components:
                writer.writerow(
                    [
                        component.custom_id,
                        component.type.value,
                        component.name,
                        component.workspace,
                        component.parent or "",
                        component.description or "",
                    ]
                )

    @staticmethod
    def export_references_to_file(graph: CubeGraph, file_path: str):
        """
        Export references to a CSV file, in graph order.

        Args:
            graph: The cube graph to export
            file_path: Path to output CSV file
        """
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["custom_id", "type", "source", "target"])
            for reference in graph.references:
                writer.writerow(
                    [
                        reference.custom_id,
                        reference.type.value,
                        reference.source,
                        reference.target,
                    ]
                )


__all__ = [
    "JSONExporter",
    "CSVExporter",
]
