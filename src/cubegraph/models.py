"""
Core data models for the cube dependency graph.

Contains all dataclass definitions for:
- Graph components (Cube, Dimension, Measure, Table nodes)
- Graph references (Joins and SELECT lineage edges)
- The finished graph handed to the sync API
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

# Workspace every component is placed in unless configured otherwise
DEFAULT_WORKSPACE = "cubes"


# ============================================================================
# Errors
# ============================================================================


class MetadataModelError(ValueError):
    """Raised when the metadata model does not have the expected shape."""


class SqlParseError(ValueError):
    """Raised when a cube's SQL cannot be parsed."""


# ============================================================================
# Graph Models
# ============================================================================


class ComponentType(Enum):
    """Type of graph component (node)"""

    CUBE = "Cube"
    DIMENSION = "Dimension"
    MEASURE = "Measure"
    TABLE = "Table"


class ReferenceType(Enum):
    """Type of graph reference (edge)"""

    JOINS = "Joins"  # Join relationship from the join graph
    SELECT = "SELECT"  # Cube reads from a physical table


@dataclass
class GraphComponent:
    """
    A node of the cube graph.

    Dimension and Measure nodes carry the owning cube's display name in
    ``parent``. ``fields`` is always empty.
    """

    custom_id: str
    name: str
    type: ComponentType
    workspace: str = DEFAULT_WORKSPACE
    parent: Optional[str] = None
    fields: List[Any] = field(default_factory=list)
    description: Optional[str] = None

    def __hash__(self):
        return hash(self.custom_id)

    def __eq__(self, other):
        if not isinstance(other, GraphComponent):
            return False
        return self.custom_id == other.custom_id

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape expected by the sync API"""
        payload: Dict[str, Any] = {
            "customId": self.custom_id,
            "workspace": self.workspace,
            "name": self.name,
            "type": self.type.value,
            "fields": list(self.fields),
        }
        if self.parent is not None:
            payload["parent"] = self.parent
        if self.description is not None:
            payload["description"] = self.description
        return payload


@dataclass
class GraphReference:
    """An edge of the cube graph."""

    custom_id: str
    source: str
    target: str
    type: ReferenceType

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape expected by the sync API"""
        return {
            "customId": self.custom_id,
            "source": self.source,
            "target": self.target,
            "type": self.type.value,
        }


@dataclass
class CubeGraph:
    """
    Complete dependency graph for a metadata model.

    Components are ordered Cube, Dimension, Measure, Table.
    """

    components: List[GraphComponent] = field(default_factory=list)
    references: List[GraphReference] = field(default_factory=list)

    def get_component(self, custom_id: str) -> Optional[GraphComponent]:
        """Find a component by its custom id"""
        for component in self.components:
            if component.custom_id == custom_id:
                return component
        return None

    def components_of_type(self, component_type: Union[str, ComponentType]) -> List[GraphComponent]:
        """Get all components of the given type"""
        component_type = ComponentType(component_type)
        return [c for c in self.components if c.type == component_type]

    def references_of_type(self, reference_type: Union[str, ReferenceType]) -> List[GraphReference]:
        """Get all references of the given type"""
        reference_type = ReferenceType(reference_type)
        return [r for r in self.references if r.type == reference_type]

    def get_references_from(self, source: str) -> List[GraphReference]:
        """Get all references originating from a node id"""
        return [r for r in self.references if r.source == source]

    def get_references_to(self, target: str) -> List[GraphReference]:
        """Get all references pointing to a node id"""
        return [r for r in self.references if r.target == target]

    def to_payload(self) -> Dict[str, Any]:
        """Serialize the whole graph for the sync API"""
        return {
            "components": [c.to_payload() for c in self.components],
            "references": [r.to_payload() for r in self.references],
        }


__all__ = [
    "DEFAULT_WORKSPACE",
    # Errors
    "MetadataModelError",
    "SqlParseError",
    # Graph
    "ComponentType",
    "ReferenceType",
    "GraphComponent",
    "GraphReference",
    "CubeGraph",
]
