# src/agealchemy/core/graph_path.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Any, ClassVar, Dict, Iterable, List, Optional

from agealchemy.core.graph_edge import GraphEdge
from agealchemy.core.graph_vertex import GraphVertex, AGTYPE_SQL


class GraphPath(BaseModel):
    """
    An ordered sequence of vertices and the edges between them.

    AGE returns paths as one alternating list `[v0, e0, v1, e1, v2]`;
    `from_elements` splits such a list into the two sequences.
    """

    sql_type: ClassVar[str] = AGTYPE_SQL

    vertices: List[GraphVertex] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)

    model_config = ConfigDict(validate_assignment=True)

    @model_validator(mode='after')
    def validate_shape(self):
        """A non-empty path has exactly one more vertex than it has edges."""
        if self.vertices and self.edges and len(self.vertices) != len(self.edges) + 1:
            raise ValueError(
                f"Path with {len(self.edges)} edges needs {len(self.edges) + 1} vertices, "
                f"got {len(self.vertices)}"
            )
        return self

    @classmethod
    def create(
        cls,
        vertices: Optional[List[GraphVertex]] = None,
        edges: Optional[List[GraphEdge]] = None
    ) -> "GraphPath":
        """Create a path from vertex and edge lists."""
        return cls(vertices=vertices or [], edges=edges or [])

    @classmethod
    def from_elements(cls, elements: Iterable[Any]) -> "GraphPath":
        """
        Build a path from an alternating vertex/edge sequence.

        Args:
            elements: GraphVertex/GraphEdge instances or their AGE dict form

        Returns:
            GraphPath
        """
        vertices: List[GraphVertex] = []
        edges: List[GraphEdge] = []
        for element in elements:
            if isinstance(element, GraphVertex):
                vertices.append(element)
            elif isinstance(element, GraphEdge):
                edges.append(element)
            elif isinstance(element, dict) and "start_id" in element:
                edges.append(GraphEdge.model_validate(element))
            elif isinstance(element, dict):
                vertices.append(GraphVertex.model_validate(element))
        return cls(vertices=vertices, edges=edges)

    @property
    def length(self) -> int:
        """Number of hops (edges) in the path."""
        return len(self.edges)

    @property
    def start(self) -> Optional[GraphVertex]:
        return self.vertices[0] if self.vertices else None

    @property
    def end(self) -> Optional[GraphVertex]:
        return self.vertices[-1] if self.vertices else None

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with a `_type` tag."""
        return {
            "vertices": [v.to_dict() for v in self.vertices],
            "edges": [e.to_dict() for e in self.edges],
            "_type": "path",
        }
