# src/agealchemy/core/graph_edge.py
from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Any, ClassVar, Dict, Optional, Union

from agealchemy.core.escaping import EdgeDirection, edge as edge_pattern
from agealchemy.core.graph_vertex import AGTYPE_SQL


VertexId = Union[int, str]


class GraphEdge(BaseModel):
    """
    An edge as returned by AGE, or built locally before it is created.

    `start_id` and `end_id` identify the endpoint vertices. AGE reports them
    as integer graph ids; locally built edges may use any identifier.
    """

    sql_type: ClassVar[str] = AGTYPE_SQL

    id: Optional[int] = Field(default=None, description="AGE graph id")
    label: str = Field(..., min_length=1, description="Edge label")
    start_id: VertexId = Field(..., description="Source vertex id")
    end_id: VertexId = Field(..., description="Target vertex id")
    properties: Dict[str, Any] = Field(
        default_factory=dict,
        description="Edge properties"
    )

    model_config = ConfigDict(
        validate_assignment=True,
        json_schema_extra={
            "example": {
                "id": 1125899906842625,
                "label": "KNOWS",
                "start_id": 844424930131969,
                "end_id": 844424930131970,
                "properties": {"since": 2020}
            }
        }
    )

    @field_validator('label')
    @classmethod
    def validate_label(cls, v):
        """Ensure label is not empty after stripping."""
        if not v or not v.strip():
            raise ValueError("Edge label cannot be empty")
        return v.strip()

    @field_validator('properties', mode='before')
    @classmethod
    def validate_properties(cls, v):
        """Validate properties dictionary."""
        if v is None:
            return {}
        if isinstance(v, dict) and not all(isinstance(k, str) for k in v.keys()):
            raise ValueError("All property keys must be strings")
        return v

    @classmethod
    def create(
        cls,
        label: str,
        start_id: VertexId,
        end_id: VertexId,
        properties: Optional[Dict[str, Any]] = None
    ) -> "GraphEdge":
        """
        Create an edge value object that has not been stored yet.

        Args:
            label: Edge label
            start_id: Source vertex id
            end_id: Target vertex id
            properties: Edge properties

        Returns:
            New GraphEdge
        """
        return cls(label=label, start_id=start_id, end_id=end_id, properties=properties or {})

    def reverse(self) -> "GraphEdge":
        """
        Create the reverse edge.

        Returns:
            New GraphEdge with swapped endpoints and no graph id
        """
        return GraphEdge(
            label=self.label,
            start_id=self.end_id,
            end_id=self.start_id,
            properties=self.properties.copy(),
        )

    def get_property(self, key: str, default: Any = None) -> Any:
        """Get a specific property value."""
        return self.properties.get(key, default)

    @property
    def property_count(self) -> int:
        """Get number of properties."""
        return len(self.properties)

    @property
    def is_self_loop(self) -> bool:
        """Check if edge is a self-loop."""
        return self.start_id == self.end_id

    def to_pattern(
        self,
        variable: str = "r",
        direction: Union[EdgeDirection, str] = EdgeDirection.RIGHT
    ) -> str:
        """Render this edge as a Cypher edge pattern."""
        return edge_pattern(variable, self.label, self.properties or None, direction)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with a `_type` tag."""
        return {**self.model_dump(), "_type": "edge"}
