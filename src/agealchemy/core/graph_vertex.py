# src/agealchemy/core/graph_vertex.py
from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Any, ClassVar, Dict, Optional

from agealchemy.core.escaping import vertex as vertex_pattern


AGTYPE_SQL = "ag_catalog.agtype"


class GraphVertex(BaseModel):
    """
    A vertex as returned by AGE, or built locally before it is created.

    Uses Pydantic for validation and serialization. `id` is AGE's graphid and
    stays None until the vertex comes back from the database.
    """

    sql_type: ClassVar[str] = AGTYPE_SQL

    id: Optional[int] = Field(default=None, description="AGE graph id")
    label: str = Field(..., min_length=1, description="Vertex label")
    properties: Dict[str, Any] = Field(
        default_factory=dict,
        description="Vertex properties"
    )

    model_config = ConfigDict(
        validate_assignment=True,
        json_schema_extra={
            "example": {
                "id": 844424930131969,
                "label": "Person",
                "properties": {"name": "Alice", "age": 30}
            }
        }
    )

    @field_validator('label')
    @classmethod
    def validate_label(cls, v):
        """Ensure label is not empty after stripping."""
        if not v or not v.strip():
            raise ValueError("Label cannot be empty")
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
    def create(cls, label: str, properties: Optional[Dict[str, Any]] = None) -> "GraphVertex":
        """
        Create a vertex value object that has not been stored yet.

        Args:
            label: Vertex label
            properties: Vertex properties

        Returns:
            New GraphVertex
        """
        return cls(label=label, properties=properties or {})

    def get_property(self, key: str, default: Any = None) -> Any:
        """Get a specific property value."""
        return self.properties.get(key, default)

    def has_property(self, key: str) -> bool:
        """Check if property exists."""
        return key in self.properties

    @property
    def property_count(self) -> int:
        """Get number of properties."""
        return len(self.properties)

    def to_pattern(self, variable: str = "n") -> str:
        """Render this vertex as a Cypher vertex pattern."""
        return vertex_pattern(variable, self.label, self.properties or None)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with a `_type` tag."""
        return {**self.model_dump(), "_type": "vertex"}
