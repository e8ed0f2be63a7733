"""
OSM data models

Data class for representing a single OSM node
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class OsmNode:
    """Represents an OSM node (point) as returned by the node API"""
    node_id: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.node_id is None:
            raise ValueError("node_id is required")
        # Read-only view over a private copy
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    def has_coordinates(self) -> bool:
        """True if both latitude and longitude are known"""
        return self.latitude is not None and self.longitude is not None
