"""
OpenStreetMap import module

Separate components for:
- API client: node API communication
- Models: OsmNode
- Parser: XML response parsing
- Mapper: OsmNode -> POS candidate, with required tag validation
"""

from .models import OsmNode
from .api_client import OsmApiClient
from .parser import OsmNodeParser
from .mapper import OsmNodeMapper, PosCandidate

__all__ = [
    "OsmNode",
    "OsmApiClient",
    "OsmNodeParser",
    "OsmNodeMapper",
    "PosCandidate",
]
