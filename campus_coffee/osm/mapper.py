"""
OSM node to POS mapping

Validates that a node carries the tags a POS needs and copies them over
"""

from dataclasses import dataclass
from typing import List, Optional

from .models import OsmNode
from ..config import ImportConfig, get_config
from ..exceptions import OsmNodeMissingFieldsException
from ..models import Pos, PosType

# Tag keys the POS fields are read from
NAME_TAG = "name"
STREET_TAG = "addr:street"
HOUSE_NUMBER_TAG = "addr:housenumber"
POSTCODE_TAG = "addr:postcode"
CITY_TAG = "addr:city"
DESCRIPTION_TAG = "description"

# Pseudo field names reported when coordinates are required but absent
LATITUDE_FIELD = "lat"
LONGITUDE_FIELD = "lon"

AMENITY_TYPES = {
    "cafe": PosType.CAFE,
    "vending_machine": PosType.VENDING_MACHINE,
    "restaurant": PosType.CAFETERIA,
    "fast_food": PosType.CAFETERIA,
    "canteen": PosType.CAFETERIA,
    "food_court": PosType.CAFETERIA,
}
SHOP_TYPES = {
    "bakery": PosType.BAKERY,
    "pastry": PosType.BAKERY,
    "coffee": PosType.CAFE,
}


@dataclass(frozen=True)
class PosCandidate:
    """A POS built from an OSM node, not yet persisted"""
    osm_node_id: int
    name: str
    street: str
    house_number: str
    type: PosType = PosType.CAFE
    description: str = ""
    postal_code: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_pos(self) -> Pos:
        """New Pos without id; the repository assigns one"""
        return Pos(
            name=self.name,
            description=self.description,
            type=self.type,
            street=self.street,
            house_number=self.house_number,
            postal_code=self.postal_code,
            city=self.city,
            latitude=self.latitude,
            longitude=self.longitude,
        )


class OsmNodeMapper:
    """Maps OsmNode -> PosCandidate"""

    def __init__(self, config: Optional[ImportConfig] = None):
        self.config = config or get_config().imports

    def missing_fields(self, node: OsmNode) -> List[str]:
        """All required keys that are absent or blank, in configured order"""
        missing = [
            key for key in self.config.required_tags
            if not _has_value(node.tags.get(key))
        ]
        if self.config.require_coordinates:
            if node.latitude is None:
                missing.append(LATITUDE_FIELD)
            if node.longitude is None:
                missing.append(LONGITUDE_FIELD)
        return missing

    def map(self, node: OsmNode) -> PosCandidate:
        """
        Build a POS candidate from an OSM node

        Raises:
            OsmNodeMissingFieldsException: with every missing required key
        """
        missing = self.missing_fields(node)
        if missing:
            raise OsmNodeMissingFieldsException(node.node_id, missing)

        tags = node.tags
        return PosCandidate(
            osm_node_id=node.node_id,
            name=tags.get(NAME_TAG, ""),
            street=tags.get(STREET_TAG, ""),
            house_number=tags.get(HOUSE_NUMBER_TAG, ""),
            type=self.pos_type(node),
            description=tags.get(DESCRIPTION_TAG, ""),
            postal_code=_optional(tags.get(POSTCODE_TAG)),
            city=_optional(tags.get(CITY_TAG)),
            latitude=node.latitude,
            longitude=node.longitude,
        )

    @staticmethod
    def pos_type(node: OsmNode) -> PosType:
        """Derive the POS type from amenity/shop tags, defaulting to CAFE"""
        tags = node.tags
        if tags.get("amenity") in AMENITY_TYPES:
            return AMENITY_TYPES[tags["amenity"]]
        if tags.get("shop") in SHOP_TYPES:
            return SHOP_TYPES[tags["shop"]]
        return PosType.CAFE


def _has_value(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


def _optional(value: Optional[str]) -> Optional[str]:
    return value if _has_value(value) else None
