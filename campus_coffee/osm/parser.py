"""
OSM response parser

Parses the XML document returned by the node API into an OsmNode
"""

import math
import xml.etree.ElementTree as ET
from typing import Dict, Optional

from loguru import logger

from .models import OsmNode
from ..exceptions import OsmNodeNotFoundException, OsmNodeParseException


class OsmNodeParser:
    """Parses node API responses"""

    @staticmethod
    def parse(raw: str, osm_node_id: int) -> OsmNode:
        """
        Parse a node document

        Expects <osm><node id lat lon><tag k v/>...</node></osm>. Unknown
        attributes and elements are ignored.

        Args:
            raw: XML response body
            osm_node_id: node id the document was requested for

        Returns:
            Parsed OsmNode

        Raises:
            OsmNodeNotFoundException: document is well-formed but has no <node>
            OsmNodeParseException: document is malformed or numeric attributes are invalid
        """
        try:
            root = ET.fromstring(raw)
        except ET.ParseError as e:
            raise OsmNodeParseException(osm_node_id, e) from e

        element = root if root.tag == "node" else root.find(".//node")
        if element is None:
            raise OsmNodeNotFoundException(osm_node_id)

        try:
            node_id = int(element.attrib["id"])
            lat = OsmNodeParser._parse_coordinate(element.get("lat"), 90.0)
            lon = OsmNodeParser._parse_coordinate(element.get("lon"), 180.0)
        except (KeyError, ValueError) as e:
            raise OsmNodeParseException(osm_node_id, e) from e

        if node_id != osm_node_id:
            logger.warning(f"Requested OSM node {osm_node_id} but document contains node {node_id}")

        tags: Dict[str, str] = {}
        for tag in element.findall("tag"):
            key = tag.get("k")
            if key is None:
                continue
            # Later duplicates overwrite earlier ones
            tags[key] = tag.get("v", "")

        return OsmNode(node_id=node_id, latitude=lat, longitude=lon, tags=tags)

    @staticmethod
    def _parse_coordinate(value: Optional[str], limit: float) -> Optional[float]:
        """Absent -> None; present but not a finite number within +-limit -> ValueError"""
        if value is None:
            return None
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"coordinate is not a finite number: {value!r}")
        if abs(number) > limit:
            raise ValueError(f"coordinate out of range [-{limit}, {limit}]: {value!r}")
        return number
