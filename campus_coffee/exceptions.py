"""
Domain exceptions

Each pipeline step fails with exactly one of these. None of them know
about HTTP; see errors.py for the status mapping.
"""

from typing import Iterable


class CampusCoffeeError(Exception):
    """Base class for all domain failures"""


class PosNotFoundException(CampusCoffeeError):
    """No POS exists with the requested id"""

    def __init__(self, pos_id: int):
        super().__init__(f"POS with ID {pos_id} does not exist.")
        self.pos_id = pos_id


class DuplicatePosNameException(CampusCoffeeError):
    """Another POS already uses this name"""

    def __init__(self, name: str):
        super().__init__(f"POS with name '{name}' already exists.")
        self.name = name


class OsmNodeNotFoundException(CampusCoffeeError):
    """The OSM node is absent upstream (404, empty body or no <node> element)"""

    def __init__(self, osm_node_id: int):
        super().__init__(f"OSM node with id {osm_node_id} was not found")
        self.osm_node_id = osm_node_id


class OsmNodeMissingFieldsException(CampusCoffeeError):
    """The OSM node exists but lacks tags required to build a POS"""

    def __init__(self, osm_node_id: int, missing_fields: Iterable[str]):
        self.osm_node_id = osm_node_id
        self.missing_fields = frozenset(missing_fields)
        super().__init__(
            f"OSM node {osm_node_id} is missing required fields: "
            f"{', '.join(sorted(self.missing_fields))}"
        )


class OsmNodeParseException(CampusCoffeeError):
    """The upstream response could not be read as an OSM node document"""

    def __init__(self, osm_node_id: int, cause: Exception):
        super().__init__(f"Failed to parse OSM XML for node {osm_node_id}: {cause}")
        self.osm_node_id = osm_node_id
        self.cause = cause


class OsmUpstreamUnavailableException(CampusCoffeeError):
    """The OSM API could not be reached or answered with an error"""

    def __init__(self, osm_node_id: int, cause: Exception):
        super().__init__(f"Error calling OSM API for node {osm_node_id}: {cause}")
        self.osm_node_id = osm_node_id
        self.cause = cause
