"""
POS service

Business operations on Points of Sale, including the OSM import flow:

  1. Fetch the node document from the OSM API
  2. Parse it into an OsmNode
  3. Map/validate it into a POS candidate
  4. Reject it if a POS with the same name exists
  5. Persist it as a new POS

Nothing is written unless every step before the save succeeds.
"""

from typing import List, Optional

from loguru import logger

from .config import AppConfig, get_config
from .exceptions import DuplicatePosNameException, PosNotFoundException
from .models import Pos
from .osm import OsmApiClient, OsmNodeMapper, OsmNodeParser
from .repository import PosRepository


class PosService:
    """
    Usage:
        service = PosService(InMemoryPosRepository())
        pos = service.import_from_osm_node(5589879349)
    """

    def __init__(
        self,
        repository: PosRepository,
        osm_client: Optional[OsmApiClient] = None,
        config: Optional[AppConfig] = None,
    ):
        self.config = config or get_config()
        self.repository = repository
        self.osm_client = osm_client or OsmApiClient(self.config.osm)
        self.parser = OsmNodeParser()
        self.mapper = OsmNodeMapper(self.config.imports)

    def clear(self) -> None:
        logger.info("Clearing all POS")
        self.repository.delete_all()

    def get_all(self) -> List[Pos]:
        return self.repository.find_all()

    def get_by_id(self, pos_id: int) -> Pos:
        pos = self.repository.find_by_id(pos_id)
        if pos is None:
            raise PosNotFoundException(pos_id)
        return pos

    def upsert(self, pos: Pos) -> Pos:
        """Create a POS (no id) or update an existing one"""
        if pos.id is None:
            logger.info(f"Creating POS '{pos.name}'")
        else:
            logger.info(f"Updating POS {pos.id}")
        return self.repository.upsert(pos)

    def import_from_osm_node(self, osm_node_id: int) -> Pos:
        """
        Import a POS from an OpenStreetMap node

        Args:
            osm_node_id: OSM node id, non-negative

        Returns:
            The newly persisted POS

        Raises:
            ValueError: invalid node id
            OsmNodeNotFoundException: node does not exist upstream
            OsmUpstreamUnavailableException: OSM API unreachable or failing
            OsmNodeParseException: upstream returned an unreadable document
            OsmNodeMissingFieldsException: node lacks required tags
            DuplicatePosNameException: a POS with the same name exists
        """
        if isinstance(osm_node_id, bool) or not isinstance(osm_node_id, int):
            raise ValueError(f"OSM node id must be an integer, got {osm_node_id!r}")
        if osm_node_id < 0:
            raise ValueError(f"OSM node id must not be negative, got {osm_node_id}")

        logger.info(f"Importing POS from OSM node {osm_node_id}")

        raw = self.osm_client.fetch_node(osm_node_id)
        node = self.parser.parse(raw, osm_node_id)
        candidate = self.mapper.map(node)

        if self.repository.find_by_name(candidate.name) is not None:
            raise DuplicatePosNameException(candidate.name)

        # The repository's unique-name check still guards against a concurrent import
        pos = self.upsert(candidate.to_pos())
        logger.info(f"Imported OSM node {osm_node_id} as POS {pos.id} ('{pos.name}')")
        return pos
