"""
OSM API client

Fetches a single node document from the OpenStreetMap API.
No retries and no caching: every call is one fresh GET.
"""

from typing import Optional

import requests
from loguru import logger

from ..config import OsmApiConfig, get_config
from ..exceptions import OsmNodeNotFoundException, OsmUpstreamUnavailableException

# 410 Gone is what the API answers for deleted nodes
NOT_FOUND_STATUSES = (404, 410)


class OsmApiClient:
    """Client for the OSM node endpoint"""

    def __init__(self, config: Optional[OsmApiConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or get_config().osm
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.config.user_agent})
        self.timeout = (self.config.connect_timeout_s, self.config.read_timeout_s)

    def node_url(self, osm_node_id: int) -> str:
        """Build the request URL for a node id"""
        return self.config.node_url_template.format(id=osm_node_id)

    def fetch_node(self, osm_node_id: int) -> str:
        """
        Fetch the raw XML body for an OSM node

        Args:
            osm_node_id: OSM node id

        Returns:
            Response body as text

        Raises:
            OsmNodeNotFoundException: upstream answered 404/410 or an empty body
            OsmUpstreamUnavailableException: any other transport or HTTP failure
        """
        url = self.node_url(osm_node_id)
        logger.debug(f"GET {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"OSM API request for node {osm_node_id} failed: {e}")
            raise OsmUpstreamUnavailableException(osm_node_id, e) from e

        if response.status_code in NOT_FOUND_STATUSES:
            logger.info(f"OSM node {osm_node_id} not found upstream (HTTP {response.status_code})")
            raise OsmNodeNotFoundException(osm_node_id)

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logger.error(f"OSM API failed for node {osm_node_id}: HTTP {response.status_code}")
            raise OsmUpstreamUnavailableException(osm_node_id, e) from e

        body = response.text
        if body is None or not body.strip():
            # Some proxies answer 200 with an empty body instead of 404
            logger.warning(f"OSM API returned an empty body for node {osm_node_id}")
            raise OsmNodeNotFoundException(osm_node_id)

        return body
