"""Pytest fixtures for CampusCoffee tests."""
import pytest
import requests

from campus_coffee.config import AppConfig, ImportConfig, OsmApiConfig
from campus_coffee.osm import OsmApiClient
from campus_coffee.repository import InMemoryPosRepository
from campus_coffee.service import PosService

NODE_ID = 123456789

CAFE_XML = '''<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="openstreetmap-cgimap">
  <node id="123456789" visible="true" version="3" lat="49.4" lon="8.7">
    <tag k="amenity" v="cafe"/>
    <tag k="name" v="Café Central"/>
    <tag k="addr:street" v="Hauptstr."/>
    <tag k="addr:housenumber" v="1"/>
  </node>
</osm>'''

NO_HOUSENUMBER_XML = '''<osm>
  <node id="123456789" lat="49.4" lon="8.7">
    <tag k="name" v="Café Central"/>
    <tag k="addr:street" v="Hauptstr."/>
  </node>
</osm>'''


def make_response(status_code=200, body="", url="https://osm.test/node"):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    response.url = url
    response.reason = "Test"
    return response


class FakeSession(requests.Session):
    """Session whose GETs return queued responses (or raise queued errors)."""

    def __init__(self, *results):
        super().__init__()
        self.results = list(results)
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def app_config():
    return AppConfig(
        osm=OsmApiConfig(
            node_url_template="https://osm.test/api/0.6/node/{id}",
            user_agent="CampusCoffee-Tests/1.0",
        ),
        imports=ImportConfig(),
    )


@pytest.fixture
def repository():
    return InMemoryPosRepository()


@pytest.fixture
def make_service(app_config, repository):
    """Factory: service whose OSM client answers with the given results."""
    def _make(*results):
        session = FakeSession(*results)
        client = OsmApiClient(app_config.osm, session=session)
        return PosService(repository, osm_client=client, config=app_config)
    return _make
